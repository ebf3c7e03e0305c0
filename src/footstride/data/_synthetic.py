from typing import Literal, NamedTuple, Optional

import numpy as np
import pandas as pd

from footstride.consts import HS_STRIDE_COLS, HS_TO_STRIDE_COLS, SF_SENSOR_COLS, STRIDE_ID_COL
from footstride.utils.conversions import as_samples

#: Gravity in m/s^2
GRAV_MS2 = 9.81


class SyntheticWalking(NamedTuple):
    """Synthetic IMU data of both feet together with the true gait events."""

    right_imu: pd.DataFrame
    left_imu: pd.DataFrame
    sampling_rate_hz: float
    right_hs: np.ndarray
    left_hs: np.ndarray
    right_to: np.ndarray
    left_to: np.ndarray

    def reference_stride_list(self, events: Literal["HS", "HS&TO"] = "HS") -> pd.DataFrame:
        """Build the stride list a perfect detection would return.

        Stride ``i`` starts at the ``i``-th right heel strike and ends one sample before the next right heel strike.
        """
        n_strides = len(self.right_hs) - 1
        strides = {
            "rhs": self.right_hs[:n_strides],
            "lto": self.left_to[:n_strides],
            "lhs": self.left_hs[:n_strides],
            "rto": self.right_to[1 : n_strides + 1],
            "end": self.right_hs[1:] - 1,
        }
        cols = HS_STRIDE_COLS if events == "HS" else HS_TO_STRIDE_COLS
        return pd.DataFrame({c: strides[c] for c in cols}).astype("int64").rename_axis(index=STRIDE_ID_COL)


def _gaussian(n_samples: int, centers: np.ndarray, sigma_samples: float) -> np.ndarray:
    samples = np.arange(n_samples)[:, None]
    return np.exp(-0.5 * ((samples - centers[None, :]) / sigma_samples) ** 2).sum(axis=1)


def _foot_imu(
    n_samples: int,
    to: np.ndarray,
    midswing: np.ndarray,
    hs: np.ndarray,
    stride_samples: int,
    noise_std: float,
    rng: np.random.Generator,
) -> pd.DataFrame:
    gyr_y = (
        300 * _gaussian(n_samples, midswing, 0.06 * stride_samples)
        - 100 * _gaussian(n_samples, hs, 0.03 * stride_samples)
        - 250 * _gaussian(n_samples, to, 0.04 * stride_samples)
    )
    # Impact at heel strike and push-off at toe off
    acc_z = GRAV_MS2 - 6 * _gaussian(n_samples, hs - 3, 2) + 8 * _gaussian(n_samples, to + 2, 2)

    data = np.zeros((n_samples, len(SF_SENSOR_COLS)))
    data[:, SF_SENSOR_COLS.index("acc_z")] = acc_z
    data[:, SF_SENSOR_COLS.index("gyr_y")] = gyr_y
    if noise_std > 0:
        data += rng.normal(0, noise_std, data.shape)
    return pd.DataFrame(data, columns=SF_SENSOR_COLS)


def make_synthetic_walking(
    n_strides: int = 20,
    *,
    stride_duration_s: float = 1.1,
    standing_s: float = 1.5,
    sampling_rate_hz: float = 100.0,
    noise_std: float = 0.0,
    random_state: Optional[int] = None,
) -> SyntheticWalking:
    """Create a perfectly periodic walking recording of both feet.

    Each foot performs ``n_strides`` gait cycles.
    Within a cycle, the pitch angular velocity (``gyr_y``) shows a negative dip at toe off, a large positive midswing
    peak 20 % of a stride later and a sharp negative dip at heel strike 40 % of a stride after the toe off.
    The vertical acceleration shows a short drop 3 samples before each heel strike and a short peak 2 samples after
    each toe off.
    The left foot lags half a stride behind the right foot.
    The recording starts and ends with a standing period.

    This is not meant to be a realistic gait model, but provides data with exactly known event positions for examples
    and tests.

    Parameters
    ----------
    n_strides
        The number of gait cycles per foot.
        The stride list of a perfect detection contains ``n_strides - 1`` strides.
    stride_duration_s
        The duration of a gait cycle.
    standing_s
        The duration of the standing period at the start and the end of the recording.
    sampling_rate_hz
        The sampling rate of the generated data.
    noise_std
        The standard deviation of white noise added to all channels.
    random_state
        The seed of the noise generator.

    Returns
    -------
    SyntheticWalking
        The IMU data of both feet and the sample indices of all heel strikes and toe offs.

    """
    if n_strides < 2:
        raise ValueError("At least two strides are required.")

    stride_samples = as_samples(stride_duration_s, sampling_rate_hz)
    lead_samples = as_samples(standing_s, sampling_rate_hz)
    n_samples = 2 * lead_samples + (n_strides + 1) * stride_samples
    rng = np.random.default_rng(random_state)

    right_to = lead_samples + np.arange(n_strides) * stride_samples
    left_to = right_to + stride_samples // 2
    events = {}
    for foot, to in [("right", right_to), ("left", left_to)]:
        events[foot] = {
            "to": to,
            "midswing": to + round(0.2 * stride_samples),
            "hs": to + round(0.4 * stride_samples),
        }

    return SyntheticWalking(
        right_imu=_foot_imu(n_samples, **events["right"], stride_samples=stride_samples, noise_std=noise_std, rng=rng),
        left_imu=_foot_imu(n_samples, **events["left"], stride_samples=stride_samples, noise_std=noise_std, rng=rng),
        sampling_rate_hz=sampling_rate_hz,
        right_hs=events["right"]["hs"].astype("int64"),
        left_hs=events["left"]["hs"].astype("int64"),
        right_to=events["right"]["to"].astype("int64"),
        left_to=events["left"]["to"].astype("int64"),
    )
