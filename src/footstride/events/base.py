"""Base classes and shared helpers for heel strike and toe off detectors."""

import warnings
from typing import NamedTuple, Optional

import numpy as np
import pandas as pd
from tpcp import Algorithm, cf
from typing_extensions import Self

from footstride._docutils import make_filldoc
from footstride.consts import HS_STRIDE_COLS, HS_TO_STRIDE_COLS, PITCH_GYR_COL, SF_ACC_COLS, STRIDE_ID_COL, Foot
from footstride.data_transform import Detrend, MovingAverageFilter, chain_transformers
from footstride.data_transform.base import BaseFilter
from footstride.events._double_steps import remove_double_steps
from footstride.events._peaks import find_midswing_peaks
from footstride.exceptions import DataQualityError
from footstride.utils.dtypes import ImuLike, as_sensor_df


class EventResult(NamedTuple):
    """The result of the search for a single gait event.

    A result is either valid (``index`` is set) or invalid (``failure_reason`` is set).
    """

    index: Optional[int] = None
    failure_reason: Optional[str] = None

    @classmethod
    def valid(cls, index: int) -> "EventResult":
        return cls(index=int(index))

    @classmethod
    def invalid(cls, reason: str) -> "EventResult":
        return cls(failure_reason=reason)

    @property
    def is_valid(self) -> bool:
        return self.index is not None


class FootSignals(NamedTuple):
    """The signals of one foot that are used to search for gait events."""

    #: Detrended pitch angular velocity in deg/s
    pitch: np.ndarray
    #: Euclidean norm of the linear acceleration in m/s^2
    acc_norm: np.ndarray


def prepare_foot_signals(data: pd.DataFrame) -> FootSignals:
    """Extract the detrended pitch angular velocity and the acceleration norm from the IMU data of one foot."""
    pitch = Detrend().transform(data[PITCH_GYR_COL].to_numpy()).transformed_data_
    acc_norm = np.linalg.norm(data[SF_ACC_COLS].to_numpy(), axis=1)
    return FootSignals(pitch=pitch, acc_norm=acc_norm)


def _failures_as_df(failures: list[tuple[int, str, str, str]]) -> pd.DataFrame:
    return (
        pd.DataFrame.from_records(failures, columns=[STRIDE_ID_COL, "foot", "event", "reason"])
        .astype({STRIDE_ID_COL: "int64"})
        .set_index(STRIDE_ID_COL)
    )


def _stride_list_from_records(records: dict[int, dict[str, int]], columns: tuple[str, ...]) -> pd.DataFrame:
    stride_list = pd.DataFrame.from_dict(records, orient="index", columns=list(columns))
    return stride_list.astype("int64").rename_axis(index=STRIDE_ID_COL)


def _is_strictly_increasing(values: list[int]) -> bool:
    return bool(np.all(np.diff(values) > 0))


def _warn_failures(failures: pd.DataFrame, n_strides: int, event_name: str) -> None:
    n_failed = failures.index.nunique()
    if n_failed > 0:
        warnings.warn(
            f"{n_failed} of {n_strides} strides were removed, because no valid {event_name} could be found. "
            "Check the `detection_failures_` attribute for details.",
            stacklevel=3,
        )


base_hs_docfiller = make_filldoc(
    {
        "hs_common_paras": """
    min_peak_height_dps
        The minimal height of a midswing peak in the smoothed pitch angular velocity in deg/s.
    min_peak_prominence_dps
        The minimal prominence of a midswing peak in the smoothed pitch angular velocity in deg/s.
    peak_smoothing
        The filter applied to the detrended pitch angular velocity before the midswing peaks are searched.
        The heel strike search itself always uses the unsmoothed signal.
    max_search_s
        The maximal time after a midswing peak in which a heel strike is searched, if no other boundary is available.
    """,
        "other_parameters": """
    right_data
        The IMU data of the right foot passed to the ``detect`` method.
    left_data
        The IMU data of the left foot passed to the ``detect`` method.
    sampling_rate_hz
        The sampling rate of the IMU data in Hz passed to the ``detect`` method.
    """,
        "hs_results": """
    hs_list_
        A dataframe with one row per valid stride (index ``stride_id``) and the columns ``rhs``, ``lhs`` and ``end``.
        ``rhs`` and ``lhs`` are the sample indices of the right and the left heel strike and ``end`` is the sample
        before the next right heel strike.
        Within each row the values are strictly increasing.
    midswing_peaks_
        A dataframe with the same index as ``hs_list_`` and the columns ``r_peak``, ``l_peak`` and ``next_r_peak``
        containing the midswing peaks the heel strikes of the stride were searched from.
    right_peaks_
        All midswing peaks of the right foot that remained after removing double steps.
    left_peaks_
        All midswing peaks of the left foot that remained after removing double steps.
    detection_failures_
        A dataframe with one row per failed event search (index ``stride_id``) and the columns ``foot``, ``event``
        and ``reason``.
        All strides listed here were removed from ``hs_list_``.
    n_failed_strides_
        The number of strides that were removed, because the heel strike detection failed.
    """,
        "detect_short": """
    Detect the heel strikes of both feet
    """,
        "detect_para": """
    right_data
        The IMU data of the right foot.
        Either a dataframe with the columns ``acc_x, acc_y, acc_z, gyr_x, gyr_y, gyr_z`` or a ``n x 6`` array with the
        same column order.
        Acceleration is expected in m/s^2 and angular velocity in deg/s in the X-forward, Y-right, Z-down frame.
    left_data
        The IMU data of the left foot with the same format and length as ``right_data``.
    sampling_rate_hz
        The sampling rate of the IMU data in Hz.
    """,
        "detect_return": """
    Returns
    -------
    self
        The instance of the class with the ``hs_list_`` attribute set to the detected strides.

    Raises
    ------
    DataQualityError
        If fewer than two midswing peaks are found for one of the feet.
    """,
    },
    doc_summary="Decorator to fill common parts of the docstring for subclasses of :class:`BaseHsDetector`.",
)


@base_hs_docfiller
class BaseHsDetector(Algorithm):
    """Base class for heel strike detectors.

    All heel strike detectors share the same processing steps and only differ in how a single heel strike is located
    after its midswing peak:

    1. The pitch angular velocity (``gyr_y``) of both feet is detrended and smoothed (``peak_smoothing``).
    2. Midswing peaks are detected in the smoothed signal of each foot.
    3. Double steps (two consecutive peaks of the same foot) are removed, so that the peaks alternate between the
       feet.
    4. If the first peak of the recording is smaller than a third of the mean magnitude of all detected peaks
       (including the ones removed as double steps), it is considered an artifact and removed together with the first
       peak of the other foot.
    5. Leading left peaks are removed so that the first stride starts with the right foot.
    6. For each stride, the right heel strike, the left heel strike and the next right heel strike are searched
       after their respective midswing peaks using the ``_find_hs`` method of the subclass.
       If any of these searches fails, only this stride is marked invalid.
    7. If the left heel strike precedes the right heel strike in the first stride with two valid heel strikes, the left
       heel strikes are shifted by one stride and the last stride is dropped.
    8. Invalid strides and strides with heel strikes that are not strictly increasing are removed after all strides
       were processed.

    Subclasses should only implement ``_find_hs``.

    Parameters
    ----------
    %(hs_common_paras)s

    Other Parameters
    ----------------
    %(other_parameters)s

    Attributes
    ----------
    %(hs_results)s

    """

    _action_methods = ("detect",)

    _START_PEAK_MIN_RATIO = 1 / 3

    min_peak_height_dps: float
    min_peak_prominence_dps: float
    peak_smoothing: BaseFilter
    max_search_s: float

    right_data: pd.DataFrame
    left_data: pd.DataFrame
    sampling_rate_hz: float

    hs_list_: pd.DataFrame
    midswing_peaks_: pd.DataFrame
    right_peaks_: np.ndarray
    left_peaks_: np.ndarray
    detection_failures_: pd.DataFrame

    def __init__(
        self,
        *,
        min_peak_height_dps: float = 50.0,
        min_peak_prominence_dps: float = 100.0,
        peak_smoothing: BaseFilter = cf(MovingAverageFilter(window_size_s=0.05)),
        max_search_s: float = 1.0,
    ) -> None:
        self.min_peak_height_dps = min_peak_height_dps
        self.min_peak_prominence_dps = min_peak_prominence_dps
        self.peak_smoothing = peak_smoothing
        self.max_search_s = max_search_s

    @property
    def n_failed_strides_(self) -> int:
        return int(self.detection_failures_.index.nunique())

    @base_hs_docfiller
    def detect(self, right_data: ImuLike, left_data: ImuLike, *, sampling_rate_hz: float) -> Self:
        """%(detect_short)s.

        Parameters
        ----------
        %(detect_para)s

        %(detect_return)s

        """
        self.right_data = right_data
        self.left_data = left_data
        self.sampling_rate_hz = sampling_rate_hz

        data = {"right": as_sensor_df(right_data, name="right_data"), "left": as_sensor_df(left_data, name="left_data")}
        if len(data["right"]) != len(data["left"]):
            raise ValueError(
                "The data of both feet must have the same length. "
                f"Got {len(data['right'])} samples for the right and {len(data['left'])} for the left foot."
            )

        signals = {foot: prepare_foot_signals(foot_data) for foot, foot_data in data.items()}
        smoothed = {
            foot: chain_transformers(
                foot_signals.pitch, [("peak_smoothing", self.peak_smoothing)], sampling_rate_hz=sampling_rate_hz
            )
            for foot, foot_signals in signals.items()
        }

        peaks = {}
        for foot, smoothed_pitch in smoothed.items():
            peaks[foot] = find_midswing_peaks(
                smoothed_pitch, min_height=self.min_peak_height_dps, min_prominence=self.min_peak_prominence_dps
            )
            self._check_enough_peaks(peaks[foot], foot, "detected")
        # Mean over all detected peaks, including the ones removed as double steps
        mean_magnitude = float(np.mean(np.concatenate([smoothed[foot][peaks[foot]] for foot in peaks])))

        right_peaks, left_peaks = remove_double_steps(
            peaks["right"], smoothed["right"][peaks["right"]], peaks["left"], smoothed["left"][peaks["left"]]
        )
        right_peaks, left_peaks = self._remove_start_artifact(
            right_peaks, smoothed["right"][right_peaks], left_peaks, smoothed["left"][left_peaks], mean_magnitude
        )
        self._check_enough_peaks(right_peaks, "right", "left after removing double steps and start artifacts")
        self._check_enough_peaks(left_peaks, "left", "left after removing double steps and start artifacts")
        if left_peaks[0] < right_peaks[0]:
            left_peaks = left_peaks[1:]
        self.right_peaks_ = right_peaks
        self.left_peaks_ = left_peaks

        n_strides = min(len(right_peaks) - 1, len(left_peaks))
        right_hs = [
            self._find_hs(signals["right"], p, self._next_peak_after(p, left_peaks), sampling_rate_hz)
            for p in right_peaks[: n_strides + 1]
        ]
        left_hs = [
            self._find_hs(signals["left"], p, self._next_peak_after(p, right_peaks), sampling_rate_hz)
            for p in left_peaks[:n_strides]
        ]
        left_peaks_per_stride = left_peaks[:n_strides]

        first_valid = next((i for i in range(n_strides) if right_hs[i].is_valid and left_hs[i].is_valid), None)
        if first_valid is not None and left_hs[first_valid].index < right_hs[first_valid].index:
            left_hs = left_hs[1:]
            left_peaks_per_stride = left_peaks_per_stride[1:]
            n_strides -= 1

        records = {}
        stride_peaks = {}
        failures = []
        for stride_id in range(n_strides):
            events = {"rhs": right_hs[stride_id], "lhs": left_hs[stride_id], "next_rhs": right_hs[stride_id + 1]}
            stride_failures = [
                (stride_id, "left" if name == "lhs" else "right", name, result.failure_reason)
                for name, result in events.items()
                if not result.is_valid
            ]
            if not stride_failures:
                values = [events["rhs"].index, events["lhs"].index, events["next_rhs"].index - 1]
                if _is_strictly_increasing(values):
                    records[stride_id] = dict(zip(HS_STRIDE_COLS, values))
                    stride_peaks[stride_id] = {
                        "r_peak": right_peaks[stride_id],
                        "l_peak": left_peaks_per_stride[stride_id],
                        "next_r_peak": right_peaks[stride_id + 1],
                    }
                    continue
                stride_failures = [(stride_id, "both", "hs", f"Heel strikes are not strictly increasing: {values}")]
            failures.extend(stride_failures)

        self.hs_list_ = _stride_list_from_records(records, HS_STRIDE_COLS)
        self.midswing_peaks_ = (
            pd.DataFrame.from_dict(stride_peaks, orient="index", columns=["r_peak", "l_peak", "next_r_peak"])
            .astype("int64")
            .rename_axis(index=STRIDE_ID_COL)
        )
        self.detection_failures_ = _failures_as_df(failures)
        _warn_failures(self.detection_failures_, n_strides, "heel strike")

        return self

    def _check_enough_peaks(self, peaks: np.ndarray, foot: Foot, stage: str) -> None:
        if len(peaks) < 2:
            raise DataQualityError(
                f"Only {len(peaks)} midswing peak(s) {stage} for the {foot} foot. "
                "At least two are required to detect a stride. "
                f"Check the peak thresholds (min_peak_height_dps={self.min_peak_height_dps}, "
                f"min_peak_prominence_dps={self.min_peak_prominence_dps}) and the orientation of the sensor."
            )

    def _remove_start_artifact(
        self,
        right_peaks: np.ndarray,
        right_magnitudes: np.ndarray,
        left_peaks: np.ndarray,
        left_magnitudes: np.ndarray,
        mean_magnitude: float,
    ) -> tuple[np.ndarray, np.ndarray]:
        if len(right_peaks) == 0 or len(left_peaks) == 0:
            return right_peaks, left_peaks
        first_magnitude = right_magnitudes[0] if right_peaks[0] <= left_peaks[0] else left_magnitudes[0]
        if first_magnitude < self._START_PEAK_MIN_RATIO * mean_magnitude:
            return right_peaks[1:], left_peaks[1:]
        return right_peaks, left_peaks

    @staticmethod
    def _next_peak_after(peak: int, opposite_peaks: np.ndarray) -> Optional[int]:
        pos = np.searchsorted(opposite_peaks, peak, side="right")
        if pos >= len(opposite_peaks):
            return None
        return int(opposite_peaks[pos])

    def _search_end(self, peak: int, n_samples: int, sampling_rate_hz: float) -> int:
        """Last sample of the default search window after a midswing peak."""
        return int(min(peak + round(self.max_search_s * sampling_rate_hz), n_samples - 1))

    def _find_hs(
        self, signals: FootSignals, peak: int, opposite_next_peak: Optional[int], sampling_rate_hz: float
    ) -> EventResult:
        """Find the heel strike that follows a midswing peak.

        Parameters
        ----------
        signals
            The signals of the foot.
        peak
            The midswing peak of the foot.
        opposite_next_peak
            The first midswing peak of the other foot after ``peak`` or None, if there is none.
        sampling_rate_hz
            The sampling rate of the data.

        Returns
        -------
        EventResult
            The detected heel strike or an invalid result with the reason of the failure.

        """
        raise NotImplementedError()


base_to_docfiller = make_filldoc(
    {
        "other_parameters": """
    right_data
        The IMU data of the right foot passed to the ``detect`` method.
    left_data
        The IMU data of the left foot passed to the ``detect`` method.
    hs_list
        The heel strike stride list passed to the ``detect`` method.
    midswing_peaks
        The midswing peaks per stride passed to the ``detect`` method.
    sampling_rate_hz
        The sampling rate of the IMU data in Hz passed to the ``detect`` method.
    """,
        "to_results": """
    stride_list_
        A dataframe with one row per valid stride (index ``stride_id``) and the columns ``rhs``, ``lto``, ``lhs``,
        ``rto`` and ``end``.
        Within each row the values are strictly increasing.
    detection_failures_
        A dataframe with one row per failed event search (index ``stride_id``) and the columns ``foot``, ``event``
        and ``reason``.
        All strides listed here were removed from ``stride_list_``.
    n_failed_strides_
        The number of strides that were removed, because the toe off detection failed.
    """,
        "detect_short": """
    Detect the toe offs of both feet within the strides defined by the heel strikes
    """,
        "detect_para": """
    right_data
        The IMU data of the right foot.
        Either a dataframe with the columns ``acc_x, acc_y, acc_z, gyr_x, gyr_y, gyr_z`` or a ``n x 6`` array with the
        same column order.
    left_data
        The IMU data of the left foot with the same format and length as ``right_data``.
    hs_list
        The stride list with the columns ``rhs``, ``lhs`` and ``end`` as provided by the ``hs_list_`` attribute of a
        heel strike detector.
    midswing_peaks
        The midswing peaks of each stride with the columns ``l_peak`` and ``next_r_peak`` as provided by the
        ``midswing_peaks_`` attribute of a heel strike detector.
        The index must match the index of ``hs_list``.
    sampling_rate_hz
        The sampling rate of the IMU data in Hz.
    """,
        "detect_return": """
    Returns
    -------
    self
        The instance of the class with the ``stride_list_`` attribute set to the detected strides.
    """,
    },
    doc_summary="Decorator to fill common parts of the docstring for subclasses of :class:`BaseToDetector`.",
)


@base_to_docfiller
class BaseToDetector(Algorithm):
    """Base class for toe off detectors.

    The toe off of each foot is searched within its swing window:

    - the left toe off between the right heel strike and the left midswing peak
    - the right toe off between the left heel strike and the next right midswing peak

    Subclasses should only implement ``_find_to``.
    If the search of one of the toe offs fails or the resulting events are not strictly increasing, the stride is
    removed.

    Other Parameters
    ----------------
    %(other_parameters)s

    Attributes
    ----------
    %(to_results)s

    """

    _action_methods = ("detect",)

    right_data: pd.DataFrame
    left_data: pd.DataFrame
    hs_list: pd.DataFrame
    midswing_peaks: pd.DataFrame
    sampling_rate_hz: float

    stride_list_: pd.DataFrame
    detection_failures_: pd.DataFrame

    @property
    def n_failed_strides_(self) -> int:
        return int(self.detection_failures_.index.nunique())

    @base_to_docfiller
    def detect(
        self,
        right_data: ImuLike,
        left_data: ImuLike,
        *,
        hs_list: pd.DataFrame,
        midswing_peaks: pd.DataFrame,
        sampling_rate_hz: float,
    ) -> Self:
        """%(detect_short)s.

        Parameters
        ----------
        %(detect_para)s

        %(detect_return)s

        """
        self.right_data = right_data
        self.left_data = left_data
        self.hs_list = hs_list
        self.midswing_peaks = midswing_peaks
        self.sampling_rate_hz = sampling_rate_hz

        missing_cols = set(HS_STRIDE_COLS) - set(hs_list.columns)
        if missing_cols:
            raise ValueError(f"hs_list is missing the columns {sorted(missing_cols)}.")
        if not hs_list.index.equals(midswing_peaks.index):
            raise ValueError("The index of `midswing_peaks` must match the index of `hs_list`.")

        signals = {
            "right": prepare_foot_signals(as_sensor_df(right_data, name="right_data")),
            "left": prepare_foot_signals(as_sensor_df(left_data, name="left_data")),
        }

        records = {}
        failures = []
        for (stride_id, stride), (_, peaks) in zip(hs_list.iterrows(), midswing_peaks.iterrows()):
            events = {
                "lto": self._find_to(signals["left"], int(stride["rhs"]), int(peaks["l_peak"]), sampling_rate_hz),
                "rto": self._find_to(
                    signals["right"], int(stride["lhs"]), int(peaks["next_r_peak"]), sampling_rate_hz
                ),
            }
            stride_failures = [
                (stride_id, "left" if name == "lto" else "right", name, result.failure_reason)
                for name, result in events.items()
                if not result.is_valid
            ]
            if not stride_failures:
                values = [
                    int(stride["rhs"]),
                    events["lto"].index,
                    int(stride["lhs"]),
                    events["rto"].index,
                    int(stride["end"]),
                ]
                if _is_strictly_increasing(values):
                    records[stride_id] = dict(zip(HS_TO_STRIDE_COLS, values))
                    continue
                stride_failures = [(stride_id, "both", "to", f"Gait events are not strictly increasing: {values}")]
            failures.extend(stride_failures)

        self.stride_list_ = _stride_list_from_records(records, HS_TO_STRIDE_COLS)
        self.detection_failures_ = _failures_as_df(failures)
        _warn_failures(self.detection_failures_, len(hs_list), "toe off")

        return self

    def _find_to(self, signals: FootSignals, window_start: int, peak: int, sampling_rate_hz: float) -> EventResult:
        """Find the toe off of a foot within its swing window.

        Parameters
        ----------
        signals
            The signals of the foot.
        window_start
            The first sample of the search window (the last heel strike of the other foot).
        peak
            The midswing peak of the foot that ends the search window.
        sampling_rate_hz
            The sampling rate of the data.

        Returns
        -------
        EventResult
            The detected toe off or an invalid result with the reason of the failure.

        """
        raise NotImplementedError()


__all__ = [
    "BaseHsDetector",
    "BaseToDetector",
    "EventResult",
    "FootSignals",
    "base_hs_docfiller",
    "base_to_docfiller",
    "prepare_foot_signals",
]
