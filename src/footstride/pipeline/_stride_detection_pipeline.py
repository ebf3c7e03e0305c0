from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Final, Optional

import pandas as pd
from tpcp import Algorithm, cf
from tpcp.misc import set_defaults
from typing_extensions import Self

from footstride._docutils import make_filldoc
from footstride.consts import FEET
from footstride.data_transform import ButterworthFilter, chain_transformers
from footstride.data_transform.base import BaseFilter
from footstride.events import HsGyMin, HsGyZero, HsNetAcc, ToGyMin, ToGyZero, ToNetAcc
from footstride.events.base import BaseHsDetector, BaseToDetector
from footstride.exceptions import ConfigurationError
from footstride.pipeline._config import (
    DEFAULT_CONFIG,
    BadStrideMode,
    EventMethod,
    EventSet,
    parse_enum,
    parse_number,
)
from footstride.stride_selection import BadStrideFilter
from footstride.temporal import calculate_cadence
from footstride.utils.conversions import as_samples
from footstride.utils.dtypes import ImuLike, as_sensor_df

_HS_DETECTORS: Final = MappingProxyType(
    {EventMethod.GY_ZERO: HsGyZero, EventMethod.GY_MIN: HsGyMin, EventMethod.NET_ACC: HsNetAcc}
)
_TO_DETECTORS: Final = MappingProxyType(
    {EventMethod.GY_ZERO: ToGyZero, EventMethod.GY_MIN: ToGyMin, EventMethod.NET_ACC: ToNetAcc}
)
_BAD_STRIDE_MODES: Final = MappingProxyType(
    {
        BadStrideMode.STRIDE_LENGTH: "stride_length",
        BadStrideMode.GAIT_EVENTS: "gait_events",
        BadStrideMode.NONE: "none",
    }
)


stride_detection_docfiller = make_filldoc(
    {
        "parameters": """
    pre_filter
        The filter applied to all channels of both feet before any detection.
        It should be zero-phase, as any phase shift directly shifts the detected events.
    hs_detection
        The heel strike detector.
    to_detection
        The toe off detector.
        If None, only heel strikes are detected.
    bad_stride_filter
        The filter used to remove outlier strides.
    edge_buffer_s
        Strides with any event within this duration of the start or the end of the recording are removed.
    """,
        "other_parameters": """
    right_imu
        The IMU data of the right foot passed to the ``detect`` method.
    left_imu
        The IMU data of the left foot passed to the ``detect`` method.
    sampling_rate_hz
        The sampling rate of the IMU data in Hz passed to the ``detect`` method.
    """,
        "results": """
    stride_list_
        The final stride list with the columns ``rhs, lhs, end`` or ``rhs, lto, lhs, rto, end`` (index ``stride_id``).
        The stride ids are the ids assigned during heel strike detection, so the index has gaps, where strides were
        removed.
    cadence_per_stride_
        The cadence of each stride in ``stride_list_`` in steps per minute.
    n_removed_strides_
        The total number of strides that were removed by any of the steps (failed detection, outlier filter and edge
        buffer).
    n_failed_strides_
        The number of strides that were removed, because a gait event could not be detected.
    n_trimmed_strides_
        The number of strides that were removed, because they are too close to the start or end of the recording.
    filtered_imu_
        The low-pass filtered IMU data of both feet as dictionary with the keys ``"right"`` and ``"left"``.
    hs_detection_
        The heel strike detector instance after detection.
    to_detection_
        The toe off detector instance after detection or None, if no toe offs were detected.
    bad_stride_filter_
        The bad stride filter instance after filtering.
    """,
        "step_by_step": """
    The pipeline runs the following steps in a fixed order:

    1. Both IMU signals are low-pass filtered (``pre_filter``).
    2. The heel strikes of both feet are detected (``hs_detection``).
       This defines the strides as ``[rhs, lhs, end]``, where ``end`` is the sample before the next right heel strike.
    3. If ``to_detection`` is provided, the toe offs of both feet are detected within each stride.
       The strides are then defined as ``[rhs, lto, lhs, rto, end]``.
    4. Strides with outlier durations are removed (``bad_stride_filter``).
    5. Strides with any event closer than ``edge_buffer_s`` to the start or the end of the recording are removed.
    6. The cadence of each remaining stride is calculated as ``60 / mean(step durations)``.
    """,
    },
    doc_summary="Decorator to fill common parts of the docstring for the stride detection pipelines.",
)


@stride_detection_docfiller
class GenericStrideDetectionPipeline(Algorithm):
    """Detect strides and their gait events from the IMU data of both feet.

    This class has no default algorithms.
    Use :class:`StrideDetectionPipeline` for a pipeline with sensible defaults or :meth:`from_config` to create a
    pipeline from a string based configuration.

    Parameters
    ----------
    %(parameters)s

    Other Parameters
    ----------------
    %(other_parameters)s

    Attributes
    ----------
    %(results)s

    Notes
    -----
    %(step_by_step)s

    """

    _action_methods = ("detect",)

    pre_filter: BaseFilter
    hs_detection: BaseHsDetector
    to_detection: Optional[BaseToDetector]
    bad_stride_filter: BadStrideFilter
    edge_buffer_s: float

    right_imu: ImuLike
    left_imu: ImuLike
    sampling_rate_hz: float

    stride_list_: pd.DataFrame
    cadence_per_stride_: pd.Series
    n_failed_strides_: int
    n_trimmed_strides_: int
    filtered_imu_: dict[str, pd.DataFrame]
    hs_detection_: BaseHsDetector
    to_detection_: Optional[BaseToDetector]
    bad_stride_filter_: BadStrideFilter

    class PredefinedParameters:
        hs_only: Final = MappingProxyType(
            {
                "pre_filter": ButterworthFilter(order=4, cutoff_freq_hz=20),
                "hs_detection": HsGyZero(),
                "to_detection": None,
                "bad_stride_filter": BadStrideFilter(),
                "edge_buffer_s": 0.0,
            }
        )
        hs_and_to: Final = MappingProxyType(
            {
                "pre_filter": ButterworthFilter(order=4, cutoff_freq_hz=20),
                "hs_detection": HsGyMin(),
                "to_detection": ToGyMin(),
                "bad_stride_filter": BadStrideFilter(mode="gait_events"),
                "edge_buffer_s": 0.0,
            }
        )

    def __init__(
        self,
        *,
        pre_filter: BaseFilter,
        hs_detection: BaseHsDetector,
        to_detection: Optional[BaseToDetector],
        bad_stride_filter: BadStrideFilter,
        edge_buffer_s: float,
    ) -> None:
        self.pre_filter = pre_filter
        self.hs_detection = hs_detection
        self.to_detection = to_detection
        self.bad_stride_filter = bad_stride_filter
        self.edge_buffer_s = edge_buffer_s

    @property
    def n_removed_strides_(self) -> int:
        return self.n_failed_strides_ + self.bad_stride_filter_.n_removed_strides_ + self.n_trimmed_strides_

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "StrideDetectionPipeline":
        """Create a pipeline from a string based configuration.

        Missing keys are filled with their default values.

        Parameters
        ----------
        config
            A mapping with any of the following keys:

            - ``hs_method``: The heel strike detection strategy (``"GYzero"``, ``"GYmin"`` or ``"NetAcc"``).
            - ``to_method``: The toe off detection strategy (``"GYzero"``, ``"GYmin"`` or ``"NetAcc"``).
              Required, if ``events`` is ``"HS&TO"``.
            - ``events``: Either ``"HS"`` or ``"HS&TO"``.
            - ``min_peak_height``: The minimal height of midswing peaks in deg/s.
            - ``min_peak_prominence``: The minimal prominence of midswing peaks in deg/s.
            - ``buffer_s``: The edge buffer in seconds.
            - ``bad_stride_cutoff_pct``: The allowed deviation of stride durations from their mean in percent.
            - ``bad_stride_mode``: ``"strideLength"``, ``"gaitEvents"`` or ``"none"``.

        Returns
        -------
        StrideDetectionPipeline
            A new pipeline instance.

        Raises
        ------
        ConfigurationError
            If the configuration contains unknown keys or invalid values or if ``"HS&TO"`` is requested without a
            ``to_method``.

        """
        unknown_keys = set(config) - set(DEFAULT_CONFIG)
        if unknown_keys:
            raise ConfigurationError(
                f"Unknown configuration keys: {sorted(unknown_keys)}. Valid keys are {sorted(DEFAULT_CONFIG)}."
            )
        config = {**DEFAULT_CONFIG, **config}

        hs_method = parse_enum(EventMethod, config["hs_method"], "hs_method")
        events = parse_enum(EventSet, config["events"], "events")
        bad_stride_mode = parse_enum(BadStrideMode, config["bad_stride_mode"], "bad_stride_mode")
        peak_paras = {
            "min_peak_height_dps": parse_number(config["min_peak_height"], "min_peak_height"),
            "min_peak_prominence_dps": parse_number(config["min_peak_prominence"], "min_peak_prominence"),
        }

        to_detection = None
        if events == EventSet.HS_TO:
            if config["to_method"] is None:
                raise ConfigurationError("Toe off detection ('events'='HS&TO') requires a 'to_method'.")
            to_detection = _TO_DETECTORS[parse_enum(EventMethod, config["to_method"], "to_method")]()
        elif config["to_method"] is not None:
            # Still validated, so that typos are not silently ignored
            parse_enum(EventMethod, config["to_method"], "to_method")

        return StrideDetectionPipeline(
            hs_detection=_HS_DETECTORS[hs_method](**peak_paras),
            to_detection=to_detection,
            bad_stride_filter=BadStrideFilter(
                max_deviation_percent=parse_number(config["bad_stride_cutoff_pct"], "bad_stride_cutoff_pct"),
                mode=_BAD_STRIDE_MODES[bad_stride_mode],
            ),
            edge_buffer_s=parse_number(config["buffer_s"], "buffer_s"),
        )

    def detect(self, right_imu: ImuLike, left_imu: ImuLike, *, sampling_rate_hz: float) -> Self:
        """Detect all strides in the recording.

        Parameters
        ----------
        right_imu
            The IMU data of the right foot.
            Either a dataframe with the columns ``acc_x, acc_y, acc_z, gyr_x, gyr_y, gyr_z`` or a ``n x 6`` array with
            the same column order.
            Acceleration is expected in m/s^2 and angular velocity in deg/s in the X-forward, Y-right, Z-down frame.
        left_imu
            The IMU data of the left foot with the same format and length as ``right_imu``.
        sampling_rate_hz
            The sampling rate of the IMU data in Hz.

        Returns
        -------
        self
            The pipeline instance with all result attributes set.

        Raises
        ------
        ConfigurationError
            If one of the nested algorithms has the wrong type.
        DataQualityError
            If fewer than two midswing peaks are detected for one of the feet.

        """
        self._validate_algorithms()

        self.right_imu = right_imu
        self.left_imu = left_imu
        self.sampling_rate_hz = sampling_rate_hz

        data = {"right": as_sensor_df(right_imu, name="right_imu"), "left": as_sensor_df(left_imu, name="left_imu")}
        n_samples = len(data["right"])
        if len(data["left"]) != n_samples:
            raise ValueError(
                "The data of both feet must have the same length. "
                f"Got {n_samples} samples for the right and {len(data['left'])} for the left foot."
            )

        self.filtered_imu_ = {
            foot: chain_transformers(data[foot], [("pre_filter", self.pre_filter)], sampling_rate_hz=sampling_rate_hz)
            for foot in FEET
        }

        self.hs_detection_ = self.hs_detection.clone().detect(
            self.filtered_imu_["right"], self.filtered_imu_["left"], sampling_rate_hz=sampling_rate_hz
        )
        stride_list = self.hs_detection_.hs_list_
        n_failed_strides = self.hs_detection_.n_failed_strides_

        self.to_detection_ = None
        if self.to_detection is not None:
            self.to_detection_ = self.to_detection.clone().detect(
                self.filtered_imu_["right"],
                self.filtered_imu_["left"],
                hs_list=stride_list,
                midswing_peaks=self.hs_detection_.midswing_peaks_,
                sampling_rate_hz=sampling_rate_hz,
            )
            stride_list = self.to_detection_.stride_list_
            n_failed_strides += self.to_detection_.n_failed_strides_
        self.n_failed_strides_ = n_failed_strides

        self.bad_stride_filter_ = self.bad_stride_filter.clone().filter(stride_list)
        stride_list = self.bad_stride_filter_.filtered_stride_list_

        buffer = as_samples(self.edge_buffer_s, sampling_rate_hz)
        in_bounds = ((stride_list >= buffer) & (stride_list <= n_samples - buffer)).all(axis=1)
        self.n_trimmed_strides_ = int((~in_bounds).sum())
        self.stride_list_ = stride_list[in_bounds]

        self.cadence_per_stride_ = calculate_cadence(self.stride_list_, sampling_rate_hz)

        return self

    def _validate_algorithms(self) -> None:
        for name, value, expected_type in [
            ("pre_filter", self.pre_filter, BaseFilter),
            ("hs_detection", self.hs_detection, BaseHsDetector),
            ("bad_stride_filter", self.bad_stride_filter, BadStrideFilter),
        ]:
            if not isinstance(value, expected_type):
                raise ConfigurationError(
                    f"'{name}' must be an instance of {expected_type.__name__}. Got {type(value).__name__}."
                )
        if self.to_detection is not None and not isinstance(self.to_detection, BaseToDetector):
            raise ConfigurationError(
                f"'to_detection' must be an instance of BaseToDetector or None. Got {type(self.to_detection).__name__}."
            )
        if self.edge_buffer_s < 0:
            raise ConfigurationError(f"'edge_buffer_s' must be non-negative. Got {self.edge_buffer_s}.")


@stride_detection_docfiller
class StrideDetectionPipeline(GenericStrideDetectionPipeline):
    """Stride detection pipeline with default algorithms for heel strike only detection.

    By default, heel strikes are detected with :class:`~footstride.events.HsGyZero` after a 4th order, 20 Hz
    zero-phase Butterworth filter, strides deviating by more than 50 %% from the mean stride duration are removed and
    no edge buffer is applied.
    For heel strike and toe off detection, use the ``hs_and_to`` predefined parameters (see Examples) or
    :meth:`from_config`.

    Parameters
    ----------
    %(parameters)s

    Other Parameters
    ----------------
    %(other_parameters)s

    Attributes
    ----------
    %(results)s

    Notes
    -----
    %(step_by_step)s

    Examples
    --------
    >>> pipe = StrideDetectionPipeline(**StrideDetectionPipeline.PredefinedParameters.hs_and_to)
    >>> pipe = StrideDetectionPipeline.from_config({"events": "HS&TO", "hs_method": "GYmin", "to_method": "GYmin"})

    """

    @set_defaults(
        **{k: cf(v) for k, v in GenericStrideDetectionPipeline.PredefinedParameters.hs_only.items()},
    )
    def __init__(
        self,
        *,
        pre_filter: BaseFilter,
        hs_detection: BaseHsDetector,
        to_detection: Optional[BaseToDetector],
        bad_stride_filter: BadStrideFilter,
        edge_buffer_s: float,
    ) -> None:
        super().__init__(
            pre_filter=pre_filter,
            hs_detection=hs_detection,
            to_detection=to_detection,
            bad_stride_filter=bad_stride_filter,
            edge_buffer_s=edge_buffer_s,
        )
