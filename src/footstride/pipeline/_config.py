"""String based configuration of the stride detection pipeline."""

from enum import Enum
from typing import Any, TypeVar

from footstride.exceptions import ConfigurationError

_EnumT = TypeVar("_EnumT", bound=Enum)


class EventMethod(str, Enum):
    """The strategies available for heel strike and toe off detection."""

    GY_ZERO = "GYzero"
    GY_MIN = "GYmin"
    NET_ACC = "NetAcc"


class EventSet(str, Enum):
    """The gait events that are detected."""

    HS = "HS"
    HS_TO = "HS&TO"


class BadStrideMode(str, Enum):
    """The durations checked to remove outlier strides."""

    STRIDE_LENGTH = "strideLength"
    GAIT_EVENTS = "gaitEvents"
    NONE = "none"


#: The values used for keys that are missing in a configuration
DEFAULT_CONFIG = {
    "hs_method": EventMethod.GY_ZERO.value,
    "to_method": None,
    "events": EventSet.HS.value,
    "min_peak_height": 50.0,
    "min_peak_prominence": 100.0,
    "buffer_s": 0.0,
    "bad_stride_cutoff_pct": 50.0,
    "bad_stride_mode": BadStrideMode.STRIDE_LENGTH.value,
}


def parse_enum(enum_cls: type[_EnumT], value: Any, key: str) -> _EnumT:
    """Convert a configuration value to the respective enum member.

    Raises
    ------
    ConfigurationError
        If the value is not a valid member of the enum.

    """
    try:
        return enum_cls(value)
    except ValueError as e:
        valid_values = [m.value for m in enum_cls]
        raise ConfigurationError(f"Invalid value {value!r} for '{key}'. Must be one of {valid_values}.") from e


def parse_number(value: Any, key: str, *, allow_zero: bool = True) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"'{key}' must be a number. Got {value!r}.")
    if value < 0 or (not allow_zero and value == 0):
        raise ConfigurationError(f"'{key}' must be {'non-negative' if allow_zero else 'positive'}. Got {value!r}.")
    return float(value)
