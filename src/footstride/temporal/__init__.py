"""Temporal gait parameters calculated from stride lists."""

from footstride.temporal._cadence import calculate_cadence, calculate_half_cycle_durations
from footstride.temporal._stride_timing import StrideTiming, get_stride_timing, stride_list_as_array

__all__ = [
    "StrideTiming",
    "calculate_cadence",
    "calculate_half_cycle_durations",
    "get_stride_timing",
    "stride_list_as_array",
]
