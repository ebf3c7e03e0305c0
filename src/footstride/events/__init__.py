"""Algorithms to detect heel strikes and toe offs from the IMU data of both feet."""

from footstride.events._double_steps import remove_double_steps
from footstride.events._hs_detection import HsGyMin, HsGyZero, HsNetAcc
from footstride.events._peaks import find_midswing_peaks
from footstride.events._to_detection import ToGyMin, ToGyZero, ToNetAcc
from footstride.events._zero_crossings import find_zero_crossings

__all__ = [
    "HsGyMin",
    "HsGyZero",
    "HsNetAcc",
    "ToGyMin",
    "ToGyZero",
    "ToNetAcc",
    "find_midswing_peaks",
    "find_zero_crossings",
    "remove_double_steps",
]
