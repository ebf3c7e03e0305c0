"""Removal of implausible strides from detected stride lists."""

from footstride.stride_selection._bad_stride_filter import BadStrideFilter, BadStrideFilterMode

__all__ = ["BadStrideFilter", "BadStrideFilterMode"]
