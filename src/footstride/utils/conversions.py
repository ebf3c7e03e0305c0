"""Conversion from seconds to samples."""

from typing import Union, overload

import numpy as np


@overload
def as_samples(sec_value: Union[int, float], sampling_rate_hz: float) -> int: ...


@overload
def as_samples(sec_value: np.ndarray, sampling_rate_hz: float) -> np.ndarray: ...


def as_samples(sec_value, sampling_rate_hz):
    """Convert seconds to (rounded) samples.

    Parameters
    ----------
    sec_value
        The value in seconds.
        Either a scalar or a numpy array.
    sampling_rate_hz
        The sampling rate in Hertz.

    Returns
    -------
    converted_samples
        The value in samples.
        Scalars are returned as python ``int``, arrays as ``int64`` arrays.

    """
    if isinstance(sec_value, np.ndarray):
        return np.round(sec_value * sampling_rate_hz).astype("int64")
    return int(np.round(sec_value * sampling_rate_hz))


__all__ = ["as_samples"]
