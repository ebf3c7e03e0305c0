from typing import Literal

import numpy as np


def find_zero_crossings(signal: np.ndarray, mode: Literal["up", "down", "all"] = "all") -> np.ndarray:
    """Find the samples at which a signal changes its sign.

    For each zero crossing, the sample directly before or directly after the sign change is returned, depending on
    which of the two has the smaller absolute value (i.e. is closer to zero).
    If both are equally close, the earlier sample is returned.

    Parameters
    ----------
    signal
        A 1d numpy array of the signal values.
    mode
        The type of zero crossings to detect.
        "up" only detects negative-to-positive crossings, "down" only positive-to-negative crossings and "all" both.
        In "all" mode, crossings that are directly followed by an opposite crossing one sample later are considered
        single sample glitches and both crossings are removed.

    Returns
    -------
    np.ndarray
        An int64 array with the sorted sample indices of the zero crossings.
        The array is empty, if no zero crossing was found.

    Raises
    ------
    ValueError
        If the mode is not one of the specified options.

    Examples
    --------
    >>> signal = np.array([2.0, 0.5, -1.0, -2.0, 1.5, 3.0])
    >>> find_zero_crossings(signal, mode="down")
    array([1])
    >>> find_zero_crossings(signal, mode="up")
    array([4])

    Notes
    -----
    Samples with a value larger than 0 are considered positive, all other samples (including samples that are exactly
    0) are considered negative.
    This means a signal that touches zero and turns back to positive values produces a down and an up crossing.

    """
    if mode not in ("up", "down", "all"):
        raise ValueError(f"Invalid mode '{mode}'. Choose 'up', 'down', or 'all'.")

    signal = np.atleast_1d(np.asarray(signal, dtype="float64").squeeze())
    if signal.ndim != 1:
        raise ValueError("Zero crossings can only be calculated for 1d signals.")
    if len(signal) < 2:
        return np.array([], dtype="int64")

    positive = signal > 0
    # Index of the last sample before the sign change
    before = np.flatnonzero(positive[:-1] != positive[1:])

    if mode == "up":
        before = before[~positive[before]]
    elif mode == "down":
        before = before[positive[before]]
    else:
        glitch = np.diff(before) == 1
        drop = np.zeros(len(before), dtype=bool)
        drop[:-1] |= glitch
        drop[1:] |= glitch
        before = before[~drop]

    after = before + 1
    closer_after = np.abs(signal[after]) < np.abs(signal[before])
    return np.where(closer_after, after, before).astype("int64")
