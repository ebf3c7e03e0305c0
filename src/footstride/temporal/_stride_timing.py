from collections.abc import Sequence
from typing import NamedTuple, Optional, Union

import numpy as np
import pandas as pd

from footstride.consts import HS_STRIDE_COLS, HS_TO_STRIDE_COLS


class StrideTiming(NamedTuple):
    """The timing of a normalized stride."""

    #: The number of samples of each stride after normalization.
    new_length: int
    #: The number of samples of each phase of the normalized stride.
    phase_lengths: pd.Series
    #: The sample index of each gait event within the normalized stride.
    normalized_event_indices: pd.Series


def _event_columns(stride_list: pd.DataFrame) -> tuple[str, ...]:
    for cols in (HS_TO_STRIDE_COLS, HS_STRIDE_COLS):
        if tuple(stride_list.columns) == cols:
            return cols
    raise ValueError(
        f"The stride list must have exactly the columns {list(HS_STRIDE_COLS)} or {list(HS_TO_STRIDE_COLS)}. "
        f"Got {list(stride_list.columns)}."
    )


def _round_to_even(value: float) -> int:
    """Round down to the next even integer, or up if the floored value is odd."""
    floored = int(np.floor(value))
    if floored % 2 == 0:
        return floored
    return floored + 1


def stride_list_as_array(stride_list: pd.DataFrame) -> np.ndarray:
    """Convert a stride list into an array with one row per gait event and one column per stride.

    This is the layout expected by tools that segment and resample the raw data stride by stride.

    Parameters
    ----------
    stride_list
        A stride list with the columns ``rhs, lhs, end`` or ``rhs, lto, lhs, rto, end``.

    Returns
    -------
    np.ndarray
        An int64 array with the shape ``(3, n_strides)`` or ``(5, n_strides)``.

    """
    cols = _event_columns(stride_list)
    return stride_list[list(cols)].to_numpy(dtype="int64").T


def get_stride_timing(
    stride_list: pd.DataFrame,
    new_length: Optional[int] = None,
    event_timings_percent: Optional[Union[float, Sequence[float]]] = None,
) -> StrideTiming:
    """Calculate where the gait events are located within strides that are resampled to a common length.

    The default length of the normalized strides is the average stride length (``end - rhs + 1``) rounded to an
    even number of samples (the floored value, or the next even number if the floored value is odd).
    By default, the length of each phase within the normalized stride is proportional to its mean duration across all
    strides.
    Alternatively, the position of the events can be provided in percent of the stride.

    Parameters
    ----------
    stride_list
        A stride list with the columns ``rhs, lhs, end`` or ``rhs, lto, lhs, rto, end``.
    new_length
        The number of samples of each normalized stride.
        If None, the average stride length (rounded to an even number) is used.
    event_timings_percent
        The target position of the events in percent of the stride.
        For a stride list with 3 columns, this is a single value (the position of ``lhs``).
        For a stride list with 5 columns, these are three values (the position of ``lto``, ``lhs`` and ``rto``).
        If None, the positions are derived from the mean phase durations of the stride list.

    Returns
    -------
    StrideTiming
        The length of the normalized strides, the length of each phase and the index of each event within the
        normalized stride.

    """
    cols = _event_columns(stride_list)
    if len(stride_list) == 0:
        raise ValueError("Can not calculate the stride timing of an empty stride list.")

    avg_length = _round_to_even(float(np.mean(stride_list["end"] - stride_list["rhs"] + 1)))
    if new_length is None:
        new_length = avg_length
    scale = new_length / avg_length

    if cols == HS_STRIDE_COLS:
        if event_timings_percent is not None:
            timings = np.atleast_1d(np.asarray(event_timings_percent, dtype="float64"))
            if len(timings) != 1:
                raise ValueError("Exactly one event timing (the position of lhs) is required for 3 event strides.")
            first_step = int(np.round(timings[0] / 100 * new_length))
        else:
            first_step = int(np.round(np.mean(stride_list["lhs"] - stride_list["rhs"]) * scale))
        phase_lengths = pd.Series({"first_step": first_step, "second_step": new_length - first_step})
        event_indices = [0, first_step, new_length - 1]
    else:
        if event_timings_percent is not None:
            timings = np.atleast_1d(np.asarray(event_timings_percent, dtype="float64"))
            if len(timings) != 3:
                raise ValueError(
                    "Exactly three event timings (the position of lto, lhs and rto) are required for 5 event strides."
                )
            initial_double = int(np.round(timings[0] / 100 * new_length))
            left_swing = int(np.round((timings[1] - timings[0]) / 100 * new_length))
            terminal_double = int(np.round((timings[2] - timings[1]) / 100 * new_length))
        else:
            initial_double = int(np.round(np.mean(stride_list["lto"] - stride_list["rhs"] + 1) * scale))
            left_swing = int(np.round(np.mean(stride_list["lhs"] - stride_list["lto"] - 1) * scale))
            terminal_double = int(np.round(np.mean(stride_list["rto"] - stride_list["lhs"] + 1) * scale))
        phase_lengths = pd.Series(
            {
                "initial_double_support": initial_double,
                "left_swing": left_swing,
                "terminal_double_support": terminal_double,
                "right_swing": new_length - (initial_double + left_swing + terminal_double),
            }
        )
        event_indices = [
            0,
            initial_double - 1,
            initial_double + left_swing,
            initial_double + left_swing + terminal_double - 1,
            new_length - 1,
        ]

    return StrideTiming(
        new_length=int(new_length),
        phase_lengths=phase_lengths.astype("int64"),
        normalized_event_indices=pd.Series(event_indices, index=list(cols), dtype="int64"),
    )
