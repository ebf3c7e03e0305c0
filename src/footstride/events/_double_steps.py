from typing import NamedTuple, Optional

import numpy as np


class _FootCursor(NamedTuple):
    """Position of the scan within the peaks of one foot.

    ``current`` is the position of the peak that is currently considered and ``upcoming`` the position of the next
    peak that was not removed.
    All positions between the two were removed.
    """

    current: int
    upcoming: int


class _MergeState(NamedTuple):
    right: _FootCursor
    left: _FootCursor


def _advance(cursor: _FootCursor) -> _FootCursor:
    return _FootCursor(cursor.upcoming, cursor.upcoming + 1)


def _resolve_double(cursor: _FootCursor, magnitudes: np.ndarray) -> tuple[_FootCursor, int]:
    """Remove the smaller one of the current and the upcoming peak of one foot.

    Returns the new cursor and the position of the removed peak.
    """
    if magnitudes[cursor.current] <= magnitudes[cursor.upcoming]:
        return _advance(cursor), cursor.current
    return _FootCursor(cursor.current, cursor.upcoming + 1), cursor.upcoming


def remove_double_steps(
    right_idx: np.ndarray, right_magnitudes: np.ndarray, left_idx: np.ndarray, left_magnitudes: np.ndarray
) -> tuple[np.ndarray, np.ndarray]:
    """Remove peaks so that the peaks of the right and the left foot strictly alternate.

    Both sequences are scanned chronologically with one cursor per foot.
    Whenever the next two peaks in temporal order belong to the same foot (i.e. there is no peak of the other foot in
    between), the peak with the smaller magnitude is removed and the scan continues at the same position without
    advancing the cursor of the other foot.
    If both peaks have the same magnitude, the earlier one is removed.

    The main scan stops, once one of the feet has fewer than two unscanned peaks left.
    Afterwards, a trailing run of peaks of the same foot (i.e. peaks after the last peak of the other foot) is reduced
    to a single peak using the same rule.

    This is a greedy local repair and not a global optimum.
    It is deterministic and idempotent, i.e. applying it to already alternating peaks does not change anything.

    Parameters
    ----------
    right_idx
        The sorted sample indices of the peaks of the right foot.
    right_magnitudes
        The magnitude of each right peak (same length as ``right_idx``).
    left_idx
        The sorted sample indices of the peaks of the left foot.
    left_magnitudes
        The magnitude of each left peak (same length as ``left_idx``).

    Returns
    -------
    right_idx
        The remaining right peaks as new array.
    left_idx
        The remaining left peaks as new array.

    """
    right_idx = np.asarray(right_idx)
    left_idx = np.asarray(left_idx)
    right_magnitudes = np.asarray(right_magnitudes)
    left_magnitudes = np.asarray(left_magnitudes)
    if len(right_idx) != len(right_magnitudes) or len(left_idx) != len(left_magnitudes):
        raise ValueError("Each peak index requires exactly one magnitude value.")

    if len(right_idx) == 0 or len(left_idx) == 0:
        return right_idx.copy(), left_idx.copy()

    n_right, n_left = len(right_idx), len(left_idx)
    state = _MergeState(_FootCursor(0, 1), _FootCursor(0, 1))
    removed: dict[str, list[int]] = {"right": [], "left": []}

    while True:
        right_first = right_idx[state.right.current] <= left_idx[state.left.current]
        right_has_next = state.right.upcoming < n_right
        left_has_next = state.left.upcoming < n_left

        foot: Optional[str] = None
        is_double = False
        if right_has_next and left_has_next:
            # Main scan
            foot = "right" if right_first else "left"
            if right_first:
                is_double = right_idx[state.right.upcoming] < left_idx[state.left.current]
            else:
                is_double = left_idx[state.left.upcoming] < right_idx[state.right.current]
        elif right_has_next:
            # Tail: only right peaks remain after the current position.
            foot = "right"
            is_double = not right_first or right_idx[state.right.upcoming] < left_idx[state.left.current]
        elif left_has_next:
            foot = "left"
            is_double = right_first or left_idx[state.left.upcoming] < right_idx[state.right.current]

        if foot is None:
            break

        cursor = getattr(state, foot)
        if is_double:
            magnitudes = right_magnitudes if foot == "right" else left_magnitudes
            cursor, removed_position = _resolve_double(cursor, magnitudes)
            removed[foot].append(removed_position)
        else:
            cursor = _advance(cursor)
        state = state._replace(**{foot: cursor})

    keep_right = np.ones(n_right, dtype=bool)
    keep_right[removed["right"]] = False
    keep_left = np.ones(n_left, dtype=bool)
    keep_left[removed["left"]] = False
    return right_idx[keep_right], left_idx[keep_left]
