import pandas as pd

from footstride.consts import HS_STRIDE_COLS


def _check_hs_columns(stride_list: pd.DataFrame) -> None:
    missing_cols = set(HS_STRIDE_COLS) - set(stride_list.columns)
    if missing_cols:
        raise ValueError(f"The stride list is missing the columns {sorted(missing_cols)}.")


def calculate_half_cycle_durations(stride_list: pd.DataFrame, sampling_rate_hz: float) -> pd.DataFrame:
    """Calculate the duration of both steps of each stride in seconds.

    The first step lasts from the right to the left heel strike, the second step from the left heel strike to the next
    right heel strike (``end + 1``).

    Parameters
    ----------
    stride_list
        A stride list with at least the columns ``rhs``, ``lhs`` and ``end``.
    sampling_rate_hz
        The sampling rate the stride list indices refer to.

    Returns
    -------
    pd.DataFrame
        A dataframe with the same index as the stride list and the columns ``first_step_s`` and ``second_step_s``.

    """
    _check_hs_columns(stride_list)
    return pd.DataFrame(
        {
            "first_step_s": (stride_list["lhs"] - stride_list["rhs"]) / sampling_rate_hz,
            "second_step_s": (stride_list["end"] + 1 - stride_list["lhs"]) / sampling_rate_hz,
        },
        index=stride_list.index,
    )


def calculate_cadence(stride_list: pd.DataFrame, sampling_rate_hz: float) -> pd.Series:
    """Calculate the cadence of each stride in steps per minute.

    The cadence is ``60 / mean(step durations)``, where the step durations are the two half cycles of the stride (see
    :func:`calculate_half_cycle_durations`).

    Parameters
    ----------
    stride_list
        A stride list with at least the columns ``rhs``, ``lhs`` and ``end``.
    sampling_rate_hz
        The sampling rate the stride list indices refer to.

    Returns
    -------
    pd.Series
        The cadence per stride named ``cadence_spm`` with the same index as the stride list.

    """
    mean_step_duration = calculate_half_cycle_durations(stride_list, sampling_rate_hz).mean(axis=1)
    return (60 / mean_step_duration).astype("float64").rename("cadence_spm")
