from typing import Literal

import numpy as np
import pandas as pd
from tpcp import Algorithm
from typing_extensions import Self

BadStrideFilterMode = Literal["stride_length", "gait_events", "none"]


class BadStrideFilter(Algorithm):
    """Remove strides with outlier durations from a stride list.

    The durations of all strides (or of all their sub-phases) are compared to their mean across all strides of the
    recording.
    A duration is considered an outlier if it is larger than ``(1 + max_deviation_percent / 100) * mean`` or smaller
    than ``(max_deviation_percent / 100) * mean``.

    Parameters
    ----------
    max_deviation_percent
        The allowed deviation from the mean in percent.
    mode
        Which durations are checked.

        - ``"stride_length"``: The duration of the full stride (``end - rhs``).
        - ``"gait_events"``: The durations between all consecutive event columns of the stride list (e.g.
          ``lhs - rhs`` and ``end - lhs``).
          Each sub-phase is compared to its own mean and a single violation removes the stride.
        - ``"none"``: No strides are removed.

    Attributes
    ----------
    filtered_stride_list_
        A dataframe containing all strides that are considered valid.
        This is a subset of the stride list that was provided to the :meth:`filter` method.
    excluded_stride_list_
        A dataframe containing all strides that were removed.
    n_removed_strides_
        The number of removed strides.

    Other Parameters
    ----------------
    stride_list
        The stride list provided to the :meth:`filter` method.

    Notes
    -----
    The mean is calculated including the outliers.
    Hence, a single very long stride in a short recording can shift the bounds enough to remove regular strides.

    """

    _action_methods = ("filter",)

    max_deviation_percent: float
    mode: BadStrideFilterMode

    stride_list: pd.DataFrame

    _is_outlier: pd.Series

    def __init__(self, max_deviation_percent: float = 50.0, mode: BadStrideFilterMode = "stride_length") -> None:
        self.max_deviation_percent = max_deviation_percent
        self.mode = mode

    @property
    def filtered_stride_list_(self) -> pd.DataFrame:
        return self.stride_list[~self._is_outlier]

    @property
    def excluded_stride_list_(self) -> pd.DataFrame:
        return self.stride_list[self._is_outlier]

    @property
    def n_removed_strides_(self) -> int:
        return int(self._is_outlier.sum())

    def filter(self, stride_list: pd.DataFrame) -> Self:  # noqa: A003
        """Filter the stride list.

        Parameters
        ----------
        stride_list
            The stride list to filter.
            Each row represents a stride and the columns are the gait events of the stride in chronological order
            (e.g. ``rhs, lhs, end`` or ``rhs, lto, lhs, rto, end``).

        Returns
        -------
        self
            The instance of the class with the ``filtered_stride_list_`` attribute set.

        """
        if self.mode not in ("stride_length", "gait_events", "none"):
            raise ValueError(
                f"Unknown mode '{self.mode}'. Must be one of 'stride_length', 'gait_events' or 'none'."
            )
        if self.max_deviation_percent < 0:
            raise ValueError("max_deviation_percent must not be negative.")

        self.stride_list = stride_list

        if self.mode == "none" or len(stride_list) == 0:
            self._is_outlier = pd.Series(False, index=stride_list.index)
            return self

        if self.mode == "stride_length":
            durations = (stride_list.iloc[:, -1] - stride_list.iloc[:, 0]).to_frame()
        else:
            durations = stride_list.diff(axis=1).iloc[:, 1:]

        durations = durations.astype("float64")
        mean_durations = durations.mean()
        ratio = self.max_deviation_percent / 100
        is_outlier = (durations > (1 + ratio) * mean_durations) | (durations < ratio * mean_durations)
        self._is_outlier = pd.Series(np.any(is_outlier.to_numpy(), axis=1), index=stride_list.index)

        return self
