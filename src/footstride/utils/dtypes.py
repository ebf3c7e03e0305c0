"""Helper to validate and convert common data types used in footstride."""

from typing import Any, Callable, Optional, TypeVar, Union

import numpy as np
import pandas as pd
from typing_extensions import TypeAlias

from footstride.consts import SF_SENSOR_COLS

#: Type alias for dataframe-like objects.
DfLike: TypeAlias = Union[pd.Series, pd.DataFrame, np.ndarray]
#: The type variable for dataframe-like objects.
DfLikeT = TypeVar("DfLikeT", bound=DfLike)

#: Type alias for IMU data that can be converted to a sensor frame dataframe.
ImuLike: TypeAlias = Union[pd.DataFrame, np.ndarray]


def is_dflike(data: Any) -> bool:
    """Check if the passed data is dataframe-like.

    This includes pandas dataframes and series, as well as numpy arrays.

    Parameters
    ----------
    data
        The data to check.

    Returns
    -------
    bool
        Whether the passed data is dataframe-like.

    """
    return isinstance(data, (pd.Series, pd.DataFrame, np.ndarray))


def dflike_as_2d_array(
    data: DfLikeT,
) -> tuple[np.ndarray, Optional[pd.Index], Callable[[np.ndarray, Optional[pd.Index]], DfLikeT]]:
    """Convert the passed data to a 2d numpy array and return a function to convert it back to the original datatype.

    We expect that each row in the data represents one timepoint and each column represents one sensor axis.
    The returned data is reshaped in a way that the first dimension represents the timepoints and the second dimension
    represents the sensor axes.

    This supports the following conversions:

    - ``pd.Series`` with length ``n``-> ``np.ndarray`` with shape ``(n, 1)``
    - ``pd.DataFrame`` with shape ``(n_rows, m_cols)`` -> ``np.ndarray`` with shape ``(n_rows, m_cols)``
    - ``np.ndarray`` with shape ``(n)`` -> ``np.ndarray`` with shape ``(n, 1)``
    - ``np.ndarray`` with shape ``(m, n)`` -> ``np.ndarray`` with shape ``(m, n)``

    Arrays with 0 or more than 2 dimensions are not supported.

    Parameters
    ----------
    data
        The data to convert.
        Must be dataframe-like (i.e. a dataframe, series, or numpy array).

    Returns
    -------
    np.ndarray
        The data as a 2d numpy array.
    Optional[pd.Index]
        The index of the passed data.
        This is only returned if the passed data is a ``pd.Series`` or ``pd.DataFrame``.
        Otherwise, ``None`` is returned.
    Callable[[np.ndarray, Optional[pd.Index]], DfLike]
        A function to convert the data back to the original datatype.

    """
    if not is_dflike(data):
        raise TypeError("The passed data is not dataframe-like (i.e. a dataframe, series, or numpy array).")

    if isinstance(data, np.ndarray):
        if data.ndim > 2 or data.ndim == 0:
            raise ValueError("The passed data must have 1 or 2 dimensions.")
        if data.ndim == 1:
            return data.reshape(-1, 1), None, lambda x, _: x.reshape(-1)
        return data, None, lambda x, _: x

    if isinstance(data, pd.Series):
        return (
            data.to_numpy(copy=False).reshape(-1, 1),
            data.index,
            lambda x, i: pd.Series(x.reshape(data.shape), index=i, copy=False, name=data.name),
        )

    return (
        data.to_numpy(copy=False),
        data.index,
        lambda x, i: pd.DataFrame(x, columns=data.columns, index=i, copy=False),
    )


def assert_is_sensor_data(data: pd.DataFrame) -> None:
    """Check if the passed dataframe contains foot IMU data in the sensor frame.

    This is done by checking if the dataframe contains the columns defined in
    :obj:`~footstride.consts.SF_SENSOR_COLS`.

    Parameters
    ----------
    data
        The dataframe to check.

    """
    if not isinstance(data, pd.DataFrame):
        raise AssertionError("The passed data is no valid imu data, as it is not a pandas dataframe.")  # noqa: TRY004
    missing_cols = set(SF_SENSOR_COLS) - set(data.columns)
    if missing_cols:
        raise AssertionError(
            f"The passed data is no valid imu data, as it is missing the following columns: {sorted(missing_cols)}."
        )


def as_sensor_df(data: ImuLike, *, name: str = "data") -> pd.DataFrame:
    """Convert IMU data to a sensor frame dataframe.

    Plain numpy arrays are expected to have the shape ``(n, 6)`` with the columns ordered as
    :obj:`~footstride.consts.SF_SENSOR_COLS` (3-axis acceleration in m/s^2 followed by 3-axis angular velocity in
    deg/s).
    Dataframes are checked for the required columns and only the sensor columns are returned.
    The returned dataframe always has a default range index, so that all detected events are positional sample
    indices.
    The input data is never modified.

    Parameters
    ----------
    data
        The IMU data of one foot.
    name
        The name of the data used in error messages.

    Returns
    -------
    pd.DataFrame
        A new dataframe with only the sensor columns.

    """
    if isinstance(data, np.ndarray):
        if data.ndim != 2 or data.shape[1] != len(SF_SENSOR_COLS):
            raise ValueError(
                f"{name} must have the shape (n, {len(SF_SENSOR_COLS)}) with the columns {SF_SENSOR_COLS}. "
                f"Got an array with shape {data.shape}."
            )
        return pd.DataFrame(data.astype("float64", copy=True), columns=SF_SENSOR_COLS)
    try:
        assert_is_sensor_data(data)
    except AssertionError as e:
        raise ValueError(f"{name} is not valid sensor data: {e}") from e
    return data[SF_SENSOR_COLS].reset_index(drop=True).astype("float64")


__all__ = ["DfLike", "DfLikeT", "ImuLike", "as_sensor_df", "assert_is_sensor_data", "dflike_as_2d_array", "is_dflike"]
