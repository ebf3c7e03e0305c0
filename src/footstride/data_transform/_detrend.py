from typing import Any, Literal, Optional

from scipy.signal import detrend
from typing_extensions import Self, Unpack

from footstride.data_transform.base import BaseTransformer, base_transformer_docfiller
from footstride.utils.dtypes import DfLike, dflike_as_2d_array


@base_transformer_docfiller
class Detrend(BaseTransformer):
    """Remove the mean or a linear trend from each column of a signal.

    Parameters
    ----------
    detrend_type
        "constant" only removes the mean of the signal, "linear" removes the least-squares linear fit.

    Other Parameters
    ----------------
    %(other_parameters)s

    Attributes
    ----------
    %(results)s

    See Also
    --------
    scipy.signal.detrend : The function that is used to remove the trend.

    """

    detrend_type: Literal["constant", "linear"]

    sampling_rate_hz: Optional[float]

    def __init__(self, detrend_type: Literal["constant", "linear"] = "constant") -> None:
        self.detrend_type = detrend_type

    @base_transformer_docfiller
    def transform(
        self, data: DfLike, *, sampling_rate_hz: Optional[float] = None, **_: Unpack[dict[str, Any]]
    ) -> Self:
        """%(transform_short)s.

        Parameters
        ----------
        %(transform_para)s
        _
            Dummy to catch further parameters.
            They are ignored.

        %(transform_return)s

        """
        self.data = data
        self.sampling_rate_hz = sampling_rate_hz

        array_data, index, transformation_func = dflike_as_2d_array(data)
        self.transformed_data_ = transformation_func(
            detrend(array_data.astype("float64"), axis=0, type=self.detrend_type), index
        )
        return self
