from typing import Any, Optional

from scipy.ndimage import uniform_filter1d
from typing_extensions import Self, Unpack

from footstride.data_transform.base import BaseFilter, base_filter_docfiller
from footstride.utils.conversions import as_samples
from footstride.utils.dtypes import DfLike, dflike_as_2d_array


@base_filter_docfiller
class MovingAverageFilter(BaseFilter):
    """Smooth a signal with a centered moving average along the time axis.

    The window is centered on each sample.
    At the edges, the signal is extended by reflection, so that the output has the same length as the input.

    Parameters
    ----------
    window_size_s
        The length of the averaging window in seconds.
        The window size in samples is calculated using the sampling rate passed to the ``filter`` method and is at
        least 1 sample.

    Other Parameters
    ----------------
    %(other_parameters)s

    Attributes
    ----------
    %(results)s
    window_size_samples_
        The window size in samples as calculated from ``window_size_s`` and the sampling rate.

    See Also
    --------
    scipy.ndimage.uniform_filter1d : The function that is used to apply the filter.

    """

    window_size_s: float

    window_size_samples_: int

    def __init__(self, window_size_s: float = 0.05) -> None:
        self.window_size_s = window_size_s

    @base_filter_docfiller
    def filter(self, data: DfLike, *, sampling_rate_hz: Optional[float] = None, **_: Unpack[dict[str, Any]]) -> Self:
        """%(filter_short)s.

        Parameters
        ----------
        %(filter_para)s
        %(filter_kwargs)s

        %(filter_return)s

        """
        if sampling_rate_hz is None:
            raise ValueError("Parameter 'sampling_rate_hz' must be provided.")

        self.data = data
        self.sampling_rate_hz = sampling_rate_hz

        array_data, index, transformation_func = dflike_as_2d_array(data)

        self.window_size_samples_ = max(as_samples(self.window_size_s, sampling_rate_hz), 1)
        filtered = uniform_filter1d(
            array_data.astype("float64"), size=self.window_size_samples_, axis=0, mode="reflect"
        )

        self.transformed_data_ = transformation_func(filtered, index)
        return self
