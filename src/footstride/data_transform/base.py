"""Base classes for all data transformers and filters."""

from typing import Any, ClassVar, Literal, Optional, Union

import numpy as np
from scipy.signal import sosfilt, sosfiltfilt
from tpcp import Algorithm
from typing_extensions import Self, Unpack

from footstride._docutils import make_filldoc
from footstride.utils.dtypes import DfLike, dflike_as_2d_array

base_transformer_docfiller = make_filldoc(
    {
        "results": """
        transformed_data_
            The transformed data.
            The datatype matches the datatype of the passed data.
        """,
        "other_parameters": """
        data
            The raw data passed to the ``transform`` method.
            This can either be a dataframe, a series, or a numpy array.
        sampling_rate_hz
            The sampling rate of the IMU data in Hz passed to the ``transform`` method.
        """,
        "transform_short": """
        Transform the passed data
        """,
        "transform_para": """
        data
            The raw data to be transformed.
            This can either be a dataframe, a series, or a numpy array.
        sampling_rate_hz
            The sampling rate of the IMU data in Hz.
        """,
        "transform_return": """
        Returns
        -------
        self
            The instance of the class with the ``transformed_data_`` attribute set to the transformed data.
        """,
    },
    doc_summary="Decorator to fill common parts of the docstring for subclasses of :class:`BaseTransformer`.",
)


class BaseTransformer(Algorithm):
    """Base class for all data transformers."""

    _action_methods = ("transform",)

    transformed_data_: DfLike

    data: DfLike

    def transform(self, data: DfLike, **kwargs: Unpack[dict[str, Any]]) -> Self:
        """Transform the data using the transformer.

        Parameters
        ----------
        data
            A dataframe, series or array representing single sensor data.
        kwargs
            Further keyword arguments for the transformer.

        Returns
        -------
        self
            The instance of the transformer with the results attached

        """
        raise NotImplementedError()


base_filter_docfiller = make_filldoc(
    {
        "results": """
        transformed_data_
            The filtered data.
            The datatype matches the datatype of the passed data.
        filtered_data_
            Alias for ``transformed_data_``.
        """,
        "other_parameters": """
        data
            The raw data passed to the ``filter``/``transform`` method.
            This can either be a dataframe, a series, or a numpy array.
        sampling_rate_hz
            The sampling rate of the IMU data in Hz passed to the ``filter``/``transform`` method.
        """,
        "filter_short": """
        Filter the passed data
        """,
        "filter_para": """
        data
            The raw data to be filtered.
            This can either be a dataframe, a series, or a numpy array.
        sampling_rate_hz
            The sampling rate of the IMU data in Hz.
        """,
        "filter_kwargs": """
        _
            Dummy to catch further parameters.
            They are ignored.
        """,
        "filter_return": """
        Returns
        -------
        self
            The instance of the class with the ``transformed_data_``/``filtered_data_`` attribute set to the filtered
            data.
        """,
    },
    doc_summary="Decorator to fill common parts of the docstring for subclasses of :class:`BaseFilter`.",
)


@base_filter_docfiller
class BaseFilter(BaseTransformer):
    """Base class for all filters.

    Filters should implement the ``filter`` method, which will perform all relevant processing steps.
    The method should then return the instance of the class, with the ``transformed_data_`` attribute set to the
    filtered data.

    Other Parameters
    ----------------
    %(other_parameters)s

    Attributes
    ----------
    %(results)s

    """

    _action_methods = (*BaseTransformer._action_methods, "filter")

    sampling_rate_hz: Optional[float]

    @property
    def filtered_data_(self) -> DfLike:
        """Get filtered data.

        This is the same as `transformed_data_` and is just here, as it is easier to remember.
        """
        return self.transformed_data_

    def transform(
        self, data: DfLike, *, sampling_rate_hz: Optional[float] = None, **kwargs: Unpack[dict[str, Any]]
    ) -> Self:
        """Transform the data using the filter.

        This just calls ``self.filter``.
        This method only exists to fulfill the :class:`BaseTransformer` interface.

        Parameters
        ----------
        data
            The data represented either as a dataframe, a series, or a numpy array.
        sampling_rate_hz
            The sampling rate of the IMU data in Hz.
        kwargs
            Further keyword arguments for the filter.

        Returns
        -------
        self
            The instance of the filter with the results attached

        """
        return self.filter(data, sampling_rate_hz=sampling_rate_hz, **kwargs)

    @base_filter_docfiller
    def filter(
        self, data: DfLike, *, sampling_rate_hz: Optional[float] = None, **kwargs: Unpack[dict[str, Any]]
    ) -> Self:
        """%(filter_short)s.

        Parameters
        ----------
        %(filter_para)s
        kwargs
            Further keyword arguments for the filter.

        %(filter_return)s

        """
        raise NotImplementedError()


scipy_filter_docfiller = make_filldoc(
    {
        **base_filter_docfiller._dict,
        "common_paras": """
    order
        The filter order.
    cutoff_freq_hz
        The critical frequencies describing the filter.
        If the filter type requires only a single frequency ("lowpass" or "highpass"), this should be a single float.
        If the filter type requires two frequencies ("bandpass" or "bandstop"), this should be a tuple of two floats.
    filter_type
        The filter type ("lowpass", "highpass", "bandpass", "bandstop").
    """,
        "zero_phase_sos": """
    zero_phase
        Whether to apply a zero-phase filter (i.e. forward and backward filtering) using
        :func:`scipy.signal.sosfiltfilt` or a normal forward filter using :func:`scipy.signal.sosfilt`.
    """,
    },
    doc_summary="Decorator to fill common parts of the docstring for subclasses of :class:`ScipyFilter`.",
)


@scipy_filter_docfiller
class ScipyFilter(BaseFilter):
    """Base class for generic filters using the scipy filter functions.

    Child-classes implement `_sos_filter_design` and return the filter coefficients in the second-order sections (SOS)
    representation.

    Parameters
    ----------
    %(common_paras)s
    zero_phase
        Whether to apply a zero-phase filter (i.e. forward and backward filtering) or a normal forward filter.

    Other Parameters
    ----------------
    %(other_parameters)s

    Attributes
    ----------
    %(results)s

    """

    _METHODS: ClassVar = {"single_pass": sosfilt, "double_pass": sosfiltfilt}

    order: int
    cutoff_freq_hz: Union[float, tuple[float, float]]
    zero_phase: bool
    filter_type: Literal["lowpass", "highpass", "bandpass", "bandstop"]

    def __init__(
        self,
        order: int,
        cutoff_freq_hz: Union[float, tuple[float, float]],
        *,
        filter_type: Literal["lowpass", "highpass", "bandpass", "bandstop"] = "lowpass",
        zero_phase: bool = True,
    ) -> None:
        self.order = order
        self.cutoff_freq_hz = cutoff_freq_hz
        self.zero_phase = zero_phase
        self.filter_type = filter_type

    @scipy_filter_docfiller
    def filter(self, data: DfLike, *, sampling_rate_hz: Optional[float] = None, **_: Unpack[dict[str, Any]]) -> Self:
        """Filter the data.

        This will apply the filter along the **first** axis (axis=0) (aka each column will be filtered).

        Parameters
        ----------
        %(filter_para)s
        %(filter_kwargs)s

        %(filter_return)s

        """
        if sampling_rate_hz is None:
            raise ValueError(
                f"{type(self).__name__}.filter requires a `sampling_rate_hz` to be passed. "
                "Currently, `None` (the default value) is passed."
            )

        self.data = data
        self.sampling_rate_hz = sampling_rate_hz

        data, index, transformation_func = dflike_as_2d_array(data)
        pass_type = "double_pass" if self.zero_phase else "single_pass"

        sos = self._sos_filter_design(sampling_rate_hz)
        transformed_data = self._METHODS[pass_type](sos=sos, x=data, axis=0)

        self.transformed_data_ = transformation_func(transformed_data, index)
        return self

    def _sos_filter_design(self, sampling_rate_hz: float) -> np.ndarray:
        raise NotImplementedError()


@base_filter_docfiller
class IdentityFilter(BaseFilter):
    """Do nothing.

    Just returns a copy of the input data.
    This can be used to disable the pre-filtering step of the :class:`~footstride.pipeline.StrideDetectionPipeline`.

    Other Parameters
    ----------------
    %(other_parameters)s

    Attributes
    ----------
    %(results)s

    """

    @base_filter_docfiller
    def filter(self, data: DfLike, *, sampling_rate_hz: Optional[float] = None, **_: Unpack[dict[str, Any]]) -> Self:
        """Filter the data by doing absolutely nothing.

        Parameters
        ----------
        %(filter_para)s
        %(filter_kwargs)s

        %(filter_return)s

        """
        self.data = data
        self.sampling_rate_hz = sampling_rate_hz
        self.transformed_data_ = data.copy()
        return self


__all__ = [
    "BaseFilter",
    "BaseTransformer",
    "IdentityFilter",
    "ScipyFilter",
    "base_filter_docfiller",
    "base_transformer_docfiller",
    "scipy_filter_docfiller",
]
