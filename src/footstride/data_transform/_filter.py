import numpy as np
from scipy.signal import butter

from footstride.data_transform.base import ScipyFilter, scipy_filter_docfiller


@scipy_filter_docfiller
class ButterworthFilter(ScipyFilter):
    """Apply a butterworth filter using the transformer interface.

    Internally, this is using the :func:`scipy.signal.butter` function to design the filter coefficients using the
    second-order sections (SOS) representation.
    With ``zero_phase=True`` (default) the filter is applied forward and backward, so that detected events are not
    shifted in time.
    Note, that this doubles the effective filter order.

    Parameters
    ----------
    %(common_paras)s
    %(zero_phase_sos)s

    Other Parameters
    ----------------
    %(other_parameters)s

    Attributes
    ----------
    %(results)s

    """

    def _sos_filter_design(self, sampling_rate_hz: float) -> np.ndarray:
        return butter(self.order, self.cutoff_freq_hz, btype=self.filter_type, output="sos", fs=sampling_rate_hz)
