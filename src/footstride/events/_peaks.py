import numpy as np
from scipy.signal import find_peaks


def find_midswing_peaks(signal: np.ndarray, *, min_height: float, min_prominence: float) -> np.ndarray:
    """Find candidate midswing peaks in the pitch angular velocity of one foot.

    The signal is expected to be detrended (mean removed) and lightly low-pass filtered.
    A peak needs to be a local maximum with a height of at least ``min_height`` and a prominence (the drop required on
    both sides of the peak before a higher peak or the signal boundary is reached) of at least ``min_prominence``.

    Parameters
    ----------
    signal
        The smoothed pitch angular velocity of one foot in deg/s.
    min_height
        The minimal value of the signal at the peak.
    min_prominence
        The minimal prominence of the peak.

    Returns
    -------
    np.ndarray
        The sorted sample indices of the peaks as int64 array.

    See Also
    --------
    scipy.signal.find_peaks : The function that is used to find the peaks.

    """
    peaks, _ = find_peaks(np.asarray(signal).squeeze(), height=min_height, prominence=min_prominence)
    return peaks.astype("int64")
