from typing import Optional

import numpy as np
from tpcp import cf

from footstride.data_transform import MovingAverageFilter
from footstride.data_transform.base import BaseFilter
from footstride.events._zero_crossings import find_zero_crossings
from footstride.events.base import BaseHsDetector, EventResult, FootSignals, base_hs_docfiller
from footstride.utils.conversions import as_samples


@base_hs_docfiller
class HsGyZero(BaseHsDetector):
    """Detect heel strikes as the first zero crossing of the pitch angular velocity after the midswing peak.

    After the midswing peak, the pitch angular velocity of the foot drops and changes its sign around the moment the
    heel hits the ground [1]_.
    The heel strike is the first positive-to-negative zero crossing within ``max_search_s`` after the peak (or until
    the end of the recording).
    The detected events are usually 50-100 ms earlier than the true heel strike, but the method is very robust.

    Parameters
    ----------
    %(hs_common_paras)s

    Other Parameters
    ----------------
    %(other_parameters)s

    Attributes
    ----------
    %(hs_results)s

    References
    ----------
    .. [1] B. Mariani, M. C. Jimenez, F. J. G. Vingerhoets and K. Aminian, "On-Shoe Wearable Sensors for Gait and
       Turning Assessment of Patients With Parkinson's Disease," IEEE Transactions on Biomedical Engineering, vol. 60,
       no. 1, pp. 155-158, 2013, doi: 10.1109/TBME.2012.2227317.

    """

    def _find_hs(
        self,
        signals: FootSignals,
        peak: int,
        opposite_next_peak: Optional[int],  # noqa: ARG002
        sampling_rate_hz: float,
    ) -> EventResult:
        search_end = self._search_end(peak, len(signals.pitch), sampling_rate_hz)
        crossings = find_zero_crossings(signals.pitch[peak : search_end + 1], "down")
        if len(crossings) == 0:
            return EventResult.invalid(f"No down zero crossing between sample {peak} and {search_end}.")
        return EventResult.valid(peak + crossings[0])


@base_hs_docfiller
class HsGyMin(BaseHsDetector):
    """Detect heel strikes as the minimum of the pitch angular velocity after the midswing peak.

    At heel strike, the foot quickly rotates backwards, resulting in a sharp negative peak in the pitch angular
    velocity shortly after the zero crossing following the midswing peak.

    The search window starts at the midswing peak.
    It ends at the first negative-to-positive zero crossing between the peak and the next midswing peak of the other
    foot (which happens during the midstance of this foot).
    If there is no such crossing, the window ends at the peak of the other foot.
    If the other foot has no further peak, the window ends ``max_search_s`` after the peak.
    The heel strike is rejected, if the minimum within the window is not negative.

    Parameters
    ----------
    %(hs_common_paras)s

    Other Parameters
    ----------------
    %(other_parameters)s

    Attributes
    ----------
    %(hs_results)s

    """

    def _find_hs(
        self, signals: FootSignals, peak: int, opposite_next_peak: Optional[int], sampling_rate_hz: float
    ) -> EventResult:
        pitch = signals.pitch
        if opposite_next_peak is None:
            boundary = self._search_end(peak, len(pitch), sampling_rate_hz)
        else:
            boundary = opposite_next_peak
            up_crossings = find_zero_crossings(pitch[peak : boundary + 1], "up")
            if len(up_crossings) > 0:
                boundary = peak + up_crossings[0]
        if boundary <= peak:
            return EventResult.invalid(f"Empty search window after the midswing peak at sample {peak}.")

        hs = peak + int(np.argmin(pitch[peak : boundary + 1]))
        if pitch[hs] >= 0:
            return EventResult.invalid(f"No negative minimum between sample {peak} and {boundary}.")
        return EventResult.valid(hs)


@base_hs_docfiller
class HsNetAcc(HsGyMin):
    """Detect heel strikes as the minimum of the acceleration norm around the gyroscope based heel strike.

    First, the heel strike is estimated as in :class:`HsGyMin`.
    Then the minimum of the Euclidean norm of the linear acceleration is searched in a short window around this
    estimate.
    For foot mounted sensors, the deceleration at ground impact is a sharper signal than the gyroscope minimum.

    Parameters
    ----------
    %(hs_common_paras)s
    search_before_s
        The start of the acceleration search window in seconds before the gyroscope based heel strike.
    search_after_s
        The end of the acceleration search window in seconds after the gyroscope based heel strike.

    Other Parameters
    ----------------
    %(other_parameters)s

    Attributes
    ----------
    %(hs_results)s

    Notes
    -----
    The default window of [-80 ms, +20 ms] was tuned for foot mounted sensors.
    For other mounting locations (e.g. the shank), the window might need to be adapted.

    """

    search_before_s: float
    search_after_s: float

    def __init__(
        self,
        *,
        min_peak_height_dps: float = 50.0,
        min_peak_prominence_dps: float = 100.0,
        peak_smoothing: BaseFilter = cf(MovingAverageFilter(window_size_s=0.05)),
        max_search_s: float = 1.0,
        search_before_s: float = 0.08,
        search_after_s: float = 0.02,
    ) -> None:
        self.search_before_s = search_before_s
        self.search_after_s = search_after_s
        super().__init__(
            min_peak_height_dps=min_peak_height_dps,
            min_peak_prominence_dps=min_peak_prominence_dps,
            peak_smoothing=peak_smoothing,
            max_search_s=max_search_s,
        )

    def _find_hs(
        self, signals: FootSignals, peak: int, opposite_next_peak: Optional[int], sampling_rate_hz: float
    ) -> EventResult:
        gyr_estimate = super()._find_hs(signals, peak, opposite_next_peak, sampling_rate_hz)
        if not gyr_estimate.is_valid:
            return gyr_estimate
        start = max(gyr_estimate.index - as_samples(self.search_before_s, sampling_rate_hz), 0)
        end = min(gyr_estimate.index + as_samples(self.search_after_s, sampling_rate_hz), len(signals.acc_norm) - 1)
        if end < start:
            return EventResult.invalid(f"Empty acceleration search window around sample {gyr_estimate.index}.")
        return EventResult.valid(start + int(np.argmin(signals.acc_norm[start : end + 1])))
