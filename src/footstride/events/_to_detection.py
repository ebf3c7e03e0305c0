import numpy as np

from footstride.events._zero_crossings import find_zero_crossings
from footstride.events.base import BaseToDetector, EventResult, FootSignals, base_to_docfiller


@base_to_docfiller
class ToGyZero(BaseToDetector):
    """Detect toe offs as the last rising zero crossing of the pitch angular velocity before the midswing peak.

    When the foot leaves the ground, it starts rotating forward and the pitch angular velocity turns positive.
    The toe off is the last negative-to-positive zero crossing within the swing window before the midswing peak.

    Other Parameters
    ----------------
    %(other_parameters)s

    Attributes
    ----------
    %(to_results)s

    """

    def _find_rising_crossing(self, signals: FootSignals, window_start: int, peak: int) -> EventResult:
        if peak <= window_start:
            return EventResult.invalid(f"Empty swing window between sample {window_start} and {peak}.")
        crossings = find_zero_crossings(signals.pitch[window_start : peak + 1], "up")
        if len(crossings) == 0:
            return EventResult.invalid(f"No up zero crossing between sample {window_start} and {peak}.")
        return EventResult.valid(window_start + crossings[-1])

    def _find_to(
        self,
        signals: FootSignals,
        window_start: int,
        peak: int,
        sampling_rate_hz: float,  # noqa: ARG002
    ) -> EventResult:
        return self._find_rising_crossing(signals, window_start, peak)


@base_to_docfiller
class ToGyMin(ToGyZero):
    """Detect toe offs as the minimum of the pitch angular velocity before the rising zero crossing.

    During push-off, the foot rotates backwards around the toes, resulting in a pronounced negative peak of the pitch
    angular velocity right before the foot leaves the ground.
    The rising zero crossing is searched as in :class:`ToGyZero` and the toe off is the minimum of the pitch angular
    velocity between the start of the swing window and this crossing.

    Other Parameters
    ----------------
    %(other_parameters)s

    Attributes
    ----------
    %(to_results)s

    """

    def _find_to(
        self,
        signals: FootSignals,
        window_start: int,
        peak: int,
        sampling_rate_hz: float,  # noqa: ARG002
    ) -> EventResult:
        crossing = self._find_rising_crossing(signals, window_start, peak)
        if not crossing.is_valid:
            return crossing
        return EventResult.valid(window_start + int(np.argmin(signals.pitch[window_start : crossing.index + 1])))


@base_to_docfiller
class ToNetAcc(BaseToDetector):
    """Detect toe offs as the maximum of the acceleration norm during push-off.

    The toe off is the maximum of the Euclidean norm of the linear acceleration between the last heel strike of the
    other foot and the midswing peak of this foot.

    Other Parameters
    ----------------
    %(other_parameters)s

    Attributes
    ----------
    %(to_results)s

    """

    def _find_to(
        self,
        signals: FootSignals,
        window_start: int,
        peak: int,
        sampling_rate_hz: float,  # noqa: ARG002
    ) -> EventResult:
        if peak <= window_start:
            return EventResult.invalid(f"Empty swing window between sample {window_start} and {peak}.")
        return EventResult.valid(window_start + int(np.argmax(signals.acc_norm[window_start : peak + 1])))
