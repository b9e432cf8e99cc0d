from __future__ import annotations

from dataclasses import dataclass

from ..common.datetime_utils import late_minutes_for
from ..core.constants import SHIFT_START_MINUTES
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import AttendanceStrategy, StatusDecision
from .strategies.late_strategy import LateStrategy
from .strategies.leave_strategy import LeaveStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    shift_start_minutes: int = SHIFT_START_MINUTES

    def for_capture(self, *, check_in: str, late_minutes: int, on_leave: bool = False) -> AttendanceStrategy:
        if check_in:
            if late_minutes > 0:
                return LateStrategy()
            return PresentStrategy()
        if on_leave:
            return LeaveStrategy()
        return AbsentStrategy()

    def classify(self, *, check_in: str, on_leave: bool = False) -> StatusDecision:
        late = late_minutes_for(check_in, self.shift_start_minutes) if check_in else 0
        strategy = self.for_capture(check_in=check_in, late_minutes=late, on_leave=on_leave)
        return strategy.decide(check_in=check_in, late_minutes=late)


def classify(check_in: str, on_leave: bool = False) -> StatusDecision:
    """Classify a day from its check-in time and leave flag."""
    return AttendanceStrategyFactory().classify(check_in=check_in, on_leave=on_leave)
