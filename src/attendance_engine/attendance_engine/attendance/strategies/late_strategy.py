from __future__ import annotations

from ...core.enums import Classification
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in."""

    def decide(self, *, check_in: str, late_minutes: int) -> StatusDecision:
        return StatusDecision(classification=Classification.LATE, late_minutes=late_minutes)
