from __future__ import annotations

from ...core.enums import Classification
from .base import AttendanceStrategy, StatusDecision


class AbsentStrategy(AttendanceStrategy):
    """No check-in and no leave."""

    def decide(self, *, check_in: str, late_minutes: int) -> StatusDecision:
        return StatusDecision(classification=Classification.ABSENT)
