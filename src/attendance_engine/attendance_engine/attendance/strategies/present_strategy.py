from __future__ import annotations

from ...core.enums import Classification
from .base import AttendanceStrategy, StatusDecision


class PresentStrategy(AttendanceStrategy):
    """Check-in at or before shift start."""

    def decide(self, *, check_in: str, late_minutes: int) -> StatusDecision:
        return StatusDecision(classification=Classification.PRESENT)
