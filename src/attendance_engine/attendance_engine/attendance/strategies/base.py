from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ...core.enums import Classification


@dataclass(frozen=True)
class StatusDecision:
    classification: Classification
    late_minutes: int = 0


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we classify a day's capture."""

    @abstractmethod
    def decide(self, *, check_in: str, late_minutes: int) -> StatusDecision:
        raise NotImplementedError
