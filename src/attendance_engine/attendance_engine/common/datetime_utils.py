from __future__ import annotations

from datetime import date, datetime

from ..core.constants import SHIFT_START_MINUTES


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def to_minutes(hhmm: str) -> int:
    """Convert "HH:MM" into minutes since midnight.

    Callers must guard empty values; there is no defined parse for them.
    """
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def worked_minutes(check_in: str, check_out: str) -> int:
    # Overnight shifts are not supported: checkout before checkin yields 0.
    if not check_in or not check_out:
        return 0
    return max(0, to_minutes(check_out) - to_minutes(check_in))


def late_minutes_for(check_in: str, shift_start_minutes: int = SHIFT_START_MINUTES) -> int:
    return max(0, to_minutes(check_in) - shift_start_minutes)


def format_hhmm(moment: datetime) -> str:
    return moment.strftime("%H:%M")


def format_duration(minutes: int) -> str:
    """Render a minute count as HH:MM for reports."""
    minutes = max(int(minutes), 0)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
