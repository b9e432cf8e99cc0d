"""Deterministic demo attendance used to seed a fresh store.

Fixture logic only: the seed formula and buckets are kept stable so tests can
rely on the generated shape.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional

from ..attendance.model import AttendanceRecord, Location
from ..attendance.repository import AttendanceRepository
from ..core.constants import DEMO_HISTORY_DAYS, SHIFT_START_MINUTES
from ..core.enums import Classification, ExceptionStatus

logger = logging.getLogger(__name__)

DEMO_EMPLOYEES = [
    ("e-1", "Ahmed Hassan"),
    ("e-2", "Sara Ali"),
    ("e-3", "Mohammed Khalid"),
    ("e-4", "Fatima Noor"),
    ("e-5", "Omar Youssef"),
    ("e-6", "Layla Ibrahim"),
    ("e-7", "Khaled Mansour"),
    ("e-8", "Nadia Samir"),
]

DEMO_LOCATIONS = [
    Location(33.3152, 44.3661, "بغداد - الكرادة"),
    Location(33.3400, 44.3900, "بغداد - المنصور"),
    Location(33.3100, 44.3700, "بغداد - الجادرية"),
    Location(33.3300, 44.4000, "بغداد - زيونة"),
]

DEMO_APPROVER = "Ahmed Hassan"
FRIDAY = 4


def demo_seed(day_offset: int, employee_index: int) -> int:
    return (day_offset * 17 + employee_index * 31 + 42) % 100


def _hhmm(total_minutes: int) -> str:
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def _demo_record(day: date, is_today: bool, employee_id: str, employee_name: str, seed: int) -> AttendanceRecord:
    loc = DEMO_LOCATIONS[seed % len(DEMO_LOCATIONS)]
    base = dict(id="", employee_id=employee_id, employee_name=employee_name, date=day)

    if seed < 50:
        return AttendanceRecord(
            **base,
            check_in=f"07:{35 + seed % 25:02d}",
            check_out="" if is_today else f"17:{seed % 30:02d}",
            classification=Classification.PRESENT,
            location=loc,
            device="Web Camera",
        )
    if seed < 72:
        late = 10 + seed % 45
        return AttendanceRecord(
            **base,
            check_in=_hhmm(SHIFT_START_MINUTES + late),
            check_out="" if is_today else f"17:{10 + seed % 20:02d}",
            classification=Classification.LATE,
            late_minutes=late,
            location=loc,
            device="Web Camera",
        )
    if seed < 88:
        return AttendanceRecord(**base, check_in="", check_out="", classification=Classification.ABSENT)
    return AttendanceRecord(**base, check_in="", check_out="", classification=Classification.LEAVE)


def _nth(records: list[AttendanceRecord], name: str, classification: Classification, n: int = 0) -> Optional[int]:
    hits = [i for i, r in enumerate(records) if r.employee_name == name and r.classification == classification]
    return hits[n] if len(hits) > n else None


def generate_demo_attendance(today: date) -> list[AttendanceRecord]:
    """Build the trailing window of demo records, oldest day first."""
    data: list[AttendanceRecord] = []
    for offset in range(DEMO_HISTORY_DAYS - 1, -1, -1):
        day = today - timedelta(days=offset)
        if day.weekday() == FRIDAY and offset > 0:
            continue
        for index, (employee_id, employee_name) in enumerate(DEMO_EMPLOYEES):
            data.append(_demo_record(day, offset == 0, employee_id, employee_name, demo_seed(offset, index)))

    injected = [
        ("Mohammed Khalid", Classification.LATE, 0, "ظروف عائلية طارئة", ExceptionStatus.APPROVED, DEMO_APPROVER),
        ("Fatima Noor", Classification.ABSENT, 0, "مراجعة طبية عاجلة", ExceptionStatus.PENDING, None),
        ("Layla Ibrahim", Classification.LATE, 0, "ازدحام مروري شديد", ExceptionStatus.REJECTED, DEMO_APPROVER),
        ("Sara Ali", Classification.LATE, 1, "عطل في وسيلة النقل", ExceptionStatus.PENDING, None),
    ]
    for name, classification, n, reason, status, approver in injected:
        i = _nth(data, name, classification, n)
        if i is None:
            continue
        data[i] = data[i].evolve(
            exception_reason=reason,
            exception_status=status,
            exception_approved_by=approver,
        )
    return data


def seed_demo_data(repository: AttendanceRepository, today: date) -> int:
    records = generate_demo_attendance(today)
    for r in records:
        repository.add(r)
    logger.info("seeded %d demo attendance records", len(records))
    return len(records)
