from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "admin"
    CEO = "ceo"
    MANAGER = "manager"
    HR_MANAGER = "hr_manager"
    HR_ASSISTANT = "hr_assistant"
    HR = "hr"
    FINANCE_MANAGER = "finance_manager"
    FINANCE_ASSISTANT = "finance_assistant"
    FINANCE = "finance"
    SALES_MANAGER = "sales_manager"
    SALES_ASSISTANT = "sales_assistant"
    SALES = "sales"
    IT_MANAGER = "it_manager"
    IT_ASSISTANT = "it_assistant"
    IT = "it"
    PRODUCTION_MANAGER = "production_manager"
    PRODUCTION_ASSISTANT = "production_assistant"
    PRODUCTION = "production"
    PURCHASING_MANAGER = "purchasing_manager"
    PURCHASING_ASSISTANT = "purchasing_assistant"
    PURCHASING = "purchasing"
    ADMIN_MANAGER = "admin_manager"
    ADMIN_ASSISTANT = "admin_assistant"
    EMPLOYEE = "employee"


# Roles allowed to decide exceptions and correct lateness.
APPROVER_ROLES = frozenset(
    {
        Role.ADMIN,
        Role.CEO,
        Role.MANAGER,
        Role.HR,
        Role.HR_MANAGER,
        Role.HR_ASSISTANT,
    }
)


class Classification(str, Enum):
    """Underlying classification of a day, kept apart from the exception workflow."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
    LEAVE = "leave"


class AttendanceStatus(str, Enum):
    """Visible status label of a record."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
    LEAVE = "leave"
    EXCEPTION = "exception"


class ExceptionStatus(str, Enum):
    """Approval workflow state of an exception (appeal)."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
