from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from ..core.enums import APPROVER_ROLES, Role
from ..core.exceptions import AuthenticationError


@dataclass(frozen=True)
class Actor:
    """The user performing a request.

    Authentication happens upstream; the API trusts these identity headers.
    """

    name: str
    role: Role
    employee_id: str = ""

    @property
    def is_approver(self) -> bool:
        return self.role in APPROVER_ROLES


def actor_from_headers(headers: Mapping[str, str]) -> Actor:
    name = (headers.get("X-User-Name") or "").strip()
    if not name:
        raise AuthenticationError("Missing X-User-Name header")
    raw_role = (headers.get("X-User-Role") or Role.EMPLOYEE.value).strip().lower()
    try:
        role = Role(raw_role)
    except ValueError:
        raise AuthenticationError(f"Unknown role: {raw_role}")
    return Actor(name=name, role=role, employee_id=(headers.get("X-Employee-Id") or "").strip())
