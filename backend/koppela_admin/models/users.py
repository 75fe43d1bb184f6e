from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    CASHIER = "CASHIER"


class AddUserMode(str, Enum):
    CREATE = "create"
    INVITE = "invite"


@dataclass(frozen=True)
class BusinessUser:
    """Member of a business as listed by the admin API."""
    id: int
    first_name: str
    last_name: str
    email: str
    role: UserRole
    is_active: bool = True
    phone: Optional[str] = None
    is_owner: bool = False

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_api(cls, payload: dict) -> "BusinessUser":
        # List endpoints nest the account under "user"; detail endpoints do not
        account = payload.get("user") or payload
        raw_role = (payload.get("role") or UserRole.CASHIER.value).upper()
        try:
            role = UserRole(raw_role)
        except ValueError:
            role = UserRole.CASHIER
        return cls(
            id=int(account["id"]),
            first_name=account.get("firstName") or "",
            last_name=account.get("lastName") or "",
            email=account.get("email") or "",
            phone=account.get("phone"),
            role=role,
            is_active=bool(payload.get("isActive", account.get("isActive", True))),
            is_owner=bool(payload.get("isOwner", False)),
        )
