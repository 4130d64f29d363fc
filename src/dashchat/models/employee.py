"""
Employee Model

Read-only view of an employee owned by the identity subsystem.
The chat core only references employees by id and shows their public projection.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


def utcnow() -> datetime:
    """Current time as an aware UTC datetime"""
    return datetime.now(timezone.utc)


class EmployeeRole(str, Enum):
    """Roles issued by the identity provider"""
    EMPLOYEE = "employee"
    HR = "hr"
    ADMIN = "admin"


@dataclass(frozen=True)
class EmployeeSummary:
    """Display-safe projection of an employee (no credentials)"""
    id: UUID
    name: Optional[str] = None
    email: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
        }


@dataclass(frozen=True)
class Actor:
    """Authenticated caller, as asserted by the identity provider's token"""
    user_id: UUID
    role: EmployeeRole = EmployeeRole.EMPLOYEE

    @property
    def is_admin(self) -> bool:
        return self.role == EmployeeRole.ADMIN


@dataclass
class Employee:
    """
    Employee entity.

    Owned by the identity subsystem; immutable from the chat core's perspective.
    """
    id: UUID = field(default_factory=uuid4)
    name: str = ""                                   # Display name
    email: str = ""                                  # Email address
    role: EmployeeRole = EmployeeRole.EMPLOYEE       # employee / hr / admin
    created_at: datetime = field(default_factory=utcnow)

    @property
    def is_admin(self) -> bool:
        return self.role == EmployeeRole.ADMIN

    def summary(self) -> EmployeeSummary:
        """Public projection used in chat payloads"""
        return EmployeeSummary(id=self.id, name=self.name, email=self.email)

    def to_dict(self) -> dict:
        """Convert to dictionary for API response"""
        return {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "createdAt": self.created_at.isoformat(),
        }
