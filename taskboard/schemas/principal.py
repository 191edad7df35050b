# taskboard/schemas/principal.py
from enum import Enum
from typing import FrozenSet, Optional

from pydantic import BaseModel


class RoleName(str, Enum):
    """Role catalog the access policy knows about; other role names grant nothing"""
    ADMINISTRATOR = "Administrator"
    SALES_MANAGER = "Sales Manager"
    SALES_USER = "Sales User"
    REPORTING_USER = "Reporting User"


class Principal(BaseModel):
    """Authenticated identity carried by a session"""
    id: int
    username: str
    first_name: str
    last_name: str
    email: str
    department: Optional[str] = None
    location: Optional[str] = None
    roles: FrozenSet[str] = frozenset()

    model_config = {
        "frozen": True
    }

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def has_role(self, role: RoleName) -> bool:
        # compare on the value: str-mixin enums hash by member name
        return role.value in self.roles

    @classmethod
    def from_user(cls, user, roles) -> "Principal":
        return cls(
            id=user.id,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            department=user.department,
            location=user.location,
            roles=frozenset(roles),
        )
