"""User aggregate: students, teachers and administrators of the platform.

Credentials live with the upstream identity provider; this aggregate only
carries what the review rules need: the role and whether the account is
active.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, String

from coursereviews.domain import coursereviews
from coursereviews.errors import InvalidArgument


class UserRole(Enum):
    STUDENT = "STUDENT"
    TEACHER = "TEACHER"
    ADMIN = "ADMIN"

    @classmethod
    def parse(cls, value):
        """Map a case-insensitive role name to a member; never falls back to a default."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise InvalidArgument({"role": [f"Invalid role: {value}"]}) from None


@coursereviews.aggregate
class User:
    username = String(required=True, max_length=50, unique=True)
    email = String(required=True, max_length=100, unique=True)
    full_name = String(max_length=100)
    department = String(max_length=100)
    role = String(choices=UserRole, required=True)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(cls, username, email, role, full_name=None, department=None):
        now = datetime.now(UTC)
        return cls(
            username=username,
            email=email,
            role=UserRole.parse(role).value,
            full_name=full_name,
            department=department,
            is_active=True,
            created_at=now,
            updated_at=now,
        )

    @property
    def display_name(self):
        return self.full_name or self.username

    def change_role(self, role):
        self.role = UserRole.parse(role).value
        self.updated_at = datetime.now(UTC)

    def activate(self):
        self.is_active = True
        self.updated_at = datetime.now(UTC)

    def deactivate(self):
        self.is_active = False
        self.updated_at = datetime.now(UTC)
