"""Domain models for profiles and families."""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from familysync.domain.errors import UnknownRoleError


class Role(Enum):
    """Closed set of household roles."""

    ADMIN = "admin"
    PARENT = "parent"
    CHILD = "child"
    COOK = "cook"
    DRIVER = "driver"

    @classmethod
    def parse(cls, value: object) -> "Role":
        """Return the role for a raw value or raise UnknownRoleError."""
        try:
            return cls(value)
        except ValueError as exc:
            raise UnknownRoleError(value) from exc


SELF_REGISTERING_ROLES = frozenset({Role.PARENT, Role.ADMIN})
INVITABLE_ROLES = (Role.CHILD, Role.PARENT, Role.COOK, Role.DRIVER)


def manages_family(raw_role: str | None) -> bool:
    """Return True for roles that own a family and may invite members."""
    return any(role.value == raw_role for role in SELF_REGISTERING_ROLES)


@dataclass(frozen=True)
class Profile:
    """A user's role and family membership."""

    id: UUID
    full_name: str | None
    role: str | None
    family_id: UUID | None


@dataclass(frozen=True)
class Family:
    """The grouping that chores, activities and meal plans are scoped to."""

    id: UUID
    name: str
