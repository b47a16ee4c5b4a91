"""Domain models for chores."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from uuid import UUID

DEFAULT_REWARD_POINTS = 10


class ChoreStatus(Enum):
    """Chore lifecycle states; pending moves to completed only."""

    PENDING = "pending"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Chore:
    """A chore assigned to a child."""

    id: UUID
    task: str
    assigned_to_child_id: UUID | None
    status: str
    reward_points: int | None = None
    due_date: date | None = None
    child_name: str | None = None
    created_at: datetime | None = None

    @property
    def points(self) -> int:
        return self.reward_points or DEFAULT_REWARD_POINTS

    @property
    def is_completed(self) -> bool:
        return self.status == ChoreStatus.COMPLETED.value


@dataclass(frozen=True)
class NewChore:
    """Fields submitted from the chore form."""

    task: str
    assigned_to_child_id: UUID
    due_date: date | None = None
    reward_points: int | None = None


def total_points(chores: list[Chore]) -> int:
    """Sum reward points over completed chores."""
    return sum(chore.points for chore in chores if chore.is_completed)
