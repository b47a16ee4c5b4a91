"""Chore assignment and completion."""

import logging
from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID

from familysync.domain.chores import Chore, NewChore, total_points
from familysync.domain.errors import ChoreTransitionError, FamilyLookupError
from familysync.domain.profiles import Profile, Role
from familysync.services.fetching import fetch_section, surface_fetch_errors
from familysync.services.profiles import ProfileService

logger = logging.getLogger(__name__)


class ChoreRepository(Protocol):
    """Persistence interface for chores."""

    def list_family_chores(self, family_id: UUID) -> list[Chore]:
        """Return a family's chores, newest first."""

    def list_child_chores(self, child_id: UUID) -> list[Chore]:
        """Return chores assigned to a child, newest first."""

    def get_chore(self, chore_id: UUID) -> Chore | None:
        """Return a chore by id, if present."""

    def create_chore(self, family_id: UUID, chore: NewChore) -> Chore:
        """Insert a chore and return it; status is left to the backend."""

    def mark_completed(self, chore_id: UUID) -> None:
        """Set a chore's status to completed."""


@dataclass
class ChoreBoard:
    children: list[Profile] = field(default_factory=list)
    chores: list[Chore] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


@dataclass
class ChildChoreBoard:
    pending: list[Chore] = field(default_factory=list)
    completed: list[Chore] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def total_points(self) -> int:
        return total_points(self.completed)


@dataclass
class ChoreService:
    """Application service behind the chore manager and child dashboard."""

    repository: ChoreRepository
    profile_service: ProfileService

    def load_board(self, user_id: UUID) -> ChoreBoard:
        """Fetch children and chores for the user's family."""
        board = ChoreBoard()
        try:
            family_id = self.profile_service.require_family_id(user_id)
        except FamilyLookupError as exc:
            board.errors.append(str(exc))
            return board
        board.children = fetch_section(
            board.errors,
            "Failed to fetch children.",
            lambda: self.profile_service.list_members(family_id, Role.CHILD),
        )
        board.chores = fetch_section(
            board.errors,
            "Failed to fetch chores.",
            lambda: self.repository.list_family_chores(family_id),
        )
        return board

    def add_chore(self, user_id: UUID, chore: NewChore) -> ChoreBoard:
        """Insert one chore for the user's family and return the refreshed board."""
        family_id = self.profile_service.require_family_id(user_id)
        self.profile_service.require_member(
            family_id, chore.assigned_to_child_id, Role.CHILD
        )
        with surface_fetch_errors("Failed to add chore."):
            created = self.repository.create_chore(family_id, chore)
        logger.info(
            "Chore created",
            extra={"chore_id": str(created.id), "family_id": str(family_id)},
        )
        return self.load_board(user_id)

    def load_child_board(self, child_id: UUID) -> ChildChoreBoard:
        """Fetch a child's chores split by status."""
        board = ChildChoreBoard()
        chores = fetch_section(
            board.errors,
            "Failed to fetch your chores.",
            lambda: self.repository.list_child_chores(child_id),
        )
        for chore in chores:
            if chore.is_completed:
                board.completed.append(chore)
            else:
                board.pending.append(chore)
        return board

    def complete_chore(self, child_id: UUID, chore_id: UUID) -> ChildChoreBoard:
        """Move one of the child's pending chores to completed."""
        with surface_fetch_errors("Failed to fetch chore."):
            chore = self.repository.get_chore(chore_id)
        if chore is None or chore.assigned_to_child_id != child_id:
            raise ChoreTransitionError("This chore is not assigned to you.")
        if chore.is_completed:
            raise ChoreTransitionError("This chore is already completed.")
        with surface_fetch_errors("Failed to update chore."):
            self.repository.mark_completed(chore_id)
        logger.info("Chore completed", extra={"chore_id": str(chore_id)})
        return self.load_child_board(child_id)
