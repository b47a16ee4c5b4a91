"""Activity scheduling for children and drivers."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID

from familysync.domain.activities import Activity, NewActivity
from familysync.domain.errors import FamilyLookupError
from familysync.domain.profiles import Profile, Role
from familysync.services.fetching import (
    collect_section,
    fetch_section,
    surface_fetch_errors,
)
from familysync.services.profiles import ProfileService

logger = logging.getLogger(__name__)


class ActivityRepository(Protocol):
    """Persistence interface for child activities."""

    def list_family_activities(self, family_id: UUID) -> list[Activity]:
        """Return a family's activities ordered by date then time."""

    def list_driver_activities(self, driver_id: UUID) -> list[Activity]:
        """Return activities assigned to a driver ordered by date then time."""

    def create_activity(self, family_id: UUID, activity: NewActivity) -> Activity:
        """Insert an activity and return it."""


@dataclass
class ActivityBoard:
    children: list[Profile] = field(default_factory=list)
    drivers: list[Profile] = field(default_factory=list)
    activities: list[Activity] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


@dataclass
class DriverSchedule:
    activities: list[Activity] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


@dataclass
class ActivityService:
    """Application service behind the activity planner and driver dashboard."""

    repository: ActivityRepository
    profile_service: ProfileService

    async def load_board(self, user_id: UUID) -> ActivityBoard:
        """Fetch children, drivers and activities; a failed section is reported."""
        board = ActivityBoard()
        try:
            family_id = await asyncio.to_thread(
                self.profile_service.require_family_id, user_id
            )
        except FamilyLookupError as exc:
            board.errors.append(str(exc))
            return board
        children, drivers, activities = await asyncio.gather(
            asyncio.to_thread(
                self.profile_service.list_members, family_id, Role.CHILD
            ),
            asyncio.to_thread(
                self.profile_service.list_members, family_id, Role.DRIVER
            ),
            asyncio.to_thread(self.repository.list_family_activities, family_id),
            return_exceptions=True,
        )
        board.children = collect_section(
            board.errors, "Failed to fetch children.", children
        )
        board.drivers = collect_section(
            board.errors, "Failed to fetch drivers.", drivers
        )
        board.activities = collect_section(
            board.errors, "Failed to fetch activities.", activities
        )
        return board

    async def add_activity(self, user_id: UUID, activity: NewActivity) -> ActivityBoard:
        """Insert one activity for the user's family and return the refreshed board."""
        family_id = await asyncio.to_thread(
            self.profile_service.require_family_id, user_id
        )
        await asyncio.to_thread(
            self.profile_service.require_member,
            family_id,
            activity.child_id,
            Role.CHILD,
        )
        if activity.assigned_to_driver_id is not None:
            await asyncio.to_thread(
                self.profile_service.require_member,
                family_id,
                activity.assigned_to_driver_id,
                Role.DRIVER,
            )
        with surface_fetch_errors("Failed to add activity."):
            created = await asyncio.to_thread(
                self.repository.create_activity, family_id, activity
            )
        logger.info(
            "Activity created",
            extra={"activity_id": str(created.id), "family_id": str(family_id)},
        )
        return await self.load_board(user_id)

    def load_driver_schedule(self, driver_id: UUID) -> DriverSchedule:
        """Return the activities the driver is assigned to."""
        schedule = DriverSchedule()
        schedule.activities = fetch_section(
            schedule.errors,
            "Failed to fetch your schedule.",
            lambda: self.repository.list_driver_activities(driver_id),
        )
        return schedule
