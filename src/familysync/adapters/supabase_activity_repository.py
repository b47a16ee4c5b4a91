"""Supabase repository for child activities."""

from dataclasses import dataclass
from datetime import date, time
from uuid import UUID

from supabase import Client

from familysync.domain.activities import Activity, NewActivity
from familysync.services.activities import ActivityRepository

_ACTIVITY_COLUMNS = (
    "id, title, child_id, assigned_to_driver_id, date, time, location, "
    "child:profiles!child_id(full_name), "
    "driver:profiles!assigned_to_driver_id(full_name)"
)


@dataclass
class SupabaseActivityRepository(ActivityRepository):
    """Supabase-backed activity repository; ordering is done by the query."""

    client: Client

    def list_family_activities(self, family_id: UUID) -> list[Activity]:
        """Return a family's activities ordered by date then time."""
        response = (
            self.client.table("child_activities")
            .select(_ACTIVITY_COLUMNS)
            .eq("family_id", str(family_id))
            .order("date")
            .order("time")
            .execute()
        )
        return [_parse_activity(row) for row in response.data or []]

    def list_driver_activities(self, driver_id: UUID) -> list[Activity]:
        """Return a driver's activities ordered by date then time."""
        response = (
            self.client.table("child_activities")
            .select(_ACTIVITY_COLUMNS)
            .eq("assigned_to_driver_id", str(driver_id))
            .order("date")
            .order("time")
            .execute()
        )
        return [_parse_activity(row) for row in response.data or []]

    def create_activity(self, family_id: UUID, activity: NewActivity) -> Activity:
        """Insert an activity and return it."""
        response = (
            self.client.table("child_activities")
            .insert(
                {
                    "title": activity.title,
                    "child_id": str(activity.child_id),
                    "date": activity.date.isoformat(),
                    "time": activity.time.isoformat(),
                    "location": activity.location,
                    "assigned_to_driver_id": (
                        str(activity.assigned_to_driver_id)
                        if activity.assigned_to_driver_id
                        else None
                    ),
                    "family_id": str(family_id),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create activity")
        return _parse_activity(response.data[0])


def _parse_activity(row: dict[str, object]) -> Activity:
    child = row.get("child")
    driver = row.get("driver")
    child_id = row.get("child_id")
    driver_id = row.get("assigned_to_driver_id")
    return Activity(
        id=UUID(str(row["id"])),
        title=str(row.get("title") or ""),
        child_id=UUID(str(child_id)) if child_id else None,
        date=date.fromisoformat(str(row["date"])),
        time=time.fromisoformat(str(row["time"])),
        location=row.get("location"),
        assigned_to_driver_id=UUID(str(driver_id)) if driver_id else None,
        child_name=child.get("full_name") if isinstance(child, dict) else None,
        driver_name=driver.get("full_name") if isinstance(driver, dict) else None,
    )
