"""Supabase repository for chores."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from familysync.domain.chores import Chore, ChoreStatus, NewChore
from familysync.services.chores import ChoreRepository

_CHORE_COLUMNS = (
    "id, task, assigned_to_child_id, due_date, status, reward_points, created_at, "
    "child:profiles!assigned_to_child_id(full_name)"
)


@dataclass
class SupabaseChoreRepository(ChoreRepository):
    """Supabase-backed chore repository."""

    client: Client

    def list_family_chores(self, family_id: UUID) -> list[Chore]:
        """Return a family's chores, newest first."""
        response = (
            self.client.table("chores")
            .select(_CHORE_COLUMNS)
            .eq("family_id", str(family_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_chore(row) for row in response.data or []]

    def list_child_chores(self, child_id: UUID) -> list[Chore]:
        """Return chores assigned to a child, newest first."""
        response = (
            self.client.table("chores")
            .select(_CHORE_COLUMNS)
            .eq("assigned_to_child_id", str(child_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_chore(row) for row in response.data or []]

    def get_chore(self, chore_id: UUID) -> Chore | None:
        """Return a chore by id, if present."""
        response = (
            self.client.table("chores")
            .select(_CHORE_COLUMNS)
            .eq("id", str(chore_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_chore(response.data[0])

    def create_chore(self, family_id: UUID, chore: NewChore) -> Chore:
        """Insert a chore; status is filled in by the table default."""
        payload: dict[str, object] = {
            "task": chore.task,
            "assigned_to_child_id": str(chore.assigned_to_child_id),
            "due_date": chore.due_date.isoformat() if chore.due_date else None,
            "family_id": str(family_id),
        }
        if chore.reward_points is not None:
            payload["reward_points"] = chore.reward_points
        response = self.client.table("chores").insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create chore")
        return _parse_chore(response.data[0])

    def mark_completed(self, chore_id: UUID) -> None:
        """Set a chore's status to completed."""
        self.client.table("chores").update(
            {"status": ChoreStatus.COMPLETED.value}
        ).eq("id", str(chore_id)).execute()


def _parse_chore(row: dict[str, object]) -> Chore:
    child = row.get("child")
    child_id = row.get("assigned_to_child_id")
    due_date = row.get("due_date")
    created_at = row.get("created_at")
    return Chore(
        id=UUID(str(row["id"])),
        task=str(row.get("task") or ""),
        assigned_to_child_id=UUID(str(child_id)) if child_id else None,
        status=str(row.get("status") or ChoreStatus.PENDING.value),
        reward_points=row.get("reward_points"),
        due_date=(
            date.fromisoformat(due_date)
            if isinstance(due_date, str) and due_date
            else None
        ),
        child_name=child.get("full_name") if isinstance(child, dict) else None,
        created_at=(
            datetime.fromisoformat(created_at)
            if isinstance(created_at, str) and created_at
            else None
        ),
    )
