"""Domain models for scheduled activities."""

from dataclasses import dataclass
from datetime import date, time
from uuid import UUID


@dataclass(frozen=True)
class Activity:
    """A scheduled activity for a child, optionally with a driver."""

    id: UUID
    title: str
    child_id: UUID | None
    date: date
    time: time
    location: str | None = None
    assigned_to_driver_id: UUID | None = None
    child_name: str | None = None
    driver_name: str | None = None


@dataclass(frozen=True)
class NewActivity:
    """Fields submitted from the activity form."""

    title: str
    child_id: UUID
    date: date
    time: time
    location: str | None = None
    assigned_to_driver_id: UUID | None = None
