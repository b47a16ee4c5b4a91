"""Request bodies for screen and auth forms."""

import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class LoginForm(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class SignupForm(LoginForm):
    full_name: str = Field(min_length=1)
    role: Literal["parent", "admin"] = "parent"


class ChoreForm(BaseModel):
    """Chore fields; empty optional inputs are stored as null."""

    task: str = Field(min_length=1)
    assigned_to_child_id: UUID
    due_date: datetime.date | None = None
    reward_points: int | None = None

    @field_validator("due_date", "reward_points", mode="before")
    @classmethod
    def empty_as_none(cls, value: object) -> object:
        return _blank_to_none(value)


class ActivityForm(BaseModel):
    """Activity fields; location and driver are optional."""

    title: str = Field(min_length=1)
    child_id: UUID
    date: datetime.date
    time: datetime.time
    location: str | None = None
    assigned_to_driver_id: UUID | None = None

    @field_validator("location", "assigned_to_driver_id", mode="before")
    @classmethod
    def empty_as_none(cls, value: object) -> object:
        return _blank_to_none(value)


class MealPlanForm(BaseModel):
    preferences: str = Field(min_length=1)
    mood: str | None = None
    assigned_cook_id: UUID | None = None

    @field_validator("mood", "assigned_cook_id", mode="before")
    @classmethod
    def empty_as_none(cls, value: object) -> object:
        return _blank_to_none(value)


class ShoppingListForm(BaseModel):
    budget_mode: bool = False


class InviteForm(BaseModel):
    full_name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)
    role: Literal["child", "parent", "cook", "driver"] = "child"
