"""Route table and dashboard feature links."""

from dataclasses import dataclass
from enum import Enum


class AppRoute(Enum):
    """Every path the application navigates to (single source of truth)."""

    LOGIN = "/login"
    SIGNUP = "/signup"
    DISPATCH = "/dispatch"
    DASHBOARD = "/dashboard"
    MEAL_PLANNER = "/meal-planner"
    SHOPPING_LIST = "/shopping-list"
    ACTIVITY_PLANNER = "/activity-planner"
    CHORE_MANAGEMENT = "/chore-management"
    FAMILY_MANAGEMENT = "/family-management"
    CHILD_DASHBOARD = "/child-dashboard"
    COOK_DASHBOARD = "/cook-dashboard"
    DRIVER_DASHBOARD = "/driver-dashboard"


@dataclass(frozen=True)
class FeatureCard:
    """A link shown on the parent dashboard."""

    route: AppRoute
    title: str
    description: str


DASHBOARD_FEATURES: tuple[FeatureCard, ...] = (
    FeatureCard(
        AppRoute.MEAL_PLANNER, "AI Meal Planner", "Create weekly meal plans with AI."
    ),
    FeatureCard(
        AppRoute.SHOPPING_LIST,
        "Shopping List",
        "Generate your grocery lists instantly.",
    ),
    FeatureCard(
        AppRoute.ACTIVITY_PLANNER, "Activity Planner", "Manage your child's schedule."
    ),
    FeatureCard(
        AppRoute.CHORE_MANAGEMENT, "Chore Manager", "Assign and track family chores."
    ),
    FeatureCard(
        AppRoute.FAMILY_MANAGEMENT,
        "Manage Family",
        "Invite and manage family members.",
    ),
)


def dashboard_features() -> list[dict[str, str]]:
    """Return dashboard links formatted for the screen payload."""
    return [
        {
            "path": card.route.value,
            "title": card.title,
            "description": card.description,
        }
        for card in DASHBOARD_FEATURES
    ]
