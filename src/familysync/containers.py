"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import Client, ClientOptions, create_client

from familysync.adapters.functions_client import HttpxFunctionsClient
from familysync.adapters.openai_text_client import OpenAITextClient
from familysync.adapters.supabase_account_admin import SupabaseAccountAdmin
from familysync.adapters.supabase_activity_repository import (
    SupabaseActivityRepository,
)
from familysync.adapters.supabase_auth_gateway import SupabaseAuthGateway
from familysync.adapters.supabase_chore_repository import SupabaseChoreRepository
from familysync.adapters.supabase_meal_plan_repository import (
    SupabaseMealPlanRepository,
)
from familysync.adapters.supabase_profile_repository import SupabaseProfileRepository
from familysync.adapters.supabase_shopping_list_repository import (
    SupabaseShoppingListRepository,
)
from familysync.config import Settings, resolve_functions_url
from familysync.services.activities import ActivityService
from familysync.services.auth import AuthService
from familysync.services.chores import ChoreService
from familysync.services.dispatch import RoleDispatcher
from familysync.services.family import FamilyService
from familysync.services.functions import GenerationAdapter
from familysync.services.generation import GenerationService
from familysync.services.meal_plans import MealPlanService
from familysync.services.profiles import ProfileService
from familysync.services.provisioning import MemberProvisioningService
from familysync.services.sessions import SessionStore
from familysync.services.shopping_lists import ShoppingListService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_store: SessionStore
    auth_service: AuthService
    profile_service: ProfileService
    role_dispatcher: RoleDispatcher
    chore_service: ChoreService
    activity_service: ActivityService
    meal_plan_service: MealPlanService
    shopping_list_service: ShoppingListService
    family_service: FamilyService
    generation_service: GenerationService
    provisioning_service: MemberProvisioningService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )

    def anon_client() -> Client:
        return create_client(
            resolved_settings.supabase_url,
            resolved_settings.supabase_anon_key,
            options=ClientOptions(auto_refresh_token=False, persist_session=False),
        )

    profile_repository = SupabaseProfileRepository(supabase_client)
    meal_plan_repository = SupabaseMealPlanRepository(supabase_client)
    session_store = SessionStore(resolved_settings.session_cache_ttl_seconds)
    auth_service = AuthService(
        gateway=SupabaseAuthGateway(supabase_client, client_factory=anon_client),
        store=session_store,
    )
    profile_service = ProfileService(profile_repository)
    functions_client = HttpxFunctionsClient.create(
        base_url=resolve_functions_url(resolved_settings),
        api_key=resolved_settings.supabase_anon_key,
        timeout=resolved_settings.functions_timeout_seconds,
    )
    generation_adapter = GenerationAdapter(functions_client)
    openai_client = OpenAITextClient.create(resolved_settings.openai_api_key)
    generation_service = GenerationService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )

    async def close_resources() -> None:
        await functions_client.close()
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        session_store=session_store,
        auth_service=auth_service,
        profile_service=profile_service,
        role_dispatcher=RoleDispatcher(auth_service, profile_service),
        chore_service=ChoreService(
            SupabaseChoreRepository(supabase_client), profile_service
        ),
        activity_service=ActivityService(
            SupabaseActivityRepository(supabase_client), profile_service
        ),
        meal_plan_service=MealPlanService(
            meal_plan_repository, profile_service, generation_adapter
        ),
        shopping_list_service=ShoppingListService(
            SupabaseShoppingListRepository(supabase_client),
            meal_plan_repository,
            profile_service,
            generation_adapter,
        ),
        family_service=FamilyService(profile_service, functions_client),
        generation_service=generation_service,
        provisioning_service=MemberProvisioningService(
            SupabaseAccountAdmin(supabase_client), profile_repository
        ),
        close_resources=close_resources,
    )
