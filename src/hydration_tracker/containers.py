"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from hydration_tracker.adapters.supabase_intake_repository import (
    SupabaseIntakeRepository,
)
from hydration_tracker.adapters.supabase_preferences_repository import (
    SupabasePreferencesRepository,
)
from hydration_tracker.adapters.tips_client import HttpxTipsClient
from hydration_tracker.app_logging import configure_logging
from hydration_tracker.config import Settings
from hydration_tracker.services.coordinator import HydrationCoordinator
from hydration_tracker.services.intake import IntakeStore
from hydration_tracker.services.preferences import PreferencesStore
from hydration_tracker.services.tips import TipsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    intake_store: IntakeStore
    preferences_store: PreferencesStore
    tips_service: TipsService
    coordinator: HydrationCoordinator
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    configure_logging()
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    intake_store = IntakeStore(SupabaseIntakeRepository(supabase_client))
    preferences_store = PreferencesStore(SupabasePreferencesRepository(supabase_client))
    tips_client = HttpxTipsClient.create(
        url=resolved_settings.tips_url,
        timeout_seconds=resolved_settings.tips_timeout_seconds,
    )
    tips_service = TipsService(tips_client)
    coordinator = HydrationCoordinator(
        intake_store=intake_store,
        preferences_store=preferences_store,
        tips_service=tips_service,
        grace_seconds=resolved_settings.state_grace_seconds,
    )

    async def close_resources() -> None:
        await coordinator.close()
        intake_store.close()
        preferences_store.close()
        tips_service.close()
        await tips_client.close()

    return AppContainer(
        settings=resolved_settings,
        intake_store=intake_store,
        preferences_store=preferences_store,
        tips_service=tips_service,
        coordinator=coordinator,
        close_resources=close_resources,
    )
