"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import AsyncClient

from liquidtrack.adapters.openai_advice_client import OpenAIAdviceClient
from liquidtrack.adapters.supabase_auth_provider import SupabaseAuthProvider
from liquidtrack.adapters.supabase_issue_store import SupabaseIssueStore
from liquidtrack.config import Settings
from liquidtrack.services.advice import AdviceService
from liquidtrack.services.auth import AuthGate
from liquidtrack.services.sync import IssueSynchronizer


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    advice_service: AdviceService
    synchronizer: IssueSynchronizer
    auth_gate: AuthGate
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container.

    Without Supabase credentials no client is created and every store or
    auth call fails fast; without an OpenAI key advice falls back to text.
    """
    resolved_settings = settings or Settings()
    supabase_client = (
        AsyncClient(resolved_settings.supabase_url, resolved_settings.supabase_anon_key)
        if resolved_settings.store_configured
        else None
    )
    advice_client = (
        OpenAIAdviceClient.create(
            api_key=resolved_settings.openai_api_key,
            model=resolved_settings.openai_model,
            reasoning_effort=resolved_settings.openai_reasoning_effort,
            store=resolved_settings.openai_store,
        )
        if resolved_settings.advice_configured
        else None
    )
    advice_service = AdviceService(advice_client)
    synchronizer = IssueSynchronizer(
        store=SupabaseIssueStore(supabase_client),
        advice_service=advice_service,
    )
    auth_gate = AuthGate(
        provider=SupabaseAuthProvider(supabase_client),
        synchronizer=synchronizer,
    )

    async def close_resources() -> None:
        await auth_gate.stop()
        if advice_client is not None:
            await advice_client.close()

    return AppContainer(
        settings=resolved_settings,
        advice_service=advice_service,
        synchronizer=synchronizer,
        auth_gate=auth_gate,
        close_resources=close_resources,
    )
