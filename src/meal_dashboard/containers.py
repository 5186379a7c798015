"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from meal_dashboard.adapters.supabase_record_store import SupabaseRecordStore
from meal_dashboard.config import Settings
from meal_dashboard.services.clock import SystemClock
from meal_dashboard.services.dashboard import DashboardService
from meal_dashboard.services.scheduler import RefreshScheduler
from meal_dashboard.services.view import DashboardView, default_binding_keys


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    view: DashboardView
    dashboard_service: DashboardService
    scheduler: RefreshScheduler
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    devices = resolved_settings.device_ids()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_key
    )
    store = SupabaseRecordStore(supabase_client, table=resolved_settings.records_table)
    view = DashboardView.from_keys(
        resolved_settings.binding_keys() or default_binding_keys(devices)
    )
    dashboard_service = DashboardService(
        store=store,
        view=view,
        clock=SystemClock(resolved_settings.timezone),
        devices=devices,
        windows=resolved_settings.windows(),
        hour_offset=resolved_settings.hour_offset,
        mapping=resolved_settings.field_mapping,
    )
    scheduler = RefreshScheduler(
        dashboard_service,
        refresh_interval_seconds=resolved_settings.refresh_interval_seconds,
        highlight_interval_seconds=resolved_settings.highlight_interval_seconds,
    )

    async def close_resources() -> None:
        await scheduler.stop()

    return AppContainer(
        settings=resolved_settings,
        view=view,
        dashboard_service=dashboard_service,
        scheduler=scheduler,
        close_resources=close_resources,
    )
