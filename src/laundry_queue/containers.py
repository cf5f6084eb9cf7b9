"""Dependency container wiring for the application."""

import logging
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

from supabase import create_client

from laundry_queue.adapters.local_queue_repository import LocalQueueRepository
from laundry_queue.adapters.supabase_queue_repository import SupabaseQueueRepository
from laundry_queue.config import Settings, parse_floors
from laundry_queue.services.queue import QueueRepository, QueueService

_logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    queue_service: QueueService


def build_queue_repository(settings: Settings) -> QueueRepository:
    """Select the storage backend for queue entries."""
    if settings.uses_supabase:
        client = create_client(settings.supabase_url, settings.supabase_key)
        return SupabaseQueueRepository(client)
    _logger.warning("Supabase is not configured, using the local queue store")
    path = Path(settings.local_store_path) if settings.local_store_path else None
    return LocalQueueRepository(path)


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    queue_service = QueueService(
        repository=build_queue_repository(resolved_settings),
        timezone=ZoneInfo(resolved_settings.timezone),
        floors=parse_floors(resolved_settings.floors),
        room_policy=resolved_settings.room_policy,
        open_hour=resolved_settings.signup_open_hour,
        stale_after=timedelta(hours=resolved_settings.stale_after_hours),
        max_entries_per_day=resolved_settings.max_entries_per_day,
        daily_cap_scope=resolved_settings.daily_cap_scope,
    )

    return AppContainer(
        settings=resolved_settings,
        queue_service=queue_service,
    )
