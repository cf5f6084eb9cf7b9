"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from laundry_queue.services.queue import DailyCapScope
from laundry_queue.services.validation import RoomPolicy

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")
_PLACEHOLDER_URL = "your-project"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str | None = None
    supabase_key: str | None = None
    admin_token: str
    timezone: str = "Europe/Kyiv"
    floors: str = "4,6"
    room_policy: RoomPolicy = RoomPolicy.FLAT
    signup_open_hour: int = 22
    stale_after_hours: int = 12
    max_entries_per_day: int = 2
    daily_cap_scope: DailyCapScope = DailyCapScope.DATE
    local_store_path: str | None = "queue_entries.json"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def uses_supabase(self) -> bool:
        """Return whether a real Supabase project is configured."""
        url = (self.supabase_url or "").strip()
        key = (self.supabase_key or "").strip()
        return bool(url and key) and _PLACEHOLDER_URL not in url


def parse_floors(raw: str) -> tuple[int, ...]:
    """Parse the comma-separated list of floors that have a queue."""
    floors: list[int] = []
    for chunk in raw.split(","):
        value = chunk.strip()
        if value.isdigit() and int(value) not in floors:
            floors.append(int(value))
    if not floors:
        raise ValueError(f"No floors configured in {raw!r}")
    return tuple(floors)
