"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from meal_dashboard.domain.meals import MealWindow, parse_meal_windows
from meal_dashboard.domain.records import FieldMapping

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_key: str
    records_table: str = "unodari_token"
    devices: str = "uno_1,uno_2,uno_3"
    meal_windows: str = "breakfast=6-9,lunch=11-15,dinner=17-22"
    hour_offset: int = 0
    timezone: str | None = None
    field_mapping: FieldMapping = FieldMapping.TOTAL
    refresh_interval_seconds: float = 10.0
    highlight_interval_seconds: float = 60.0
    bindings: str | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def device_ids(self) -> list[str]:
        return parse_devices(self.devices)

    def windows(self) -> tuple[MealWindow, ...]:
        return parse_meal_windows(self.meal_windows)

    def binding_keys(self) -> list[str] | None:
        """Return the selector keys present on the page, if restricted."""
        if self.bindings is None:
            return None
        return [key.strip() for key in self.bindings.split(",") if key.strip()]


def parse_devices(raw: str) -> list[str]:
    """Parse device identifiers from env, keeping order and dropping repeats."""
    devices: list[str] = []
    for chunk in raw.split(","):
        value = chunk.strip()
        if value and value not in devices:
            devices.append(value)
    if not devices:
        raise ValueError("At least one device id is required")
    return devices
