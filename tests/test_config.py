"""Tests for configuration parsing."""

import pytest

from meal_dashboard.config import Settings, parse_devices
from meal_dashboard.domain.meals import DEFAULT_MEAL_WINDOWS
from meal_dashboard.domain.records import FieldMapping


def test_settings_defaults(settings) -> None:
    assert settings.device_ids() == ["uno_1", "uno_2", "uno_3"]
    assert settings.windows() == DEFAULT_MEAL_WINDOWS
    assert settings.field_mapping is FieldMapping.TOTAL
    assert settings.records_table == "unodari_token"
    assert settings.binding_keys() is None
    assert settings.timezone is None


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SUPABASE_KEY", "header.payload.signature")
    monkeypatch.setenv("DEVICES", "uno_1, uno_2")
    monkeypatch.setenv("HOUR_OFFSET", "12")
    monkeypatch.setenv("FIELD_MAPPING", "combined")
    monkeypatch.setenv("TIMEZONE", "UTC")
    monkeypatch.setenv("BINDINGS", "grand-total, total:lunch")

    settings = Settings()

    assert settings.device_ids() == ["uno_1", "uno_2"]
    assert settings.hour_offset == 12
    assert settings.timezone == "UTC"
    assert settings.field_mapping is FieldMapping.COMBINED
    assert settings.binding_keys() == ["grand-total", "total:lunch"]


def test_parse_devices_drops_blanks_and_repeats() -> None:
    assert parse_devices("uno_1,,uno_2, uno_1") == ["uno_1", "uno_2"]


def test_parse_devices_requires_one() -> None:
    with pytest.raises(ValueError):
        parse_devices(" , ")
