"""Unit tests covering environment variable and config file overrides for settings."""

from __future__ import annotations

import textwrap

import pytest
from pydantic import ValidationError

from tsunageru.settings.config import PROJECT_ROOT, Settings, get_settings, reload_settings


@pytest.fixture(autouse=True)
def _fresh_settings_cache(monkeypatch: pytest.MonkeyPatch):
    """Drop cached settings and any ambient overrides around each test."""

    for name in (
        "TSUNAGERU_ENV",
        "TSUNAGERU_SETTINGS_FILE",
        "TSUNAGERU_DISPLAY__UNKNOWN_PLACEHOLDER",
        "TSUNAGERU_SCANNING__STOP_AFTER_FIRST",
        "TSUNAGERU_RUNTIME__LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults_come_from_bundled_config() -> None:
    settings = reload_settings(env="test")

    assert settings.env == "test"
    assert settings.project_root == PROJECT_ROOT
    assert settings.log_level == "INFO"
    assert settings.display.unknown_placeholder == "unknown"
    assert settings.display.list_separator == "、"
    assert settings.spatial.zone_label_template == "Zone {number}"
    assert settings.scanning.stop_after_first is True
    assert settings.observability.structured_logging is True


def test_display_placeholder_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TSUNAGERU_DISPLAY__UNKNOWN_PLACEHOLDER", "不明")

    settings = reload_settings(env="test")
    assert settings.display.unknown_placeholder == "不明"


def test_scanning_and_log_level_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """Environment variables win over the bundled TOML defaults."""

    monkeypatch.setenv("TSUNAGERU_SCANNING__STOP_AFTER_FIRST", "false")
    monkeypatch.setenv("TSUNAGERU_RUNTIME__LOG_LEVEL", "DEBUG")

    settings = reload_settings(env="test")
    assert settings.scanning.stop_after_first is False
    assert settings.log_level == "DEBUG"


def test_settings_file_env_var_takes_precedence(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    override = tmp_path / "field.toml"
    override.write_text(
        textwrap.dedent(
            """
            [display]
            unknown_placeholder = "未確認"

            [spatial]
            zone_label_template = "エリア{number}"
            """
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv("TSUNAGERU_SETTINGS_FILE", str(override))

    settings = reload_settings(env="test")
    assert settings.config_files[0] == override
    assert settings.display.unknown_placeholder == "未確認"
    assert settings.spatial.zone_label_template == "エリア{number}"
    # Keys absent from the override still fall through to the bundled defaults.
    assert settings.display.list_separator == "、"


def test_local_env_disables_structured_logging() -> None:
    settings = Settings(env="local")

    assert settings.is_local
    assert settings.observability.structured_logging is False


def test_get_settings_is_cached_until_reload() -> None:
    first = get_settings("test")
    assert get_settings("test") is first
    assert reload_settings("test") is not first


@pytest.mark.parametrize(
    "section, values",
    [
        ("spatial", {"zone_label_template": "Zone"}),
        ("display", {"unknown_placeholder": "   "}),
    ],
)
def test_invalid_section_values_are_rejected(section: str, values: dict) -> None:
    with pytest.raises(ValidationError):
        Settings(env="test", **{section: values})
