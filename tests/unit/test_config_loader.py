"""Tests for the profile-based settings loader."""

from __future__ import annotations

from zoneinfo import ZoneInfo

import pytest

from backend.app.config import load_settings

pytestmark = [pytest.mark.config]


@pytest.fixture(autouse=True)
def _clear_database_url(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)


def _write_profile(directory, name, body):
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{name}.yaml"
    path.write_text(body, encoding="utf-8")
    return path


def test_load_settings_falls_back_to_defaults(monkeypatch, tmp_path):
    """Missing profiles should default to the built-in configuration."""

    monkeypatch.setenv("GROWTHLOG_CONFIG_PROFILE", "missing")
    monkeypatch.setenv("GROWTHLOG_CONFIG_DIR", str(tmp_path))
    settings = load_settings()

    assert settings.environment == "dev"
    assert settings.database_url.endswith("growth_log")
    assert settings.entries.max_text_length == 500
    assert (settings.entries.min_effort, settings.entries.max_effort) == (1, 5)
    assert settings.timeline.page_size == 20
    assert settings.timeline.max_page_size == 100
    assert settings.timeline.tzinfo == ZoneInfo("UTC")
    assert settings.logging.level == "INFO"


def test_load_settings_reads_yaml_profile(monkeypatch, tmp_path):
    profiles_dir = tmp_path / "profiles"
    _write_profile(
        profiles_dir,
        "staging",
        """
environment: staging

database:
  url: "postgresql+psycopg://postgres:pw@db:5432/custom"

entries:
  max_text_length: 280
  max_effort: 10

timeline:
  page_size: 5
  max_page_size: 50
  timezone: Asia/Tokyo

logging:
  level: debug
""",
    )
    monkeypatch.setenv("GROWTHLOG_CONFIG_PROFILE", "staging")
    monkeypatch.setenv("GROWTHLOG_CONFIG_DIR", str(profiles_dir))

    settings = load_settings()

    assert settings.environment == "staging"
    assert settings.database_url.endswith("custom")
    assert settings.entries.max_text_length == 280
    assert settings.entries.min_effort == 1
    assert settings.entries.max_effort == 10
    assert settings.timeline.page_size == 5
    assert settings.timeline.max_page_size == 50
    assert settings.timeline.tzinfo == ZoneInfo("Asia/Tokyo")
    assert settings.logging.level == "DEBUG"
    assert settings.raw["environment"] == "staging"


def test_explicit_arguments_override_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("GROWTHLOG_CONFIG_PROFILE", "missing")
    monkeypatch.setenv("GROWTHLOG_CONFIG_DIR", str(tmp_path / "elsewhere"))
    _write_profile(tmp_path / "mine", "local", "environment: local\n")

    settings = load_settings("local", tmp_path / "mine")

    assert settings.environment == "local"


def test_database_url_env_overrides_profile(monkeypatch, tmp_path):
    _write_profile(
        tmp_path,
        "dev",
        'database:\n  url: "sqlite+pysqlite:///profile.db"\n',
    )
    monkeypatch.setenv("DATABASE_URL", "sqlite+pysqlite:///override.db")

    settings = load_settings("dev", tmp_path)

    assert settings.database_url == "sqlite+pysqlite:///override.db"


@pytest.mark.parametrize(
    "body, message",
    [
        ("entries:\n  min_effort: 4\n  max_effort: 2\n", "min_effort"),
        ("timeline:\n  page_size: 0\n", "page_size"),
        ("timeline:\n  page_size: 30\n  max_page_size: 10\n", "page_size"),
        ("timeline:\n  timezone: Mars/Olympus\n", "timezone"),
        ("- not\n- a mapping\n", "mapping"),
    ],
)
def test_invalid_profiles_raise(tmp_path, body, message):
    _write_profile(tmp_path, "broken", body)

    with pytest.raises(RuntimeError) as excinfo:
        load_settings("broken", tmp_path)

    assert message in str(excinfo.value)


def test_malformed_yaml_is_reported(tmp_path):
    _write_profile(tmp_path, "broken", "timeline: [unclosed\n")

    with pytest.raises(RuntimeError, match="Failed to parse"):
        load_settings("broken", tmp_path)
