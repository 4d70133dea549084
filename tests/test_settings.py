"""Tests for the settings persistence layer."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from targetflow.languages import SUPPORTED_LANGUAGE_IDS
from targetflow.services.settings import Settings, SettingsStore


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "TARGETFLOW_LOG_LEVEL",
        "TARGETFLOW_DEBUG_LOGGING",
        "TARGETFLOW_VALIDATE_SELECTIONS",
        "TARGETFLOW_TELEMETRY_OPT_IN",
    ):
        monkeypatch.delenv(name, raising=False)


def test_load_returns_defaults_when_file_missing(tmp_path: Path) -> None:
    store = SettingsStore(tmp_path / "settings.json")

    settings = store.load()

    assert settings == Settings()
    assert settings.supported_languages == list(SUPPORTED_LANGUAGE_IDS)


def test_save_and_load_roundtrip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "settings.json"
    original = Settings(
        log_level="WARNING",
        validate_selections=False,
        telemetry_opt_in=True,
        supported_languages=["python", "markdown"],
        metadata={"env": "dev"},
    )

    SettingsStore(path).save(original)
    reloaded = SettingsStore(path).load()

    assert reloaded == original
    assert json.loads(path.read_text(encoding="utf-8"))["version"] == 1


def test_unknown_keys_are_ignored(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"debug_logging": True, "api_key": "nope"}), encoding="utf-8")

    settings = SettingsStore(path).load()

    assert settings.debug_logging is True
    assert settings.effective_log_level == "DEBUG"


def test_invalid_json_falls_back_to_defaults(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")

    with caplog.at_level("WARNING"):
        settings = SettingsStore(path).load()

    assert settings == Settings()
    assert "not valid JSON" in caplog.text


def test_overrides_and_env_take_precedence(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    SettingsStore(path).save(Settings(log_level="ERROR"))
    monkeypatch.setenv("TARGETFLOW_VALIDATE_SELECTIONS", "off")
    monkeypatch.setenv("TARGETFLOW_LOG_LEVEL", "DEBUG")

    settings = SettingsStore(path).load(overrides={"log_level": "INFO", "telemetry_opt_in": True, "bogus": 1})

    assert settings.log_level == "DEBUG"
    assert settings.telemetry_opt_in is True
    assert settings.validate_selections is False
