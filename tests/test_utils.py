"""Tests covering the utilities modules."""

from __future__ import annotations

import json
import logging
import logging.handlers
from pathlib import Path

import pytest

from targetflow.services.settings import Settings
from targetflow.utils import logging as logging_utils, telemetry


def test_setup_logging_creates_rotating_file(tmp_path: Path, package_logging: logging.Logger) -> None:
    log_path = logging_utils.setup_logging(level="info", log_dir=tmp_path / "logs", console=False)

    logging.getLogger("targetflow.tests").info("Logging smoke test")
    for handler in package_logging.handlers:
        handler.flush()

    assert log_path == tmp_path / "logs" / "targetflow.log"
    assert "Logging smoke test" in log_path.read_text(encoding="utf-8")
    assert package_logging.level == logging.INFO
    assert not any(
        isinstance(handler, logging.handlers.RotatingFileHandler) for handler in logging.getLogger().handlers
    )


def test_setup_logging_is_idempotent_unless_forced(tmp_path: Path, package_logging: logging.Logger) -> None:
    first = logging_utils.setup_logging(log_dir=tmp_path / "a", console=False)
    again = logging_utils.setup_logging(log_dir=tmp_path / "b", console=False)
    forced = logging_utils.setup_logging(log_dir=tmp_path / "b", console=True, force=True)

    assert again == first
    assert forced == tmp_path / "b" / "targetflow.log"
    kinds = sorted(type(handler).__name__ for handler in package_logging.handlers)
    assert kinds == ["RotatingFileHandler", "StreamHandler"]


def test_configure_from_settings_uses_effective_level(tmp_path: Path, package_logging: logging.Logger) -> None:
    logging_utils.configure_from_settings(
        Settings(log_level="WARNING", debug_logging=True), log_dir=tmp_path, console=False
    )

    assert package_logging.level == logging.DEBUG


def test_resolve_level_rejects_unknown_names() -> None:
    assert logging_utils.resolve_level("debug") == logging.DEBUG
    assert logging_utils.resolve_level(logging.WARNING) == logging.WARNING
    with pytest.raises(ValueError):
        logging_utils.resolve_level("loud")


def test_telemetry_client_flushes_events(tmp_path: Path) -> None:
    storage_dir = tmp_path / "telemetry"
    client = telemetry.TelemetryClient(enabled=True, storage_dir=storage_dir)

    client.track_pipeline_run(stages=("position",), selection_count=2, duration_ms=0.5)
    output_path = client.flush()

    assert output_path == storage_dir / telemetry.TELEMETRY_FILE_NAME
    body = output_path.read_text(encoding="utf-8").strip().splitlines()
    assert len(body) == 1
    event = json.loads(body[0])
    assert event["name"] == "pipeline.run"
    assert event["session_id"] == client.session_id
    assert event["properties"]["stages"] == ["position"]
    assert event["properties"]["selection_count"] == 2
    assert client.pending_events() == 0


def test_disabled_telemetry_buffers_nothing(tmp_path: Path) -> None:
    client = telemetry.TelemetryClient(enabled=False, storage_dir=tmp_path)

    client.track_event("ignored")

    assert client.pending_events() == 0
    assert client.flush() is None


def test_telemetry_enabled_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TARGETFLOW_TELEMETRY", "true")

    assert telemetry.telemetry_enabled(settings=None)
    assert telemetry.telemetry_enabled(Settings(telemetry_opt_in=False))

    monkeypatch.delenv("TARGETFLOW_TELEMETRY")
    assert not telemetry.telemetry_enabled(settings=None)


def test_telemetry_client_from_settings_follows_opt_in(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("TARGETFLOW_TELEMETRY", raising=False)

    assert telemetry.TelemetryClient.from_settings(Settings(telemetry_opt_in=True), storage_dir=tmp_path).enabled
    assert not telemetry.TelemetryClient.from_settings(Settings()).enabled
