"""Opt-in telemetry for pipeline runs, flushed as JSONL."""

from __future__ import annotations

import json
import os
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Sequence

__all__ = ["TELEMETRY_FILE_NAME", "TelemetryClient", "TelemetryEvent", "telemetry_enabled"]

TELEMETRY_FILE_NAME = "pipeline-telemetry.jsonl"
_DEFAULT_TELEMETRY_DIR = Path.home() / ".targetflow" / "telemetry"
_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(slots=True, frozen=True)
class TelemetryEvent:
    name: str
    properties: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_json(self, session_id: str) -> str:
        record = {
            "session_id": session_id,
            "name": self.name,
            "timestamp": self.timestamp,
            "properties": self.properties,
        }
        return json.dumps(record, default=_encode, ensure_ascii=False)


@dataclass(slots=True)
class TelemetryClient:
    """Buffer pipeline events in memory and append them to a JSONL file.

    Nothing is recorded unless ``enabled`` is set. The buffer is written out
    once ``max_buffer`` events accumulate or when :meth:`flush` is called.
    """

    enabled: bool = False
    storage_dir: Path | str | None = None
    max_buffer: int = 32
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    _buffer: list[TelemetryEvent] = field(default_factory=list, init=False, repr=False)

    @classmethod
    def from_settings(cls, settings: Any, *, storage_dir: Path | str | None = None) -> TelemetryClient:
        return cls(enabled=telemetry_enabled(settings), storage_dir=storage_dir)

    @property
    def output_path(self) -> Path:
        return _resolve_storage_dir(self.storage_dir) / TELEMETRY_FILE_NAME

    def track_event(self, name: str, **props: Any) -> None:
        if not self.enabled:
            return
        self._buffer.append(TelemetryEvent(name=name, properties=props))
        if len(self._buffer) >= self.max_buffer:
            self.flush()

    def track_pipeline_run(
        self,
        *,
        stages: Sequence[str],
        selection_count: int,
        duration_ms: float,
        outcome: str = "success",
        reason: str | None = None,
    ) -> None:
        """Record one fold of selections through the pipeline.

        ``reason`` carries the error code of the failure when ``outcome`` is
        ``"error"``.
        """

        props: Dict[str, Any] = {
            "stages": list(stages),
            "selection_count": selection_count,
            "duration_ms": round(duration_ms, 3),
            "outcome": outcome,
        }
        if reason is not None:
            props["reason"] = reason
        self.track_event("pipeline.run", **props)

    def flush(self) -> Path | None:
        """Append buffered events to :attr:`output_path`; ``None`` when nothing was written."""

        if not self.enabled or not self._buffer:
            return None
        path = self.output_path
        path.parent.mkdir(parents=True, exist_ok=True)
        lines = [event.to_json(self.session_id) for event in self._buffer]
        with path.open("a", encoding="utf-8") as handle:
            handle.write("\n".join(lines) + "\n")
        self._buffer.clear()
        return path

    def pending_events(self) -> int:
        return len(self._buffer)


def telemetry_enabled(settings: Any | None = None) -> bool:
    """``TARGETFLOW_TELEMETRY`` wins over ``settings.telemetry_opt_in``."""

    env_value = os.environ.get("TARGETFLOW_TELEMETRY")
    if env_value is not None:
        return env_value.strip().lower() in _TRUE_VALUES
    return bool(getattr(settings, "telemetry_opt_in", False))


def _encode(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value)!r} is not JSON serializable")


def _resolve_storage_dir(storage_dir: Path | str | None) -> Path:
    env_override = os.environ.get("TARGETFLOW_TELEMETRY_DIR")
    return Path(storage_dir or env_override or _DEFAULT_TELEMETRY_DIR).expanduser()
