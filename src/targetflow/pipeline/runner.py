"""Fold typed selections through an ordered chain of modifier stages."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..core.document import Location
from ..core.errors import TargetResolutionError
from ..core.selection import SelectionWithEditor, TypedSelection, require_content_range, validate_selection
from ..services.settings import Settings, SettingsStore
from ..utils.logging import configure_from_settings
from ..utils.telemetry import TelemetryClient
from .context import PipelineContext, ReadOnlyHatMap, StaticHatMap, SyntaxNode
from .registry import StageRegistry, default_registry
from .types import Modifier, PipelineStage, modifier_kind, parse_modifier

__all__ = ["PipelineRunner", "run_pipeline"]

LOGGER = logging.getLogger(__name__)


def run_pipeline(
    context: PipelineContext,
    modifiers: Sequence[Modifier | Mapping[str, Any]],
    selections: Iterable[TypedSelection],
    *,
    registry: StageRegistry | None = None,
    settings: Settings | None = None,
    telemetry: TelemetryClient | None = None,
) -> tuple[TypedSelection, ...]:
    """Apply ``modifiers`` in order to every selection.

    Every stage is resolved before any of them runs, so an unknown descriptor
    fails the command without producing partial output. Selections are
    processed independently; the input objects are never modified.

    Args:
        context: Read-only services for this command invocation.
        modifiers: Descriptors or JSON-style payloads, applied first to last.
        selections: Initial selections built by the upstream resolver.
        registry: Stage lookup; defaults to the built-in stages.
        settings: Enables input and output validation via
            ``validate_selections``.
        telemetry: Receives one ``pipeline.run`` event per call when enabled.

    Returns:
        The final selections, in input order.

    Raises:
        TargetResolutionError: If a descriptor is invalid, a selection lacks
            its content range, or an input or output selection violates the
            selection invariants.
    """

    registry = registry or default_registry()
    validate = True if settings is None else settings.validate_selections
    started = time.perf_counter()
    inputs = tuple(selections)
    kinds: list[str] = []
    try:
        parsed = [parse_modifier(modifier) for modifier in modifiers]
        kinds = [modifier_kind(modifier) for modifier in parsed]
        stages = [registry.get_stage(modifier) for modifier in parsed]
        results = tuple(
            _fold(context, list(zip(kinds, parsed, stages)), selection, validate=validate) for selection in inputs
        )
    except TargetResolutionError as exc:
        LOGGER.warning("Pipeline %s failed: %s", kinds or "<unresolved>", exc)
        if telemetry is not None:
            telemetry.track_pipeline_run(
                stages=kinds,
                selection_count=len(inputs),
                duration_ms=(time.perf_counter() - started) * 1000,
                outcome="error",
                reason=exc.reason,
            )
        raise

    LOGGER.debug("Pipeline %s resolved %d selection(s)", kinds, len(results))
    if telemetry is not None:
        telemetry.track_pipeline_run(
            stages=kinds,
            selection_count=len(results),
            duration_ms=(time.perf_counter() - started) * 1000,
        )
    return results


def _fold(
    context: PipelineContext,
    chain: Sequence[tuple[str, Modifier, PipelineStage]],
    selection: TypedSelection,
    *,
    validate: bool,
) -> TypedSelection:
    require_content_range(selection, stage="input")
    if validate:
        validate_selection(selection, stage="input")
    current = selection
    for kind, modifier, stage in chain:
        current = stage.run(context, modifier, current)
        require_content_range(current, stage=kind)
        if validate:
            validate_selection(current, stage=kind)
    return current


@dataclass(slots=True)
class PipelineRunner:
    """Registry, settings and telemetry reused across command invocations.

    Construct it directly in tests and embedded hosts that manage logging
    themselves; use :meth:`from_settings` or :meth:`from_store` to also install
    the package log handlers and the opt-in telemetry client.
    """

    settings: Settings = field(default_factory=Settings)
    registry: StageRegistry = field(default_factory=default_registry)
    telemetry: TelemetryClient | None = None
    log_path: Path | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        registry: StageRegistry | None = None,
        log_dir: Path | str | None = None,
        telemetry_dir: Path | str | None = None,
        console: bool = False,
    ) -> PipelineRunner:
        """Configure logging and telemetry from ``settings`` and return a runner."""

        log_path = configure_from_settings(settings, log_dir=log_dir, console=console, force=True)
        telemetry = TelemetryClient.from_settings(settings, storage_dir=telemetry_dir)
        LOGGER.debug("Pipeline runner ready (telemetry %s)", "on" if telemetry.enabled else "off")
        return cls(
            settings=settings,
            registry=registry or default_registry(),
            telemetry=telemetry,
            log_path=log_path,
        )

    @classmethod
    def from_store(
        cls,
        store: SettingsStore,
        *,
        overrides: Mapping[str, Any] | None = None,
        **options: Any,
    ) -> PipelineRunner:
        return cls.from_settings(store.load(overrides=overrides), **options)

    def build_context(
        self,
        *,
        hat_token_map: ReadOnlyHatMap | None = None,
        that_mark: Iterable[SelectionWithEditor] = (),
        source_mark: Iterable[SelectionWithEditor] = (),
        get_node_at_location: Callable[[Location], SyntaxNode] | None = None,
    ) -> PipelineContext:
        """Return a context whose syntax lookups honor ``settings.supported_languages``."""

        options: dict[str, Any] = {
            "hat_token_map": StaticHatMap() if hat_token_map is None else hat_token_map,
            "that_mark": tuple(that_mark),
            "source_mark": tuple(source_mark),
            "supported_languages": tuple(self.settings.supported_languages),
        }
        if get_node_at_location is not None:
            options["get_node_at_location"] = get_node_at_location
        return PipelineContext(**options)

    def run(
        self,
        context: PipelineContext,
        modifiers: Sequence[Modifier | Mapping[str, Any]],
        selections: Iterable[TypedSelection],
    ) -> tuple[TypedSelection, ...]:
        return run_pipeline(
            context,
            modifiers,
            selections,
            registry=self.registry,
            settings=self.settings,
            telemetry=self.telemetry,
        )
