"""Registry mapping modifier kinds to the stage that implements them."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable

from ..core.errors import InvalidDescriptorError
from .position import PositionStage
from .token import TokenStage
from .types import PipelineStage, modifier_kind

__all__ = ["StageRegistry", "default_registry"]

LOGGER = logging.getLogger(__name__)


class StageRegistry:
    """Resolve modifier descriptors to :class:`PipelineStage` instances."""

    def __init__(self, stages: Dict[str, PipelineStage] | None = None) -> None:
        self._stages: Dict[str, PipelineStage] = dict(stages or {})

    def register(self, kind: str, stage: PipelineStage, *, replace: bool = False) -> None:
        """Register ``stage`` for modifiers of ``kind``."""

        if not kind:
            raise ValueError("Stage kind must be a non-empty string")
        if not isinstance(stage, PipelineStage):
            raise TypeError(f"{stage!r} does not implement run(context, stage, selection)")
        if kind in self._stages and not replace:
            raise ValueError(f"Stage already registered for {kind!r}")
        self._stages[kind] = stage
        LOGGER.debug("Registered stage %s for %s", type(stage).__name__, kind)

    def kinds(self) -> Iterable[str]:
        return tuple(sorted(self._stages))

    def get_stage(self, modifier: Any) -> PipelineStage:
        kind = modifier_kind(modifier)
        try:
            return self._stages[kind]
        except KeyError:
            raise InvalidDescriptorError(f"No stage registered for {kind!r}", descriptor=modifier) from None

    def __contains__(self, kind: object) -> bool:
        return kind in self._stages


def default_registry() -> StageRegistry:
    """Return a fresh registry holding the built-in stages."""

    registry = StageRegistry()
    registry.register("position", PositionStage())
    registry.register("containingScope:token", TokenStage())
    return registry
