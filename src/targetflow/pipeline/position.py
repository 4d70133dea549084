"""Pipeline stage: Position.

Collapses a selection to one of its boundary points so "before the function"
or "after the token" resolve to a zero-width insertion point.
"""

from __future__ import annotations

import logging

from ..core.errors import InvalidDescriptorError
from ..core.ranges import Position, Range
from ..core.selection import TypedSelection, require_content_range
from .context import PipelineContext
from .types import PositionModifier

__all__ = ["PositionStage"]

LOGGER = logging.getLogger(__name__)

_LEADING_POSITIONS = frozenset({"before", "start"})
_TRAILING_POSITIONS = frozenset({"after", "end"})


class PositionStage:
    """Narrow ``content_range`` and ``interior_range`` to a start or end point."""

    name = "position"

    def run(self, context: PipelineContext, stage: PositionModifier, selection: TypedSelection) -> TypedSelection:
        content_range = require_content_range(selection, stage=self.name)
        position = getattr(stage, "position", None)
        if position in _LEADING_POSITIONS:
            pick = _start_of
        elif position in _TRAILING_POSITIONS:
            pick = _end_of
        else:
            raise InvalidDescriptorError(f"Unknown position {position!r}", descriptor=stage, stage=self.name)

        interior = selection.interior_range
        result = selection.evolve(
            content_range=Range.empty_at(pick(content_range)),
            interior_range=None if interior is None else Range.empty_at(pick(interior)),
        )
        LOGGER.debug("position(%s): %s -> %s", position, content_range.to_tuple(), result.content_range.to_tuple())
        return result


def _start_of(value: Range) -> Position:
    return value.start


def _end_of(value: Range) -> Position:
    return value.end
