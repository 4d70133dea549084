"""Seed raw selections from hats and from the previous command's marks."""

from __future__ import annotations

from collections.abc import Iterable

from ..core.errors import InvalidDescriptorError
from ..core.selection import SelectionWithEditor, TypedSelection, to_selection_with_editor
from .context import PipelineContext

__all__ = ["decorated_symbol_selection", "mark_selections", "to_mark"]

_MARK_NAMES = ("that", "source")


def decorated_symbol_selection(context: PipelineContext, hat_style: str, character: str) -> TypedSelection:
    """Return a raw selection covering the token decorated by ``hat_style``/``character``."""

    token = context.hat_token_map.get_token(hat_style, character)
    return TypedSelection(editor=token.editor, content_range=token.range, is_raw_selection=True)


def mark_selections(context: PipelineContext, mark: str) -> tuple[TypedSelection, ...]:
    """Return raw selections for the ``"that"`` or ``"source"`` mark."""

    if mark not in _MARK_NAMES:
        raise InvalidDescriptorError(f"Unknown mark {mark!r}", descriptor=mark)
    stored: tuple[SelectionWithEditor, ...] = context.that_mark if mark == "that" else context.source_mark
    return tuple(TypedSelection.from_selection(item) for item in stored)


def to_mark(selections: Iterable[TypedSelection]) -> tuple[SelectionWithEditor, ...]:
    """Convert resolved selections into the shape stored as the next "that" mark."""

    return to_selection_with_editor(selections)
