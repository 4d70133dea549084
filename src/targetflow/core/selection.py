"""Typed selections threaded through every pipeline stage."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace
from typing import Any

from .document import TextDocument, TextEditor
from .errors import MissingRangeError, SelectionInvariantError
from .ranges import Range, Selection

_OPTIONAL_RANGE_FIELDS: tuple[str, ...] = (
    "interior_range",
    "leading_delimiter_range",
    "trailing_delimiter_range",
)


@dataclass(slots=True, frozen=True)
class SelectionWithEditor:
    """A directed selection paired with the editor it was made in."""

    selection: Selection
    editor: TextEditor


@dataclass(slots=True, frozen=True)
class TypedSelection:
    """A content range plus the structural context needed to edit it.

    Instances are immutable. Stages derive new selections with :meth:`evolve`
    so values already handed out (for example as the "that" mark) remain valid.

    Attributes:
        editor: Handle of the document every range refers to.
        content_range: The primary range this selection denotes.
        is_reversed: Whether the anchor sits after the active position.
        is_raw_selection: Marks a selection without type information; move and
            bring destinations inherit delimiters from their source instead.
        delimiter: Separator between sibling units (``" "`` for tokens,
            ``"\\n"`` for lines, ``", "`` for list items).
        interior_range: The content without its enclosing boundary tokens.
        leading_delimiter_range: Delimiter text owned by this selection that
            ends where ``content_range`` starts.
        trailing_delimiter_range: Delimiter text owned by this selection that
            starts where ``content_range`` ends.
        boundary: Opening/closing structural markers, in document order.
    """

    editor: TextEditor
    content_range: Range
    is_reversed: bool = False
    is_raw_selection: bool = False
    delimiter: str | None = None
    interior_range: Range | None = None
    leading_delimiter_range: Range | None = None
    trailing_delimiter_range: Range | None = None
    boundary: tuple[Range, ...] | None = None

    def __post_init__(self) -> None:
        if self.content_range is None:
            raise MissingRangeError()
        if not isinstance(self.content_range, Range):
            object.__setattr__(self, "content_range", Range.from_value(self.content_range))
        for name in _OPTIONAL_RANGE_FIELDS:
            value = getattr(self, name)
            if value is not None and not isinstance(value, Range):
                object.__setattr__(self, name, Range.from_value(value))
        if self.boundary is not None and not isinstance(self.boundary, tuple):
            object.__setattr__(self, "boundary", tuple(Range.from_value(item) for item in self.boundary))

    @property
    def document(self) -> TextDocument:
        return self.editor.document

    @property
    def text(self) -> str:
        """Return the document text covered by ``content_range``."""

        return self.document.get_text(self.content_range)

    def evolve(self, **changes: Any) -> TypedSelection:
        """Return a copy with ``changes`` applied; unchanged ranges are shared."""

        return replace(self, **changes)

    def ranges(self) -> Iterator[tuple[str, Range]]:
        """Yield ``(field_name, range)`` for every range this selection carries."""

        yield "content_range", self.content_range
        for name in _OPTIONAL_RANGE_FIELDS:
            value = getattr(self, name)
            if value is not None:
                yield name, value
        for index, value in enumerate(self.boundary or ()):
            yield f"boundary[{index}]", value

    def to_selection(self) -> Selection:
        return Selection.from_range(self.content_range, reversed=self.is_reversed)

    @classmethod
    def from_selection(cls, value: SelectionWithEditor, *, is_raw_selection: bool = True) -> TypedSelection:
        """Build a typed selection from a bare editor selection."""

        return cls(
            editor=value.editor,
            content_range=value.selection.to_range(),
            is_reversed=value.selection.is_reversed,
            is_raw_selection=is_raw_selection,
        )


def require_content_range(selection: Any, *, stage: str | None = None) -> Range:
    """Return ``selection.content_range`` or fail fast when it is missing."""

    content_range = getattr(selection, "content_range", None)
    if content_range is None:
        raise MissingRangeError(stage=stage)
    return content_range


def validate_selection(selection: TypedSelection, *, stage: str | None = None) -> TypedSelection:
    """Check the document-level invariants of ``selection`` and return it unchanged.

    Every range must lie inside ``selection.editor``'s document. All ranges
    share that one editor, so a selection cannot span two documents.
    """

    require_content_range(selection, stage=stage)
    document = selection.document
    for name, value in selection.ranges():
        if not document.contains_range(value):
            raise SelectionInvariantError(
                f"{name} {value.to_tuple()} lies outside {document.uri}",
                field=name,
                stage=stage,
            )
    return selection


def delimiters_are_adjacent(selection: TypedSelection) -> bool:
    """Return ``True`` when the delimiter ranges touch ``content_range`` exactly."""

    leading = selection.leading_delimiter_range
    trailing = selection.trailing_delimiter_range
    if leading is not None and leading.end != selection.content_range.start:
        return False
    if trailing is not None and trailing.start != selection.content_range.end:
        return False
    return True


def to_selection_with_editor(selections: Iterable[TypedSelection]) -> tuple[SelectionWithEditor, ...]:
    return tuple(SelectionWithEditor(selection=item.to_selection(), editor=item.editor) for item in selections)


__all__ = [
    "SelectionWithEditor",
    "TypedSelection",
    "delimiters_are_adjacent",
    "require_content_range",
    "to_selection_with_editor",
    "validate_selection",
]
