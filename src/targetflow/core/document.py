"""Read-only document snapshots and the editor handle ranges refer to."""

from __future__ import annotations

import bisect
import hashlib
import re
import uuid
from dataclasses import dataclass, field
from typing import overload

from .ranges import Position, Range

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def _hash_text(text: str) -> str:
    return hashlib.sha1(text.encode("utf-8")).hexdigest()


@dataclass(slots=True, frozen=True)
class TextLine:
    """A single line of a :class:`TextDocument`, excluding its line break."""

    line_number: int
    text: str
    range: Range
    range_including_line_break: Range

    @property
    def first_non_whitespace_character_index(self) -> int:
        stripped = self.text.lstrip()
        return len(self.text) - len(stripped)

    @property
    def is_empty_or_whitespace(self) -> bool:
        return not self.text.strip()


@dataclass(slots=True, frozen=True)
class TextDocument:
    """Immutable snapshot of document text with line-oriented accessors."""

    text: str = ""
    uri: str = "untitled:document"
    language_id: str = "plaintext"
    version: int = 1
    _lines: tuple[str, ...] = field(init=False, repr=False, compare=False)
    _breaks: tuple[str, ...] = field(init=False, repr=False, compare=False)
    _line_offsets: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        text = self.text or ""
        lines: list[str] = []
        breaks: list[str] = []
        offsets: list[int] = []
        cursor = 0
        for match in _LINE_BREAK_RE.finditer(text):
            offsets.append(cursor)
            lines.append(text[cursor : match.start()])
            breaks.append(match.group(0))
            cursor = match.end()
        offsets.append(cursor)
        lines.append(text[cursor:])
        breaks.append("")
        object.__setattr__(self, "text", text)
        object.__setattr__(self, "_lines", tuple(lines))
        object.__setattr__(self, "_breaks", tuple(breaks))
        object.__setattr__(self, "_line_offsets", tuple(offsets))

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def content_hash(self) -> str:
        return _hash_text(self.text)

    @property
    def full_range(self) -> Range:
        last = self.line_count - 1
        return Range(Position(0, 0), Position(last, len(self._lines[last])))

    @overload
    def line_at(self, line: int) -> TextLine: ...

    @overload
    def line_at(self, line: Position) -> TextLine: ...

    def line_at(self, line: int | Position) -> TextLine:
        """Return the :class:`TextLine` for a line number or a position on it."""

        number = line.line if isinstance(line, Position) else int(line)
        if number < 0 or number >= self.line_count:
            raise IndexError(f"Line {number} is outside the document ({self.line_count} lines)")
        text = self._lines[number]
        end = Position(number, len(text))
        if number + 1 < self.line_count:
            end_with_break = Position(number + 1, 0)
        else:
            end_with_break = end
        return TextLine(
            line_number=number,
            text=text,
            range=Range(Position(number, 0), end),
            range_including_line_break=Range(Position(number, 0), end_with_break),
        )

    def validate_position(self, position: Position) -> Position:
        """Clamp ``position`` onto the document."""

        if position.line >= self.line_count:
            return self.full_range.end
        length = len(self._lines[position.line])
        if position.character > length:
            return Position(position.line, length)
        return position

    def validate_range(self, value: Range) -> Range:
        return Range(self.validate_position(value.start), self.validate_position(value.end))

    def contains_range(self, value: Range) -> bool:
        """Return ``True`` when every position of ``value`` exists in the document."""

        return self.validate_range(value) == value

    def offset_at(self, position: Position) -> int:
        clamped = self.validate_position(position)
        return self._line_offsets[clamped.line] + clamped.character

    def position_at(self, offset: int) -> Position:
        offset = max(0, min(int(offset), len(self.text)))
        line = bisect.bisect_right(self._line_offsets, offset) - 1
        character = min(offset - self._line_offsets[line], len(self._lines[line]))
        return Position(line, character)

    def get_text(self, value: Range | None = None) -> str:
        """Return the whole text, or the text covered by ``value``."""

        if value is None:
            return self.text
        return self.text[self.offset_at(value.start) : self.offset_at(value.end)]

    def line_break_at(self, line: int) -> str:
        return self._breaks[line]


@dataclass(slots=True, frozen=True)
class Location:
    """A range inside the document identified by ``uri``."""

    uri: str
    range: Range


@dataclass(slots=True, frozen=True)
class TextEditor:
    """Opaque handle to the document/view every range of a selection belongs to."""

    document: TextDocument = field(compare=False)
    editor_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def location(self, value: Range | Position) -> Location:
        if isinstance(value, Position):
            value = Range.empty_at(value)
        return Location(uri=self.document.uri, range=value)


__all__ = ["Location", "TextDocument", "TextEditor", "TextLine"]
