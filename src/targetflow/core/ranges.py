"""Structured helpers for representing positions and spans in a document."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Iterator


@dataclass(slots=True, frozen=True, order=True)
class Position:
    """Zero-based ``(line, character)`` coordinate inside a document.

    Negative components raise :class:`ValueError`, including results of
    :meth:`translate` that would move before the first line or column.
    """

    line: int
    character: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "line", _coerce_index(self.line, "Position", "line"))
        object.__setattr__(self, "character", _coerce_index(self.character, "Position", "character"))

    def __iter__(self) -> Iterator[int]:
        yield self.line
        yield self.character

    def is_before(self, other: Position) -> bool:
        return self < other

    def is_after(self, other: Position) -> bool:
        return self > other

    def translate(self, *, line_delta: int = 0, character_delta: int = 0) -> Position:
        """Return a position shifted by the given deltas."""

        return Position(self.line + line_delta, self.character + character_delta)

    def with_(self, *, line: int | None = None, character: int | None = None) -> Position:
        return Position(
            self.line if line is None else line,
            self.character if character is None else character,
        )

    def to_tuple(self) -> tuple[int, int]:
        return (self.line, self.character)

    def to_dict(self) -> dict[str, int]:
        """Return the position as a JSON-friendly object."""

        return {"line": self.line, "character": self.character}

    @classmethod
    def from_value(cls, value: Any) -> Position:
        """Coerce ``value`` into a :class:`Position`."""

        if isinstance(value, Position):
            return value
        if value is None:
            raise ValueError("Position value is required")
        if isinstance(value, Mapping):
            line = value.get("line")
            character = value.get("character")
            if line is None or character is None:
                raise ValueError("Position mappings require line and character keys")
            return cls(line, character)
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            seq = list(value)
            if len(seq) != 2:
                raise ValueError("Position sequences must have exactly two entries")
            return cls(seq[0], seq[1])
        line = getattr(value, "line", None)
        character = getattr(value, "character", None)
        if line is not None and character is not None:
            return cls(line, character)
        raise TypeError("Unsupported Position input")


@dataclass(slots=True, frozen=True)
class Range(Sequence[Position]):
    """Canonical span between two positions; ``start`` never follows ``end``."""

    start: Position
    end: Position

    def __post_init__(self) -> None:
        start = Position.from_value(self.start)
        end = Position.from_value(self.end)
        if end < start:
            start, end = end, start
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    def __len__(self) -> int:
        return 2

    def __getitem__(self, index: int | slice) -> Position | tuple[Position, ...]:
        if isinstance(index, slice):
            return (self.start, self.end)[index]
        if index == 0:
            return self.start
        if index == 1:
            return self.end
        raise IndexError("Range index out of range")

    def __iter__(self) -> Iterator[Position]:
        yield self.start
        yield self.end

    @property
    def is_empty(self) -> bool:
        """Return ``True`` when the range collapses to a single position."""

        return self.start == self.end

    @property
    def is_single_line(self) -> bool:
        return self.start.line == self.end.line

    def contains(self, other: Position | Range) -> bool:
        """Return ``True`` when ``other`` lies within this range (inclusive)."""

        if isinstance(other, Range):
            return self.start <= other.start and other.end <= self.end
        return self.start <= other <= self.end

    def intersection(self, other: Range) -> Range | None:
        """Return the overlapping span, or ``None`` when the ranges are disjoint."""

        start = max(self.start, other.start)
        end = min(self.end, other.end)
        if end < start:
            return None
        return Range(start, end)

    def union(self, other: Range) -> Range:
        return Range(min(self.start, other.start), max(self.end, other.end))

    def with_(self, *, start: Position | None = None, end: Position | None = None) -> Range:
        return Range(self.start if start is None else start, self.end if end is None else end)

    def to_tuple(self) -> tuple[tuple[int, int], tuple[int, int]]:
        return (self.start.to_tuple(), self.end.to_tuple())

    def to_dict(self) -> dict[str, dict[str, int]]:
        """Return the range as an object compatible with JSON payloads."""

        return {"start": self.start.to_dict(), "end": self.end.to_dict()}

    @classmethod
    def empty_at(cls, position: Position) -> Range:
        """Return a zero-width range at ``position``."""

        return cls(position, position)

    @classmethod
    def from_coordinates(
        cls,
        start_line: int,
        start_character: int,
        end_line: int,
        end_character: int,
    ) -> Range:
        return cls(Position(start_line, start_character), Position(end_line, end_character))

    @classmethod
    def from_value(cls, value: Any) -> Range:
        """Coerce ``value`` into a :class:`Range`."""

        if isinstance(value, Range):
            return value
        if value is None:
            raise ValueError("Range value is required")
        if isinstance(value, Mapping):
            start = value.get("start")
            end = value.get("end")
            if start is None or end is None:
                raise ValueError("Range mappings require start and end keys")
            return cls(Position.from_value(start), Position.from_value(end))
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            seq = list(value)
            if len(seq) == 4:
                return cls.from_coordinates(*seq)
            if len(seq) != 2:
                raise ValueError("Range sequences must have two positions or four coordinates")
            return cls(Position.from_value(seq[0]), Position.from_value(seq[1]))
        start = getattr(value, "start", None)
        end = getattr(value, "end", None)
        if start is not None and end is not None:
            return cls(Position.from_value(start), Position.from_value(end))
        raise TypeError("Unsupported Range input")


@dataclass(slots=True, frozen=True)
class Selection:
    """A directed range: ``anchor`` stays put while ``active`` follows the cursor."""

    anchor: Position
    active: Position

    def __post_init__(self) -> None:
        object.__setattr__(self, "anchor", Position.from_value(self.anchor))
        object.__setattr__(self, "active", Position.from_value(self.active))

    @property
    def start(self) -> Position:
        return min(self.anchor, self.active)

    @property
    def end(self) -> Position:
        return max(self.anchor, self.active)

    @property
    def is_reversed(self) -> bool:
        """Return ``True`` when the active position precedes the anchor."""

        return self.active < self.anchor

    @property
    def is_empty(self) -> bool:
        return self.anchor == self.active

    def to_range(self) -> Range:
        return Range(self.start, self.end)

    @classmethod
    def from_range(cls, value: Range, *, reversed: bool = False) -> Selection:
        if reversed:
            return cls(anchor=value.end, active=value.start)
        return cls(anchor=value.start, active=value.end)


def _coerce_index(value: Any, owner: str, label: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{owner} {label} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{owner} {label} must be an integer") from exc
    if number < 0:
        raise ValueError(f"{owner} {label} must be non-negative, got {number}")
    return number


__all__ = ["Position", "Range", "Selection"]
