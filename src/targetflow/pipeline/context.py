"""Read-only services a pipeline run may consult."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Protocol, runtime_checkable

from ..core.document import Location, TextEditor
from ..core.errors import HatNotFoundError, NodeLocatorMissingError
from ..core.ranges import Position, Range
from ..core.selection import SelectionWithEditor
from ..languages import ensure_supported_language

__all__ = [
    "PipelineContext",
    "ReadOnlyHatMap",
    "StaticHatMap",
    "SyntaxNode",
    "Token",
    "hat_key",
]


@runtime_checkable
class SyntaxNode(Protocol):
    """Minimal view of a parsed syntax-tree node."""

    type: str


@dataclass(slots=True, frozen=True)
class Token:
    """A decorated token within an editor, with the line it is displayed on."""

    editor: TextEditor
    range: Range
    display_line: int = 0
    text: str = ""


@runtime_checkable
class ReadOnlyHatMap(Protocol):
    """Lookup from ``(hat_style, character)`` to a recorded token."""

    def get_token(self, hat_style: str, character: str) -> Token:
        ...

    def get_entries(self) -> Iterable[tuple[str, Token]]:
        ...


def hat_key(hat_style: str, character: str) -> str:
    return f"{hat_style}.{character.lower()}"


class StaticHatMap:
    """In-memory hat map frozen at construction time."""

    def __init__(self, entries: Mapping[tuple[str, str], Token] | None = None) -> None:
        tokens = {hat_key(style, char): token for (style, char), token in (entries or {}).items()}
        self._tokens: Mapping[str, Token] = MappingProxyType(tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[str]:
        return iter(self._tokens)

    def get_token(self, hat_style: str, character: str) -> Token:
        try:
            return self._tokens[hat_key(hat_style, character)]
        except KeyError:
            raise HatNotFoundError(hat_style, character) from None

    def get_entries(self) -> Iterable[tuple[str, Token]]:
        return tuple(self._tokens.items())


def _missing_node_locator(location: Location) -> Any:
    raise NodeLocatorMissingError(location.uri)


@dataclass(slots=True, frozen=True)
class PipelineContext:
    """Capability bundle supplied once per command invocation.

    Attributes:
        hat_token_map: Tokens recorded for each visible hat.
        that_mark: Selections produced by the previous command.
        source_mark: Selections the previous command read from.
        get_node_at_location: Maps a location to its innermost syntax node.
        supported_languages: Languages ``get_node_at_location`` can parse;
            ``None`` means the built-in list.
    """

    hat_token_map: ReadOnlyHatMap = field(default_factory=StaticHatMap)
    that_mark: tuple[SelectionWithEditor, ...] = ()
    source_mark: tuple[SelectionWithEditor, ...] = ()
    get_node_at_location: Callable[[Location], SyntaxNode] = _missing_node_locator
    supported_languages: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "that_mark", tuple(self.that_mark))
        object.__setattr__(self, "source_mark", tuple(self.source_mark))
        if self.supported_languages is not None:
            object.__setattr__(self, "supported_languages", tuple(self.supported_languages))

    def node_at(self, editor: TextEditor, value: Range | Position) -> SyntaxNode:
        """Return the innermost syntax node covering ``value`` in ``editor``."""

        ensure_supported_language(editor.document.language_id, supported=self.supported_languages)
        return self.get_node_at_location(editor.location(value))
