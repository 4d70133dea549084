"""Shared test helpers and stub classes.

Import from here instead of duplicating editors and selections in each test file.
"""

from __future__ import annotations

from targetflow.core.document import Location, TextDocument, TextEditor
from targetflow.core.ranges import Range
from targetflow.core.selection import TypedSelection


def make_editor(text: str, *, language_id: str = "plaintext", uri: str = "file:///test.txt") -> TextEditor:
    return TextEditor(document=TextDocument(text=text, uri=uri, language_id=language_id))


def make_selection(
    editor: TextEditor,
    start_line: int,
    start_character: int,
    end_line: int,
    end_character: int,
    **kwargs,
) -> TypedSelection:
    return TypedSelection(
        editor=editor,
        content_range=Range.from_coordinates(start_line, start_character, end_line, end_character),
        **kwargs,
    )


class RecordingNodeLocator:
    """Fake syntax-node locator that remembers every lookup."""

    def __init__(self, node_type: str = "identifier") -> None:
        self.node_type = node_type
        self.calls: list[Location] = []

    def __call__(self, location: Location) -> "FakeNode":
        self.calls.append(location)
        return FakeNode(type=self.node_type)


class FakeNode:
    def __init__(self, type: str) -> None:
        self.type = type
