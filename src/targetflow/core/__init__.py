"""Core value types: positions, ranges, documents and typed selections."""

from .document import Location, TextDocument, TextEditor, TextLine
from .errors import (
    HatNotFoundError,
    InvalidDescriptorError,
    MissingRangeError,
    NodeLocatorMissingError,
    SelectionInvariantError,
    TargetResolutionError,
    UnsupportedLanguageError,
)
from .ranges import Position, Range, Selection
from .selection import SelectionWithEditor, TypedSelection

__all__ = [
    "HatNotFoundError",
    "InvalidDescriptorError",
    "Location",
    "MissingRangeError",
    "NodeLocatorMissingError",
    "Position",
    "Range",
    "Selection",
    "SelectionInvariantError",
    "SelectionWithEditor",
    "TargetResolutionError",
    "TextDocument",
    "TextEditor",
    "TextLine",
    "TypedSelection",
    "UnsupportedLanguageError",
]
