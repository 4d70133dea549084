"""Pipeline stage: Token.

Attaches whitespace delimiter ranges to a selection already bound to a
token-like unit, so remove and replace actions can consume or preserve the
separator between neighbouring tokens.
"""

from __future__ import annotations

import logging
import re
from typing import NamedTuple

from ..core.document import TextDocument
from ..core.errors import InvalidDescriptorError
from ..core.ranges import Range
from ..core.selection import TypedSelection, require_content_range
from .context import PipelineContext
from .types import ContainingScopeModifier

__all__ = ["DelimiterRanges", "TOKEN_DELIMITER", "TokenStage", "get_delimiter_ranges"]

LOGGER = logging.getLogger(__name__)

TOKEN_DELIMITER = " "
_LEADING_WHITESPACE_RE = re.compile(r"\s+$")
_TRAILING_WHITESPACE_RE = re.compile(r"^\s+")


class DelimiterRanges(NamedTuple):
    leading: Range | None
    trailing: Range | None


class TokenStage:
    """Detect whether a token sits in a whitespace-separated run."""

    name = "containingScope:token"
    scope_type = "token"

    def run(
        self,
        context: PipelineContext,
        stage: ContainingScopeModifier,
        selection: TypedSelection,
    ) -> TypedSelection:
        content_range = require_content_range(selection, stage=self.name)
        scope_type = getattr(stage, "scope_type", None)
        if scope_type != self.scope_type:
            raise InvalidDescriptorError(
                f"Token stage cannot resolve scope type {scope_type!r}",
                descriptor=stage,
                stage=self.name,
            )

        leading, trailing = get_delimiter_ranges(selection.document, content_range)
        return selection.evolve(
            delimiter=TOKEN_DELIMITER,
            leading_delimiter_range=leading,
            trailing_delimiter_range=trailing,
        )


def get_delimiter_ranges(document: TextDocument, content_range: Range) -> DelimiterRanges:
    """Return the whitespace delimiters around ``content_range``.

    The leading scan only looks at the line holding ``content_range.start`` and
    the trailing scan only at the line holding ``content_range.end``; neither
    crosses a line break.

    A side that touches a true line boundary (column 0, or the end of the line)
    needs no delimiter. When either side has neither a delimiter nor a line
    boundary, or when no delimiter was found at all, the token is not part of a
    delimited run and both ranges are dropped.
    """

    start, end = content_range.start, content_range.end
    start_line = document.line_at(start)
    end_line = document.line_at(end)

    leading: Range | None = None
    match = _LEADING_WHITESPACE_RE.search(start_line.text[: start.character])
    if match is not None:
        leading = Range(start.translate(character_delta=-len(match.group(0))), start)

    trailing: Range | None = None
    match = _TRAILING_WHITESPACE_RE.search(end_line.text[end.character :])
    if match is not None:
        trailing = Range(end, end.translate(character_delta=len(match.group(0))))

    is_in_delimited_list = (
        (leading is not None or trailing is not None)
        and (leading is not None or start.character == 0)
        and (trailing is not None or end == end_line.range.end)
    )
    if not is_in_delimited_list:
        if leading is not None or trailing is not None:
            LOGGER.debug("Discarding one-sided delimiter around %s", content_range.to_tuple())
        return DelimiterRanges(None, None)
    return DelimiterRanges(leading, trailing)
