"""Tests for the pipeline context, hat map and mark seeding."""

from __future__ import annotations

import dataclasses

import pytest

from targetflow.core.errors import (
    HatNotFoundError,
    InvalidDescriptorError,
    NodeLocatorMissingError,
    TargetResolutionError,
    UnsupportedLanguageError,
)
from targetflow.core.ranges import Position, Range, Selection
from targetflow.core.selection import SelectionWithEditor
from targetflow.languages import SUPPORTED_LANGUAGE_IDS, ensure_supported_language, is_supported_language
from targetflow.pipeline.context import PipelineContext, ReadOnlyHatMap, StaticHatMap, Token
from targetflow.pipeline.marks import decorated_symbol_selection, mark_selections, to_mark
from targetflow.pipeline.runner import PipelineRunner
from targetflow.services.settings import Settings
from tests.helpers import RecordingNodeLocator, make_editor, make_selection


def test_static_hat_map_lookup_is_case_insensitive() -> None:
    editor = make_editor("hello world")
    token = Token(editor=editor, range=Range.from_coordinates(0, 6, 0, 11), text="world")
    hats = StaticHatMap({("default", "W"): token})

    assert isinstance(hats, ReadOnlyHatMap)
    assert hats.get_token("default", "w") is token
    assert len(hats) == 1
    with pytest.raises(HatNotFoundError) as excinfo:
        hats.get_token("blue", "w")
    assert isinstance(excinfo.value, LookupError)
    assert excinfo.value.details()["hat_style"] == "blue"


def test_context_is_read_only() -> None:
    context = PipelineContext()

    with pytest.raises(dataclasses.FrozenInstanceError):
        context.that_mark = ()  # type: ignore[misc]


def test_decorated_symbol_selection_is_raw() -> None:
    editor = make_editor("hello world")
    token = Token(editor=editor, range=Range.from_coordinates(0, 0, 0, 5))
    context = PipelineContext(hat_token_map=StaticHatMap({("default", "h"): token}))

    selection = decorated_symbol_selection(context, "default", "h")

    assert selection.content_range == token.range
    assert selection.is_raw_selection
    assert selection.editor is editor


def test_mark_selections_read_that_and_source() -> None:
    editor = make_editor("alpha beta")
    that = SelectionWithEditor(selection=Selection(anchor=Position(0, 10), active=Position(0, 6)), editor=editor)
    source = SelectionWithEditor(selection=Selection(anchor=Position(0, 0), active=Position(0, 5)), editor=editor)
    context = PipelineContext(that_mark=[that], source_mark=[source])

    (from_that,) = mark_selections(context, "that")
    (from_source,) = mark_selections(context, "source")

    assert from_that.content_range == Range.from_coordinates(0, 6, 0, 10)
    assert from_that.is_reversed
    assert from_source.content_range == Range.from_coordinates(0, 0, 0, 5)
    assert not from_source.is_reversed
    assert isinstance(context.that_mark, tuple)
    with pytest.raises(InvalidDescriptorError):
        mark_selections(context, "previous")


def test_to_mark_keeps_earlier_outputs_valid() -> None:
    editor = make_editor("alpha beta")
    original = make_selection(editor, 0, 6, 0, 10)
    (mark,) = to_mark([original])

    later = original.evolve(content_range=Range.empty_at(Position(0, 6)))

    assert mark.selection.to_range() == Range.from_coordinates(0, 6, 0, 10)
    assert original.content_range == Range.from_coordinates(0, 6, 0, 10)
    assert later.content_range.is_empty


def test_node_at_delegates_for_supported_languages() -> None:
    locator = RecordingNodeLocator(node_type="call_expression")
    context = PipelineContext(get_node_at_location=locator)
    editor = make_editor("print(1)", language_id="python", uri="file:///a.py")

    node = context.node_at(editor, Position(0, 2))

    assert node.type == "call_expression"
    assert locator.calls[0].uri == "file:///a.py"
    assert locator.calls[0].range == Range.empty_at(Position(0, 2))


def test_node_at_refuses_unsupported_languages() -> None:
    locator = RecordingNodeLocator()
    context = PipelineContext(get_node_at_location=locator)

    with pytest.raises(UnsupportedLanguageError):
        context.node_at(make_editor("plain"), Position(0, 0))
    assert locator.calls == []


def test_runner_context_uses_configured_languages() -> None:
    runner = PipelineRunner(settings=Settings(supported_languages=["plaintext"]))
    locator = RecordingNodeLocator()
    context = runner.build_context(get_node_at_location=locator)

    context.node_at(make_editor("plain"), Position(0, 0))

    assert len(locator.calls) == 1
    with pytest.raises(UnsupportedLanguageError):
        context.node_at(make_editor("x = 1", language_id="python"), Position(0, 0))


def test_missing_node_locator_raises_resolution_error() -> None:
    editor = make_editor("x", language_id="python", uri="file:///a.py")

    with pytest.raises(NodeLocatorMissingError) as excinfo:
        PipelineContext().node_at(editor, Position(0, 0))

    assert isinstance(excinfo.value, TargetResolutionError)
    assert excinfo.value.details() == {
        "reason": "node_locator_missing",
        "message": "No syntax node locator configured for file:///a.py",
        "uri": "file:///a.py",
    }


def test_language_helpers() -> None:
    assert "python" in SUPPORTED_LANGUAGE_IDS
    assert is_supported_language(" TypeScript ")
    assert not is_supported_language("cobol")
    assert ensure_supported_language("go") == "go"
