"""Pipeline stages that turn typed selections into resolved targets.

This package contains the stage contract and the built-in stages:
- position: collapse a selection to its start or end point
- token: attach whitespace delimiter ranges to a token
- marks: seed raw selections from hats and previous marks
- runner: fold selections through an ordered chain of stages
"""

from .context import PipelineContext, ReadOnlyHatMap, StaticHatMap, SyntaxNode, Token
from .marks import decorated_symbol_selection, mark_selections, to_mark
from .position import PositionStage
from .registry import StageRegistry, default_registry
from .runner import PipelineRunner, run_pipeline
from .token import DelimiterRanges, TokenStage, get_delimiter_ranges
from .types import ContainingScopeModifier, Modifier, PipelineStage, PositionModifier, parse_modifier

__all__ = [
    # context.py exports
    "PipelineContext",
    "ReadOnlyHatMap",
    "StaticHatMap",
    "SyntaxNode",
    "Token",
    # types.py exports
    "ContainingScopeModifier",
    "Modifier",
    "PipelineStage",
    "PositionModifier",
    "parse_modifier",
    # stages
    "PositionStage",
    "TokenStage",
    "DelimiterRanges",
    "get_delimiter_ranges",
    # marks.py exports
    "decorated_symbol_selection",
    "mark_selections",
    "to_mark",
    # registry.py / runner.py exports
    "StageRegistry",
    "default_registry",
    "PipelineRunner",
    "run_pipeline",
]
