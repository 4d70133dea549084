"""Modifier descriptors and the contract every pipeline stage implements."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Literal, Protocol, Union, runtime_checkable

from ..core.errors import InvalidDescriptorError
from ..core.selection import TypedSelection

if TYPE_CHECKING:
    from .context import PipelineContext

__all__ = [
    "ContainingScopeModifier",
    "Modifier",
    "PipelineStage",
    "POSITIONS",
    "PositionModifier",
    "PositionName",
    "modifier_kind",
    "parse_modifier",
]

PositionName = Literal["before", "start", "after", "end"]
POSITIONS: tuple[str, ...] = ("before", "start", "after", "end")


# -----------------------------------------------------------------------------
# Descriptors
# -----------------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class PositionModifier:
    """Collapse a target to one of its boundary points."""

    type: ClassVar[str] = "position"

    position: PositionName


@dataclass(slots=True, frozen=True)
class ContainingScopeModifier:
    """Expand a target to the scope of ``scope_type`` that contains it."""

    type: ClassVar[str] = "containingScope"

    scope_type: str
    include_siblings: bool = False


Modifier = Union[PositionModifier, ContainingScopeModifier]


def modifier_kind(modifier: Any) -> str:
    """Return the registry key for ``modifier``.

    Position modifiers map to ``"position"``; containing-scope modifiers map to
    ``"containingScope:<scope_type>"`` so each scope type can own a stage.
    """

    kind = getattr(modifier, "type", None)
    if not isinstance(kind, str):
        raise InvalidDescriptorError("Modifier has no type", descriptor=modifier)
    if kind == ContainingScopeModifier.type:
        return f"{kind}:{getattr(modifier, 'scope_type', '')}"
    return kind


def parse_modifier(payload: Mapping[str, Any] | Modifier) -> Modifier:
    """Build a descriptor from a JSON-style payload.

    Args:
        payload: Either an existing descriptor or a mapping such as
            ``{"type": "position", "position": "after"}`` or
            ``{"type": "containingScope", "scopeType": {"type": "token"}}``.

    Returns:
        The matching descriptor dataclass.

    Raises:
        InvalidDescriptorError: If the payload type is unknown or malformed.
    """

    if isinstance(payload, (PositionModifier, ContainingScopeModifier)):
        return payload
    if not isinstance(payload, Mapping):
        raise InvalidDescriptorError("Modifier payload must be a mapping", descriptor=payload)
    kind = payload.get("type")
    if kind == PositionModifier.type:
        position = payload.get("position")
        if position not in POSITIONS:
            raise InvalidDescriptorError(f"Unknown position {position!r}", descriptor=dict(payload))
        return PositionModifier(position=position)
    if kind == ContainingScopeModifier.type:
        scope = payload.get("scopeType", payload.get("scope_type"))
        if isinstance(scope, Mapping):
            scope = scope.get("type")
        if not isinstance(scope, str) or not scope:
            raise InvalidDescriptorError("containingScope modifier requires a scope type", descriptor=dict(payload))
        include_siblings = bool(payload.get("includeSiblings", payload.get("include_siblings", False)))
        return ContainingScopeModifier(scope_type=scope, include_siblings=include_siblings)
    raise InvalidDescriptorError(f"Unknown modifier type {kind!r}", descriptor=dict(payload))


# -----------------------------------------------------------------------------
# Protocols
# -----------------------------------------------------------------------------


@runtime_checkable
class PipelineStage(Protocol):
    """A pure transformation from one typed selection to the next.

    Implementations must not mutate ``selection``, any range reachable from it,
    or ``context``. A stage that cannot apply ``stage`` raises
    :class:`~targetflow.core.errors.InvalidDescriptorError` instead of returning
    its input unchanged.
    """

    def run(self, context: PipelineContext, stage: Any, selection: TypedSelection) -> TypedSelection:
        ...
