"""Error taxonomy raised while resolving targets into selections."""

from __future__ import annotations

from typing import Any


class TargetResolutionError(RuntimeError):
    """Base class for failures raised by the selection pipeline."""

    default_reason = "target_resolution_failed"

    def __init__(self, message: str, *, reason: str | None = None, **context: Any) -> None:
        super().__init__(message)
        self.reason = reason or self.default_reason
        self.context = dict(context)

    def details(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"reason": self.reason, "message": str(self)}
        payload.update(self.context)
        return payload


class InvalidDescriptorError(TargetResolutionError):
    """Raised when a stage receives a modifier it cannot apply."""

    default_reason = "invalid_descriptor"

    def __init__(self, message: str, *, descriptor: Any = None, stage: str | None = None) -> None:
        super().__init__(message, descriptor=descriptor, stage=stage)
        self.descriptor = descriptor
        self.stage = stage


class MissingRangeError(TargetResolutionError):
    """Raised when an upstream resolver hands over a selection without a content range."""

    default_reason = "missing_range"

    def __init__(self, message: str = "Selection is missing its content range", *, stage: str | None = None) -> None:
        super().__init__(message, stage=stage)
        self.stage = stage


class SelectionInvariantError(TargetResolutionError):
    """Raised when a selection violates the data-model invariants."""

    default_reason = "invariant_violation"

    def __init__(self, message: str, *, field: str | None = None, stage: str | None = None) -> None:
        super().__init__(message, field=field, stage=stage)
        self.field = field
        self.stage = stage


class HatNotFoundError(TargetResolutionError, LookupError):
    """Raised when no token is recorded for a ``(hat_style, character)`` pair."""

    default_reason = "mark_not_found"

    def __init__(self, hat_style: str, character: str) -> None:
        super().__init__(
            f"Couldn't find mark {hat_style} {character!r}",
            hat_style=hat_style,
            character=character,
        )
        self.hat_style = hat_style
        self.character = character


class UnsupportedLanguageError(TargetResolutionError):
    """Raised when a syntax lookup is requested for a language without parser support."""

    default_reason = "unsupported_language"

    def __init__(self, language_id: str) -> None:
        super().__init__(f"Language {language_id!r} is not supported", language_id=language_id)
        self.language_id = language_id


class NodeLocatorMissingError(TargetResolutionError):
    """Raised when a syntax lookup runs on a context built without a node locator."""

    default_reason = "node_locator_missing"

    def __init__(self, uri: str) -> None:
        super().__init__(f"No syntax node locator configured for {uri}", uri=uri)
        self.uri = uri


__all__ = [
    "HatNotFoundError",
    "InvalidDescriptorError",
    "MissingRangeError",
    "NodeLocatorMissingError",
    "SelectionInvariantError",
    "TargetResolutionError",
    "UnsupportedLanguageError",
]
