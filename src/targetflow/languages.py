"""Languages with syntax-tree support for node lookups."""

from __future__ import annotations

from collections.abc import Iterable

from .core.errors import UnsupportedLanguageError

SUPPORTED_LANGUAGE_IDS: tuple[str, ...] = (
    "c",
    "clojure",
    "cpp",
    "csharp",
    "go",
    "html",
    "java",
    "javascript",
    "javascriptreact",
    "json",
    "jsonc",
    "markdown",
    "python",
    "ruby",
    "scala",
    "typescript",
    "typescriptreact",
    "xml",
)


def is_supported_language(language_id: str, *, supported: Iterable[str] | None = None) -> bool:
    allowed = SUPPORTED_LANGUAGE_IDS if supported is None else tuple(supported)
    return (language_id or "").strip().lower() in allowed


def ensure_supported_language(language_id: str, *, supported: Iterable[str] | None = None) -> str:
    """Return ``language_id`` or raise :class:`UnsupportedLanguageError`."""

    if not is_supported_language(language_id, supported=supported):
        raise UnsupportedLanguageError(language_id)
    return language_id


__all__ = ["SUPPORTED_LANGUAGE_IDS", "ensure_supported_language", "is_supported_language"]
