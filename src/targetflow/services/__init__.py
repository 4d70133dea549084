"""Service layer: persisted settings."""

from .settings import Settings, SettingsStore

__all__ = ["Settings", "SettingsStore"]
