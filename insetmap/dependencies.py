"""FastAPI dependency injection."""

from __future__ import annotations

from insetmap.config import Settings, settings


def get_settings() -> Settings:
    """Process-wide settings, overridable in tests via ``app.dependency_overrides``."""
    return settings
