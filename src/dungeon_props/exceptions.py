from __future__ import annotations

from typing import Optional


class DungeonPropsError(Exception):
    """Base exception for the dungeon props project."""


class PreconditionError(DungeonPropsError):
    """Raised when a generation pass is asked to run on inputs it cannot handle
    (e.g. a room that does not touch the path, or an empty prop catalog)."""


class ConfigurationError(DungeonPropsError):
    """Raised when settings or prop definitions are inconsistent."""


class CatalogValidationError(ConfigurationError):
    """Raised when a prop catalog document fails schema validation."""

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.errors = errors or []

    def to_human(self) -> str:
        parts = [str(self)]
        for e in self.errors:
            path = "/".join(str(p) for p in e.path) or "<root>"
            parts.append(f" - at {path}: {e.message}")
        return "\n".join(parts)
