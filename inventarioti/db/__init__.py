"""SQLite-backed preference storage."""

from .preferences import PreferencesDB
from .schema import ensure_schema

__all__ = [
    "PreferencesDB",
    "ensure_schema",
]
