"""Storage backends for fxreplay."""

from fxreplay.db.base import BaseStore
from fxreplay.db.memory import MemoryStore
from fxreplay.db.sqlite import SQLiteStore

__all__ = ["BaseStore", "MemoryStore", "SQLiteStore"]
