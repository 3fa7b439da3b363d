# src/pagescript/adapters/db/__init__.py
from .sqlite_store import SQLite, SQLiteKV

__all__ = ["SQLite", "SQLiteKV"]
