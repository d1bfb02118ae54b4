"""History database (SQLite via SQLAlchemy Core)."""

from .history import HistoryLog

__all__ = ["HistoryLog"]
