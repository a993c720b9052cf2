"""SQLite storage provider implementations."""

from .project_repo import SQLiteProjectRepo
from .timeline_repo import SQLiteTimelineRepo

__all__ = [
    "SQLiteProjectRepo",
    "SQLiteTimelineRepo",
]
