"""Storage container: composition root for storage repos."""

from __future__ import annotations

from pathlib import Path

from .contracts import ProjectRepo, TimelineRepo


class StorageContainer:
    """Builds repos bound to one SQLite database.

    Each call returns a fresh repo that owns its connection; callers close it.
    """

    _REPO_NAMES = ("project_repo", "timeline_repo")

    def __init__(self, main_db_path: str | Path | None = None) -> None:
        self._main_db = Path(main_db_path) if main_db_path else Path.home() / ".rewind" / "rewind.db"

    @property
    def main_db_path(self) -> Path:
        return self._main_db

    def project_repo(self) -> ProjectRepo:
        from storage.providers.sqlite.project_repo import SQLiteProjectRepo
        return SQLiteProjectRepo(db_path=self._main_db)

    def timeline_repo(self) -> TimelineRepo:
        from storage.providers.sqlite.timeline_repo import SQLiteTimelineRepo
        return SQLiteTimelineRepo(db_path=self._main_db)

    def build(self, repo_name: str):
        if repo_name not in self._REPO_NAMES:
            supported = ", ".join(self._REPO_NAMES)
            raise ValueError(f"Unknown repo name: {repo_name}. Supported repo names: {supported}")
        return getattr(self, repo_name)()
