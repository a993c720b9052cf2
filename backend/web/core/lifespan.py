"""Application lifespan management."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from backend.web.core.config import WORKSPACE_ROOT
from config.loader import load_settings
from config.schema import RewindSettings
from core.versioning.locks import ProjectLockTable
from core.versioning.service import VersionService
from storage.container import StorageContainer

logger = logging.getLogger(__name__)


def _configure_logging(settings: RewindSettings) -> None:
    level = getattr(logging, settings.logging.level)
    for name in ("core", "backend", "config", "storage"):
        logging.getLogger(name).setLevel(level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan context manager for startup and shutdown."""
    settings: RewindSettings | None = getattr(app.state, "settings", None)
    if settings is None:
        settings = load_settings(workspace_root=WORKSPACE_ROOT)
    _configure_logging(settings)

    container = StorageContainer(main_db_path=settings.storage.db_path)
    app.state.settings = settings
    app.state.storage = container
    app.state.project_repo = container.project_repo()
    app.state.timeline_repo = container.timeline_repo()
    app.state.project_locks = ProjectLockTable()
    app.state.version_service = VersionService(
        settings,
        app.state.project_repo,
        app.state.timeline_repo,
        locks=app.state.project_locks,
    )
    logger.info("Rewind backend ready (db=%s)", container.main_db_path)

    try:
        yield
    finally:
        for repo in (app.state.project_repo, app.state.timeline_repo):
            try:
                repo.close()
            except Exception as e:
                logger.warning("Repo cleanup error: %s", e)
