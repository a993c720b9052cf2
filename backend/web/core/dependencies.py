"""FastAPI dependency injection functions."""

from typing import Annotated

from fastapi import Depends, FastAPI, Request

from core.versioning.service import VersionService
from storage.contracts import TimelineRepo


async def get_app(request: Request) -> FastAPI:
    """Get FastAPI app instance from request."""
    return request.app


async def get_version_service(app: Annotated[FastAPI, Depends(get_app)]) -> VersionService:
    return app.state.version_service


async def get_timeline_repo(app: Annotated[FastAPI, Depends(get_app)]) -> TimelineRepo:
    return app.state.timeline_repo
