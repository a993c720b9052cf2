"""Project registry and chat timeline endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException

from backend.web.core.dependencies import get_timeline_repo, get_version_service
from backend.web.models.requests import AppendMessageRequest, CreateChatRequest, CreateProjectRequest
from backend.web.services import timeline_service
from core.versioning.errors import ProjectNotFoundError
from core.versioning.service import VersionService
from storage.contracts import TimelineRepo
from storage.models import ProjectRow

router = APIRouter(prefix="/api", tags=["projects"])


def _serialize_project(project: ProjectRow) -> dict[str, Any]:
    return {"id": project.id, "name": project.name, "path": project.path, "created_at": project.created_at}


@router.post("/projects")
async def create_project(
    payload: CreateProjectRequest,
    service: Annotated[VersionService, Depends(get_version_service)],
) -> dict[str, Any]:
    """Register a project directory, optionally initialising its history."""
    project = await service.create_project(payload.name, payload.path, init_git=payload.init_git)
    return _serialize_project(project)


@router.get("/projects")
async def list_projects(service: Annotated[VersionService, Depends(get_version_service)]) -> dict[str, Any]:
    projects = await service.registry.list_projects()
    return {"projects": [_serialize_project(p) for p in projects]}


@router.get("/projects/{project_id}")
async def get_project(
    project_id: int,
    service: Annotated[VersionService, Depends(get_version_service)],
) -> dict[str, Any]:
    try:
        project = await service.registry.get_project(project_id)
    except ProjectNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return _serialize_project(project)


@router.post("/projects/{project_id}/chats")
async def create_chat(
    project_id: int,
    payload: CreateChatRequest,
    service: Annotated[VersionService, Depends(get_version_service)],
    repo: Annotated[TimelineRepo, Depends(get_timeline_repo)],
) -> dict[str, Any]:
    try:
        await service.registry.get_project(project_id)
    except ProjectNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return await timeline_service.create_chat(repo, project_id, payload.title)


@router.post("/chats/{chat_id}/messages")
async def append_message(
    chat_id: int,
    payload: AppendMessageRequest,
    repo: Annotated[TimelineRepo, Depends(get_timeline_repo)],
) -> dict[str, Any]:
    if await timeline_service.get_chat(repo, chat_id) is None:
        raise HTTPException(status_code=404, detail=f"Chat not found: {chat_id}")
    return await timeline_service.append_message(repo, chat_id, payload.role, payload.content, payload.commit_hash)


@router.get("/chats/{chat_id}/messages")
async def list_messages(
    chat_id: int,
    repo: Annotated[TimelineRepo, Depends(get_timeline_repo)],
) -> dict[str, Any]:
    if await timeline_service.get_chat(repo, chat_id) is None:
        raise HTTPException(status_code=404, detail=f"Chat not found: {chat_id}")
    return {"chat_id": chat_id, "messages": await timeline_service.list_messages(repo, chat_id)}
