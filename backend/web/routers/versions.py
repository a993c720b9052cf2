"""Version history endpoints: list, branch, revert, checkout, timeline prune."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException

from backend.web.core.dependencies import get_version_service
from backend.web.models.requests import (
    BranchData,
    BranchResponse,
    CheckoutVersionRequest,
    PruneTimelineRequest,
    RevertVersionRequest,
    VersionResponse,
)
from core.versioning.errors import ProjectNotFoundError, VersioningError
from core.versioning.service import VersionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects/{project_id}", tags=["versions"])


def _to_http_error(exc: VersioningError) -> HTTPException:
    if isinstance(exc, ProjectNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


@router.get("/versions")
async def list_versions(
    project_id: int,
    service: Annotated[VersionService, Depends(get_version_service)],
) -> list[VersionResponse]:
    """Snapshots newest first; empty when the project has no history yet."""
    try:
        snapshots = await service.list_versions(project_id)
    except VersioningError as e:
        raise _to_http_error(e) from e
    return [VersionResponse(**s.to_dict()) for s in snapshots]


@router.get("/branch")
async def get_current_branch(
    project_id: int,
    service: Annotated[VersionService, Depends(get_version_service)],
) -> BranchResponse:
    result = await service.get_current_branch(project_id)
    if not result.success:
        return BranchResponse(success=False, error_message=result.error_message)
    return BranchResponse(success=True, data=BranchData(branch=result.branch))


@router.post("/versions/revert")
async def revert_version(
    project_id: int,
    payload: RevertVersionRequest,
    service: Annotated[VersionService, Depends(get_version_service)],
) -> dict[str, Any]:
    try:
        await service.revert_version(project_id, payload.previous_version_id)
    except VersioningError as e:
        raise _to_http_error(e) from e
    return {"success": True}


@router.post("/versions/checkout")
async def checkout_version(
    project_id: int,
    payload: CheckoutVersionRequest,
    service: Annotated[VersionService, Depends(get_version_service)],
) -> dict[str, Any]:
    try:
        await service.checkout_version(project_id, payload.version_id)
    except VersioningError as e:
        raise _to_http_error(e) from e
    return {"success": True}


@router.post("/timeline/prune")
async def prune_timeline(
    project_id: int,
    payload: PruneTimelineRequest,
    service: Annotated[VersionService, Depends(get_version_service)],
) -> dict[str, Any]:
    """Re-run pruning for a snapshot, e.g. when a revert failed after committing."""
    try:
        deleted = await service.prune_timeline(project_id, payload.commit_hash)
    except VersioningError as e:
        raise _to_http_error(e) from e
    return {"success": True, "deleted": deleted}
