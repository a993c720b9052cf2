"""Pydantic request/response models for the Rewind web API."""

from pydantic import BaseModel, Field


class CreateProjectRequest(BaseModel):
    name: str = Field(..., min_length=1)
    path: str = Field(..., min_length=1)
    init_git: bool = False


class CreateChatRequest(BaseModel):
    title: str | None = None


class AppendMessageRequest(BaseModel):
    role: str = Field(..., pattern="^(user|assistant|system)$")
    content: str
    commit_hash: str | None = None


class RevertVersionRequest(BaseModel):
    previous_version_id: str = Field(..., min_length=1)


class CheckoutVersionRequest(BaseModel):
    version_id: str = Field(..., min_length=1)


class PruneTimelineRequest(BaseModel):
    commit_hash: str = Field(..., min_length=1)


class VersionResponse(BaseModel):
    oid: str
    message: str
    timestamp: int


class BranchData(BaseModel):
    branch: str


class BranchResponse(BaseModel):
    success: bool
    data: BranchData | None = None
    error_message: str | None = None
