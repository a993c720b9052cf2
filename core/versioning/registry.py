"""Project id → working directory resolution."""

from __future__ import annotations

import asyncio
from pathlib import Path

from config.schema import RewindSettings
from core.versioning.errors import ProjectNotFoundError
from storage.contracts import ProjectRepo
from storage.models import ProjectRow


class ProjectRegistry:
    def __init__(self, project_repo: ProjectRepo, settings: RewindSettings):
        self._repo = project_repo
        self._settings = settings

    async def get_project(self, project_id: int) -> ProjectRow:
        project = await asyncio.to_thread(self._repo.get_project, project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project

    async def resolve_workdir(self, project_id: int) -> Path:
        project = await self.get_project(project_id)
        return self._settings.resolve_project_path(project.path)

    async def register(self, name: str, path: str) -> ProjectRow:
        return await asyncio.to_thread(self._repo.create_project, name, path)

    async def list_projects(self) -> list[ProjectRow]:
        return await asyncio.to_thread(self._repo.list_projects)
