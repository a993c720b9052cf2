"""Read-only views of a project's history."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

from config.schema import DEFAULT_HISTORY_DEPTH, NO_BRANCH_LABEL
from core.versioning.errors import HistoryReadError, ProjectNotFoundError
from core.versioning.history_store import GitHistoryStore
from core.versioning.registry import ProjectRegistry
from core.versioning.types import BranchFailure, BranchResult, Snapshot

logger = logging.getLogger(__name__)


class SnapshotReader:
    """Lists snapshots and reports the checked-out branch. Never mutates."""

    def __init__(
        self,
        registry: ProjectRegistry,
        *,
        depth: int = DEFAULT_HISTORY_DEPTH,
        no_branch_label: str = NO_BRANCH_LABEL,
        store_factory: Callable[[Path], GitHistoryStore] = GitHistoryStore,
    ):
        self._registry = registry
        self._depth = depth
        self._no_branch_label = no_branch_label
        self._store_factory = store_factory

    async def list_snapshots(self, project_id: int) -> list[Snapshot]:
        """Most recent first, at most `depth` entries.

        A project without a history store yields []. An unreadable store
        raises HistoryReadError.
        """
        workdir = await self._registry.resolve_workdir(project_id)
        store = self._store_factory(workdir)
        if not await asyncio.to_thread(store.exists):
            return []
        try:
            return await asyncio.to_thread(store.log, self._depth)
        except Exception as exc:
            logger.error("Error listing versions for project %s: %s", project_id, exc)
            raise HistoryReadError(f"Failed to list versions: {exc}") from exc

    async def current_branch(self, project_id: int) -> BranchResult:
        try:
            workdir = await self._registry.resolve_workdir(project_id)
        except ProjectNotFoundError:
            return BranchResult.fail(BranchFailure.PROJECT_NOT_FOUND, "Project not found")

        store = self._store_factory(workdir)
        if not await asyncio.to_thread(store.exists):
            return BranchResult.fail(BranchFailure.NOT_A_REPOSITORY, "Not a git repository")

        try:
            branch = await asyncio.to_thread(store.current_branch)
        except Exception as exc:
            logger.error("Error getting current branch for project %s: %s", project_id, exc)
            return BranchResult.fail(BranchFailure.READ_FAILED, f"Failed to get current branch: {exc}")
        return BranchResult.ok(branch or self._no_branch_label)
