"""Entry point for version operations.

Every mutation (revert, checkout, timeline prune) runs as one unit under the
project's lock: resolve the project, reconcile the working tree, then prune.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

from config.schema import RewindSettings
from core.versioning.author import AuthorResolver, SettingsAuthorResolver
from core.versioning.history_store import GitHistoryStore
from core.versioning.locks import ProjectLockTable
from core.versioning.pruner import TimelinePruner
from core.versioning.reader import SnapshotReader
from core.versioning.reconciler import WorkingTreeReconciler
from core.versioning.registry import ProjectRegistry
from core.versioning.types import BranchResult, Snapshot
from storage.contracts import ProjectRepo, TimelineRepo
from storage.models import ProjectRow

logger = logging.getLogger(__name__)


class VersionService:
    def __init__(
        self,
        settings: RewindSettings,
        project_repo: ProjectRepo,
        timeline_repo: TimelineRepo,
        *,
        locks: ProjectLockTable | None = None,
        author_resolver: AuthorResolver | None = None,
        store_factory: Callable[[Path], GitHistoryStore] = GitHistoryStore,
    ):
        self.settings = settings
        self.locks = locks or ProjectLockTable()
        self.registry = ProjectRegistry(project_repo, settings)
        self.pruner = TimelinePruner(timeline_repo)
        self.reader = SnapshotReader(
            self.registry,
            depth=settings.versioning.history_depth,
            no_branch_label=settings.versioning.no_branch_label,
            store_factory=store_factory,
        )
        self.reconciler = WorkingTreeReconciler(
            author_resolver=author_resolver or SettingsAuthorResolver(settings.author),
            pruner=self.pruner,
            primary_branch=settings.versioning.primary_branch,
        )
        self._store_factory = store_factory

    async def create_project(self, name: str, path: str, *, init_git: bool = False) -> ProjectRow:
        project = await self.registry.register(name, path)
        if init_git:
            store = self._store_factory(self.settings.resolve_project_path(project.path))
            await asyncio.to_thread(store.init, self.settings.versioning.primary_branch)
        return project

    async def list_versions(self, project_id: int) -> list[Snapshot]:
        return await self.reader.list_snapshots(project_id)

    async def get_current_branch(self, project_id: int) -> BranchResult:
        return await self.reader.current_branch(project_id)

    async def revert_version(self, project_id: int, previous_version_id: str) -> str:
        """Commit the working tree back to previous_version_id and prune the timeline."""

        async def _revert() -> str:
            store = await self._store_for(project_id)
            logger.info("Reverting project %s to version %s", project_id, previous_version_id)
            return await self.reconciler.revert_to(store, previous_version_id)

        return await self.locks.run_exclusive(project_id, _revert)

    async def checkout_version(self, project_id: int, version_id: str) -> None:
        async def _checkout() -> None:
            store = await self._store_for(project_id)
            logger.info("Checking out project %s at version %s", project_id, version_id)
            await self.reconciler.checkout_to(store, version_id)

        await self.locks.run_exclusive(project_id, _checkout)

    async def prune_timeline(self, project_id: int, snapshot_id: str) -> int:
        """Re-run timeline pruning for a snapshot, e.g. after a revert failed while pruning."""

        async def _prune() -> int:
            await self.registry.get_project(project_id)
            return await self.pruner.prune_after(snapshot_id)

        return await self.locks.run_exclusive(project_id, _prune)

    async def _store_for(self, project_id: int) -> GitHistoryStore:
        return self._store_factory(await self.registry.resolve_workdir(project_id))
