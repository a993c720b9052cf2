"""Applies a target snapshot to a project's working tree.

revert_to moves forward: the primary branch gets a new commit whose tree
equals the target, and the timeline is pruned back to the target.
checkout_to only moves HEAD (and the files) to the target; no new commit and
no timeline change.

Neither path rolls back files already written when a later step fails; the
failure is raised with the target id so the caller can retry.
"""

from __future__ import annotations

import asyncio
import logging

from config.schema import DEFAULT_PRIMARY_BRANCH
from core.versioning.author import AuthorResolver
from core.versioning.differ import diff_tree
from core.versioning.errors import CheckoutError, RevertError
from core.versioning.history_store import GitHistoryStore
from core.versioning.pruner import TimelinePruner

logger = logging.getLogger(__name__)


def revert_message(target: str) -> str:
    return f"Reverted all changes back to version {target}"


class WorkingTreeReconciler:
    """Callers must hold the project's lock for the whole call."""

    def __init__(
        self,
        *,
        author_resolver: AuthorResolver,
        pruner: TimelinePruner,
        primary_branch: str = DEFAULT_PRIMARY_BRANCH,
    ):
        self._author_resolver = author_resolver
        self._pruner = pruner
        self._primary_branch = primary_branch

    async def revert_to(self, store: GitHistoryStore, target: str) -> str:
        """Make the working tree equal target and commit it. Returns the new commit id."""
        try:
            author = await self._author_resolver.resolve()

            await asyncio.to_thread(store.checkout, self._primary_branch)

            statuses = await diff_tree(store, target)
            # deletions first: a directory being removed may sit where a target file goes
            deleted = 0
            for status in statuses:
                if status.needs_delete and await asyncio.to_thread(store.delete, status.path):
                    deleted += 1
            restored = 0
            for status in statuses:
                if status.needs_restore:
                    await asyncio.to_thread(store.restore, target, status.path)
                    restored += 1

            await asyncio.to_thread(store.add_all)
            commit_id = await asyncio.to_thread(store.commit, revert_message(target), author.as_git_identity())
            logger.info(
                "Reverted %s to %s as %s (%d restored, %d deleted)",
                store.workdir,
                target,
                commit_id,
                restored,
                deleted,
            )

            await self._pruner.prune_after(target)
        except Exception as exc:
            logger.exception("Error reverting %s to version %s", store.workdir, target)
            raise RevertError(target, exc) from exc
        return commit_id

    async def checkout_to(self, store: GitHistoryStore, target: str) -> None:
        try:
            await asyncio.to_thread(store.checkout, target)
        except Exception as exc:
            logger.exception("Error checking out %s to version %s", store.workdir, target)
            raise CheckoutError(target, exc) from exc
        logger.info("Checked out %s to %s", store.workdir, target)
