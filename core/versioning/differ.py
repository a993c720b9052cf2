"""Three-way comparison of a target snapshot against the working tree."""

from __future__ import annotations

import asyncio

from core.versioning.history_store import GitHistoryStore
from core.versioning.types import FileStatus, StageStatus, TargetPresence, WorkdirStatus


async def diff_tree(store: GitHistoryStore, target: str) -> list[FileStatus]:
    """Per-path status of target vs working tree vs index.

    Always computed fresh; the working tree may change between calls. Paths
    in neither the target nor the working tree are left out.
    """
    rows = await asyncio.to_thread(store.status_matrix, target)
    return [
        FileStatus(
            path=path,
            target=TargetPresence(head),
            workdir=WorkdirStatus(workdir),
            stage=StageStatus(stage),
        )
        for path, head, workdir, stage in rows
        if head or workdir
    ]


def differing_paths(statuses: list[FileStatus]) -> list[str]:
    """Paths whose working copy or index entry does not match the target."""
    return [status.path for status in statuses if not status.is_clean]
