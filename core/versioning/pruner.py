"""Keeps the chat timeline consistent with a chosen snapshot."""

from __future__ import annotations

import asyncio
import logging

from storage.contracts import TimelineRepo

logger = logging.getLogger(__name__)


class TimelinePruner:
    def __init__(self, timeline_repo: TimelineRepo):
        self._repo = timeline_repo

    async def prune_after(self, snapshot_id: str) -> int:
        """Delete messages that follow the one tagged with snapshot_id.

        The tagged message stays. No tagged message means nothing to do.
        Returns the number of messages removed; repeating the call is safe.
        """
        anchor = await asyncio.to_thread(self._repo.find_by_commit_hash, snapshot_id)
        if anchor is None:
            logger.debug("No message references commit %s; timeline untouched", snapshot_id)
            return 0

        later = await asyncio.to_thread(self._repo.list_after, anchor.chat_id, anchor.id)
        logger.info(
            "Deleting %d messages after commit %s from chat %s",
            len(later),
            snapshot_id,
            anchor.chat_id,
        )
        if not later:
            return 0
        return await asyncio.to_thread(
            self._repo.delete_entries,
            anchor.chat_id,
            [message.id for message in later],
        )
