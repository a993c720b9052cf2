"""Storage repository contracts."""

from __future__ import annotations

from typing import Protocol

from storage.models import ChatRow, MessageRow, ProjectRow


class ProjectRepo(Protocol):
    """Registry mapping project ids to working-directory paths."""

    def close(self) -> None: ...

    def create_project(self, name: str, path: str) -> ProjectRow: ...

    def get_project(self, project_id: int) -> ProjectRow | None: ...

    def list_projects(self) -> list[ProjectRow]: ...


class TimelineRepo(Protocol):
    """Chats and their ordered messages."""

    def close(self) -> None: ...

    def create_chat(self, project_id: int, title: str | None = None) -> ChatRow: ...

    def get_chat(self, chat_id: int) -> ChatRow | None: ...

    def append_message(
        self,
        chat_id: int,
        role: str,
        content: str,
        commit_hash: str | None = None,
    ) -> MessageRow: ...

    def list_messages(self, chat_id: int) -> list[MessageRow]: ...

    def find_by_commit_hash(self, commit_hash: str) -> MessageRow | None:
        """Message tagged with the snapshot, lowest id first."""

    def list_after(self, chat_id: int, message_id: int) -> list[MessageRow]:
        """Messages in the chat with id > message_id, newest first."""

    def delete_entries(self, chat_id: int, message_ids: list[int]) -> int:
        """Delete the given messages of one chat in one transaction."""
