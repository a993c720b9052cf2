"""Shared storage domain models: provider-neutral data types."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ProjectRow:
    id: int
    name: str
    path: str
    created_at: str | None = None


@dataclass
class ChatRow:
    id: int
    project_id: int
    title: str | None
    created_at: str | None = None


@dataclass
class MessageRow:
    """One timeline entry; ids increase strictly within a chat."""

    id: int
    chat_id: int
    role: str
    content: str
    commit_hash: str | None = None
    created_at: str | None = None
