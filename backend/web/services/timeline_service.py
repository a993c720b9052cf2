"""Chat timeline access via the storage repository boundary."""

import asyncio
from typing import Any

from storage.contracts import TimelineRepo
from storage.models import ChatRow, MessageRow


def serialize_chat(chat: ChatRow) -> dict[str, Any]:
    return {
        "id": chat.id,
        "project_id": chat.project_id,
        "title": chat.title,
        "created_at": chat.created_at,
    }


def serialize_message(message: MessageRow) -> dict[str, Any]:
    return {
        "id": message.id,
        "chat_id": message.chat_id,
        "role": message.role,
        "content": message.content,
        "commit_hash": message.commit_hash,
        "created_at": message.created_at,
    }


async def create_chat(repo: TimelineRepo, project_id: int, title: str | None) -> dict[str, Any]:
    chat = await asyncio.to_thread(repo.create_chat, project_id, title)
    return serialize_chat(chat)


async def get_chat(repo: TimelineRepo, chat_id: int) -> ChatRow | None:
    return await asyncio.to_thread(repo.get_chat, chat_id)


async def append_message(
    repo: TimelineRepo,
    chat_id: int,
    role: str,
    content: str,
    commit_hash: str | None = None,
) -> dict[str, Any]:
    message = await asyncio.to_thread(repo.append_message, chat_id, role, content, commit_hash)
    return serialize_message(message)


async def list_messages(repo: TimelineRepo, chat_id: int) -> list[dict[str, Any]]:
    messages = await asyncio.to_thread(repo.list_messages, chat_id)
    return [serialize_message(m) for m in messages]
