"""Author identity used to attribute revert commits."""

from __future__ import annotations

from typing import Protocol

from config.schema import AuthorConfig
from core.versioning.types import AuthorIdentity


class AuthorResolver(Protocol):
    async def resolve(self) -> AuthorIdentity: ...


class SettingsAuthorResolver:
    """Reads the identity from the author settings group."""

    def __init__(self, config: AuthorConfig):
        self._config = config

    async def resolve(self) -> AuthorIdentity:
        name = self._config.name.strip()
        email = self._config.email.strip()
        if not name or not email:
            raise ValueError("Commit author name and email must be configured")
        if any(ch in name + email for ch in "<>\n"):
            raise ValueError(f"Invalid commit author identity: {name!r} <{email!r}>")
        return AuthorIdentity(name=name, email=email)
