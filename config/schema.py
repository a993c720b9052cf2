"""Configuration schema for Rewind using Pydantic.

Nested config groups:
- storage: where the relational store (projects, chats, messages) lives
- versioning: project roots, primary branch, history depth
- author: identity stamped on revert commits
- logging: level applied to the core and backend loggers
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

# Mirrors the depth the version picker in the UI asks for
DEFAULT_HISTORY_DEPTH = 10_000
DEFAULT_PRIMARY_BRANCH = "main"
NO_BRANCH_LABEL = "<no-branch>"

REWIND_HOME = Path.home() / ".rewind"


class StorageConfig(BaseModel):
    """Relational store configuration."""

    db_path: Path = Field(REWIND_HOME / "rewind.db", description="SQLite database path")

    @field_validator("db_path")
    @classmethod
    def expand_db_path(cls, v: Path) -> Path:
        return Path(v).expanduser()


class VersioningConfig(BaseModel):
    """History traversal and reconciliation settings."""

    projects_root: Path = Field(REWIND_HOME / "projects", description="Base dir for relative project paths")
    primary_branch: str = Field(DEFAULT_PRIMARY_BRANCH, description="Branch reverts always land on")
    history_depth: int = Field(DEFAULT_HISTORY_DEPTH, gt=0, description="Max commits returned by a listing")
    no_branch_label: str = Field(NO_BRANCH_LABEL, description="Reported branch name for a detached HEAD")

    @field_validator("projects_root")
    @classmethod
    def expand_projects_root(cls, v: Path) -> Path:
        return Path(v).expanduser()

    @field_validator("primary_branch")
    @classmethod
    def validate_branch(cls, v: str) -> str:
        v = v.strip()
        if not v or v.startswith("refs/") or " " in v:
            raise ValueError(f"Invalid branch name: {v!r}")
        return v


class AuthorConfig(BaseModel):
    """Identity used for commits created by a revert."""

    name: str = Field("Rewind", description="Commit author name")
    email: str = Field("rewind@localhost", description="Commit author email")


class LoggingConfig(BaseModel):
    level: str = Field("INFO", description="Log level for core and backend loggers")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        v = v.upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return v


class RewindSettings(BaseModel):
    """Top-level settings object."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    versioning: VersioningConfig = Field(default_factory=VersioningConfig)
    author: AuthorConfig = Field(default_factory=AuthorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def resolve_project_path(self, stored_path: str) -> Path:
        """Resolve a registry path: absolute paths as-is, relative ones under projects_root."""
        path = Path(stored_path).expanduser()
        if path.is_absolute():
            return path
        return self.versioning.projects_root / path
