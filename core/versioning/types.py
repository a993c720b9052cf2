"""Value types shared by the versioning components."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


@dataclass(frozen=True)
class Snapshot:
    """One commit as seen by the version picker."""

    oid: str
    message: str
    timestamp: int

    def to_dict(self) -> dict:
        return {"oid": self.oid, "message": self.message, "timestamp": self.timestamp}


class BranchFailure(str, Enum):
    PROJECT_NOT_FOUND = "project_not_found"
    NOT_A_REPOSITORY = "not_a_repository"
    READ_FAILED = "read_failed"


@dataclass(frozen=True)
class BranchResult:
    """Outcome of a branch lookup. Failures are values, never raised."""

    success: bool
    branch: str | None = None
    error_message: str | None = None
    failure: BranchFailure | None = None

    @classmethod
    def ok(cls, branch: str) -> BranchResult:
        return cls(success=True, branch=branch)

    @classmethod
    def fail(cls, failure: BranchFailure, message: str) -> BranchResult:
        return cls(success=False, error_message=message, failure=failure)


@dataclass(frozen=True)
class AuthorIdentity:
    name: str
    email: str

    def as_git_identity(self) -> str:
        return f"{self.name} <{self.email}>"


# Status codes of one status-matrix row, relative to the target snapshot.


class TargetPresence(IntEnum):
    ABSENT = 0
    PRESENT = 1


class WorkdirStatus(IntEnum):
    ABSENT = 0
    UNCHANGED = 1  # identical to target
    MODIFIED = 2  # differs from target (or target lacks the path)


class StageStatus(IntEnum):
    ABSENT = 0
    MATCHES_TARGET = 1
    MATCHES_WORKDIR = 2
    DIFFERS = 3


class PathState(Enum):
    ONLY_IN_TARGET = "only_in_target"
    ONLY_IN_WORKING_TREE = "only_in_working_tree"
    IN_BOTH = "in_both"
    IN_NEITHER = "in_neither"


@dataclass(frozen=True)
class FileStatus:
    path: str
    target: TargetPresence
    workdir: WorkdirStatus
    stage: StageStatus

    @property
    def state(self) -> PathState:
        in_target = self.target == TargetPresence.PRESENT
        in_workdir = self.workdir != WorkdirStatus.ABSENT
        if in_target and in_workdir:
            return PathState.IN_BOTH
        if in_target:
            return PathState.ONLY_IN_TARGET
        if in_workdir:
            return PathState.ONLY_IN_WORKING_TREE
        return PathState.IN_NEITHER

    @property
    def needs_restore(self) -> bool:
        """Target has the file and the working copy is missing or different."""
        return self.target == TargetPresence.PRESENT and self.workdir != WorkdirStatus.UNCHANGED

    @property
    def needs_delete(self) -> bool:
        return self.state == PathState.ONLY_IN_WORKING_TREE

    @property
    def is_clean(self) -> bool:
        return (
            self.target == TargetPresence.PRESENT
            and self.workdir == WorkdirStatus.UNCHANGED
            and self.stage == StageStatus.MATCHES_TARGET
        )
