"""Version reconciliation: snapshot listing, revert, checkout, timeline pruning."""

from core.versioning.errors import (
    CheckoutError,
    HistoryReadError,
    ProjectNotFoundError,
    RevertError,
    VersioningError,
)
from core.versioning.history_store import GitHistoryStore, UnknownRefError
from core.versioning.locks import ProjectLockTable
from core.versioning.service import VersionService
from core.versioning.types import BranchFailure, BranchResult, FileStatus, PathState, Snapshot

__all__ = [
    "BranchFailure",
    "BranchResult",
    "CheckoutError",
    "FileStatus",
    "GitHistoryStore",
    "HistoryReadError",
    "PathState",
    "ProjectLockTable",
    "ProjectNotFoundError",
    "RevertError",
    "Snapshot",
    "UnknownRefError",
    "VersionService",
    "VersioningError",
]
