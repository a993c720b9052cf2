"""Error taxonomy for version operations.

A missing history store is not an error; readers model it as an empty or
negative result. Everything here propagates to the caller.
"""

from __future__ import annotations


class VersioningError(Exception):
    """Base class for version reconciliation failures."""


class ProjectNotFoundError(VersioningError):
    def __init__(self, project_id: int):
        self.project_id = project_id
        super().__init__(f"Project not found: {project_id}")


class HistoryReadError(VersioningError):
    """History store exists but could not be read."""


class _MutationError(VersioningError):
    action = "mutate"

    def __init__(self, target_id: str, cause: BaseException):
        self.target_id = target_id
        self.cause = cause
        super().__init__(f"Failed to {self.action} version {target_id}: {cause}")


class RevertError(_MutationError):
    action = "revert"


class CheckoutError(_MutationError):
    action = "checkout"
