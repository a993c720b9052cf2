from .container import StorageContainer
from .contracts import ProjectRepo, TimelineRepo
from .models import ChatRow, MessageRow, ProjectRow

__all__ = [
    "StorageContainer",
    "ProjectRepo",
    "TimelineRepo",
    "ProjectRow",
    "ChatRow",
    "MessageRow",
]
