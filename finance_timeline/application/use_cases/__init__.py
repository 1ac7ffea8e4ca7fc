"""Application use cases package."""

from .change_commands import ChangeCommandResult
from .create_request import CreateRequestUseCase
from .create_change import CreateChangeUseCase, generate_change_id
from .commit_change import CommitChangeUseCase
from .publish_change import PublishChangeUseCase
from .cancel_change import CancelChangeUseCase
from .get_change_projection import (
    GetChangeProjectionUseCase,
    ChangeProjectionView,
)
from .list_versions import ListVersionsUseCase, VersionHistory
from .replay_version import ReplayVersionUseCase, VersionReplay

__all__ = [
    "ChangeCommandResult",
    "CreateRequestUseCase",
    "CreateChangeUseCase",
    "generate_change_id",
    "CommitChangeUseCase",
    "PublishChangeUseCase",
    "CancelChangeUseCase",
    "GetChangeProjectionUseCase",
    "ChangeProjectionView",
    "ListVersionsUseCase",
    "VersionHistory",
    "ReplayVersionUseCase",
    "VersionReplay",
]
