"""Application ports package."""

from .database import DatabaseEnginePort
from .event_store import EventStorePort
from .view_store import ViewStorePort

__all__ = [
    "DatabaseEnginePort",
    "EventStorePort",
    "ViewStorePort",
]
