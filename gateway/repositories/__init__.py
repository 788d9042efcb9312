"""Repository layer for data access."""

from gateway.repositories.local_file_repository import LocalFileRecordRepository
from gateway.repositories.stage_event_repository import StageEventRepository

__all__ = [
    "LocalFileRecordRepository",
    "StageEventRepository",
]
