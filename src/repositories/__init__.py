"""Snapshot stores for roster persistence."""

from repositories.memory import InMemorySnapshotStore
from repositories.snapshot_repository import SqlAlchemySnapshotStore, ensure_snapshot_schema

__all__ = [
    "InMemorySnapshotStore",
    "SqlAlchemySnapshotStore",
    "ensure_snapshot_schema",
]
