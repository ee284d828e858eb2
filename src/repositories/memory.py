"""In-process snapshot store."""

from __future__ import annotations

from domain.ratings.common import RosterSnapshot


class InMemorySnapshotStore:
    """Keeps one snapshot per scope in a dict; unknown scopes load as empty."""

    def __init__(self, snapshots: dict[str, RosterSnapshot] | None = None) -> None:
        self._snapshots: dict[str, RosterSnapshot] = dict(snapshots or {})

    def load(self, scope: str) -> RosterSnapshot:
        return self._snapshots.get(scope, RosterSnapshot())

    def save(self, scope: str, snapshot: RosterSnapshot) -> None:
        self._snapshots[scope] = RosterSnapshot(
            players=dict(snapshot.players),
            games=tuple(snapshot.games),
        )

    def scopes(self) -> list[str]:
        return sorted(self._snapshots)
