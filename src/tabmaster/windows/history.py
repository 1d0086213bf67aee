from __future__ import annotations

from types import MappingProxyType
from typing import List, Mapping, Optional

NameMap = Mapping[str, str]


class NameHistory:
    """Linear undo/redo history of custom-name snapshots.

    Each snapshot maps window id to the name the user chose. Generated
    defaults are not part of a snapshot.
    Every committed rename (single or batch) is one snapshot, so undo and redo
    revert or reapply all windows touched by that action together. Stepping
    past either edge is a silent no-op.
    """

    def __init__(self) -> None:
        self._snapshots: List[NameMap] = []
        self._cursor = -1

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current(self) -> Optional[NameMap]:
        if self._cursor < 0:
            return None
        return self._snapshots[self._cursor]

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._snapshots) - 1

    def push(self, names: Mapping[str, str]) -> NameMap:
        snapshot: NameMap = MappingProxyType(dict(names))
        # A new action invalidates everything that could have been redone.
        del self._snapshots[self._cursor + 1 :]
        self._snapshots.append(snapshot)
        self._cursor = len(self._snapshots) - 1
        return snapshot

    def initialize(self, names: Mapping[str, str]) -> bool:
        """Seed the first snapshot; does nothing once history exists."""

        if self._snapshots:
            return False
        self.push(names)
        return True

    def undo(self) -> Optional[NameMap]:
        if not self.can_undo:
            return None
        self._cursor -= 1
        return self._snapshots[self._cursor]

    def redo(self) -> Optional[NameMap]:
        if not self.can_redo:
            return None
        self._cursor += 1
        return self._snapshots[self._cursor]

    def reset(self) -> None:
        self._snapshots.clear()
        self._cursor = -1


__all__ = ["NameHistory", "NameMap"]
