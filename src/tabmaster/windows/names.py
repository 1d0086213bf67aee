from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Set

from ..naming import generate_window_names
from .history import NameHistory, NameMap
from .models import UNKNOWN_WINDOW_NAME
from .storage import StorageService


def clean_window_name(name: Optional[str]) -> Optional[str]:
    """Trimmed name, or None when nothing is left to show."""

    if name is None:
        return None
    cleaned = name.strip()
    return cleaned or None


class WindowNameBook:
    """Owns the live NameMap: generated defaults, custom overrides and history.

    Defaults come from window position and are recomputed on every load;
    custom overrides are keyed by window id and win over them. Each committed
    rename pushes the resulting override map onto the history, so a batch
    rename undoes in one step and undo never resurrects a stale default.
    """

    def __init__(self, storage: StorageService | None = None, history: NameHistory | None = None) -> None:
        self._storage = storage
        self.history = history or NameHistory()
        self._window_ids: List[str] = []
        self._defaults: Dict[str, str] = {}
        self._custom: Dict[str, str] = {}
        self._names: Dict[str, str] = {}
        # Every id that carried an override this session; flush clears the ones that lost it.
        self._seen_custom: Set[str] = set()

    @property
    def names(self) -> NameMap:
        return MappingProxyType(self._names)

    @property
    def defaults(self) -> NameMap:
        return MappingProxyType(self._defaults)

    @property
    def window_ids(self) -> List[str]:
        return list(self._window_ids)

    def display_name(self, window_id: str) -> str:
        return self._names.get(window_id) or UNKNOWN_WINDOW_NAME

    def load(
        self,
        window_ids: Iterable[str],
        custom_names: Mapping[str, str] | None = None,
        *,
        reset_history: bool = False,
    ) -> NameMap:
        """Rebuild names for a fresh window list.

        History is seeded on the first load (or after `reset_history`); later
        reloads keep it so undo still works after tabs move around.
        """

        self._window_ids = list(window_ids)
        self._defaults = generate_window_names(self._window_ids)
        custom: Dict[str, str] = {}
        for window_id, name in (custom_names or {}).items():
            cleaned = clean_window_name(name)
            if cleaned:
                custom[window_id] = cleaned
        if reset_history:
            self.history.reset()
        self._apply_custom(custom)
        self.history.initialize(self._custom)
        return self.names

    def rename(self, window_id: str, name: Optional[str]) -> bool:
        return bool(self.apply_names({window_id: name}))

    def apply_names(self, suggestions: Mapping[str, Optional[str]]) -> Dict[str, str]:
        """Apply several renames as one undoable step.

        Blank names and unknown windows are dropped; returns what was applied.
        A name equal to the window's generated default clears its override.
        """

        accepted: Dict[str, str] = {}
        for window_id, name in suggestions.items():
            cleaned = clean_window_name(name)
            if cleaned is None or window_id not in self._names:
                continue
            if self._names[window_id] == cleaned:
                continue
            accepted[window_id] = cleaned
        if not accepted:
            return accepted
        custom = dict(self._custom)
        for window_id, name in accepted.items():
            if name == self._defaults.get(window_id):
                custom.pop(window_id, None)
            else:
                custom[window_id] = name
        self._apply_custom(custom)
        self.history.push(self._custom)
        return accepted

    def undo(self) -> Optional[NameMap]:
        snapshot = self.history.undo()
        if snapshot is None:
            return None
        self._apply_custom(snapshot)
        return self.names

    def redo(self) -> Optional[NameMap]:
        snapshot = self.history.redo()
        if snapshot is None:
            return None
        self._apply_custom(snapshot)
        return self.names

    def custom_names(self) -> Dict[str, str]:
        """Overrides to persist, including those of windows not open right now."""

        return dict(self._custom)

    async def flush(self) -> Dict[str, str]:
        """Persist custom names; ids that lost their override are cleared."""

        custom = self.custom_names()
        if self._storage is None:
            return custom
        cleared = (set(self._window_ids) | self._seen_custom) - set(custom)
        return await self._storage.save_custom_names(custom, cleared=sorted(cleared))

    def _apply_custom(self, custom: Mapping[str, str]) -> None:
        self._custom = dict(custom)
        self._seen_custom.update(self._custom)
        self._names = {
            window_id: self._custom.get(window_id, default)
            for window_id, default in self._defaults.items()
        }


__all__ = ["WindowNameBook", "clean_window_name"]
