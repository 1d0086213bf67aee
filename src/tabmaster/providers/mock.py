from __future__ import annotations

import time
from urllib.parse import urlparse
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..windows.models import Tab, WindowData
from .base import ChangeCallback, ProviderKind, Unsubscribe
from .store import KeyValueStore, MemoryStore

# (window id, label, [(tab id, title, url), ...])
_DEMO_LAYOUT = (
    (
        "win_1",
        "Main Browser Window",
        (
            ("t_1", "Google Gemini API Docs", "https://ai.google.dev/gemini-api/docs"),
            ("t_2", "React - A JavaScript library for building user interfaces", "https://react.dev"),
            ("t_3", "Tailwind CSS - Rapidly build modern websites", "https://tailwindcss.com"),
            ("t_4", "GitHub - Pull Requests", "https://github.com/pulls"),
            ("t_5", "Inbox (3) - gmail@example.com", "https://mail.google.com"),
            ("t_6", "Spotify - Web Player", "https://open.spotify.com"),
        ),
    ),
    (
        "win_2",
        "Development Reference",
        (
            ("t_7", "Stack Overflow - How to center a div", "https://stackoverflow.com/questions/12345/center-div"),
            (
                "t_8",
                "MDN Web Docs - Array.prototype.map()",
                "https://developer.mozilla.org/en-US/docs/Web/JavaScript/Reference/Global_Objects/Array/map",
            ),
            ("t_9", "TypeScript: Documentation", "https://www.typescriptlang.org/docs/"),
            ("t_10", "D3.js - Data-Driven Documents", "https://d3js.org/"),
        ),
    ),
    (
        "win_3",
        "Entertainment & Social",
        (
            ("t_11", "YouTube - Lofi Hip Hop Radio", "https://www.youtube.com/watch?v=jfKfPfyJRdk"),
            ("t_12", "Twitter / X", "https://twitter.com/home"),
            ("t_13", "Reddit - r/webdev", "https://www.reddit.com/r/webdev/"),
            ("t_14", "Twitch - Live Stream", "https://www.twitch.tv/"),
            ("t_15", "Netflix", "https://www.netflix.com/browse"),
        ),
    ),
    (
        "win_4",
        "Research Project",
        (
            ("t_16", "Wikipedia - Artificial Intelligence", "https://en.wikipedia.org/wiki/Artificial_intelligence"),
            ("t_17", "arXiv.org - Machine Learning", "https://arxiv.org/list/cs.LG/recent"),
            ("t_18", "Hugging Face - Models", "https://huggingface.co/models"),
        ),
    ),
)


def demo_windows(now_ms: int | None = None) -> List[WindowData]:
    """Fresh copy of the demo window layout.

    Tabs are spaced a minute apart in `last_accessed` so sorting is stable.
    """

    now_ms = int(time.time() * 1000) if now_ms is None else now_ms
    windows: List[WindowData] = []
    offset = 0
    for window_id, label, tabs in _DEMO_LAYOUT:
        built: List[Tab] = []
        for tab_id, title, url in tabs:
            offset += 1
            built.append(
                Tab(
                    id=tab_id,
                    title=title,
                    url=url,
                    window_id=window_id,
                    last_accessed=now_ms - offset * 60_000,
                    fav_icon_url=f"https://www.google.com/s2/favicons?domain={urlparse(url).hostname}&sz=64",
                )
            )
        windows.append(WindowData(id=window_id, name=label, tabs=built))
    return windows


class MockTabProvider:
    """In-memory browser used for the demo mode and tests.

    Mutations behave like the real browser: moved tabs are appended to the
    destination, windows left without tabs disappear, and every change is
    announced to subscribers.
    """

    kind = ProviderKind.MOCK

    def __init__(
        self,
        windows: Sequence[WindowData] | None = None,
        store: KeyValueStore | None = None,
    ) -> None:
        source = demo_windows() if windows is None else windows
        self._windows: List[WindowData] = [window.model_copy(deep=True) for window in source]
        self._store = store or MemoryStore()
        self._listeners: List[ChangeCallback] = []
        self._next_window = len(self._windows) + 1
        self.activity: List[str] = []

    async def list_windows(self) -> List[WindowData]:
        return [window.model_copy(deep=True) for window in self._windows]

    async def activate_tab(self, tab: Tab) -> None:
        window = self._window(tab.window_id)
        for candidate in window.tabs:
            candidate.active = candidate.id == tab.id
        self.activity.append(f"activate {tab.id}")
        self._notify()

    async def close_tab(self, tab_id: str) -> None:
        self._take_tabs([tab_id])
        self.activity.append(f"close {tab_id}")
        self._prune_empty()
        self._notify()

    async def move_tabs(self, tab_ids: Sequence[str], window_id: str) -> None:
        target = self._window(window_id)
        moved = self._take_tabs(tab_ids)
        for tab in moved:
            tab.window_id = target.id
        target.tabs.extend(moved)
        self.activity.append(f"move {','.join(tab_ids)} -> {window_id}")
        self._prune_empty()
        self._notify()

    async def create_window(self, tab_ids: Sequence[str]) -> Optional[str]:
        if not tab_ids:
            return None
        known = {tab.id for window in self._windows for tab in window.tabs}
        missing = [tab_id for tab_id in tab_ids if tab_id not in known]
        if missing:
            raise KeyError(f"Tabs not found: {', '.join(missing)}")
        window_id = f"win_{self._next_window}"
        self._next_window += 1
        self._windows.append(WindowData(id=window_id, name=f"Window {window_id}"))
        await self.move_tabs(tab_ids, window_id)
        return window_id

    def subscribe(self, callback: ChangeCallback) -> Unsubscribe:
        if callback not in self._listeners:
            self._listeners.append(callback)

        def _unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return _unsubscribe

    async def get_values(self, keys: Sequence[str]) -> Dict[str, Any]:
        return await self._store.get(keys)

    async def set_values(self, values: Mapping[str, Any]) -> None:
        await self._store.set(values)

    def _window(self, window_id: str) -> WindowData:
        for window in self._windows:
            if window.id == window_id:
                return window
        raise KeyError(f"Window {window_id} not found")

    def _take_tabs(self, tab_ids: Sequence[str]) -> List[Tab]:
        wanted = list(dict.fromkeys(tab_ids))
        wanted_set = set(wanted)
        present = {tab.id for window in self._windows for tab in window.tabs}
        missing = [tab_id for tab_id in wanted if tab_id not in present]
        if missing:
            raise KeyError(f"Tabs not found: {', '.join(missing)}")
        by_id: Dict[str, Tab] = {}
        for window in self._windows:
            keep: List[Tab] = []
            for tab in window.tabs:
                if tab.id in wanted_set:
                    by_id[tab.id] = tab
                else:
                    keep.append(tab)
            window.tabs = keep
        # Requested order, not discovery order.
        return [by_id[tab_id] for tab_id in wanted]

    def _prune_empty(self) -> None:
        self._windows = [window for window in self._windows if window.tabs]

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()


__all__ = ["MockTabProvider", "demo_windows"]
