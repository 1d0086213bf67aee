from __future__ import annotations

from typing import Collection, List, Literal, Mapping, Optional, Sequence

from .models import Tab, ViewMode, WindowData

SortField = Literal["title", "window", "url", "last_accessed"]
SortDirection = Literal["asc", "desc"]


def all_tabs(windows: Sequence[WindowData]) -> List[Tab]:
    return [tab for window in windows for tab in window.tabs]


def filter_tabs(
    windows: Sequence[WindowData],
    *,
    selected_window_ids: Collection[str] = (),
    active_window_id: Optional[str] = None,
    view_mode: ViewMode = ViewMode.ALL,
    query: str = "",
) -> List[Tab]:
    """Tabs visible for the current sidebar state and search box.

    A sidebar selection wins over the single-window view; the search query
    then matches title or URL case-insensitively.
    """

    if selected_window_ids:
        selected = set(selected_window_ids)
        tabs = [tab for tab in all_tabs(windows) if tab.window_id in selected]
    elif view_mode == ViewMode.BY_WINDOW and active_window_id:
        window = next((window for window in windows if window.id == active_window_id), None)
        tabs = list(window.tabs) if window else []
    else:
        tabs = all_tabs(windows)

    needle = query.strip().lower()
    if needle:
        tabs = [tab for tab in tabs if needle in tab.title.lower() or needle in tab.url.lower()]
    return tabs


def sort_tabs(
    tabs: Sequence[Tab],
    field: SortField = "last_accessed",
    direction: SortDirection = "desc",
    window_names: Mapping[str, str] | None = None,
) -> List[Tab]:
    names = window_names or {}

    def _key(tab: Tab) -> object:
        if field == "title":
            return tab.title.lower()
        if field == "window":
            return names.get(tab.window_id, "")
        if field == "url":
            return tab.url.lower()
        return tab.last_accessed

    return sorted(tabs, key=_key, reverse=direction == "desc")


def default_direction(field: SortField) -> SortDirection:
    return "desc" if field == "last_accessed" else "asc"


def toggle_sort(
    current_field: SortField,
    current_direction: SortDirection,
    field: SortField,
) -> tuple[SortField, SortDirection]:
    """Clicking the active column flips direction; a new column starts at its default."""

    if field == current_field:
        return field, "asc" if current_direction == "desc" else "desc"
    return field, default_direction(field)


__all__ = [
    "SortDirection",
    "SortField",
    "all_tabs",
    "default_direction",
    "filter_tabs",
    "sort_tabs",
    "toggle_sort",
]
