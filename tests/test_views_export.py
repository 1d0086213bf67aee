from __future__ import annotations

from datetime import datetime

import pytest

from tabmaster.windows.export import CSV_HEADER, export_csv, export_filename, export_markdown, render_export
from tabmaster.windows.models import Tab, ViewMode, WindowData
from tabmaster.windows.views import filter_tabs, sort_tabs, toggle_sort


def make_windows():
    return [
        WindowData(
            id="w1",
            name="Window w1",
            tabs=[
                Tab(id="a", title="Alpha docs", url="https://docs.example.com", window_id="w1", last_accessed=3),
                Tab(id="b", title="Beta", url="https://beta.test/search?q=x", window_id="w1", last_accessed=1),
            ],
        ),
        WindowData(
            id="w2",
            name="Window w2",
            tabs=[Tab(id="c", title="Gamma", url="file:///tmp/notes.txt", window_id="w2", last_accessed=2)],
        ),
    ]


def ids(tabs):
    return [tab.id for tab in tabs]


def test_sidebar_selection_wins_over_window_view():
    windows = make_windows()
    tabs = filter_tabs(windows, selected_window_ids=["w2"], active_window_id="w1", view_mode=ViewMode.BY_WINDOW)
    assert ids(tabs) == ["c"]


def test_window_view_and_search():
    windows = make_windows()
    assert ids(filter_tabs(windows, active_window_id="w1", view_mode=ViewMode.BY_WINDOW)) == ["a", "b"]
    assert ids(filter_tabs(windows, query="DOCS")) == ["a"]
    assert ids(filter_tabs(windows, query="q=x")) == ["b"]
    assert ids(filter_tabs(windows)) == ["a", "b", "c"]


def test_sorting_by_each_field():
    tabs = filter_tabs(make_windows())
    assert ids(sort_tabs(tabs)) == ["a", "c", "b"]
    assert ids(sort_tabs(tabs, "title", "asc")) == ["a", "b", "c"]
    names = {"w1": "Zed", "w2": "Able"}
    assert ids(sort_tabs(tabs, "window", "asc", names)) == ["c", "a", "b"]


def test_toggle_sort():
    assert toggle_sort("title", "asc", "title") == ("title", "desc")
    assert toggle_sort("title", "asc", "last_accessed") == ("last_accessed", "desc")
    assert toggle_sort("last_accessed", "desc", "url") == ("url", "asc")


def test_tab_domain():
    tabs = filter_tabs(make_windows())
    assert [tab.domain for tab in tabs] == ["docs.example.com", "beta.test", "local"]


def test_csv_export_quotes_every_field():
    windows = make_windows()
    windows[0].tabs[0].title = 'Say "hi"'
    csv_text = export_csv(windows, {"w1": "Work"})
    lines = csv_text.splitlines()
    assert lines[0] == CSV_HEADER
    assert lines[1].startswith('"Work","')
    assert lines[1].endswith('"docs.example.com","https://docs.example.com","Say ""hi"""')
    assert lines[3].startswith('"Unknown","')
    assert csv_text.endswith("\n")


def test_markdown_export_lists_windows():
    text = export_markdown(make_windows(), {"w1": "Work"})
    assert text.startswith("### Work (2 tabs)\n\n- [Alpha docs](https://docs.example.com)\n\n")
    assert "### Window w2 (1 tabs)\n\n- [Gamma](file:///tmp/notes.txt)\n\n\n" in text


def test_export_filename_and_dispatch():
    assert export_filename(datetime(2024, 3, 5, 9, 7), "md") == "tabmaster-export-2024-03-05_09-07.md"
    assert render_export("csv", [], {}) == CSV_HEADER + "\n"
    with pytest.raises(ValueError):
        render_export("xml", [], {})  # type: ignore[arg-type]
