from __future__ import annotations

from datetime import datetime
from typing import Literal, Mapping, Sequence

from .models import Tab, UNKNOWN_WINDOW_NAME, WindowData

ExportFormat = Literal["csv", "md"]

CSV_HEADER = "Window,Last Accessed,Domain,Full URL,Title"


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def _format_accessed(tab: Tab) -> str:
    return datetime.fromtimestamp(tab.last_accessed / 1000).strftime("%Y-%m-%d %H:%M:%S")


def export_csv(windows: Sequence[WindowData], window_names: Mapping[str, str]) -> str:
    lines = [CSV_HEADER]
    for window in windows:
        for tab in window.tabs:
            name = window_names.get(tab.window_id) or "Unknown"
            row = [name, _format_accessed(tab), tab.domain, tab.url, tab.title]
            lines.append(",".join(_quote(value) for value in row))
    return "\n".join(lines) + "\n"


def export_markdown(windows: Sequence[WindowData], window_names: Mapping[str, str]) -> str:
    chunks: list[str] = []
    for window in windows:
        name = window_names.get(window.id) or window.name or UNKNOWN_WINDOW_NAME
        chunks.append(f"### {name} ({len(window.tabs)} tabs)\n\n")
        for tab in window.tabs:
            chunks.append(f"- [{tab.title}]({tab.url})\n\n")
        chunks.append("\n")
    return "".join(chunks)


def export_filename(now: datetime, fmt: ExportFormat) -> str:
    return f"tabmaster-export-{now:%Y-%m-%d_%H-%M}.{fmt}"


def render_export(fmt: ExportFormat, windows: Sequence[WindowData], window_names: Mapping[str, str]) -> str:
    if fmt == "csv":
        return export_csv(windows, window_names)
    if fmt == "md":
        return export_markdown(windows, window_names)
    raise ValueError(f"Unsupported export format '{fmt}'")


__all__ = [
    "CSV_HEADER",
    "ExportFormat",
    "export_csv",
    "export_filename",
    "export_markdown",
    "render_export",
]
