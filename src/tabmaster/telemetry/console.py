from __future__ import annotations

import os
import sys
from datetime import datetime
from typing import Any, Dict, TextIO

from rich.console import Console
from rich.markup import escape

from .base import (
    MERGE_COMMITTED,
    MERGE_PLANNED,
    NAMES_REDO,
    NAMES_RENAMED,
    NAMES_UNDO,
    NOTIFICATION,
    STORAGE_FLUSHED,
    WINDOWS_LOADED,
    TelemetrySink,
)

_LEVEL_STYLES = {"success": "bold green", "info": "cyan"}


def _fmt_names(names: Dict[str, Any]) -> str:
    return ", ".join(f"{window_id}→{escape(str(name))}" for window_id, name in names.items())


class ConsoleTelemetrySink(TelemetrySink):
    """Colorized CLI output for host events, rendered with rich.

    Controlled by env vars:
      - TABMASTER_CONSOLE_TIMESTAMPS: '1' to prefix lines with a timestamp (default 0)
      - TABMASTER_CONSOLE_VERBOSE: '1' to also print load/flush/assist chatter (default 0)
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stdout = stream or sys.stderr
        self._show_ts = os.getenv("TABMASTER_CONSOLE_TIMESTAMPS", "0") == "1"
        self._verbose = os.getenv("TABMASTER_CONSOLE_VERBOSE", "0") == "1"

    def emit(self, event: str, payload: dict | None = None) -> None:
        data: Dict[str, Any] = payload or {}
        line: str | None = None

        if event == NOTIFICATION:
            style = _LEVEL_STYLES.get(str(data.get("level")), "cyan")
            line = f"[{style}]●[/] {escape(str(data.get('message', '')))}"
        elif event == NAMES_RENAMED:
            line = f"[magenta]✎ renamed[/] {_fmt_names(data.get('names') or {})}"
        elif event in {NAMES_UNDO, NAMES_REDO}:
            verb = "undo" if event == NAMES_UNDO else "redo"
            line = f"[magenta]↺ {verb}[/] (step {data.get('cursor')} of {data.get('size')})"
        elif event == MERGE_PLANNED:
            sources = " → ".join(str(source) for source in data.get("source_ids") or [])
            line = f"[yellow]⇉ merge plan[/] {sources or '∅'} ⇒ {data.get('target_id')}"
        elif event == MERGE_COMMITTED:
            line = f"[yellow]⇉ merged[/] {data.get('tabs_moved', 0)} tabs into {data.get('target_id')}"
        elif self._verbose:
            if event == WINDOWS_LOADED:
                line = f"[dim]↻ {data.get('window_count', 0)} windows, {data.get('tab_count', 0)} tabs[/]"
            elif event == STORAGE_FLUSHED:
                line = f"[dim]⛁ saved {len(data.get('custom_names') or {})} custom names[/]"
            elif event.startswith("assist."):
                line = f"[dim]✦ {event} {escape(str(data.get('task', '')))}[/]"
            else:
                line = f"[dim]{escape(event)}[/]"

        if line is None:
            return
        if self._show_ts:
            line = f"[dim]{datetime.now().isoformat(timespec='seconds')}[/] {line}"
        # A fresh Console per line picks up the current stream, which tests swap out.
        Console(file=self._stdout, highlight=False, soft_wrap=True).print(line)


__all__ = ["ConsoleTelemetrySink"]
