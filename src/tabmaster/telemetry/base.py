from __future__ import annotations

from typing import Iterable, List, Protocol

# Event names emitted by the runtime; sinks switch on these.
WINDOWS_LOADED = "windows.loaded"
NAMES_RENAMED = "names.renamed"
NAMES_UNDO = "names.undo"
NAMES_REDO = "names.redo"
MERGE_PLANNED = "merge.planned"
MERGE_COMMITTED = "merge.committed"
STORAGE_FLUSHED = "storage.flushed"
ASSIST_REQUEST = "assist.request"
ASSIST_RESPONSE = "assist.response"
NOTIFICATION = "notification"


class TelemetrySink(Protocol):
    """Receives every host event as `(name, payload)`; payloads are JSON-ready dicts."""

    def emit(self, event: str, payload: dict | None = None) -> None:  # pragma: no cover - Protocol
        ...


class NullTelemetrySink:
    """Default sink for a runtime nobody is watching."""

    def emit(self, event: str, payload: dict | None = None) -> None:
        return None


class FanoutTelemetrySink:
    """Forwards each event to several sinks, e.g. the recorder and the console."""

    def __init__(self, sinks: Iterable[TelemetrySink] = ()) -> None:
        self.sinks: List[TelemetrySink] = list(sinks)

    def add(self, sink: TelemetrySink) -> None:
        self.sinks.append(sink)

    def emit(self, event: str, payload: dict | None = None) -> None:
        for sink in self.sinks:
            sink.emit(event, payload)


__all__ = [
    "ASSIST_REQUEST",
    "ASSIST_RESPONSE",
    "FanoutTelemetrySink",
    "MERGE_COMMITTED",
    "MERGE_PLANNED",
    "NAMES_REDO",
    "NAMES_RENAMED",
    "NAMES_UNDO",
    "NOTIFICATION",
    "NullTelemetrySink",
    "STORAGE_FLUSHED",
    "TelemetrySink",
    "WINDOWS_LOADED",
]
