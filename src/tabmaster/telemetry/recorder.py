from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping

from .base import NOTIFICATION, TelemetrySink


@dataclass
class TelemetryEvent:
    seq: int
    event: str
    ts: str
    payload: Dict[str, Any]

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


class StructuredTelemetrySink(TelemetrySink):
    """Collects telemetry events in order for tests and `--events` exports."""

    SCHEMA_VERSION = 1

    def __init__(self) -> None:
        self._events: List[TelemetryEvent] = []

    def emit(self, event: str, payload: dict | None = None) -> None:
        seq = len(self._events)
        ts = datetime.now(timezone.utc).isoformat()
        self._events.append(TelemetryEvent(seq=seq, event=event, ts=ts, payload=dict(payload or {})))

    @property
    def events(self) -> Iterable[TelemetryEvent]:
        return tuple(self._events)

    def named(self, event: str) -> List[TelemetryEvent]:
        return [entry for entry in self._events if entry.event == event]

    def notifications(self) -> List[Dict[str, Any]]:
        return [entry.payload for entry in self._events if entry.event == NOTIFICATION]

    def build_bundle(
        self,
        *,
        window_names: Mapping[str, str],
        command: str,
        extra: Dict[str, Any] | None = None,
    ) -> Dict[str, Any]:
        return {
            "bundle_type": "tabmaster#events",
            "schema_version": self.SCHEMA_VERSION,
            "exported_at": datetime.now(timezone.utc).isoformat(),
            "command": command,
            "window_names": dict(window_names),
            "events": [entry.as_dict() for entry in self._events],
            "extra": extra or {},
        }


__all__ = ["StructuredTelemetrySink", "TelemetryEvent"]
