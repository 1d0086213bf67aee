"""tabmaster.telemetry package."""

from .base import FanoutTelemetrySink, NullTelemetrySink, TelemetrySink
from .console import ConsoleTelemetrySink
from .recorder import StructuredTelemetrySink, TelemetryEvent

__all__ = [
    "ConsoleTelemetrySink",
    "FanoutTelemetrySink",
    "NullTelemetrySink",
    "StructuredTelemetrySink",
    "TelemetryEvent",
    "TelemetrySink",
]
