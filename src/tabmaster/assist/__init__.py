"""tabmaster.assist package."""

from .organizer import (
    AssistError,
    AssistResponseError,
    InvalidApiKey,
    MissingApiKey,
    organize_tabs,
    suggest_window_names,
)

__all__ = [
    "AssistError",
    "AssistResponseError",
    "InvalidApiKey",
    "MissingApiKey",
    "organize_tabs",
    "suggest_window_names",
]
