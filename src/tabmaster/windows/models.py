from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_WINDOW_NAME = "Unknown Window"
STORAGE_KEYS = ("customWindowNames", "hasSeenOnboarding", "apiKey")


class ViewMode(str, Enum):
    ALL = "ALL"
    BY_WINDOW = "BY_WINDOW"
    AI_GROUPED = "AI_GROUPED"


class Tab(BaseModel):
    """A single browser tab as reported by the provider."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str = "Untitled"
    url: str = ""
    fav_icon_url: Optional[str] = Field(default=None, alias="favIconUrl")
    active: bool = False
    window_id: str = Field(alias="windowId")
    last_accessed: int = Field(default=0, alias="lastAccessed")

    @property
    def domain(self) -> str:
        try:
            host = urlparse(self.url).hostname
        except ValueError:
            host = None
        return host or "local"


class WindowData(BaseModel):
    """A browser window and its tabs, in provider order."""

    id: str
    name: str = ""
    tabs: List[Tab] = Field(default_factory=list)

    def tab_ids(self) -> List[str]:
        return [tab.id for tab in self.tabs]


class TabGroup(BaseModel):
    """AI-suggested category holding a set of tab ids."""

    model_config = ConfigDict(populate_by_name=True)

    category_name: str = Field(alias="categoryName")
    tab_ids: List[str] = Field(default_factory=list, alias="tabIds")


class StorageData(BaseModel):
    """Persisted key-value state, read once per load and written on each change."""

    model_config = ConfigDict(populate_by_name=True)

    custom_window_names: Dict[str, str] = Field(default_factory=dict, alias="customWindowNames")
    has_seen_onboarding: bool = Field(default=False, alias="hasSeenOnboarding")
    api_key: Optional[str] = Field(default=None, alias="apiKey")


__all__ = [
    "STORAGE_KEYS",
    "StorageData",
    "Tab",
    "TabGroup",
    "UNKNOWN_WINDOW_NAME",
    "ViewMode",
    "WindowData",
]
