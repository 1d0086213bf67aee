from __future__ import annotations

import json
from collections import Counter
from typing import Any, Dict, List, Sequence
from urllib.parse import urlparse
from uuid import uuid4

from .base import (
    LLMClient,
    LLMCompletion,
    LLMMessage,
    LLMProvider,
    LLMSession,
    LLMSessionConfig,
)

GROUP_TABS_TASK = "group_tabs"
NAME_WINDOWS_TASK = "name_windows"


def _site_label(url: str) -> str:
    host = urlparse(url).hostname or ""
    parts = [part for part in host.split(".") if part and part != "www"]
    if len(parts) >= 2:
        return parts[-2].capitalize()
    if parts:
        return parts[0].capitalize()
    return "Local"


class MockLLMClient(LLMClient):
    """Deterministic offline client for the demo mode and tests.

    Reads the structured payload that callers attach to the last user
    message (`metadata["task"]`, `metadata["payload"]`) and answers with
    the JSON shape a real model is asked for: tabs grouped by site, windows
    named after their most common site.
    """

    provider = LLMProvider.MOCK

    async def create_session(self, config: LLMSessionConfig) -> LLMSession:
        return LLMSession(id=f"mock-{uuid4().hex}", config=config)

    async def complete_response(
        self,
        session: LLMSession,
        messages: Sequence[LLMMessage],
    ) -> LLMCompletion:
        request = next((msg for msg in reversed(messages) if msg.role == "user"), None)
        task = request.metadata.get("task") if request else None
        payload = request.metadata.get("payload", []) if request else []
        if task == GROUP_TABS_TASK:
            body: Dict[str, Any] = {"groups": self._group_tabs(payload)}
        elif task == NAME_WINDOWS_TASK:
            body = {"names": self._name_windows(payload)}
        else:
            body = {}
        text = json.dumps(body)
        for message in messages:
            session.append(message)
        session.append(LLMMessage(role="assistant", content=text))
        return LLMCompletion(text=text, metadata={"model": "mock"})

    def _group_tabs(self, tabs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        groups: Dict[str, List[str]] = {}
        for tab in tabs:
            groups.setdefault(_site_label(str(tab.get("url", ""))), []).append(str(tab.get("id")))
        return [{"categoryName": label, "tabIds": ids} for label, ids in groups.items()]

    def _name_windows(self, windows: List[Dict[str, Any]]) -> List[Dict[str, str]]:
        names: List[Dict[str, str]] = []
        for window in windows:
            urls = [str(tab.get("url", "")) for tab in window.get("tabs", [])]
            if not urls:
                continue
            label, _ = Counter(_site_label(url) for url in urls).most_common(1)[0]
            names.append({"windowId": str(window.get("id")), "name": f"{label} Window"})
        return names


__all__ = ["GROUP_TABS_TASK", "MockLLMClient", "NAME_WINDOWS_TASK"]
