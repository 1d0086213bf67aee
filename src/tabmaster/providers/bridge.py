from __future__ import annotations

import asyncio
import time
from typing import Any, Dict, List, Mapping, Optional, Sequence

import httpx

from ..windows.models import Tab, WindowData
from .base import ChangeCallback, ProviderKind, ProviderUnavailable, Unsubscribe


class BridgeError(RuntimeError):
    pass


class BridgeTabProvider:
    """Talks JSON over HTTP to the companion browser extension.

    The extension exposes its `chrome.windows`/`chrome.tabs`/`chrome.storage`
    calls on a local port. Change events are picked up by polling a version
    counter that the extension bumps on every tab or window event.
    """

    kind = ProviderKind.BRIDGE

    def __init__(
        self,
        base_url: str | None,
        timeout: float = 10.0,
        poll_seconds: float = 2.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url:
            raise ProviderUnavailable("TABMASTER_BRIDGE_URL is required for BridgeTabProvider")
        self._base_url = base_url.rstrip("/")
        self._poll_seconds = poll_seconds
        self._client = httpx.AsyncClient(base_url=self._base_url, timeout=timeout, transport=transport)
        self._listeners: List[ChangeCallback] = []
        self._poll_task: Optional[asyncio.Task[None]] = None
        self._last_version: Any = None

    async def aclose(self) -> None:
        if self._poll_task is not None:
            self._poll_task.cancel()
            self._poll_task = None
        await self._client.aclose()

    async def list_windows(self) -> List[WindowData]:
        payload = await self._request("GET", "/windows")
        raw_windows = payload.get("windows", []) if isinstance(payload, dict) else payload
        return [self._to_window(raw) for raw in raw_windows or []]

    async def activate_tab(self, tab: Tab) -> None:
        await self._request("POST", "/tabs/activate", json={"tabId": tab.id, "windowId": tab.window_id})

    async def close_tab(self, tab_id: str) -> None:
        await self._request("POST", "/tabs/close", json={"tabId": tab_id})

    async def move_tabs(self, tab_ids: Sequence[str], window_id: str) -> None:
        await self._request(
            "POST",
            "/tabs/move",
            json={"tabIds": list(tab_ids), "windowId": window_id, "index": -1},
        )

    async def create_window(self, tab_ids: Sequence[str]) -> Optional[str]:
        if not tab_ids:
            return None
        payload = await self._request("POST", "/windows", json={"tabIds": list(tab_ids)})
        window_id = payload.get("windowId") if isinstance(payload, dict) else None
        return str(window_id) if window_id is not None else None

    def subscribe(self, callback: ChangeCallback) -> Unsubscribe:
        if callback not in self._listeners:
            self._listeners.append(callback)
        if self._poll_task is None:
            self._poll_task = asyncio.get_running_loop().create_task(self._poll())

        def _unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)
            if not self._listeners and self._poll_task is not None:
                self._poll_task.cancel()
                self._poll_task = None

        return _unsubscribe

    async def get_values(self, keys: Sequence[str]) -> Dict[str, Any]:
        payload = await self._request("GET", "/storage", params={"keys": ",".join(keys)})
        values = payload.get("values", {}) if isinstance(payload, dict) else {}
        return {key: values[key] for key in keys if key in values}

    async def set_values(self, values: Mapping[str, Any]) -> None:
        await self._request("POST", "/storage", json={"values": dict(values)})

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            detail = exc.response.text.strip()
            raise BridgeError(
                f"Bridge {method} {path} failed ({exc.response.status_code}): {detail or 'no details'}"
            ) from exc
        except httpx.HTTPError as exc:
            raise BridgeError(f"Bridge {method} {path} failed: {exc}") from exc
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise BridgeError(f"Bridge {method} {path} returned invalid JSON") from exc

    async def _poll(self) -> None:
        while True:
            await asyncio.sleep(self._poll_seconds)
            try:
                payload = await self._request("GET", "/windows/version")
            except BridgeError:
                continue
            version = payload.get("version") if isinstance(payload, dict) else None
            if self._last_version is not None and version != self._last_version:
                for listener in list(self._listeners):
                    listener()
            self._last_version = version

    def _to_window(self, raw: Mapping[str, Any]) -> WindowData:
        window_id = str(raw.get("id", "unknown"))
        name = raw.get("name") or ("Current Window" if raw.get("focused") else f"Window {window_id}")
        tabs = [self._to_tab(tab, window_id) for tab in raw.get("tabs") or []]
        return WindowData(id=window_id, name=name, tabs=tabs)

    def _to_tab(self, raw: Mapping[str, Any], window_id: str) -> Tab:
        return Tab(
            id=str(raw.get("id", "")),
            title=raw.get("title") or "Untitled",
            url=raw.get("url") or "",
            fav_icon_url=raw.get("favIconUrl"),
            active=bool(raw.get("active", False)),
            window_id=str(raw.get("windowId", window_id)),
            # lastAccessed only exists on Chrome 121+.
            last_accessed=int(raw.get("lastAccessed") or time.time() * 1000),
        )


__all__ = ["BridgeError", "BridgeTabProvider"]
