from __future__ import annotations

import asyncio
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from ..assist.organizer import AssistError, MissingApiKey, organize_tabs, suggest_window_names
from ..config import TabMasterSettings
from ..llm.base import ClientRegistry, LLMClient, LLMProvider
from ..llm.providers import register_default_clients
from ..providers.base import TabProvider
from ..telemetry.base import (
    ASSIST_REQUEST,
    ASSIST_RESPONSE,
    MERGE_COMMITTED,
    MERGE_PLANNED,
    NAMES_REDO,
    NAMES_RENAMED,
    NAMES_UNDO,
    NOTIFICATION,
    STORAGE_FLUSHED,
    WINDOWS_LOADED,
    NullTelemetrySink,
    TelemetrySink,
)
from ..windows.history import NameMap
from ..windows.merge import MergePlan, execute_merge, resolve_merge_plan
from ..windows.models import StorageData, Tab, TabGroup, WindowData
from ..windows.names import WindowNameBook
from ..windows.storage import StorageService
from ..windows.views import all_tabs


class TabMasterRuntime:
    """Host coordinator: owns window data, names, merge selection and AI calls.

    All state changes happen on the event loop that drives the runtime, so
    history pushes, undo and redo are naturally serialized.
    """

    def __init__(
        self,
        provider: TabProvider,
        *,
        telemetry: TelemetrySink | None = None,
        settings: TabMasterSettings | None = None,
        llm_registry: ClientRegistry | None = None,
        name_book: WindowNameBook | None = None,
    ) -> None:
        self.provider = provider
        self.settings = settings or TabMasterSettings()
        self.telemetry = telemetry or NullTelemetrySink()
        self.storage = StorageService(provider)
        self.names = name_book or WindowNameBook(storage=self.storage)
        self.windows: List[WindowData] = []
        self.tab_groups: List[TabGroup] = []
        self._llm_registry = llm_registry
        self._owns_llm_registry = llm_registry is None
        self._storage_data = StorageData()
        self._merge_selection: List[str] = []
        self._pending_refresh: Optional[asyncio.TimerHandle] = None
        self._refresh_task: Optional[asyncio.Task[None]] = None

    # -- loading -------------------------------------------------------

    async def refresh(self, *, reset_history: bool = False) -> List[WindowData]:
        """Reload windows and stored names.

        Change events refresh without touching rename history; pass
        `reset_history` for a full data reload that starts history afresh.
        """

        try:
            windows = await self.provider.list_windows()
            data = await self.storage.load()
        except Exception as exc:
            self._notify("Error loading tabs", "info", error=str(exc))
            raise
        self.windows = windows
        self._storage_data = data
        self.names.load(
            [window.id for window in windows],
            data.custom_window_names,
            reset_history=reset_history,
        )
        live = {window.id for window in windows}
        self._merge_selection = [window_id for window_id in self._merge_selection if window_id in live]
        self.telemetry.emit(
            WINDOWS_LOADED,
            {
                "window_count": len(windows),
                "tab_count": sum(len(window.tabs) for window in windows),
                "history_size": len(self.names.history),
            },
        )
        return windows

    def subscribe(self) -> Callable[[], None]:
        """Refresh (debounced) whenever the provider reports a change."""

        loop = asyncio.get_running_loop()
        delay = self.settings.refresh_debounce_ms / 1000

        def _on_change() -> None:
            if self._pending_refresh is not None:
                self._pending_refresh.cancel()
            self._pending_refresh = loop.call_later(delay, self._start_refresh)

        unsubscribe = self.provider.subscribe(_on_change)

        def _stop() -> None:
            unsubscribe()
            if self._pending_refresh is not None:
                self._pending_refresh.cancel()
                self._pending_refresh = None

        return _stop

    def _start_refresh(self) -> None:
        self._pending_refresh = None
        self._refresh_task = asyncio.get_running_loop().create_task(self._refresh_from_event())

    async def _refresh_from_event(self) -> None:
        try:
            await self.refresh()
        except Exception:
            # refresh() already surfaced the failure as a notification.
            return

    async def wait_for_refresh(self) -> None:
        if self._refresh_task is not None:
            await self._refresh_task

    async def aclose(self) -> None:
        if self._pending_refresh is not None:
            self._pending_refresh.cancel()
            self._pending_refresh = None
        closer = getattr(self.provider, "aclose", None)
        if closer is not None:
            await closer()

    # -- names ---------------------------------------------------------

    @property
    def window_names(self) -> NameMap:
        return self.names.names

    def window_name(self, window_id: str) -> str:
        return self.names.display_name(window_id)

    @property
    def can_undo(self) -> bool:
        return self.names.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.names.history.can_redo

    async def rename_window(self, window_id: str, name: str) -> bool:
        if not self.names.rename(window_id, name):
            return False
        self.telemetry.emit(
            NAMES_RENAMED,
            {"source": "manual", "names": {window_id: self.names.names[window_id]}},
        )
        await self._flush_names()
        self._notify("Window renamed", "success")
        return True

    async def apply_suggested_names(self, suggestions: Mapping[str, Optional[str]]) -> Dict[str, str]:
        accepted = self.names.apply_names(suggestions)
        if not accepted:
            return accepted
        self.telemetry.emit(NAMES_RENAMED, {"source": "assist", "names": dict(accepted)})
        await self._flush_names()
        count = len(accepted)
        self._notify(f"Renamed {count} window{'s' if count != 1 else ''}", "success")
        return accepted

    async def undo_rename(self) -> bool:
        if self.names.undo() is None:
            return False
        self._emit_history(NAMES_UNDO)
        await self._flush_names()
        return True

    async def redo_rename(self) -> bool:
        if self.names.redo() is None:
            return False
        self._emit_history(NAMES_REDO)
        await self._flush_names()
        return True

    def _emit_history(self, event: str) -> None:
        history = self.names.history
        self.telemetry.emit(event, {"cursor": history.cursor, "size": len(history)})

    async def _flush_names(self) -> bool:
        # History keeps the user's intent even if persisting it fails.
        try:
            saved = await self.names.flush()
        except Exception as exc:
            self._notify("Failed to save window names", "info", error=str(exc))
            return False
        self.telemetry.emit(STORAGE_FLUSHED, {"custom_names": saved})
        return True

    # -- merging -------------------------------------------------------

    @property
    def merge_selection(self) -> List[str]:
        return list(self._merge_selection)

    def toggle_merge_selection(self, window_id: str) -> bool:
        if window_id in self._merge_selection:
            self._merge_selection.remove(window_id)
            return False
        self._merge_selection.append(window_id)
        return True

    def clear_merge_selection(self) -> None:
        self._merge_selection.clear()

    def plan_merge(self, selected_ids: Iterable[str] | None = None) -> Optional[MergePlan]:
        """Resolve the merge for the selection, or None when there is nothing to merge."""

        ids = list(self._merge_selection if selected_ids is None else selected_ids)
        if len(set(ids)) < 2:
            return None
        plan = resolve_merge_plan(ids, self.names.names, [window.id for window in self.windows])
        if not plan.is_actionable:
            return None
        self.telemetry.emit(MERGE_PLANNED, plan.as_dict())
        return plan

    async def commit_merge(self, plan: MergePlan) -> int:
        if not plan.is_actionable:
            return 0
        try:
            moved = await execute_merge(plan, self.windows, self.provider)
        except Exception as exc:
            self._notify("Failed to merge", "info", error=str(exc))
            raise
        self.telemetry.emit(MERGE_COMMITTED, {**plan.as_dict(), "tabs_moved": moved})
        self._merge_selection.clear()
        await self.refresh()
        self._notify("Windows merged", "success")
        return moved

    # -- tab actions ---------------------------------------------------

    async def activate_tab(self, tab: Tab) -> None:
        try:
            await self.provider.activate_tab(tab)
        except Exception as exc:
            self._notify("Failed to switch tab", "info", error=str(exc))
            raise

    async def close_tab(self, tab_id: str) -> None:
        try:
            await self.provider.close_tab(tab_id)
        except Exception as exc:
            self._notify("Failed to close tab", "info", error=str(exc))
            raise
        for window in self.windows:
            window.tabs = [tab for tab in window.tabs if tab.id != tab_id]
        self._notify("Tab closed", "info")

    async def move_tabs_to_new_window(self, tab_ids: Sequence[str]) -> Optional[str]:
        if not tab_ids:
            return None
        try:
            window_id = await self.provider.create_window(tab_ids)
        except Exception as exc:
            self._notify("Failed to move tabs", "info", error=str(exc))
            raise
        self._notify(f"{len(tab_ids)} tabs moved", "success")
        await self.refresh()
        return window_id

    # -- assist --------------------------------------------------------

    async def organize_tabs(self) -> List[TabGroup]:
        client = self._llm_client()
        self.telemetry.emit(ASSIST_REQUEST, {"task": "group_tabs", "provider": client.provider.value})
        try:
            groups = await organize_tabs(client, all_tabs(self.windows), model=self.settings.llm_model)
        except AssistError as exc:
            self._notify("Failed to organize tabs", "info", error=str(exc))
            raise
        self.tab_groups = groups
        self.telemetry.emit(ASSIST_RESPONSE, {"task": "group_tabs", "groups": len(groups)})
        self._notify("Tabs organized", "success")
        return groups

    async def suggest_window_names(self) -> Dict[str, str]:
        client = self._llm_client()
        self.telemetry.emit(ASSIST_REQUEST, {"task": "name_windows", "provider": client.provider.value})
        try:
            suggestions = await suggest_window_names(
                client, self.windows, self.names.names, model=self.settings.llm_model
            )
        except AssistError as exc:
            self._notify("Failed to name windows", "info", error=str(exc))
            raise
        self.telemetry.emit(ASSIST_RESPONSE, {"task": "name_windows", "suggestions": len(suggestions)})
        return await self.apply_suggested_names(suggestions)

    async def save_api_key(self, api_key: str) -> None:
        await self.storage.save_api_key(api_key)
        self._storage_data = self._storage_data.model_copy(update={"api_key": api_key.strip()})
        if self._owns_llm_registry:
            self._llm_registry = None

    def _api_key(self) -> Optional[str]:
        stored = (self._storage_data.api_key or "").strip()
        return stored or self.settings.api_key

    def _llm_client(self) -> LLMClient:
        if self._llm_registry is None:
            self._llm_registry = register_default_clients(
                ClientRegistry(),
                api_key=self._api_key(),
                default_model=self.settings.llm_model,
            )
        provider = self.settings.llm_provider
        if provider not in self._llm_registry:
            if provider == LLMProvider.GEMINI:
                self._notify("An API key is required to use Gemini", "info")
                raise MissingApiKey("NO_API_KEY")
        return self._llm_registry.get(provider)

    # -- onboarding ----------------------------------------------------

    @property
    def needs_onboarding(self) -> bool:
        return not self._storage_data.has_seen_onboarding

    async def mark_onboarding_seen(self) -> None:
        await self.storage.set_onboarding_seen()
        self._storage_data = self._storage_data.model_copy(update={"has_seen_onboarding": True})

    def _notify(self, message: str, level: str = "info", **extra: object) -> None:
        self.telemetry.emit(NOTIFICATION, {"message": message, "level": level, **extra})


__all__ = ["TabMasterRuntime"]
