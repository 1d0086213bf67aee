from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, MutableMapping, Optional, Protocol, Sequence

from ..windows.models import Tab, WindowData

if TYPE_CHECKING:
    from ..config import TabMasterSettings


class ProviderKind(str, Enum):
    """Supported window/tab backends."""

    MOCK = "mock"
    BRIDGE = "bridge"


ChangeCallback = Callable[[], None]
Unsubscribe = Callable[[], None]


class TabProvider(Protocol):
    """Everything the host needs from the browser, behind one interface.

    Implementations are picked once at startup; business logic never checks
    which one it is talking to.
    """

    kind: ProviderKind

    async def list_windows(self) -> List[WindowData]:  # pragma: no cover - interface
        ...

    async def activate_tab(self, tab: Tab) -> None:  # pragma: no cover - interface
        ...

    async def close_tab(self, tab_id: str) -> None:  # pragma: no cover - interface
        ...

    async def move_tabs(self, tab_ids: Sequence[str], window_id: str) -> None:  # pragma: no cover - interface
        ...

    async def create_window(self, tab_ids: Sequence[str]) -> Optional[str]:  # pragma: no cover - interface
        ...

    def subscribe(self, callback: ChangeCallback) -> Unsubscribe:  # pragma: no cover - interface
        ...

    async def get_values(self, keys: Sequence[str]) -> Dict[str, Any]:  # pragma: no cover - interface
        ...

    async def set_values(self, values: Mapping[str, Any]) -> None:  # pragma: no cover - interface
        ...


ProviderFactory = Callable[["TabMasterSettings"], TabProvider]


class ProviderRegistry:
    """Registry of provider constructors keyed by kind."""

    def __init__(self) -> None:
        self._factories: MutableMapping[ProviderKind, ProviderFactory] = {}

    def register(self, kind: ProviderKind, factory: ProviderFactory) -> None:
        self._factories[kind] = factory

    def create(self, kind: ProviderKind, settings: "TabMasterSettings") -> TabProvider:
        if kind not in self._factories:
            raise KeyError(f"Provider {kind.value} is not registered")
        return self._factories[kind](settings)

    def kinds(self) -> List[ProviderKind]:
        return list(self._factories.keys())


class ProviderUnavailable(RuntimeError):
    pass


__all__ = [
    "ChangeCallback",
    "ProviderFactory",
    "ProviderKind",
    "ProviderRegistry",
    "ProviderUnavailable",
    "TabProvider",
    "Unsubscribe",
]
