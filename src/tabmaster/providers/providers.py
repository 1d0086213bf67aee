from __future__ import annotations

from typing import Iterable

from ..config import TabMasterSettings
from .base import ProviderKind, ProviderRegistry, TabProvider
from .bridge import BridgeTabProvider
from .mock import MockTabProvider
from .store import JsonFileStore, MemoryStore


def _build_mock(settings: TabMasterSettings) -> TabProvider:
    store = JsonFileStore(settings.store_path) if settings.store_path else MemoryStore()
    return MockTabProvider(store=store)


def _build_bridge(settings: TabMasterSettings) -> TabProvider:
    return BridgeTabProvider(
        settings.bridge_url,
        timeout=settings.bridge_timeout,
        poll_seconds=settings.bridge_poll_seconds,
    )


def register_default_providers(registry: ProviderRegistry) -> ProviderRegistry:
    registry.register(ProviderKind.MOCK, _build_mock)
    registry.register(ProviderKind.BRIDGE, _build_bridge)
    return registry


def select_provider(settings: TabMasterSettings, registry: ProviderRegistry | None = None) -> TabProvider:
    """Build the provider named by `settings.provider`.

    Raises ProviderUnavailable when the chosen backend is missing configuration.
    """

    reg = registry or register_default_providers(ProviderRegistry())
    return reg.create(settings.provider, settings)


def list_provider_kinds(registry: ProviderRegistry | None = None) -> Iterable[str]:
    reg = registry or register_default_providers(ProviderRegistry())
    return [kind.value for kind in reg.kinds()]


__all__ = ["list_provider_kinds", "register_default_providers", "select_provider"]
