from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Protocol, Sequence

from .models import STORAGE_KEYS, StorageData


class KeyValueBackend(Protocol):
    async def get_values(self, keys: Sequence[str]) -> Dict[str, Any]:  # pragma: no cover - Protocol
        ...

    async def set_values(self, values: Mapping[str, Any]) -> None:  # pragma: no cover - Protocol
        ...


class StorageService:
    """Typed view over the provider's persisted key-value data."""

    def __init__(self, backend: KeyValueBackend) -> None:
        self._backend = backend

    async def load(self) -> StorageData:
        raw = await self._backend.get_values(list(STORAGE_KEYS))
        return StorageData.model_validate({key: value for key, value in raw.items() if value is not None})

    async def save_custom_names(
        self,
        names: Mapping[str, str],
        cleared: Iterable[str] = (),
    ) -> Dict[str, str]:
        """Merge `names` over what is stored and drop the `cleared` ids.

        Entries for windows that are not mentioned are kept, so names for
        windows closed in this session survive until they reopen.
        """

        current = await self.load()
        updated = dict(current.custom_window_names)
        for window_id in cleared:
            updated.pop(window_id, None)
        updated.update(names)
        await self._backend.set_values({"customWindowNames": updated})
        return updated

    async def set_onboarding_seen(self) -> None:
        await self._backend.set_values({"hasSeenOnboarding": True})

    async def save_api_key(self, api_key: str) -> None:
        await self._backend.set_values({"apiKey": api_key.strip()})


__all__ = ["KeyValueBackend", "StorageService"]
