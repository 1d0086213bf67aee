from __future__ import annotations

import json

import pytest

from tabmaster.providers.mock import MockTabProvider
from tabmaster.providers.store import JsonFileStore, MemoryStore
from tabmaster.windows.storage import StorageService


@pytest.mark.anyio("asyncio")
async def test_memory_store_copies_values():
    store = MemoryStore()
    names = {"w1": "Work"}
    await store.set({"customWindowNames": names})
    names["w1"] = "Changed"
    loaded = await store.get(["customWindowNames", "missing"])
    assert loaded == {"customWindowNames": {"w1": "Work"}}


@pytest.mark.anyio("asyncio")
async def test_json_file_store_merges_keys(tmp_path):
    path = tmp_path / "nested" / "store.json"
    store = JsonFileStore(path)
    assert await store.get(["hasSeenOnboarding"]) == {}

    await store.set({"hasSeenOnboarding": True})
    await store.set({"customWindowNames": {"w1": "Work"}})

    assert json.loads(path.read_text(encoding="utf-8")) == {
        "hasSeenOnboarding": True,
        "customWindowNames": {"w1": "Work"},
    }
    assert await JsonFileStore(path).get(["hasSeenOnboarding"]) == {"hasSeenOnboarding": True}
    assert [entry.name for entry in path.parent.iterdir()] == ["store.json"]


@pytest.mark.anyio("asyncio")
async def test_json_file_store_rejects_non_object(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        await JsonFileStore(path).get(["hasSeenOnboarding"])


@pytest.mark.anyio("asyncio")
async def test_storage_service_reads_typed_data():
    store = MemoryStore(
        {
            "customWindowNames": {"w1": "Work"},
            "hasSeenOnboarding": True,
            "apiKey": None,
        }
    )
    data = await StorageService(MockTabProvider(store=store)).load()
    assert data.custom_window_names == {"w1": "Work"}
    assert data.has_seen_onboarding is True
    assert data.api_key is None


@pytest.mark.anyio("asyncio")
async def test_storage_service_writes_settings():
    store = MemoryStore()
    service = StorageService(MockTabProvider(store=store))
    await service.set_onboarding_seen()
    await service.save_api_key("  secret  ")
    assert await store.get(["hasSeenOnboarding", "apiKey"]) == {
        "hasSeenOnboarding": True,
        "apiKey": "secret",
    }
