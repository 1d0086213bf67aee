from __future__ import annotations

import json

import pytest

from tabmaster.cli import main_async


@pytest.mark.anyio("asyncio")
async def test_rename_is_saved_to_store(tmp_path, capsys):
    store = tmp_path / "store.json"
    code = await main_async(["--provider", "mock", "--store", str(store), "--quiet", "rename", "win_1", "Work"])
    assert code == 0
    assert json.loads(store.read_text(encoding="utf-8"))["customWindowNames"] == {"win_1": "Work"}

    code = await main_async(["--provider", "mock", "--store", str(store), "--quiet", "export", "md"])
    assert code == 0
    assert "### Work (6 tabs)" in capsys.readouterr().out


@pytest.mark.anyio("asyncio")
async def test_unknown_window_rename_fails():
    code = await main_async(["--provider", "mock", "--quiet", "rename", "win_9", "Work"])
    assert code == 1


@pytest.mark.anyio("asyncio")
async def test_merge_dry_run_writes_event_bundle(tmp_path):
    events = tmp_path / "out" / "events.json"
    code = await main_async(
        ["--provider", "mock", "--quiet", "--events", str(events), "merge", "win_3", "win_2", "--dry-run"]
    )
    assert code == 0
    bundle = json.loads(events.read_text(encoding="utf-8"))
    assert bundle["command"] == "merge"
    planned = [entry for entry in bundle["events"] if entry["event"] == "merge.planned"]
    assert planned[0]["payload"] == {"target_id": "win_2", "source_ids": ["win_3"]}
    assert not [entry for entry in bundle["events"] if entry["event"] == "merge.committed"]


@pytest.mark.anyio("asyncio")
async def test_export_to_directory_uses_timestamped_name(tmp_path):
    code = await main_async(["--provider", "mock", "--quiet", "export", "csv", "--output", str(tmp_path)])
    assert code == 0
    written = list(tmp_path.glob("tabmaster-export-*.csv"))
    assert len(written) == 1
    assert written[0].read_text(encoding="utf-8").startswith("Window,Last Accessed,Domain,Full URL,Title\n")


@pytest.mark.anyio("asyncio")
async def test_bridge_without_url_is_a_usage_error(monkeypatch):
    monkeypatch.delenv("TABMASTER_BRIDGE_URL", raising=False)
    assert await main_async(["--provider", "bridge", "--quiet", "windows"]) == 2


@pytest.mark.anyio("asyncio")
async def test_provider_choices_come_from_the_registry():
    with pytest.raises(SystemExit) as excinfo:
        await main_async(["--provider", "firefox", "windows"])
    assert excinfo.value.code == 2
