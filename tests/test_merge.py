from __future__ import annotations

import pytest

from tabmaster.providers.mock import MockTabProvider
from tabmaster.windows.merge import MergePlan, execute_merge, resolve_merge_plan

NAMES = {"a": "Zebra", "b": "Apple", "c": "Mango"}


def test_alphabetically_first_window_is_target():
    plan = resolve_merge_plan(["a", "b", "c"], NAMES)
    assert plan.target_id == "b"
    assert plan.source_ids == ["c", "a"]
    assert plan.is_actionable


def test_comparison_ignores_case():
    plan = resolve_merge_plan(["x", "y"], {"x": "zeta", "y": "Alpha"})
    assert plan.target_id == "y"
    assert plan.source_ids == ["x"]


def test_identical_names_keep_selection_order():
    names = {"w1": "Work", "w2": "Work", "w3": "Work"}
    plan = resolve_merge_plan(["w3", "w1", "w2"], names)
    assert plan.target_id == "w3"
    assert plan.source_ids == ["w1", "w2"]


def test_closed_windows_are_dropped_from_selection():
    plan = resolve_merge_plan(["a", "b", "gone"], NAMES, live_window_ids=["a", "b", "c"])
    assert plan.target_id == "b"
    assert plan.source_ids == ["a"]


def test_single_live_window_is_not_actionable():
    plan = resolve_merge_plan(["a", "gone"], NAMES, live_window_ids=["a"])
    assert plan.target_id == "a"
    assert plan.source_ids == []
    assert not plan.is_actionable

    empty = resolve_merge_plan([], NAMES)
    assert empty.target_id is None
    assert not empty.is_actionable


def test_duplicate_selection_entries_are_ignored():
    plan = resolve_merge_plan(["a", "a", "b"], NAMES)
    assert plan.source_ids == ["a"]


def test_move_source_swaps_neighbours():
    plan = MergePlan(target_id="b", source_ids=["c", "a", "d"])
    assert plan.move_source(1, "up") is True
    assert plan.source_ids == ["a", "c", "d"]
    assert plan.move_source(1, "down") is True
    assert plan.source_ids == ["a", "d", "c"]


def test_move_source_at_edges_is_a_no_op():
    plan = MergePlan(target_id="b", source_ids=["c", "a"])
    assert plan.move_source(0, "up") is False
    assert plan.move_source(1, "down") is False
    assert plan.move_source(5, "up") is False
    assert plan.source_ids == ["c", "a"]


def test_reorder_sources_requires_the_same_windows():
    plan = MergePlan(target_id="b", source_ids=["c", "a"])
    plan.reorder_sources(["a", "c"])
    assert plan.source_ids == ["a", "c"]
    with pytest.raises(ValueError):
        plan.reorder_sources(["a"])
    with pytest.raises(ValueError):
        plan.reorder_sources(["a", "a"])
    with pytest.raises(ValueError):
        plan.reorder_sources(["a", "z"])


@pytest.mark.anyio("asyncio")
async def test_execute_merge_appends_sources_in_order():
    provider = MockTabProvider()
    windows = await provider.list_windows()
    plan = MergePlan(target_id="win_1", source_ids=["win_3", "win_2"])

    moved = await execute_merge(plan, windows, provider)

    assert moved == 9
    after = {window.id: window for window in await provider.list_windows()}
    assert sorted(after) == ["win_1", "win_4"]
    assert after["win_1"].tab_ids() == [
        "t_1", "t_2", "t_3", "t_4", "t_5", "t_6",
        "t_11", "t_12", "t_13", "t_14", "t_15",
        "t_7", "t_8", "t_9", "t_10",
    ]
    assert all(tab.window_id == "win_1" for tab in after["win_1"].tabs)


@pytest.mark.anyio("asyncio")
async def test_execute_merge_skips_missing_and_empty_sources():
    provider = MockTabProvider()
    windows = await provider.list_windows()
    windows[3].tabs = []
    plan = MergePlan(target_id="win_2", source_ids=["gone", "win_4", "win_3"])

    moved = await execute_merge(plan, windows, provider)

    assert moved == 5
    assert provider.activity == ["move t_11,t_12,t_13,t_14,t_15 -> win_2"]


@pytest.mark.anyio("asyncio")
async def test_execute_merge_ignores_non_actionable_plans():
    provider = MockTabProvider()
    windows = await provider.list_windows()
    assert await execute_merge(MergePlan(target_id="win_1"), windows, provider) == 0
    assert provider.activity == []
