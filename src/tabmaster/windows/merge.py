from __future__ import annotations

from dataclasses import dataclass, field
from typing import Collection, Iterable, List, Literal, Mapping, Optional, Sequence

from ..providers.base import TabProvider
from .models import WindowData

Direction = Literal["up", "down"]


@dataclass
class MergePlan:
    """Destination window plus the ordered windows whose tabs move into it.

    `source_ids` starts alphabetical by display name and may be reordered
    before commit; the final order is the order tabs are appended.
    """

    target_id: Optional[str]
    source_ids: List[str] = field(default_factory=list)

    @property
    def is_actionable(self) -> bool:
        return self.target_id is not None and bool(self.source_ids)

    def move_source(self, index: int, direction: Direction) -> bool:
        other = index - 1 if direction == "up" else index + 1
        return self.swap_sources(index, other)

    def swap_sources(self, first: int, second: int) -> bool:
        size = len(self.source_ids)
        if not (0 <= first < size and 0 <= second < size) or first == second:
            return False
        order = self.source_ids
        order[first], order[second] = order[second], order[first]
        return True

    def reorder_sources(self, order: Sequence[str]) -> None:
        """Replace the source order wholesale; must name exactly the current sources."""

        if sorted(order) != sorted(self.source_ids) or len(set(order)) != len(order):
            raise ValueError(f"Order must list each source window exactly once: {self.source_ids}")
        self.source_ids = list(order)

    def as_dict(self) -> dict:
        return {"target_id": self.target_id, "source_ids": list(self.source_ids)}


def _dedupe(ids: Iterable[str]) -> List[str]:
    seen: set[str] = set()
    ordered: List[str] = []
    for window_id in ids:
        if window_id in seen:
            continue
        seen.add(window_id)
        ordered.append(window_id)
    return ordered


def resolve_merge_plan(
    selected_ids: Iterable[str],
    display_names: Mapping[str, str],
    live_window_ids: Collection[str] | None = None,
) -> MergePlan:
    """Pick the alphabetically first window as target, the rest as sources.

    Ids no longer in `live_window_ids` are dropped first. Sorting is a
    case-insensitive stable sort on display name, so identical names keep
    their selection order. Callers should treat a non-actionable plan as
    "nothing to merge".
    """

    candidates = _dedupe(selected_ids)
    if live_window_ids is not None:
        live = set(live_window_ids)
        candidates = [window_id for window_id in candidates if window_id in live]
    if not candidates:
        return MergePlan(target_id=None)
    ordered = sorted(candidates, key=lambda window_id: display_names.get(window_id, "").casefold())
    return MergePlan(target_id=ordered[0], source_ids=ordered[1:])


async def execute_merge(
    plan: MergePlan,
    windows: Sequence[WindowData],
    provider: TabProvider,
) -> int:
    """Move each source window's tabs into the target, in `source_ids` order."""

    if not plan.is_actionable or plan.target_id is None:
        return 0
    by_id = {window.id: window for window in windows}
    moved = 0
    for source_id in plan.source_ids:
        window = by_id.get(source_id)
        if window is None or not window.tabs:
            continue
        tab_ids = window.tab_ids()
        await provider.move_tabs(tab_ids, plan.target_id)
        moved += len(tab_ids)
    return moved


__all__ = ["Direction", "MergePlan", "execute_merge", "resolve_merge_plan"]
