#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path

from tabmaster import TabMasterRuntime, TabMasterSettings
from tabmaster.llm.base import LLMProvider
from tabmaster.providers.mock import MockTabProvider
from tabmaster.providers.store import JsonFileStore, MemoryStore
from tabmaster.telemetry import ConsoleTelemetrySink, FanoutTelemetrySink, StructuredTelemetrySink


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Walk through a scripted TabMaster session on the demo windows")
    parser.add_argument("--store", type=Path, help="Persist custom names to this JSON file")
    parser.add_argument("--llm-provider", choices=["mock", "gemini"], default="mock")
    parser.add_argument("--events", type=Path, help="Write the structured event bundle to this path")
    return parser.parse_args()


def _show(runtime: TabMasterRuntime, title: str) -> None:
    print(f"\n== {title}")
    for window in runtime.windows:
        print(f"  {window.id:<6} {runtime.window_name(window.id):<24} {len(window.tabs)} tabs")


async def main() -> None:
    args = parse_args()
    recorder = StructuredTelemetrySink()
    store = JsonFileStore(args.store) if args.store else MemoryStore()
    settings = TabMasterSettings.from_env(llm_provider=args.llm_provider)
    runtime = TabMasterRuntime(
        MockTabProvider(store=store),
        telemetry=FanoutTelemetrySink([recorder, ConsoleTelemetrySink()]),
        settings=settings,
    )
    await runtime.refresh()
    _show(runtime, "Generated names")

    await runtime.rename_window("win_2", "Dev Reference")
    await runtime.rename_window("win_3", "Downtime")
    await runtime.undo_rename()
    _show(runtime, "After one undo")
    await runtime.redo_rename()

    plan = runtime.plan_merge(["win_4", "win_3"])
    if plan is not None:
        await runtime.commit_merge(plan)
        _show(runtime, "After merging research into downtime")

    if settings.llm_provider == LLMProvider.MOCK or settings.api_key:
        await runtime.suggest_window_names()
        _show(runtime, "Suggested names")
        await runtime.undo_rename()
        _show(runtime, "Suggestions undone")

    await runtime.aclose()
    if args.events:
        bundle = recorder.build_bundle(window_names=runtime.window_names, command="demo")
        args.events.parent.mkdir(parents=True, exist_ok=True)
        args.events.write_text(json.dumps(bundle, indent=2, ensure_ascii=False), encoding="utf-8")
        print(f"[events] wrote {args.events}")


if __name__ == "__main__":
    asyncio.run(main())
