from __future__ import annotations

import argparse
import asyncio
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.table import Table

from .assist.organizer import AssistError
from .config import TabMasterSettings
from .llm.base import LLMProvider
from .orchestration.runtime import TabMasterRuntime
from .providers.base import ProviderUnavailable
from .providers.bridge import BridgeError
from .providers.providers import list_provider_kinds, select_provider
from .telemetry.base import FanoutTelemetrySink
from .telemetry.console import ConsoleTelemetrySink
from .telemetry.recorder import StructuredTelemetrySink
from .windows.export import export_filename, render_export


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="tabmaster", description="Name, rename and merge browser windows")
    parser.add_argument("--provider", choices=list_provider_kinds(), help="Window backend (default from TABMASTER_PROVIDER)")
    parser.add_argument("--bridge-url", help="Base URL of the extension bridge")
    parser.add_argument("--store", type=Path, help="JSON file for persisted names (mock provider)")
    parser.add_argument("--llm-provider", choices=[kind.value for kind in LLMProvider], help="Model backend for assist commands")
    parser.add_argument("--events", type=Path, help="Write the structured event log to this path")
    parser.add_argument("--quiet", action="store_true", help="Suppress notifications on stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("windows", help="List windows with their display names")

    rename = sub.add_parser("rename", help="Rename a window")
    rename.add_argument("window_id")
    rename.add_argument("name")

    merge = sub.add_parser("merge", help="Merge windows into the alphabetically first one")
    merge.add_argument("window_ids", nargs="+")
    merge.add_argument("--order", nargs="+", help="Explicit order of the source windows")
    merge.add_argument("--dry-run", action="store_true", help="Print the plan without moving tabs")

    sub.add_parser("organize", help="Group all tabs into categories with the model")
    sub.add_parser("suggest-names", help="Let the model rename every window in one step")

    export = sub.add_parser("export", help="Export all tabs")
    export.add_argument("format", choices=["csv", "md"])
    export.add_argument("--output", type=Path, help="Output file or directory (default: stdout)")
    return parser.parse_args(argv)


def _settings_from_args(args: argparse.Namespace) -> TabMasterSettings:
    return TabMasterSettings.from_env(
        provider=args.provider,
        bridge_url=args.bridge_url,
        store_path=args.store,
        llm_provider=args.llm_provider,
    )


def _print_windows(console: Console, runtime: TabMasterRuntime) -> None:
    table = Table(title="Windows")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Tabs", justify="right")
    for window in runtime.windows:
        table.add_row(window.id, runtime.window_name(window.id), str(len(window.tabs)))
    console.print(table)


async def _run(args: argparse.Namespace, runtime: TabMasterRuntime, console: Console) -> int:
    await runtime.refresh()

    if args.command == "windows":
        _print_windows(console, runtime)
        return 0

    if args.command == "rename":
        if args.window_id not in {window.id for window in runtime.windows}:
            console.print(f"[red]Unknown window {args.window_id}[/]")
            return 1
        if not await runtime.rename_window(args.window_id, args.name):
            console.print("[yellow]Name unchanged (blank or identical)[/]")
            return 1
        _print_windows(console, runtime)
        return 0

    if args.command == "merge":
        plan = runtime.plan_merge(args.window_ids)
        if plan is None:
            console.print("Nothing to merge: select at least two open windows.")
            return 0
        if args.order:
            plan.reorder_sources(args.order)
        sources = ", ".join(runtime.window_name(source) for source in plan.source_ids)
        console.print(f"Merging {sources} into {runtime.window_name(plan.target_id or '')}")
        if args.dry_run:
            return 0
        await runtime.commit_merge(plan)
        _print_windows(console, runtime)
        return 0

    if args.command == "organize":
        groups = await runtime.organize_tabs()
        titles = {tab.id: tab.title for window in runtime.windows for tab in window.tabs}
        for group in groups:
            console.print(f"[bold]{group.category_name}[/] ({len(group.tab_ids)})")
            for tab_id in group.tab_ids:
                console.print(f"  - {titles.get(tab_id, tab_id)}")
        return 0

    if args.command == "suggest-names":
        applied = await runtime.suggest_window_names()
        if not applied:
            console.print("No new names suggested.")
        _print_windows(console, runtime)
        return 0

    if args.command == "export":
        content = render_export(args.format, runtime.windows, runtime.window_names)
        if args.output is None:
            sys.stdout.write(content)
            return 0
        target = args.output
        if target.is_dir():
            target = target / export_filename(datetime.now(), args.format)
        target.write_text(content, encoding="utf-8")
        console.print(f"[export] wrote {target}")
        return 0

    raise ValueError(f"Unknown command {args.command}")


async def main_async(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    console = Console()
    recorder = StructuredTelemetrySink()
    telemetry = FanoutTelemetrySink([recorder])
    if not args.quiet:
        telemetry.add(ConsoleTelemetrySink())
    try:
        settings = _settings_from_args(args)
        provider = select_provider(settings)
    except (ProviderUnavailable, ValueError) as exc:
        console.print(f"[red]{exc}[/]")
        return 2
    runtime = TabMasterRuntime(provider, telemetry=telemetry, settings=settings)
    try:
        return await _run(args, runtime, console)
    except (AssistError, BridgeError, KeyError, ValueError) as exc:
        console.print(f"[red]{exc}[/]")
        return 1
    finally:
        await runtime.aclose()
        if args.events:
            bundle = recorder.build_bundle(window_names=runtime.window_names, command=args.command)
            args.events.parent.mkdir(parents=True, exist_ok=True)
            args.events.write_text(json.dumps(bundle, indent=2, ensure_ascii=False), encoding="utf-8")


def main(argv: Sequence[str] | None = None) -> None:
    raise SystemExit(asyncio.run(main_async(argv)))


if __name__ == "__main__":
    main()
