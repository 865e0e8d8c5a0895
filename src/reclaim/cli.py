"""CLI interface for reclaim."""

from __future__ import annotations

import json
import logging
import sys
import time
from pathlib import Path

import click

from reclaim.core.deleter import SafeDeleter
from reclaim.core.engine import CleanerEngine
from reclaim.core.registry import ScannerRegistry
from reclaim.core.scanner_loader import build_context, load_scanners
from reclaim.core.tracker import Tracker
from reclaim.models.category import Category
from reclaim.models.scan_result import CandidateItem, ScanResult
from reclaim.settings import Settings
from reclaim.utils import bytes_to_human, format_elapsed, format_relative_time


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _build_engine(settings: Settings, dry_run: bool = False) -> CleanerEngine:
    context = build_context(settings)
    registry = ScannerRegistry()
    load_scanners(registry, context, settings)
    deleter = SafeDeleter(context.guard, context.oracle, context.runner, dry_run=dry_run)
    return CleanerEngine(registry, deleter)


def _item_json(item: CandidateItem) -> dict:
    return {
        "path": str(item.path),
        "name": item.name,
        "size_bytes": item.size_bytes,
        "selected": item.selected,
        "app_name": item.app_name,
    }


def _result_json(result: ScanResult) -> dict:
    return {
        "category": result.category.id,
        "label": result.category.label,
        "total_bytes": result.total_bytes,
        "selected_bytes": result.selected_bytes,
        "items": [_item_json(i) for i in result.items],
    }


def _print_results(results: list[ScanResult], show_items: bool = True) -> None:
    for result in results:
        click.echo(
            f"  {click.style('✓', fg='green')} {result.category.label:30s} — "
            f"{click.style(bytes_to_human(result.total_bytes), fg='green', bold=True)} "
            f"({len(result.items):,} items, {result.selected_count:,} selected)"
        )
        if not show_items:
            continue
        for item in result.items:
            mark = click.style("[x]", fg="green") if item.selected else click.style("[ ]", fg="bright_black")
            click.echo(f"      {mark} {bytes_to_human(item.size_bytes):>10s}  {item.name}")


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Settings file (default: $XDG_CONFIG_HOME/reclaim/settings.json)",
)
@click.pass_context
def main(ctx: click.Context, verbose: int, config_path: Path | None) -> None:
    """reclaim — find and safely remove reclaimable disk space."""
    _setup_logging(verbose)
    ctx.obj = Settings(config_path) if config_path else Settings.instance()


# ── scan ─────────────────────────────────────────────────────────────────

@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def scan(settings: Settings, as_json: bool) -> None:
    """Scan for reclaimable space (preview only, never deletes)."""
    engine = _build_engine(settings)

    if not as_json:
        click.echo(f"\n{click.style('🔍', bold=True)} Scanning {len(engine.registry)} categories...\n")

    def on_progress(scanner_id: str, status: str) -> None:
        if not as_json and status == "error":
            click.echo(f"  {click.style('✗', fg='red')} {scanner_id:30s} — error during scan")

    started = time.monotonic()
    results = engine.scan(on_progress=on_progress)
    elapsed = time.monotonic() - started

    if as_json:
        data = {
            "total_bytes": engine.total_found_bytes,
            "selected_bytes": engine.total_selected_bytes,
            "results": [_result_json(r) for r in results],
        }
        click.echo(json.dumps(data, indent=2))
        return

    if not results:
        click.echo("Nothing to clean.")
        return

    _print_results(results)
    click.echo(
        f"\nTotal reclaimable: {click.style(bytes_to_human(engine.total_found_bytes), fg='green', bold=True)}"
        f" ({bytes_to_human(engine.total_selected_bytes)} selected, scanned in {format_elapsed(elapsed)})\n"
    )


# ── clean ────────────────────────────────────────────────────────────────

@main.command()
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.option("--dry-run", is_flag=True, help="Show what would be removed without doing it")
@click.option("--all", "select_all", is_flag=True, help="Select every item except large files")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def clean(settings: Settings, yes: bool, dry_run: bool, select_all: bool, as_json: bool) -> None:
    """Scan, then remove the selected items."""
    engine = _build_engine(settings, dry_run=dry_run)

    if not as_json:
        click.echo(f"\n{click.style('🔍', bold=True)} Scanning...\n")

    results = engine.scan()
    if select_all:
        engine.select_all(True)

    if engine.total_selected_count == 0:
        if as_json:
            click.echo(json.dumps({"status": "nothing_selected", "results": [_result_json(r) for r in results]}))
        else:
            if results:
                _print_results(results)
            click.echo("Nothing selected.")
        return

    if not as_json:
        _print_results(engine.results)
        click.echo(
            f"\nSelected: {click.style(bytes_to_human(engine.total_selected_bytes), fg='green', bold=True)}"
            f" in {engine.total_selected_count:,} items\n"
        )

    if not yes and not dry_run and not as_json:
        if not click.confirm("Remove the selected items?", default=False):
            click.echo("Aborted.")
            return

    if not as_json:
        click.echo(f"{click.style('🧹', bold=True)} Cleaning...\n")

    outcome = engine.clean()
    engine.deleter.audit.flush()

    if as_json:
        data = {
            "status": "dry_run" if dry_run else "cleaned",
            "removed_count": outcome.removed_count,
            "freed_bytes": outcome.freed_bytes,
            "disk_delta_bytes": engine.disk_delta,
            "failures": outcome.failures,
        }
        click.echo(json.dumps(data, indent=2))
        return

    for failure in outcome.failures:
        click.echo(f"  {click.style('!', fg='yellow')} {failure}")

    verb = "Would free" if dry_run else "Freed"
    click.echo(
        f"\n{verb} {click.style(bytes_to_human(outcome.freed_bytes), fg='green', bold=True)}"
        f" from {outcome.removed_count:,} items"
    )
    if dry_run:
        click.echo("(dry run — nothing was removed)\n")
    else:
        click.echo(f"Free space changed by {bytes_to_human(engine.disk_delta)}\n")


# ── categories ───────────────────────────────────────────────────────────

@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def categories(settings: Settings, as_json: bool) -> None:
    """List categories and whether their scanner is available."""
    engine = _build_engine(settings)
    disabled = settings.disabled_scanners()

    rows = []
    for category in Category:
        scanner = engine.registry.get_by_category(category)
        if scanner is None:
            status = "disabled" if category.id in disabled else "missing"
        else:
            status = scanner.unavailable_reason or "available"
        rows.append((category, scanner, status))

    if as_json:
        data = [
            {
                "id": c.id,
                "label": c.label,
                "description": c.description,
                "deletion_method": c.deletion_method.value,
                "auto_select": c.auto_select,
                "min_size": s.min_size if s else None,
                "status": status,
            }
            for c, s, status in rows
        ]
        click.echo(json.dumps(data, indent=2))
        return

    for category, scanner, status in rows:
        color = "green" if status == "available" else "bright_black"
        click.echo(f"  {click.style(category.id, fg='cyan', bold=True):30s}  {category.label}")
        click.echo(f"    {category.description}")
        click.echo(f"    {click.style(status, fg=color)}")


# ── check ────────────────────────────────────────────────────────────────

@main.command()
@click.argument("path", type=click.Path(path_type=Path))
@click.pass_obj
def check(settings: Settings, path: Path) -> None:
    """Tell whether PATH is protected. Exits 1 when it is."""
    guard = build_context(settings).guard
    if guard.is_forbidden(path):
        click.echo(f"{path}: {click.style('protected', fg='red', bold=True)}")
        sys.exit(1)
    click.echo(f"{path}: {click.style('not protected', fg='green')}")


# ── stats ────────────────────────────────────────────────────────────────

@main.command()
@click.option("--period", "-p", default="all", type=click.Choice(["today", "week", "month", "all"]))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def stats(period: str, as_json: bool) -> None:
    """Show space freed statistics."""
    data = Tracker().get_stats(period)

    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    last = format_relative_time(data["last_clean"]) if data["last_clean"] else "never"
    click.echo(f"\n{click.style('📊', bold=True)} Statistics ({period})\n")
    click.echo(f"  Bytes freed:    {click.style(bytes_to_human(data['bytes_freed']), fg='green', bold=True)}")
    click.echo(f"  Items removed:  {data['items_removed']:,}")
    click.echo(f"  Clean passes:   {data['pass_count']}")
    click.echo(f"  Lifetime total: {click.style(bytes_to_human(data['lifetime_bytes_freed']), fg='cyan', bold=True)}")
    click.echo(f"  Last clean:     {last}")
    click.echo()
