"""Command-line interface for netrestrict."""

import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from netrestrict.config import Config, find_config_file, load_config, merge_cli_options
from netrestrict.display import format_days, format_window, restriction_label, restriction_style
from netrestrict.models import DeviceStatus, RecordId
from netrestrict.policies import DeviceManager, RestrictionEvaluator
from netrestrict.policies.timeutil import parse_instant, utcnow

console = Console()


def _parse_at(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> Optional[datetime]:
    """Click callback turning --at into an aware datetime."""
    if value is None:
        return None
    try:
        return parse_instant(value)
    except ValueError:
        raise click.BadParameter(f"{value!r} is not an ISO-8601 timestamp")


at_option = click.option(
    "--at",
    "at",
    type=str,
    default=None,
    callback=_parse_at,
    help="Evaluate at this ISO-8601 instant instead of now (naive values are UTC)",
)


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to snapshot/config file (default: searches standard locations)",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output (debug logging)")
@click.pass_context
def main(ctx: click.Context, config: Path | None, verbose: bool) -> None:
    """netrestrict - Scheduled network restriction evaluator."""
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config or find_config_file()


def _load(ctx: click.Context) -> Config:
    """Load the snapshot named on the command line, or exit."""
    config_path: Path | None = ctx.obj.get("config_path")
    if config_path is None:
        console.print("[red]Error: No snapshot file found. Pass --config or create netrestrict.toml[/red]")
        sys.exit(1)

    cfg = load_config(config_path)

    if not ctx.obj.get("verbose"):
        level = logging.getLevelName(cfg.log_level.upper())
        if isinstance(level, int):
            logging.getLogger().setLevel(level)

    return cfg


def _build_evaluator(cfg: Config) -> RestrictionEvaluator:
    device_manager = DeviceManager(cfg.devices, cfg.schedules, cfg.assignments)
    return RestrictionEvaluator(device_manager)


def _resolve_device_id(device_manager: DeviceManager, raw: str) -> Optional[RecordId]:
    """Match a command-line id against string or integer device ids."""
    if device_manager.get_device(raw) is not None:
        return raw
    try:
        numeric = int(raw)
    except ValueError:
        return None
    if device_manager.get_device(numeric) is not None:
        return numeric
    return None


def _status_table(statuses: list[DeviceStatus], instant: datetime) -> Table:
    table = Table(title=f"Network Control Status ({instant.strftime('%Y-%m-%d %H:%M %Z')})")
    table.add_column("Device")
    table.add_column("Time Zone", style="dim")
    table.add_column("Level")
    table.add_column("Wi-Fi")
    table.add_column("Data")
    table.add_column("Emergency")
    table.add_column("Schedule")
    table.add_column("Status")

    for status in statuses:
        verdict = status.verdict
        level_style = restriction_style(verdict.restriction_level)

        wifi = "[red]Blocked[/red]" if verdict.restrict_wifi else "[green]Allowed[/green]"
        data = "[red]Blocked[/red]" if verdict.restrict_mobile_data else "[green]Allowed[/green]"
        emergency = "Allowed" if verdict.allow_emergency_access else "[red]Blocked[/red]"

        if verdict.has_active_restrictions:
            state = "[red]Restricted[/red]"
        else:
            state = "[green]Unrestricted[/green]"

        table.add_row(
            status.device.name or str(status.device.id),
            status.device.time_zone or "[yellow]not set[/yellow]",
            f"[{level_style}]{restriction_label(verdict.restriction_level)}[/{level_style}]",
            wifi,
            data,
            emergency,
            status.governing_schedule.name if status.governing_schedule else "-",
            state,
        )

    return table


@main.command()
@at_option
@click.pass_context
def status(ctx: click.Context, at: datetime | None) -> None:
    """Show effective network restrictions for every device."""
    cfg = _load(ctx)
    evaluator = _build_evaluator(cfg)
    instant = at or utcnow()

    statuses = evaluator.evaluate_all(instant)
    if not statuses:
        console.print("[yellow]No devices in snapshot[/yellow]")
        return

    console.print(_status_table(statuses, instant))


@main.command()
@click.argument("device_id")
@at_option
@click.pass_context
def check(ctx: click.Context, device_id: str, at: datetime | None) -> None:
    """Print the restriction verdict for one device as JSON."""
    cfg = _load(ctx)
    evaluator = _build_evaluator(cfg)

    resolved = _resolve_device_id(evaluator.device_manager, device_id)
    if resolved is None:
        console.print(f"[red]Error: Unknown device {device_id}[/red]")
        sys.exit(1)

    verdict = evaluator.evaluate_device(resolved, at or utcnow())
    click.echo(json.dumps(verdict.to_dict(), indent=2))


@main.command()
@at_option
@click.pass_context
def active(ctx: click.Context, at: datetime | None) -> None:
    """List schedules active for at least one assigned device."""
    cfg = _load(ctx)
    evaluator = _build_evaluator(cfg)

    schedules = evaluator.get_active_schedules(at or utcnow())
    if not schedules:
        console.print("[green]No active schedules[/green]")
        return

    table = Table(title="Active Schedules")
    table.add_column("Schedule")
    table.add_column("Window")
    table.add_column("Days")
    table.add_column("Level")
    table.add_column("Devices", justify="right")

    for schedule in schedules:
        level_style = restriction_style(schedule.restriction_level)
        device_count = len(evaluator.device_manager.get_devices_for_schedule(schedule.id))
        table.add_row(
            schedule.name,
            format_window(schedule),
            format_days(schedule.days_of_week),
            f"[{level_style}]{restriction_label(schedule.restriction_level)}[/{level_style}]",
            str(device_count),
        )

    console.print(table)


@main.command()
@click.option("--interval", type=int, default=None, help="Seconds between refreshes (default: 15)")
@click.option("--count", type=int, default=None, help="Stop after N refreshes (default: run until Ctrl+C)")
@click.pass_context
def watch(ctx: click.Context, interval: int | None, count: int | None) -> None:
    """Re-evaluate the snapshot periodically.

    The snapshot file is re-read on every refresh, so edits made by other
    tools show up on the next tick.

    Example:
        netrestrict -c family.toml watch --interval 30
    """
    cfg = merge_cli_options(_load(ctx), interval=interval)
    refresh_interval = cfg.refresh_interval

    async def run() -> None:
        """Evaluate, print, sleep."""
        refreshes = 0
        while count is None or refreshes < count:
            snapshot = _load(ctx)
            instant = utcnow()
            statuses = _build_evaluator(snapshot).evaluate_all(instant)
            if console.is_terminal:
                console.clear()
            console.print(_status_table(statuses, instant))
            refreshes += 1
            if count is None or refreshes < count:
                await asyncio.sleep(refresh_interval)

    console.print(f"[dim]Refreshing every {refresh_interval}s. Press Ctrl+C to stop[/dim]")
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        console.print()
        console.print("[green]Stopped[/green]")


if __name__ == "__main__":
    main()
