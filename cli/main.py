"""CLI entry point for the Token Vesting Engine.

The CLI acts as the execution environment: it supplies the caller identity
and the current time to every operation and prints the resulting transfer
instruction for an external executor to carry out.

Usage:
    vesting create team-alice --caller 01aa --beneficiary 02bb --asset 31566704 \\
        --total 1000000 --start 1700000000 --cliff 1715000000 --duration 63072000
    vesting claim team-alice --caller 02bb
    vesting info team-alice --now 1720000000 --output json
"""

import json
import logging
import time
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from vesting_engine.core.config import EngineConfig, reload_config
from vesting_engine.core.exceptions import VestingError
from vesting_engine.output.audit_trail import AuditTrailFormatter
from vesting_engine.output.formatters import JSONFormatter, OutputFormatter, TableFormatter
from vesting_engine.service import VestingService

# Initialize app
app = typer.Typer(
    name="vesting",
    help="Token Vesting Engine - cliff + linear vesting with claims and revocation",
    add_completion=False,
)

console = Console()
log_console = Console(stderr=True)


def setup_logging(verbose: bool = False, level: str = "INFO") -> None:
    """Configure logging."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else level,
        format="%(message)s",
        handlers=[RichHandler(console=log_console, show_time=False, show_path=False)],
    )


def _parse_identity(value: str, name: str) -> bytes:
    """Decode a hex identity argument."""
    try:
        identity = bytes.fromhex(value.removeprefix("0x"))
    except ValueError:
        raise typer.BadParameter(f"{name} must be hex-encoded, got {value!r}") from None
    if not identity:
        raise typer.BadParameter(f"{name} must not be empty")
    return identity


def _resolve_now(now: Optional[int]) -> int:
    """Use the supplied time, or the host wall clock."""
    return now if now is not None else int(time.time())


def _get_formatter(output: str) -> OutputFormatter:
    output_lower = output.lower()
    if output_lower == "json":
        return JSONFormatter(include_tuple=True)
    if output_lower == "table":
        return TableFormatter()
    console.print(f"[red]Invalid output format: {output}. Use table or json[/]")
    raise typer.Exit(1)


def _emit(formatter: OutputFormatter, view) -> None:
    formatted = formatter.format(view)
    print(formatted.rstrip("\n"))


def _service(ctx: typer.Context) -> VestingService:
    return ctx.obj["service"]


def _rejected(error: VestingError) -> typer.Exit:
    console.print(f"[red]Rejected: {escape(error.message)}[/]")
    return typer.Exit(1)


@app.callback()
def main_callback(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to YAML config file (default: ./vesting.yaml if present)",
    ),
    data_dir: Optional[Path] = typer.Option(
        None,
        "--data-dir",
        help="Directory holding schedule records",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """Load configuration and open the schedule store."""
    try:
        engine_config: EngineConfig = reload_config(config)
    except VestingError as e:
        console.print(f"[red]{escape(e.message)}[/]")
        raise typer.Exit(1)

    setup_logging(verbose, engine_config.log_level)
    ctx.obj = {"service": VestingService(config=engine_config, data_dir=data_dir)}


@app.command()
def create(
    ctx: typer.Context,
    schedule_id: str = typer.Argument(..., help="Identifier for the new schedule"),
    caller: str = typer.Option(..., "--caller", help="Hex identity invoking creation"),
    beneficiary: str = typer.Option(..., "--beneficiary", "-b", help="Hex identity of the beneficiary"),
    asset: int = typer.Option(..., "--asset", help="Asset reference (non-zero)"),
    total: int = typer.Option(..., "--total", help="Total tokens to vest"),
    start: int = typer.Option(..., "--start", help="Vesting start (unix seconds)"),
    cliff: int = typer.Option(..., "--cliff", help="Cliff time (unix seconds)"),
    duration: int = typer.Option(..., "--duration", help="Vesting duration in seconds"),
    authority: Optional[str] = typer.Option(
        None,
        "--authority",
        help="Designated creator identity (defaults to configured authority)",
    ),
    output: str = typer.Option("table", "--output", "-o", help="Output format: table, json"),
) -> None:
    """
    Create a vesting schedule.

    Examples:
        vesting create team-alice --caller 01aa --beneficiary 02bb --asset 7 \\
            --total 1000 --start 0 --cliff 100 --duration 1000
    """
    formatter = _get_formatter(output)
    service = _service(ctx)

    try:
        service.create_vesting(
            schedule_id,
            _parse_identity(caller, "--caller"),
            _parse_identity(beneficiary, "--beneficiary"),
            asset,
            total,
            start,
            cliff,
            duration,
            authority=_parse_identity(authority, "--authority") if authority else None,
        )
    except VestingError as e:
        raise _rejected(e)

    if isinstance(formatter, TableFormatter):
        console.print(f"[green]Created schedule {schedule_id}[/]")
    _emit(formatter, service.get_vesting_info(schedule_id, start))


@app.command()
def vested(
    ctx: typer.Context,
    schedule_id: str = typer.Argument(..., help="Schedule identifier"),
    now: Optional[int] = typer.Option(None, "--now", help="Current time (default: wall clock)"),
) -> None:
    """Print the amount vested at a point in time."""
    try:
        amount = _service(ctx).vested(schedule_id, _resolve_now(now))
    except VestingError as e:
        raise _rejected(e)
    print(amount)


@app.command()
def claim(
    ctx: typer.Context,
    schedule_id: str = typer.Argument(..., help="Schedule identifier"),
    caller: str = typer.Option(..., "--caller", help="Hex identity of the beneficiary"),
    now: Optional[int] = typer.Option(None, "--now", help="Current time (default: wall clock)"),
    output: str = typer.Option("table", "--output", "-o", help="Output format: table, json"),
) -> None:
    """Claim all vested-but-unclaimed tokens."""
    formatter = _get_formatter(output)

    try:
        result = _service(ctx).claim(schedule_id, _parse_identity(caller, "--caller"), _resolve_now(now))
    except VestingError as e:
        raise _rejected(e)

    _emit(formatter, result.instruction)


@app.command()
def revoke(
    ctx: typer.Context,
    schedule_id: str = typer.Argument(..., help="Schedule identifier"),
    caller: str = typer.Option(..., "--caller", help="Hex identity of the grantor"),
    now: Optional[int] = typer.Option(None, "--now", help="Current time (default: wall clock)"),
    output: str = typer.Option("table", "--output", "-o", help="Output format: table, json"),
) -> None:
    """Revoke unvested tokens back to the grantor."""
    formatter = _get_formatter(output)

    try:
        result = _service(ctx).revoke(schedule_id, _parse_identity(caller, "--caller"), _resolve_now(now))
    except VestingError as e:
        raise _rejected(e)

    _emit(formatter, result.instruction)


@app.command()
def info(
    ctx: typer.Context,
    schedule_id: str = typer.Argument(..., help="Schedule identifier"),
    now: Optional[int] = typer.Option(None, "--now", help="Current time (default: wall clock)"),
    output: str = typer.Option("table", "--output", "-o", help="Output format: table, json"),
) -> None:
    """Show the full schedule snapshot."""
    formatter = _get_formatter(output)

    try:
        snapshot = _service(ctx).get_vesting_info(schedule_id, _resolve_now(now))
    except VestingError as e:
        raise _rejected(e)

    _emit(formatter, snapshot)


@app.command()
def status(
    ctx: typer.Context,
    schedule_id: str = typer.Argument(..., help="Schedule identifier"),
    caller: str = typer.Option(..., "--caller", help="Hex identity to report status for"),
    now: Optional[int] = typer.Option(None, "--now", help="Current time (default: wall clock)"),
    output: str = typer.Option("table", "--output", "-o", help="Output format: table, json"),
) -> None:
    """Show vesting progress relative to a caller."""
    formatter = _get_formatter(output)

    try:
        view = _service(ctx).get_user_status(
            schedule_id, _parse_identity(caller, "--caller"), _resolve_now(now)
        )
    except VestingError as e:
        raise _rejected(e)

    _emit(formatter, view)


@app.command("list")
def list_schedules(ctx: typer.Context) -> None:
    """List stored schedules."""
    schedule_ids = _service(ctx).list_schedules()
    if not schedule_ids:
        console.print("No schedules stored yet.")
        return

    console.print(f"[bold]Schedules ({len(schedule_ids)}):[/]")
    for schedule_id in schedule_ids:
        console.print(f"  - {schedule_id}")


@app.command()
def audit(
    ctx: typer.Context,
    schedule_id: str = typer.Argument(..., help="Schedule identifier"),
    save: Optional[Path] = typer.Option(None, "--save", "-s", help="Save audit trail to file"),
    output: str = typer.Option("table", "--output", "-o", help="Output format: table, json"),
) -> None:
    """Show the audit trail of a schedule."""
    try:
        entries = _service(ctx).audit_trail(schedule_id)
    except VestingError as e:
        raise _rejected(e)

    if output.lower() == "json":
        print(json.dumps([entry.model_dump(mode="json") for entry in entries], indent=2))
    else:
        console.print(AuditTrailFormatter().format_summary(entries, schedule_id), markup=False)

    if save:
        save.parent.mkdir(parents=True, exist_ok=True)
        AuditTrailFormatter().format_to_file(entries, str(save), schedule_id)
        console.print(f"[green]Audit trail saved to {save}[/]")


@app.command()
def version() -> None:
    """Show version information."""
    from vesting_engine import __version__
    console.print(f"Token Vesting Engine v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
