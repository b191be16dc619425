import asyncio

import typer
from rich.console import Console
from rich.table import Table

from devwatch.core.exceptions import DevwatchError

console = Console()
cli_app = typer.Typer(name="devwatch-admin", help="devwatch administrative CLI")


def _run_async(coro):
    """Run async code from sync CLI context."""
    return asyncio.run(coro)


async def _ensure_db():
    from devwatch.core.database import init_db
    await init_db()


def _fail(exc: DevwatchError) -> None:
    console.print(f"[bold red]{exc.message}[/bold red]")
    raise typer.Exit(code=1)


def _format_pct(value: float | None) -> str:
    return "undefined" if value is None else f"{value}%"


@cli_app.command("add-device")
def add_device(
    hostname: str = typer.Argument(help="Device hostname"),
    uptime: int = typer.Option(None, "--uptime", help="Current continuous uptime in seconds"),
):
    """Register a device."""
    async def _create():
        await _ensure_db()
        from devwatch.core.database import async_session
        from devwatch.services.outages import create_device
        return await create_device(async_session, hostname, uptime=uptime)

    try:
        device = _run_async(_create())
    except DevwatchError as exc:
        _fail(exc)

    console.print(f"[bold green]Device {device.device_id} ({device.hostname}) added.[/bold green]")


@cli_app.command("list-devices")
def list_devices():
    """List registered devices."""
    async def _list():
        await _ensure_db()
        from devwatch.core.database import async_session
        from devwatch.services.outages import list_devices as _list_devices
        return await _list_devices(async_session)

    devices = _run_async(_list())

    if not devices:
        console.print("[dim]No devices registered.[/dim]")
        return

    table = Table(title="Devices")
    table.add_column("ID", style="cyan")
    table.add_column("Hostname")
    table.add_column("Status", style="green")
    table.add_column("Uptime (s)")

    for device in devices:
        uptime = str(device.uptime) if device.uptime is not None else "unknown"
        table.add_row(str(device.device_id), device.hostname, device.status, uptime)

    console.print(table)


@cli_app.command("set-uptime")
def set_uptime(
    device_id: int = typer.Argument(help="Device ID"),
    uptime: int = typer.Argument(None, help="Continuous uptime in seconds"),
    unknown: bool = typer.Option(False, "--unknown", help="Mark the uptime as unknown"),
):
    """Set the continuous uptime reported for a device, or mark it unknown."""
    if unknown == (uptime is not None):
        console.print("[bold red]Pass either an uptime or --unknown.[/bold red]")
        raise typer.Exit(code=1)

    async def _set():
        await _ensure_db()
        from devwatch.core.database import async_session
        from devwatch.services.outages import update_device_uptime
        return await update_device_uptime(async_session, device_id, uptime)

    try:
        _run_async(_set())
    except DevwatchError as exc:
        _fail(exc)

    if unknown:
        console.print(f"Device {device_id} uptime marked unknown.")
    else:
        console.print(f"Device {device_id} uptime set to {uptime}s.")


@cli_app.command("outage-open")
def outage_open(
    device_id: int = typer.Argument(help="Device ID"),
    at: int = typer.Option(None, "--at", help="Epoch seconds the device went down (default: now)"),
):
    """Record a device going down."""
    async def _open():
        await _ensure_db()
        from devwatch.core.database import async_session
        from devwatch.services.outages import open_outage
        return await open_outage(async_session, device_id, now=at)

    try:
        outage = _run_async(_open())
    except DevwatchError as exc:
        _fail(exc)

    console.print(f"[yellow]Outage {outage.id} opened at {outage.going_down}.[/yellow]")


@cli_app.command("outage-close")
def outage_close(
    device_id: int = typer.Argument(help="Device ID"),
    at: int = typer.Option(None, "--at", help="Epoch seconds the device came back (default: now)"),
):
    """Record a device coming back up."""
    async def _close():
        await _ensure_db()
        from devwatch.core.database import async_session
        from devwatch.services.outages import close_outage
        return await close_outage(async_session, device_id, now=at)

    try:
        outage = _run_async(_close())
    except DevwatchError as exc:
        _fail(exc)

    console.print(
        f"[green]Outage {outage.id} closed after {outage.up_again - outage.going_down}s.[/green]"
    )


@cli_app.command("availability")
def availability(
    device_id: int = typer.Argument(help="Device ID"),
    policy: str = typer.Option(None, "--policy", help="'increasing' or 'decreasing' (default: configured)"),
    precision: int = typer.Option(None, "--precision", help="Decimal digits"),
    at: int = typer.Option(None, "--at", help="Epoch seconds to evaluate at (default: now)"),
):
    """Show device availability for day, week, month and year."""
    async def _summary():
        await _ensure_db()
        from devwatch.core.database import async_session
        from devwatch.services.device_availability import get_availability_summary
        return await get_availability_summary(
            async_session, device_id, precision=precision, policy=policy, now=at
        )

    try:
        summary = _run_async(_summary())
    except DevwatchError as exc:
        _fail(exc)

    table = Table(title=f"Device {device_id} availability ({summary['policy']})")
    table.add_column("Window", style="cyan")
    table.add_column("Availability", justify="right")

    for period, pct in summary["windows"].items():
        table.add_row(period, _format_pct(pct))

    console.print(table)


def main():
    cli_app()


if __name__ == "__main__":
    main()
