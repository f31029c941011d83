"""CLI interface for netreach.

Usage:
    netreach status [--host NAME | --address IP | --wifi]
    netreach watch [--host NAME | --address IP | --wifi] [--count N]
    netreach version
"""

import asyncio
from typing import Optional

import typer

from netreach import __version__
from netreach.core.constants import LOG_LEVEL
from netreach.core.logger import configure_logging
from netreach.services.reachability_monitor import ReachabilityMonitor
from netreach.services.scheduling import set_main_loop

# Create Typer app
app = typer.Typer(
    name="netreach",
    help="Network reachability status and change notifications",
    add_completion=False,
)

HOST_OPTION = typer.Option(None, "--host", help="Host name to check")
ADDRESS_OPTION = typer.Option(None, "--address", "-a", help="IP address to check")
WIFI_OPTION = typer.Option(False, "--wifi", help="Check local WiFi instead of the internet")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr")):
    """Network reachability status and change notifications."""
    configure_logging(level="DEBUG" if verbose else LOG_LEVEL)


def _create_monitor(host: Optional[str], address: Optional[str], wifi: bool) -> ReachabilityMonitor:
    """Build the monitor selected by the command line options."""
    if sum(1 for chosen in (host, address, wifi) if chosen) > 1:
        typer.echo("❌ Error: use only one of --host, --address, --wifi", err=True)
        raise typer.Exit(1)

    if host:
        monitor = ReachabilityMonitor.for_hostname(host)
        description = f"host {host}"
    elif address:
        monitor = ReachabilityMonitor.for_address(address)
        description = f"address {address}"
    elif wifi:
        monitor = ReachabilityMonitor.for_local_wifi()
        description = "local WiFi"
    else:
        monitor = ReachabilityMonitor.for_internet_connection()
        description = "internet connection"

    if monitor is None:
        typer.echo(f"❌ Error: cannot monitor {description}", err=True)
        raise typer.Exit(1)

    return monitor


@app.command()
def status(
    host: Optional[str] = HOST_OPTION,
    address: Optional[str] = ADDRESS_OPTION,
    wifi: bool = WIFI_OPTION,
):
    """Show the current reachability status."""
    monitor = _create_monitor(host, address, wifi)

    current = monitor.current_status()
    icon = "✅" if current.is_reachable else "❌"

    typer.echo("📊 Reachability:")
    typer.echo(f"   Target: {monitor.target}")
    typer.echo(f"   Status: {icon} {current}")
    typer.echo(f"   Flags: {monitor.current_flags().describe()}")
    typer.echo(f"   Connection required: {'yes' if monitor.connection_required() else 'no'}")


async def _watch(monitor: ReachabilityMonitor, count: Optional[int]) -> int:
    """Print changes until count events were seen (forever if None)."""
    loop = asyncio.get_running_loop()
    set_main_loop(loop)

    done = asyncio.Event()
    seen = 0

    def on_change(m: ReachabilityMonitor):
        nonlocal seen
        seen += 1
        current = m.current_status()
        typer.echo(f"🔄 {m.last_status()} → {current}  [{m.current_flags().describe()}]")
        if count and seen >= count:
            done.set()

    monitor.invoke_notification_on_main = True
    monitor.add_notification_callback(on_change)

    if not monitor.start_notifier(loop):
        typer.echo("❌ Error: could not start the notifier", err=True)
        raise typer.Exit(1)

    typer.echo(f"👀 Watching {monitor.target} (currently {monitor.current_status()}), Ctrl-C to stop")
    try:
        await done.wait()
    finally:
        monitor.stop_notifier()
        set_main_loop(None)

    return seen


@app.command()
def watch(
    host: Optional[str] = HOST_OPTION,
    address: Optional[str] = ADDRESS_OPTION,
    wifi: bool = WIFI_OPTION,
    count: Optional[int] = typer.Option(None, "--count", "-n", min=1, help="Exit after N changes"),
):
    """Print every reachability change."""
    monitor = _create_monitor(host, address, wifi)

    try:
        seen = asyncio.run(_watch(monitor, count))
    except KeyboardInterrupt:
        typer.echo("\n⏹️  Stopped")
        return

    typer.echo(f"✅ Saw {seen} change(s)")


@app.command()
def version():
    """Show version information."""
    typer.echo(f"netreach v{__version__}")


if __name__ == "__main__":
    app()
