"""
Command-line interface for HolidayScout.
Search holiday packages from the terminal with Rich formatting.
"""

import asyncio
import logging
from datetime import date, timedelta
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from holidayscout import __app_name__, __version__
from holidayscout.cli.validators import date_callback, iata_code_callback, origin_callback
from holidayscout.config import settings
from holidayscout.data.destinations import list_destinations
from holidayscout.models.package import Package, SearchResult
from holidayscout.models.search import Mood, SearchRequest, TransportPreference, build_search_request
from holidayscout.orchestration.package_orchestrator import PackageSearchOrchestrator
from holidayscout.utils.logging_config import setup_logging

# Create Typer app
app = typer.Typer(
    name="holidayscout",
    help="HolidayScout - budget holiday package finder",
    add_completion=False,
)

config_app = typer.Typer(help="Inspect configuration")
app.add_typer(config_app, name="config")

console = Console()
logger = logging.getLogger(__name__)


# ============================================================================
# Utility Functions
# ============================================================================

def handle_error(e: Exception, message: str = "An error occurred"):
    """Handle errors with nice formatting."""
    console.print(f"\n[bold red]✗ {message}[/bold red]")
    console.print(f"[red]{type(e).__name__}: {str(e)}[/red]\n")
    if settings.debug:
        console.print_exception()
    raise typer.Exit(code=1)


def success(message: str):
    """Print success message."""
    console.print(f"[bold green]✓ {message}[/bold green]")


def warning(message: str):
    """Print warning message."""
    console.print(f"[yellow]⚠ {message}[/yellow]")


def _build_orchestrator() -> PackageSearchOrchestrator:
    return PackageSearchOrchestrator.from_settings(settings)


def version_callback(value: bool):
    """Show version and exit."""
    if value:
        console.print(Panel(
            f"[bold blue]{__app_name__}[/bold blue] version [green]{__version__}[/green]\n"
            f"Budget holiday package finder",
            title="HolidayScout",
            border_style="blue",
        ))
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """
    HolidayScout CLI - find transport + hotel packages within a budget.

    Use 'holidayscout COMMAND --help' for command-specific help.
    """
    setup_logging(
        level=settings.log_level,
        json_format=settings.log_json,
        log_file=settings.log_file,
    )


# ============================================================================
# SEARCH Command
# ============================================================================

@app.command()
def search(
    origin: str = typer.Option(
        settings.default_origin,
        help="Origin city code, airport or city name (e.g., LON, LHR, Manchester)",
        callback=origin_callback,
    ),
    nights: int = typer.Option(4, help="Nights away"),
    adults: int = typer.Option(2, help="Number of adult travellers"),
    budget: int = typer.Option(500, help="Maximum total price in GBP (0 = unbounded)"),
    mood: Mood = typer.Option(Mood.RANDOM, case_sensitive=False, help="Destination mood"),
    transport: TransportPreference = typer.Option(
        TransportPreference.ANY, case_sensitive=False, help="Transport type"
    ),
    depart: Optional[str] = typer.Option(
        None,
        help="Fixed outbound date (YYYY-MM-DD). Default: sample dates over the next months",
        callback=date_callback,
    ),
    relax_budget: bool = typer.Option(False, help="Treat every package as within budget"),
    relax_mood: bool = typer.Option(False, help="Search all destinations regardless of mood"),
    limit: int = typer.Option(10, help="Maximum packages to display"),
    json_output: bool = typer.Option(False, "--json", help="Print the raw result as JSON"),
    debug: bool = typer.Option(False, help="Log per-destination details and statistics"),
):
    """
    Search holiday packages across all destinations.

    Examples:
        holidayscout search --budget 400 --mood sun
        holidayscout search --origin LON --nights 3 --transport train
        holidayscout search --depart 2026-05-12 --adults 1 --json
    """
    fixed_dates = None
    if depart:
        outbound = date.fromisoformat(depart)
        fixed_dates = [{
            "outbound_date": outbound,
            "return_date": outbound + timedelta(days=nights),
            "nights": nights,
        }]

    try:
        request = build_search_request(
            origin=origin,
            nights=nights,
            adults=adults,
            max_budget=budget,
            mood=mood,
            transport_type=transport,
            relax_budget=relax_budget,
            relax_mood=relax_mood,
            fixed_dates=fixed_dates,
            debug=debug,
        )
    except Exception as e:
        handle_error(e, "Invalid search")

    if not json_output:
        console.print(Panel("[bold]Holiday Package Search[/bold]", border_style="green"))

    try:
        result = asyncio.run(_run_search(request))
    except Exception as e:
        handle_error(e, "Search failed")

    if json_output:
        typer.echo(result.model_dump_json(indent=2))
        return

    _print_result(result, request, limit)


async def _run_search(request: SearchRequest) -> SearchResult:
    orchestrator = _build_orchestrator()
    try:
        return await orchestrator.search(request)
    finally:
        await orchestrator.aclose()


async def _find_package(iata_code: str, request: SearchRequest) -> Optional[Package]:
    orchestrator = _build_orchestrator()
    try:
        return await orchestrator.find_package(iata_code, request)
    finally:
        await orchestrator.aclose()


def _print_result(result: SearchResult, request: SearchRequest, limit: int):
    if not result.packages:
        warning("No packages found. Try another mood, more nights or a larger budget.")
        return

    if not result.exact_match:
        warning(
            f"Not enough packages within £{request.max_budget}; "
            f"showing the closest matches above budget too."
        )

    table = Table(title=f"Packages from {request.origin}", show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", width=3)
    table.add_column("Destination", style="cyan")
    table.add_column("Dates", style="white")
    table.add_column("Transport", style="blue")
    table.add_column("Hotel", style="white")
    table.add_column("Total", style="green", justify="right")

    for index, package in enumerate(result.packages[:limit], 1):
        table.add_row(
            str(index),
            f"{package.destination.city}, {package.destination.country}",
            f"{package.transport.outbound_date:%d %b} - {package.transport.return_date:%d %b}",
            _transport_summary(package),
            f"{package.hotel.name} (£{package.hotel.price})",
            f"[red]£{package.total_price}[/red]" if package.over_budget else f"£{package.total_price}",
        )

    console.print(table)
    success(
        f"{len(result.packages)} packages from {result.stats.destinations_scanned} destinations "
        f"in {result.stats.elapsed_seconds:.1f}s"
    )


def _transport_summary(package: Package) -> str:
    transport = package.transport
    stops = "direct" if transport.stops == 0 else f"{transport.stops} stop(s)"
    price_kind = "" if transport.is_real_price else " est."
    return f"{transport.type.value} £{transport.price}{price_kind}, {stops}"


# ============================================================================
# PACKAGE Command
# ============================================================================

@app.command()
def package(
    destination: str = typer.Argument(..., help="Destination IATA code (e.g., BCN)", callback=iata_code_callback),
    origin: str = typer.Option(settings.default_origin, callback=origin_callback),
    nights: int = typer.Option(4, help="Nights away"),
    adults: int = typer.Option(2, help="Number of adult travellers"),
    budget: int = typer.Option(500, help="Maximum total price in GBP (0 = unbounded)"),
    transport: TransportPreference = typer.Option(TransportPreference.ANY, case_sensitive=False),
):
    """
    Show the best package for a single destination.

    Example:
        holidayscout package BCN --nights 3
    """
    try:
        request = build_search_request(
            origin=origin, nights=nights, adults=adults, max_budget=budget, transport_type=transport
        )
        found = asyncio.run(_find_package(destination, request))
    except Exception as e:
        handle_error(e, f"Package lookup for {destination} failed")

    if found is None:
        warning(f"No transport found to {destination}")
        raise typer.Exit(code=1)

    console.print(Panel(
        f"[bold]{found.destination.city}, {found.destination.country}[/bold]\n"
        f"{found.transport.outbound_date} → {found.transport.return_date} ({found.nights} nights)\n"
        f"Transport: {_transport_summary(found)}\n"
        f"Hotel: {found.hotel.name} £{found.hotel.price} ({found.hotel.source.value})\n"
        f"[bold green]Total: £{found.total_price}[/bold green]"
        + (" [red](over budget)[/red]" if found.over_budget else ""),
        border_style="green",
    ))


# ============================================================================
# DESTINATIONS Command
# ============================================================================

@app.command()
def destinations(
    mood: Mood = typer.Option(Mood.RANDOM, case_sensitive=False, help="Filter by mood"),
):
    """List the destinations searched for a mood."""
    items = list_destinations(mood)

    table = Table(title=f"Destinations ({mood.value})", show_header=True, header_style="bold magenta")
    table.add_column("IATA", style="cyan", no_wrap=True)
    table.add_column("City", style="white")
    table.add_column("Country", style="green")

    for destination in items:
        table.add_row(destination.iata_code, destination.city, destination.country)

    console.print(table)
    console.print(f"[dim]{len(items)} destinations[/dim]")


# ============================================================================
# CONFIG Commands
# ============================================================================

@config_app.command("show")
def config_show():
    """
    Display current configuration (without sensitive data).
    """
    console.print(Panel("[bold]Current Configuration[/bold]", border_style="blue"))

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    table.add_row("App Name", settings.app_name)
    table.add_row("Version", settings.app_version)
    table.add_row("Environment", settings.environment)
    table.add_row("Debug", str(settings.debug))
    table.add_row("Log Level", settings.log_level)

    table.add_row("", "")
    table.add_row("[bold]Search[/bold]", "")
    table.add_row("Default Origin", settings.default_origin)
    table.add_row("Concurrency", str(settings.search_concurrency))
    table.add_row("Min Results", str(settings.search_min_results))
    table.add_row("Date Samples", str(settings.search_date_samples))
    table.add_row("Provider Timeout (s)", str(settings.provider_timeout_seconds))
    table.add_row("Require Hotel Image", "✓" if settings.require_hotel_image else "✗")
    table.add_row("Require Live Price", "✓" if settings.require_live_price else "✗")

    table.add_row("", "")
    table.add_row("[bold]Providers[/bold]", "")
    table.add_row("Amadeus Flights", "✓" if settings.use_amadeus else "✗ (estimates)")
    table.add_row("Amadeus Credentials", "set" if settings.amadeus_client_id else "not set")
    table.add_row("Redis Cache", "configured" if settings.redis_url else "in-process")

    console.print(table)


if __name__ == "__main__":
    app()
