"""
Main CLI application using Typer.
"""

import asyncio
import logging
from decimal import Decimal
from pathlib import Path
from typing import Annotated, Optional, Tuple

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import RoomfinderError
from ..domain.models import Period
from ..adapters.json_store import JsonHotelStore
from ..adapters.memory import load_sample_hotel
from ..services.reservations import (
    ReservationRepositoryProtocol,
    ReservationService,
    RoomRepositoryProtocol,
)

app = typer.Typer(
    name="roomfinder",
    help="Check hotel room availability and manage reservations",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
DemoOption = Annotated[bool, typer.Option("--demo", help="Use the bundled sample hotel in memory; nothing is saved.")]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """
    Configure logging for every command.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    return AppConfig.load_from_yaml(config_path)


def _build_service(
    config: AppConfig, demo: bool
) -> Tuple[ReservationService, RoomRepositoryProtocol, ReservationRepositoryProtocol]:
    """
    Wire the reservation service to either the demo hotel or the JSON store.

    Returns:
        (service, rooms repository, reservations repository)
    """
    room_types = config.available_room_types()

    if demo:
        console.print("[yellow]⚠  DEMO MODE: using sample hotel data, changes are not saved[/yellow]\n")
        rooms, reservations = load_sample_hotel(room_types)
    else:
        store = JsonHotelStore(config.data_file, room_types=room_types)
        rooms, reservations = store.rooms, store.reservations

    service = ReservationService(
        rooms=rooms,
        reservations=reservations,
        cancellation_policy=config.cancellation_policy(),
    )
    return service, rooms, reservations


def _parse_period(config: AppConfig, check_in: str, check_out: Optional[str]) -> Period:
    """
    Resolve the stay from YYYY-MM-DD options.

    Without a check-out date the configured default number of nights is used.
    """
    tz = config.timezone
    check_in_date = pendulum.from_format(check_in, "YYYY-MM-DD", tz=tz)
    if check_out:
        check_out_date = pendulum.from_format(check_out, "YYYY-MM-DD", tz=tz)
    else:
        check_out_date = check_in_date.add(days=config.defaults.nights)
    return config.build_period(check_in_date.date(), check_out_date.date())


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(1)


@app.command()
def search(
    check_in: Annotated[str, typer.Option("--check-in", "-i", help="Check-in date (YYYY-MM-DD)")],
    check_out: Annotated[Optional[str], typer.Option("--check-out", "-o", help="Check-out date (YYYY-MM-DD)")] = None,
    room_type: Annotated[Optional[str], typer.Option("--type", "-t", help="Only rooms of this type")] = None,
    guests: Annotated[Optional[int], typer.Option("--guests", "-g", help="Minimum room capacity")] = None,
    max_price: Annotated[Optional[float], typer.Option("--max-price", help="Maximum total price of the stay")] = None,
    config_file: ConfigOption = None,
    demo: DemoOption = False,
):
    """
    Search rooms available for a stay, cleaning time included.

    Examples:

        roomfinder search --check-in 2026-11-02 --check-out 2026-11-05
        roomfinder search -i 2026-11-02 --type suite --demo
    """
    try:
        config = _load_config(config_file)
        period = _parse_period(config, check_in, check_out)
        wanted_type = config.resolve_room_type(room_type) if room_type else None
        service, _, _ = _build_service(config, demo)

        report = asyncio.run(
            service.check_availability(
                period,
                room_type=wanted_type,
                min_capacity=guests,
                max_price=Decimal(str(max_price)) if max_price is not None else None,
            )
        )
    except (RoomfinderError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(f"[bold cyan]Stay:[/bold cyan] {report.period} ({report.nights} night(s))\n")

    if not report.offers:
        console.print(
            "[yellow]⚠ No rooms available.[/yellow]\n"
            "Try other dates or drop some filters."
        )
        return

    table = Table(
        title=f"{report.total_available} room(s) available",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Room ID", style="dim")
    table.add_column("Number", style="bold yellow")
    table.add_column("Type")
    table.add_column("Capacity", justify="right")
    table.add_column("Nightly", justify="right")
    table.add_column("Discount", justify="right")
    table.add_column("Total", justify="right", style="bold green")

    for offer in report.offers:
        table.add_row(
            offer.room.id,
            offer.room.number,
            offer.room.room_type.name,
            str(offer.room.room_type.capacity),
            str(offer.quote.nightly_rate),
            f"{offer.quote.discount_percent}%",
            str(offer.quote.total),
        )

    console.print(table)
    console.print()


@app.command()
def book(
    room_id: Annotated[str, typer.Argument(help="ID of the room to book")],
    guest_id: Annotated[str, typer.Argument(help="ID of the guest")],
    check_in: Annotated[str, typer.Option("--check-in", "-i", help="Check-in date (YYYY-MM-DD)")],
    check_out: Annotated[Optional[str], typer.Option("--check-out", "-o", help="Check-out date (YYYY-MM-DD)")] = None,
    guests: Annotated[int, typer.Option("--guests", "-g", help="Number of guests")] = 1,
    notes: Annotated[Optional[str], typer.Option("--notes", help="Free-text notes")] = None,
    config_file: ConfigOption = None,
    demo: DemoOption = False,
):
    """
    Create a pending reservation.
    """
    try:
        config = _load_config(config_file)
        period = _parse_period(config, check_in, check_out)
        service, _, _ = _build_service(config, demo)

        reservation = asyncio.run(
            service.create_reservation(
                room_id=room_id,
                guest_id=guest_id,
                period=period,
                guests=guests,
                notes=notes,
            )
        )
    except (RoomfinderError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(Panel.fit(
        f"[bold green]✓ Reservation created[/bold green]\n\n"
        f"[bold]ID:[/bold] {reservation.id}\n"
        f"[bold]Room:[/bold] {reservation.room_id}\n"
        f"[bold]Stay:[/bold] {reservation.period}\n"
        f"[bold]Total:[/bold] {reservation.total_price}\n"
        f"[bold]Status:[/bold] {reservation.status.value}",
        title="Reservation"
    ))


@app.command()
def confirm(
    reservation_id: Annotated[str, typer.Argument(help="ID of the reservation")],
    config_file: ConfigOption = None,
    demo: DemoOption = False,
):
    """
    Confirm a pending reservation.
    """
    try:
        config = _load_config(config_file)
        service, _, _ = _build_service(config, demo)
        reservation = asyncio.run(service.confirm_reservation(reservation_id))
    except (RoomfinderError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(f"[green]✓ Reservation {reservation.id} confirmed.[/green]")


@app.command()
def cancel(
    reservation_id: Annotated[str, typer.Argument(help="ID of the reservation")],
    reason: Annotated[str, typer.Option("--reason", "-r", help="Why the reservation is cancelled")],
    cancelled_by: Annotated[str, typer.Option("--by", help="ID of the user cancelling")],
    config_file: ConfigOption = None,
    demo: DemoOption = False,
):
    """
    Cancel a reservation and show penalty and refund.
    """
    try:
        config = _load_config(config_file)
        service, _, _ = _build_service(config, demo)
        receipt = asyncio.run(
            service.cancel_reservation(reservation_id, reason=reason, cancelled_by=cancelled_by)
        )
    except (RoomfinderError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(Panel.fit(
        f"[bold green]✓ Reservation {receipt.reservation.id} cancelled[/bold green]\n\n"
        f"[bold]Penalty:[/bold] {receipt.penalty} ({receipt.penalty_percent}%)\n"
        f"[bold]Refund:[/bold] {receipt.refund}",
        title="Cancellation"
    ))


@app.command("next-free")
def next_free(
    room_id: Annotated[str, typer.Argument(help="ID of the room")],
    nights: Annotated[int, typer.Option("--nights", "-n", help="Length of the stay")] = 1,
    start: Annotated[Optional[str], typer.Option("--from", help="First check-in date to try (YYYY-MM-DD)")] = None,
    config_file: ConfigOption = None,
    demo: DemoOption = False,
):
    """
    Find the next check-in date a room is free for a number of nights.
    """
    try:
        config = _load_config(config_file)
        if start:
            first_day = pendulum.from_format(start, "YYYY-MM-DD", tz=config.timezone)
        else:
            first_day = pendulum.now(config.timezone)
        start_at = first_day.set(
            hour=config.defaults.check_in_hour,
            minute=0,
            second=0,
            microsecond=0
        )
        service, _, _ = _build_service(config, demo)
        found = asyncio.run(service.find_next_available(room_id, nights, start_at))
    except (RoomfinderError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if found is None:
        console.print(f"[yellow]⚠ Room {room_id} has no free {nights}-night stay within a year.[/yellow]")
    else:
        console.print(f"[green]✓ Room {room_id} is free from {found.format('YYYY-MM-DD HH:mm')}[/green]")


@app.command()
def rooms(
    config_file: ConfigOption = None,
    demo: DemoOption = False,
):
    """
    List all rooms.
    """
    try:
        config = _load_config(config_file)
        _, room_repository, _ = _build_service(config, demo)
        all_rooms = asyncio.run(room_repository.list_rooms())
    except (RoomfinderError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if not all_rooms:
        console.print("[yellow]No rooms defined.[/yellow]")
        return

    table = Table(title="Rooms", show_header=True, header_style="bold cyan")
    table.add_column("Room ID", style="dim")
    table.add_column("Number", style="bold yellow")
    table.add_column("Type")
    table.add_column("Floor", justify="right")
    table.add_column("Cleaning (h)", justify="right")
    table.add_column("Active")

    for room in all_rooms:
        table.add_row(
            room.id,
            room.number,
            room.room_type.name,
            str(room.floor),
            f"{room.room_type.cleaning_hours:g}",
            "yes" if room.active else "no",
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def reservations(
    room_id: Annotated[Optional[str], typer.Option("--room", help="Only reservations of this room")] = None,
    config_file: ConfigOption = None,
    demo: DemoOption = False,
):
    """
    List reservations.
    """
    try:
        config = _load_config(config_file)
        _, _, reservation_repository = _build_service(config, demo)
        if room_id:
            found = asyncio.run(reservation_repository.list_for_room(room_id))
        else:
            found = asyncio.run(reservation_repository.list_all())
    except (RoomfinderError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if not found:
        console.print("[yellow]No reservations found.[/yellow]")
        return

    table = Table(title="Reservations", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Room", style="bold yellow")
    table.add_column("Guest")
    table.add_column("Stay")
    table.add_column("Status")
    table.add_column("Total", justify="right")

    for reservation in sorted(found, key=lambda r: r.period.check_in):
        table.add_row(
            reservation.id,
            reservation.room_id,
            reservation.guest_id,
            str(reservation.period),
            reservation.status.value,
            str(reservation.total_price),
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]roomfinder[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
