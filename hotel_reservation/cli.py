"""
Интерфейс командной строки системы бронирования.

Интерактивное меню поверх сервиса приложения HotelApplicationService.
"""

from pathlib import Path
from typing import Callable, Dict, Optional

import click
from pydantic import ValidationError

from hotel_reservation import __version__
from hotel_reservation.booking.application import BookRoomRequest, HotelApplicationService
from hotel_reservation.booking.domain import BookingError
from hotel_reservation.bootstrap import bootstrap_app
from hotel_reservation.config import LOG_LEVELS, HotelSettings
from hotel_reservation.shared_kernel import (
    DATE_FORMAT,
    DomainException,
    RoomCategory,
    SnapshotError,
)

MENU = """
--- HOTEL MENU ---
1) Show all rooms
2) Search available rooms
3) Book a room
4) Cancel reservation
5) View my reservations
6) Pay for reservation
7) Save data
8) Load data
9) Exit"""

DATE_TYPE = click.DateTime(formats=[DATE_FORMAT])

BOOKING_FAILURES = {
    BookingError.NOT_FOUND: "Booking failed: room {room_id} does not exist.",
    BookingError.UNAVAILABLE: (
        "Booking failed: room {room_id} is not available for the selected dates."
    ),
    BookingError.INVALID_RANGE: "Booking failed: invalid date range.",
}


def _prompt_date(label: str):
    return click.prompt(f"{label} (yyyy-MM-dd)", type=DATE_TYPE).date()


def show_rooms(service: HotelApplicationService) -> None:
    for room in service.list_rooms():
        click.echo(f"  {room}")


def search_rooms(service: HotelApplicationService) -> None:
    choice = click.prompt(
        "Category (STANDARD/DELUXE/SUITE or ALL)",
        type=click.Choice(
            [c.value for c in RoomCategory] + ["ALL"], case_sensitive=False
        ),
        default="ALL",
        show_choices=False,
    )
    category = None if choice.upper() == "ALL" else RoomCategory(choice.upper())
    check_in = _prompt_date("From")
    check_out = _prompt_date("To")

    rooms = service.search_rooms(check_in, check_out, category)
    if not rooms:
        click.echo("No rooms available.")
    for room in rooms:
        click.echo(f"  {room}")


def book_room(service: HotelApplicationService) -> None:
    guest_name = click.prompt("Guest name")
    room_id = click.prompt("Room id", type=int)
    check_in = _prompt_date("From")
    check_out = _prompt_date("To")
    pay_now = click.confirm("Pay now?", default=False)

    request = BookRoomRequest(
        guest_name=guest_name,
        room_id=room_id,
        check_in=check_in,
        check_out=check_out,
        pay_now=pay_now,
    )
    result = service.book_room(request)
    if not result.ok:
        click.echo(BOOKING_FAILURES[result.error].format(room_id=room_id))
        return
    click.echo(f"Booked: {service.get_reservation(result.reservation.id)}")


def cancel_reservation(service: HotelApplicationService) -> None:
    reservation_id = click.prompt("Reservation id to cancel").strip()
    if service.cancel_reservation(reservation_id):
        click.echo("Cancelled.")
    else:
        click.echo("Cancel failed (id not found).")


def view_reservations(service: HotelApplicationService) -> None:
    name = click.prompt("Guest name to search reservations").strip()
    reservations = service.find_reservations_by_guest(name)
    if not reservations:
        click.echo(f"No reservations found for {name}")
    for reservation in reservations:
        click.echo(f"  {reservation}")


def pay_reservation(service: HotelApplicationService) -> None:
    reservation_id = click.prompt("Reservation id to pay").strip()
    if service.pay_reservation(reservation_id):
        click.echo("Payment successful (simulated).")
    else:
        click.echo("Payment failed (id not found).")


def save_data(service: HotelApplicationService) -> None:
    location = service.save()
    click.echo(f"Saved to {location}")


def load_data(service: HotelApplicationService) -> None:
    location = service.reload()
    click.echo(f"Loaded from {location}")


ACTIONS: Dict[str, Callable[[HotelApplicationService], None]] = {
    "1": show_rooms,
    "2": search_rooms,
    "3": book_room,
    "4": cancel_reservation,
    "5": view_reservations,
    "6": pay_reservation,
    "7": save_data,
    "8": load_data,
}


def run_menu(service: HotelApplicationService) -> None:
    """Показывает меню, пока пользователь не выберет выход."""
    while True:
        click.echo(MENU)
        choice = click.prompt("Choose", default="", show_default=False).strip()
        if choice == "9":
            break

        action = ACTIONS.get(choice)
        if action is None:
            click.echo("Unknown option.")
            continue

        try:
            action(service)
        except ValidationError as e:
            click.echo(f"Error: {e.errors()[0]['msg']}")
        except (DomainException, SnapshotError, OSError) as e:
            click.echo(f"Error: {e}")

    click.echo("Goodbye!")


@click.command()
@click.version_option(version=__version__)
@click.option(
    "--data-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Snapshot file (default: $HOTEL_DATA_FILE or hotel_data.json).",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log level for stderr output (default: $HOTEL_LOG_LEVEL or WARNING).",
)
def main(data_file: Optional[Path], log_level: Optional[str]) -> None:
    """Hotel reservation system.

    Search rooms by category and availability, book and cancel reservations,
    pay for them (simulated) and save the hotel state to a local file.
    """
    overrides = {
        key: value
        for key, value in (("data_file", data_file), ("log_level", log_level))
        if value is not None
    }

    try:
        settings = HotelSettings.from_env()
        if overrides:
            settings = HotelSettings(**{**settings.model_dump(), **overrides})
        service = bootstrap_app(settings)
    except ValidationError as e:
        raise click.ClickException(e.errors()[0]["msg"])
    except (SnapshotError, OSError) as e:
        raise click.ClickException(str(e))

    if settings.data_file.exists():
        click.echo(f"Loaded data from {settings.data_file}")
    else:
        click.echo("Starting with seeded hotel data.")

    run_menu(service)


if __name__ == "__main__":
    main()
