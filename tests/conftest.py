"""
Общие фикстуры для тестов системы бронирования.
"""

from datetime import date

import pytest

from hotel_reservation.booking.domain import BookingEngine, HotelContext
from hotel_reservation.booking.infrastructure import seed_catalog


@pytest.fixture
def context() -> HotelContext:
    """Состояние отеля с начальным каталогом и пустым журналом."""
    return HotelContext.from_rooms(seed_catalog())


@pytest.fixture
def engine() -> BookingEngine:
    return BookingEngine()


@pytest.fixture
def jan_1() -> date:
    return date(2024, 1, 1)


@pytest.fixture
def jan_3() -> date:
    return date(2024, 1, 3)
