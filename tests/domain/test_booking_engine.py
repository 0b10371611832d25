"""
Тесты для доменной модели контекста бронирования.

Проверяют BookingEngine: поиск, проверку доступности, бронирование,
отмену и оплату, а также неизменяемость номеров и бронирований.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from hotel_reservation.booking.domain import (
    BookingEngine,
    BookingError,
    HotelContext,
    ReservationBooked,
    ReservationCancelled,
    ReservationPaid,
    Room,
)
from hotel_reservation.shared_kernel import Money, RoomCategory


def d(day: int) -> date:
    return date(2024, 1, day)


class TestBookingScenario:
    """Сценарий: номер 101 (Standard, 3000 за ночь), гость Alice."""

    def test_book_two_nights(self, context: HotelContext, engine: BookingEngine):
        result = engine.book(context, "Alice", 101, d(1), d(3), pay_now=False)

        assert result.ok
        assert result.error is None
        reservation = result.reservation
        assert reservation.nights == 2
        assert reservation.total_amount.amount == Decimal("6000")
        assert reservation.paid is False
        assert reservation.id in context.reservations

    def test_overlap_and_boundary(self, context: HotelContext, engine: BookingEngine):
        engine.book(context, "Alice", 101, d(1), d(3))

        assert engine.is_available(context, 101, d(2), d(4)) is False
        assert engine.is_available(context, 101, d(3), d(5)) is True

    def test_unknown_room(self, context: HotelContext, engine: BookingEngine):
        result = engine.book(context, "Alice", 999, d(1), d(3))

        assert not result.ok
        assert result.error == BookingError.NOT_FOUND
        assert context.reservations == {}
        assert context.pull_domain_events() == []

    def test_cancel_unknown_id(self, context: HotelContext, engine: BookingEngine):
        engine.book(context, "Alice", 101, d(1), d(3))
        before = dict(context.reservations)

        assert engine.cancel(context, "R-missing") is False
        assert context.reservations == before


class TestAvailability:
    def test_unknown_room_is_not_available(self, context, engine):
        assert engine.is_available(context, 999, d(1), d(3)) is False

    def test_sequential_disjoint_bookings(self, context, engine):
        ranges = [(d(1), d(3)), (d(3), d(6)), (d(10), d(12))]
        for check_in, check_out in ranges:
            assert engine.is_available(context, 102, check_in, check_out)
            assert engine.book(context, "Bob", 102, check_in, check_out).ok
            assert not engine.is_available(context, 102, check_in, check_out)

        assert not engine.is_available(context, 102, d(2), d(4))
        assert not engine.is_available(context, 102, d(11), d(20))
        assert engine.is_available(context, 102, d(6), d(10))

    def test_overlapping_booking_is_rejected(self, context, engine):
        engine.book(context, "Alice", 101, d(1), d(5))

        result = engine.book(context, "Bob", 101, d(4), d(6))

        assert result.error == BookingError.UNAVAILABLE
        assert len(context.reservations) == 1

    def test_other_rooms_are_unaffected(self, context, engine):
        engine.book(context, "Alice", 101, d(1), d(5))
        assert engine.is_available(context, 102, d(1), d(5))

    def test_cancel_restores_availability(self, context, engine):
        before = engine.is_available(context, 103, d(1), d(3))
        result = engine.book(context, "Alice", 103, d(1), d(3))
        assert not engine.is_available(context, 103, d(1), d(3))

        assert engine.cancel(context, result.reservation.id) is True
        assert engine.is_available(context, 103, d(1), d(3)) == before
        assert context.rooms[103].id == 103


class TestSearch:
    def test_all_categories_in_ascending_order(self, context, engine):
        rooms = engine.search(context, d(1), d(3))
        assert [room.id for room in rooms] == list(range(101, 110))

    def test_category_filter(self, context, engine):
        rooms = engine.search(context, d(1), d(3), RoomCategory.SUITE)
        assert [room.id for room in rooms] == [108, 109]

    def test_booked_room_is_excluded(self, context, engine):
        engine.book(context, "Alice", 101, d(1), d(3))

        standard = engine.search(context, d(2), d(4), RoomCategory.STANDARD)
        assert [room.id for room in standard] == [102, 103, 104]

        after_checkout = engine.search(context, d(3), d(4), RoomCategory.STANDARD)
        assert [room.id for room in after_checkout] == [101, 102, 103, 104]

    def test_order_does_not_depend_on_insertion(self, engine):
        price = Money(amount=Decimal("100"))
        context = HotelContext.from_rooms(
            [
                Room(id=7, category=RoomCategory.DELUXE, price_per_night=price),
                Room(id=3, category=RoomCategory.DELUXE, price_per_night=price),
                Room(id=5, category=RoomCategory.DELUXE, price_per_night=price),
            ]
        )
        assert [room.id for room in engine.search(context, d(1), d(2))] == [3, 5, 7]


class TestBookingAmount:
    @pytest.mark.parametrize(
        "room_id, check_in, check_out, nights",
        [
            (101, d(1), d(2), 1),
            (105, d(1), d(8), 7),
            (109, d(10), d(10), 1),
            (104, d(10), d(5), 1),
        ],
    )
    def test_amount_is_nights_times_price(
        self, context, engine, room_id, check_in, check_out, nights
    ):
        price = context.rooms[room_id].price_per_night

        result = engine.book(context, "Guest", room_id, check_in, check_out)

        assert result.ok
        assert result.reservation.nights == nights
        expected = price * max(1, (check_out - check_in).days)
        assert result.reservation.total_amount == expected

    def test_non_positive_stay_is_coerced_to_one_night(self, context, engine):
        result = engine.book(context, "Alice", 101, d(5), d(5))

        assert result.reservation.check_in == d(5)
        assert result.reservation.check_out == d(6)
        assert not engine.is_available(context, 101, d(5), d(6))
        assert engine.is_available(context, 101, d(6), d(7))

    def test_range_at_calendar_end_is_invalid(self, context, engine):
        result = engine.book(context, "Alice", 101, date.max, date.max)

        assert result.error == BookingError.INVALID_RANGE
        assert context.reservations == {}

    def test_pay_now(self, context, engine):
        result = engine.book(context, "Alice", 101, d(1), d(3), pay_now=True)
        assert result.reservation.paid is True


class TestPayment:
    def test_pay_is_idempotent(self, context, engine):
        result = engine.book(context, "Alice", 101, d(1), d(3))
        reservation_id = result.reservation.id
        amount = context.reservations[reservation_id].total_amount

        assert engine.pay(context, reservation_id) is True
        assert context.reservations[reservation_id].paid is True
        assert engine.pay(context, reservation_id) is True
        assert context.reservations[reservation_id].paid is True
        assert context.reservations[reservation_id].total_amount == amount

    def test_pay_unknown_id(self, context, engine):
        assert engine.pay(context, "R-missing") is False


class TestImmutability:
    def test_reservation_amount_is_frozen(self, context, engine):
        reservation = engine.book(context, "Alice", 101, d(1), d(3)).reservation

        with pytest.raises(ValueError):
            reservation.total_amount = Money(amount=Decimal("1"))
        with pytest.raises(ValueError):
            reservation.room_id = 102

    def test_room_is_frozen(self, context):
        with pytest.raises(ValueError):
            context.rooms[101].price_per_night = Money(amount=Decimal("1"))

    def test_room_id_must_be_positive(self):
        with pytest.raises(ValueError):
            Room(id=0, category=RoomCategory.STANDARD, price_per_night=Money(amount=1))


class TestReservationIds:
    def test_ids_are_unique_and_sequential(self, context, engine):
        ids = []
        for i in range(5):
            check_in = d(1) + timedelta(days=i)
            result = engine.book(context, "Guest", 101, check_in, check_in + timedelta(days=1))
            ids.append(result.reservation.id)

        assert len(set(ids)) == 5
        assert [reservation_id[:7] for reservation_id in ids] == [
            "R000001",
            "R000002",
            "R000003",
            "R000004",
            "R000005",
        ]
        assert context.reservation_counter == 5

    def test_counter_continues_from_context(self, context, engine):
        context.reservation_counter = 41
        result = engine.book(context, "Guest", 101, d(1), d(2))
        assert result.reservation.id.startswith("R000042-")


class TestDomainEvents:
    def test_book_cancel_pay_record_events(self, context, engine):
        reservation_id = engine.book(context, "Alice", 101, d(1), d(3)).reservation.id
        engine.pay(context, reservation_id)
        engine.pay(context, reservation_id)
        engine.cancel(context, reservation_id)

        events = context.pull_domain_events()

        assert [type(e) for e in events] == [
            ReservationBooked,
            ReservationPaid,
            ReservationCancelled,
        ]
        assert events[0].reservation_id == reservation_id
        assert events[0].total_amount.amount == Decimal("6000")
        assert events[2].room_id == 101
        assert context.pull_domain_events() == []

    def test_failed_operations_record_nothing(self, context, engine):
        engine.book(context, "Alice", 999, d(1), d(3))
        engine.cancel(context, "R-missing")
        engine.pay(context, "R-missing")

        assert context.pull_domain_events() == []


def test_room_price_must_be_positive():
    with pytest.raises(ValueError, match="Цена"):
        Room(id=101, category=RoomCategory.STANDARD, price_per_night=Money(amount=0))
