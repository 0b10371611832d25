"""
Доменная модель контекста бронирования.

Содержит сущности номера и бронирования, контекст с каталогом номеров и
журналом бронирований, а также доменный сервис BookingEngine.
"""

from datetime import date
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from ..shared_kernel import (
    DateRange,
    DomainEvent,
    InvalidDateRangeException,
    Money,
    RoomCategory,
    dates_overlap,
    generate_reservation_id,
)


class Room(BaseModel):
    """Номер в отеле. Не изменяется после создания."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., gt=0)
    category: RoomCategory
    price_per_night: Money

    @field_validator("price_per_night")
    @classmethod
    def price_is_positive(cls, v: Money) -> Money:
        if v.amount <= 0:
            raise ValueError("Цена за ночь должна быть положительной")
        return v


class Reservation(BaseModel):
    """
    Бронирование номера.

    После создания изменяется только флаг оплаты; остальные поля заморожены.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(..., min_length=1, frozen=True)
    guest_name: str = Field(..., frozen=True)
    room_id: int = Field(..., gt=0, frozen=True)
    period: DateRange = Field(..., frozen=True)
    total_amount: Money = Field(..., frozen=True)
    paid: bool = False

    @property
    def check_in(self) -> date:
        return self.period.check_in

    @property
    def check_out(self) -> date:
        return self.period.check_out

    @property
    def nights(self) -> int:
        return self.period.nights

    def overlaps(self, check_in: date, check_out: date) -> bool:
        return dates_overlap(check_in, check_out, self.check_in, self.check_out)


class ReservationBooked(DomainEvent):
    """Событие создания бронирования."""

    event_type: str = "reservation_booked"
    reservation_id: str
    room_id: int
    guest_name: str
    period: DateRange
    total_amount: Money
    paid: bool


class ReservationCancelled(DomainEvent):
    """Событие отмены бронирования."""

    event_type: str = "reservation_cancelled"
    reservation_id: str
    room_id: int


class ReservationPaid(DomainEvent):
    """Событие оплаты бронирования."""

    event_type: str = "reservation_paid"
    reservation_id: str
    total_amount: Money


class HotelContext(BaseModel):
    """
    Состояние отеля: каталог номеров и журнал бронирований.

    Передается явно в каждую операцию BookingEngine; временем жизни
    управляет вызывающий код (создается при запуске из снимка или
    начальных данных, сохраняется по запросу).
    """

    rooms: Dict[int, Room] = Field(default_factory=dict)
    reservations: Dict[str, Reservation] = Field(default_factory=dict)
    reservation_counter: int = Field(0, ge=0)
    _domain_events: List[DomainEvent] = PrivateAttr(default_factory=list)

    @classmethod
    def from_rooms(cls, rooms: List[Room]) -> "HotelContext":
        return cls(rooms={room.id: room for room in rooms})

    def list_rooms(self) -> List[Room]:
        """Номера в порядке возрастания идентификатора."""
        return sorted(self.rooms.values(), key=lambda room: room.id)

    def reservations_for_room(self, room_id: int) -> List[Reservation]:
        return [r for r in self.reservations.values() if r.room_id == room_id]

    def record_event(self, event: DomainEvent) -> None:
        self._domain_events.append(event)

    def pull_domain_events(self) -> List[DomainEvent]:
        """Извлекает накопленные события и очищает список."""
        events = list(self._domain_events)
        self._domain_events.clear()
        return events


class BookingError(str, Enum):
    """Причины неуспешного бронирования."""

    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"
    INVALID_RANGE = "invalid_range"


class BookingResult(BaseModel):
    """Результат операции бронирования: либо бронирование, либо причина отказа."""

    reservation: Optional[Reservation] = None
    error: Optional[BookingError] = None

    @property
    def ok(self) -> bool:
        return self.reservation is not None

    @classmethod
    def success(cls, reservation: Reservation) -> "BookingResult":
        return cls(reservation=reservation)

    @classmethod
    def failure(cls, error: BookingError) -> "BookingResult":
        return cls(error=error)


class BookingEngine:
    """Доменный сервис для поиска, бронирования, отмены и оплаты номеров."""

    def search(
        self,
        context: HotelContext,
        check_in: date,
        check_out: date,
        category: Optional[RoomCategory] = None,
    ) -> List[Room]:
        """Возвращает свободные на период номера, по возрастанию идентификатора."""
        return [
            room
            for room in context.list_rooms()
            if (category is None or room.category == category)
            and self.is_available(context, room.id, check_in, check_out)
        ]

    def is_available(
        self, context: HotelContext, room_id: int, check_in: date, check_out: date
    ) -> bool:
        """Свободен ли номер на период. Несуществующий номер считается занятым."""
        if room_id not in context.rooms:
            return False
        return not any(
            reservation.overlaps(check_in, check_out)
            for reservation in context.reservations_for_room(room_id)
        )

    def book(
        self,
        context: HotelContext,
        guest_name: str,
        room_id: int,
        check_in: date,
        check_out: date,
        pay_now: bool = False,
    ) -> BookingResult:
        """Бронирует номер. Неположительная длительность приводится к одной ночи."""
        room = context.rooms.get(room_id)
        if room is None:
            return BookingResult.failure(BookingError.NOT_FOUND)

        try:
            period = DateRange.at_least_one_night(check_in, check_out)
        except InvalidDateRangeException:
            return BookingResult.failure(BookingError.INVALID_RANGE)

        if not self.is_available(context, room_id, period.check_in, period.check_out):
            return BookingResult.failure(BookingError.UNAVAILABLE)

        reservation = Reservation(
            id=self._next_reservation_id(context),
            guest_name=guest_name,
            room_id=room_id,
            period=period,
            total_amount=room.price_per_night * max(1, period.nights),
            paid=pay_now,
        )
        context.reservations[reservation.id] = reservation
        context.record_event(
            ReservationBooked(
                reservation_id=reservation.id,
                room_id=room_id,
                guest_name=guest_name,
                period=period,
                total_amount=reservation.total_amount,
                paid=pay_now,
            )
        )
        return BookingResult.success(reservation)

    def cancel(self, context: HotelContext, reservation_id: str) -> bool:
        """Отменяет бронирование. Возвращает, существовало ли оно."""
        reservation = context.reservations.pop(reservation_id, None)
        if reservation is None:
            return False
        context.record_event(
            ReservationCancelled(
                reservation_id=reservation.id, room_id=reservation.room_id
            )
        )
        return True

    def pay(self, context: HotelContext, reservation_id: str) -> bool:
        """Отмечает бронирование оплаченным. Повторная оплата ничего не меняет."""
        reservation = context.reservations.get(reservation_id)
        if reservation is None:
            return False
        if reservation.paid:
            return True

        # Оплата симулируется
        reservation.paid = True
        context.record_event(
            ReservationPaid(
                reservation_id=reservation.id, total_amount=reservation.total_amount
            )
        )
        return True

    def _next_reservation_id(self, context: HotelContext) -> str:
        while True:
            context.reservation_counter += 1
            reservation_id = generate_reservation_id(context.reservation_counter)
            if reservation_id not in context.reservations:
                return reservation_id
