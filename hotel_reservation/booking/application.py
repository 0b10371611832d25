"""
Прикладной слой контекста бронирования.

Содержит сервис приложения, который координирует взаимодействие между
интерфейсом командной строки, доменной моделью и инфраструктурой.
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..shared_kernel import RoomCategory, SnapshotNotFoundError
from . import interfaces as ports
from .domain import BookingEngine, BookingResult, HotelContext, Reservation, Room

# DTO (Data Transfer Objects) для входящих данных


class BookRoomRequest(BaseModel):
    """Запрос на бронирование номера."""

    guest_name: str
    room_id: int = Field(..., gt=0)
    check_in: date
    check_out: date
    pay_now: bool = False

    @field_validator("guest_name")
    @classmethod
    def guest_name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Имя гостя не может быть пустым")
        return v


# DTO для исходящих данных


class RoomDTO(BaseModel):
    """DTO для представления номера."""

    id: int
    category: RoomCategory
    price_per_night: str

    @classmethod
    def from_domain(cls, room: Room) -> "RoomDTO":
        """Создает DTO из доменной модели."""
        return cls(
            id=room.id,
            category=room.category,
            price_per_night=str(room.price_per_night),
        )

    def __str__(self) -> str:
        return f"Room {self.id} - {self.category.value} - {self.price_per_night} per night"


class ReservationDTO(BaseModel):
    """DTO для представления бронирования."""

    id: str
    guest_name: str
    room_id: int
    check_in: date
    check_out: date
    nights: int
    total_amount: str
    paid: bool

    @classmethod
    def from_domain(cls, reservation: Reservation) -> "ReservationDTO":
        """Создает DTO из доменной модели."""
        return cls(
            id=reservation.id,
            guest_name=reservation.guest_name,
            room_id=reservation.room_id,
            check_in=reservation.check_in,
            check_out=reservation.check_out,
            nights=reservation.nights,
            total_amount=str(reservation.total_amount),
            paid=reservation.paid,
        )

    def __str__(self) -> str:
        return (
            f"Reservation {self.id} | Guest: {self.guest_name} | Room: {self.room_id} | "
            f"{self.check_in.isoformat()} -> {self.check_out.isoformat()} | "
            f"Amount: {self.total_amount} | Paid: {'YES' if self.paid else 'NO'}"
        )


# Сервис приложения


class HotelApplicationService:
    """Сервис приложения для работы с номерами и бронированиями."""

    def __init__(
        self,
        context: HotelContext,
        store: ports.ISnapshotStore,
        logger: ports.ILogger,
        event_bus: ports.IEventBus,
        engine: Optional[BookingEngine] = None,
    ):
        """Инициализирует сервис."""
        self._context = context
        self._store = store
        self._logger = logger
        self._event_bus = event_bus
        self._engine = engine or BookingEngine()

    @property
    def context(self) -> HotelContext:
        return self._context

    def list_rooms(self) -> List[RoomDTO]:
        """Возвращает все номера каталога."""
        return [RoomDTO.from_domain(room) for room in self._context.list_rooms()]

    def search_rooms(
        self,
        check_in: date,
        check_out: date,
        category: Optional[RoomCategory] = None,
    ) -> List[RoomDTO]:
        """Возвращает номера, свободные на указанный период."""
        rooms = self._engine.search(self._context, check_in, check_out, category)
        self._logger.debug(
            "Room search",
            check_in=check_in,
            check_out=check_out,
            category=category,
            found=len(rooms),
        )
        return [RoomDTO.from_domain(room) for room in rooms]

    def is_room_available(self, room_id: int, check_in: date, check_out: date) -> bool:
        return self._engine.is_available(self._context, room_id, check_in, check_out)

    def book_room(self, request: BookRoomRequest) -> BookingResult:
        """Бронирует номер."""
        result = self._engine.book(
            self._context,
            guest_name=request.guest_name,
            room_id=request.room_id,
            check_in=request.check_in,
            check_out=request.check_out,
            pay_now=request.pay_now,
        )
        if result.ok:
            self._logger.info(
                "Reservation booked",
                reservation_id=result.reservation.id,
                room_id=request.room_id,
            )
        else:
            self._logger.warning(
                "Booking rejected",
                room_id=request.room_id,
                reason=result.error.value,
            )
        self._publish_events()
        return result

    def cancel_reservation(self, reservation_id: str) -> bool:
        """Отменяет бронирование."""
        cancelled = self._engine.cancel(self._context, reservation_id)
        if not cancelled:
            self._logger.warning(
                "Cancel failed: reservation not found", reservation_id=reservation_id
            )
        self._publish_events()
        return cancelled

    def pay_reservation(self, reservation_id: str) -> bool:
        """Оплачивает бронирование (оплата симулируется)."""
        paid = self._engine.pay(self._context, reservation_id)
        if not paid:
            self._logger.warning(
                "Payment failed: reservation not found", reservation_id=reservation_id
            )
        self._publish_events()
        return paid

    def get_reservation(self, reservation_id: str) -> Optional[ReservationDTO]:
        """Возвращает информацию о бронировании."""
        reservation = self._context.reservations.get(reservation_id)
        if reservation is None:
            return None
        return ReservationDTO.from_domain(reservation)

    def find_reservations_by_guest(self, guest_name: str) -> List[ReservationDTO]:
        """Находит бронирования гостя без учета регистра имени."""
        needle = guest_name.strip().casefold()
        return [
            ReservationDTO.from_domain(reservation)
            for reservation in self._context.reservations.values()
            if reservation.guest_name.casefold() == needle
        ]

    def save(self) -> str:
        """Сохраняет снимок состояния. Возвращает место хранения."""
        self._store.save(self._context)
        self._logger.info(
            "Snapshot saved",
            location=self._store.location,
            rooms=len(self._context.rooms),
            reservations=len(self._context.reservations),
        )
        return self._store.location

    def reload(self) -> str:
        """Заменяет текущее состояние сохраненным снимком."""
        context = self._store.load()
        if context is None:
            raise SnapshotNotFoundError(self._store.location)
        self._context = context
        self._logger.info(
            "Snapshot loaded",
            location=self._store.location,
            rooms=len(context.rooms),
            reservations=len(context.reservations),
        )
        return self._store.location

    def _publish_events(self) -> None:
        for event in self._context.pull_domain_events():
            self._event_bus.publish(event)
