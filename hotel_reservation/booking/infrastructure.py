"""
Инфраструктурный слой контекста бронирования.

Содержит реализации портов: хранилище снимков в JSON-файле, начальный
каталог номеров, логгер и шину событий в памяти.
"""

import json
import logging
import os
import sys
import tempfile
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Callable, Dict, List, Optional, Type, Union

from pydantic import BaseModel, Field, ValidationError

from ..shared_kernel import (
    DateRange,
    DomainEvent,
    Money,
    RoomCategory,
    SnapshotFormatError,
)
from . import interfaces as ports
from .domain import HotelContext, Reservation, Room

SNAPSHOT_FORMAT_VERSION = 1

LOGGER_NAME = "hotel_reservation"


# Записи формата снимка. Не зависят от внутреннего представления сущностей.


class RoomRecord(BaseModel):
    """Запись о номере в снимке."""

    id: int = Field(..., gt=0)
    category: RoomCategory
    price_per_night: Decimal = Field(..., gt=0)
    currency: str = "RUB"

    @classmethod
    def from_domain(cls, room: Room) -> "RoomRecord":
        return cls(
            id=room.id,
            category=room.category,
            price_per_night=room.price_per_night.amount,
            currency=room.price_per_night.currency,
        )

    def to_domain(self) -> Room:
        return Room(
            id=self.id,
            category=self.category,
            price_per_night=Money(amount=self.price_per_night, currency=self.currency),
        )


class ReservationRecord(BaseModel):
    """Запись о бронировании в снимке."""

    id: str
    guest_name: str
    room_id: int
    check_in: date
    check_out: date
    total_amount: Decimal = Field(..., ge=0)
    currency: str = "RUB"
    paid: bool = False

    @classmethod
    def from_domain(cls, reservation: Reservation) -> "ReservationRecord":
        return cls(
            id=reservation.id,
            guest_name=reservation.guest_name,
            room_id=reservation.room_id,
            check_in=reservation.check_in,
            check_out=reservation.check_out,
            total_amount=reservation.total_amount.amount,
            currency=reservation.total_amount.currency,
            paid=reservation.paid,
        )

    def to_domain(self) -> Reservation:
        return Reservation(
            id=self.id,
            guest_name=self.guest_name,
            room_id=self.room_id,
            period=DateRange(check_in=self.check_in, check_out=self.check_out),
            total_amount=Money(amount=self.total_amount, currency=self.currency),
            paid=self.paid,
        )


class SnapshotDocument(BaseModel):
    """Версионированный документ снимка."""

    format_version: int
    reservation_counter: int = Field(0, ge=0)
    rooms: List[RoomRecord] = Field(default_factory=list)
    reservations: List[ReservationRecord] = Field(default_factory=list)

    @classmethod
    def from_context(cls, context: HotelContext) -> "SnapshotDocument":
        return cls(
            format_version=SNAPSHOT_FORMAT_VERSION,
            reservation_counter=context.reservation_counter,
            rooms=[RoomRecord.from_domain(room) for room in context.list_rooms()],
            reservations=[
                ReservationRecord.from_domain(reservation)
                for reservation in context.reservations.values()
            ],
        )

    def to_context(self) -> HotelContext:
        """
        Восстанавливает состояние отеля, проверяя инварианты каталога и журнала.

        Raises:
            SnapshotFormatError: повторный номер или бронирование, ссылка на
                несуществующий номер, пересечение бронирований одного номера
        """
        rooms: Dict[int, Room] = {}
        for room_record in self.rooms:
            if room_record.id in rooms:
                raise SnapshotFormatError(f"Повторный номер {room_record.id}")
            rooms[room_record.id] = room_record.to_domain()

        reservations: Dict[str, Reservation] = {}
        for record in self.reservations:
            if record.room_id not in rooms:
                raise SnapshotFormatError(
                    f"Бронирование {record.id} ссылается на несуществующий "
                    f"номер {record.room_id}"
                )
            if record.id in reservations:
                raise SnapshotFormatError(f"Повторный идентификатор {record.id}")
            reservation = record.to_domain()
            for accepted in reservations.values():
                if accepted.room_id == reservation.room_id and accepted.period.overlaps(
                    reservation.period
                ):
                    raise SnapshotFormatError(
                        f"Бронирования {accepted.id} и {reservation.id} "
                        f"пересекаются для номера {reservation.room_id}"
                    )
            reservations[reservation.id] = reservation
        return HotelContext(
            rooms=rooms,
            reservations=reservations,
            reservation_counter=self.reservation_counter,
        )


class JsonSnapshotStore(ports.ISnapshotStore):
    """Хранилище снимков состояния отеля в JSON-файле."""

    def __init__(self, file_path: Union[str, Path]):
        """
        Инициализирует хранилище.

        Args:
            file_path: Путь к JSON-файлу со снимком
        """
        self._file_path = Path(file_path)

    @property
    def location(self) -> str:
        return str(self._file_path)

    def load(self) -> Optional[HotelContext]:
        """Загружает снимок из JSON-файла."""
        if not self._file_path.exists():
            return None

        with open(self._file_path, "rb") as f:
            raw_data = f.read()

        try:
            payload = json.loads(raw_data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise SnapshotFormatError(f"Некорректный JSON в {self.location}: {e}")

        version = payload.get("format_version") if isinstance(payload, dict) else None
        if version != SNAPSHOT_FORMAT_VERSION:
            raise SnapshotFormatError(
                f"Неподдерживаемая версия формата снимка: {version!r}"
            )

        try:
            document = SnapshotDocument.model_validate(payload)
            return document.to_context()
        except ValidationError as e:
            raise SnapshotFormatError(f"Некорректный снимок {self.location}: {e}")

    def save(self, context: HotelContext) -> None:
        """Сохраняет снимок в JSON-файл, атомарно заменяя предыдущий."""
        # Создаем директорию, если она не существует
        self._file_path.parent.mkdir(parents=True, exist_ok=True)

        data = SnapshotDocument.from_context(context).model_dump(mode="json")

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._file_path.name}.", dir=self._file_path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self._file_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


def seed_catalog(currency: str = "RUB") -> List[Room]:
    """
    Начальный каталог: 4 стандартных, 3 делюкс и 2 люкса.

    Идентификаторы идут подряд начиная с 101, цены растут внутри категории.
    """
    rooms: List[Room] = []
    room_id = 101
    for category, count, base, step in (
        (RoomCategory.STANDARD, 4, 3000, 100),
        (RoomCategory.DELUXE, 3, 5000, 200),
        (RoomCategory.SUITE, 2, 9000, 500),
    ):
        for i in range(count):
            rooms.append(
                Room(
                    id=room_id,
                    category=category,
                    price_per_night=Money(
                        amount=Decimal(base + i * step), currency=currency
                    ),
                )
            )
            room_id += 1
    return rooms


def configure_logging(level: Union[str, int] = logging.WARNING) -> None:
    """Настраивает вывод логов приложения в stderr."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
    logger.setLevel(level.upper() if isinstance(level, str) else level)


class ConsoleLogger(ports.ILogger):
    """Логгер, выводящий сообщения с контекстом в JSON через модуль logging."""

    def __init__(self, name: str = LOGGER_NAME):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, message: str, context: Dict[str, object]) -> None:
        if context:
            message = f"{message} | {json.dumps(context, default=str, ensure_ascii=False)}"
        self._logger.log(level, message)

    def info(self, message: str, **kwargs) -> None:
        self._log(logging.INFO, message, kwargs)

    def error(self, message: str, **kwargs) -> None:
        self._log(logging.ERROR, message, kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._log(logging.WARNING, message, kwargs)

    def debug(self, message: str, **kwargs) -> None:
        self._log(logging.DEBUG, message, kwargs)


class InMemoryEventBus(ports.IEventBus):
    """Реализация шины событий в памяти."""

    def __init__(self, logger: Optional[ports.ILogger] = None):
        self._subscribers: Dict[Type[DomainEvent], List[Callable]] = {}
        self._logger = logger or ConsoleLogger()

    def publish(self, event: DomainEvent) -> None:
        """Публикует событие."""
        event_type = type(event)
        handlers = self._subscribers.get(event_type, [])
        if not handlers:
            self._logger.debug(f"No subscribers for event type {event_type.__name__}")
            return

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                self._logger.error(
                    f"Error in event handler for {event_type.__name__}",
                    error=str(e),
                    event=event.model_dump(mode="json"),
                )

    def subscribe(self, event_type: Type[DomainEvent], handler: Callable) -> None:
        """Подписывает обработчик на события указанного типа."""
        self._subscribers.setdefault(event_type, []).append(handler)
