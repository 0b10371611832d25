"""
Основные доменные типы и утилиты общего ядра.
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DATE_FORMAT = "%Y-%m-%d"


def generate_reservation_id(sequence: int) -> str:
    """Генерирует идентификатор бронирования: счетчик плюс случайный суффикс."""
    return f"R{sequence:06d}-{uuid4().hex[:8].upper()}"


def dates_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """Пересекаются ли полуоткрытые интервалы [a_start, a_end) и [b_start, b_end)."""
    return a_start < b_end and b_start < a_end


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


class Money(BaseModel):
    """Денежная сумма с валютой."""

    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(..., ge=0, description="Сумма денег")
    currency: str = Field(
        default="RUB", min_length=3, max_length=3, description="Код валюты (ISO 4217)"
    )

    @field_validator("currency")
    @classmethod
    def currency_is_upper(cls, v: str) -> str:
        if not v.isalpha() or not v.isupper():
            raise ValueError("Код валюты должен состоять из 3 заглавных букв")
        return v

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"

    def __mul__(self, multiplier: int) -> "Money":
        if isinstance(multiplier, bool) or not isinstance(multiplier, (int, Decimal)):
            return NotImplemented
        if multiplier < 0:
            raise ValueError("Множитель не может быть отрицательным")
        return Money(amount=self.amount * multiplier, currency=self.currency)


class DateRange(BaseModel):
    """
    Период проживания.

    Интервал полуоткрытый: [check_in, check_out). День выезда одного гостя
    может быть днем заезда другого.
    """

    model_config = ConfigDict(frozen=True)

    check_in: date
    check_out: date

    @model_validator(mode="after")
    def check_out_after_check_in(self) -> "DateRange":
        if self.check_out <= self.check_in:
            raise ValueError("Дата выезда должна быть позже даты заезда")
        return self

    @classmethod
    def at_least_one_night(cls, check_in: date, check_out: date) -> "DateRange":
        """
        Создает период, приводя неположительную длительность к одной ночи.

        Raises:
            InvalidDateRangeException: если период нельзя построить
                (например, дата заезда равна date.max)
        """
        if check_out <= check_in:
            try:
                check_out = check_in + timedelta(days=1)
            except OverflowError:
                raise InvalidDateRangeException(
                    f"Невозможно построить период начиная с {check_in}"
                )
        return cls(check_in=check_in, check_out=check_out)

    @property
    def nights(self) -> int:
        """Количество ночей в бронировании."""
        return (self.check_out - self.check_in).days

    def overlaps(self, other: "DateRange") -> bool:
        return dates_overlap(
            self.check_in, self.check_out, other.check_in, other.check_out
        )

    def __str__(self) -> str:
        return f"{format_date(self.check_in)} -> {format_date(self.check_out)}"


class DomainEvent(BaseModel):
    """Базовый класс для всех доменных событий."""

    model_config = ConfigDict(frozen=True)

    event_id: UUID = Field(default_factory=uuid4)
    occurred_on: datetime = Field(default_factory=lambda: now())
    event_type: str


# Общие перечисления
class RoomCategory(str, Enum):
    """Категории номеров в отеле."""

    STANDARD = "STANDARD"
    DELUXE = "DELUXE"
    SUITE = "SUITE"


# Общие исключения
class DomainException(Exception):
    """Базовое исключение для доменных ошибок."""

    pass


class BusinessRuleValidationException(DomainException):
    """Исключение при нарушении бизнес-правил."""

    pass


class InvalidDateRangeException(BusinessRuleValidationException):
    """Период проживания некорректен."""

    pass


class SnapshotError(Exception):
    """Базовое исключение для ошибок хранилища снимков."""

    pass


class SnapshotNotFoundError(SnapshotError):
    """Снимок состояния не найден."""

    def __init__(self, location: str):
        super().__init__(f"Снимок не найден: {location}")
        self.location = location


class SnapshotFormatError(SnapshotError):
    """Снимок поврежден или имеет неизвестную версию формата."""

    pass


# Общие утилиты
def now() -> datetime:
    """Возвращает текущую дату и время (UTC)."""
    return datetime.now(timezone.utc)
