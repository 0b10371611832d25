"""
Общее ядро (Shared Kernel) системы бронирования отеля.

Содержит общие типы данных и утилиты, используемые контекстом бронирования,
инфраструктурой и интерфейсом командной строки.
"""

from .domain import (
    DATE_FORMAT,
    BusinessRuleValidationException,
    DateRange,
    DomainEvent,
    # Исключения
    DomainException,
    InvalidDateRangeException,
    # Основные классы
    Money,
    # Перечисления
    RoomCategory,
    SnapshotError,
    SnapshotFormatError,
    SnapshotNotFoundError,
    dates_overlap,
    format_date,
    generate_reservation_id,
    # Утилиты
    now,
)

__all__ = [
    "DATE_FORMAT",
    # Основные классы
    "Money",
    "DateRange",
    "DomainEvent",
    # Перечисления
    "RoomCategory",
    # Исключения
    "DomainException",
    "BusinessRuleValidationException",
    "InvalidDateRangeException",
    "SnapshotError",
    "SnapshotNotFoundError",
    "SnapshotFormatError",
    # Утилиты
    "generate_reservation_id",
    "dates_overlap",
    "format_date",
    "now",
]
