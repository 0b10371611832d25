"""
Модуль контекста бронирования (Booking Context).

Отвечает за бронирование номеров в отеле, включая:
- Поиск свободных номеров и проверку доступности
- Создание и отмену бронирований
- Оплату бронирований
- Сохранение и загрузку снимков состояния
"""

from . import application, domain, infrastructure, interfaces

__all__ = [
    "domain",
    "application",
    "infrastructure",
    "interfaces",
]
