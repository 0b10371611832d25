"""
Интерфейсы (порты) для контекста бронирования.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Optional, Protocol, Type, TypeVar

from ..shared_kernel import DomainEvent

if TYPE_CHECKING:
    from .domain import HotelContext

T_Event = TypeVar("T_Event", bound=DomainEvent)


class ILogger(Protocol):
    """Интерфейс для логгера."""

    def info(self, message: str, **kwargs: Any) -> None: ...
    def error(self, message: str, **kwargs: Any) -> None: ...
    def warning(self, message: str, **kwargs: Any) -> None: ...
    def debug(self, message: str, **kwargs: Any) -> None: ...


class IEventBus(Protocol):
    """Интерфейс для шины событий."""

    def publish(self, event: DomainEvent) -> None: ...
    def subscribe(
        self, event_type: Type[T_Event], handler: Callable[[T_Event], None]
    ) -> None: ...


class ISnapshotStore(Protocol):
    """Интерфейс хранилища снимков состояния отеля."""

    @property
    def location(self) -> str: ...

    def load(self) -> Optional[HotelContext]:
        """Загружает снимок. Возвращает None, если снимка нет."""
        ...

    def save(self, context: HotelContext) -> None:
        """Сохраняет снимок, перезаписывая предыдущий."""
        ...
