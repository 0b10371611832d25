from typing import Optional

from .booking.application import HotelApplicationService
from .booking.domain import (
    BookingEngine,
    HotelContext,
    ReservationBooked,
    ReservationCancelled,
    ReservationPaid,
)
from .booking.infrastructure import (
    ConsoleLogger,
    InMemoryEventBus,
    JsonSnapshotStore,
    configure_logging,
    seed_catalog,
)
from .booking.interfaces import ILogger, ISnapshotStore
from .config import HotelSettings
from .shared_kernel import DomainEvent


def load_or_seed(store: ISnapshotStore, logger: ILogger, currency: str) -> HotelContext:
    """Загружает снимок или создает состояние с начальным каталогом."""
    context = store.load()
    if context is not None:
        logger.info("Loaded data", location=store.location)
        return context
    logger.info("No snapshot found, starting with seeded hotel data", location=store.location)
    return HotelContext.from_rooms(seed_catalog(currency))


def bootstrap_app(
    settings: HotelSettings, store: Optional[ISnapshotStore] = None
) -> HotelApplicationService:
    """Создает и настраивает все компоненты приложения."""
    # 1. Логирование
    configure_logging(settings.log_level)
    logger = ConsoleLogger()

    # 2. Шина событий с журналом аудита
    event_bus = InMemoryEventBus(logger)

    def audit(event: DomainEvent) -> None:
        logger.info(f"Event: {event.event_type}", event=event.model_dump(mode="json"))

    for event_type in (ReservationBooked, ReservationCancelled, ReservationPaid):
        event_bus.subscribe(event_type, audit)

    # 3. Состояние отеля
    store = store or JsonSnapshotStore(settings.data_file)
    context = load_or_seed(store, logger, settings.currency)

    return HotelApplicationService(
        context=context,
        store=store,
        logger=logger,
        event_bus=event_bus,
        engine=BookingEngine(),
    )
