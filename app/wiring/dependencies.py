from functools import lru_cache
import logging

from sqlalchemy.orm import sessionmaker

from app.core.config import settings
from app.application.ports.calendar_rules import CalendarRulesPort
from app.application.ports.draft_store import DraftStorePort
from app.application.ports.ledger import ReservationLedgerPort
from app.application.ports.notification_sink import NotificationSinkPort
from app.application.ports.service_catalog import ServiceCatalogPort
from app.application.use_cases.availability import AvailabilityUseCase
from app.application.use_cases.booking import BookingCommitter
from app.application.use_cases.draft_session import DraftSessionUseCase
from app.application.use_cases.notify import NotifyUseCase
from app.application.use_cases.update_status import UpdateAppointmentStatusUseCase
from app.infrastructure.calendar.memory_rules import MemoryCalendarRules
from app.infrastructure.knowledge.service_catalog_store import ServiceCatalogStore
from app.infrastructure.notifications.mock_sink import LoggingNotificationSink
from app.infrastructure.notifications.webhook_client import EmailWebhookClient
from app.infrastructure.notifications.webhook_sink import WebhookNotificationSink
from app.infrastructure.sql.calendar_rules import SqlCalendarRules
from app.infrastructure.sql.database import build_session_factory, create_db_engine, init_schema
from app.infrastructure.sql.ledger import SqlReservationLedger
from app.infrastructure.sql.seed import seed_demo_data
from app.infrastructure.sql.service_catalog import SqlServiceCatalog
from app.infrastructure.store.json_draft_store import JsonDraftStore
from app.infrastructure.store.memory_draft_store import MemoryDraftStore
from app.infrastructure.store.memory_ledger import MemoryReservationLedger


logger = logging.getLogger(__name__)


def _is_local() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


@lru_cache
def get_session_factory() -> sessionmaker | None:
    if not settings.DATABASE_URL:
        return None
    engine = create_db_engine(
        settings.DATABASE_URL,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
    )
    init_schema(engine)
    factory = build_session_factory(engine)
    if settings.SEED_DEMO_DATA:
        seed_demo_data(factory)
    return factory


@lru_cache
def get_ledger() -> ReservationLedgerPort:
    factory = get_session_factory()
    if factory is None:
        logger.info("Using MemoryReservationLedger (DATABASE_URL not set)")
        return MemoryReservationLedger()
    return SqlReservationLedger(factory)


@lru_cache
def get_calendar_rules() -> CalendarRulesPort:
    factory = get_session_factory()
    if factory is None:
        return MemoryCalendarRules()
    return SqlCalendarRules(factory)


@lru_cache
def get_service_catalog() -> ServiceCatalogPort:
    factory = get_session_factory()
    if factory is None:
        return ServiceCatalogStore()
    return SqlServiceCatalog(factory)


@lru_cache
def get_notification_sink() -> NotificationSinkPort:
    if not settings.EMAIL_WEBHOOK_URL:
        logger.info("Using LoggingNotificationSink (EMAIL_WEBHOOK_URL not set)")
        return LoggingNotificationSink()
    client = EmailWebhookClient(
        endpoint=settings.EMAIL_WEBHOOK_URL,
        timeout=settings.EMAIL_WEBHOOK_TIMEOUT_SECONDS,
    )
    return WebhookNotificationSink(client=client)


@lru_cache
def get_draft_store() -> DraftStorePort:
    if _is_local():
        return JsonDraftStore(data_dir=settings.DRAFT_DATA_DIR)
    return MemoryDraftStore()


def get_notifier() -> NotifyUseCase:
    return NotifyUseCase(sink=get_notification_sink())


def get_availability_use_case() -> AvailabilityUseCase:
    return AvailabilityUseCase(
        rules=get_calendar_rules(),
        ledger=get_ledger(),
        catalog=get_service_catalog(),
        default_slot_interval=settings.DEFAULT_SLOT_INTERVAL_MINUTES,
        booking_window_days=settings.BOOKING_WINDOW_DAYS,
    )


def get_booking_committer() -> BookingCommitter:
    return BookingCommitter(
        ledger=get_ledger(),
        catalog=get_service_catalog(),
        notifier=get_notifier(),
        admin_email=settings.ADMIN_NOTIFICATION_EMAIL,
    )


def get_draft_session_use_case() -> DraftSessionUseCase:
    return DraftSessionUseCase(
        store=get_draft_store(),
        availability=get_availability_use_case(),
        committer=get_booking_committer(),
    )


def get_update_status_use_case() -> UpdateAppointmentStatusUseCase:
    return UpdateAppointmentStatusUseCase(
        ledger=get_ledger(),
        catalog=get_service_catalog(),
        notifier=get_notifier(),
        fallback_service_label=settings.FALLBACK_SERVICE_LABEL,
        admin_email=settings.ADMIN_NOTIFICATION_EMAIL,
    )
