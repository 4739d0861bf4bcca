"""Service wiring: storage tiers are chosen once, at process start."""

from dataclasses import dataclass

from fastapi import Request

from backend.formflow.catalog.forms import FormCatalog
from backend.formflow.config import Settings
from backend.formflow.db.engine import create_async_engine_from_settings
from backend.formflow.db.inmemory import InMemoryDocumentStore, InMemoryLocalCache
from backend.formflow.db.redis_cache import create_redis_cache
from backend.formflow.db.repositories import DocumentStore, LocalCache
from backend.formflow.db.sql_store import SqlDocumentStore
from backend.formflow.drafts.manager import DraftManager
from backend.formflow.drafts.persistence import DraftPersistence
from backend.formflow.notifications.dispatcher import NotificationDispatcher
from backend.formflow.submissions.finalizer import SubmissionFinalizer
from backend.formflow.validation.recorder import ValidationRecorder


@dataclass
class Services:
    """Lifecycle services shared by all requests."""

    catalog: FormCatalog
    store: DocumentStore
    persistence: DraftPersistence
    drafts: DraftManager
    finalizer: SubmissionFinalizer
    recorder: ValidationRecorder
    dispatcher: NotificationDispatcher
    reviewer_ids: frozenset[str] = frozenset()


def create_local_cache(settings: Settings) -> LocalCache:
    """Build the local tier selected by settings."""
    if settings.cache_backend == "redis":
        if not settings.redis_url:
            raise ValueError("REDIS_URL must be set when cache_backend is 'redis'.")
        return create_redis_cache(settings.redis_url)
    return InMemoryLocalCache()


def create_document_store(settings: Settings) -> DocumentStore:
    """Build the remote tier selected by settings."""
    if settings.remote_backend == "sql":
        return SqlDocumentStore(create_async_engine_from_settings(settings))
    return InMemoryDocumentStore()


def build_services(
    settings: Settings,
    *,
    cache: LocalCache | None = None,
    store: DocumentStore | None = None,
    dispatcher: NotificationDispatcher | None = None,
) -> Services:
    """Assemble the service graph; explicit collaborators override settings."""
    cache = cache if cache is not None else create_local_cache(settings)
    store = store if store is not None else create_document_store(settings)
    dispatcher = dispatcher or NotificationDispatcher(
        settings.notification_endpoint_url,
        timeout_seconds=settings.notification_timeout_seconds,
    )

    catalog = FormCatalog(latency_ms=settings.catalog_latency_ms)
    persistence = DraftPersistence(cache, store, list_limit=settings.draft_list_limit)
    finalizer = SubmissionFinalizer(store, dispatcher)
    drafts = DraftManager(persistence, finalizer, catalog=catalog)
    recorder = ValidationRecorder(
        store, cache, history_limit=settings.validation_history_limit
    )

    return Services(
        catalog=catalog,
        store=store,
        persistence=persistence,
        drafts=drafts,
        finalizer=finalizer,
        recorder=recorder,
        dispatcher=dispatcher,
        reviewer_ids=frozenset(settings.reviewer_ids),
    )


def get_services(request: Request) -> Services:
    """FastAPI dependency returning the application's services."""
    return request.app.state.services  # type: ignore[no-any-return]
