from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
import logging

from app.api.handlers.deps import ApiDeps
from app.clients.email import BrevoApiTransport, SmtpTransport
from app.clients.spaces import SpacesStorageClient
from app.clients.stub import StubStorageClient
from app.config import IntakeSettings, intake_settings_from_env
from app.domain.contracts import EmailTransport, RecordStore, StorageClient
from app.domain.use_cases.classification import ClassificationResolver
from app.domain.use_cases.notify import TransportChain
from app.domain.use_cases.reconcile import SubmissionReconciler
from app.domain.use_cases.recipients import RecipientResolver
from app.domain.use_cases.submissions import SubmissionIntake
from app.repositories.airtable import AirtableClientManager, AirtableRecordStore
from app.repositories.intake import IntakeRepository
from app.repositories.stub import InMemoryRecordStore

logger = logging.getLogger("runtime")


@dataclass
class RuntimeContainer:
    settings: IntakeSettings
    record_store: RecordStore
    repository: IntakeRepository
    storage: StorageClient
    transports: list[EmailTransport]
    intake: SubmissionIntake
    api_deps: ApiDeps
    on_startup: Callable[[], Awaitable[None]] | None
    on_shutdown: Callable[[], Awaitable[None]] | None


def build_email_transports(settings: IntakeSettings) -> list[EmailTransport]:
    """Configured transports in fallback order: HTTP API first, SMTP second."""
    email = settings.email
    transports: list[EmailTransport] = []
    if email.brevo_api_key and email.smtp_from:
        transports.append(
            BrevoApiTransport(
                api_key=email.brevo_api_key,
                api_url=email.brevo_api_url,
                sender_email=email.smtp_from,
                sender_name=email.smtp_from_name,
            )
        )
    elif email.brevo_api_key:
        logger.warning("BREVO_API_KEY is set but SMTP_FROM is missing; Brevo API transport disabled")
    if email.smtp_enabled:
        transports.append(
            SmtpTransport(
                host=email.smtp_host,
                port=email.smtp_port,
                username=email.smtp_user or "",
                password=email.smtp_pass or "",
                from_address=email.smtp_from or "",
                from_name=email.smtp_from_name,
            )
        )
    return transports


def build_runtime_container(settings: IntakeSettings | None = None) -> RuntimeContainer:
    settings = settings or intake_settings_from_env()
    modes: dict[str, str] = {}
    on_startup: Callable[[], Awaitable[None]] | None = None
    on_shutdown: Callable[[], Awaitable[None]] | None = None

    record_store: RecordStore
    if settings.airtable.enabled:
        client_manager = AirtableClientManager(settings=settings.airtable)
        record_store = AirtableRecordStore(client_manager=client_manager)
        on_startup = client_manager.startup
        on_shutdown = client_manager.shutdown
        modes["record_store"] = "airtable"
    else:
        record_store = InMemoryRecordStore()
        modes["record_store"] = "stub"

    storage: StorageClient
    if settings.spaces.enabled:
        storage = SpacesStorageClient(settings.spaces)
        modes["storage"] = "spaces"
    else:
        storage = StubStorageClient()
        modes["storage"] = "stub"

    transports = build_email_transports(settings)
    if not transports:
        logger.warning("no email transport configured; notifications will fail")

    repository = IntakeRepository(store=record_store, tables=settings.tables)
    intake = SubmissionIntake(
        storage=storage,
        classification_resolver=ClassificationResolver(repository=repository),
        reconciler=SubmissionReconciler(repository=repository),
        recipient_resolver=RecipientResolver(
            repository=repository,
            override_address=settings.email.override_notification_email,
        ),
        notifier=TransportChain(transports=transports),
        max_upload_bytes=settings.max_upload_bytes,
    )
    api_deps = ApiDeps(intake=intake, max_upload_bytes=settings.max_upload_bytes, modes=modes)

    return RuntimeContainer(
        settings=settings,
        record_store=record_store,
        repository=repository,
        storage=storage,
        transports=transports,
        intake=intake,
        api_deps=api_deps,
        on_startup=on_startup,
        on_shutdown=on_shutdown,
    )
