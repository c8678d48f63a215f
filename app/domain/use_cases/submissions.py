from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from app.domain.contracts import StorageClient
from app.domain.dto import BuildNotificationCommand, SubmitApplicationCommand, SubmitApplicationResult
from app.domain.errors import MissingIdentityError, NotificationError
from app.domain.ids import looks_like_record_id
from app.domain.models import Category, NotificationOutcome, UploadedArtifact
from app.domain.uploads import build_upload_key, validate_artifact
from app.domain.use_cases.classification import ClassificationResolver
from app.domain.use_cases.notify import TransportChain, build_notification
from app.domain.use_cases.reconcile import SubmissionReconciler
from app.domain.use_cases.recipients import RecipientResolver

COMPONENT_ID = "domain.submission.submit"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionIntake:
    """Upload, classify, reconcile, resolve recipients, notify; strictly in that order."""

    storage: StorageClient
    classification_resolver: ClassificationResolver
    reconciler: SubmissionReconciler
    recipient_resolver: RecipientResolver
    notifier: TransportChain
    max_upload_bytes: int

    async def submit(self, cmd: SubmitApplicationCommand) -> SubmitApplicationResult:
        identity = cmd.identity.strip()
        if not identity:
            raise MissingIdentityError("missing identity")
        validate_artifact(
            filename=cmd.filename,
            content_type=cmd.content_type,
            size=len(cmd.payload),
            max_bytes=self.max_upload_bytes,
        )

        key = build_upload_key(filename=cmd.filename)
        # Storage clients block; run them off the event loop.
        url = await asyncio.to_thread(
            self.storage.put_bytes,
            key=key,
            payload=cmd.payload,
            content_type=cmd.content_type,
        )
        artifact = UploadedArtifact(filename=cmd.filename, content_type=cmd.content_type, url=url)

        effective_classification = await self.classification_resolver.resolve(
            explicit_classification=cmd.classification,
            identity=identity,
        )
        reconciliation = await self.reconciler.reconcile(
            identity=identity,
            classification=effective_classification,
            notes=cmd.notes,
            artifact=artifact,
        )
        category = reconciliation.category
        label = classification_label(effective_classification, category)
        recipients = await self.recipient_resolver.resolve_recipients(
            effective_classification=label,
            classification_ref=category.record_id if category is not None else None,
        )

        notification = await self._notify(
            recipients=recipients,
            command=BuildNotificationCommand(
                identity=identity,
                classification=label,
                notes=cmd.notes,
                artifact=artifact,
            ),
            record_id=reconciliation.record.record_id,
        )
        return SubmitApplicationResult(
            artifact=artifact,
            effective_classification=effective_classification,
            reconciliation=reconciliation,
            recipients=tuple(recipients),
            notification=notification,
            message=response_message(
                was_created=reconciliation.was_created,
                has_recipients=bool(recipients),
                notification=notification,
            ),
        )

    async def _notify(
        self,
        *,
        recipients: list[str],
        command: BuildNotificationCommand,
        record_id: str,
    ) -> NotificationOutcome:
        if not recipients:
            return NotificationOutcome(sent=True, detail="no recipients")

        message = build_notification(command)
        try:
            return await self.notifier.notify(recipients=recipients, subject=message.subject, html=message.html)
        except NotificationError as exc:
            # The record write already succeeded; delivery failure degrades the response only.
            logger.error(
                "notification delivery failed: %s",
                exc,
                extra={"identity": command.identity, "record_id": record_id, "error_code": exc.code},
            )
            return NotificationOutcome(sent=False, recipients=tuple(recipients), detail=str(exc))


def classification_label(effective_classification: str, category: Category | None) -> str:
    """Human-readable class: a direct record reference is shown by its category name."""
    if category is not None and looks_like_record_id(effective_classification.strip()):
        return category.name
    return effective_classification

def response_message(*, was_created: bool, has_recipients: bool, notification: NotificationOutcome) -> str:
    head = "Application submitted" if was_created else "Application updated"
    if not has_recipients:
        saved = "Uploaded and saved." if was_created else "Upload added to existing application."
        return f"{saved} No matching underwriters found."
    if not notification.sent:
        return f"{head}, but notification delivery failed."
    return f"{head} and notifications sent!"
