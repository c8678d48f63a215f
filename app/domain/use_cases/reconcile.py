from __future__ import annotations

import logging
from dataclasses import dataclass

from app.domain.ids import looks_like_record_id
from app.domain.models import Category, ReconcileResult, UploadedArtifact
from app.repositories.intake import IntakeRepository

COMPONENT_ID = "domain.submission.reconcile"
NOTES_SEPARATOR = "\n"

logger = logging.getLogger(__name__)


def merge_notes(existing: str, incoming: str | None) -> str | None:
    """Concatenated notes, or None when nothing new should be written."""
    if not incoming or not incoming.strip():
        return None
    if not existing:
        return incoming
    return f"{existing}{NOTES_SEPARATOR}{incoming}"


@dataclass(frozen=True)
class SubmissionReconciler:
    repository: IntakeRepository

    async def resolve_category(self, *, classification: str) -> Category | None:
        text = classification.strip()
        if not text:
            return None
        if looks_like_record_id(text):
            # Linked as given; the name is only needed for display and routing.
            known = await self.repository.get_category(record_id=text)
            return Category(record_id=text, name=known.name if known is not None else "")

        category, created = await self.repository.get_or_create_category(name=text)
        if created:
            logger.info("category created", extra={"record_id": category.record_id})
        return category

    async def reconcile(
        self,
        *,
        identity: str,
        classification: str,
        notes: str | None,
        artifact: UploadedArtifact,
    ) -> ReconcileResult:
        category = await self.resolve_category(classification=classification)
        category_ids = (category.record_id,) if category is not None else ()

        existing = await self.repository.find_application(identity=identity)
        if existing is None:
            record = await self.repository.create_application(
                identity=identity,
                category_ids=category_ids,
                notes=notes or "",
                attachments=(artifact.as_attachment(),),
            )
            logger.info(
                "application created",
                extra={"identity": identity, "record_id": record.record_id},
            )
            return ReconcileResult(record=record, was_created=True, category=category)

        # Empty resolution never clears a stored classification.
        record = await self.repository.update_application(
            record_id=existing.record_id,
            attachments=existing.attachments + (artifact.as_attachment(),),
            notes=merge_notes(existing.notes, notes),
            category_ids=category_ids or None,
        )
        logger.info(
            "application merged",
            extra={"identity": identity, "record_id": record.record_id},
        )
        return ReconcileResult(record=record, was_created=False, category=category)
