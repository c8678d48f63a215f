from __future__ import annotations

from dataclasses import dataclass

from app.domain.models import RecipientEntry
from app.repositories.intake import IntakeRepository

COMPONENT_ID = "domain.recipients.resolve"


def dedupe_addresses(entries: list[RecipientEntry]) -> list[str]:
    # Case-sensitive on the trimmed address; first-seen order kept.
    seen: set[str] = set()
    addresses: list[str] = []
    for entry in entries:
        for raw in entry.addresses:
            address = raw.strip()
            if address and address not in seen:
                seen.add(address)
                addresses.append(address)
    return addresses


@dataclass(frozen=True)
class RecipientResolver:
    repository: IntakeRepository
    override_address: str | None = None

    async def resolve_recipients(
        self,
        *,
        effective_classification: str,
        classification_ref: str | None,
    ) -> list[str]:
        if self.override_address:
            return [self.override_address]

        text = effective_classification.strip()
        ref = (classification_ref or "").strip()
        if not text and not ref:
            return []

        entries: list[RecipientEntry] = []
        if ref:
            entries = await self.repository.find_recipients_by_category_ref(category_id=ref)
        if not entries and text:
            entries = await self.repository.find_recipients_by_category_name(name=text)
        return dedupe_addresses(entries)
