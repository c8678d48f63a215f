from __future__ import annotations

from dataclasses import dataclass

from app.config import TableSettings
from app.domain.contracts import RecordStore
from app.domain.models import (
    ApplicantEntry,
    Attachment,
    Category,
    FieldContains,
    FieldEquals,
    RecipientEntry,
    StoreRecord,
    StoredApplication,
)


@dataclass
class IntakeRepository:
    """Typed projections over the raw record store.

    Table and field names come from TableSettings so each deployment can point
    at its own base layout.
    """

    store: RecordStore
    tables: TableSettings

    async def find_applicant(self, *, identity: str) -> ApplicantEntry | None:
        if not self.tables.applicants_table:
            return None
        record = await self.store.find_one(
            table=self.tables.applicants_table,
            where=FieldEquals(self.tables.applicants_email_field, identity),
        )
        if record is None:
            return None
        return ApplicantEntry(
            record_id=record.record_id,
            identity=field_text(record.fields.get(self.tables.applicants_email_field)),
            classification=field_text(record.fields.get(self.tables.applicants_class_field)).strip(),
        )

    async def find_category_by_name(self, *, name: str) -> Category | None:
        record = await self.store.find_one(
            table=self.tables.categories_table,
            where=FieldEquals(self.tables.category_name_field, name),
        )
        if record is None:
            return None
        return self._category(record)

    async def get_category(self, *, record_id: str) -> Category | None:
        record = await self.store.get(table=self.tables.categories_table, record_id=record_id)
        if record is None:
            return None
        return self._category(record)

    async def create_category(self, *, name: str) -> Category:
        record = await self.store.create(
            table=self.tables.categories_table,
            fields={self.tables.category_name_field: name},
        )
        return self._category(record)

    async def get_or_create_category(self, *, name: str) -> tuple[Category, bool]:
        # Not serialized: concurrent first submissions may both create.
        existing = await self.find_category_by_name(name=name)
        if existing is not None:
            return existing, False
        return await self.create_category(name=name), True

    async def find_application(self, *, identity: str) -> StoredApplication | None:
        record = await self.store.find_one(
            table=self.tables.apps_table,
            where=FieldEquals(self.tables.apps_email_field, identity),
        )
        if record is None:
            return None
        return self._application(record)

    async def create_application(
        self,
        *,
        identity: str,
        category_ids: tuple[str, ...],
        notes: str,
        attachments: tuple[Attachment, ...],
    ) -> StoredApplication:
        fields: dict[str, object] = {
            self.tables.apps_email_field: identity,
            self.tables.apps_notes_field: notes,
            self.tables.apps_file_field: [_attachment_payload(item) for item in attachments],
        }
        if category_ids:
            fields[self.tables.apps_class_field] = list(category_ids)
        record = await self.store.create(table=self.tables.apps_table, fields=fields)
        return self._application(record)

    async def update_application(
        self,
        *,
        record_id: str,
        attachments: tuple[Attachment, ...],
        notes: str | None = None,
        category_ids: tuple[str, ...] | None = None,
    ) -> StoredApplication:
        fields: dict[str, object] = {
            self.tables.apps_file_field: [_attachment_payload(item) for item in attachments],
        }
        if notes is not None:
            fields[self.tables.apps_notes_field] = notes
        if category_ids:
            fields[self.tables.apps_class_field] = list(category_ids)
        record = await self.store.update(table=self.tables.apps_table, record_id=record_id, fields=fields)
        return self._application(record)

    async def find_recipients_by_category_ref(self, *, category_id: str) -> list[RecipientEntry]:
        if not self.tables.underwriters_table:
            return []
        records = await self.store.find_all(
            table=self.tables.underwriters_table,
            where=FieldContains(self.tables.uw_class_link_field, category_id),
        )
        return [self._recipient(record) for record in records]

    async def find_recipients_by_category_name(self, *, name: str) -> list[RecipientEntry]:
        if not self.tables.underwriters_table:
            return []
        records = await self.store.find_all(
            table=self.tables.underwriters_table,
            where=FieldEquals(self.tables.uw_class_field, name, case_insensitive=False),
        )
        return [self._recipient(record) for record in records]

    def _category(self, record: StoreRecord) -> Category:
        return Category(
            record_id=record.record_id,
            name=field_text(record.fields.get(self.tables.category_name_field)),
        )

    def _application(self, record: StoreRecord) -> StoredApplication:
        fields = record.fields
        return StoredApplication(
            record_id=record.record_id,
            identity=field_text(fields.get(self.tables.apps_email_field)),
            category_ids=tuple(field_list(fields.get(self.tables.apps_class_field))),
            notes=field_text(fields.get(self.tables.apps_notes_field)),
            attachments=tuple(_attachments(fields.get(self.tables.apps_file_field))),
        )

    def _recipient(self, record: StoreRecord) -> RecipientEntry:
        return RecipientEntry(
            record_id=record.record_id,
            addresses=tuple(split_addresses(record.fields.get(self.tables.uw_email_field))),
        )


def field_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(str(item) for item in value if item is not None)
    return str(value)


def field_list(value: object) -> list[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return [str(item) for item in value if item]
    text = str(value)
    return [text] if text else []


def split_addresses(value: object) -> list[str]:
    """Normalize a multi-value or comma-separated recipient field."""
    if value is None:
        return []
    raw_items = value if isinstance(value, list) else str(value).split(",")
    addresses: list[str] = []
    for item in raw_items:
        if item is None:
            continue
        for part in str(item).split(","):
            address = part.strip()
            if address:
                addresses.append(address)
    return addresses


def _attachments(value: object) -> list[Attachment]:
    if not isinstance(value, list):
        return []
    items: list[Attachment] = []
    for raw in value:
        if not isinstance(raw, dict):
            continue
        items.append(
            Attachment(
                url=str(raw.get("url", "")),
                filename=str(raw.get("filename", "")),
                attachment_id=str(raw["id"]) if raw.get("id") else None,
            )
        )
    return items


def _attachment_payload(attachment: Attachment) -> dict[str, str]:
    if attachment.attachment_id:
        return {"id": attachment.attachment_id}
    return {"url": attachment.url, "filename": attachment.filename}
