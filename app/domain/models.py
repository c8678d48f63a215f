from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class FieldEquals:
    """Equality filter; case-insensitive unless stated otherwise."""

    field_name: str
    value: str
    case_insensitive: bool = True


@dataclass(frozen=True)
class FieldContains:
    """Array-membership or substring test over a field."""

    field_name: str
    value: str


RecordFilter = FieldEquals | FieldContains


@dataclass(frozen=True)
class StoreRecord:
    record_id: str
    fields: dict[str, object]


@dataclass(frozen=True)
class Attachment:
    url: str
    filename: str
    # Set for attachments already held by the store; kept on rewrite.
    attachment_id: str | None = None


@dataclass(frozen=True)
class UploadedArtifact:
    filename: str
    content_type: str
    url: str

    def as_attachment(self) -> Attachment:
        return Attachment(url=self.url, filename=self.filename)


@dataclass(frozen=True)
class Category:
    record_id: str
    name: str


@dataclass(frozen=True)
class ApplicantEntry:
    record_id: str
    identity: str
    classification: str


@dataclass(frozen=True)
class StoredApplication:
    record_id: str
    identity: str
    category_ids: tuple[str, ...] = ()
    notes: str = ""
    attachments: tuple[Attachment, ...] = ()


@dataclass(frozen=True)
class RecipientEntry:
    record_id: str
    addresses: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ReconcileResult:
    record: StoredApplication
    was_created: bool
    category: Category | None = None


@dataclass(frozen=True)
class NotificationOutcome:
    sent: bool
    recipients: tuple[str, ...] = ()
    transport: str | None = None
    detail: str = ""
