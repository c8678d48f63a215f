from __future__ import annotations

from typing import Protocol, runtime_checkable

from app.domain.models import RecordFilter, StoreRecord

UPLOAD_KEY_PREFIX = "applications/"


@runtime_checkable
class RecordStore(Protocol):
    """Tabular backend primitives.

    Filters are typed (FieldEquals / FieldContains) so each backend renders
    them in its own query language. Writes raise RecordStoreError on failure.
    """

    async def find_one(self, *, table: str, where: RecordFilter) -> StoreRecord | None: ...

    async def get(self, *, table: str, record_id: str) -> StoreRecord | None: ...

    async def find_all(self, *, table: str, where: RecordFilter) -> list[StoreRecord]: ...

    async def create(self, *, table: str, fields: dict[str, object]) -> StoreRecord: ...

    async def update(self, *, table: str, record_id: str, fields: dict[str, object]) -> StoreRecord: ...


@runtime_checkable
class StorageClient(Protocol):
    """Object storage contract: store bytes, get back a public URL."""

    def put_bytes(self, *, key: str, payload: bytes, content_type: str) -> str: ...


@runtime_checkable
class EmailTransport(Protocol):
    """Send one HTML email to a list of addresses; raise NotificationError on failure."""

    name: str

    async def send_html(self, *, recipients: list[str], subject: str, html: str) -> None: ...
