from __future__ import annotations

import copy
from dataclasses import dataclass, field

from app.domain.errors import RecordStoreError
from app.domain.ids import new_record_id
from app.domain.models import FieldContains, FieldEquals, RecordFilter, StoreRecord


@dataclass
class InMemoryRecordStore:
    """Non-network record store mirroring Airtable semantics for local mode and tests."""

    tables: dict[str, dict[str, dict[str, object]]] = field(default_factory=dict)
    writes: list[tuple[str, str, str]] = field(default_factory=list)
    fail_writes: bool = False
    next_attachment_id: int = 1

    def seed(self, *, table: str, fields: dict[str, object], record_id: str | None = None) -> StoreRecord:
        rows = self.tables.setdefault(table, {})
        new_id = record_id or new_record_id()
        rows[new_id] = self._with_attachment_ids(fields, previous={})
        return StoreRecord(record_id=new_id, fields=copy.deepcopy(rows[new_id]))

    def rows(self, table: str) -> list[StoreRecord]:
        return [
            StoreRecord(record_id=record_id, fields=copy.deepcopy(fields))
            for record_id, fields in self.tables.get(table, {}).items()
        ]

    async def find_one(self, *, table: str, where: RecordFilter) -> StoreRecord | None:
        matches = await self.find_all(table=table, where=where)
        return matches[0] if matches else None

    async def get(self, *, table: str, record_id: str) -> StoreRecord | None:
        fields = self.tables.get(table, {}).get(record_id)
        if fields is None:
            return None
        return StoreRecord(record_id=record_id, fields=copy.deepcopy(fields))

    async def find_all(self, *, table: str, where: RecordFilter) -> list[StoreRecord]:
        return [record for record in self.rows(table) if _matches(record.fields, where)]

    async def create(self, *, table: str, fields: dict[str, object]) -> StoreRecord:
        if self.fail_writes:
            raise RecordStoreError(f"create failed for table {table}")
        record = self.seed(table=table, fields=fields)
        self.writes.append(("create", table, record.record_id))
        return record

    async def update(self, *, table: str, record_id: str, fields: dict[str, object]) -> StoreRecord:
        if self.fail_writes:
            raise RecordStoreError(f"update failed for table {table}")
        rows = self.tables.get(table, {})
        current = rows.get(record_id)
        if current is None:
            raise RecordStoreError(f"record not found: {table}/{record_id}")
        current.update(self._with_attachment_ids(fields, previous=current))
        self.writes.append(("update", table, record_id))
        return StoreRecord(record_id=record_id, fields=copy.deepcopy(current))

    def _with_attachment_ids(self, fields: dict[str, object], *, previous: dict[str, object]) -> dict[str, object]:
        # Attachment cells are lists of {"url", "filename"} or {"id"} objects.
        stored: dict[str, object] = {}
        for name, value in fields.items():
            if isinstance(value, list) and value and all(isinstance(item, dict) for item in value):
                known = {
                    item["id"]: item
                    for item in previous.get(name, []) or []
                    if isinstance(item, dict) and "id" in item
                }
                cell: list[dict[str, object]] = []
                for item in value:
                    if "url" not in item and item.get("id") in known:
                        cell.append(dict(known[item["id"]]))
                        continue
                    cell.append(
                        {
                            "id": item.get("id") or f"att{self.next_attachment_id:014d}",
                            "url": item.get("url", ""),
                            "filename": item.get("filename", ""),
                        }
                    )
                    if not item.get("id"):
                        self.next_attachment_id += 1
                stored[name] = cell
            else:
                stored[name] = copy.deepcopy(value)
        return stored


def _matches(fields: dict[str, object], where: RecordFilter) -> bool:
    value = fields.get(where.field_name)
    if isinstance(where, FieldEquals):
        text = _cell_text(value)
        if where.case_insensitive:
            return text.lower() == where.value.lower()
        return text == where.value
    if isinstance(where, FieldContains):
        if isinstance(value, list):
            return any(where.value in str(item) for item in value)
        return where.value in _cell_text(value)
    raise TypeError(f"unsupported filter: {where!r}")


def _cell_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(str(item) for item in value)
    return str(value)
