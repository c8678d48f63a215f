from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from app.config import AirtableSettings
from app.domain.errors import RecordStoreError
from app.domain.models import FieldContains, FieldEquals, RecordFilter, StoreRecord

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


def escape_formula_string(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def render_formula(where: RecordFilter) -> str:
    field_ref = "{" + where.field_name + "}"
    value = escape_formula_string(where.value)
    if isinstance(where, FieldEquals):
        if where.case_insensitive:
            return f'LOWER({field_ref}) = LOWER("{value}")'
        return f'{field_ref} = "{value}"'
    if isinstance(where, FieldContains):
        return f'FIND("{value}", ARRAYJOIN({field_ref}, ","))'
    raise TypeError(f"unsupported filter: {where!r}")


@dataclass
class AirtableClientManager:
    settings: AirtableSettings
    transport: httpx.AsyncBaseTransport | None = None
    client: httpx.AsyncClient | None = None

    async def startup(self) -> None:
        if self.client is not None:
            return
        self.client = httpx.AsyncClient(
            base_url=f"{self.settings.api_url.rstrip('/')}/{self.settings.base_id}",
            headers={"Authorization": f"Bearer {self.settings.pat}"},
            timeout=DEFAULT_TIMEOUT_SECONDS,
            transport=self.transport,
        )

    async def shutdown(self) -> None:
        if self.client is None:
            return
        await self.client.aclose()
        self.client = None


@dataclass
class AirtableRecordStore:
    client_manager: AirtableClientManager

    def _client(self) -> httpx.AsyncClient:
        if self.client_manager.client is None:
            raise RuntimeError("airtable client is not initialized")
        return self.client_manager.client

    async def find_one(self, *, table: str, where: RecordFilter) -> StoreRecord | None:
        payload = await self._request(
            "GET",
            _table_path(table),
            params={"filterByFormula": render_formula(where), "maxRecords": 1},
        )
        records = payload.get("records") or []
        return _store_record(records[0]) if records else None

    async def get(self, *, table: str, record_id: str) -> StoreRecord | None:
        path = _record_path(table, record_id)
        response = await self._send("GET", path)
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        return _store_record(_checked_json(method="GET", path=path, response=response))

    async def find_all(self, *, table: str, where: RecordFilter) -> list[StoreRecord]:
        formula = render_formula(where)
        results: list[StoreRecord] = []
        offset: str | None = None
        while True:
            params: dict[str, Any] = {"filterByFormula": formula}
            if offset is not None:
                params["offset"] = offset
            payload = await self._request("GET", _table_path(table), params=params)
            results.extend(_store_record(raw) for raw in payload.get("records") or [])
            offset = payload.get("offset")
            if not offset:
                return results

    async def create(self, *, table: str, fields: dict[str, object]) -> StoreRecord:
        payload = await self._request(
            "POST",
            _table_path(table),
            json={"records": [{"fields": fields}], "typecast": True},
        )
        records = payload.get("records") or []
        if not records:
            raise RecordStoreError(f"airtable create returned no records for table {table}")
        return _store_record(records[0])

    async def update(self, *, table: str, record_id: str, fields: dict[str, object]) -> StoreRecord:
        payload = await self._request(
            "PATCH",
            _record_path(table, record_id),
            json={"fields": fields, "typecast": True},
        )
        return _store_record(payload)

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        response = await self._send(method, path, **kwargs)
        return _checked_json(method=method, path=path, response=response)

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._client().request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise RecordStoreError(f"airtable {method} {path} failed: {exc}") from exc


def _checked_json(*, method: str, path: str, response: httpx.Response) -> dict[str, Any]:
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        logger.error(
            "airtable request rejected",
            extra={"error_code": "record_store_failed"},
        )
        raise RecordStoreError(
            f"airtable {method} {path} failed with status {exc.response.status_code}"
        ) from exc
    return response.json()


def _table_path(table: str) -> str:
    return f"/{quote(table, safe='')}"


def _record_path(table: str, record_id: str) -> str:
    return f"{_table_path(table)}/{quote(record_id, safe='')}"


def _store_record(raw: dict[str, Any]) -> StoreRecord:
    return StoreRecord(record_id=str(raw["id"]), fields=dict(raw.get("fields") or {}))
