from __future__ import annotations

from dataclasses import dataclass, field

from app.domain.contracts import UPLOAD_KEY_PREFIX
from app.domain.errors import NotificationError, StorageUploadError


@dataclass
class StubStorageClient:
    writes: list[str] = field(default_factory=list)
    objects: dict[str, bytes] = field(default_factory=dict)
    content_types: dict[str, str] = field(default_factory=dict)
    base_url: str = "https://stub-bucket.local"
    fail: bool = False

    def put_bytes(self, *, key: str, payload: bytes, content_type: str) -> str:
        if not key.startswith(UPLOAD_KEY_PREFIX):
            raise ValueError("storage key must start with the upload prefix")
        if self.fail:
            raise StorageUploadError(f"upload failed for {key}")
        self.writes.append(key)
        self.objects[key] = payload
        self.content_types[key] = content_type
        return f"{self.base_url}/{key}"


@dataclass
class RecordingEmailTransport:
    """In-memory transport; records messages instead of sending them."""

    name: str = "recording"
    sent: list[tuple[tuple[str, ...], str, str]] = field(default_factory=list)
    fail: bool = False

    async def send_html(self, *, recipients: list[str], subject: str, html: str) -> None:
        if self.fail:
            raise NotificationError(f"{self.name} transport failed")
        self.sent.append((tuple(recipients), subject, html))
