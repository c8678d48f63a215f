from __future__ import annotations

import re
from datetime import UTC, datetime

from app.domain.contracts import UPLOAD_KEY_PREFIX
from app.domain.errors import FileTooLargeError, MissingFileError, UnsupportedFileTypeError
from app.domain.ids import new_upload_token

ALLOWED_CONTENT_TYPES: tuple[str, ...] = (
    "application/pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/msword",
)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^\w.\-()+ ]+")


def validate_artifact(*, filename: str | None, content_type: str | None, size: int, max_bytes: int) -> None:
    if not filename:
        raise MissingFileError("missing file")
    if (content_type or "").lower() not in ALLOWED_CONTENT_TYPES:
        raise UnsupportedFileTypeError("Only PDF/DOC/DOCX files are allowed")
    if size > max_bytes:
        raise FileTooLargeError(f"file too large: limit is {max_bytes} bytes")


def safe_name(name: str) -> str:
    return _UNSAFE_FILENAME_CHARS.sub("_", name)


def year_month(now: datetime | None = None) -> str:
    moment = now or datetime.now(tz=UTC)
    return f"{moment.year}-{moment.month:02d}"


def build_upload_key(*, filename: str, now: datetime | None = None, token: str | None = None) -> str:
    unique = token or new_upload_token()
    return f"{UPLOAD_KEY_PREFIX}{year_month(now)}/{unique}-{safe_name(filename)}"
