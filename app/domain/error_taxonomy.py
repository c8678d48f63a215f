from __future__ import annotations

from collections.abc import Mapping
from typing import Literal

# Canonical error vocabulary for the intake flow.
ErrorCode = Literal[
    "validation_error",
    "missing_identity",
    "missing_file",
    "unsupported_file_type",
    "file_too_large",
    "dependency_failed",
    "record_store_failed",
    "storage_upload_failed",
    "notification_failed",
    "internal_error",
]

ErrorClassification = Literal["rejected", "aborted", "degraded"]

CANONICAL_ERROR_CODES: tuple[ErrorCode, ...] = (
    "validation_error",
    "missing_identity",
    "missing_file",
    "unsupported_file_type",
    "file_too_large",
    "dependency_failed",
    "record_store_failed",
    "storage_upload_failed",
    "notification_failed",
    "internal_error",
)

# Rejected before any external call.
REJECTED_ERROR_CODES: frozenset[ErrorCode] = frozenset(
    {
        "validation_error",
        "missing_identity",
        "missing_file",
        "unsupported_file_type",
        "file_too_large",
    }
)

# Logged only; the record write already succeeded.
DEGRADED_ERROR_CODES: frozenset[ErrorCode] = frozenset({"notification_failed"})

HTTP_STATUS_BY_CODE: Mapping[ErrorCode, int] = {
    "validation_error": 400,
    "missing_identity": 400,
    "missing_file": 400,
    "unsupported_file_type": 415,
    "file_too_large": 413,
    "dependency_failed": 500,
    "record_store_failed": 500,
    "storage_upload_failed": 500,
    "notification_failed": 200,
    "internal_error": 500,
}


def is_canonical_error_code(code: str) -> bool:
    return code in CANONICAL_ERROR_CODES


def classify_error(code: ErrorCode) -> ErrorClassification:
    if code in REJECTED_ERROR_CODES:
        return "rejected"
    if code in DEGRADED_ERROR_CODES:
        return "degraded"
    return "aborted"


def resolve_error_code(code: str) -> ErrorCode:
    if is_canonical_error_code(code):
        return code  # type: ignore[return-value]
    return "internal_error"


def http_status_for(code: str) -> int:
    return HTTP_STATUS_BY_CODE[resolve_error_code(code)]
