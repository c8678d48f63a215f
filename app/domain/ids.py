from __future__ import annotations

import re

import ulid

# Airtable record ids: "rec" followed by 14 alphanumerics.
RECORD_ID_PATTERN = re.compile(r"^rec[A-Za-z0-9]{14}$")


def new_upload_token() -> str:
    return ulid.new().str.lower()


def new_record_id() -> str:
    # Trailing ULID characters are the random part.
    return f"rec{ulid.new().str[-14:]}"


def looks_like_record_id(value: str) -> bool:
    return bool(RECORD_ID_PATTERN.match(value.strip()))
