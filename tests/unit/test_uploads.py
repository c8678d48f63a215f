from datetime import UTC, datetime

import pytest

from app.domain.errors import FileTooLargeError, MissingFileError, UnsupportedFileTypeError
from app.domain.ids import looks_like_record_id, new_record_id
from app.domain.uploads import build_upload_key, safe_name, validate_artifact

LIMIT = 20 * 1024 * 1024


@pytest.mark.unit
@pytest.mark.parametrize(
    "content_type",
    [
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ],
)
def test_allowed_content_types_pass(content_type: str) -> None:
    validate_artifact(filename="a.pdf", content_type=content_type, size=LIMIT, max_bytes=LIMIT)


@pytest.mark.unit
def test_validation_rejections() -> None:
    with pytest.raises(MissingFileError):
        validate_artifact(filename="", content_type="application/pdf", size=1, max_bytes=LIMIT)
    with pytest.raises(UnsupportedFileTypeError):
        validate_artifact(filename="a.png", content_type="image/png", size=1, max_bytes=LIMIT)
    with pytest.raises(FileTooLargeError):
        validate_artifact(filename="a.pdf", content_type="application/pdf", size=LIMIT + 1, max_bytes=LIMIT)


@pytest.mark.unit
def test_safe_name_replaces_unsafe_runs() -> None:
    assert safe_name("my report (v2)+final.pdf") == "my report (v2)+final.pdf"
    assert safe_name("a/b\\c?*.pdf") == "a_b_c_.pdf"


@pytest.mark.unit
def test_upload_key_is_namespaced_by_month_and_token() -> None:
    key = build_upload_key(filename="r?.pdf", now=datetime(2026, 3, 5, tzinfo=UTC), token="tok")

    assert key == "applications/2026-03/tok-r_.pdf"


@pytest.mark.unit
def test_generated_keys_are_unique() -> None:
    assert build_upload_key(filename="a.pdf") != build_upload_key(filename="a.pdf")


@pytest.mark.unit
def test_record_id_shape() -> None:
    assert looks_like_record_id("recABCDEFGHIJKLMN") is True
    assert looks_like_record_id(new_record_id()) is True
    assert looks_like_record_id("Marine") is False
    assert looks_like_record_id("recSHORT") is False
