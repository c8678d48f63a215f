from dataclasses import replace

from fastapi.testclient import TestClient
import pytest

from app.api.handlers.deps import ApiDeps
from app.api.http_app import build_app
from app.clients.stub import RecordingEmailTransport
from app.domain.use_cases.notify import TransportChain
from app.repositories.stub import InMemoryRecordStore
from tests.integration.api_seed import PDF, build_local_container, seed_directory


def _client_with_transport(
    transport: RecordingEmailTransport | None,
    *,
    override: str | None = None,
) -> tuple[TestClient, InMemoryRecordStore]:
    container = build_local_container(override=override)
    assert isinstance(container.record_store, InMemoryRecordStore)
    seed_directory(store=container.record_store)
    transports = [transport] if transport is not None else []
    intake = replace(container.intake, notifier=TransportChain(transports=transports))
    api_deps = ApiDeps(intake=intake, max_upload_bytes=container.api_deps.max_upload_bytes, modes=container.api_deps.modes)
    app = build_app(role="api", run_id="integration-api", api_deps=api_deps)
    return TestClient(app), container.record_store


@pytest.mark.integration
def test_system_endpoints_are_available() -> None:
    client, _ = _client_with_transport(RecordingEmailTransport())

    with client:
        assert client.get("/health").json() == {"status": "ok", "role": "api", "mode": "local"}
        assert client.get("/healthz").text == "ok"
        ready = client.get("/ready").json()

    assert ready["record_store"] == "stub"
    assert ready["email_transports"] == ["recording"]
    assert ready["override_active"] is False


@pytest.mark.integration
def test_marine_submissions_create_then_merge_one_record() -> None:
    transport = RecordingEmailTransport()
    client, store = _client_with_transport(transport)

    with client:
        first = client.post(
            "/submissions",
            data={"identity": "a@x.com", "classification": "Marine", "notes": "first"},
            files={"file": ("report.pdf", b"%PDF-1.7", PDF)},
        )
        second = client.post(
            "/submissions",
            data={"identity": "a@x.com", "notes": "second"},
            files={"file": ("addendum.pdf", b"%PDF-1.7", PDF)},
        )

    assert first.status_code == 200
    assert first.text == "Application submitted and notifications sent!"
    assert second.status_code == 200
    assert second.text == "Upload added to existing application. No matching underwriters found."

    rows = store.rows("Applications")
    assert len(rows) == 1
    fields = rows[0].fields
    assert [item["filename"] for item in fields["Uploaded File"]] == ["report.pdf", "addendum.pdf"]
    assert fields["More Information"] == "first\nsecond"
    categories = store.rows("Categories")
    assert [row.fields["Name"] for row in categories] == ["Marine"]
    assert fields["Class of Business"] == [categories[0].record_id]
    # The second submission had no classification, so it routed to nobody.
    assert len(transport.sent) == 1
    assert transport.sent[0][0] == ("m@ins.com",)


@pytest.mark.integration
def test_fire_submission_notifies_each_underwriter_once() -> None:
    transport = RecordingEmailTransport()
    client, _ = _client_with_transport(transport)

    with client:
        response = client.post(
            "/submissions",
            data={"identity": "b@x.com", "classification": "Fire"},
            files={"file": ("claim.docx", b"PK", "application/vnd.openxmlformats-officedocument.wordprocessingml.document")},
        )

    assert response.status_code == 200
    recipients, subject, _ = transport.sent[0]
    assert sorted(recipients) == ["u1@ins.com", "u2@ins.com", "u3@ins.com"]
    assert subject == "New Application: Fire"


@pytest.mark.integration
def test_legacy_upload_form_uses_directory_classification() -> None:
    transport = RecordingEmailTransport()
    client, _ = _client_with_transport(transport)

    with client:
        response = client.post(
            "/upload",
            data={"submitterEmail": "Known@X.com", "moreInfo": "via legacy form"},
            files={"applicationFile": ("report.pdf", b"%PDF-1.7", PDF)},
        )

    assert response.status_code == 200
    assert transport.sent[0][0] == ("m@ins.com",)
    assert transport.sent[0][1] == "New Application: Marine"


@pytest.mark.integration
def test_override_redirects_all_notifications() -> None:
    transport = RecordingEmailTransport()
    client, _ = _client_with_transport(transport, override="qa@staging.example")

    with client:
        response = client.post(
            "/submissions",
            data={"identity": "b@x.com", "classification": "Fire"},
            files={"file": ("report.pdf", b"%PDF-1.7", PDF)},
        )

    assert response.status_code == 200
    assert transport.sent[0][0] == ("qa@staging.example",)


@pytest.mark.integration
def test_notification_failure_still_returns_success_status() -> None:
    client, store = _client_with_transport(None)

    with client:
        response = client.post(
            "/submissions",
            data={"identity": "b@x.com", "classification": "Fire"},
            files={"file": ("report.pdf", b"%PDF-1.7", PDF)},
        )

    assert response.status_code == 200
    assert response.text == "Application submitted, but notification delivery failed."
    assert len(store.rows("Applications")) == 1


@pytest.mark.integration
@pytest.mark.parametrize(
    ("data", "files", "status_code", "detail"),
    [
        ({}, {"file": ("a.pdf", b"x", PDF)}, 400, "missing identity"),
        ({"identity": "a@x.com"}, None, 400, "missing file"),
        ({"identity": "a@x.com"}, {"file": ("a.png", b"x", "image/png")}, 415, "Only PDF/DOC/DOCX files are allowed"),
        ({"identity": "a@x.com"}, {"file": ("a.pdf", b"x" * 2048, PDF)}, 413, "file too large"),
    ],
)
def test_invalid_submissions_are_rejected(
    data: dict[str, str],
    files: dict[str, tuple[str, bytes, str]] | None,
    status_code: int,
    detail: str,
) -> None:
    transport = RecordingEmailTransport()
    client, store = _client_with_transport(transport)

    with client:
        response = client.post("/submissions", data=data, files=files)

    assert response.status_code == status_code
    assert detail in response.text
    assert store.rows("Applications") == []
    assert transport.sent == []


@pytest.mark.integration
def test_record_store_failure_returns_server_error() -> None:
    transport = RecordingEmailTransport()
    client, store = _client_with_transport(transport)
    store.fail_writes = True

    with client:
        response = client.post(
            "/submissions",
            data={"identity": "a@x.com"},
            files={"file": ("a.pdf", b"%PDF", PDF)},
        )

    assert response.status_code == 500
    assert response.text == "Server error"
    assert transport.sent == []
