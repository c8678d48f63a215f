import asyncio

import pytest

from app.clients.stub import RecordingEmailTransport
from app.domain.dto import BuildNotificationCommand
from app.domain.errors import NotificationError
from app.domain.models import UploadedArtifact
from app.domain.use_cases.notify import TransportChain, build_notification


@pytest.mark.unit
def test_empty_recipient_list_is_a_no_op_success() -> None:
    primary = RecordingEmailTransport(name="primary", fail=True)
    chain = TransportChain(transports=[primary])

    outcome = asyncio.run(chain.notify(recipients=[], subject="s", html="<p>h</p>"))

    assert outcome.sent is True
    assert primary.sent == []


@pytest.mark.unit
def test_primary_success_skips_fallback() -> None:
    primary = RecordingEmailTransport(name="primary")
    secondary = RecordingEmailTransport(name="secondary")
    chain = TransportChain(transports=[primary, secondary])

    outcome = asyncio.run(chain.notify(recipients=["a@x.com", "b@x.com"], subject="s", html="h"))

    assert outcome.transport == "primary"
    assert primary.sent == [(("a@x.com", "b@x.com"), "s", "h")]
    assert secondary.sent == []


@pytest.mark.unit
def test_primary_failure_falls_back_once() -> None:
    primary = RecordingEmailTransport(name="primary", fail=True)
    secondary = RecordingEmailTransport(name="secondary")
    chain = TransportChain(transports=[primary, secondary])

    outcome = asyncio.run(chain.notify(recipients=["a@x.com"], subject="s", html="h"))

    assert outcome.sent is True
    assert outcome.transport == "secondary"
    assert len(secondary.sent) == 1


@pytest.mark.unit
def test_primary_failure_without_fallback_is_surfaced() -> None:
    chain = TransportChain(transports=[RecordingEmailTransport(name="primary", fail=True)])

    with pytest.raises(NotificationError, match="primary transport failed"):
        asyncio.run(chain.notify(recipients=["a@x.com"], subject="s", html="h"))


@pytest.mark.unit
def test_last_failure_is_raised_when_all_transports_fail() -> None:
    chain = TransportChain(
        transports=[
            RecordingEmailTransport(name="primary", fail=True),
            RecordingEmailTransport(name="secondary", fail=True),
        ]
    )

    with pytest.raises(NotificationError, match="secondary transport failed"):
        asyncio.run(chain.notify(recipients=["a@x.com"], subject="s", html="h"))


@pytest.mark.unit
def test_no_configured_transport_is_a_failure() -> None:
    with pytest.raises(NotificationError, match="no email transport configured"):
        asyncio.run(TransportChain(transports=[]).notify(recipients=["a@x.com"], subject="s", html="h"))


@pytest.mark.unit
def test_build_notification_escapes_values_and_renders_notes() -> None:
    result = build_notification(
        BuildNotificationCommand(
            identity="a@x.com",
            classification="Fire & Theft",
            notes="line one\n<b>line two</b>",
            artifact=UploadedArtifact(
                filename="my report?.pdf",
                content_type="application/pdf",
                url="https://bucket.example/applications/2026-10/t-my report_.pdf",
            ),
        )
    )

    assert result.subject == "New Application: Fire & Theft"
    assert "Fire &amp; Theft" in result.html
    assert "line one<br>&lt;b&gt;line two&lt;/b&gt;" in result.html
    assert "my report_.pdf</a>" in result.html


@pytest.mark.unit
def test_build_notification_placeholders_for_missing_values() -> None:
    result = build_notification(
        BuildNotificationCommand(
            identity="a@x.com",
            classification="",
            notes="",
            artifact=UploadedArtifact(filename="a.pdf", content_type="application/pdf", url="https://b/a.pdf"),
        )
    )

    assert result.subject == "New Application: Unspecified Class"
    assert "(not provided)" in result.html
    assert "None provided" in result.html
