from __future__ import annotations

import html
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from app.domain.contracts import EmailTransport
from app.domain.dto import BuildNotificationCommand, BuildNotificationResult
from app.domain.errors import NotificationError
from app.domain.models import NotificationOutcome
from app.domain.uploads import safe_name

COMPONENT_ID_BUILD = "domain.notification.build"
COMPONENT_ID_SEND = "domain.notification.send"

logger = logging.getLogger(__name__)


def build_notification(cmd: BuildNotificationCommand) -> BuildNotificationResult:
    """Build the underwriter notification subject and HTML body."""
    classification = cmd.classification.strip()
    notes = cmd.notes.strip() if cmd.notes else ""
    notes_html = html.escape(notes).replace("\n", "<br>") if notes else "None provided"
    body = (
        "<p><strong>New application received</strong></p>\n"
        f"<p><strong>Submitted By:</strong> {html.escape(cmd.identity)}</p>\n"
        f"<p><strong>Class of Business:</strong> {html.escape(classification) or '(not provided)'}</p>\n"
        f"<p><strong>More Information:</strong><br>{notes_html}</p>\n"
        f'<p><strong>File:</strong> <a href="{html.escape(cmd.artifact.url, quote=True)}">'
        f"{html.escape(safe_name(cmd.artifact.filename))}</a></p>\n"
    )
    subject = f"New Application: {classification or 'Unspecified Class'}"
    return BuildNotificationResult(subject=subject, html=body)


@dataclass(frozen=True)
class TransportChain:
    """Ordered email transports; first success wins, else the last failure is raised."""

    transports: Sequence[EmailTransport]

    async def notify(self, *, recipients: list[str], subject: str, html: str) -> NotificationOutcome:
        if not recipients:
            return NotificationOutcome(sent=True, detail="no recipients")
        if not self.transports:
            raise NotificationError("no email transport configured")

        last_error: NotificationError | None = None
        for transport in self.transports:
            try:
                await transport.send_html(recipients=list(recipients), subject=subject, html=html)
            except NotificationError as exc:
                logger.warning(
                    "email transport failed: %s",
                    exc,
                    extra={"transport": transport.name, "error_code": "notification_failed"},
                )
                last_error = exc
                continue
            logger.info(
                "notification sent to %d recipient(s)",
                len(recipients),
                extra={"transport": transport.name},
            )
            return NotificationOutcome(
                sent=True,
                recipients=tuple(recipients),
                transport=transport.name,
                detail="sent",
            )

        if last_error is None:
            raise NotificationError("no email transport accepted the message")
        raise last_error
