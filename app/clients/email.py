"""Outbound email transports: Brevo HTTP API and authenticated SMTP."""

from __future__ import annotations

import asyncio
import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr

import httpx

from app.domain.errors import NotificationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30


class BrevoApiTransport:
    """Transactional email over the Brevo HTTP API.

    One request addresses every recipient.
    """

    name = "brevo-api"

    def __init__(
        self,
        *,
        api_key: str,
        sender_email: str,
        api_url: str = "https://api.brevo.com/v3/smtp/email",
        sender_name: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.api_url = api_url
        self.sender_email = sender_email
        self.sender_name = sender_name
        self._transport = transport

    def build_payload(self, *, recipients: list[str], subject: str, html: str) -> dict[str, object]:
        sender: dict[str, str] = {"email": self.sender_email}
        if self.sender_name:
            sender["name"] = self.sender_name
        return {
            "sender": sender,
            "to": [{"email": address} for address in recipients],
            "subject": subject,
            "htmlContent": html,
        }

    async def send_html(self, *, recipients: list[str], subject: str, html: str) -> None:
        payload = self.build_payload(recipients=recipients, subject=subject, html=html)
        try:
            async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT_SECONDS, transport=self._transport) as client:
                response = await client.post(
                    self.api_url,
                    json=payload,
                    headers={"api-key": self.api_key, "accept": "application/json"},
                )
        except httpx.HTTPError as exc:
            raise NotificationError(f"Brevo API request failed: {exc}") from exc

        if not response.is_success:
            raise NotificationError(
                f"Brevo API returned {response.status_code}: {response.text[:200]}"
            )


class SmtpTransport:
    """Authenticated SMTP submission with STARTTLS.

    Sends one message per recipient; sends run concurrently in worker threads
    and all of them settle before the result is reported.
    """

    name = "smtp"

    def __init__(
        self,
        *,
        host: str,
        port: int,
        username: str,
        password: str,
        from_address: str,
        from_name: str | None = None,
        use_tls: bool = True,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_address = from_address
        self.from_name = from_name
        self.use_tls = use_tls

    def build_message(self, *, recipient: str, subject: str, html: str) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = formataddr((self.from_name, self.from_address)) if self.from_name else self.from_address
        message["To"] = recipient
        message.set_content("This message requires an HTML-capable mail client.")
        message.add_alternative(html, subtype="html")
        return message

    async def send_html(self, *, recipients: list[str], subject: str, html: str) -> None:
        results = await asyncio.gather(
            *(
                asyncio.to_thread(self._send_one, recipient=recipient, subject=subject, html=html)
                for recipient in recipients
            ),
            return_exceptions=True,
        )
        failed = [
            (recipient, result)
            for recipient, result in zip(recipients, results)
            if isinstance(result, BaseException)
        ]
        for recipient, error in failed:
            logger.warning(
                "smtp send failed for %s: %s",
                recipient,
                error,
                extra={"transport": self.name, "error_code": "notification_failed"},
            )
        if failed:
            addresses = ", ".join(recipient for recipient, _ in failed)
            raise NotificationError(
                f"SMTP delivery failed for {len(failed)} of {len(recipients)} recipients: {addresses}"
            ) from failed[0][1]

    def _send_one(self, *, recipient: str, subject: str, html: str) -> None:
        message = self.build_message(recipient=recipient, subject=subject, html=html)
        with smtplib.SMTP(self.host, self.port, timeout=DEFAULT_TIMEOUT_SECONDS) as server:
            if self.use_tls:
                server.starttls()
            server.login(self.username, self.password)
            server.send_message(message)
