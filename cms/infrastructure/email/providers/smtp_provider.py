from __future__ import annotations

import asyncio
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from cms.config.settings import Settings
from cms.infrastructure.email.models import EmailMessage, EmailService


def _build_mime(message: EmailMessage) -> MIMEMultipart:
    msg = MIMEMultipart("alternative")
    msg["Subject"] = message.subject
    if message.sender:
        msg["From"] = message.sender
    msg["To"] = ", ".join(message.to)
    if message.text:
        msg.attach(MIMEText(message.text, "plain", "utf-8"))
    if message.html:
        msg.attach(MIMEText(message.html, "html", "utf-8"))
    return msg


class SMTPEmailService(EmailService):
    def __init__(
        self,
        *,
        host: str,
        port: int = 587,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        use_ssl: bool = False,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.use_ssl = use_ssl

    @classmethod
    def from_settings(cls, settings: Settings) -> SMTPEmailService:
        if not settings.smtp_host:
            raise RuntimeError("SMTP host not configured")
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password.get_secret_value() if settings.smtp_password else None,
            use_tls=settings.smtp_use_tls,
            use_ssl=settings.smtp_use_ssl,
        )

    def _login(self, server: smtplib.SMTP) -> None:
        if self.username and self.password:
            server.login(self.username, self.password)

    async def send(self, message: EmailMessage) -> None:
        mime = _build_mime(message)
        recipients = list(message.to)

        def _send_sync():
            if self.use_ssl:
                context = ssl.create_default_context()
                with smtplib.SMTP_SSL(self.host, self.port, context=context) as server:
                    self._login(server)
                    server.sendmail(message.from_email or "", recipients, mime.as_string())
            else:
                with smtplib.SMTP(self.host, self.port) as server:
                    server.ehlo()
                    if self.use_tls:
                        server.starttls(context=ssl.create_default_context())
                        server.ehlo()
                    self._login(server)
                    server.sendmail(message.from_email or "", recipients, mime.as_string())

        await asyncio.to_thread(_send_sync)
