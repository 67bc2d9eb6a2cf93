from __future__ import annotations

from cms.config.settings import Settings
from cms.infrastructure.email.models import EmailService
from cms.infrastructure.email.providers.logging_provider import LoggingEmailService
from cms.infrastructure.email.providers.smtp_provider import SMTPEmailService

PROVIDERS = {
    "logging": lambda settings: LoggingEmailService(),
    "smtp": SMTPEmailService.from_settings,
}


def build_email_service(settings: Settings) -> EmailService:
    try:
        factory = PROVIDERS[settings.email_provider.lower()]
    except KeyError as exc:
        raise RuntimeError(f"Unknown email provider: {settings.email_provider}") from exc
    return factory(settings)
