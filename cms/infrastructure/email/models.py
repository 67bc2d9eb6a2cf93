from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(slots=True)
class EmailMessage:
    """A rendered notification ready to hand to a provider."""

    subject: str
    to: list[str] = field(default_factory=list)
    text: str | None = None
    html: str | None = None
    from_email: str | None = None
    from_name: str | None = None

    @property
    def sender(self) -> str | None:
        if not self.from_email:
            return None
        return f"{self.from_name} <{self.from_email}>" if self.from_name else self.from_email


class EmailService(Protocol):
    async def send(self, message: EmailMessage) -> None: ...
