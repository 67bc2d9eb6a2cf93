from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4


@dataclass(slots=True)
class OneTimeToken:
    """
    One-time use token for sensitive operations such as a password change link.
    Invalidated after first use or once ``expires_at`` has passed.
    """

    id: UUID
    token: str
    user_id: int
    purpose: str  # 'password_change', ...
    is_used: bool = False
    used_at: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    expires_at: datetime | None = None
    extra_data: dict | None = None

    @classmethod
    def create(
        cls,
        *,
        token: str,
        user_id: int,
        purpose: str,
        expires_in_minutes: int | None = None,
        extra_data: dict | None = None,
    ) -> OneTimeToken:
        now = datetime.now(timezone.utc)
        expires_at = None
        if expires_in_minutes is not None:
            expires_at = now + timedelta(minutes=expires_in_minutes)
        return cls(
            id=uuid4(),
            token=token,
            user_id=user_id,
            purpose=purpose,
            created_at=now,
            expires_at=expires_at,
            extra_data=extra_data or {},
        )

    def is_valid(self) -> bool:
        if self.is_used:
            return False
        if self.expires_at is not None and datetime.now(timezone.utc) > self.expires_at:
            return False
        return True
