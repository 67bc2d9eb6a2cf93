from __future__ import annotations

from enum import Enum


class PasswordGenMethod(str, Enum):
    GENERATE = "g"
    SPECIFY = "spec"
    USER_EMAIL_SPECIFY = "user_email_specify"
