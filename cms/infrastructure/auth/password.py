from __future__ import annotations

import secrets
import string

from passlib.context import CryptContext

_ALPHABET = string.ascii_letters + string.digits


class PasswordHasher:
    def __init__(self, schemes: tuple[str, ...] = ("bcrypt",)) -> None:
        self._pwd_context = CryptContext(schemes=schemes, deprecated="auto")

    def hash(self, password: str) -> str:
        return self._pwd_context.hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        return self._pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def generate(length: int) -> str:
        return "".join(secrets.choice(_ALPHABET) for _ in range(length))
