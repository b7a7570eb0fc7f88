from __future__ import annotations

from passlib.context import CryptContext
from passlib.exc import UnknownHashError

from mediscan.application.ports.password_hasher_port import PasswordHasherPort


class PasswordHasher(PasswordHasherPort):
    def __init__(self, *, schemes: tuple[str, ...] = ("argon2", "bcrypt")):
        # The first scheme hashes new passwords; the rest are still verified and flagged for rehash.
        self._ctx = CryptContext(schemes=list(schemes), deprecated="auto")

    def hash(self, plain_password: str) -> str:
        return self._ctx.hash(plain_password)

    def verify(self, plain_password: str, password_hash: str) -> bool:
        try:
            return self._ctx.verify(plain_password, password_hash)
        except (UnknownHashError, ValueError):
            return False

    def verify_and_update(self, plain_password: str, password_hash: str) -> tuple[bool, str | None]:
        try:
            verified, replacement_hash = self._ctx.verify_and_update(plain_password, password_hash)
        except (UnknownHashError, ValueError):
            return False, None
        return bool(verified), replacement_hash

    def dummy_verify(self) -> None:
        self._ctx.dummy_verify()
