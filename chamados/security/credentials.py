from __future__ import annotations

import hmac
from dataclasses import dataclass
from typing import Protocol


@dataclass(slots=True, frozen=True)
class Identity:
    """Authenticated user as carried inside a bearer token."""

    email: str
    name: str


class CredentialVerifier(Protocol):
    def verify(self, email: str | None, password: str | None) -> Identity | None:
        ...


class StaticCredentialStore:
    """Credential verifier backed by a single configured account."""

    def __init__(self, *, email: str, password: str, name: str) -> None:
        self._email = email
        self._password = password
        self._identity = Identity(email=email, name=name)

    def verify(self, email: str | None, password: str | None) -> Identity | None:
        if email is None or password is None:
            return None
        email_ok = hmac.compare_digest(email.encode(), self._email.encode())
        password_ok = hmac.compare_digest(password.encode(), self._password.encode())
        if email_ok and password_ok:
            return self._identity
        return None
