from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from .credentials import Identity


class TokenError(RuntimeError):
    """Base error for bearer token problems."""


class MissingTokenError(TokenError):
    """Raised when no token was supplied."""


class InvalidTokenError(TokenError):
    """Raised when a token is malformed, tampered with or expired."""


class TokenService:
    """Issue and verify signed bearer tokens carrying an :class:`Identity`."""

    def __init__(
        self,
        secret_key: str,
        *,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(days=9999),
    ) -> None:
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._lifetime = lifetime

    def issue(self, identity: Identity, *, now: datetime | None = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        claims: dict[str, Any] = {
            "email": identity.email,
            "name": identity.name,
            "exp": issued_at + self._lifetime,
        }
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str | None) -> Identity:
        if not token:
            raise MissingTokenError("Token não encontrado")

        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except JWTError as exc:
            raise InvalidTokenError("Token expirado") from exc

        email = payload.get("email")
        name = payload.get("name")
        if not isinstance(email, str) or not isinstance(name, str):
            raise InvalidTokenError("Token expirado")
        return Identity(email=email, name=name)
