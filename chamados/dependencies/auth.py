from collections.abc import Callable
from datetime import datetime, timezone
from typing import Annotated

from fastapi import Depends, HTTPException, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from chamados.security import (
    BusinessDayGate,
    CredentialVerifier,
    Identity,
    InvalidTokenError,
    MissingTokenError,
    OutsideBusinessHoursError,
    TokenService,
)

Clock = Callable[[], datetime]

bearer_scheme = HTTPBearer(auto_error=False)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def get_clock() -> Clock:
    """Clock used by the access gates; overridden in tests to pin the weekday."""

    return utcnow


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_credential_verifier(request: Request) -> CredentialVerifier:
    return request.app.state.credential_verifier


def get_business_day_gate(request: Request) -> BusinessDayGate:
    return request.app.state.business_day_gate


async def require_business_day(
    gate: Annotated[BusinessDayGate, Depends(get_business_day_gate)],
    clock: Annotated[Clock, Depends(get_clock)],
) -> None:
    try:
        gate.check(clock())
    except OutsideBusinessHoursError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc


async def require_token(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> Identity:
    cached = getattr(request.state, "user", None)
    if isinstance(cached, Identity):
        return cached

    token = credentials.credentials if credentials is not None else None
    try:
        identity = tokens.verify(token)
    except MissingTokenError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except InvalidTokenError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc

    request.state.user = identity
    return identity


# Order is part of the contract: weekend requests are refused before the token is looked at.
ACCESS_GATES = [Depends(require_business_day), Depends(require_token)]
