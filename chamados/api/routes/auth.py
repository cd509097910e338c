from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from chamados.dependencies.auth import get_credential_verifier, get_token_service
from chamados.dependencies.forms import read_body
from chamados.security import CredentialVerifier, TokenService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


class TokenResponse(BaseModel):
    token: str


def _text(value: Any) -> str | None:
    return value if isinstance(value, str) else None


@router.post("/logar", response_model=TokenResponse, summary="Authenticate and issue a bearer token")
async def login(
    body: Annotated[Mapping[str, Any], Depends(read_body)],
    verifier: Annotated[CredentialVerifier, Depends(get_credential_verifier)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> TokenResponse:
    """Accept ``email`` and ``senha`` as JSON or form fields; anything but the configured pair is a 401."""

    email = _text(body.get("email"))
    identity = verifier.verify(email, _text(body.get("senha")))
    if identity is None:
        logger.warning("Rejected login for %s", email)
        raise HTTPException(status_code=401, detail="Credenciais inválidas")
    return TokenResponse(token=tokens.issue(identity))
