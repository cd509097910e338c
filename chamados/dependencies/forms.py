from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fastapi import HTTPException, Request


async def read_body(request: Request) -> Mapping[str, Any]:
    """Return the request fields from a JSON object or a multipart/urlencoded form.

    An empty body reads as no fields. Form values keep their raw type, so uploads
    come back as ``UploadFile``.
    """

    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        if not (await request.body()).strip():
            return {}
        try:
            body: Any = await request.json()
        except ValueError as exc:
            raise HTTPException(status_code=400, detail="Corpo da requisição inválido") from exc
        if not isinstance(body, dict):
            raise HTTPException(status_code=400, detail="Corpo da requisição inválido")
        return body
    return await request.form()
