import logging

from fastapi import APIRouter, Request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ping", tags=["health"])


@router.get("", summary="Public health probe")
async def ping(request: Request) -> dict[str, str]:
    database = getattr(request.app.state, "database", None)
    if database is None:
        return {"status": "ok", "database": "unconfigured"}
    try:
        await database.ping()
    except Exception as exc:  # noqa: BLE001
        logger.warning("Database ping failed: %s", exc)
        return {"status": "ok", "database": "down"}
    return {"status": "ok", "database": "up"}
