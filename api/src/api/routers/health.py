"""Health check."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

router = APIRouter()


@router.get("/health")
async def health_check():
    return {"status": "ok", "service": "legalnotices-api"}


@router.get("/health/ready")
async def readiness_check():
    try:
        from legalnotices.database import get_session
        from legalnotices.models import LegalSetting
        from sqlalchemy import func, select

        async with get_session() as session:
            await session.execute(select(func.count()).select_from(LegalSetting))
        return {"status": "ready"}
    except Exception as exc:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "error": str(exc)},
        )
