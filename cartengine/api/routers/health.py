# cartengine/api/routers/health.py
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import sessionmaker

from cartengine.data.database import check_db, get_session_factory

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
def health_check():
    return {"status": "healthy", "service": "cartengine"}


@router.get("/ready")
def readiness_check(session_factory: sessionmaker = Depends(get_session_factory)):
    """Readiness probe, 503 while the database is unreachable."""
    if not check_db(session_factory.kw.get("bind")):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
