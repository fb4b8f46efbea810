"""Liveness and readiness for the admission API.

GET /health/ answers whenever the process is up; /health/ready also
needs the database.
"""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from order_admission.infrastructure import database

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def liveness(request: Request):
    return {"status": "healthy", "version": request.app.version}


@router.get("/ready")
async def readiness():
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "checks": {"database": "unreachable"}},
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
