"""Greeting, liveness and readiness routes."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.infrastructure.database import Database
from app.interfaces.deps import get_database

router = APIRouter(tags=["Health"])

GREETING = "Hello from the users API"


@router.get("/greeting")
@router.get("/saludo", include_in_schema=False)
def greeting():
    """Reachability check; never touches the database."""
    return {"message": GREETING}


@router.get("/health/ready")
def readiness(database: Database = Depends(get_database)):
    if not database.ping():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {"status": "ready", "checks": {"database": "healthy"}}


# Mounted at the root, outside the API prefix.
liveness_router = APIRouter(tags=["Health"])


@liveness_router.get("/health", include_in_schema=False)
def liveness():
    return {"status": "healthy"}
