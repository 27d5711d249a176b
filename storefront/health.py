"""
Health and root endpoints shared by every service
"""
from datetime import datetime, timezone
from typing import Callable, Optional

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront import __version__
from storefront.database import get_db


def _no_checks() -> dict:
    return {}


def database_status(db: Session) -> str:
    try:
        db.execute(text("SELECT 1"))
        return "healthy"
    except SQLAlchemyError as e:
        return f"unhealthy: {e.__class__.__name__}"


def create_health_router(service_name: str, extra_checks: Optional[Callable[..., dict]] = None) -> APIRouter:
    """
    Build the /health and / routes for a service

    ``extra_checks`` is a dependency returning additional component
    statuses; they are reported but do not affect the overall status.
    """
    router = APIRouter(tags=["health"])

    @router.get("/health")
    def health_check(
        db: Session = Depends(get_db),
        checks: dict = Depends(extra_checks or _no_checks)
    ):
        """Service status and database connectivity"""
        db_status = database_status(db)
        return {
            "service": service_name,
            "status": "healthy" if db_status == "healthy" else "unhealthy",
            "database": db_status,
            **checks,
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    @router.get("/")
    def root():
        return {
            "service": service_name,
            "version": __version__,
            "docs": "/docs"
        }

    return router
