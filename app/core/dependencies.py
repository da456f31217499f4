"""
Dependencies - Best Outgoing Student Award Portal
app/core/dependencies.py

FastAPI dependency injection for repositories, services and admin auth.
"""

from datetime import datetime, timezone
from functools import lru_cache

from fastapi import HTTPException, Request, status

from app.config import get_settings
from app.core.security import verify_admin_token
from app.models.weights import RankingWeights
from app.repositories.applicant_repository import ApplicantRepository
from app.services.application_service import ApplicationService


@lru_cache()
def get_applicant_repository() -> ApplicantRepository:
    """Get cached ApplicantRepository instance."""
    return ApplicantRepository()


def get_application_service() -> ApplicationService:
    return ApplicationService(get_applicant_repository())


def get_ranking_weights() -> RankingWeights:
    """Category weights from settings."""
    return get_settings().ranking_weights


def require_admin(request: Request) -> None:
    """Reject requests without a valid admin session cookie."""
    token = request.cookies.get(get_settings().ADMIN_COOKIE_NAME)
    if not verify_admin_token(token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error_code": "UNAUTHORIZED",
                "message": "Admin login required",
                "details": None,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )
