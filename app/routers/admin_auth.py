"""
Admin Auth Router - Best Outgoing Student Award Portal
app/routers/admin_auth.py

Password login that issues the signed admin session cookie, and logout.
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from app.config import get_settings
from app.core.security import check_admin_password, create_admin_token
from app.routers.applicants import raise_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/admin", tags=["Admin Auth"])


class AdminLoginRequest(BaseModel):
    password: str = Field(..., min_length=1)


@router.post(
    "/login",
    summary="Admin login",
    description="Verifies the admin password and sets an httpOnly session cookie.",
    responses={
        401: {"description": "Invalid password"},
        503: {"description": "Admin password not configured"},
    },
)
async def admin_login(body: AdminLoginRequest) -> JSONResponse:
    settings = get_settings()
    if settings.ADMIN_PASSWORD is None:
        logger.error("ADMIN_PASSWORD is not set")
        raise_error(status.HTTP_503_SERVICE_UNAVAILABLE, "ADMIN_NOT_CONFIGURED", "Admin access is not configured")

    if not check_admin_password(body.password):
        raise_error(status.HTTP_401_UNAUTHORIZED, "INVALID_PASSWORD", "Invalid password")

    response = JSONResponse(content={"success": True})
    response.set_cookie(
        key=settings.ADMIN_COOKIE_NAME,
        value=create_admin_token(),
        httponly=True,
        secure=settings.APP_ENV == "production",
        samesite="lax",
        max_age=settings.ADMIN_TOKEN_TTL_HOURS * 60 * 60,
        path="/",
    )
    return response


@router.delete("/login", summary="Admin logout")
async def admin_logout() -> JSONResponse:
    response = JSONResponse(content={"success": True})
    response.delete_cookie(key=get_settings().ADMIN_COOKIE_NAME, path="/")
    return response
