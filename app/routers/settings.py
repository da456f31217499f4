"""
Settings Router - Best Outgoing Student Award Portal
app/routers/settings.py

Admin-managed portal settings (submission deadline).
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, field_validator

from app.core.dependencies import get_applicant_repository, require_admin
from app.core.exceptions import RepositoryException
from app.repositories.applicant_repository import ApplicantRepository
from app.routers.applicants import raise_storage_error
from app.services.application_service import parse_deadline

router = APIRouter(
    prefix="/api/v1/admin",
    tags=["Settings"],
    dependencies=[Depends(require_admin)],
)


class PortalSettings(BaseModel):
    deadline: Optional[str] = None

    @field_validator("deadline")
    @classmethod
    def validate_deadline(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        value = value.strip()
        if parse_deadline(value) is None:
            raise ValueError("Deadline must be an ISO date or datetime")
        return value


@router.get("/settings", response_model=PortalSettings, summary="Get portal settings")
async def get_portal_settings(
    repo: ApplicantRepository = Depends(get_applicant_repository),
) -> PortalSettings:
    try:
        return PortalSettings.model_construct(deadline=repo.get_deadline())
    except RepositoryException as e:
        raise_storage_error(e)


@router.post(
    "/settings",
    response_model=PortalSettings,
    status_code=status.HTTP_200_OK,
    summary="Update portal settings",
    description="An empty deadline reopens submissions indefinitely.",
)
async def update_portal_settings(
    body: PortalSettings,
    repo: ApplicantRepository = Depends(get_applicant_repository),
) -> PortalSettings:
    try:
        repo.set_deadline(body.deadline or "")
    except RepositoryException as e:
        raise_storage_error(e)
    return body
