"""
Applicant Router - Best Outgoing Student Award Portal
app/routers/applicants.py

Public endpoints: application submission, applicant profile with score
breakdown, and the submission deadline. Also hosts the shared error
schema and request-validation handler used by every router.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.core.dependencies import get_applicant_repository, get_application_service, get_ranking_weights
from app.core.exceptions import (
    DatabaseConnectionException,
    DuplicateEntityException,
    RepositoryException,
    SubmissionClosedException,
)
from app.models.applicant import ApplicationSubmission
from app.models.weights import RankingWeights
from app.repositories.applicant_repository import ApplicantRepository
from app.scoring.applicant_scorer import calculate_score
from app.services.application_service import ApplicationService, parse_deadline

router = APIRouter(prefix="/api/v1", tags=["Applicants"])



#  Validation Error Messages


FIELD_MESSAGES = {
    "password": {
        "missing": "Password is required",
        "string_too_short": "Password is required",
    },
}

DEFAULT_MESSAGES = {
    "missing": "Field '{field}' is required",
    "string_too_short": "Field '{field}' is too short",
    "string_too_long": "Field '{field}' is too long",
    "less_than_equal": "Field '{field}' exceeds maximum allowed value",
    "greater_than_equal": "Field '{field}' is below minimum allowed value",
    "string_type": "Field '{field}' must be a string",
    "float_type": "Field '{field}' must be a number",
    "float_parsing": "Field '{field}' must be a valid number",
    "finite_number": "Field '{field}' must be a finite number",
    "bool_type": "Field '{field}' must be true or false",
    "bool_parsing": "Field '{field}' must be true or false",
    "list_type": "Field '{field}' must be a list",
    "json_invalid": "Malformed JSON request body",
}


def get_validation_message(field: str, error_type: str) -> str:
    if field in FIELD_MESSAGES:
        for key in FIELD_MESSAGES[field]:
            if key in error_type:
                return FIELD_MESSAGES[field][key]
    for key, template in DEFAULT_MESSAGES.items():
        if key in error_type:
            return template.format(field=field)
    return f"Invalid value for field '{field}'"


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error_code": "VALIDATION_ERROR",
                "message": "Request validation failed",
                "details": None,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )
    err = errors[0]
    error_type = err.get("type", "")
    loc = err.get("loc", [])
    if "json_invalid" in error_type:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error_code": "INVALID_REQUEST",
                "message": "Malformed JSON request body",
                "details": None,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )
    field = ".".join(str(l) for l in loc if l != "body")
    if error_type == "value_error":
        # Model-level checks carry their own message
        message = str(err.get("msg", "")).removeprefix("Value error, ")
    else:
        message = get_validation_message(field, error_type)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error_code": "VALIDATION_ERROR",
            "message": message,
            "details": {"field": field, "type": error_type} if field else None,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )



#  Schemas


class ErrorResponse(BaseModel):
    error_code: str
    message: str
    details: Optional[dict] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class SubmissionResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool
    message: str
    register_number: str


class ApplicantScoreResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    register_number: str
    name: str
    department: str
    computed_score: float
    effective_score: float
    faculty_score: Optional[float] = None
    verified: bool = False
    breakdown: Dict[str, float]
    application: Dict[str, Any]


class DeadlineResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    deadline: Optional[str] = None
    is_open: bool = True



#  Exception Helpers


def raise_error(status_code: int, error_code: str, message: str, details: Optional[dict] = None):
    raise HTTPException(
        status_code=status_code,
        detail=ErrorResponse(error_code=error_code, message=message, details=details).model_dump(mode="json"),
    )

def raise_applicant_not_found(reg_no: str):
    raise_error(status.HTTP_404_NOT_FOUND, "APPLICANT_NOT_FOUND", f"No application found for {reg_no}")

def raise_storage_error(exc: RepositoryException):
    if isinstance(exc, DatabaseConnectionException):
        raise_error(status.HTTP_503_SERVICE_UNAVAILABLE, "STORAGE_UNAVAILABLE", "Application storage is unavailable")
    raise_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "STORAGE_ERROR", str(exc))



#  Routes


@router.post(
    "/applications",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit an application",
    description="Checks the deadline, validates the application and rejects duplicate register numbers, emails and mobile numbers.",
)
async def submit_application(
    submission: ApplicationSubmission,
    service: ApplicationService = Depends(get_application_service),
) -> SubmissionResponse:
    try:
        record = service.submit(submission)
    except SubmissionClosedException:
        raise_error(status.HTTP_403_FORBIDDEN, "APPLICATIONS_CLOSED", "Applications are closed.")
    except DuplicateEntityException as e:
        raise_error(status.HTTP_409_CONFLICT, "DUPLICATE_APPLICATION", e.message, {"field": e.field})
    except RepositoryException as e:
        raise_storage_error(e)

    return SubmissionResponse(
        success=True,
        message="Application submitted successfully! Your profile is now live.",
        register_number=record.register_number,
    )


@router.get(
    "/applicants/{reg_no}",
    response_model=ApplicantScoreResponse,
    summary="Get an applicant with score breakdown",
)
async def get_applicant(
    reg_no: str,
    repo: ApplicantRepository = Depends(get_applicant_repository),
    weights: RankingWeights = Depends(get_ranking_weights),
) -> ApplicantScoreResponse:
    try:
        record = repo.get_by_register_number(reg_no)
    except RepositoryException as e:
        raise_storage_error(e)
    if record is None:
        raise_applicant_not_found(reg_no)

    result = calculate_score(record, weights, record.discarded_items)
    effective = record.faculty_score if record.faculty_score is not None else result.total_score
    return ApplicantScoreResponse(
        register_number=record.register_number,
        name=record.name,
        department=record.department,
        computed_score=result.total_score,
        effective_score=effective,
        faculty_score=record.faculty_score,
        verified=record.verified,
        breakdown=result.breakdown,
        application=record.to_json_payload(),
    )


@router.get(
    "/deadline",
    response_model=DeadlineResponse,
    summary="Get the submission deadline",
)
async def get_deadline(
    repo: ApplicantRepository = Depends(get_applicant_repository),
) -> DeadlineResponse:
    try:
        value = repo.get_deadline()
    except RepositoryException as e:
        raise_storage_error(e)
    deadline = parse_deadline(value)
    return DeadlineResponse(
        deadline=value,
        is_open=deadline is None or datetime.now(timezone.utc) <= deadline,
    )
