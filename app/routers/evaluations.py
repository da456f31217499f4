"""
Evaluations Router - Best Outgoing Student Award Portal
app/routers/evaluations.py

Faculty review: preview the ranking with unsaved overlays applied, and
batch-save overlays for the changed applicants.
"""

from fastapi import APIRouter, Depends, status

from app.core.dependencies import get_applicant_repository, get_ranking_weights, require_admin
from app.core.exceptions import EntityNotFoundException, EvaluationSaveException
from app.models.evaluation import EvaluationBatchRequest, SaveReport
from app.models.ranking import RankingResponse
from app.models.weights import RankingWeights
from app.repositories.applicant_repository import ApplicantRepository
from app.routers.applicants import raise_applicant_not_found, raise_error
from app.routers.rankings import load_session
from app.scoring.overrides import EvaluationSession
from app.services.export import department_counts

router = APIRouter(
    prefix="/api/v1/admin",
    tags=["Evaluations"],
    dependencies=[Depends(require_admin)],
)


def apply_overlays(session: EvaluationSession, request: EvaluationBatchRequest) -> None:
    for overlay in request.overlays:
        try:
            session.apply(overlay)
        except EntityNotFoundException as e:
            raise_applicant_not_found(e.entity_id)


@router.post(
    "/evaluations/preview",
    response_model=RankingResponse,
    summary="Preview ranking with overlays",
    description="Applies faculty overlays in memory and returns the re-sorted ranking. Nothing is persisted.",
)
async def preview_evaluations(
    request: EvaluationBatchRequest,
    repo: ApplicantRepository = Depends(get_applicant_repository),
    weights: RankingWeights = Depends(get_ranking_weights),
) -> RankingResponse:
    session = load_session(repo, weights)
    apply_overlays(session, request)
    ranked = session.ranked()
    return RankingResponse(
        entries=ranked,
        total=len(ranked),
        departments=department_counts(ranked),
        has_unsaved_changes=session.has_unsaved_changes,
    )


@router.post(
    "/evaluations",
    response_model=SaveReport,
    summary="Save faculty evaluations",
    description="Persists score, verified flag and discards for each changed applicant. "
                "Each applicant is updated independently; failures are reported.",
    responses={500: {"description": "One or more evaluations could not be saved"}},
)
async def save_evaluations(
    request: EvaluationBatchRequest,
    repo: ApplicantRepository = Depends(get_applicant_repository),
    weights: RankingWeights = Depends(get_ranking_weights),
) -> SaveReport:
    session = load_session(repo, weights)
    apply_overlays(session, request)

    try:
        report = session.save(repo)
    except EvaluationSaveException as e:
        raise_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "EVALUATION_SAVE_FAILED",
            "Failed to save changes",
            {"saved": [], "failed": e.failed},
        )

    if not report.ok:
        raise_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "EVALUATION_SAVE_FAILED",
            f"Failed to save {len(report.failed)} evaluation(s)",
            report.model_dump(),
        )
    return report
