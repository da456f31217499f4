"""
Rankings Router - Best Outgoing Student Award Portal
app/routers/rankings.py

Admin ranking dashboard data and CSV export. Filtering by search text or
department never renumbers: every entry keeps its rank in the full list.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from app.core.dependencies import get_applicant_repository, get_ranking_weights, require_admin
from app.core.exceptions import RepositoryException
from app.models.ranking import RankingResponse
from app.models.weights import RankingWeights
from app.repositories.applicant_repository import ApplicantRepository
from app.routers.applicants import raise_storage_error
from app.scoring.overrides import EvaluationSession
from app.services.export import EXPORT_FILENAME, department_counts, filter_entries, rankings_to_csv

router = APIRouter(
    prefix="/api/v1/admin",
    tags=["Rankings"],
    dependencies=[Depends(require_admin)],
)


def load_session(repo: ApplicantRepository, weights: RankingWeights) -> EvaluationSession:
    try:
        return EvaluationSession(repo.get_all(), weights)
    except RepositoryException as e:
        raise_storage_error(e)


@router.get(
    "/rankings",
    response_model=RankingResponse,
    summary="Ranked applicants",
    description="Applicants ordered by effective score. Search matches name or register number.",
)
async def get_rankings(
    search: Optional[str] = Query(None, description="Name or register number fragment"),
    department: Optional[str] = Query(None, description="Exact department name"),
    repo: ApplicantRepository = Depends(get_applicant_repository),
    weights: RankingWeights = Depends(get_ranking_weights),
) -> RankingResponse:
    ranked = load_session(repo, weights).ranked()
    entries = filter_entries(ranked, search, department)
    return RankingResponse(
        entries=entries,
        total=len(entries),
        departments=department_counts(ranked),
    )


@router.get(
    "/rankings/export",
    summary="Export rankings as CSV",
    response_class=Response,
)
async def export_rankings(
    department: Optional[str] = Query(None),
    repo: ApplicantRepository = Depends(get_applicant_repository),
    weights: RankingWeights = Depends(get_ranking_weights),
) -> Response:
    ranked = load_session(repo, weights).ranked()
    csv_text = rankings_to_csv(filter_entries(ranked, department=department))
    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )
