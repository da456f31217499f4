# app/scoring/ranker.py
"""
Applicant Ranker
----------------
Scores every applicant independently and orders them by descending total.

Ties on total score are broken by register number (ascending) so the order
never depends on the order rows came back from storage. Ranks are 1-based
positions in the sorted sequence and are never stored.
"""
import structlog
from typing import Iterable, List

from app.models.applicant import ApplicantRecord
from app.models.ranking import RankedEntry
from app.scoring.applicant_scorer import ApplicantScorer, WeightsLike

logger = structlog.get_logger(__name__)


def ranking_key(entry: RankedEntry):
    return (-entry.total_score, entry.register_number.upper(), entry.register_number)


def order_entries(entries: Iterable[RankedEntry]) -> List[RankedEntry]:
    """Sort entries by effective score and assign positional ranks."""
    ordered = sorted(entries, key=ranking_key)
    return [entry.model_copy(update={"rank": position}) for position, entry in enumerate(ordered, start=1)]


class ApplicantRanker:
    """Produce the ranked applicant list."""

    def __init__(self, weights: WeightsLike = None):
        self.scorer = ApplicantScorer(weights)

    def rank(self, records: Iterable[ApplicantRecord]) -> List[RankedEntry]:
        """
        Args:
            records: Applicant records; rows without a register number are skipped.

        Returns:
            RankedEntry list, highest score first. Computed scores only;
            faculty overrides are resolved by EvaluationSession.
        """
        entries = []
        skipped = 0
        for record in records:
            if not record.register_number:
                skipped += 1
                continue
            result = self.scorer.calculate(record)
            entries.append(RankedEntry(
                register_number=record.register_number,
                name=record.name,
                department=record.department,
                total_score=result.total_score,
                breakdown=result.breakdown,
                computed_score=result.total_score,
                faculty_score=record.faculty_score,
                verified=record.verified,
            ))

        ranked = order_entries(entries)
        logger.info("applicants_ranked", ranked=len(ranked), skipped=skipped)
        return ranked


def rank_applicants(records: Iterable[ApplicantRecord], weights: WeightsLike = None) -> List[RankedEntry]:
    """Rank applicants by computed total score."""
    return ApplicantRanker(weights).rank(records)
