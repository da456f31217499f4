# app/scoring/applicant_scorer.py
"""
Applicant Scorer
----------------
Computes the weighted composite score of one application across 14
categories.

Each category is normalised to [0, 1] and multiplied by its weight:

    cgpa                     min(cgpa / 10, 1), x0.85 on the weighted value
                             when the applicant has a history of arrears
    simple lists (cap 5)     internships, projects, hackathons,
                             certifications, volunteering, clubActivities,
                             departmentContributions: min(n, 5) / 5
    simple lists (cap 3)     entrepreneurship, competitiveExams,
                             scholarships, references: min(n, 3) / 3
    research                 first 5 items, each min(0.5 + index + status, 1),
                             summed and divided by 5 (not by item count)
    sportsOrCultural         first 5 items by level multiplier, summed / 5

Contributions and the total (sum of unrounded contributions) are rounded
half-up to 2 decimals exactly once. Scoring never raises: unusable numbers
count as zero and unknown statuses/levels score as the lowest default.

Items listed in ``discarded_items`` (``registerNumber::section::itemId``)
are left out of their category for that computation only.
"""
import structlog
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Union

from app.models.applicant import ApplicantRecord
from app.models.enumerations import Category, EventLevel, IndexStatus, PublicationStatus
from app.models.weights import DEFAULT_WEIGHTS, RankingWeights
from app.scoring.utils import clamp, round_score, to_decimal

logger = structlog.get_logger(__name__)

ARREARS_PENALTY = Decimal("0.85")
CGPA_SCALE = Decimal("10")

# Capacity of each count-based category
LIST_CAPACITY: Dict[Category, int] = {
    Category.INTERNSHIPS: 5,
    Category.PROJECTS: 5,
    Category.HACKATHONS: 5,
    Category.CERTIFICATIONS: 5,
    Category.VOLUNTEERING: 5,
    Category.CLUB_ACTIVITIES: 5,
    Category.DEPARTMENT_CONTRIBUTIONS: 5,
    Category.ENTREPRENEURSHIP: 3,
    Category.COMPETITIVE_EXAMS: 3,
    Category.SCHOLARSHIPS: 3,
    Category.REFERENCES: 3,
}

WEIGHTED_ITEM_CAPACITY = 5

RESEARCH_BASE = Decimal("0.5")
INDEX_BONUS: Dict[str, Decimal] = {
    IndexStatus.SCI.value: Decimal("0.4"),
    IndexStatus.SCOPUS.value: Decimal("0.3"),
    IndexStatus.UGC.value: Decimal("0.2"),
}
PUBLICATION_BONUS: Dict[str, Decimal] = {
    PublicationStatus.GRANTED.value: Decimal("0.3"),
    PublicationStatus.PUBLISHED.value: Decimal("0.2"),
}

LEVEL_MULTIPLIER: Dict[str, Decimal] = {
    EventLevel.ZONE.value: Decimal("0.4"),
    EventLevel.DISTRICT.value: Decimal("0.6"),
    EventLevel.STATE.value: Decimal("0.75"),
    EventLevel.NATIONAL.value: Decimal("0.9"),
    EventLevel.INTERNATIONAL.value: Decimal("1.0"),
}
UNRECOGNIZED_LEVEL = Decimal("0.3")

# ---------------------------------------------------------------------------
# Discard keys
# ---------------------------------------------------------------------------

DISCARD_SEPARATOR = "::"

# Short section names written into discard keys by older dashboards
LEGACY_DISCARD_SECTIONS: Dict[Category, str] = {
    Category.COMPETITIVE_EXAMS: "exams",
    Category.SPORTS_OR_CULTURAL: "sports",
    Category.CLUB_ACTIVITIES: "clubs",
    Category.DEPARTMENT_CONTRIBUTIONS: "deptContrib",
}


def make_discard_key(register_number: str, section: Union[Category, str], item_id: str) -> str:
    """Build ``registerNumber::section::itemId``."""
    section = section.value if isinstance(section, Category) else section
    return DISCARD_SEPARATOR.join((register_number, section, str(item_id)))


def parse_discard_key(key: str) -> Optional[Tuple[str, str, str]]:
    """Split a discard key, or return None when it is malformed."""
    parts = key.split(DISCARD_SEPARATOR)
    if len(parts) != 3 or not all(parts):
        return None
    return parts[0], parts[1], parts[2]


def discard_sections(category: Category) -> Tuple[str, ...]:
    """Section names that identify ``category`` inside a discard key."""
    legacy = LEGACY_DISCARD_SECTIONS.get(category)
    return (category.value, legacy) if legacy else (category.value,)


def category_for_section(section: str) -> Optional[Category]:
    for category in Category:
        if section in discard_sections(category):
            return category
    return None


# ---------------------------------------------------------------------------
# Scorer
# ---------------------------------------------------------------------------

WeightsLike = Union[RankingWeights, Mapping[str, float], None]


@dataclass
class ScoreResult:
    """Output of ApplicantScorer.calculate()."""
    total_score: float
    breakdown: Dict[str, float] = field(default_factory=dict)


def resolve_weights(weights: WeightsLike) -> Dict[Category, Decimal]:
    """Normalise any weight input into Decimal weights per category."""
    if weights is None:
        weights = DEFAULT_WEIGHTS
    elif not isinstance(weights, RankingWeights):
        weights = RankingWeights.from_mapping(weights)
    return {Category(name): to_decimal(value) for name, value in weights.as_dict().items()}


class ApplicantScorer:
    """Calculate the composite score and breakdown for one applicant."""

    def __init__(self, weights: WeightsLike = None):
        self.weights = resolve_weights(weights)

    def calculate(
        self,
        record: ApplicantRecord,
        discarded_items: Iterable[str] = (),
    ) -> ScoreResult:
        """
        Args:
            record: Applicant to score. Never mutated.
            discarded_items: Discard keys excluded from this computation.

        Returns:
            ScoreResult with one 2-dp breakdown entry per category.

        Examples:
            >>> scorer = ApplicantScorer()
            >>> record = ApplicantRecord.model_validate({
            ...     "personalDetails": {"registerNumber": "RA01"},
            ...     "academicRecord": {"cgpa": 9.5},
            ...     "internships": [{"id": "i1"}, {"id": "i2"}],
            ...     "projects": [{"id": "p1"}],
            ... })
            >>> scorer.calculate(record).total_score
            25.0
        """
        discarded = frozenset(discarded_items or ())
        raw: Dict[Category, Decimal] = {}

        raw[Category.CGPA] = self._cgpa_contribution(record)
        for category in Category:
            if category is Category.CGPA:
                continue
            items = self._kept_items(record, category, discarded)
            raw[category] = self._ratio(category, items) * self.weights[category]

        total = sum(raw.values(), Decimal("0"))
        breakdown = {category.value: round_score(value) for category, value in raw.items()}
        total_score = round_score(total)

        logger.debug(
            "applicant_scored",
            register_number=record.register_number,
            discarded_count=len(discarded),
            total_score=total_score,
        )
        return ScoreResult(total_score=total_score, breakdown=breakdown)

    # ------------------------------------------------------------------

    def _cgpa_contribution(self, record: ApplicantRecord) -> Decimal:
        ratio = clamp(to_decimal(record.academic_record.cgpa) / CGPA_SCALE)
        contribution = ratio * self.weights[Category.CGPA]
        if record.academic_record.history_of_arrears:
            contribution *= ARREARS_PENALTY
        return contribution

    @staticmethod
    def _kept_items(record: ApplicantRecord, category: Category, discarded: FrozenSet[str]) -> list:
        items = record.items_for(category)
        if not discarded:
            return items
        kept = []
        for item in items:
            # Items without an id cannot be addressed by a discard key
            if item.id and any(
                make_discard_key(record.register_number, section, item.id) in discarded
                for section in discard_sections(category)
            ):
                continue
            kept.append(item)
        return kept

    def _ratio(self, category: Category, items: List) -> Decimal:
        if category is Category.RESEARCH:
            return self._research_ratio(items)
        if category is Category.SPORTS_OR_CULTURAL:
            return self._sports_ratio(items)
        capacity = LIST_CAPACITY[category]
        return Decimal(min(len(items), capacity)) / Decimal(capacity)

    @staticmethod
    def _research_ratio(items: List) -> Decimal:
        total = Decimal("0")
        for item in items[:WEIGHTED_ITEM_CAPACITY]:
            item_score = (
                RESEARCH_BASE
                + INDEX_BONUS.get(item.index_status or "", Decimal("0"))
                + PUBLICATION_BONUS.get(item.publication_status or "", Decimal("0"))
            )
            total += min(item_score, Decimal("1"))
        return total / Decimal(WEIGHTED_ITEM_CAPACITY)

    @staticmethod
    def _sports_ratio(items: List) -> Decimal:
        total = sum(
            (LEVEL_MULTIPLIER.get(item.level or "", UNRECOGNIZED_LEVEL) for item in items[:WEIGHTED_ITEM_CAPACITY]),
            Decimal("0"),
        )
        return total / Decimal(WEIGHTED_ITEM_CAPACITY)


def calculate_score(
    record: ApplicantRecord,
    weights: WeightsLike = None,
    discarded_items: Iterable[str] = (),
) -> ScoreResult:
    """Score one applicant with the given weights and discard keys."""
    return ApplicantScorer(weights).calculate(record, discarded_items)
