# app/scoring/overrides.py
"""
Evaluation Session
------------------
Holds faculty adjustments on top of the stored applications until they are
saved:

    faculty_score    replaces the computed total outright
    discarded_items  discard keys fed back into the scorer
    verified         verification flag, stored alongside

Effective score = faculty_score when set, else the scorer total with the
overlay's discards applied. Every change re-sorts the ranking on effective
score. Changed applicants are tracked in a dirty set and flushed through an
ApplicantStore by save(); a failed update keeps the applicant dirty so the
save can be retried.
"""
import math
import structlog
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Union

from app.core.exceptions import EntityNotFoundException, EvaluationSaveException
from app.models.applicant import ApplicantRecord
from app.models.enumerations import Category
from app.models.evaluation import EvaluationOverlay, EvaluationUpdate, SaveReport
from app.models.ranking import RankedEntry
from app.repositories.base import ApplicantStore
from app.scoring.applicant_scorer import (
    ApplicantScorer,
    ScoreResult,
    WeightsLike,
    category_for_section,
    discard_sections,
    make_discard_key,
)
from app.scoring.ranker import order_entries

logger = structlog.get_logger(__name__)


@dataclass
class Overlay:
    """Reviewer state for one applicant."""
    faculty_score: Optional[float] = None
    discarded_items: Set[str] = field(default_factory=set)
    verified: bool = False


class EvaluationSession:
    """In-memory overlays, dirty tracking and batch save for one review pass."""

    def __init__(self, records: Iterable[ApplicantRecord], weights: WeightsLike = None):
        self.scorer = ApplicantScorer(weights)
        self._records: Dict[str, ApplicantRecord] = {}
        self._overlays: Dict[str, Overlay] = {}
        self._dirty: Set[str] = set()

        for record in records:
            if not record.register_number:
                continue
            key = record.register_number.upper()
            self._records[key] = record
            self._overlays[key] = Overlay(
                faculty_score=record.faculty_score,
                discarded_items=set(record.discarded_items),
                verified=record.verified,
            )

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, register_number: str) -> bool:
        return register_number.strip().upper() in self._records

    def _key(self, register_number: str) -> str:
        key = register_number.strip().upper()
        if key not in self._records:
            raise EntityNotFoundException("Applicant", register_number)
        return key

    def overlay(self, register_number: str) -> Overlay:
        return self._overlays[self._key(register_number)]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_faculty_score(self, register_number: str, score: float) -> None:
        if not math.isfinite(score) or score < 0:
            raise ValueError("Faculty score must be a finite, non-negative number")
        key = self._key(register_number)
        if self._overlays[key].faculty_score != score:
            self._overlays[key].faculty_score = float(score)
            self._dirty.add(key)

    def clear_faculty_score(self, register_number: str) -> None:
        key = self._key(register_number)
        if self._overlays[key].faculty_score is not None:
            self._overlays[key].faculty_score = None
            self._dirty.add(key)

    def discard_item(self, register_number: str, section: Union[Category, str], item_id: str) -> bool:
        """
        Exclude one item from scoring. Returns False when it was already
        discarded (under either section name).
        """
        if not str(item_id).strip():
            raise ValueError("Item id is required to discard an item")
        key = self._key(register_number)
        overlay = self._overlays[key]
        if overlay.discarded_items & self._aliases(key, section, item_id):
            return False
        overlay.discarded_items.add(make_discard_key(self._records[key].register_number, section, item_id))
        self._dirty.add(key)
        return True

    def restore_item(self, register_number: str, section: Union[Category, str], item_id: str) -> bool:
        """Undo a discard. Returns False when the item was not discarded."""
        key = self._key(register_number)
        overlay = self._overlays[key]
        matched = overlay.discarded_items & self._aliases(key, section, item_id)
        if not matched:
            return False
        overlay.discarded_items -= matched
        self._dirty.add(key)
        return True

    def set_discarded_items(self, register_number: str, keys: Iterable[str]) -> None:
        key = self._key(register_number)
        keys = set(keys)
        if self._overlays[key].discarded_items != keys:
            self._overlays[key].discarded_items = keys
            self._dirty.add(key)

    def set_verified(self, register_number: str, verified: bool) -> None:
        key = self._key(register_number)
        if self._overlays[key].verified != verified:
            self._overlays[key].verified = verified
            self._dirty.add(key)

    def apply(self, update: EvaluationOverlay) -> None:
        """Apply a reviewer overlay; omitted fields are left unchanged."""
        if update.clear_faculty_score:
            self.clear_faculty_score(update.register_number)
        if update.faculty_score is not None:
            self.set_faculty_score(update.register_number, update.faculty_score)
        if update.discarded_items is not None:
            self.set_discarded_items(update.register_number, update.discarded_items)
        if update.verified is not None:
            self.set_verified(update.register_number, update.verified)

    def _aliases(self, key: str, section: Union[Category, str], item_id: str) -> Set[str]:
        register_number = self._records[key].register_number
        section = section.value if isinstance(section, Category) else section
        category = category_for_section(section)
        sections = discard_sections(category) if category else (section,)
        return {make_discard_key(register_number, s, item_id) for s in sections}

    # ------------------------------------------------------------------
    # Scores
    # ------------------------------------------------------------------

    def score(self, register_number: str) -> ScoreResult:
        """Scorer result with the applicant's current discards applied."""
        key = self._key(register_number)
        return self.scorer.calculate(self._records[key], self._overlays[key].discarded_items)

    def effective_score(self, register_number: str) -> float:
        key = self._key(register_number)
        overlay = self._overlays[key]
        if overlay.faculty_score is not None:
            return overlay.faculty_score
        return self.scorer.calculate(self._records[key], overlay.discarded_items).total_score

    def ranked(self) -> List[RankedEntry]:
        """Full ranking ordered on effective score."""
        entries = []
        for key, record in self._records.items():
            overlay = self._overlays[key]
            result = self.scorer.calculate(record, overlay.discarded_items)
            effective = overlay.faculty_score if overlay.faculty_score is not None else result.total_score
            entries.append(RankedEntry(
                register_number=record.register_number,
                name=record.name,
                department=record.department,
                total_score=effective,
                breakdown=result.breakdown,
                computed_score=result.total_score,
                faculty_score=overlay.faculty_score,
                verified=overlay.verified,
                unsaved=key in self._dirty,
            ))
        return order_entries(entries)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @property
    def has_unsaved_changes(self) -> bool:
        return bool(self._dirty)

    def is_dirty(self, register_number: str) -> bool:
        return self._key(register_number) in self._dirty

    def pending_updates(self) -> List[EvaluationUpdate]:
        """One update per dirty applicant, storing the effective score."""
        updates = []
        for key in sorted(self._dirty):
            overlay = self._overlays[key]
            updates.append(EvaluationUpdate(
                register_number=self._records[key].register_number,
                faculty_score=self.effective_score(key),
                verified=overlay.verified,
                discarded_items=sorted(overlay.discarded_items),
            ))
        return updates

    def save(self, store: ApplicantStore) -> SaveReport:
        """
        Persist every dirty applicant.

        Raises:
            EvaluationSaveException: the store call itself failed; nothing
                is marked as saved.
        """
        updates = self.pending_updates()
        if not updates:
            return SaveReport()

        try:
            results = store.batch_update_evaluations(updates)
        except Exception as e:
            logger.error("evaluations_save_failed", pending=len(updates), error=str(e))
            raise EvaluationSaveException([u.register_number for u in updates]) from e

        report = SaveReport()
        for update in updates:
            key = update.register_number.upper()
            if results.get(update.register_number, False):
                # Storage now holds the effective score as the override
                self._overlays[key].faculty_score = update.faculty_score
                self._dirty.discard(key)
                report.saved.append(update.register_number)
            else:
                report.failed.append(update.register_number)

        logger.info("evaluations_saved", saved=len(report.saved), failed=len(report.failed))
        return report
