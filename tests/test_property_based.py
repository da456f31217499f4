# tests/test_property_based.py
"""
Property-Based Tests - Scorer, Ranker and Evaluation Session

Hypothesis tests with max_examples=500, covering:
  - zero applicant, perfect cgpa, arrears penalty
  - list-category monotonicity and capacity saturation
  - discard idempotence and restore
  - faculty override precedence
  - ranking stability
"""

import pytest
from hypothesis import assume, given, settings
from hypothesis import strategies as st

from app.models.applicant import ApplicantRecord
from app.models.enumerations import Category
from app.scoring.applicant_scorer import LIST_CAPACITY, calculate_score, make_discard_key
from app.scoring.overrides import EvaluationSession
from app.scoring.ranker import rank_applicants

# ---------------------------------------------------------------------------
# Shared strategies
# ---------------------------------------------------------------------------

LIST_CATEGORIES = list(LIST_CAPACITY)

cgpa_st = st.floats(min_value=0.0, max_value=10.0, allow_nan=False, allow_infinity=False)
level_st = st.sampled_from(["zone", "district", "state", "national", "international", "college"])
index_st = st.sampled_from(["sci", "scopus", "ugc", "other", None])
publication_st = st.sampled_from(["granted", "published", "filed", None])


def items(prefix, count, **fields):
    return [{"id": f"{prefix}{i}", **fields} for i in range(count)]


def record(reg="RA1", cgpa=0.0, arrears=False, **sections) -> ApplicantRecord:
    payload = {
        "personalDetails": {"registerNumber": reg, "name": reg, "department": "CSE"},
        "academicRecord": {"cgpa": cgpa, "historyOfArrears": arrears},
    }
    payload.update(sections)
    return ApplicantRecord.model_validate(payload)


@st.composite
def applicant_st(draw, reg=None):
    """Draw an applicant with random counts in every category."""
    reg = reg or draw(st.from_regex(r"RA[0-9]{4}", fullmatch=True))
    sections = {
        category.value: items(category.value[:2], draw(st.integers(0, 7)))
        for category in LIST_CATEGORIES
    }
    sections["research"] = [
        {"id": f"r{i}", "indexStatus": draw(index_st), "publicationStatus": draw(publication_st)}
        for i in range(draw(st.integers(0, 7)))
    ]
    sections["sportsOrCultural"] = [
        {"id": f"s{i}", "level": draw(level_st)} for i in range(draw(st.integers(0, 7)))
    ]
    return record(reg, draw(cgpa_st), draw(st.booleans()), **sections)


# ---------------------------------------------------------------------------
# Scorer properties
# ---------------------------------------------------------------------------

class TestScorerPropertyBased:

    @settings(max_examples=500)
    @given(st.sampled_from(["RA1", "X-9", "abc"]))
    def test_zero_applicant_scores_zero(self, reg):
        assert calculate_score(record(reg, 0.0)).total_score == 0.0

    @settings(max_examples=500)
    @given(applicant_st())
    def test_perfect_cgpa_contributes_twenty(self, applicant):
        applicant = applicant.model_copy(update={
            "academic_record": applicant.academic_record.model_copy(update={"cgpa": 10.0, "history_of_arrears": False})
        })
        assert calculate_score(applicant).breakdown["cgpa"] == 20.0

    @settings(max_examples=500)
    @given(st.sampled_from([0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10]), st.integers(0, 6))
    def test_arrears_penalty_is_085(self, cgpa, internships):
        clean = calculate_score(record(cgpa=cgpa, internships=items("i", internships)))
        penalised = calculate_score(record(cgpa=cgpa, arrears=True, internships=items("i", internships)))
        assert penalised.breakdown["cgpa"] == round(clean.breakdown["cgpa"] * 0.85, 2)
        for category, value in clean.breakdown.items():
            if category != "cgpa":
                assert penalised.breakdown[category] == value

    @settings(max_examples=500)
    @given(st.sampled_from(LIST_CATEGORIES), st.integers(0, 10))
    def test_adding_item_never_decreases(self, category, count):
        before = calculate_score(record(**{category.value: items("x", count)}))
        after = calculate_score(record(**{category.value: items("x", count + 1)}))
        assert after.breakdown[category.value] >= before.breakdown[category.value]
        if count < LIST_CAPACITY[category]:
            assert after.breakdown[category.value] > before.breakdown[category.value]

    @settings(max_examples=500)
    @given(st.sampled_from(LIST_CATEGORIES), st.integers(0, 10))
    def test_saturation_at_capacity(self, category, extra):
        capacity = LIST_CAPACITY[category]
        at_cap = calculate_score(record(**{category.value: items("x", capacity)}))
        beyond = calculate_score(record(**{category.value: items("x", capacity + extra)}))
        assert beyond.breakdown[category.value] == at_cap.breakdown[category.value]

    @settings(max_examples=500)
    @given(applicant_st())
    def test_total_bounded_by_weights(self, applicant):
        result = calculate_score(applicant)
        assert 0.0 <= result.total_score <= 100.0
        assert all(v >= 0.0 for v in result.breakdown.values())


# ---------------------------------------------------------------------------
# Evaluation session properties
# ---------------------------------------------------------------------------

class TestEvaluationPropertyBased:

    @settings(max_examples=500)
    @given(applicant_st(reg="RA1"), st.sampled_from(LIST_CATEGORIES), st.integers(0, 6))
    def test_discard_idempotent_and_reversible(self, applicant, category, index):
        assume(index < len(applicant.items_for(category)))
        item_id = applicant.items_for(category)[index].id
        session = EvaluationSession([applicant])
        original = session.score("RA1")

        assert session.discard_item("RA1", category, item_id) is True
        once = session.score("RA1")
        assert session.discard_item("RA1", category, item_id) is False
        assert session.score("RA1") == once

        session.restore_item("RA1", category, item_id)
        assert session.score("RA1") == original

    @settings(max_examples=500)
    @given(
        applicant_st(reg="RA1"),
        st.floats(min_value=0, max_value=100, allow_nan=False),
        st.lists(st.sampled_from(LIST_CATEGORIES), max_size=4),
    )
    def test_override_takes_precedence(self, applicant, override, categories):
        session = EvaluationSession([applicant])
        session.set_faculty_score("RA1", override)
        for category in categories:
            for item in applicant.items_for(category)[:1]:
                session.discard_item("RA1", category, item.id)
            assert session.effective_score("RA1") == override

        session.clear_faculty_score("RA1")
        assert session.effective_score("RA1") == session.score("RA1").total_score

    @settings(max_examples=200)
    @given(st.lists(applicant_st(), min_size=1, max_size=8, unique_by=lambda r: r.register_number))
    def test_ranking_is_stable(self, records):
        first = rank_applicants(records)
        assert rank_applicants(records) == first
        assert rank_applicants(list(reversed(records))) == first
        scores = [e.total_score for e in first]
        assert scores == sorted(scores, reverse=True)

    @settings(max_examples=200)
    @given(st.lists(applicant_st(), min_size=1, max_size=8, unique_by=lambda r: r.register_number))
    def test_session_ranking_matches_ranker_without_overlays(self, records):
        session_order = [e.register_number for e in EvaluationSession(records).ranked()]
        ranker_order = [e.register_number for e in rank_applicants(records)]
        assert session_order == ranker_order
