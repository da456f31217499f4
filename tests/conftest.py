# tests/conftest.py

"""
Pytest Fixtures - Shared test configuration and data for models, scoring and APIs

APPLICANT FIXTURE REFERENCE:
- RA001  Asha   CSE  cgpa 9.5, 2 internships, 1 project             -> 25.00
- RA002  Bala   ECE  cgpa 8.0, 1 research (sci, published)          -> 18.40
- RA003  Chen   CSE  cgpa 7.0, arrears, 5 projects, 1 exam          -> 23.57
"""

import os

# Must be set before app.config is imported
os.environ["ADMIN_PASSWORD"] = "test-admin-password"
os.environ["APP_ENV"] = "development"

from typing import Dict, List, Optional, Sequence

import pytest
from fastapi.testclient import TestClient

from app.config import get_settings
from app.core.dependencies import get_applicant_repository, get_application_service
from app.core.security import create_admin_token
from app.main import app
from app.models.applicant import ApplicantRecord
from app.models.evaluation import EvaluationUpdate
from app.services.application_service import ApplicationService


# =============================================================================
# RECORD FACTORIES
# =============================================================================

def build_items(prefix: str, count: int, **fields) -> List[dict]:
    return [{"id": f"{prefix}{i}", **fields} for i in range(1, count + 1)]


def build_record(
    reg: str = "RA001",
    name: str = "Student",
    department: str = "CSE",
    cgpa: float = 0.0,
    arrears: bool = False,
    **sections,
) -> ApplicantRecord:
    payload = {
        "personalDetails": {
            "registerNumber": reg,
            "name": name,
            "department": department,
            "personalEmail": f"{reg.lower()}@example.com",
            "mobileNumber": f"90000{reg[-5:]}",
        },
        "academicRecord": {"cgpa": cgpa, "historyOfArrears": arrears},
    }
    payload.update(sections)
    return ApplicantRecord.model_validate(payload)


@pytest.fixture
def make_record():
    """Factory: make_record(reg, cgpa=..., internships=[...], ...)."""
    return build_record


@pytest.fixture
def make_items():
    """Factory: make_items("i", 3, level="national")."""
    return build_items


@pytest.fixture
def applicant_a():
    return build_record("RA001", "Asha", "CSE", 9.5,
                        internships=build_items("i", 2), projects=build_items("p", 1))


@pytest.fixture
def applicant_b():
    return build_record("RA002", "Bala", "ECE", 8.0,
                        research=build_items("r", 1, indexStatus="sci", publicationStatus="published"))


@pytest.fixture
def applicant_c():
    return build_record("RA003", "Chen", "CSE", 7.0, arrears=True,
                        projects=build_items("p", 5), competitiveExams=build_items("e", 1))


@pytest.fixture
def applicants(applicant_a, applicant_b, applicant_c):
    return [applicant_a, applicant_b, applicant_c]


# =============================================================================
# IN-MEMORY STORE
# =============================================================================

class FakeApplicantStore:
    """In-memory stand-in for ApplicantRepository."""

    def __init__(self, records: Sequence[ApplicantRecord] = (), fail_for: Sequence[str] = (),
                 raise_on_save: Optional[Exception] = None, deadline: Optional[str] = None):
        self.records = list(records)
        self.fail_for = {r.upper() for r in fail_for}
        self.raise_on_save = raise_on_save
        self.deadline = deadline
        self.saved: List[EvaluationUpdate] = []
        self.appended: List[ApplicantRecord] = []

    def get_all(self) -> List[ApplicantRecord]:
        return list(self.records)

    def get_by_register_number(self, register_number: str) -> Optional[ApplicantRecord]:
        for record in self.records:
            if record.register_number.upper() == register_number.strip().upper():
                return record
        return None

    def batch_update_evaluations(self, updates) -> Dict[str, bool]:
        if self.raise_on_save:
            raise self.raise_on_save
        results = {}
        for update in updates:
            ok = update.register_number.upper() not in self.fail_for
            if ok:
                self.saved.append(update)
                self._store(update)
            results[update.register_number] = ok
        return results

    def update_evaluation(self, register_number, faculty_score, verified, discarded_items) -> bool:
        update = EvaluationUpdate(register_number=register_number, faculty_score=faculty_score,
                                  verified=verified, discarded_items=list(discarded_items))
        return self.batch_update_evaluations([update])[register_number]

    def find_existing_submission(self, register_number, emails=(), mobile="") -> Optional[str]:
        wanted = {e.lower() for e in emails if e}
        for record in self.records:
            details = record.personal_details
            if details.register_number.upper() == register_number.upper():
                return "Register Number"
            if wanted & {(details.personal_email or "").lower(), (details.srm_email or "").lower()} - {""}:
                return "Email Address"
            if mobile and mobile == details.mobile_number:
                return "Mobile Number"
        return None

    def append(self, record: ApplicantRecord) -> None:
        self.appended.append(record)
        self.records.append(record)

    def get_deadline(self) -> Optional[str]:
        return self.deadline

    def set_deadline(self, value: str) -> None:
        self.deadline = value or None

    def _store(self, update: EvaluationUpdate) -> None:
        for i, record in enumerate(self.records):
            if record.register_number.upper() == update.register_number.upper():
                self.records[i] = record.model_copy(update={
                    "faculty_score": update.faculty_score,
                    "verified": update.verified,
                    "discarded_items": list(update.discarded_items),
                })


@pytest.fixture
def store(applicants):
    return FakeApplicantStore(applicants)


# =============================================================================
# FASTAPI TEST CLIENT FIXTURES
# =============================================================================

@pytest.fixture
def client(store):
    """TestClient with the repository replaced by the in-memory store."""
    app.dependency_overrides[get_applicant_repository] = lambda: store
    app.dependency_overrides[get_application_service] = lambda: ApplicationService(
        store, max_retries=3, backoff_seconds=0, sleep=lambda s: None
    )
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(client):
    """Client carrying a valid admin session cookie."""
    client.cookies.set(get_settings().ADMIN_COOKIE_NAME, create_admin_token())
    return client


@pytest.fixture
def valid_submission():
    return {
        "personalDetails": {
            "registerNumber": "RA900",
            "name": "New Applicant",
            "department": "MECH",
            "personalEmail": "new@example.com",
            "mobileNumber": "9123456789",
        },
        "academicRecord": {"cgpa": 8.7, "historyOfArrears": False},
        "internships": [{"id": "i1", "company": "Acme"}],
        "consentGiven": True,
    }
