# tests/test_api.py

"""
API Endpoint Tests - Tests for all FastAPI endpoints

Storage is replaced by the in-memory FakeApplicantStore from conftest.
"""

import pytest
from fastapi import status

from app.config import Settings, get_settings



# ROOT ENDPOINT TESTS


class TestRootEndpoint:
    """Tests for GET / endpoint."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "running"
        assert data["docs"]["swagger"] == "/docs"



# SUBMISSION ENDPOINT TESTS


class TestSubmitApplicationEndpoint:
    """Tests for POST /api/v1/applications endpoint."""

    def test_submit_success(self, client, store, valid_submission):
        response = client.post("/api/v1/applications", json=valid_submission)
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["success"] is True
        assert data["registerNumber"] == "RA900"
        assert store.appended[0].personal_details.name == "New Applicant"
        assert store.appended[0].submitted_at is not None

    def test_duplicate_register_number(self, client, valid_submission):
        valid_submission["personalDetails"]["registerNumber"] = "RA002"
        response = client.post("/api/v1/applications", json=valid_submission)
        assert response.status_code == status.HTTP_409_CONFLICT
        detail = response.json()["detail"]
        assert detail["error_code"] == "DUPLICATE_APPLICATION"
        assert detail["details"]["field"] == "Register Number"

    def test_duplicate_mobile_number(self, client, valid_submission):
        valid_submission["personalDetails"]["mobileNumber"] = "90000RA001"
        response = client.post("/api/v1/applications", json=valid_submission)
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["detail"]["details"]["field"] == "Mobile Number"

    def test_closed_after_deadline(self, client, store, valid_submission):
        store.deadline = "2020-01-01T00:00"
        response = client.post("/api/v1/applications", json=valid_submission)
        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["detail"]["error_code"] == "APPLICATIONS_CLOSED"
        assert store.appended == []

    def test_missing_consent(self, client, valid_submission):
        valid_submission["consentGiven"] = False
        response = client.post("/api/v1/applications", json=valid_submission)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        data = response.json()
        assert data["error_code"] == "VALIDATION_ERROR"
        assert "Consent" in data["message"]

    def test_cgpa_out_of_range(self, client, valid_submission):
        valid_submission["academicRecord"]["cgpa"] = 12
        response = client.post("/api/v1/applications", json=valid_submission)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["message"] == "CGPA must be between 0 and 10"

    def test_duplicate_item_ids_rejected(self, client, store, valid_submission):
        valid_submission["projects"] = [{"id": "p1"}, {"id": "p1"}]
        response = client.post("/api/v1/applications", json=valid_submission)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "Duplicate item id" in response.json()["message"]
        assert store.appended == []

    def test_missing_item_ids_assigned(self, client, store, valid_submission):
        valid_submission["projects"] = [{"title": "A"}, {"title": "B"}]
        response = client.post("/api/v1/applications", json=valid_submission)
        assert response.status_code == status.HTTP_201_CREATED
        assert [p.id for p in store.appended[0].projects] == ["projects-1", "projects-2"]

    def test_malformed_json(self, client):
        response = client.post(
            "/api/v1/applications",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error_code"] == "INVALID_REQUEST"



# APPLICANT ENDPOINT TESTS


class TestGetApplicantEndpoint:
    """Tests for GET /api/v1/applicants/{reg_no} endpoint."""

    def test_get_applicant(self, client):
        response = client.get("/api/v1/applicants/ra001")
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["registerNumber"] == "RA001"
        assert data["computedScore"] == 25.0
        assert data["effectiveScore"] == 25.0
        assert data["facultyScore"] is None
        assert data["breakdown"]["internships"] == 4.0
        assert data["application"]["personalDetails"]["name"] == "Asha"

    def test_faculty_score_is_effective(self, client, store):
        store.records[1] = store.records[1].model_copy(update={"faculty_score": 50.0})
        data = client.get("/api/v1/applicants/RA002").json()
        assert data["computedScore"] == 18.4
        assert data["effectiveScore"] == 50.0

    def test_not_found(self, client):
        response = client.get("/api/v1/applicants/RA404")
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"]["error_code"] == "APPLICANT_NOT_FOUND"



# DEADLINE ENDPOINT TESTS


class TestDeadlineEndpoint:
    """Tests for GET /api/v1/deadline endpoint."""

    def test_no_deadline(self, client):
        assert client.get("/api/v1/deadline").json() == {"deadline": None, "isOpen": True}

    def test_past_deadline(self, client, store):
        store.deadline = "2020-01-01"
        data = client.get("/api/v1/deadline").json()
        assert data["deadline"] == "2020-01-01"
        assert data["isOpen"] is False

    def test_future_deadline(self, client, store):
        store.deadline = "2999-01-01T00:00"
        assert client.get("/api/v1/deadline").json()["isOpen"] is True



# ADMIN AUTH ENDPOINT TESTS


class TestAdminLoginEndpoint:
    """Tests for POST/DELETE /api/v1/admin/login endpoint."""

    def test_login_sets_cookie(self, client):
        response = client.post("/api/v1/admin/login", json={"password": "test-admin-password"})
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True}
        cookie_name = get_settings().ADMIN_COOKIE_NAME
        assert cookie_name in response.cookies
        assert "httponly" in response.headers["set-cookie"].lower()

        # The cookie now unlocks the admin routes
        assert client.get("/api/v1/admin/rankings").status_code == status.HTTP_200_OK

    def test_wrong_password(self, client):
        response = client.post("/api/v1/admin/login", json={"password": "nope"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"]["error_code"] == "INVALID_PASSWORD"

    def test_password_not_configured(self, client, monkeypatch):
        monkeypatch.setattr("app.routers.admin_auth.get_settings", lambda: Settings(ADMIN_PASSWORD=None))
        response = client.post("/api/v1/admin/login", json={"password": "anything"})
        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["detail"]["error_code"] == "ADMIN_NOT_CONFIGURED"

    def test_empty_password_rejected(self, client):
        response = client.post("/api/v1/admin/login", json={"password": ""})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["message"] == "Password is required"

    def test_logout_clears_cookie(self, client):
        client.post("/api/v1/admin/login", json={"password": "test-admin-password"})
        response = client.delete("/api/v1/admin/login")
        assert response.status_code == status.HTTP_200_OK
        assert client.get("/api/v1/admin/rankings").status_code == status.HTTP_401_UNAUTHORIZED



# RANKINGS ENDPOINT TESTS


class TestRankingsEndpoint:
    """Tests for GET /api/v1/admin/rankings endpoint."""

    @pytest.mark.parametrize("path", [
        "/api/v1/admin/rankings",
        "/api/v1/admin/rankings/export",
        "/api/v1/admin/settings",
    ])
    def test_requires_admin(self, client, path):
        response = client.get(path)
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"]["error_code"] == "UNAUTHORIZED"

    def test_tampered_cookie_rejected(self, client):
        client.cookies.set(get_settings().ADMIN_COOKIE_NAME, "1780000000000.deadbeef")
        assert client.get("/api/v1/admin/rankings").status_code == status.HTTP_401_UNAUTHORIZED

    def test_full_ranking(self, admin_client):
        response = admin_client.get("/api/v1/admin/rankings")
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total"] == 3
        assert [e["registerNumber"] for e in data["entries"]] == ["RA001", "RA003", "RA002"]
        assert [e["rank"] for e in data["entries"]] == [1, 2, 3]
        assert data["entries"][0]["totalScore"] == 25.0
        assert data["departments"] == {"CSE": 2, "ECE": 1}
        assert data["hasUnsavedChanges"] is False

    def test_department_filter_keeps_rank(self, admin_client):
        data = admin_client.get("/api/v1/admin/rankings", params={"department": "ECE"}).json()
        assert data["total"] == 1
        assert data["entries"][0]["registerNumber"] == "RA002"
        assert data["entries"][0]["rank"] == 3
        assert data["departments"] == {"CSE": 2, "ECE": 1}

    def test_search_filter_keeps_rank(self, admin_client):
        data = admin_client.get("/api/v1/admin/rankings", params={"search": "chen"}).json()
        assert [(e["registerNumber"], e["rank"]) for e in data["entries"]] == [("RA003", 2)]

    def test_saved_faculty_score_reorders(self, admin_client, store):
        store.records[1] = store.records[1].model_copy(update={"faculty_score": 80.0})
        data = admin_client.get("/api/v1/admin/rankings").json()
        assert data["entries"][0]["registerNumber"] == "RA002"
        assert data["entries"][0]["computedScore"] == 18.4


class TestExportEndpoint:
    """Tests for GET /api/v1/admin/rankings/export endpoint."""

    def test_export_csv(self, admin_client):
        response = admin_client.get("/api/v1/admin/rankings/export")
        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"].startswith("text/csv")
        assert "bo_student_rankings.csv" in response.headers["content-disposition"]
        lines = response.text.strip().splitlines()
        assert lines[0].startswith("Rank,Register Number,Name,Department,CGPA")
        assert len(lines) == 4
        assert lines[1].startswith("1,RA001,Asha,CSE,19.00")

    def test_export_by_department(self, admin_client):
        response = admin_client.get("/api/v1/admin/rankings/export", params={"department": "CSE"})
        lines = response.text.strip().splitlines()
        assert [line.split(",")[1] for line in lines[1:]] == ["RA001", "RA003"]



# EVALUATION ENDPOINT TESTS


class TestEvaluationPreviewEndpoint:
    """Tests for POST /api/v1/admin/evaluations/preview endpoint."""

    def test_preview_reorders_without_saving(self, admin_client, store):
        payload = {"overlays": [{"regNo": "RA002", "facultyScore": 90}]}
        response = admin_client.post("/api/v1/admin/evaluations/preview", json=payload)
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["entries"][0]["registerNumber"] == "RA002"
        assert data["entries"][0]["unsaved"] is True
        assert data["hasUnsavedChanges"] is True
        assert store.saved == []

    def test_preview_discard(self, admin_client):
        payload = {"overlays": [{"regNo": "RA001", "discardedItems": [
            "RA001::internships::i1", "RA001::internships::i2", "RA001::projects::p1",
        ]}]}
        data = admin_client.post("/api/v1/admin/evaluations/preview", json=payload).json()
        assert [e["registerNumber"] for e in data["entries"]] == ["RA003", "RA001", "RA002"]

    def test_preview_unknown_applicant(self, admin_client):
        payload = {"overlays": [{"regNo": "RA404", "verified": True}]}
        response = admin_client.post("/api/v1/admin/evaluations/preview", json=payload)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_negative_score_rejected(self, admin_client):
        payload = {"overlays": [{"regNo": "RA001", "facultyScore": -5}]}
        response = admin_client.post("/api/v1/admin/evaluations/preview", json=payload)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.parametrize("value", ["Infinity", "NaN"])
    def test_non_finite_score_rejected(self, admin_client, store, value):
        payload = {"overlays": [{"registerNumber": "RA001", "facultyScore": value}]}
        response = admin_client.post("/api/v1/admin/evaluations", json=payload)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["details"]["field"] == "overlays.0.facultyScore"
        assert store.saved == []


class TestEvaluationSaveEndpoint:
    """Tests for POST /api/v1/admin/evaluations endpoint."""

    def test_save(self, admin_client, store):
        payload = {"overlays": [
            {"regNo": "RA002", "facultyScore": 30, "verified": True},
            {"regNo": "RA001", "discardedItems": ["RA001::internships::i1"]},
        ]}
        response = admin_client.post("/api/v1/admin/evaluations", json=payload)
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"saved": ["RA001", "RA002"], "failed": []}

        saved = {u.register_number: u for u in store.saved}
        assert saved["RA002"].faculty_score == 30.0
        assert saved["RA002"].verified is True
        assert saved["RA001"].faculty_score == 23.0
        assert saved["RA001"].discarded_items == ["RA001::internships::i1"]

    def test_unchanged_overlay_writes_nothing(self, admin_client, store):
        payload = {"overlays": [{"regNo": "RA001", "verified": False}]}
        response = admin_client.post("/api/v1/admin/evaluations", json=payload)
        assert response.json() == {"saved": [], "failed": []}
        assert store.saved == []

    def test_partial_failure(self, admin_client, store):
        store.fail_for = {"RA003"}
        payload = {"overlays": [
            {"regNo": "RA001", "verified": True},
            {"regNo": "RA003", "verified": True},
        ]}
        response = admin_client.post("/api/v1/admin/evaluations", json=payload)
        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        detail = response.json()["detail"]
        assert detail["error_code"] == "EVALUATION_SAVE_FAILED"
        assert detail["details"] == {"saved": ["RA001"], "failed": ["RA003"]}
        assert [u.register_number for u in store.saved] == ["RA001"]

    def test_store_failure(self, admin_client, store):
        store.raise_on_save = RuntimeError("connection reset")
        payload = {"overlays": [{"regNo": "RA001", "facultyScore": 10}]}
        response = admin_client.post("/api/v1/admin/evaluations", json=payload)
        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["detail"]["details"] == {"saved": [], "failed": ["RA001"]}



# SETTINGS ENDPOINT TESTS


class TestSettingsEndpoint:
    """Tests for GET/POST /api/v1/admin/settings endpoint."""

    def test_get_settings(self, admin_client, store):
        store.deadline = "2026-03-01T23:59"
        assert admin_client.get("/api/v1/admin/settings").json() == {"deadline": "2026-03-01T23:59"}

    def test_set_deadline(self, admin_client, store):
        response = admin_client.post("/api/v1/admin/settings", json={"deadline": " 2026-12-31T23:59 "})
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"deadline": "2026-12-31T23:59"}
        assert store.deadline == "2026-12-31T23:59"

    def test_clear_deadline(self, admin_client, store):
        store.deadline = "2026-12-31"
        response = admin_client.post("/api/v1/admin/settings", json={"deadline": ""})
        assert response.json() == {"deadline": None}
        assert store.deadline is None

    def test_invalid_deadline(self, admin_client, store):
        response = admin_client.post("/api/v1/admin/settings", json={"deadline": "soon"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert store.deadline is None
