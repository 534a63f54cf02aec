"""Tests for HTTP routes using FastAPI TestClient."""

from contextlib import asynccontextmanager
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from jobtracker.activity.models import Activity
from jobtracker.database import get_db
from jobtracker.dependencies import get_generation_client
from jobtracker.exceptions import ProviderError
from jobtracker.rate_limit import limiter
from jobtracker.usage.models import UsageRecord

AUTH = {"Authorization": "Bearer idp|test-user"}


def _make_client(db_session, generation_client=None):
    from jobtracker.main import create_app

    @asynccontextmanager
    async def _test_lifespan(app):
        yield

    def _fake_db():
        yield db_session

    with patch("jobtracker.main.lifespan", _test_lifespan), patch("jobtracker.main.settings") as mock_settings:
        mock_settings.trusted_hosts_list = ["*"]
        mock_settings.cors_origins_list = ["*"]
        mock_settings.cors_allow_credentials = False
        app = create_app()
    app.dependency_overrides[get_db] = _fake_db
    if generation_client is not None:
        app.dependency_overrides[get_generation_client] = lambda: generation_client
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def api(db_session, fake_client):
    with _make_client(db_session, fake_client) as client:
        yield client


@pytest.fixture
def api_without_provider(db_session):
    with _make_client(db_session) as client:
        yield client


class TestHealthEndpoint:
    def test_health_returns_ok(self, api):
        response = api.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["db"] == "ok"
        assert data["version"] == "1.0.0"
        assert "uptime_seconds" in data

    def test_security_headers(self, api):
        response = api.get("/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"


class TestAuthentication:
    def test_missing_token_is_401(self, api, test_job):
        response = api.post(f"/api/v1/jobs/{test_job.id}/generate/email", json={})
        assert response.status_code == 401
        assert response.json()["kind"] == "Unauthenticated"

    def test_non_bearer_scheme_is_401(self, api):
        response = api.get("/api/v1/usage", headers={"Authorization": "Basic abc"})
        assert response.status_code == 401

    def test_unknown_profile_is_404(self, api):
        response = api.get("/api/v1/usage", headers={"Authorization": "Bearer idp|ghost"})
        assert response.status_code == 404
        assert response.json()["error"] == "User profile not found"


class TestGenerateEmailRoute:
    def test_generates_and_records_usage(self, api, db_session, test_user, test_job, fake_client):
        response = api.post(
            f"/api/v1/jobs/{test_job.id}/generate/email",
            json={"tone": "friendly", "additional_context": "Met the team at PyCon"},
            headers=AUTH,
        )

        assert response.status_code == 200
        assert response.json() == {
            "subject": "Application",
            "body": "Dear Acme team...",
            "full_text": "Subject: Application\n\nDear Acme team...",
        }
        assert "Met the team at PyCon" in fake_client.generate.call_args.args[0]
        assert db_session.query(UsageRecord).count() == 1

        activity = db_session.query(Activity).one()
        assert activity.type == "ai_generated"
        assert activity.ref_id == str(test_job.id)

    def test_invalid_tone_is_422(self, api, test_job, fake_client):
        response = api.post(f"/api/v1/jobs/{test_job.id}/generate/email", json={"tone": "sarcastic"}, headers=AUTH)
        assert response.status_code == 422
        fake_client.generate.assert_not_called()

    def test_unknown_job_is_404(self, api, test_user):
        response = api.post("/api/v1/jobs/not-a-uuid/generate/email", json={}, headers=AUTH)
        assert response.status_code == 404
        assert response.json()["error"] == "Job not found"

    def test_provider_failure_is_502_and_logged(self, api, db_session, test_user, test_job, fake_client):
        fake_client.generate.side_effect = ProviderError(500, "backend exploded")

        response = api.post(f"/api/v1/jobs/{test_job.id}/generate/email", json={}, headers=AUTH)

        assert response.status_code == 502
        assert response.json()["error"] == "Gemini API error: 500 - backend exploded"
        assert db_session.query(UsageRecord).count() == 0
        activity = db_session.query(Activity).one()
        assert activity.type == "ai_generation_error"
        assert activity.payload["kind"] == "ProviderError"

    def test_quota_exhausted_is_429(self, api, db_session, test_user, test_job, fake_client):
        test_user.monthly_quota = 0
        db_session.commit()

        response = api.post(f"/api/v1/jobs/{test_job.id}/generate/email", json={}, headers=AUTH)

        assert response.status_code == 429
        body = response.json()
        assert body["kind"] == "QuotaExceeded"
        assert body["limit"] == 0
        fake_client.generate.assert_not_called()

    def test_missing_provider_is_503(self, api_without_provider, test_user, test_job):
        response = api_without_provider.post(f"/api/v1/jobs/{test_job.id}/generate/email", json={}, headers=AUTH)
        assert response.status_code == 503
        assert response.json()["kind"] == "ConfigurationError"


class TestGenerateCoverLetterRoute:
    def test_generates_cover_letter(self, api, db_session, test_user, test_job, test_cv, fake_client):
        response = api.post(
            f"/api/v1/jobs/{test_job.id}/generate/cover-letter",
            json={"cv_id": str(test_cv.id), "length": "detailed", "focus_areas": ["APIs"]},
            headers=AUTH,
        )

        assert response.status_code == 200
        assert response.json() == {"content": "Subject: Application\n\nDear Acme team..."}
        assert db_session.query(UsageRecord).one().type == "coverLetter"

    def test_more_than_three_focus_areas_is_422(self, api, test_job, test_cv):
        response = api.post(
            f"/api/v1/jobs/{test_job.id}/generate/cover-letter",
            json={"cv_id": str(test_cv.id), "focus_areas": ["a", "b", "c", "d"]},
            headers=AUTH,
        )
        assert response.status_code == 422

    def test_cv_id_required(self, api, test_job):
        response = api.post(f"/api/v1/jobs/{test_job.id}/generate/cover-letter", json={}, headers=AUTH)
        assert response.status_code == 422


class TestSavedContentRoutes:
    def test_save_then_get(self, api, test_user, test_job):
        url = f"/api/v1/jobs/{test_job.id}/content/email"
        assert api.get(url, headers=AUTH).json() is None

        response = api.put(url, json={"content": "Hello Dana", "subject": "Backend role"}, headers=AUTH)
        assert response.status_code == 200

        data = api.get(url, headers=AUTH).json()
        assert data["content"] == "Hello Dana"
        assert data["subject"] == "Backend role"
        assert data["type"] == "email"

    def test_empty_content_is_422(self, api, test_user, test_job):
        response = api.put(f"/api/v1/jobs/{test_job.id}/content/email", json={"content": ""}, headers=AUTH)
        assert response.status_code == 422

    def test_unknown_content_type_is_422(self, api, test_user, test_job):
        response = api.get(f"/api/v1/jobs/{test_job.id}/content/memo", headers=AUTH)
        assert response.status_code == 422

    def test_download_cover_letter(self, api, test_user, test_job):
        api.put(
            f"/api/v1/jobs/{test_job.id}/content/coverLetter",
            json={"content": "Dear Dana,\n\nThanks."},
            headers=AUTH,
        )

        response = api.get(f"/api/v1/jobs/{test_job.id}/content/coverLetter/download", headers=AUTH)

        assert response.status_code == 200
        assert "Cover_Letter_Acme.docx" in response.headers["content-disposition"]
        assert response.content[:2] == b"PK"

    def test_download_without_saved_letter_is_404(self, api, test_user, test_job):
        response = api.get(f"/api/v1/jobs/{test_job.id}/content/coverLetter/download", headers=AUTH)
        assert response.status_code == 404


class TestUsageRoutes:
    def test_usage_summary(self, api, db_session, test_user, test_job):
        api.post(f"/api/v1/jobs/{test_job.id}/generate/email", json={}, headers=AUTH)

        data = api.get("/api/v1/usage", headers=AUTH).json()
        assert data == {"count": 1, "limit": 20, "remaining": 19}

    def test_remaining(self, api, test_user):
        assert api.get("/api/v1/usage/remaining", headers=AUTH).json() == {"has_remaining": True}
