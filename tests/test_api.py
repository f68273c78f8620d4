"""Tests for the FastAPI parse endpoint."""
import json

import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock

from api.app import create_app
from api.dependencies import get_processor, get_rate_limiter
from domain.models import UploadedDocument
from ingestion.processor import ResumeProcessor
from llm_clients.base import BaseCompletionClient
from persistence.base import PersistenceError
from persistence.factory import create_store
from security.rate_limiter import InMemoryRateLimiter

OWNER = "user-1"


class TestParseEndpoint:
    """Tests for POST /api/resumes/{document_id}/parse."""

    @pytest.fixture
    def store(self):
        store = create_store("memory")
        store.storage.put("user-1/cv.txt", b"Jane Doe, jane@x.com, 5 years React")
        store.documents.add(UploadedDocument(
            id="doc-1", user_id=OWNER, file_name="cv.txt", storage_path="user-1/cv.txt"
        ))
        return store

    @pytest.fixture
    def llm(self):
        client = Mock(spec=BaseCompletionClient)
        client.complete.return_value = json.dumps({"full_name": "Jane Doe", "skills": ["React"]})
        return client

    @pytest.fixture
    def limiter(self):
        return InMemoryRateLimiter(limit=2, window=3600)

    @pytest.fixture
    def processor(self, store, llm):
        return ResumeProcessor(store.documents, store.profiles, store.storage, llm)

    @pytest.fixture
    def client(self, processor, limiter):
        app = create_app(init_components=False)
        app.dependency_overrides[get_processor] = lambda: processor
        app.dependency_overrides[get_rate_limiter] = lambda: limiter
        return TestClient(app)

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_parse_success(self, client, store):
        response = client.post("/api/resumes/doc-1/parse", headers={"X-User-Id": OWNER})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["status"] == "completed"
        assert body["degraded"] is False
        assert body["profile"]["full_name"] == "Jane Doe"
        assert body["profile"]["skills"] == ["React"]
        assert store.profiles.count() == 1

    def test_degraded_result(self, client, llm):
        llm.complete.return_value = "no idea"

        body = client.post("/api/resumes/doc-1/parse", headers={"X-User-Id": OWNER}).json()

        assert body["success"] is True
        assert body["degraded"] is True
        assert body["profile"]["full_name"] is None

    def test_missing_user(self, client):
        assert client.post("/api/resumes/doc-1/parse").status_code == 401

    def test_not_owned(self, client, store):
        response = client.post("/api/resumes/doc-1/parse", headers={"X-User-Id": "intruder"})

        assert response.status_code == 404
        assert response.json()["detail"] == "Resume not found or access denied"
        assert store.documents.status_of("doc-1").value == "pending"

    def test_invalid_storage_path(self, client):
        response = client.post(
            "/api/resumes/doc-1/parse",
            headers={"X-User-Id": OWNER},
            json={"storage_path": "../../etc/passwd"},
        )

        assert response.status_code == 400
        assert "Invalid file path format" in response.json()["detail"]["details"]

    def test_valid_storage_path(self, client):
        response = client.post(
            "/api/resumes/doc-1/parse",
            headers={"X-User-Id": OWNER},
            json={"storage_path": "user-1/cv.txt"},
        )
        assert response.status_code == 200

    def test_rate_limited(self, client, limiter):
        headers = {"X-User-Id": OWNER}
        assert client.post("/api/resumes/doc-1/parse", headers=headers).status_code == 200
        assert client.post("/api/resumes/doc-1/parse", headers=headers).status_code == 200

        response = client.post("/api/resumes/doc-1/parse", headers=headers)

        assert response.status_code == 429
        assert "Retry-After" in response.headers
        assert limiter.outcomes(OWNER) == {"success": 2}

    def test_download_failure_is_reported(self, client, store):
        store.documents.add(UploadedDocument(
            id="doc-2", user_id=OWNER, file_name="cv.pdf", storage_path="user-1/missing.pdf"
        ))

        response = client.post("/api/resumes/doc-2/parse", headers={"X-User-Id": OWNER})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is False
        assert body["status"] == "failed"
        assert body["error"]

    def test_persistence_failure(self, client, processor):
        processor.documents = Mock(wraps=processor.documents)
        processor.documents.update_status.side_effect = PersistenceError("db down")

        response = client.post("/api/resumes/doc-1/parse", headers={"X-User-Id": OWNER})

        assert response.status_code == 500

    def test_rate_limiting_disabled(self, processor):
        app = create_app(init_components=False)
        app.dependency_overrides[get_processor] = lambda: processor
        app.dependency_overrides[get_rate_limiter] = lambda: None
        client = TestClient(app)

        for _ in range(5):
            assert client.post("/api/resumes/doc-1/parse", headers={"X-User-Id": OWNER}).status_code == 200
