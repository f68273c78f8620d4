"""Tests for the batch ingestion pipeline and the CLI."""
import json
from pathlib import Path

import pytest
from unittest.mock import Mock, patch

from domain.models import UploadedDocument
from ingestion.pipeline import BatchResult, IngestionPipeline, PipelineException, ProcessingResult
from ingestion.processor import ResumeProcessor
from llm_clients.base import BaseCompletionClient
from persistence.base import BlobStorage, DocumentRepository, ProfileRepository
from persistence.factory import create_store

RESUME = "Jane Doe, jane@x.com, 5 years React and TypeScript"
MODEL_OUTPUT = json.dumps({"full_name": "Jane Doe", "email": "jane@x.com", "skills": ["React"]})


@pytest.fixture
def llm():
    client = Mock(spec=BaseCompletionClient)
    client.complete.return_value = MODEL_OUTPUT
    return client


@pytest.fixture
def store():
    return create_store("memory")


@pytest.fixture
def pipeline(store, llm):
    processor = ResumeProcessor(store.documents, store.profiles, store.storage, llm)
    return IngestionPipeline(processor)


class TestBatchResult:
    """Tests for BatchResult statistics."""

    def test_success_rate(self):
        result = BatchResult(total_files=4, successful=3, failed=1)
        assert result.success_rate == 75.0

    def test_success_rate_empty(self):
        assert BatchResult(total_files=0, successful=0, failed=0).success_rate == 0.0

    def test_degraded_and_lists(self):
        result = BatchResult(total_files=3, successful=2, failed=1, results=[
            ProcessingResult(source="a.txt", success=True, degraded=True),
            ProcessingResult(source="b.txt", success=True),
            ProcessingResult(source="c.txt", success=False, error_message="x"),
        ])
        assert result.degraded == 1
        assert result.get_successful() == ["a.txt", "b.txt"]
        assert result.get_failed() == ["c.txt"]


class TestIngestionPipeline:
    """Tests for IngestionPipeline."""

    def test_process_documents(self, pipeline, store):
        store.storage.put("u/cv.txt", RESUME.encode("utf-8"))
        store.documents.add(UploadedDocument(id="d1", user_id="u", file_name="cv.txt", storage_path="u/cv.txt"))
        store.documents.add(UploadedDocument(id="d2", user_id="u", file_name="cv.pdf", storage_path="u/none.pdf"))

        result = pipeline.process_documents(["d1", "d2", "d3"], owner_id="u")

        assert result.total_files == 3
        assert result.successful == 1
        assert result.failed == 2
        assert result.results[2].error_message == "Resume not found or access denied"
        assert result.completed_at is not None

    def test_process_documents_stop_on_error(self, pipeline):
        with pytest.raises(PipelineException):
            pipeline.process_documents(["missing"], owner_id="u", continue_on_error=False)

    def test_process_files(self, pipeline, store, tmp_path):
        good = tmp_path / "jane.txt"
        good.write_text(RESUME, encoding="utf-8")
        short = tmp_path / "short.md"
        short.write_text("Hi", encoding="utf-8")
        unsupported = tmp_path / "photo.jpg"
        unsupported.write_bytes(b"\xff\xd8\xff")

        result = pipeline.process_files([good, short, unsupported], owner_id="local")

        assert result.total_files == 3
        assert result.successful == 2
        assert result.failed == 1
        assert result.degraded == 1
        by_source = {Path(r.source).name: r for r in result.results}
        assert by_source["jane.txt"].outcome.profile.full_name == "Jane Doe"
        assert "Unsupported file type" in by_source["photo.jpg"].error_message
        assert store.documents.count() == 2

    def test_process_directory(self, pipeline, tmp_path):
        (tmp_path / "a.txt").write_text(RESUME, encoding="utf-8")
        nested = tmp_path / "nested"
        nested.mkdir()
        (nested / "b.txt").write_text(RESUME, encoding="utf-8")

        assert pipeline.process_directory(tmp_path).total_files == 1
        assert pipeline.process_directory(tmp_path, recursive=True).total_files == 2

    def test_process_directory_missing(self, pipeline, tmp_path):
        with pytest.raises(PipelineException, match="does not exist"):
            pipeline.process_directory(tmp_path / "nope")

    def test_process_directory_empty(self, pipeline, tmp_path):
        assert pipeline.process_directory(tmp_path).total_files == 0

    def test_local_files_need_memory_store(self, llm, tmp_path):
        processor = ResumeProcessor(
            Mock(spec=DocumentRepository), Mock(spec=ProfileRepository), Mock(spec=BlobStorage), llm
        )
        path = tmp_path / "cv.txt"
        path.write_text(RESUME, encoding="utf-8")

        with pytest.raises(PipelineException, match="in-memory store"):
            IngestionPipeline(processor).register_file(path, "local")


class TestCLI:
    """Tests for the main.py commands."""

    def test_extract(self, tmp_path, capsys):
        import main

        path = tmp_path / "cv.txt"
        path.write_text("Jane   Doe\n\nReact", encoding="utf-8")

        assert main.main(["extract", str(path)]) == 0
        assert capsys.readouterr().out.strip() == "Jane Doe React"

    def test_extract_nothing(self, tmp_path):
        import main

        path = tmp_path / "cv.docx"
        path.write_bytes(b"PK\x03\x04\xff\xfe")
        assert main.main(["extract", str(path)]) == 1

    def test_parse_json(self, tmp_path, capsys, llm):
        import main

        path = tmp_path / "cv.txt"
        path.write_text(RESUME, encoding="utf-8")

        with patch("main.create_llm_client_from_settings", return_value=llm):
            assert main.main(["parse", str(path), "--json"]) == 0

        payload = json.loads(capsys.readouterr().out)
        assert payload["status"] == "completed"
        assert payload["profile"]["email"] == "jane@x.com"

    def test_parse_missing_file(self, tmp_path, llm):
        import main

        with patch("main.create_llm_client_from_settings", return_value=llm):
            assert main.main(["parse", str(tmp_path / "nope.pdf")]) == 1
