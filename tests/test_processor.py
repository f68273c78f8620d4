"""Tests for ResumeProcessor (single-resume orchestration)."""
import json

import pytest
from unittest.mock import Mock

from domain.models import ProcessingStatus, UploadedDocument
from ingestion.processor import ProcessorException, ResumeProcessor
from llm_clients.base import (
    BaseCompletionClient,
    CompletionConfigurationError,
    CompletionResponseError,
    CompletionServiceError,
)
from persistence.base import (
    BlobStorage,
    DocumentNotFoundError,
    DownloadError,
    PersistenceError,
    ProfileRepository,
)
from persistence.implementations.memory import (
    InMemoryBlobStorage,
    InMemoryDocumentRepository,
    InMemoryProfileRepository,
)

OWNER = "user-1"
RESUME_TEXT = "Jane Doe, jane@x.com, 5 years React"
WELL_FORMED = json.dumps({
    "full_name": "Jane Doe",
    "email": "jane@x.com",
    "phone": None,
    "location": None,
    "skills": ["React"],
    "experience": [{"title": "Frontend Engineer", "company": None, "duration": "5 years", "description": None}],
    "education": [],
})


class TestResumeProcessor:
    """Tests for ResumeProcessor."""

    @pytest.fixture
    def documents(self):
        return InMemoryDocumentRepository()

    @pytest.fixture
    def profiles(self):
        return InMemoryProfileRepository()

    @pytest.fixture
    def storage(self):
        return InMemoryBlobStorage()

    @pytest.fixture
    def llm(self):
        client = Mock(spec=BaseCompletionClient)
        client.complete.return_value = WELL_FORMED
        return client

    @pytest.fixture
    def processor(self, documents, profiles, storage, llm):
        return ResumeProcessor(documents, profiles, storage, llm)

    def _upload(self, documents, storage, data: bytes, file_name="cv.txt", doc_id="doc-1"):
        path = f"{OWNER}/{doc_id}/{file_name}"
        storage.put(path, data)
        documents.add(UploadedDocument(
            id=doc_id, user_id=OWNER, file_name=file_name, storage_path=path, file_size=len(data)
        ))
        return doc_id

    def test_well_formed_completion(self, processor, documents, profiles, storage, llm):
        doc_id = self._upload(documents, storage, RESUME_TEXT.encode("utf-8"))

        outcome = processor.process(doc_id, OWNER)

        assert outcome.success
        assert outcome.status == ProcessingStatus.COMPLETED
        assert not outcome.degraded
        assert outcome.profile.full_name == "Jane Doe"
        assert outcome.profile.email == "jane@x.com"
        assert outcome.profile.skills == ["React"]
        assert outcome.profile.raw_text == RESUME_TEXT
        assert documents.status_of(doc_id) == ProcessingStatus.COMPLETED
        assert profiles.count() == 1
        assert outcome.profile_id is not None

        prompt = llm.complete.call_args.args[0]
        assert RESUME_TEXT in prompt
        assert "system_prompt" in llm.complete.call_args.kwargs

    def test_gibberish_completion_degrades(self, processor, documents, profiles, storage, llm):
        llm.complete.return_value = "Sorry, I cannot help with that."
        doc_id = self._upload(documents, storage, RESUME_TEXT.encode("utf-8"))

        outcome = processor.process(doc_id, OWNER)

        assert outcome.success
        assert outcome.degraded
        assert outcome.profile.full_name is None
        assert outcome.profile.skills == []
        assert outcome.profile.raw_text == RESUME_TEXT
        assert outcome.warnings
        assert documents.status_of(doc_id) == ProcessingStatus.COMPLETED
        assert profiles.latest_for_document(doc_id).raw_text == RESUME_TEXT

    def test_download_failure_marks_failed(self, processor, documents, profiles, storage, llm):
        documents.add(UploadedDocument(
            id="doc-missing-blob", user_id=OWNER, file_name="cv.pdf", storage_path="nowhere/cv.pdf"
        ))

        outcome = processor.process("doc-missing-blob", OWNER)

        assert not outcome.success
        assert outcome.status == ProcessingStatus.FAILED
        assert outcome.error_message
        assert documents.status_of("doc-missing-blob") == ProcessingStatus.FAILED
        assert profiles.count() == 0
        llm.complete.assert_not_called()

    def test_download_raising_storage(self, documents, profiles, llm):
        storage = Mock(spec=BlobStorage)
        storage.download.side_effect = DownloadError("Failed to download file: bucket offline")
        documents.add(UploadedDocument(id="d", user_id=OWNER, file_name="cv.txt", storage_path="p"))

        outcome = ResumeProcessor(documents, profiles, storage, llm).process("d", OWNER)

        assert outcome.status == ProcessingStatus.FAILED
        assert "bucket offline" in outcome.error_message
        assert documents.get("d", OWNER).error_message == outcome.error_message

    def test_short_text_skips_model(self, processor, documents, profiles, storage, llm):
        doc_id = self._upload(documents, storage, b"Jane")

        outcome = processor.process(doc_id, OWNER)

        llm.complete.assert_not_called()
        assert outcome.success
        assert outcome.degraded
        assert outcome.profile.raw_text == "Jane"
        assert documents.status_of(doc_id) == ProcessingStatus.COMPLETED
        assert profiles.count() == 1

    def test_binary_upload_skips_model(self, processor, documents, storage, llm):
        doc_id = self._upload(documents, storage, b"\x89PNG\r\n\x1a\n\x00\xff", file_name="photo.png")

        outcome = processor.process(doc_id, OWNER)

        llm.complete.assert_not_called()
        assert outcome.status == ProcessingStatus.COMPLETED
        assert outcome.profile.raw_text == ""

    def test_not_found_does_not_mutate(self, processor, documents, storage):
        doc_id = self._upload(documents, storage, RESUME_TEXT.encode("utf-8"))

        with pytest.raises(DocumentNotFoundError):
            processor.process(doc_id, "someone-else")
        with pytest.raises(DocumentNotFoundError):
            processor.process("does-not-exist", OWNER)

        assert documents.status_of(doc_id) == ProcessingStatus.PENDING

    @pytest.mark.parametrize("error", [
        CompletionServiceError("503 from provider", status_code=503),
        CompletionResponseError("Unexpected response format"),
    ])
    def test_model_errors_degrade(self, processor, documents, storage, llm, error):
        llm.complete.side_effect = error
        doc_id = self._upload(documents, storage, RESUME_TEXT.encode("utf-8"))

        outcome = processor.process(doc_id, OWNER)

        assert outcome.success
        assert outcome.degraded
        assert documents.status_of(doc_id) == ProcessingStatus.COMPLETED

    def test_configuration_error_marks_failed(self, processor, documents, profiles, storage, llm):
        llm.complete.side_effect = CompletionConfigurationError("Completion API key not configured")
        doc_id = self._upload(documents, storage, RESUME_TEXT.encode("utf-8"))

        outcome = processor.process(doc_id, OWNER)

        assert not outcome.success
        assert outcome.status == ProcessingStatus.FAILED
        assert "API key" in outcome.error_message
        assert documents.status_of(doc_id) == ProcessingStatus.FAILED
        assert profiles.count() == 0

    def test_fail_policy(self, documents, profiles, storage, llm):
        llm.complete.return_value = "not json"
        processor = ResumeProcessor(documents, profiles, storage, llm, failure_policy="fail")
        doc_id = self._upload(documents, storage, RESUME_TEXT.encode("utf-8"))

        outcome = processor.process(doc_id, OWNER)

        assert not outcome.success
        assert documents.status_of(doc_id) == ProcessingStatus.FAILED
        assert profiles.count() == 0

    def test_unknown_policy(self, documents, profiles, storage, llm):
        with pytest.raises(ProcessorException):
            ResumeProcessor(documents, profiles, storage, llm, failure_policy="retry")

    def test_profile_insert_failure_marks_failed(self, documents, storage, llm):
        profiles = Mock(spec=ProfileRepository)
        profiles.insert.side_effect = PersistenceError("Failed to store parsed data: timeout")
        processor = ResumeProcessor(documents, profiles, storage, llm)
        doc_id = self._upload(documents, storage, RESUME_TEXT.encode("utf-8"))

        outcome = processor.process(doc_id, OWNER)

        assert not outcome.success
        assert "Failed to store parsed data" in outcome.error_message
        assert documents.status_of(doc_id) == ProcessingStatus.FAILED

    def test_oversized_file_fails(self, documents, profiles, storage, llm):
        processor = ResumeProcessor(documents, profiles, storage, llm, max_file_size=10)
        doc_id = self._upload(documents, storage, RESUME_TEXT.encode("utf-8"))

        outcome = processor.process(doc_id, OWNER)

        assert outcome.status == ProcessingStatus.FAILED
        assert "exceeds" in outcome.error_message
        llm.complete.assert_not_called()

    def test_status_transitions(self, profiles, storage, llm):
        documents = Mock(wraps=InMemoryDocumentRepository())
        processor = ResumeProcessor(documents, profiles, storage, llm)
        doc_id = self._upload(documents, storage, RESUME_TEXT.encode("utf-8"))

        processor.process(doc_id, OWNER)

        statuses = [c.args[1] for c in documents.update_status.call_args_list]
        assert statuses == [ProcessingStatus.PROCESSING, ProcessingStatus.COMPLETED]

    def test_terminal_status_failure_propagates(self, profiles, storage, llm):
        documents = Mock(wraps=InMemoryDocumentRepository())
        doc_id = self._upload(documents, storage, RESUME_TEXT.encode("utf-8"))
        documents.update_status.side_effect = [None, PersistenceError("connection reset")]
        processor = ResumeProcessor(documents, profiles, storage, llm)

        with pytest.raises(PersistenceError):
            processor.process(doc_id, OWNER)

    def test_reparse_creates_new_profile(self, processor, documents, profiles, storage):
        doc_id = self._upload(documents, storage, RESUME_TEXT.encode("utf-8"))

        processor.process(doc_id, OWNER)
        processor.process(doc_id, OWNER)

        assert len(profiles.for_document(doc_id)) == 2
        assert documents.status_of(doc_id) == ProcessingStatus.COMPLETED

    def test_long_text_bounded_in_prompt(self, documents, profiles, storage, llm):
        processor = ResumeProcessor(documents, profiles, storage, llm, max_chars=100)
        doc_id = self._upload(documents, storage, ("React " * 500).encode("utf-8"))

        outcome = processor.process(doc_id, OWNER)

        assert len(outcome.profile.raw_text) <= 100

    def test_empty_upload_completes_degraded(self, processor, documents, profiles, storage, llm):
        doc_id = self._upload(documents, storage, b"", file_name="empty.txt")

        outcome = processor.process(doc_id, OWNER)

        assert outcome.success
        assert outcome.degraded
        assert documents.status_of(doc_id) == ProcessingStatus.COMPLETED
        llm.complete.assert_not_called()

    def test_unexpected_client_error_marks_failed(self, processor, documents, profiles, storage, llm):
        llm.complete.side_effect = RuntimeError("client bug")
        doc_id = self._upload(documents, storage, RESUME_TEXT.encode("utf-8"))

        with pytest.raises(RuntimeError, match="client bug"):
            processor.process(doc_id, OWNER)

        document = documents.get(doc_id, OWNER)
        assert document.status == ProcessingStatus.FAILED
        assert "client bug" in document.error_message
        assert profiles.count() == 0

    def test_unexpected_repository_error_marks_failed(self, documents, storage, llm):
        profiles = Mock(spec=ProfileRepository)
        profiles.insert.side_effect = ValueError("bad row")
        processor = ResumeProcessor(documents, profiles, storage, llm)
        doc_id = self._upload(documents, storage, RESUME_TEXT.encode("utf-8"))

        with pytest.raises(ValueError):
            processor.process(doc_id, OWNER)

        assert documents.status_of(doc_id) == ProcessingStatus.FAILED
