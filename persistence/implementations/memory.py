"""
In-memory persistence back-end.
Dict-backed; used by the CLI, local runs and tests.
"""
from dataclasses import replace
from typing import Dict, List, Optional, Tuple
import logging
import threading
import uuid

from domain.models import ExtractedCandidateProfile, ProcessingStatus, UploadedDocument
from persistence.base import (
    BlobStorage,
    DocumentRepository,
    DownloadError,
    PersistenceError,
    ProfileRepository,
)

logger = logging.getLogger(__name__)


class InMemoryDocumentRepository(DocumentRepository):
    """Document records kept in a dict keyed by document id."""

    def __init__(self):
        self._documents: Dict[str, UploadedDocument] = {}
        self._lock = threading.Lock()

    def add(self, document: UploadedDocument) -> UploadedDocument:
        with self._lock:
            self._documents[document.id] = document
        return document

    def get(self, document_id: str, owner_id: str) -> Optional[UploadedDocument]:
        with self._lock:
            document = self._documents.get(document_id)
            if document is None or document.user_id != owner_id:
                return None
            # Callers get a snapshot; state changes go through update_status
            return replace(document)

    def update_status(
        self,
        document_id: str,
        status: ProcessingStatus,
        error_message: Optional[str] = None,
    ) -> None:
        with self._lock:
            document = self._documents.get(document_id)
            if document is None:
                raise PersistenceError(f"Document {document_id} does not exist")
            if status == ProcessingStatus.PROCESSING:
                document.mark_processing()
            elif status == ProcessingStatus.COMPLETED:
                document.mark_completed()
            elif status == ProcessingStatus.FAILED:
                document.mark_failed(error_message or "Unknown error")
            else:
                document.status = status
            if error_message and status != ProcessingStatus.FAILED:
                document.error_message = error_message
        logger.debug("Document %s -> %s", document_id, status.value)

    def status_of(self, document_id: str) -> ProcessingStatus:
        with self._lock:
            return self._documents[document_id].status

    def count(self) -> int:
        return len(self._documents)


class InMemoryProfileRepository(ProfileRepository):
    """Profiles kept in insertion order."""

    def __init__(self):
        self._records: List[Tuple[str, str, str, ExtractedCandidateProfile]] = []
        self._lock = threading.Lock()

    def insert(
        self,
        document_id: str,
        owner_id: str,
        profile: ExtractedCandidateProfile,
    ) -> str:
        profile_id = str(uuid.uuid4())
        with self._lock:
            self._records.append((profile_id, document_id, owner_id, profile))
        return profile_id

    def for_document(self, document_id: str) -> List[ExtractedCandidateProfile]:
        with self._lock:
            return [p for _, doc_id, _, p in self._records if doc_id == document_id]

    def latest_for_document(self, document_id: str) -> Optional[ExtractedCandidateProfile]:
        profiles = self.for_document(document_id)
        return profiles[-1] if profiles else None

    def count(self) -> int:
        return len(self._records)


class InMemoryBlobStorage(BlobStorage):
    """Blobs kept in a dict keyed by storage path."""

    def __init__(self):
        self._blobs: Dict[str, bytes] = {}

    def put(self, storage_path: str, data: bytes) -> str:
        self._blobs[storage_path] = data
        return storage_path

    def download(self, storage_path: str) -> bytes:
        try:
            return self._blobs[storage_path]
        except KeyError:
            raise DownloadError(f"Object not found: {storage_path}")
