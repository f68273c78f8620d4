"""
Base module for persistence back-ends.
Defines the interfaces the ingestion pipeline needs from the datastore
and the object store.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
import logging

from domain.models import ExtractedCandidateProfile, ProcessingStatus, UploadedDocument

logger = logging.getLogger(__name__)


class PersistenceException(Exception):
    """Base exception for datastore and storage errors"""
    pass


class DocumentNotFoundError(PersistenceException):
    """Document does not exist or is not owned by the requesting user.

    The two cases are deliberately indistinguishable to the caller.
    """

    def __init__(self, document_id: str):
        super().__init__("Resume not found or access denied")
        self.document_id = document_id


class DownloadError(PersistenceException):
    """Raised when a blob cannot be read from storage"""
    pass


class PersistenceError(PersistenceException):
    """Raised when a datastore read or write fails"""
    pass


class DocumentRepository(ABC):
    """Access to uploaded document records."""

    @abstractmethod
    def get(self, document_id: str, owner_id: str) -> Optional[UploadedDocument]:
        """
        Load a document owned by ``owner_id``.

        Returns:
            The document, or None if missing or owned by someone else

        Raises:
            PersistenceError: If the datastore cannot be queried
        """
        pass

    @abstractmethod
    def update_status(
        self,
        document_id: str,
        status: ProcessingStatus,
        error_message: Optional[str] = None,
    ) -> None:
        """
        Set the document's parsing status.

        Raises:
            PersistenceError: If the update fails
        """
        pass


class ProfileRepository(ABC):
    """Storage for extracted candidate profiles."""

    @abstractmethod
    def insert(
        self,
        document_id: str,
        owner_id: str,
        profile: ExtractedCandidateProfile,
    ) -> str:
        """
        Insert a new profile record for a document.

        Every call creates a new record; re-parsing a document does not
        update earlier profiles.

        Returns:
            Identifier of the new record

        Raises:
            PersistenceError: If the insert fails
        """
        pass


class BlobStorage(ABC):
    """Read access to raw uploaded files."""

    @abstractmethod
    def download(self, storage_path: str) -> bytes:
        """
        Download a file by its storage locator.

        Raises:
            DownloadError: If the file cannot be read
        """
        pass


@dataclass
class StoreBundle:
    """The three collaborators a store provider supplies."""
    documents: DocumentRepository
    profiles: ProfileRepository
    storage: BlobStorage
