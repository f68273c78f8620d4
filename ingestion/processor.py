"""
Resume processor module.
Orchestrates the per-document parse pipeline:
  fetch → download → extract → prompt → complete → normalize → persist → status
"""
from typing import Optional
import logging

from config.settings import Settings, settings as default_settings
from domain.models import ExtractedCandidateProfile, ParseOutcome, ProcessingStatus
from ingestion.extractors import extract_text
from ingestion.normalizer import MalformedModelOutput, empty_profile, normalize_response
from ingestion.prompt_builder import SYSTEM_INSTRUCTION, build_prompt
from llm_clients.base import (
    BaseCompletionClient,
    CompletionConfigurationError,
    CompletionResponseError,
    CompletionServiceError,
)
from persistence.base import (
    BlobStorage,
    DocumentNotFoundError,
    DocumentRepository,
    DownloadError,
    PersistenceError,
    ProfileRepository,
    StoreBundle,
)

logger = logging.getLogger(__name__)

FAILURE_POLICIES = ("degrade", "fail")

# Absorbed under the "degrade" policy
MODEL_ERRORS = (CompletionServiceError, CompletionResponseError, MalformedModelOutput)


class ProcessorException(Exception):
    """Exception raised for processor configuration errors"""
    pass


class _ParseFailure(Exception):
    """Internal signal: stop the pipeline and mark the document failed."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ResumeProcessor:
    """
    Runs one uploaded resume through extraction and structuring.

    Uses dependency injection so the datastore, object storage and
    completion service are all replaceable.

    Status transitions per call: ``processing`` once the document has been
    found, then exactly one terminal update (``completed`` or ``failed``).
    """

    def __init__(
        self,
        documents: DocumentRepository,
        profiles: ProfileRepository,
        storage: BlobStorage,
        llm_client: BaseCompletionClient,
        max_chars: int = 4000,
        min_usable_chars: int = 30,
        max_file_size: int = 10 * 1024 * 1024,
        failure_policy: str = "degrade",
        pdf_strategy: Optional[str] = None,
    ):
        if failure_policy not in FAILURE_POLICIES:
            raise ProcessorException(
                f"Unknown failure policy '{failure_policy}'. Expected one of {FAILURE_POLICIES}"
            )
        self.documents = documents
        self.profiles = profiles
        self.storage = storage
        self.llm_client = llm_client
        self.max_chars = max_chars
        self.min_usable_chars = min_usable_chars
        self.max_file_size = max_file_size
        self.failure_policy = failure_policy
        self.pdf_strategy = pdf_strategy

        logger.info(
            f"ResumeProcessor initialized: "
            f"documents={documents.__class__.__name__}, "
            f"storage={storage.__class__.__name__}, "
            f"llm={llm_client.__class__.__name__}, "
            f"failure_policy={failure_policy}"
        )

    @classmethod
    def from_settings(
        cls,
        store: StoreBundle,
        llm_client: BaseCompletionClient,
        cfg: Optional[Settings] = None,
    ) -> "ResumeProcessor":
        cfg = cfg or default_settings
        return cls(
            documents=store.documents,
            profiles=store.profiles,
            storage=store.storage,
            llm_client=llm_client,
            max_chars=cfg.EXTRACTION_MAX_CHARS,
            min_usable_chars=cfg.MIN_USABLE_TEXT_CHARS,
            max_file_size=cfg.MAX_FILE_SIZE_BYTES,
            failure_policy=cfg.MODEL_FAILURE_POLICY,
            pdf_strategy=cfg.PDF_EXTRACTION_STRATEGY,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def process(self, document_id: str, owner_id: str) -> ParseOutcome:
        """
        Parse one document owned by ``owner_id``.

        Returns:
            ParseOutcome describing the terminal state

        Raises:
            DocumentNotFoundError: If the document does not exist or is not
                owned by ``owner_id``; nothing is mutated
            PersistenceError: If a status update cannot be written

        Any other error raised by a collaborator marks the document failed
        and is re-raised.
        """
        document = self.documents.get(document_id, owner_id)
        if document is None:
            logger.warning("Resume %s not found for user %s", document_id, owner_id)
            raise DocumentNotFoundError(document_id)

        logger.info(f"Processing resume {document_id} ({document.file_name})")
        self.documents.update_status(document_id, ProcessingStatus.PROCESSING)

        warnings = []
        profile_id = None
        try:
            data = self._download(document.storage_path)
            text = extract_text(
                data,
                document.file_name,
                document.mime_type,
                max_chars=self.max_chars,
                pdf_strategy=self.pdf_strategy,
            )
            profile = self._structure(text, warnings)
            profile_id = self._persist(document_id, owner_id, profile)
        except _ParseFailure as failure:
            return self._finish_failed(document_id, failure.message, warnings)
        except Exception as e:
            logger.exception("Unexpected error while processing resume %s", document_id)
            self._set_terminal_status(document_id, ProcessingStatus.FAILED, f"Unexpected error: {e}")
            raise

        self._set_terminal_status(document_id, ProcessingStatus.COMPLETED)
        degraded = not profile.has_structured_data
        logger.info(
            "Resume %s completed%s", document_id, " with warnings" if degraded else ""
        )
        return ParseOutcome(
            document_id=document_id,
            success=True,
            status=ProcessingStatus.COMPLETED,
            profile=profile,
            profile_id=profile_id,
            degraded=degraded,
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _download(self, storage_path: str) -> bytes:
        try:
            data = self.storage.download(storage_path)
        except DownloadError as e:
            logger.error(f"Download failed for {storage_path}: {e}")
            raise _ParseFailure(str(e)) from e

        if len(data) > self.max_file_size:
            message = (
                f"Failed to download file: {len(data)} bytes exceeds the "
                f"{self.max_file_size} byte limit"
            )
            logger.error(message)
            raise _ParseFailure(message)
        return data

    def _structure(self, text: str, warnings: list) -> ExtractedCandidateProfile:
        if len(text) < self.min_usable_chars:
            message = f"Insufficient text extracted ({len(text)} chars); skipped AI parsing"
            logger.warning(message)
            warnings.append(message)
            return empty_profile(text)

        try:
            raw = self.llm_client.complete(build_prompt(text), system_prompt=SYSTEM_INSTRUCTION)
            return normalize_response(raw, source_text=text)
        except CompletionConfigurationError as e:
            logger.error(f"Completion client misconfigured: {e}")
            raise _ParseFailure(str(e)) from e
        except MODEL_ERRORS as e:
            if self.failure_policy == "fail":
                logger.error(f"AI parsing failed: {e}")
                raise _ParseFailure(str(e)) from e
            logger.warning(f"AI parsing failed, storing raw text only: {e}", exc_info=True)
            warnings.append(str(e))
            return empty_profile(text)

    def _persist(self, document_id: str, owner_id: str, profile: ExtractedCandidateProfile) -> str:
        try:
            profile_id = self.profiles.insert(document_id, owner_id, profile)
        except PersistenceError as e:
            logger.error(f"Failed to store parsed data for {document_id}: {e}", exc_info=True)
            raise _ParseFailure(str(e)) from e
        logger.info("Stored profile %s for resume %s", profile_id, document_id)
        return profile_id

    def _finish_failed(self, document_id: str, message: str, warnings: list) -> ParseOutcome:
        self._set_terminal_status(document_id, ProcessingStatus.FAILED, message)
        return ParseOutcome(
            document_id=document_id,
            success=False,
            status=ProcessingStatus.FAILED,
            error_message=message,
            warnings=warnings,
        )

    def _set_terminal_status(
        self,
        document_id: str,
        status: ProcessingStatus,
        error_message: Optional[str] = None,
    ) -> None:
        try:
            self.documents.update_status(document_id, status, error_message)
        except PersistenceError:
            logger.error(
                "Could not record status %s for resume %s", status.value, document_id,
                exc_info=True,
            )
            raise
