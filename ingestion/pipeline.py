"""
Ingestion pipeline for batch processing multiple resumes.
Runs ResumeProcessor over stored document ids or over local files.
"""
from typing import List, Optional, Sequence
from pathlib import Path
from dataclasses import dataclass, field
from datetime import datetime
import logging
import mimetypes
import uuid

from domain.models import ParseOutcome, UploadedDocument
from ingestion.processor import ResumeProcessor
from persistence.base import PersistenceException
from persistence.implementations.memory import InMemoryBlobStorage, InMemoryDocumentRepository

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = [".pdf", ".txt", ".md", ".doc", ".docx", ".rtf", ".odt"]


class PipelineException(Exception):
    """Exception raised for pipeline errors"""
    pass


@dataclass
class ProcessingResult:
    """Result of processing a single resume"""
    source: str
    success: bool
    document_id: Optional[str] = None
    degraded: bool = False
    error_message: Optional[str] = None
    processing_time: float = 0.0
    outcome: Optional[ParseOutcome] = None


@dataclass
class BatchResult:
    """Result of batch processing multiple resumes"""
    total_files: int
    successful: int
    failed: int
    results: List[ProcessingResult] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    @property
    def success_rate(self) -> float:
        """Calculate success rate as percentage"""
        if self.total_files == 0:
            return 0.0
        return (self.successful / self.total_files) * 100

    @property
    def degraded(self) -> int:
        """Completed resumes that have no structured fields"""
        return sum(1 for r in self.results if r.success and r.degraded)

    def get_failed(self) -> List[str]:
        return [r.source for r in self.results if not r.success]

    def get_successful(self) -> List[str]:
        return [r.source for r in self.results if r.success]


class IngestionPipeline:
    """
    Batch processing over ResumeProcessor.

    ``process_documents`` works with any store. ``process_files`` and
    ``process_directory`` register local files first and therefore need the
    in-memory store.
    """

    def __init__(
        self,
        processor: ResumeProcessor,
        supported_extensions: Optional[List[str]] = None
    ):
        self.processor = processor
        self.supported_extensions = supported_extensions or list(DEFAULT_EXTENSIONS)

        logger.info(
            f"IngestionPipeline initialized with "
            f"processor={processor.__class__.__name__}, "
            f"supported_extensions={self.supported_extensions}"
        )

    def process_documents(
        self,
        document_ids: Sequence[str],
        owner_id: str,
        continue_on_error: bool = True
    ) -> BatchResult:
        """
        Parse already-stored documents.

        Raises:
            PipelineException: If continue_on_error=False and a document fails
        """
        logger.info(f"Starting batch processing of {len(document_ids)} resumes")
        batch_result = BatchResult(total_files=len(document_ids), successful=0, failed=0)

        for document_id in document_ids:
            result = self._process_single(document_id, document_id, owner_id)
            batch_result.results.append(result)

            if result.success:
                batch_result.successful += 1
            else:
                batch_result.failed += 1
                if not continue_on_error:
                    batch_result.completed_at = datetime.now()
                    error_msg = f"Processing failed for {result.source}: {result.error_message}"
                    logger.error(error_msg)
                    raise PipelineException(error_msg)

        batch_result.completed_at = datetime.now()
        logger.info(
            f"Batch processing completed: {batch_result.successful}/{batch_result.total_files} successful, "
            f"{batch_result.degraded} with warnings, "
            f"success rate: {batch_result.success_rate:.1f}%"
        )
        return batch_result

    def process_files(
        self,
        file_paths: Sequence[str | Path],
        owner_id: str = "local",
        continue_on_error: bool = True
    ) -> BatchResult:
        """
        Register local files as uploaded documents and parse them.

        Unsupported or unreadable files are reported as failures without
        reaching the processor.
        """
        batch_result = BatchResult(total_files=len(file_paths), successful=0, failed=0)
        registered = []

        for file_path in file_paths:
            path = Path(file_path)
            try:
                registered.append((str(path), self.register_file(path, owner_id)))
            except PipelineException as e:
                logger.warning(str(e))
                batch_result.failed += 1
                batch_result.results.append(
                    ProcessingResult(source=str(path), success=False, error_message=str(e))
                )
                if not continue_on_error:
                    raise

        for source, document_id in registered:
            result = self._process_single(source, document_id, owner_id)
            batch_result.results.append(result)
            if result.success:
                batch_result.successful += 1
            else:
                batch_result.failed += 1
                if not continue_on_error:
                    raise PipelineException(f"Processing failed for {source}: {result.error_message}")

        batch_result.completed_at = datetime.now()
        logger.info(
            f"Batch processing completed: {batch_result.successful}/{batch_result.total_files} successful, "
            f"{batch_result.degraded} with warnings"
        )
        return batch_result

    def process_directory(
        self,
        directory_path: str | Path,
        owner_id: str = "local",
        recursive: bool = False,
        continue_on_error: bool = True
    ) -> BatchResult:
        """
        Raises:
            PipelineException: If directory doesn't exist or is not a directory
        """
        directory = Path(directory_path)

        if not directory.exists():
            raise PipelineException(f"Directory does not exist: {directory}")

        if not directory.is_dir():
            raise PipelineException(f"Path is not a directory: {directory}")

        file_paths = self._find_supported_files(directory, recursive)
        logger.info(
            f"Found {len(file_paths)} supported files in {directory} "
            f"(recursive={recursive})"
        )

        if not file_paths:
            logger.warning(f"No supported files found in {directory}")
            return BatchResult(total_files=0, successful=0, failed=0)

        return self.process_files(file_paths, owner_id, continue_on_error)

    def register_file(self, file_path: Path, owner_id: str) -> str:
        """Copy a local file into the in-memory store; returns the new document id."""
        documents = self.processor.documents
        storage = self.processor.storage
        if not isinstance(documents, InMemoryDocumentRepository) or not isinstance(
            storage, InMemoryBlobStorage
        ):
            raise PipelineException("Local files can only be ingested with the in-memory store")

        if not self._is_supported_file(file_path):
            raise PipelineException(f"Unsupported file type: {file_path.suffix or file_path.name}")

        try:
            data = file_path.read_bytes()
        except OSError as e:
            raise PipelineException(f"Cannot read {file_path}: {e}") from e

        document_id = str(uuid.uuid4())
        storage_path = f"{owner_id}/{document_id}/{file_path.name}"
        storage.put(storage_path, data)
        documents.add(
            UploadedDocument(
                id=document_id,
                user_id=owner_id,
                file_name=file_path.name,
                storage_path=storage_path,
                file_size=len(data),
                mime_type=mimetypes.guess_type(file_path.name)[0],
            )
        )
        return document_id

    def _process_single(self, source: str, document_id: str, owner_id: str) -> ProcessingResult:
        start_time = datetime.now()
        logger.info(f"Processing: {source}")

        try:
            outcome = self.processor.process(document_id, owner_id)
        except PersistenceException as e:
            processing_time = (datetime.now() - start_time).total_seconds()
            logger.error(f"Failed to process {source}: {e}", exc_info=True)
            return ProcessingResult(
                source=source,
                success=False,
                document_id=document_id,
                error_message=str(e),
                processing_time=processing_time,
            )

        processing_time = (datetime.now() - start_time).total_seconds()
        return ProcessingResult(
            source=source,
            success=outcome.success,
            document_id=document_id,
            degraded=outcome.degraded,
            error_message=outcome.error_message,
            processing_time=processing_time,
            outcome=outcome,
        )

    def _find_supported_files(self, directory: Path, recursive: bool) -> Sequence[Path]:
        files = []
        for ext in self.supported_extensions:
            files.extend(directory.rglob(f"*{ext}") if recursive else directory.glob(f"*{ext}"))
        return sorted(files)

    def _is_supported_file(self, file_path: Path) -> bool:
        return file_path.suffix.lower() in self.supported_extensions
