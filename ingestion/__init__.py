"""
Ingestion module.

Centralises resume text extraction, prompting, normalization and processing:

  ingestion.extractors      — bytes → bounded plain text (PDF heuristic, PyPDF2, text)
  ingestion.prompt_builder  — extraction prompt with the output schema
  ingestion.normalizer      — model output → validated candidate profile
  ingestion.processor       — end-to-end single-resume pipeline
  ingestion.pipeline        — batch / directory ingestion pipeline
"""
from ingestion.extractors import (
    BaseExtractor,
    ExtractionException,
    extract_text,
    get_extractor,
)
from ingestion.prompt_builder import SYSTEM_INSTRUCTION, build_prompt
from ingestion.normalizer import MalformedModelOutput, normalize_response, empty_profile
from ingestion.processor import ResumeProcessor, ProcessorException
from ingestion.pipeline import (
    IngestionPipeline,
    PipelineException,
    ProcessingResult,
    BatchResult,
)

__all__ = [
    # Extractors
    "BaseExtractor",
    "ExtractionException",
    "extract_text",
    "get_extractor",
    # Prompting / normalization
    "SYSTEM_INSTRUCTION",
    "build_prompt",
    "MalformedModelOutput",
    "normalize_response",
    "empty_profile",
    # Processor
    "ResumeProcessor",
    "ProcessorException",
    # Pipeline
    "IngestionPipeline",
    "PipelineException",
    "ProcessingResult",
    "BatchResult",
]
