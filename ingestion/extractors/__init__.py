"""
Extractors subpackage for resume ingestion.
Provides text extraction strategies for different document formats.
"""
from ingestion.extractors.base_extractor import (
    BaseExtractor,
    ExtractionException,
    normalize_text,
)
from ingestion.extractors.pdf_heuristic import HeuristicPDFExtractor
from ingestion.extractors.pypdf_extractor import PyPDF2Extractor
from ingestion.extractors.txt_extractor import TxtExtractor, RawDecodeExtractor
from ingestion.extractors.extractor_factory import get_extractor, extract_text

__all__ = [
    "BaseExtractor",
    "ExtractionException",
    "normalize_text",
    "HeuristicPDFExtractor",
    "PyPDF2Extractor",
    "TxtExtractor",
    "RawDecodeExtractor",
    "get_extractor",
    "extract_text",
]
