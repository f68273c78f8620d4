"""
Extractor factory module.
Selects the extraction strategy for a file and applies the shared
post-processing. ``extract_text`` is the pipeline entry point and never raises.
"""
from pathlib import Path
from typing import Optional
import logging

from config.settings import settings
from ingestion.extractors.base_extractor import BaseExtractor, normalize_text
from ingestion.extractors.pdf_heuristic import HeuristicPDFExtractor
from ingestion.extractors.pypdf_extractor import PyPDF2Extractor
from ingestion.extractors.txt_extractor import TxtExtractor, RawDecodeExtractor

logger = logging.getLogger(__name__)

PDF_STRATEGIES = {
    "heuristic": HeuristicPDFExtractor,
    "pypdf2": PyPDF2Extractor,
}


def get_extractor(
    filename: str,
    mime_type: Optional[str] = None,
    pdf_strategy: Optional[str] = None,
    **kwargs
) -> BaseExtractor:
    """
    Factory function to get the appropriate extractor for a file.

    Args:
        filename: Original filename (its extension drives the choice)
        mime_type: Declared MIME type, used when the filename has no extension
        pdf_strategy: "heuristic" or "pypdf2" (default from settings)
        **kwargs: Additional configuration for the extractor

    Returns:
        Appropriate BaseExtractor instance. Unknown types get the
        raw-decode fallback rather than an error.

    Raises:
        ValueError: If ``pdf_strategy`` is not a known strategy
    """
    strategy = (pdf_strategy or settings.PDF_EXTRACTION_STRATEGY).lower()
    if strategy not in PDF_STRATEGIES:
        raise ValueError(
            f"Unknown PDF extraction strategy: {strategy}. "
            f"Available: {sorted(PDF_STRATEGIES)}"
        )

    pdf_cls = PDF_STRATEGIES[strategy]
    if pdf_cls.supports(filename, mime_type):
        return pdf_cls(**kwargs)

    if TxtExtractor.supports(filename, mime_type):
        return TxtExtractor(**kwargs)

    return RawDecodeExtractor(**kwargs)


def extract_text(
    data: bytes,
    filename: str,
    mime_type: Optional[str] = None,
    max_chars: Optional[int] = None,
    pdf_strategy: Optional[str] = None,
) -> str:
    """
    Best-effort plain-text extraction with automatic strategy selection.

    Never raises: any failure yields an empty string, meaning "no usable text".
    The result is whitespace-collapsed and at most ``max_chars`` long.
    """
    limit = settings.EXTRACTION_MAX_CHARS if max_chars is None else max_chars
    name = Path(filename or "").name

    try:
        extractor = get_extractor(name, mime_type, pdf_strategy=pdf_strategy)
        raw = extractor.extract(data or b"")
    except Exception as e:
        logger.warning("Text extraction failed for '%s': %s", name, e)
        return ""

    text = normalize_text(raw, limit)
    logger.info(
        "Extracted %d chars from '%s' using %s", len(text), name, extractor.name
    )
    return text
