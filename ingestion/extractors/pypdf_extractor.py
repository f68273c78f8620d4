"""
PyPDF2-backed PDF extractor.
Structural alternative to the heuristic scraper, selected with
PDF_EXTRACTION_STRATEGY=pypdf2. Same interface, same failure contract.
"""
from io import BytesIO
import logging

from ingestion.extractors.base_extractor import BaseExtractor, ExtractionException

logger = logging.getLogger(__name__)


class PyPDF2Extractor(BaseExtractor):
    """
    Loader for PDF documents.
    Uses PyPDF2 for page-level text extraction.
    """

    SUPPORTED_EXTENSIONS = [".pdf"]
    SUPPORTED_MIME_TYPES = ["application/pdf"]

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        try:
            import PyPDF2
            self.PyPDF2 = PyPDF2
        except ImportError:
            raise ExtractionException(
                "PyPDF2 is not installed. Install with: pip install PyPDF2"
            )

    def extract(self, data: bytes) -> str:
        try:
            reader = self.PyPDF2.PdfReader(BytesIO(data))
        except Exception as e:
            raise ExtractionException(f"Error opening PDF: {e}") from e

        content_parts: list[str] = []
        for page_num, page in enumerate(reader.pages, start=1):
            try:
                text = page.extract_text()
                if text and text.strip():
                    content_parts.append(text)
            except Exception as e:
                logger.warning(f"Skipping page {page_num}: {e}")

        logger.info(
            f"PyPDF2 extracted {sum(len(p) for p in content_parts)} chars "
            f"from {len(reader.pages)} pages"
        )
        return "\n\n".join(content_parts)
