"""
Plain-text and fallback extractors.
Both decode bytes as UTF-8 without an external library.
"""
import logging

from ingestion.extractors.base_extractor import BaseExtractor, ExtractionException

logger = logging.getLogger(__name__)


class TxtExtractor(BaseExtractor):
    """
    Extractor for plain-text documents (.txt, .md).
    Invalid byte sequences are replaced rather than rejected.
    """

    SUPPORTED_EXTENSIONS = [".txt", ".md"]
    SUPPORTED_MIME_TYPES = ["text/plain", "text/markdown"]

    def __init__(self, encoding: str = "utf-8", **kwargs):
        super().__init__(**kwargs)
        self.encoding = encoding

    def extract(self, data: bytes) -> str:
        try:
            return data.decode(self.encoding, errors="replace")
        except LookupError as e:
            raise ExtractionException(f"Unknown encoding '{self.encoding}'") from e


class RawDecodeExtractor(BaseExtractor):
    """
    Last-resort extractor for formats without a dedicated strategy
    (.doc, .docx, .rtf, .odt, images, unknown types).

    Attempts a strict UTF-8 decode. Binary formats normally fail here and the
    caller ends up with empty text, which the pipeline treats as a
    low-information document rather than an error.
    """

    SUPPORTED_EXTENSIONS = [".doc", ".docx", ".rtf", ".odt"]
    SUPPORTED_MIME_TYPES = [
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/rtf",
        "application/vnd.oasis.opendocument.text",
        "application/octet-stream",
    ]

    @classmethod
    def supports(cls, filename: str, mime_type=None) -> bool:
        return True

    def extract(self, data: bytes) -> str:
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ExtractionException(
                f"Content is not valid UTF-8 (byte {e.start})"
            ) from e
