"""
Base extractor module.
Defines abstract interface for text extractors and the shared
post-processing applied to every extraction result.
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional
import logging
import re

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


class ExtractionException(Exception):
    """Exception raised inside an extractor strategy"""
    pass


def normalize_text(text: str, max_chars: int) -> str:
    """
    Collapse whitespace runs to single spaces, trim, and hard-truncate.

    Args:
        text: Raw extracted text
        max_chars: Maximum number of characters to keep

    Returns:
        Normalized text, never longer than ``max_chars``
    """
    if not text:
        return ""
    cleaned = _WHITESPACE_RE.sub(" ", text).strip()
    if max_chars >= 0 and len(cleaned) > max_chars:
        cleaned = cleaned[:max_chars].rstrip()
    return cleaned


class BaseExtractor(ABC):
    """
    Abstract base class for text extractors.
    Each strategy converts a raw byte buffer into plain text.
    """

    SUPPORTED_EXTENSIONS: list = []
    SUPPORTED_MIME_TYPES: list = []

    def __init__(self, **kwargs):
        self.config = kwargs

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @abstractmethod
    def extract(self, data: bytes) -> str:
        """
        Extract plain text from a byte buffer.

        Args:
            data: Raw file contents

        Returns:
            Extracted text (may be empty)

        Raises:
            ExtractionException: If extraction fails
        """
        pass

    @classmethod
    def supports(cls, filename: str, mime_type: Optional[str] = None) -> bool:
        """
        Check if this extractor handles the given file.

        The file extension is checked first; the MIME type is only used when
        the filename carries no recognised extension.
        """
        extension = Path(filename or "").suffix.lower()
        if extension:
            return extension in cls.SUPPORTED_EXTENSIONS
        return (mime_type or "").lower() in cls.SUPPORTED_MIME_TYPES
