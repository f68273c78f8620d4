"""
Heuristic PDF text scraper.

This is NOT a PDF parser. It scans the raw byte stream for
``stream ... endstream`` segments and pulls parenthesized string literals
out of them, which is enough for simple text-based PDFs.

Known failure modes (the result is then empty or partial):
  - compressed (FlateDecode) content streams
  - fonts that show text through glyph indexes / hex strings ``<...>``
  - text placed with non-literal show-text operators
  - literals containing escaped parentheses are cut at the first ``)``
"""
import logging
import re

from ingestion.extractors.base_extractor import BaseExtractor, ExtractionException

logger = logging.getLogger(__name__)

_STREAM_RE = re.compile(rb"stream(.*?)endstream", re.DOTALL)
_LITERAL_RE = re.compile(rb"\((.*?)\)")
_ESCAPED_WS_RE = re.compile(r"\\[rnt]")
_LETTER_RE = re.compile(r"[a-zA-Z]")
_WHITESPACE_RE = re.compile(r"\s+")


class HeuristicPDFExtractor(BaseExtractor):
    """
    Extracts literal text runs from uncompressed PDF content streams.

    Runs are kept only if they are longer than ``min_run_length`` and contain
    at least one letter, which filters out coordinates and operator noise.
    """

    SUPPORTED_EXTENSIONS = [".pdf"]
    SUPPORTED_MIME_TYPES = ["application/pdf"]

    def __init__(self, min_run_length: int = 3, **kwargs):
        super().__init__(**kwargs)
        self.min_run_length = min_run_length

    def extract(self, data: bytes) -> str:
        try:
            runs = []
            for stream in _STREAM_RE.finditer(data):
                for literal in _LITERAL_RE.finditer(stream.group(1)):
                    run = self._clean_run(literal.group(1))
                    if len(run) >= self.min_run_length and _LETTER_RE.search(run):
                        runs.append(run)
        except Exception as e:
            raise ExtractionException(f"PDF scan failed: {e}") from e

        text = _WHITESPACE_RE.sub(" ", " ".join(runs)).strip()
        logger.info("Heuristic PDF scan kept %d runs (%d chars)", len(runs), len(text))
        return text

    @staticmethod
    def _clean_run(raw: bytes) -> str:
        # Latin-1 maps every byte to a code point, so decoding cannot fail
        run = raw.decode("latin-1")
        run = _ESCAPED_WS_RE.sub(" ", run)
        return run.replace("\\", "").strip()
