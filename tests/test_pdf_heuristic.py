"""Tests for the heuristic PDF scraper."""
from unittest.mock import MagicMock, Mock, patch

import pytest

from ingestion.extractors import ExtractionException, HeuristicPDFExtractor, PyPDF2Extractor, extract_text


def _pdf(*streams: bytes) -> bytes:
    body = b"%PDF-1.4\n1 0 obj << /Length 44 >>\n"
    for content in streams:
        body += b"stream\n" + content + b"\nendstream\n"
    return body + b"endobj\n%%EOF"


class TestHeuristicPDFExtractor:
    """Tests for HeuristicPDFExtractor."""

    @pytest.fixture
    def extractor(self):
        return HeuristicPDFExtractor()

    def test_extracts_literal_runs(self, extractor):
        data = _pdf(b"BT /F1 12 Tf 72 712 Td (Jane Doe) Tj ET BT (Senior Engineer) Tj ET")
        assert extractor.extract(data) == "Jane Doe Senior Engineer"

    def test_multiple_streams(self, extractor):
        data = _pdf(b"(Jane Doe) Tj", b"(Python developer) Tj")
        assert extractor.extract(data) == "Jane Doe Python developer"

    def test_drops_short_and_letterless_runs(self, extractor):
        data = _pdf(b"(ab) Tj (1234) Tj (12.5) Tj (React) Tj")
        assert extractor.extract(data) == "React"

    def test_escapes_become_spaces(self, extractor):
        data = _pdf(b"(Line one\\nLine\\ttwo\\r) Tj")
        assert extractor.extract(data) == "Line one Line two"

    def test_backslashes_removed(self, extractor):
        data = _pdf(b"(C\\\\ and Go) Tj")
        assert extractor.extract(data) == "C and Go"

    def test_text_outside_streams_ignored(self, extractor):
        data = b"(Outside Text) " + _pdf(b"(Inside Text) Tj")
        assert extractor.extract(data) == "Inside Text"

    def test_compressed_stream_yields_nothing(self, extractor):
        data = _pdf(b"x\x9c\xcbH\xcd\xc9\xc9W(\xcf/\xcaI\x01\x00")
        assert extractor.extract(data) == ""

    def test_not_a_pdf(self, extractor):
        assert extractor.extract(b"hello world") == ""

    def test_through_entry_point(self):
        data = _pdf(b"(Jane Doe) Tj (jane@x.com) Tj")
        assert extract_text(data, "cv.pdf", pdf_strategy="heuristic") == "Jane Doe jane@x.com"


class TestPyPDF2Extractor:
    """Tests for the PyPDF2 strategy with a mocked reader."""

    def test_joins_page_text(self):
        extractor = PyPDF2Extractor()
        page_one, page_two, blank = Mock(), Mock(), Mock()
        page_one.extract_text.return_value = "Jane Doe"
        page_two.extract_text.return_value = "Python"
        blank.extract_text.return_value = "   "
        reader = MagicMock()
        reader.pages = [page_one, blank, page_two]

        with patch.object(extractor.PyPDF2, "PdfReader", return_value=reader):
            assert extractor.extract(b"%PDF") == "Jane Doe\n\nPython"

    def test_bad_page_skipped(self):
        extractor = PyPDF2Extractor()
        good, bad = Mock(), Mock()
        good.extract_text.return_value = "Jane Doe"
        bad.extract_text.side_effect = KeyError("/Font")
        reader = MagicMock()
        reader.pages = [bad, good]

        with patch.object(extractor.PyPDF2, "PdfReader", return_value=reader):
            assert extractor.extract(b"%PDF") == "Jane Doe"

    def test_unreadable_pdf_raises(self):
        extractor = PyPDF2Extractor()
        with patch.object(extractor.PyPDF2, "PdfReader", side_effect=ValueError("EOF marker not found")):
            with pytest.raises(ExtractionException):
                extractor.extract(b"garbage")

    def test_entry_point_returns_empty_on_garbage(self):
        assert extract_text(b"not a pdf at all", "cv.pdf", pdf_strategy="pypdf2") == ""
