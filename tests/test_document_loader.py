"""Unit tests for the page sources."""
import sys
sys.path.insert(0, 'backend')

import pytest
from unittest.mock import MagicMock, patch
from services.document_loader import InMemoryPageSource, PdfPageSource
from services.page_text_cache import PageAccessError


@pytest.fixture
def pdf_file(tmp_path):
    path = tmp_path / "prospectus.pdf"
    path.write_bytes(b"%PDF-1.4 placeholder")
    return str(path)


def _mock_document(page_texts):
    document = MagicMock()
    document.__len__.return_value = len(page_texts)
    pages = [MagicMock(**{"get_text.return_value": text}) for text in page_texts]
    document.__getitem__.side_effect = lambda i: pages[i]
    return document


class TestPdfPageSource:
    """Test suite for PdfPageSource."""

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PdfPageSource(str(tmp_path / "nope.pdf"))

    @patch('services.document_loader.fitz')
    def test_unreadable_file_raises_page_access_error(self, mock_fitz, pdf_file):
        mock_fitz.open.side_effect = RuntimeError("cannot open broken document")

        with pytest.raises(PageAccessError, match="Failed to open PDF"):
            PdfPageSource(pdf_file)

    @pytest.mark.asyncio
    @patch('services.document_loader.fitz')
    async def test_page_text_is_one_indexed(self, mock_fitz, pdf_file):
        mock_fitz.open.return_value = _mock_document(["cover", "second", "third"])

        source = PdfPageSource(pdf_file)

        assert source.page_count == 3
        assert await source.get_page_text(1) == "cover"
        assert await source.get_page_text(3) == "third"

    @patch('services.document_loader.fitz')
    def test_context_manager_closes_document(self, mock_fitz, pdf_file):
        document = _mock_document(["cover"])
        mock_fitz.open.return_value = document

        with PdfPageSource(pdf_file) as source:
            assert source.page_count == 1

        document.close.assert_called_once()


class TestInMemoryPageSource:
    """Test suite for InMemoryPageSource."""

    @pytest.mark.asyncio
    async def test_pages(self):
        source = InMemoryPageSource(["a", "b"])

        assert source.page_count == 2
        assert await source.get_page_text(2) == "b"
