"""Page sources that turn document pages into flat text."""
import asyncio
import logging
import os
from typing import List
import fitz  # PyMuPDF

from services.page_text_cache import PageAccessError

logger = logging.getLogger(__name__)


class PdfPageSource:
    """Renders the text of single PDF pages on demand."""

    def __init__(self, filepath: str):
        """
        Open a PDF file.

        Args:
            filepath: Path to the PDF file

        Raises:
            FileNotFoundError: If the file does not exist
            PageAccessError: If the file is not a readable PDF
        """
        if not os.path.exists(filepath):
            logger.error(f"PDF file not found: {filepath}")
            raise FileNotFoundError(f"PDF file not found: {filepath}")

        self.filepath = filepath
        try:
            # Open PDF with PyMuPDF
            self._document = fitz.open(filepath)
        except Exception as e:
            logger.error(f"Failed to open PDF {filepath}: {str(e)}")
            raise PageAccessError(f"Failed to open PDF {filepath}: {e}") from e

        self.page_count = len(self._document)
        logger.info(f"Opened {filepath}: {self.page_count} pages")

    async def get_page_text(self, page_number: int) -> str:
        """
        Extract the text of one page.

        Rendering runs in a worker thread so the event loop is not blocked;
        callers await each page before requesting the next.

        Args:
            page_number: 1-indexed page number

        Returns:
            Page text with PyMuPDF line breaks preserved
        """
        return await asyncio.to_thread(self._render_page, page_number)

    def _render_page(self, page_number: int) -> str:
        page = self._document[page_number - 1]
        return page.get_text()

    def close(self) -> None:
        self._document.close()

    def __enter__(self) -> "PdfPageSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class InMemoryPageSource:
    """Page source over already-extracted page strings."""

    def __init__(self, pages: List[str]):
        self.pages = list(pages)
        self.page_count = len(self.pages)

    async def get_page_text(self, page_number: int) -> str:
        return self.pages[page_number - 1]
