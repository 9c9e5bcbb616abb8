"""Run-scoped cache of flattened page text."""
import logging
from typing import Dict, Optional, Protocol

from models.document import PageText

logger = logging.getLogger(__name__)


class PageSource(Protocol):
    """Anything that can render one page (1-indexed) to a flat string."""

    page_count: int

    async def get_page_text(self, page_number: int) -> str:
        ...


class PageAccessError(Exception):
    """The page accessor failed or the page number is out of range."""

    def __init__(self, message: str, page_number: Optional[int] = None):
        self.page_number = page_number
        super().__init__(message)


class PageTextCache:
    """
    Memoizes page text for a single extraction run.

    A new cache is created for every run and owned by its orchestrator;
    it is never shared between documents.
    """

    def __init__(self, source: PageSource):
        """
        Initialize the cache.

        Args:
            source: External page-text accessor for the open document
        """
        self.source = source
        self._pages: Dict[int, PageText] = {}

    @property
    def total_pages(self) -> int:
        return self.source.page_count

    @property
    def cached_pages(self) -> int:
        return len(self._pages)

    async def get_page(self, page_number: int) -> PageText:
        """
        Return a page, fetching its text on first request.

        Args:
            page_number: 1-indexed page number

        Returns:
            PageText, identical for every call within the run

        Raises:
            PageAccessError: If the page is out of range or the accessor fails
        """
        if page_number in self._pages:
            return self._pages[page_number]

        if not 1 <= page_number <= self.total_pages:
            raise PageAccessError(
                f"Page {page_number} is outside document range 1-{self.total_pages}",
                page_number=page_number,
            )

        try:
            text = await self.source.get_page_text(page_number)
        except PageAccessError:
            raise
        except Exception as e:
            logger.error(f"Failed to extract text of page {page_number}: {e}")
            raise PageAccessError(
                f"Failed to extract text of page {page_number}: {e}",
                page_number=page_number,
            ) from e

        page = PageText(page_number=page_number, text=text if text is not None else "")
        self._pages[page_number] = page
        return page

    async def get_page_text(self, page_number: int) -> str:
        page = await self.get_page(page_number)
        return page.text

    def clear(self) -> None:
        self._pages.clear()
