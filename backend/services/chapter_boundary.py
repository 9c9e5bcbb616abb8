"""Chapter end-page detection by forward heading search."""
import logging
import re
from dataclasses import dataclass
from typing import Optional

from config import BOUNDARY_SEARCH_PAGES, BOUNDARY_DEFAULT_SPAN, BOUNDARY_ERROR_SPAN
from services.page_text_cache import PageAccessError, PageTextCache

logger = logging.getLogger(__name__)

# A whole line of upper-case letters, spaces, commas and ampersands
HEADING_PATTERN = re.compile(r"^[A-Z][A-Z ,&]+$", re.MULTILINE)

FOUND_HEADING = "next_heading"
DEFAULT_SPAN = "default_span"
SCAN_FAILED = "scan_failed"


@dataclass(frozen=True)
class BoundaryResult:
    """End page of a chapter and how it was determined."""
    end_page: int
    reason: str
    heading: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.reason != FOUND_HEADING


def _normalize(text: str) -> str:
    return " ".join(text.split()).upper()


def first_heading(page_text: str) -> Optional[str]:
    """Return the first all-caps heading line of a page, if any."""
    for line in page_text.splitlines():
        line = line.strip()
        if HEADING_PATTERN.match(line):
            return line
    return None


class ChapterBoundaryResolver:
    """Finds where a chapter ends by looking for the next top-level heading."""

    def __init__(
        self,
        cache: PageTextCache,
        search_pages: int = BOUNDARY_SEARCH_PAGES,
        default_span: int = BOUNDARY_DEFAULT_SPAN,
        error_span: int = BOUNDARY_ERROR_SPAN,
    ):
        """
        Initialize the resolver.

        Args:
            cache: Run-scoped page text cache
            search_pages: Maximum pages scanned past the start page
            default_span: End page offset when no heading is found
            error_span: End page offset when the scan fails
        """
        self.cache = cache
        self.search_pages = search_pages
        self.default_span = default_span
        self.error_span = error_span

    def _is_same_chapter(self, heading: str, title: str) -> bool:
        # Running page headers repeat (and sometimes extend) the chapter title
        heading, title = _normalize(heading), _normalize(title)
        return heading == title or heading.startswith(title)

    async def find_end_page(self, start_page: int, title: str) -> BoundaryResult:
        """
        Find the last page of the chapter starting at start_page.

        Scans at most search_pages pages forward. The page before the first
        page whose leading heading differs from the title is the end page.

        Args:
            start_page: First page of the chapter
            title: Chapter heading text as matched

        Returns:
            BoundaryResult; end_page is never below start_page
        """
        last_page = self.cache.total_pages
        scan_end = min(start_page + self.search_pages, last_page)
        logger.debug(f"Searching chapter end for '{title}' from page {start_page + 1} to {scan_end}")

        try:
            for page_number in range(start_page + 1, scan_end + 1):
                page_text = await self.cache.get_page_text(page_number)
                heading = first_heading(page_text)
                if heading and not self._is_same_chapter(heading, title):
                    logger.info(f"Next chapter found on page {page_number}: {heading}")
                    return BoundaryResult(end_page=page_number - 1, reason=FOUND_HEADING, heading=heading)
        except PageAccessError as e:
            end_page = max(start_page, min(start_page + self.error_span, last_page))
            logger.error(f"Chapter end search failed at page {e.page_number}, using page {end_page}")
            return BoundaryResult(end_page=end_page, reason=SCAN_FAILED)

        end_page = max(start_page, min(start_page + self.default_span, last_page))
        logger.info(f"No next chapter heading found, using default end page {end_page}")
        return BoundaryResult(end_page=end_page, reason=DEFAULT_SPAN)
