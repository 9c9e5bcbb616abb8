"""Case-insensitive keyword scanning over page ranges."""
import logging
import re
from functools import lru_cache
from typing import List, Optional, Set, Tuple

from models.document import KeywordSpec, KeywordVariant, Occurrence
from services.page_text_cache import PageTextCache

logger = logging.getLogger(__name__)


@lru_cache(maxsize=512)
def _phrase_pattern(phrase: str) -> re.Pattern:
    # Tokens may be separated by any run of whitespace, including line breaks
    tokens = [re.escape(token) for token in phrase.split()]
    return re.compile(r"\s*".join(tokens), re.IGNORECASE)


@lru_cache(maxsize=512)
def _literal_pattern(text: str) -> re.Pattern:
    # Positions index the original text, not a case-folded copy
    return re.compile(re.escape(text), re.IGNORECASE)


def find_in_text(text: str, variant: KeywordVariant) -> Optional[Tuple[int, int]]:
    """
    Find the first match of a keyword variant in text.

    Args:
        text: Text to search
        variant: Keyword variant to look for

    Returns:
        (index, match_length) of the first match, or None
    """
    if not text or not variant.text:
        return None

    pattern = _phrase_pattern(variant.text) if variant.multi_token else _literal_pattern(variant.text)
    match = pattern.search(text)
    if match is None:
        return None
    return match.start(), match.end() - match.start()


class KeywordScanner:
    """Scans page ranges for the variants of a keyword spec."""

    def __init__(self, cache: PageTextCache):
        """
        Initialize the scanner.

        Args:
            cache: Run-scoped page text cache
        """
        self.cache = cache

    def _clamp(self, page_range: range) -> range:
        """Restrict a page range to [1, total_pages]."""
        return range(max(1, page_range.start), min(self.cache.total_pages, page_range.stop - 1) + 1)

    async def scan(self, page_range: range, spec: KeywordSpec) -> List[Occurrence]:
        """
        Collect occurrences of every variant on every page of a range.

        Pages are visited in increasing order and awaited one at a time.
        Each variant contributes at most one occurrence per page; two
        variants matching the same span are reported once.

        Args:
            page_range: Pages to scan (clamped to the document)
            spec: Keyword variants, tried in listed order on each page

        Returns:
            Occurrences ordered by page, then by variant order

        Raises:
            PageAccessError: If a page cannot be read
        """
        occurrences: List[Occurrence] = []
        pages = self._clamp(page_range)

        for page_number in pages:
            text = await self.cache.get_page_text(page_number)
            seen: Set[Tuple[int, int]] = set()

            for variant in spec.variants:
                found = find_in_text(text, variant)
                if found is None or found in seen:
                    continue
                seen.add(found)
                index, match_length = found
                occurrences.append(Occurrence(
                    page=page_number,
                    keyword=variant.text,
                    index=index,
                    match_length=match_length,
                ))
                logger.debug(
                    f"Match #{len(occurrences)} for '{spec.name}': page {page_number} - {variant.text}"
                )

        logger.info(f"Scanned pages {pages.start}-{pages.stop - 1} for '{spec.name}': {len(occurrences)} occurrences")
        return occurrences

    async def scan_document(self, spec: KeywordSpec) -> List[Occurrence]:
        """Scan every page of the document."""
        return await self.scan(range(1, self.cache.total_pages + 1), spec)

    async def find_first(self, page_range: range, spec: KeywordSpec) -> Optional[Occurrence]:
        """
        Return the first occurrence in a page range, stopping at the first hit.

        Args:
            page_range: Pages to scan (clamped to the document)
            spec: Keyword variants, tried in listed order on each page

        Returns:
            First Occurrence found, or None
        """
        pages = self._clamp(page_range)

        for page_number in pages:
            text = await self.cache.get_page_text(page_number)
            for variant in spec.variants:
                found = find_in_text(text, variant)
                if found is not None:
                    logger.info(f"Found '{spec.name}' on page {page_number} - {variant.text}")
                    return Occurrence(page=page_number, keyword=variant.text, index=found[0], match_length=found[1])

        logger.info(f"'{spec.name}' not found in pages {pages.start}-{pages.stop - 1}")
        return None
