"""Top-level prospectus extraction: locate sections, then extract facts."""
import logging
import re
from datetime import datetime, timezone
from typing import Optional

from models.extraction import ExtractionResult
from services.document_loader import PdfPageSource
from services.prospectus_parser import ProspectusParser
from services.section_orchestrator import SectionOrchestrator

logger = logging.getLogger(__name__)

PROSPECTUS_URL_PATTERN = re.compile(r"hkexnews\.hk.*\.pdf$", re.IGNORECASE)

# English document URL -> Chinese document URL, first matching rule wins
CHINESE_URL_RULES = [
    (re.compile(r"/e([^/]*\.pdf)$", re.IGNORECASE), r"/c\1"),
    (re.compile(r"_e\.pdf$", re.IGNORECASE), "_c.pdf"),
    (re.compile(r"e\.pdf$", re.IGNORECASE), "c.pdf"),
    (re.compile(r"sehk(\d+)e(\d+)\.pdf$", re.IGNORECASE), r"sehk\1c\2.pdf"),
]


class ProspectusExtractor:
    """Runs section location and semantic extraction for one PDF at a time."""

    def __init__(self, parser: Optional[ProspectusParser] = None):
        """
        Initialize the extractor.

        Args:
            parser: Semantic extraction step; None skips it
        """
        self.parser = parser

    @staticmethod
    def is_valid_prospectus_url(url: str) -> bool:
        is_valid = bool(PROSPECTUS_URL_PATTERN.search(url or ""))
        logger.debug(f"URL validation: {url} -> {is_valid}")
        return is_valid

    @staticmethod
    def chinese_version_url(english_url: str) -> str:
        """
        Derive the Chinese-language prospectus URL from the English one.

        Args:
            english_url: URL of the English prospectus PDF

        Returns:
            URL of the Chinese version; unknown formats get a "_c" suffix
        """
        for pattern, replacement in CHINESE_URL_RULES:
            if pattern.search(english_url):
                return pattern.sub(replacement, english_url)

        logger.warning(f"Unrecognized prospectus URL format, using default rule: {english_url}")
        return re.sub(r"\.pdf$", "_c.pdf", english_url, flags=re.IGNORECASE)

    async def extract(self, pdf_path: str, source_url: Optional[str] = None, parse: bool = True) -> ExtractionResult:
        """
        Extract sections (and optionally facts) from a prospectus PDF.

        Args:
            pdf_path: Local path to the PDF
            source_url: URL the PDF was downloaded from, kept in metadata
            parse: Run semantic extraction when a parser is configured

        Returns:
            ExtractionResult with the section bundle and parsed facts

        Raises:
            FileNotFoundError: If the PDF does not exist
            PageAccessError: If the document cannot be read
        """
        logger.info(f"Extracting prospectus: {pdf_path}")
        if source_url and not self.is_valid_prospectus_url(source_url):
            logger.warning(f"Source URL does not look like an HKEX prospectus: {source_url}")

        with PdfPageSource(pdf_path) as source:
            bundle = await SectionOrchestrator(source).run()

        result = ExtractionResult(
            bundle=bundle,
            extract_time=datetime.now(timezone.utc).isoformat(),
            source=source_url or pdf_path,
            total_pages=bundle.metadata.total_pages,
        )

        if parse and self.parser is not None:
            result.company = self.parser.parse_company_info(bundle)
            result.professionals = self.parser.parse_service_providers(bundle)

        logger.info(
            f"Prospectus extraction complete: {result.total_pages} pages, "
            f"directors pages {bundle.metadata.directors_pages or 'not found'}"
        )
        return result
