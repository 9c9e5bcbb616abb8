"""
Section orchestrator for prospectus documents.

Drives one extraction run through a fixed sequence of states:

    Idle -> ScanningFirstPage -> DetectingType -> SearchingStatement
         -> SearchingSummary -> SearchingDirectors -> ExtractingChunks -> Complete

Each state feeds the next and there is no branching back. Pages are
fetched one at a time through a run-scoped PageTextCache so that scan
order, and therefore occurrence selection, is deterministic.

Failure semantics:
- A missing Summary chapter is replaced by the identity-statement paragraph.
- A missing directors chapter yields empty chunk lists.
- An unreadable document (no pages, accessor errors) aborts the run with
  PageAccessError.
"""
import logging
from enum import Enum
from typing import Dict, List, Optional, Tuple

from config import (
    BOUNDARY_DEFAULT_SPAN,
    BOUNDARY_ERROR_SPAN,
    BOUNDARY_SEARCH_PAGES,
    SUMMARY_SEARCH_PAGES,
)
from models.bundle import HeuristicEvent, SectionBundle, StatementLocation
from models.document import Section, TextChunk
from services.chapter_boundary import ChapterBoundaryResolver
from services.context_window import ContextWindowExtractor
from services.keyword_catalog import (
    DIRECTORS_FAMILIES,
    PROFESSIONAL_ROLES,
    STATEMENT_PATTERN,
    SUMMARY_SPEC,
)
from services.keyword_scanner import KeywordScanner
from services.occurrence_selector import OccurrenceSelector
from services.page_text_cache import PageAccessError, PageSource, PageTextCache
from services.registration_classifier import RegistrationClassifier

logger = logging.getLogger(__name__)


class OrchestratorState(Enum):
    IDLE = "Idle"
    SCANNING_FIRST_PAGE = "ScanningFirstPage"
    DETECTING_TYPE = "DetectingType"
    SEARCHING_STATEMENT = "SearchingStatement"
    SEARCHING_SUMMARY = "SearchingSummary"
    SEARCHING_DIRECTORS = "SearchingDirectors"
    EXTRACTING_CHUNKS = "ExtractingChunks"
    COMPLETE = "Complete"


class SectionOrchestrator:
    """Composes the section-locating components into a SectionBundle."""

    def __init__(
        self,
        source: PageSource,
        selector: Optional[OccurrenceSelector] = None,
        classifier: Optional[RegistrationClassifier] = None,
        window_extractor: Optional[ContextWindowExtractor] = None,
        boundary_search_pages: int = BOUNDARY_SEARCH_PAGES,
        boundary_default_span: int = BOUNDARY_DEFAULT_SPAN,
        boundary_error_span: int = BOUNDARY_ERROR_SPAN,
        summary_search_pages: int = SUMMARY_SEARCH_PAGES,
    ):
        """
        Initialize a single extraction run.

        Args:
            source: Page-text accessor for the open document
            selector: Occurrence tie-break policy (defaults from config)
            classifier: Registration type classifier
            window_extractor: Context window extractor
            boundary_search_pages: Pages scanned forward for the next chapter heading
            boundary_default_span: Chapter length when no next heading is found
            boundary_error_span: Chapter length when the forward scan fails
            summary_search_pages: Leading pages searched for the Summary chapter
        """
        self.cache = PageTextCache(source)
        self.scanner = KeywordScanner(self.cache)
        self.selector = selector or OccurrenceSelector()
        self.classifier = classifier or RegistrationClassifier()
        self.window_extractor = window_extractor or ContextWindowExtractor()
        self.boundary_resolver = ChapterBoundaryResolver(
            self.cache,
            search_pages=boundary_search_pages,
            default_span=boundary_default_span,
            error_span=boundary_error_span,
        )
        self.summary_search_pages = summary_search_pages
        self.state = OrchestratorState.IDLE
        self._degradations: List[HeuristicEvent] = []

    def _enter(self, state: OrchestratorState) -> None:
        logger.info(f"=== {state.value} ===")
        self.state = state

    def _degrade(self, component: str, reason: str, **detail) -> None:
        event = HeuristicEvent(component=component, reason=reason, detail=detail)
        self._degradations.append(event)
        logger.warning(
            f"Heuristic degradation in {component}: {reason}",
            extra={"component": component, "reason": reason, "detail": detail},
        )

    async def run(self) -> SectionBundle:
        """
        Locate every section and return the bundle.

        Returns:
            SectionBundle with possibly empty fields

        Raises:
            PageAccessError: If the document cannot be read
            RuntimeError: If this orchestrator has already been run
        """
        if self.state is not OrchestratorState.IDLE:
            raise RuntimeError("SectionOrchestrator runs once; create a new one for each run")

        try:
            return await self._run()
        except PageAccessError as e:
            logger.error(f"Extraction aborted in state {self.state.value}: {e}", exc_info=True)
            raise

    async def _run(self) -> SectionBundle:
        total_pages = self.cache.total_pages
        if total_pages < 1:
            raise PageAccessError("Document has no pages")

        bundle = SectionBundle()
        metadata = bundle.metadata
        metadata.total_pages = total_pages

        self._enter(OrchestratorState.SCANNING_FIRST_PAGE)
        bundle.first_page_text = await self.cache.get_page_text(1)

        self._enter(OrchestratorState.DETECTING_TYPE)
        classification = self.classifier.classify(bundle.first_page_text)
        metadata.registration_type = classification.registration_type

        self._enter(OrchestratorState.SEARCHING_STATEMENT)
        bundle.statement_text, metadata.statement_location = await self._find_statement()

        self._enter(OrchestratorState.SEARCHING_SUMMARY)
        metadata.summary_section = await self._find_summary_section()
        if metadata.summary_section is not None:
            bundle.summary_text = await self._chapter_text(metadata.summary_section)
        else:
            bundle.summary_text = bundle.statement_text
            metadata.summary_from_statement = True
            self._degrade(
                "section_orchestrator", "summary_from_statement",
                statement_length=len(bundle.statement_text),
            )

        self._enter(OrchestratorState.SEARCHING_DIRECTORS)
        section, family, used_fallback = await self._find_directors_section(metadata.registration_type)
        metadata.directors_section = section
        metadata.directors_family = family
        metadata.used_fallback_family = used_fallback
        if section is not None:
            bundle.directors_text = await self._chapter_text(section)
        else:
            logger.warning("Directors and parties chapter not found")

        self._enter(OrchestratorState.EXTRACTING_CHUNKS)
        bundle.professional_chunks = self._extract_professional_chunks(bundle.directors_text)

        metadata.degradations = list(self._degradations)
        self._enter(OrchestratorState.COMPLETE)
        logger.info(
            f"All sections extracted: first page {len(bundle.first_page_text)} chars, "
            f"statement {len(bundle.statement_text)} chars, summary {len(bundle.summary_text)} chars, "
            f"directors {len(bundle.directors_text)} chars ({metadata.directors_pages or 'not found'})"
        )
        return bundle

    async def _find_statement(self) -> Tuple[str, Optional[StatementLocation]]:
        """Find the first "We are ..." sentence and return its paragraph."""
        for page_number in range(1, self.cache.total_pages + 1):
            page_text = await self.cache.get_page_text(page_number)
            match = STATEMENT_PATTERN.search(page_text)
            if match:
                sentence = match.group(0)
                logger.info(f"Identity statement found on page {page_number}: {sentence[:100]}")
                paragraph = self.window_extractor.extract_paragraph(page_text, sentence, match.start())
                return paragraph, StatementLocation(page=page_number, sentence=sentence)

        logger.warning("Identity statement not found")
        return "", None

    async def _find_summary_section(self) -> Optional[Section]:
        search_range = range(1, min(self.summary_search_pages, self.cache.total_pages) + 1)
        occurrence = await self.scanner.find_first(search_range, SUMMARY_SPEC)
        if occurrence is None:
            logger.warning("Summary chapter not found")
            return None
        return await self._resolve_section(occurrence.page, occurrence.keyword)

    async def _find_directors_section(self, registration_type: str) -> Tuple[Optional[Section], str, bool]:
        """
        Locate the directors and parties chapter.

        Scans the whole document with the heading family implied by the
        registration type, retrying with the alternate family when the first
        family never occurs.

        Returns:
            (section or None, family used, whether the alternate family was used)
        """
        family = self.classifier.family_for(registration_type)
        logger.info(f"Searching directors chapter, registration type: {registration_type}, family: {family}")
        occurrences = await self.scanner.scan_document(DIRECTORS_FAMILIES[family])

        used_fallback = False
        if not occurrences:
            alternate = self.classifier.alternate_family(family)
            logger.warning(f"No '{family}' headings found, retrying with '{alternate}' family")
            occurrences = await self.scanner.scan_document(DIRECTORS_FAMILIES[alternate])
            if occurrences:
                family, used_fallback = alternate, True
                self._degrade("section_orchestrator", "alternate_family", family=alternate)

        selection = self.selector.select(occurrences)
        if selection is None:
            return None, family, used_fallback

        if selection.degraded:
            self._degrade(
                "occurrence_selector", "last_occurrence",
                total=selection.total, page=selection.occurrence.page,
            )

        section = await self._resolve_section(selection.occurrence.page, selection.occurrence.keyword)
        return section, family, used_fallback

    async def _resolve_section(self, start_page: int, title: str) -> Section:
        """
        Bound a chapter that starts at start_page.

        A scan_failed boundary only ends in a finished bundle when the page
        failure was transient: failed pages are not cached, so the chapter
        text and the full-document directors scan fetch them again, and a
        page that keeps failing aborts the run with PageAccessError.
        """
        boundary = await self.boundary_resolver.find_end_page(start_page, title)
        if boundary.degraded:
            self._degrade(
                "chapter_boundary", boundary.reason,
                title=title, start_page=start_page, end_page=boundary.end_page,
            )
        section = Section(start_page=start_page, end_page=boundary.end_page, title=title)
        logger.info(f"Chapter '{title}': pages {section.start_page}-{section.end_page}")
        return section

    async def _chapter_text(self, section: Section) -> str:
        parts = []
        for page_number in section.pages:
            parts.append(await self.cache.get_page_text(page_number) + "\n")
        text = "".join(parts)
        logger.info(f"Chapter text extracted for pages {section.start_page}-{section.end_page}, length: {len(text)}")
        return text

    def _extract_professional_chunks(self, directors_text: str) -> Dict[str, List[TextChunk]]:
        chunks: Dict[str, List[TextChunk]] = {}
        for role, spec in PROFESSIONAL_ROLES.items():
            chunks[role] = self.window_extractor.extract_keyword_chunks(directors_text, spec)
            if chunks[role]:
                logger.info(f"{role}: {len(chunks[role])} chunks ({', '.join(c.keyword for c in chunks[role])})")
            else:
                logger.warning(f"{role}: no keyword chunks found")
        return chunks
