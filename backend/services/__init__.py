"""Services for the Prospectus Section Locator."""
from .page_text_cache import PageTextCache, PageSource, PageAccessError
from .document_loader import PdfPageSource, InMemoryPageSource
from .keyword_scanner import KeywordScanner, find_in_text
from .occurrence_selector import OccurrenceSelector, SelectionPolicy, Selection
from .chapter_boundary import ChapterBoundaryResolver, BoundaryResult
from .context_window import ContextWindowExtractor
from .registration_classifier import RegistrationClassifier, Classification
from .section_orchestrator import SectionOrchestrator, OrchestratorState
from .llm_client import LLMClient, LLMResponse, LLMError, LLMClientError
from .prospectus_parser import ProspectusParser
from .prospectus_extractor import ProspectusExtractor

__all__ = ['PageTextCache', 'PageSource', 'PageAccessError', 'PdfPageSource', 'InMemoryPageSource', 'KeywordScanner', 'find_in_text', 'OccurrenceSelector', 'SelectionPolicy', 'Selection', 'ChapterBoundaryResolver', 'BoundaryResult', 'ContextWindowExtractor', 'RegistrationClassifier', 'Classification', 'SectionOrchestrator', 'OrchestratorState', 'LLMClient', 'LLMResponse', 'LLMError', 'LLMClientError', 'ProspectusParser', 'ProspectusExtractor']
