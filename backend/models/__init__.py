"""Data models for the Prospectus Section Locator."""
from .document import PageText, KeywordVariant, KeywordSpec, Occurrence, Section, TextChunk
from .bundle import StatementLocation, HeuristicEvent, BundleMetadata, SectionBundle
from .extraction import Party, CompanyInfo, ProfessionalParties, ExtractionResult
from .api import ExtractRequest, ExtractResponse

__all__ = [
    "PageText",
    "KeywordVariant",
    "KeywordSpec",
    "Occurrence",
    "Section",
    "TextChunk",
    "StatementLocation",
    "HeuristicEvent",
    "BundleMetadata",
    "SectionBundle",
    "Party",
    "CompanyInfo",
    "ProfessionalParties",
    "ExtractionResult",
    "ExtractRequest",
    "ExtractResponse",
]
