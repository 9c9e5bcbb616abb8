"""Section bundle models produced by the section orchestrator."""
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from .document import Section, TextChunk


@dataclass
class StatementLocation:
    """Where the identity statement ("We are ...") was found."""
    page: int
    sentence: str


@dataclass
class HeuristicEvent:
    """
    A heuristic fell back to a default instead of a confident answer.

    Attributes:
        component: Component that degraded (e.g. "occurrence_selector")
        reason: Short machine-readable reason (e.g. "last_occurrence")
        detail: Values that explain the fallback
    """
    component: str
    reason: str
    detail: Dict[str, Any] = field(default_factory=dict)


@dataclass
class BundleMetadata:
    """Structural metadata for one extraction run."""
    total_pages: int = 0
    registration_type: str = "unknown"
    directors_family: Optional[str] = None
    used_fallback_family: bool = False
    summary_section: Optional[Section] = None
    directors_section: Optional[Section] = None
    statement_location: Optional[StatementLocation] = None
    summary_from_statement: bool = False
    degradations: List[HeuristicEvent] = field(default_factory=list)

    @property
    def directors_pages(self) -> str:
        if self.directors_section is None:
            return ""
        return f"{self.directors_section.start_page}-{self.directors_section.end_page}"


@dataclass
class SectionBundle:
    """Named text regions handed to the semantic-extraction step."""
    first_page_text: str = ""
    statement_text: str = ""
    summary_text: str = ""
    directors_text: str = ""
    professional_chunks: Dict[str, List[TextChunk]] = field(default_factory=dict)
    metadata: BundleMetadata = field(default_factory=BundleMetadata)

    def chunk_text(self, role: str) -> str:
        """Join the chunks collected for a role into one prompt fragment."""
        return "\n".join(chunk.text for chunk in self.professional_chunks.get(role, []))

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["metadata"]["directors_pages"] = self.metadata.directors_pages
        return data
