"""Semantic extraction result models."""
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from .bundle import SectionBundle

UNIDENTIFIED = "未识别"


@dataclass
class Party:
    """A named professional party (sponsor, auditor, adviser...)."""
    name: str


@dataclass
class CompanyInfo:
    """Basic company facts read from the first page and identity statement."""
    company_name: str = UNIDENTIFIED
    company_chinese_name: str = UNIDENTIFIED
    company_type: str = UNIDENTIFIED
    industry: str = UNIDENTIFIED


@dataclass
class ProfessionalParties:
    """Professional parties named in the directors and parties chapter."""
    sponsors: List[Party] = field(default_factory=list)
    auditors: List[Party] = field(default_factory=list)
    industry_consultants: List[Party] = field(default_factory=list)
    legal_advisers_to_company: List[Party] = field(default_factory=list)
    legal_advisers_to_sponsors: List[Party] = field(default_factory=list)


@dataclass
class ExtractionResult:
    """Complete output of one prospectus extraction."""
    bundle: SectionBundle
    company: Optional[CompanyInfo] = None
    professionals: Optional[ProfessionalParties] = None
    extract_time: str = ""
    source: str = ""
    total_pages: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "company": asdict(self.company) if self.company else None,
            "professionals": asdict(self.professionals) if self.professionals else None,
            "bundle": self.bundle.to_dict(),
            "metadata": {
                "extract_time": self.extract_time,
                "source": self.source,
                "total_pages": self.total_pages,
                "registration_type": self.bundle.metadata.registration_type,
                "directors_pages": self.bundle.metadata.directors_pages,
            },
        }
