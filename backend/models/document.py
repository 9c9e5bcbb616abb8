"""Document data models."""
from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class PageText:
    """Flattened text of a single page (1-indexed)."""
    page_number: int
    text: str


@dataclass(frozen=True)
class KeywordVariant:
    """One phrasing of a keyword; multi-token variants match across whitespace."""
    text: str
    multi_token: bool = False

    @classmethod
    def from_phrase(cls, phrase: str) -> "KeywordVariant":
        return cls(text=phrase, multi_token=len(phrase.split()) > 1)


@dataclass(frozen=True)
class KeywordSpec:
    """Ordered keyword variants tried against page text."""
    name: str
    variants: List[KeywordVariant] = field(default_factory=list)

    @classmethod
    def of(cls, name: str, *phrases: str) -> "KeywordSpec":
        return cls(name=name, variants=[KeywordVariant.from_phrase(p) for p in phrases])


@dataclass(frozen=True)
class Occurrence:
    """A confirmed textual match of a keyword on a page."""
    page: int
    keyword: str
    index: int
    match_length: int


@dataclass(frozen=True)
class Section:
    """A contiguous page range believed to hold one logical chapter."""
    start_page: int
    end_page: int
    title: str

    def __post_init__(self):
        if self.start_page < 1:
            raise ValueError(f"start_page must be >= 1, got {self.start_page}")
        if self.end_page < self.start_page:
            raise ValueError(
                f"end_page ({self.end_page}) must not precede start_page ({self.start_page})"
            )

    @property
    def pages(self) -> range:
        return range(self.start_page, self.end_page + 1)


@dataclass(frozen=True)
class TextChunk:
    """Bounded passage surrounding one keyword occurrence."""
    keyword: str
    text: str
