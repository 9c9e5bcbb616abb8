"""Bounded passage extraction around anchors in page or chapter text."""
import logging
from typing import List, Optional

from config import CONTEXT_CHARS_BEFORE, CONTEXT_CHARS_AFTER
from models.document import KeywordSpec, TextChunk
from services.keyword_scanner import find_in_text

logger = logging.getLogger(__name__)

PARAGRAPH_BREAK = "\n\n"


class ContextWindowExtractor:
    """Carves prompt-sized passages out of longer text."""

    def __init__(self, chars_before: int = CONTEXT_CHARS_BEFORE, chars_after: int = CONTEXT_CHARS_AFTER):
        """
        Initialize the extractor.

        Args:
            chars_before: Characters kept before a keyword match
            chars_after: Characters kept after the end of a keyword match
        """
        self.chars_before = chars_before
        self.chars_after = chars_after

    def extract_paragraph(self, text: str, sentence: str, index: Optional[int] = None) -> str:
        """
        Return the paragraph that contains a sentence.

        Paragraphs are delimited by blank lines or the ends of the text.

        Args:
            text: Page text
            sentence: Anchor sentence
            index: Position of the sentence in text, if already known

        Returns:
            Trimmed paragraph containing the whole sentence, or the sentence
            itself when it does not occur in text
        """
        if index is None or text[index:index + len(sentence)] != sentence:
            index = text.find(sentence)
        if index == -1:
            return sentence

        start = text.rfind(PARAGRAPH_BREAK, 0, index)
        start = 0 if start == -1 else start + len(PARAGRAPH_BREAK)

        end = text.find(PARAGRAPH_BREAK, index + len(sentence))
        if end == -1:
            end = len(text)

        paragraph = text[start:end].strip()
        logger.debug(f"Extracted paragraph, length: {len(paragraph)}")
        return paragraph

    def extract_window(self, text: str, index: int, match_length: int) -> str:
        """Return the trimmed fixed-offset window around a match."""
        start = max(0, index - self.chars_before)
        end = min(len(text), index + match_length + self.chars_after)
        return text[start:end].strip()

    def extract_keyword_chunks(self, text: str, spec: KeywordSpec) -> List[TextChunk]:
        """
        Collect one window per variant that occurs in text.

        Args:
            text: Concatenated chapter text
            spec: Keyword variants, in listed order

        Returns:
            TextChunks in variant order; empty when nothing matches
        """
        chunks: List[TextChunk] = []
        for variant in spec.variants:
            found = find_in_text(text, variant)
            if found is None:
                continue
            index, match_length = found
            chunks.append(TextChunk(keyword=variant.text, text=self.extract_window(text, index, match_length)))
        return chunks
