"""
Occurrence tie-break policy for chapter headings.

Prospectus front matter repeats chapter titles in the table of contents
and in cross-references before the chapter itself starts. The selector
skips a fixed number of leading occurrences, chosen by how many there are
in the whole document. The cutoffs are empirical and configurable.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from config import OCCURRENCE_MANY_THRESHOLD, OCCURRENCE_SKIP_DEFAULT, OCCURRENCE_SKIP_MANY
from models.document import Occurrence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionPolicy:
    """
    Tunable tie-break constants.

    Attributes:
        many_threshold: Counts above this use skip_many
        skip_default: Leading occurrences treated as noise normally
        skip_many: Leading occurrences treated as noise for crowded documents
    """
    many_threshold: int = OCCURRENCE_MANY_THRESHOLD
    skip_default: int = OCCURRENCE_SKIP_DEFAULT
    skip_many: int = OCCURRENCE_SKIP_MANY

    def target_index(self, count: int) -> int:
        """0-based index of the occurrence believed to start the chapter."""
        return self.skip_many if count > self.many_threshold else self.skip_default


@dataclass(frozen=True)
class Selection:
    """Chosen occurrence and how it was chosen."""
    occurrence: Occurrence
    index: int
    total: int
    degraded: bool = False


class OccurrenceSelector:
    """Picks the occurrence that marks a genuine chapter start."""

    def __init__(self, policy: Optional[SelectionPolicy] = None):
        self.policy = policy or SelectionPolicy()

    def select(self, occurrences: List[Occurrence]) -> Optional[Selection]:
        """
        Apply the tie-break policy to every occurrence in the document.

        Args:
            occurrences: All occurrences from a full-document scan

        Returns:
            Selection, or None when there are no occurrences. When fewer
            occurrences exist than the policy skips, the last one is chosen
            and the selection is marked degraded.
        """
        if not occurrences:
            logger.warning("No occurrences to select from")
            return None

        ordered = sorted(occurrences, key=lambda occ: occ.page)
        total = len(ordered)
        target = self.policy.target_index(total)
        logger.info(f"{total} occurrences, ignoring the first {target}")

        if total > target:
            occurrence = ordered[target]
            logger.info(f"Using occurrence #{target + 1}: page {occurrence.page} - {occurrence.keyword}")
            return Selection(occurrence=occurrence, index=target, total=total)

        occurrence = ordered[-1]
        logger.warning(
            f"Fewer than {target + 1} occurrences, falling back to the last one: "
            f"page {occurrence.page} - {occurrence.keyword}"
        )
        return Selection(occurrence=occurrence, index=total - 1, total=total, degraded=True)
