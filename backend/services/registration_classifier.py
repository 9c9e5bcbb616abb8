"""
Registration type classifier for prospectus issuers.

Checks an ordered list of patterns against first-page text; the first
pattern that matches decides the registration type. The type selects the
heading family used to find the directors and parties chapter.
"""
from dataclasses import dataclass
import logging
import re
from typing import List, Optional, Tuple

from services.keyword_catalog import PRIMARY_FAMILY, SUPERVISORS_FAMILY

logger = logging.getLogger(__name__)


@dataclass
class Classification:
    """
    Result of registration type detection.

    Attributes:
        registration_type: One of the REGISTRATION_PATTERNS keys, or "unknown"
        pattern_matched: Text that triggered the match, if any
    """
    registration_type: str
    pattern_matched: Optional[str] = None


class RegistrationClassifier:
    """Deterministic registration type detection from cover-page text."""

    CAYMAN = "cayman"
    UNKNOWN = "unknown"

    # Checked in order; first match wins
    REGISTRATION_PATTERNS: List[Tuple[str, re.Pattern]] = [
        ("cayman", re.compile(r"cayman\s+islands?|开曼群岛", re.IGNORECASE)),
        ("china", re.compile(r"中华人民共和国|中国|\bPRC\b|People's\s+Republic\s+of\s+China", re.IGNORECASE)),
        ("hong kong", re.compile(r"Hong\s+Kong|香港", re.IGNORECASE)),
        ("bermuda", re.compile(r"Bermuda|百慕大", re.IGNORECASE)),
        ("bvi", re.compile(r"British\s+Virgin\s+Islands|英属维尔京群岛|\bBVI\b", re.IGNORECASE)),
        ("other", re.compile(r"Singapore|新加坡|Marshall\s+Islands|马绍尔群岛", re.IGNORECASE)),
    ]

    # Registration types whose directors chapter omits supervisors
    PRIMARY_FAMILY_TYPES = {CAYMAN}

    def classify(self, first_page_text: str) -> Classification:
        """
        Classify the issuer's place of registration.

        Args:
            first_page_text: Text of the prospectus cover page

        Returns:
            Classification; "unknown" when no pattern matches
        """
        for registration_type, pattern in self.REGISTRATION_PATTERNS:
            match = pattern.search(first_page_text or "")
            if match:
                logger.info(f"Detected registration type: {registration_type} ('{match.group(0)}')")
                return Classification(registration_type=registration_type, pattern_matched=match.group(0))

        logger.info("No registration pattern matched, type is unknown")
        return Classification(registration_type=self.UNKNOWN)

    def family_for(self, registration_type: str) -> str:
        """Heading family to search first; unknown uses the non-primary family."""
        if registration_type in self.PRIMARY_FAMILY_TYPES:
            return PRIMARY_FAMILY
        return SUPERVISORS_FAMILY

    @staticmethod
    def alternate_family(family: str) -> str:
        return SUPERVISORS_FAMILY if family == PRIMARY_FAMILY else PRIMARY_FAMILY
