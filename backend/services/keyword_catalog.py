"""
Keyword families and patterns used to locate prospectus sections.

Kept as data so the orchestrator and tests share one source of truth.
Multi-token phrases match case-insensitively across line breaks, so one
phrasing covers both the title-case and the upper-case heading.
"""
import re
from collections import OrderedDict
from typing import Dict

from models.document import KeywordSpec

# Directors chapter heading families
PRIMARY_FAMILY = "primary"
SUPERVISORS_FAMILY = "supervisors"

DIRECTORS_FAMILIES: Dict[str, KeywordSpec] = {
    # Offshore issuers (e.g. Cayman Islands companies)
    PRIMARY_FAMILY: KeywordSpec.of("directors", "Directors and Parties Involved"),
    # PRC joint stock companies also list supervisors
    SUPERVISORS_FAMILY: KeywordSpec.of("directors", "Directors, Supervisors and Parties Involved"),
}

SUMMARY_SPEC = KeywordSpec.of("summary", "Summary")

# Self-descriptive sentence, e.g. "We are a leading provider of ..."
STATEMENT_PATTERN = re.compile(r"We\s+are\s+[^.!?]+[.!?]", re.IGNORECASE)

# Cover-page region naming the issuer in an application proof
APPLICATION_PROOF_PATTERN = re.compile(
    r"Application\s+Proof\s+of([\s\S]*?)The\s+publication\s+of\s+this\s+Application\s+Proof\s+is\s+required\s+by\s+The",
    re.IGNORECASE,
)


def _legal_adviser_phrases(*targets: str):
    nouns = ("Legal Advisers", "Legal Adviser", "Legal Advisors", "Legal Advisor")
    return [f"{noun} to {target}" for target in targets for noun in nouns]


SPONSORS = "sponsors"
AUDITORS = "auditors"
INDUSTRY_CONSULTANTS = "industry_consultants"
LEGAL_ADVISERS_TO_COMPANY = "legal_advisers_to_company"
LEGAL_ADVISERS_TO_SPONSORS = "legal_advisers_to_sponsors"

PROFESSIONAL_ROLES: "OrderedDict[str, KeywordSpec]" = OrderedDict([
    (SPONSORS, KeywordSpec.of(
        SPONSORS,
        "Sponsors", "Sponsor", "Joint Sponsors", "Joint Sponsor", "Sole Sponsor",
    )),
    (AUDITORS, KeywordSpec.of(
        AUDITORS,
        "Auditors", "Auditor", "Reporting Accountants", "Reporting Accountant",
    )),
    (INDUSTRY_CONSULTANTS, KeywordSpec.of(
        INDUSTRY_CONSULTANTS,
        "Industry Consultant", "Industry Consultants",
    )),
    (LEGAL_ADVISERS_TO_COMPANY, KeywordSpec.of(
        LEGAL_ADVISERS_TO_COMPANY,
        *_legal_adviser_phrases("the Company", "our Company", "Company"),
    )),
    (LEGAL_ADVISERS_TO_SPONSORS, KeywordSpec.of(
        LEGAL_ADVISERS_TO_SPONSORS,
        *_legal_adviser_phrases("the Sponsors", "Sponsors"),
        "Legal Advisors to the Sponsor",
        *_legal_adviser_phrases(
            "the Sole Sponsor", "Sole Sponsor", "our Sole Sponsor",
            "the Joint Sponsors", "Joint Sponsors", "our Joint Sponsors",
            "the Joint", "Joint", "our Joint",
            "the Sole", "Sole", "our Sole",
        ),
        "Legal advisor to the [REDACTED]",
        "Legal advisors to the [REDACTED]",
        "Legal advisor to our [REDACTED]",
        "Legal advisors to our [REDACTED]",
    )),
])
