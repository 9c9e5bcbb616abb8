"""
Semantic extraction over located prospectus sections.

Turns the text regions of a SectionBundle into company facts and named
professional parties by prompting the LLM. Model output may be a bare
list, a JSON object keyed by role, or fenced markdown; every method
returns a well-formed result and falls back to empty values when the
model is unavailable or answers with something unusable.
"""
import logging
import re
from typing import Any, Dict, List, Optional

from config import AI_ENABLED, FIRST_PAGE_FALLBACK_CHARS
from models.bundle import SectionBundle
from models.extraction import UNIDENTIFIED, CompanyInfo, Party, ProfessionalParties
from services.keyword_catalog import (
    APPLICATION_PROOF_PATTERN,
    AUDITORS,
    INDUSTRY_CONSULTANTS,
    LEGAL_ADVISERS_TO_COMPANY,
    LEGAL_ADVISERS_TO_SPONSORS,
    SPONSORS,
)
from services.llm_client import LLMClient, LLMClientError

logger = logging.getLogger(__name__)

ENGLISH_NAME_PATTERN = re.compile(
    r"(\b[A-Z][A-Za-z0-9\s\.,&()'-]{6,}\b)\s*(Limited|Corporation|Company|Incorporated)",
    re.IGNORECASE,
)
CHINESE_NAME_PATTERN = re.compile(r"[\u4e00-\u9fa5]{4,}(?:股份有限公司|有限公司)")

BASIC_INFO_PROMPT = """你是一个专业的港股招股书信息提取专家。请从以下文本中提取公司基本信息。

请严格按照以下JSON格式返回结果：
{{
  "companyName": "英文公司名称",
  "companyChineseName": "中文公司名称（简体中文）",
  "companyType": "注册地类型（如：中国公司、开曼公司、香港公司、百慕大公司、英属维尔京群岛公司、其他）"
}}

提取文本：
{text}"""

INDUSTRY_PROMPT = (
    "你是港股招股书行业信息提取专家。请根据下述“We are”句子或段落，总结公司主营行业，"
    "直接用一句话中文简明描述，避免多余修饰，不要返回JSON：\n{text}"
)

PARTY_PROMPT = """你是港股招股书信息提取专家。请从以下文本中提取{label}名称，{hint}严格返回如下JSON：
{{
  "{key}": [
    {{"name": "{label}名称"}},
    ...
  ]
}}
只要名称，不要地址等。找不到请返回[]。

文本：
{text}"""

# role -> (label, JSON key the prompt asks for, extra instruction)
ROLE_PROMPTS: Dict[str, tuple] = {
    SPONSORS: ("保荐人", "sponsors", ""),
    AUDITORS: ("审计师", "auditors", "下面文本中一定有一个审计师名称。"),
    INDUSTRY_CONSULTANTS: ("行业顾问", "consultants", "注意只有一个行业顾问。"),
    LEGAL_ADVISERS_TO_COMPANY: ("公司法律顾问", "company", ""),
    LEGAL_ADVISERS_TO_SPONSORS: ("保荐人法律顾问", "sponsors", ""),
}


class ProspectusParser:
    """Prompt-driven extraction of company facts and professional parties."""

    def __init__(self, llm_client: Optional[LLMClient] = None, enabled: bool = AI_ENABLED):
        """
        Initialize the parser.

        Args:
            llm_client: Client used for every prompt; None disables AI calls
            enabled: Master switch for AI calls
        """
        self.llm_client = llm_client
        self.enabled = enabled and llm_client is not None
        if not self.enabled:
            logger.warning("AI extraction disabled, results will be empty")

    def _ask(self, prompt: str) -> Any:
        """Send a prompt and return the normalized response, or None on failure."""
        if not self.enabled:
            return None
        try:
            response = self.llm_client.generate(prompt)
        except LLMClientError as e:
            logger.error(f"AI call failed: {e.error.code}", extra={"error_details": e.error.details})
            return None
        return LLMClient.normalize_response(response.text)

    def extract_basic_company_info(self, first_page_text: str) -> Dict[str, str]:
        """
        Extract company names and registration type from the cover page.

        Args:
            first_page_text: Text of page 1

        Returns:
            Dict with companyName, companyChineseName and companyType keys
        """
        match = APPLICATION_PROOF_PATTERN.search(first_page_text)
        if match and match.group(1).strip():
            region = match.group(1).strip()
            logger.info(f"Company info region found: {region[:200]}")
        else:
            region = first_page_text[:FIRST_PAGE_FALLBACK_CHARS]
            logger.warning(f"Company info region not found, using first {FIRST_PAGE_FALLBACK_CHARS} characters")

        result = self._ask(BASIC_INFO_PROMPT.format(text=region))
        info = {
            key: str(result.get(key) or "") if isinstance(result, dict) else ""
            for key in ("companyName", "companyChineseName", "companyType")
        }

        if not info["companyName"] and not info["companyChineseName"]:
            english = ENGLISH_NAME_PATTERN.search(first_page_text)
            chinese = CHINESE_NAME_PATTERN.search(first_page_text)
            if english:
                info["companyName"] = " ".join(english.group(0).split())
            if chinese:
                info["companyChineseName"] = chinese.group(0)
            logger.warning(
                f"AI returned no company name, regex fallback: "
                f"{info['companyName'] or '-'} / {info['companyChineseName'] or '-'}"
            )
        return info

    def extract_industry(self, statement_text: str) -> str:
        """Summarize the main business from the identity statement paragraph."""
        if not statement_text:
            logger.warning("No identity statement, cannot extract industry")
            return UNIDENTIFIED

        result = self._ask(INDUSTRY_PROMPT.format(text=statement_text))
        if isinstance(result, str) and result:
            return result
        if isinstance(result, dict) and result.get("industry"):
            return str(result["industry"])
        return UNIDENTIFIED

    def extract_parties(self, role: str, text: str) -> List[Party]:
        """
        Extract the names of one kind of professional party.

        Args:
            role: Role tag (a PROFESSIONAL_ROLES key)
            text: Keyword chunks for the role, joined

        Returns:
            Named parties; an empty list when none are found
        """
        if role not in ROLE_PROMPTS:
            raise ValueError(f"Unknown professional role: {role}")
        if not text:
            logger.warning(f"{role}: no keyword chunks to extract from")
            return []

        label, key, hint = ROLE_PROMPTS[role]
        result = self._ask(PARTY_PROMPT.format(label=label, key=key, hint=hint, text=text))

        if isinstance(result, dict):
            result = result.get(key, [])
        if not isinstance(result, list):
            return []

        parties = []
        for item in result:
            name = item.get("name") if isinstance(item, dict) else item
            if isinstance(name, str) and name.strip():
                parties.append(Party(name=name.strip()))
        logger.info(f"{role}: {[p.name for p in parties]}")
        return parties

    def parse_company_info(self, bundle: SectionBundle) -> CompanyInfo:
        """Build CompanyInfo from the first page and identity statement."""
        basic = self.extract_basic_company_info(bundle.first_page_text)
        return CompanyInfo(
            company_name=basic["companyName"] or UNIDENTIFIED,
            company_chinese_name=basic["companyChineseName"] or UNIDENTIFIED,
            company_type=basic["companyType"] or UNIDENTIFIED,
            industry=self.extract_industry(bundle.statement_text),
        )

    def parse_service_providers(self, bundle: SectionBundle) -> ProfessionalParties:
        """Extract every professional party role from the bundle's chunks."""
        return ProfessionalParties(
            sponsors=self.extract_parties(SPONSORS, bundle.chunk_text(SPONSORS)),
            auditors=self.extract_parties(AUDITORS, bundle.chunk_text(AUDITORS)),
            industry_consultants=self.extract_parties(
                INDUSTRY_CONSULTANTS, bundle.chunk_text(INDUSTRY_CONSULTANTS)
            ),
            legal_advisers_to_company=self.extract_parties(
                LEGAL_ADVISERS_TO_COMPANY, bundle.chunk_text(LEGAL_ADVISERS_TO_COMPANY)
            ),
            legal_advisers_to_sponsors=self.extract_parties(
                LEGAL_ADVISERS_TO_SPONSORS, bundle.chunk_text(LEGAL_ADVISERS_TO_SPONSORS)
            ),
        )
