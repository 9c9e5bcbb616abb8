"""Unit tests for ProspectusParser."""
import sys
sys.path.insert(0, 'backend')

import pytest
from unittest.mock import Mock
from models.bundle import SectionBundle
from models.document import TextChunk
from models.extraction import UNIDENTIFIED
from services.llm_client import LLMClientError, LLMError, LLMResponse
from services.prospectus_parser import ProspectusParser

COVER = "Alpha Holdings Limited\n阿尔法控股有限公司\nGlobal Offering"


def _response(text):
    return LLMResponse(text=text, tokens_input=100, tokens_output=20, latency_ms=300, model_used="test-model")


def _parser(*texts):
    llm_client = Mock()
    llm_client.generate.side_effect = [_response(text) for text in texts]
    return ProspectusParser(llm_client, enabled=True), llm_client


class TestProspectusParser:
    """Test suite for ProspectusParser."""

    def test_disabled_without_client(self):
        parser = ProspectusParser(None, enabled=True)
        assert parser.enabled is False

    def test_disabled_by_switch(self):
        parser = ProspectusParser(Mock(), enabled=False)

        assert parser.enabled is False
        assert parser.extract_parties("sponsors", "Sole Sponsor\nAlpha Capital Limited") == []
        parser.llm_client.generate.assert_not_called()

    def test_extract_parties_from_keyed_object(self):
        parser, _ = _parser('{"sponsors": [{"name": " Alpha Capital Limited "}, {"name": ""}]}')

        parties = parser.extract_parties("sponsors", "Sole Sponsor\nAlpha Capital Limited")

        assert [p.name for p in parties] == ["Alpha Capital Limited"]

    def test_extract_parties_from_fenced_list(self):
        parser, _ = _parser('```json\n[{"name": "Beta CPA"}, "Delta & Co."]\n```')

        parties = parser.extract_parties("auditors", "Auditors\nBeta CPA")

        assert [p.name for p in parties] == ["Beta CPA", "Delta & Co."]

    def test_extract_parties_uses_role_key(self):
        parser, llm_client = _parser('{"consultants": [{"name": "Frost Research"}]}')

        parties = parser.extract_parties("industry_consultants", "Industry Consultant\nFrost Research")

        assert [p.name for p in parties] == ["Frost Research"]
        prompt = llm_client.generate.call_args[0][0]
        assert '"consultants"' in prompt
        assert "Frost Research" in prompt

    def test_extract_parties_unusable_answer(self):
        parser, _ = _parser("I could not find any names.")
        assert parser.extract_parties("sponsors", "Sponsor\nsomething") == []

    def test_extract_parties_empty_text_skips_call(self):
        parser, llm_client = _parser()

        assert parser.extract_parties("auditors", "") == []
        llm_client.generate.assert_not_called()

    def test_extract_parties_unknown_role(self):
        parser, _ = _parser()
        with pytest.raises(ValueError, match="Unknown professional role"):
            parser.extract_parties("underwriters", "text")

    def test_llm_error_gives_empty_result(self):
        llm_client = Mock()
        llm_client.generate.side_effect = LLMClientError(
            LLMError(code="RATE_LIMIT_ERROR", message="Rate limit exceeded", details={"retry_after": 60})
        )
        parser = ProspectusParser(llm_client, enabled=True)

        assert parser.extract_parties("sponsors", "Sponsor\nAlpha") == []
        assert parser.extract_industry("We are a bakery.") == UNIDENTIFIED

    def test_extract_industry_plain_text(self):
        parser, _ = _parser("云计算服务")
        assert parser.extract_industry("We are a leading cloud provider.") == "云计算服务"

    def test_extract_industry_json_object(self):
        parser, _ = _parser('{"industry": "烘焙食品"}')
        assert parser.extract_industry("We are a bakery.") == "烘焙食品"

    def test_extract_industry_without_statement(self):
        parser, llm_client = _parser()

        assert parser.extract_industry("") == UNIDENTIFIED
        llm_client.generate.assert_not_called()

    def test_basic_info_prompt_uses_application_proof_region(self):
        first_page = (
            "Header noise\nApplication Proof of\nAlpha Holdings Limited\n阿尔法控股有限公司\n"
            "The publication of this Application Proof is required by The Stock Exchange\nFooter"
        )
        parser, llm_client = _parser(
            '{"companyName": "Alpha Holdings Limited", "companyChineseName": "阿尔法控股有限公司", '
            '"companyType": "开曼公司"}'
        )

        info = parser.extract_basic_company_info(first_page)

        assert info == {
            "companyName": "Alpha Holdings Limited",
            "companyChineseName": "阿尔法控股有限公司",
            "companyType": "开曼公司",
        }
        prompt = llm_client.generate.call_args[0][0]
        assert "Alpha Holdings Limited" in prompt
        assert "Header noise" not in prompt
        assert "Footer" not in prompt

    def test_basic_info_regex_fallback(self):
        parser = ProspectusParser(None)

        info = parser.extract_basic_company_info(COVER)

        assert info["companyName"] == "Alpha Holdings Limited"
        assert info["companyChineseName"] == "阿尔法控股有限公司"
        assert info["companyType"] == ""

    def test_parse_company_info_fills_unidentified(self):
        bundle = SectionBundle(first_page_text="no names here")

        company = ProspectusParser(None).parse_company_info(bundle)

        assert company.company_name == UNIDENTIFIED
        assert company.company_chinese_name == UNIDENTIFIED
        assert company.company_type == UNIDENTIFIED
        assert company.industry == UNIDENTIFIED

    def test_parse_service_providers_only_asks_for_roles_with_chunks(self):
        bundle = SectionBundle(professional_chunks={
            "sponsors": [TextChunk(keyword="Sole Sponsor", text="Sole Sponsor\nAlpha Capital Limited")],
            "auditors": [TextChunk(keyword="Auditors", text="Auditors\nBeta CPA")],
            "industry_consultants": [],
            "legal_advisers_to_company": [],
            "legal_advisers_to_sponsors": [],
        })
        parser, llm_client = _parser(
            '{"sponsors": [{"name": "Alpha Capital Limited"}]}',
            '{"auditors": [{"name": "Beta CPA"}]}',
        )

        professionals = parser.parse_service_providers(bundle)

        assert [p.name for p in professionals.sponsors] == ["Alpha Capital Limited"]
        assert [p.name for p in professionals.auditors] == ["Beta CPA"]
        assert professionals.industry_consultants == []
        assert professionals.legal_advisers_to_company == []
        assert professionals.legal_advisers_to_sponsors == []
        assert llm_client.generate.call_count == 2
