"""Unit tests for ProspectusExtractor."""
import sys
sys.path.insert(0, 'backend')

import pytest
from unittest.mock import Mock, patch
from models.extraction import CompanyInfo, ProfessionalParties
from services.document_loader import InMemoryPageSource
from services.prospectus_extractor import ProspectusExtractor

PAGES = [
    "Alpha Holdings Limited\n(incorporated in the Cayman Islands with limited liability)",
    "Overview\n\nWe are a leading bakery in Asia.\n\nMore",
    "Lorem ipsum dolor sit amet.",
]
URL = "https://www1.hkexnews.hk/listedco/listconews/sehk/2024/0101/2024010100001.pdf"


class TestProspectusUrls:
    """Tests for URL helpers."""

    def test_valid_prospectus_url(self):
        assert ProspectusExtractor.is_valid_prospectus_url(URL) is True

    @pytest.mark.parametrize("url", ["https://example.com/doc.pdf", "https://www1.hkexnews.hk/index.htm", "", None])
    def test_invalid_prospectus_url(self, url):
        assert ProspectusExtractor.is_valid_prospectus_url(url) is False

    @pytest.mark.parametrize("english,chinese", [
        ("https://www1.hkexnews.hk/app/sehk/2024/e106001.pdf", "https://www1.hkexnews.hk/app/sehk/2024/c106001.pdf"),
        ("https://www1.hkexnews.hk/app/doc_e.pdf", "https://www1.hkexnews.hk/app/doc_c.pdf"),
        ("https://www1.hkexnews.hk/app/docE.pdf", "https://www1.hkexnews.hk/app/docc.pdf"),
        ("https://www1.hkexnews.hk/app/sehk12e34.pdf", "https://www1.hkexnews.hk/app/sehk12c34.pdf"),
        (URL, URL[:-4] + "_c.pdf"),
    ])
    def test_chinese_version_url(self, english, chinese):
        assert ProspectusExtractor.chinese_version_url(english) == chinese


class TestProspectusExtractor:
    """Test suite for ProspectusExtractor.extract."""

    @pytest.mark.asyncio
    @patch('services.prospectus_extractor.PdfPageSource')
    async def test_extract_without_parser(self, mock_source_class):
        mock_source_class.return_value.__enter__.return_value = InMemoryPageSource(PAGES)

        result = await ProspectusExtractor().extract("prospectus.pdf")

        mock_source_class.assert_called_once_with("prospectus.pdf")
        assert result.source == "prospectus.pdf"
        assert result.total_pages == 3
        assert result.extract_time
        assert result.company is None
        assert result.professionals is None
        assert result.bundle.metadata.registration_type == "cayman"
        assert result.bundle.statement_text == "We are a leading bakery in Asia."

    @pytest.mark.asyncio
    @patch('services.prospectus_extractor.PdfPageSource')
    async def test_extract_with_parser(self, mock_source_class):
        mock_source_class.return_value.__enter__.return_value = InMemoryPageSource(PAGES)
        parser = Mock()
        parser.parse_company_info.return_value = CompanyInfo(company_name="Alpha Holdings Limited")
        parser.parse_service_providers.return_value = ProfessionalParties()

        result = await ProspectusExtractor(parser=parser).extract("prospectus.pdf", source_url=URL)

        assert result.source == URL
        assert result.company.company_name == "Alpha Holdings Limited"
        parser.parse_company_info.assert_called_once_with(result.bundle)
        parser.parse_service_providers.assert_called_once_with(result.bundle)

        data = result.to_dict()
        assert data["company"]["company_name"] == "Alpha Holdings Limited"
        assert data["metadata"]["registration_type"] == "cayman"
        assert data["metadata"]["directors_pages"] == ""

    @pytest.mark.asyncio
    @patch('services.prospectus_extractor.PdfPageSource')
    async def test_parse_false_skips_parser(self, mock_source_class):
        mock_source_class.return_value.__enter__.return_value = InMemoryPageSource(PAGES)
        parser = Mock()

        result = await ProspectusExtractor(parser=parser).extract("prospectus.pdf", parse=False)

        assert result.company is None
        parser.parse_company_info.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            await ProspectusExtractor().extract(str(tmp_path / "missing.pdf"))
