"""Integration tests for the POST /extract endpoint."""
import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, Mock, patch
import sys
import os

# Add backend to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))


@pytest.fixture
def client():
    """Create a test client with a mocked extractor."""
    # Import after path is set
    from main import app

    # Mock the startup event to avoid initializing real services
    with patch('main.startup_event'):
        client = TestClient(app)

        # Manually set the global extractor to a mock
        import main
        main.extractor = Mock()
        main.extractor.extract = AsyncMock()
        main.extractor.parser = None

        yield client


@pytest.fixture
def pdf_file(tmp_path):
    path = tmp_path / "prospectus.pdf"
    path.write_bytes(b"%PDF-1.4 placeholder")
    return str(path)


@pytest.fixture
def extraction_result():
    from models.bundle import SectionBundle
    from models.document import Section, TextChunk
    from models.extraction import CompanyInfo, ExtractionResult, Party, ProfessionalParties

    bundle = SectionBundle(
        first_page_text="Alpha Holdings Limited",
        statement_text="We are a leading bakery.",
        summary_text="We are a leading bakery.",
        directors_text="DIRECTORS AND PARTIES INVOLVED\nSole Sponsor\nAlpha Capital Limited\n",
        professional_chunks={"sponsors": [TextChunk(keyword="Sole Sponsor", text="Sole Sponsor\nAlpha Capital Limited")]},
    )
    bundle.metadata.total_pages = 120
    bundle.metadata.registration_type = "cayman"
    bundle.metadata.directors_section = Section(start_page=40, end_page=44, title="Directors and Parties Involved")

    return ExtractionResult(
        bundle=bundle,
        company=CompanyInfo(company_name="Alpha Holdings Limited"),
        professionals=ProfessionalParties(sponsors=[Party(name="Alpha Capital Limited")]),
        extract_time="2024-01-01T00:00:00+00:00",
        source="prospectus.pdf",
        total_pages=120,
    )


class TestExtractEndpoint:
    """Test suite for POST /extract."""

    def test_successful_extraction(self, client, pdf_file, extraction_result):
        import main
        main.extractor.extract.return_value = extraction_result

        response = client.post("/extract", json={"pdf_path": pdf_file, "source_url": "https://www1.hkexnews.hk/a.pdf"})

        assert response.status_code == 200
        data = response.json()
        assert data["company"]["company_name"] == "Alpha Holdings Limited"
        assert data["professionals"]["sponsors"] == [{"name": "Alpha Capital Limited"}]
        assert data["bundle"]["statement_text"] == "We are a leading bakery."
        assert data["metadata"]["directors_pages"] == "40-44"
        assert data["metadata"]["registration_type"] == "cayman"
        assert "latency_ms" in data["metadata"]
        main.extractor.extract.assert_awaited_once_with(
            pdf_file, source_url="https://www1.hkexnews.hk/a.pdf", parse=True
        )

    def test_parse_flag_is_forwarded(self, client, pdf_file, extraction_result):
        import main
        extraction_result.company = None
        extraction_result.professionals = None
        main.extractor.extract.return_value = extraction_result

        response = client.post("/extract", json={"pdf_path": pdf_file, "parse": False})

        assert response.status_code == 200
        assert response.json()["company"] is None
        main.extractor.extract.assert_awaited_once_with(pdf_file, source_url=None, parse=False)

    def test_missing_file_returns_404(self, client, tmp_path):
        import main

        response = client.post("/extract", json={"pdf_path": str(tmp_path / "missing.pdf")})

        assert response.status_code == 404
        main.extractor.extract.assert_not_awaited()

    def test_missing_pdf_path_returns_422(self, client):
        response = client.post("/extract", json={})
        assert response.status_code == 422

    def test_unreadable_document_returns_422(self, client, pdf_file):
        import main
        from services.page_text_cache import PageAccessError
        main.extractor.extract.side_effect = PageAccessError("Failed to extract text of page 3", page_number=3)

        response = client.post("/extract", json={"pdf_path": pdf_file})

        assert response.status_code == 422
        error = response.json()["detail"]["error"]
        assert error["code"] == "DOCUMENT_ACCESS_ERROR"
        assert error["page"] == 3

    def test_unexpected_error_returns_500(self, client, pdf_file):
        import main
        main.extractor.extract.side_effect = RuntimeError("boom")

        response = client.post("/extract", json={"pdf_path": pdf_file})

        assert response.status_code == 500
        assert response.json()["detail"]["error"]["code"] == "INTERNAL_ERROR"


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["ai_enabled"] is False


def test_preflight_from_foreign_origin_is_not_allowed(client):
    response = client.options(
        "/extract",
        headers={"Origin": "https://evil.example", "Access-Control-Request-Method": "POST"},
    )

    assert "access-control-allow-origin" not in response.headers


def test_preflight_from_local_origin_is_allowed(client):
    response = client.options(
        "/extract",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "POST"},
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
