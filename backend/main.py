"""Main entry point for the Prospectus Section Locator API."""
import logging
import os
import time
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from config import AI_ENABLED, CORS_ORIGINS, GROQ_API_KEY, LOG_LEVEL, PORT
from logger import setup_logging
from models.api import ExtractRequest, ExtractResponse
from services.llm_client import LLMClient
from services.page_text_cache import PageAccessError
from services.prospectus_extractor import ProspectusExtractor
from services.prospectus_parser import ProspectusParser

# Initialize logging
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Prospectus Section Locator",
    description="Locates sections of HKEX prospectuses and extracts the parties involved",
    version="1.0.0"
)

# Configure CORS; only the configured local origins may call the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services (will be done on startup)
extractor: ProspectusExtractor = None


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    global extractor

    setup_logging(LOG_LEVEL)
    logger.info("Initializing Prospectus Section Locator services...")

    llm_client = None
    if AI_ENABLED and GROQ_API_KEY:
        llm_client = LLMClient()
        logger.info("Initialized LLMClient")
    else:
        logger.warning("AI extraction disabled (AI_ENABLED is false or GROQ_API_KEY is missing)")

    extractor = ProspectusExtractor(parser=ProspectusParser(llm_client))
    logger.info("All services initialized successfully")


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "service": "prospectus-section-locator",
        "version": "1.0.0",
        "ai_enabled": bool(extractor and extractor.parser and extractor.parser.enabled)
    }


@app.post("/extract", response_model=ExtractResponse)
async def extract_endpoint(request: ExtractRequest) -> ExtractResponse:
    """
    Locate the sections of a prospectus PDF and optionally extract its facts.

    Args:
        request: ExtractRequest with the PDF path

    Returns:
        ExtractResponse with the section bundle and parsed results

    Raises:
        HTTPException: 404 for a missing file, 422 for an unreadable document
    """
    start_time = time.time()

    if not os.path.isfile(request.pdf_path):
        raise HTTPException(status_code=404, detail=f"PDF not found: {request.pdf_path}")

    try:
        result = await extractor.extract(request.pdf_path, source_url=request.source_url, parse=request.parse)
    except PageAccessError as e:
        logger.error(f"Document could not be read: {e}")
        raise HTTPException(
            status_code=422,
            detail={"error": {"code": "DOCUMENT_ACCESS_ERROR", "message": str(e), "page": e.page_number}}
        )
    except Exception as e:
        logger.error(f"Unexpected error extracting {request.pdf_path}: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail={"error": {"code": "INTERNAL_ERROR", "message": "An unexpected error occurred"}}
        )

    data = result.to_dict()
    total_latency_ms = int((time.time() - start_time) * 1000)
    logger.info(f"Extraction finished in {total_latency_ms}ms")
    data["metadata"]["latency_ms"] = total_latency_ms

    return ExtractResponse(
        bundle=data["bundle"],
        company=data["company"],
        professionals=data["professionals"],
        metadata=data["metadata"]
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=PORT)
