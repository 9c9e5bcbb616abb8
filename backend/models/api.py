"""API request/response models."""
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class ExtractRequest(BaseModel):
    """Request body for POST /extract."""
    pdf_path: str = Field(..., description="Local path to the prospectus PDF")
    source_url: Optional[str] = Field(None, description="Original download URL, recorded in metadata")
    parse: bool = Field(True, description="Run semantic extraction on the located sections")


class ExtractResponse(BaseModel):
    """Response body for POST /extract."""
    bundle: Dict[str, Any]
    company: Optional[Dict[str, Any]] = None
    professionals: Optional[Dict[str, Any]] = None
    metadata: Dict[str, Any]
