"""Configuration management for the Prospectus Section Locator."""
import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# API Keys
GROQ_API_KEY = os.getenv("GROQ_API_KEY")

# Server Configuration
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:3001").split(",") if origin.strip()]

# Semantic extraction
AI_ENABLED = os.getenv("AI_ENABLED", "true").lower() in ("1", "true", "yes")
EXTRACTION_MODEL = os.getenv("EXTRACTION_MODEL", "llama-3.3-70b-versatile")
EXTRACTION_MAX_TOKENS = int(os.getenv("EXTRACTION_MAX_TOKENS", "800"))

# Occurrence tie-break policy (empirically tuned, not derived)
OCCURRENCE_MANY_THRESHOLD = int(os.getenv("OCCURRENCE_MANY_THRESHOLD", "10"))
OCCURRENCE_SKIP_DEFAULT = int(os.getenv("OCCURRENCE_SKIP_DEFAULT", "2"))
OCCURRENCE_SKIP_MANY = int(os.getenv("OCCURRENCE_SKIP_MANY", "3"))

# Chapter boundary search (pages)
BOUNDARY_SEARCH_PAGES = int(os.getenv("BOUNDARY_SEARCH_PAGES", "20"))
BOUNDARY_DEFAULT_SPAN = int(os.getenv("BOUNDARY_DEFAULT_SPAN", "10"))
BOUNDARY_ERROR_SPAN = int(os.getenv("BOUNDARY_ERROR_SPAN", "5"))

# Keyword context windows (characters)
CONTEXT_CHARS_BEFORE = int(os.getenv("CONTEXT_CHARS_BEFORE", "50"))
CONTEXT_CHARS_AFTER = int(os.getenv("CONTEXT_CHARS_AFTER", "500"))

# Section search
SUMMARY_SEARCH_PAGES = int(os.getenv("SUMMARY_SEARCH_PAGES", "30"))
FIRST_PAGE_FALLBACK_CHARS = 1000

# Logging Configuration
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
