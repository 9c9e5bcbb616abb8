"""
Prospectus Extraction Script.

This script:
1. Opens a prospectus PDF
2. Locates the first page, identity statement, Summary and directors chapters
3. Cuts keyword chunks for each professional party role
4. Optionally asks the LLM for company facts and party names
5. Prints everything as JSON

Usage:
    python extract_prospectus.py path/to/prospectus.pdf [--no-ai] [--url URL]
"""
import argparse
import asyncio
import json
import sys
import logging
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent))

from config import AI_ENABLED, GROQ_API_KEY, LOG_LEVEL
from logger import setup_logging
from services.llm_client import LLMClient
from services.page_text_cache import PageAccessError
from services.prospectus_extractor import ProspectusExtractor
from services.prospectus_parser import ProspectusParser

logger = logging.getLogger(__name__)


def build_extractor(use_ai: bool) -> ProspectusExtractor:
    """
    Build an extractor, with semantic extraction when it is available.

    Args:
        use_ai: Whether the caller wants LLM extraction

    Returns:
        ProspectusExtractor instance
    """
    if not use_ai:
        return ProspectusExtractor()
    if not (AI_ENABLED and GROQ_API_KEY):
        logger.warning("AI extraction requested but AI_ENABLED/GROQ_API_KEY are not set, locating sections only")
        return ProspectusExtractor()
    return ProspectusExtractor(parser=ProspectusParser(LLMClient(), enabled=True))


def main(argv=None) -> int:
    """Main extraction process."""
    arg_parser = argparse.ArgumentParser(description="Locate prospectus sections and extract the parties involved")
    arg_parser.add_argument("pdf_path", help="Path to the prospectus PDF")
    arg_parser.add_argument("--url", dest="source_url", default=None, help="Original prospectus URL")
    arg_parser.add_argument("--no-ai", action="store_true", help="Skip LLM extraction")
    arg_parser.add_argument("--log-level", default=LOG_LEVEL, help="Logging level")
    args = arg_parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        extractor = build_extractor(use_ai=not args.no_ai)
        result = asyncio.run(extractor.extract(args.pdf_path, source_url=args.source_url, parse=not args.no_ai))
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1
    except PageAccessError as e:
        logger.error(f"Document could not be read: {e}")
        return 2
    except KeyboardInterrupt:
        logger.warning("Extraction interrupted by user")
        return 1

    json.dump(result.to_dict(), sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
