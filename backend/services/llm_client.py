"""LLM Client for Groq API integration."""
import json
import re
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional
from groq import Groq
from groq import RateLimitError, AuthenticationError, APIError, APITimeoutError
import logging

from config import GROQ_API_KEY, EXTRACTION_MODEL, EXTRACTION_MAX_TOKENS

logger = logging.getLogger(__name__)

_FENCE_START = re.compile(r"^```[a-zA-Z]*\s*")
_FENCE_END = re.compile(r"\s*```$")


@dataclass
class LLMResponse:
    """Response from LLM generation."""
    text: str
    tokens_input: int
    tokens_output: int
    latency_ms: int
    model_used: str


@dataclass
class LLMError:
    """Structured error response from LLM operations."""
    code: str
    message: str
    details: Dict[str, Any]


class LLMClientError(Exception):
    """Custom exception for LLM client errors with structured error information."""

    def __init__(self, error: LLMError):
        self.error = error
        super().__init__(error.message)


class LLMClient:
    """Client for sending extraction prompts to the Groq API."""

    def __init__(self, api_key: Optional[str] = None, model: str = EXTRACTION_MODEL):
        """
        Initialize LLM client with Groq API key.

        Args:
            api_key: Groq API key (defaults to GROQ_API_KEY from environment)
            model: Default model for generate() calls

        Raises:
            ValueError: If no API key is available
        """
        self.api_key = api_key or GROQ_API_KEY
        if not self.api_key:
            raise ValueError("GROQ_API_KEY must be provided or set in environment")

        self.model = model
        self.client = Groq(api_key=self.api_key)
        logger.info("LLMClient initialized successfully")

    def generate(
        self,
        prompt: str,
        model: Optional[str] = None,
        max_tokens: int = EXTRACTION_MAX_TOKENS
    ) -> LLMResponse:
        """
        Generate response using Groq API.

        Args:
            prompt: Complete extraction prompt
            model: Model name (defaults to the client's model)
            max_tokens: Maximum tokens to generate

        Returns:
            LLMResponse with text, token counts, and latency

        Raises:
            LLMClientError: Structured error with code, message, and details
        """
        model = model or self.model
        start_time = time.time()

        try:
            logger.debug(f"Generating response with model: {model}, prompt preview: {prompt[:200]}")

            response = self.client.chat.completions.create(
                model=model,
                messages=[
                    {
                        "role": "user",
                        "content": prompt
                    }
                ],
                max_tokens=max_tokens,
                temperature=0
            )

            latency_ms = int((time.time() - start_time) * 1000)
            text = response.choices[0].message.content or ""
            tokens_input = response.usage.prompt_tokens
            tokens_output = response.usage.completion_tokens

            logger.info(
                f"Generated response: model={model}, "
                f"input_tokens={tokens_input}, output_tokens={tokens_output}, "
                f"latency={latency_ms}ms"
            )

            return LLMResponse(
                text=text,
                tokens_input=tokens_input,
                tokens_output=tokens_output,
                latency_ms=latency_ms,
                model_used=model
            )

        except RateLimitError as e:
            raise self._error(
                "RATE_LIMIT_ERROR", "Rate limit exceeded. Please try again in a few moments.",
                e, model, start_time, retry_after=60
            )
        except AuthenticationError as e:
            raise self._error(
                "AUTHENTICATION_ERROR", "Authentication failed. Please check your API key.",
                e, model, start_time
            )
        except APITimeoutError as e:
            raise self._error(
                "TIMEOUT_ERROR", "Request timed out. Please try again.",
                e, model, start_time
            )
        except APIError as e:
            raise self._error(
                "API_ERROR", f"Groq API error: {str(e)}",
                e, model, start_time
            )
        except Exception as e:
            raise self._error(
                "UNKNOWN_ERROR", f"Unexpected error during generation: {str(e)}",
                e, model, start_time, error_type=type(e).__name__
            )

    @staticmethod
    def _error(code: str, message: str, original: Exception, model: str, start_time: float, **details) -> LLMClientError:
        latency_ms = int((time.time() - start_time) * 1000)
        error = LLMError(
            code=code,
            message=message,
            details={
                "model": model,
                "latency_ms": latency_ms,
                "original_error": str(original),
                **details
            }
        )
        logger.error(
            f"{code}: model={model}, latency={latency_ms}ms, error={original}",
            exc_info=True,
            extra={"error_code": error.code, "error_details": error.details}
        )
        return LLMClientError(error)

    @staticmethod
    def normalize_response(text: str) -> Any:
        """
        Turn raw model output into JSON data when possible.

        Models often wrap JSON in markdown code fences; those are removed
        before parsing.

        Args:
            text: Raw completion text

        Returns:
            Parsed JSON value, or the stripped text when it is not JSON
        """
        cleaned = _FENCE_END.sub("", _FENCE_START.sub("", (text or "").strip())).strip()
        try:
            return json.loads(cleaned)
        except json.JSONDecodeError:
            logger.debug(f"Response is not JSON: {cleaned[:200]}")
            return cleaned
