"""
Gemini analysis client.

Sends a rendered prompt to Gemini (google-genai async API) with a
low-temperature JSON generation config, retries transport failures with
exponential backoff, and parses the reply into a dict.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Awaitable, Callable, Dict, List, Optional

from google import genai
from google.genai import types

from jobmete.core.config import settings
from jobmete.utils.json_text import AIResponseParseError, parse_json_object
from jobmete.utils.retry import retry_with_backoff

logger = logging.getLogger(__name__)

__all__ = [
    "AIConfigurationError",
    "AIRequestError",
    "AIResponseParseError",
    "AnalysisMetadata",
    "AnalysisResult",
    "GeminiAnalysisClient",
    "get_analysis_client",
]


class AIConfigurationError(Exception):
    """Raised when the client cannot be built (missing API key)."""


class AIRequestError(Exception):
    """Raised when every attempt to reach the model failed."""


@dataclass
class AnalysisMetadata:
    """What was sent and received, for auditing."""

    model_used: str
    prompt: str
    raw_response: str
    # The API response is not inspected for usage or grounding sources
    tokens_used: int = 0
    search_sources: List[str] = field(default_factory=list)


@dataclass
class AnalysisResult:
    payload: Dict[str, Any]
    metadata: AnalysisMetadata


class GeminiAnalysisClient:
    """
    Thin async wrapper around ``genai.Client``.

    ``client`` and ``sleeper`` can be injected; tests pass a fake client
    and a no-op sleeper.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model_name: str,
        *,
        temperature: float = 0.2,
        max_retries: int = 3,
        initial_delay: float = 1.0,
        client: Optional[Any] = None,
        sleeper: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if client is None:
            if not api_key:
                raise AIConfigurationError("GEMINI_API_KEY environment variable is not set")
            client = genai.Client(api_key=api_key)

        self.client = client
        self.model_name = model_name
        self.temperature = temperature
        self.max_retries = max_retries
        self.initial_delay = initial_delay
        self.sleeper = sleeper

    def _generation_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            temperature=self.temperature,
            response_mime_type="application/json",
        )

    async def _generate_text(self, prompt: str) -> str:
        response = await self.client.aio.models.generate_content(
            model=self.model_name,
            contents=prompt,
            config=self._generation_config(),
        )
        return response.text or ""

    async def analyze(self, prompt: str, *, repair_json: bool = False) -> AnalysisResult:
        """
        Run one analysis.

        Args:
            prompt: Fully rendered prompt
            repair_json: Attempt a local syntax repair if the reply does not parse

        Raises:
            AIRequestError: If the model could not be reached after all retries
            AIResponseParseError: If the reply is not a JSON object (not retried)
        """
        logger.debug("Gemini request (%s):\n%s", self.model_name, prompt)

        try:
            raw_text = await retry_with_backoff(
                lambda: self._generate_text(prompt),
                max_retries=self.max_retries,
                initial_delay=self.initial_delay,
                sleeper=self.sleeper,
            )
        except Exception as exc:
            raise AIRequestError(f"Gemini request failed: {exc}") from exc

        logger.debug("Gemini response (%s):\n%s", self.model_name, raw_text)

        try:
            payload = parse_json_object(raw_text, repair=repair_json)
        except AIResponseParseError:
            logger.error("Gemini returned unparseable output (%d chars)", len(raw_text))
            raise

        return AnalysisResult(
            payload=payload,
            metadata=AnalysisMetadata(
                model_used=self.model_name,
                prompt=prompt,
                raw_response=raw_text,
            ),
        )


@lru_cache(maxsize=1)
def get_analysis_client() -> GeminiAnalysisClient:
    """Process-wide client, built on first use from settings."""
    return GeminiAnalysisClient(
        settings.GEMINI_API_KEY,
        settings.GEMINI_MODEL,
        temperature=settings.GEMINI_TEMPERATURE,
        max_retries=settings.AI_MAX_RETRIES,
        initial_delay=settings.AI_INITIAL_DELAY_SECONDS,
    )
