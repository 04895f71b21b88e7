"""Text generation capability backed by Google Gemini.

The generator is built from an explicit ``GenerationConfig`` and handed to the
chat service and naming policy, so tests can substitute any object with an
async ``generate(prompt) -> str`` method.
"""

import asyncio
import logging
from typing import Protocol

import google.generativeai as genai
from google.generativeai.types import HarmBlockThreshold, HarmCategory
from pydantic import BaseModel, ConfigDict
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from app.exceptions.generation import (
    EmptyGenerationError,
    GenerationConfigurationError,
    GenerationContentFilterError,
    GenerationError,
    GenerationQuotaExceededError,
    GenerationRateLimitError,
    GenerationTimeoutError,
    classify_provider_error,
)


logger = logging.getLogger(__name__)

# Gemini finish reasons that mean the answer was withheld
_BLOCKED_FINISH_REASONS = {3, 4}  # SAFETY, RECITATION


class GenerationConfig(BaseModel):
    """Provider settings for one generator instance."""

    model_config = ConfigDict(frozen=True)

    api_key: str
    model_name: str = "gemini-1.5-flash"
    max_output_tokens: int = 2048
    temperature: float = 0.8
    request_timeout: float = 60
    max_retry_attempts: int = 3
    retry_backoff_factor: float = 2.0
    retry_min_wait: float = 2
    retry_max_wait: float = 30
    max_concurrent_requests: int = 10


class TextGenerator(Protocol):
    """Anything that turns a prompt into text."""

    async def generate(self, prompt: str) -> str: ...


class GeminiGenerator:
    """Generation capability using the Gemini ``generateContent`` API."""

    # Class-level semaphore limiting concurrent provider calls (shared across instances)
    _concurrency_semaphore: asyncio.Semaphore | None = None

    def __init__(self, config: GenerationConfig):
        """Initialize the Gemini client from an explicit configuration.

        Args:
            config: Provider settings.

        Raises:
            GenerationConfigurationError: If no API key is configured or the
                client cannot be created.
        """
        self.config = config
        self.model = None
        self._initialize_client()

    @classmethod
    def _get_semaphore(cls, limit: int) -> asyncio.Semaphore:
        if cls._concurrency_semaphore is None:
            cls._concurrency_semaphore = asyncio.Semaphore(limit)
        return cls._concurrency_semaphore

    def _initialize_client(self):
        """Initialize Google Gemini client."""
        if not self.config.api_key:
            raise GenerationConfigurationError("Gemini API key not configured")

        try:
            genai.configure(api_key=self.config.api_key)
            self.model = genai.GenerativeModel(
                model_name=self.config.model_name,
                safety_settings={
                    HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
                    HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
                    HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
                    HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
                },
                generation_config=genai.types.GenerationConfig(
                    candidate_count=1,
                    max_output_tokens=self.config.max_output_tokens,
                    temperature=self.config.temperature,
                ),
            )
            logger.info("Gemini client initialized with model: %s", self.config.model_name)

        except Exception as e:
            logger.error("Failed to initialize Gemini client: %s", str(e))
            raise GenerationConfigurationError(f"Failed to initialize generation service: {str(e)}") from e

    async def generate(self, prompt: str) -> str:
        """Generate text for a prompt.

        Rate limit and quota errors are retried with exponential backoff; the
        whole call, retries included, is bounded by ``request_timeout``.

        Raises:
            GenerationError: Or one of its subclasses on any provider failure.
        """
        try:
            return await asyncio.wait_for(
                self._generate_with_retry(prompt), timeout=self.config.request_timeout
            )
        except TimeoutError:
            raise GenerationTimeoutError() from None

    async def _generate_with_retry(self, prompt: str) -> str:
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type((GenerationRateLimitError, GenerationQuotaExceededError)),
            stop=stop_after_attempt(self.config.max_retry_attempts),
            wait=wait_exponential(
                multiplier=self.config.retry_backoff_factor,
                min=self.config.retry_min_wait,
                max=self.config.retry_max_wait,
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                semaphore = self._get_semaphore(self.config.max_concurrent_requests)
                async with semaphore:
                    return await self._generate_content_async(prompt)

    async def _generate_content_async(self, prompt: str) -> str:
        """Run the synchronous Gemini call in a thread pool and extract its text."""
        try:
            loop = asyncio.get_running_loop()
            response = await loop.run_in_executor(None, lambda: self.model.generate_content(prompt))
        except Exception as e:
            logger.error("Gemini API call failed: %s", str(e))
            raise classify_provider_error(e) from e

        if not response:
            raise EmptyGenerationError()

        if not getattr(response, "candidates", None):
            logger.error("Gemini response has no candidates: %s", getattr(response, "prompt_feedback", None))
            raise GenerationContentFilterError()

        finish_reason = getattr(response.candidates[0], "finish_reason", None)
        if finish_reason in _BLOCKED_FINISH_REASONS:
            logger.error("Gemini withheld the answer, finish_reason=%s", finish_reason)
            raise GenerationContentFilterError()

        try:
            text = response.text
        except ValueError as e:
            raise GenerationError(f"Could not read generated text: {str(e)}") from e

        if not text or not text.strip():
            raise EmptyGenerationError()
        return text
