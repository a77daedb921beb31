"""Generation Client - Single gateway to the generative text service."""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, Tuple, Type

import openai
from openai import AsyncOpenAI

from config import settings
from errors import GenerationError
from models import SectionKind
from pipeline.prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS: Tuple[Type[BaseException], ...] = (
    asyncio.TimeoutError,
    openai.APIConnectionError,  # includes APITimeoutError
    openai.RateLimitError,
    openai.InternalServerError,
)


class EmptyResponseError(Exception):
    """The service answered without any content."""


async def retry_with_backoff(
    *,
    attempts: int,
    backoff_seconds: float,
    coro_factory: Callable[[], Awaitable[Any]],
    retry_on: Tuple[Type[BaseException], ...] = TRANSIENT_ERRORS,
    label: str = "call",
) -> Any:
    """Retry an async call on transient errors with linear backoff."""
    attempts = max(1, attempts)
    for attempt in range(attempts):
        try:
            return await coro_factory()
        except retry_on as exc:
            if attempt >= attempts - 1:
                raise
            delay = backoff_seconds * (attempt + 1)
            logger.warning(f"{label} attempt {attempt + 1}/{attempts} failed ({exc!r}); retrying in {delay:.1f}s")
            await asyncio.sleep(delay)


class GenerationClient:
    """Wraps the OpenAI chat API with timeout and retry handling.

    One instance can be shared across concurrent requests; it holds no
    per-request state.
    """

    def __init__(
        self,
        client: Optional[Any] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        backoff_seconds: Optional[float] = None,
        system_prompt: Optional[str] = None,
    ):
        self._client = client
        self.model = model or settings.openai_model
        self.temperature = settings.generation_temperature if temperature is None else temperature
        self.max_tokens = max_tokens or settings.generation_max_tokens
        self.timeout = settings.generation_timeout_seconds if timeout is None else timeout
        self.max_retries = settings.generation_max_retries if max_retries is None else max_retries
        self.backoff_seconds = (
            settings.generation_retry_backoff_seconds if backoff_seconds is None else backoff_seconds
        )
        self.system_prompt = system_prompt or SYSTEM_PROMPT

    @property
    def client(self) -> Any:
        """Vendor client, created on first use."""
        if self._client is None:
            # Retries and timeouts are owned by this adapter, not the SDK.
            self._client = AsyncOpenAI(
                api_key=settings.openai_api_key,
                base_url=settings.openai_base_url,
                max_retries=0,
            )
        return self._client

    async def generate(self, instruction: str, section: SectionKind) -> str:
        """
        Generate raw content for one section.

        Args:
            instruction: Prompt built by the composer
            section: Section being generated (for error reporting)

        Returns:
            Raw response text (expected to be JSON, not checked here)

        Raises:
            GenerationError: after retries are exhausted or on a non-transient error
        """
        label = f"Generation for {section.value}"
        try:
            return await retry_with_backoff(
                attempts=self.max_retries + 1,
                backoff_seconds=self.backoff_seconds,
                coro_factory=lambda: self._request(instruction),
                retry_on=TRANSIENT_ERRORS + (EmptyResponseError,),
                label=label,
            )
        except (openai.OpenAIError, asyncio.TimeoutError, EmptyResponseError) as e:
            logger.error(f"{label} failed: {e!r}")
            raise GenerationError(section.value, e) from e

    async def _request(self, instruction: str) -> str:
        """Issue a single completion call bounded by the per-call timeout."""
        response = await asyncio.wait_for(
            self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": self.system_prompt},
                    {"role": "user", "content": instruction},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                response_format={"type": "json_object"},
            ),
            timeout=self.timeout,
        )
        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise EmptyResponseError("empty completion")
        return content
