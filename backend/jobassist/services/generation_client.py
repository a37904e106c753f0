"""
Generation client service - talk to the LLM backend that writes resume content.

Two transports are supported:
- OllamaClient: a self-hosted Ollama server over its REST API (httpx)
- ChatCompletionClient: any OpenAI-compatible chat endpoint (OpenAI, Gemini)

Both expose the same two coroutines, check_availability() and generate(), and
neither retries. Every request timeout is clamped to the caller's Deadline.
"""
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx
from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI, OpenAIError

from jobassist.config import (
    AVAILABILITY_TIMEOUT,
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    GENERATION_TIMEOUT,
    Settings,
)
from jobassist.utils.deadline import Deadline, clamp_timeout
from jobassist.utils.exceptions import BackendUnavailable, GenerationFailed, excerpt

logger = logging.getLogger(__name__)

SYSTEM_MESSAGE = "You are an expert resume writer. Respond with a single valid JSON object only."


@dataclass(frozen=True)
class AvailabilityResult:
    is_available: bool
    error: Optional[str] = None
    response_time: Optional[float] = None  # milliseconds


@dataclass(frozen=True)
class GenerationOptions:
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    timeout: float = GENERATION_TIMEOUT

    @classmethod
    def from_settings(cls, settings: Settings) -> "GenerationOptions":
        return cls(
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            timeout=settings.generation_timeout,
        )


def _elapsed_ms(start: float) -> float:
    return round((time.monotonic() - start) * 1000, 1)


class GenerationClient(ABC):
    """Common interface for generation backends."""

    provider = ""

    def __init__(self, model: str, probe_timeout: float = AVAILABILITY_TIMEOUT,
                 options: Optional[GenerationOptions] = None):
        self.model = model
        self.probe_timeout = probe_timeout
        self.options = options or GenerationOptions()

    def timeout_message(self) -> str:
        return f"Server timeout - no response within {self.probe_timeout:g} seconds"

    @abstractmethod
    async def check_availability(self, deadline: Optional[Deadline] = None) -> AvailabilityResult:
        """Cheap liveness probe. Never raises for backend failures."""

    @abstractmethod
    async def generate(self, prompt: str, options: Optional[GenerationOptions] = None,
                       deadline: Optional[Deadline] = None) -> str:
        """Send the prompt and return the raw model text, or raise GenerationFailed."""

    async def ensure_available(self, deadline: Optional[Deadline] = None) -> AvailabilityResult:
        """Probe the backend and raise BackendUnavailable when it is down."""
        result = await self.check_availability(deadline)
        if not result.is_available:
            raise BackendUnavailable(result.error or "unknown error", details={
                'provider': self.provider,
                'responseTime': result.response_time,
            })
        return result


# ============================================================================
# OLLAMA
# ============================================================================

class OllamaClient(GenerationClient):
    """Ollama REST client: GET /api/tags as the probe, POST /api/generate for content."""

    provider = "ollama"

    def __init__(self, base_url: str, model: str, probe_timeout: float = AVAILABILITY_TIMEOUT,
                 options: Optional[GenerationOptions] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(model, probe_timeout, options)
        self.base_url = base_url.rstrip("/")
        self._transport = transport

    def _http_client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=self._transport)

    async def check_availability(self, deadline: Optional[Deadline] = None) -> AvailabilityResult:
        timeout = clamp_timeout(self.probe_timeout, deadline, "availability check")
        start = time.monotonic()
        try:
            async with self._http_client(timeout) as client:
                response = await client.get("/api/tags")
        except httpx.TimeoutException:
            elapsed = _elapsed_ms(start)
            logger.error("[Generation] Ollama availability check timed out",
                         extra={"base_url": self.base_url, "response_time_ms": elapsed})
            return AvailabilityResult(False, self.timeout_message(), elapsed)
        except httpx.HTTPError as exc:
            elapsed = _elapsed_ms(start)
            logger.error(f"[Generation] Ollama server is not available: {exc}",
                         extra={"base_url": self.base_url, "response_time_ms": elapsed})
            return AvailabilityResult(False, f"Cannot connect: {str(exc) or 'Server unreachable'}", elapsed)

        elapsed = _elapsed_ms(start)
        if response.is_success:
            logger.info("[Generation] Ollama server is available",
                        extra={"base_url": self.base_url, "response_time_ms": elapsed})
            return AvailabilityResult(True, None, elapsed)

        logger.error(f"[Generation] Ollama server returned HTTP {response.status_code}",
                     extra={"base_url": self.base_url, "response_time_ms": elapsed})
        return AvailabilityResult(False, f"HTTP {response.status_code}: {response.text}", elapsed)

    def build_payload(self, prompt: str, options: GenerationOptions) -> Dict[str, Any]:
        return {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "format": "json",
            "options": {
                "temperature": options.temperature,
                "num_predict": options.max_tokens,
            },
        }

    async def generate(self, prompt: str, options: Optional[GenerationOptions] = None,
                       deadline: Optional[Deadline] = None) -> str:
        options = options or self.options
        timeout = clamp_timeout(options.timeout, deadline, "generation")
        start = time.monotonic()
        logger.info("[Generation] Sending prompt to Ollama",
                    extra={"model": self.model, "prompt_length": len(prompt), "timeout": timeout})

        try:
            async with self._http_client(timeout) as client:
                response = await client.post("/api/generate", json=self.build_payload(prompt, options))
        except httpx.TimeoutException as exc:
            raise GenerationFailed(f"no response within {timeout:g} seconds") from exc
        except httpx.HTTPError as exc:
            raise GenerationFailed(f"request error: {exc}") from exc

        if not response.is_success:
            raise GenerationFailed(f"HTTP {response.status_code}", raw_output=response.text)

        try:
            body = response.json()
        except ValueError as exc:
            raise GenerationFailed("response body is not JSON", raw_output=response.text) from exc

        content = body.get("response") if isinstance(body, dict) else None
        if not isinstance(content, str) or not content.strip():
            raise GenerationFailed("empty response from model", raw_output=response.text)

        logger.info("[Generation] Ollama responded",
                    extra={"model": self.model, "response_length": len(content),
                           "duration_ms": _elapsed_ms(start)})
        return content


# ============================================================================
# OPENAI-COMPATIBLE CHAT COMPLETIONS (OpenAI, Gemini)
# ============================================================================

class ChatCompletionClient(GenerationClient):
    """AsyncOpenAI client; base_url points it at Gemini's OpenAI-compatible endpoint when needed."""

    def __init__(self, api_key: Optional[str], model: str, provider: str = "openai",
                 base_url: Optional[str] = None, probe_timeout: float = AVAILABILITY_TIMEOUT,
                 options: Optional[GenerationOptions] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(model, probe_timeout, options)
        self.provider = provider
        self.api_key = api_key
        self.base_url = base_url
        self._transport = transport

    def _client(self, timeout: float) -> AsyncOpenAI:
        # One client per request; callers close it with `async with`
        http_client = httpx.AsyncClient(transport=self._transport, timeout=timeout) if self._transport else None
        return AsyncOpenAI(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=timeout,
            max_retries=0,
            http_client=http_client,
        )

    async def check_availability(self, deadline: Optional[Deadline] = None) -> AvailabilityResult:
        if not self.api_key:
            return AvailabilityResult(False, f"{self.provider} API key is not configured", 0.0)

        timeout = clamp_timeout(self.probe_timeout, deadline, "availability check")
        start = time.monotonic()
        try:
            async with self._client(timeout) as client:
                await client.models.list()
        except APITimeoutError:
            return AvailabilityResult(False, self.timeout_message(), _elapsed_ms(start))
        except APIConnectionError as exc:
            return AvailabilityResult(False, f"Cannot connect: {exc}", _elapsed_ms(start))
        except APIStatusError as exc:
            return AvailabilityResult(False, f"HTTP {exc.status_code}: {exc.message}", _elapsed_ms(start))
        except OpenAIError as exc:
            return AvailabilityResult(False, f"Cannot connect: {exc}", _elapsed_ms(start))

        elapsed = _elapsed_ms(start)
        logger.info(f"[Generation] {self.provider} endpoint is available",
                    extra={"model": self.model, "response_time_ms": elapsed})
        return AvailabilityResult(True, None, elapsed)

    async def generate(self, prompt: str, options: Optional[GenerationOptions] = None,
                       deadline: Optional[Deadline] = None) -> str:
        options = options or self.options
        timeout = clamp_timeout(options.timeout, deadline, "generation")
        start = time.monotonic()
        try:
            async with self._client(timeout) as client:
                completion = await client.chat.completions.create(
                    model=self.model,
                    messages=[
                        {"role": "system", "content": SYSTEM_MESSAGE},
                        {"role": "user", "content": prompt},
                    ],
                    temperature=options.temperature,
                    max_tokens=options.max_tokens,
                )
        except APITimeoutError as exc:
            raise GenerationFailed(f"no response within {timeout:g} seconds") from exc
        except APIStatusError as exc:
            raise GenerationFailed(f"HTTP {exc.status_code}", raw_output=exc.message) from exc
        except APIConnectionError as exc:
            raise GenerationFailed(f"Cannot connect: {exc}") from exc
        except OpenAIError as exc:
            raise GenerationFailed(f"request error: {exc}") from exc

        content = completion.choices[0].message.content if completion.choices else None
        if not content or not content.strip():
            raise GenerationFailed("empty response from model")

        logger.info(f"[Generation] {self.provider} responded",
                    extra={"model": self.model, "response_length": len(content),
                           "duration_ms": _elapsed_ms(start), "preview": excerpt(content, 80)})
        return content


def create_generation_client(settings: Settings) -> GenerationClient:
    """Build the client for settings.generation_provider."""
    options = GenerationOptions.from_settings(settings)
    if settings.generation_provider == "gemini":
        return ChatCompletionClient(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            provider="gemini",
            base_url=settings.gemini_base_url,
            probe_timeout=settings.availability_timeout,
            options=options,
        )
    if settings.generation_provider == "openai":
        return ChatCompletionClient(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            provider="openai",
            probe_timeout=settings.availability_timeout,
            options=options,
        )
    return OllamaClient(
        base_url=settings.ollama_base_url,
        model=settings.ollama_model,
        probe_timeout=settings.availability_timeout,
        options=options,
    )
