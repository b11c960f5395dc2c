"""
LLM client abstraction for the teacher's text-generation provider.

Provides async interface for LLM calls with:
- Structured logging of requests/responses
- Timeout handling with a single retry on timeout or rate limit
- Usage tracking (tokens)

Supported providers:
- anthropic: Claude models via the Messages API
- openai: OpenAI chat completions
- deepseek: DeepSeek chat completions (OpenAI-compatible)
"""

import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx
import structlog

from dojo.core.config import settings
from dojo.core.exceptions import (
    ConfigurationError,
    OracleRateLimitError,
    OracleTimeoutError,
)

log = structlog.get_logger(__name__)


# Default model per provider; override with LLM_MODEL
DEFAULT_MODELS: Dict[str, str] = {
    "anthropic": "claude-sonnet-4-6",
    "openai": "gpt-4o-mini",
    "deepseek": "deepseek-chat",
}

MAX_RETRIES = 1  # 2 total attempts
BASE_DELAY = 1.0  # seconds


# =============================================================================
# Response and Base Classes
# =============================================================================


@dataclass
class LLMResponse:
    """Standardized LLM response."""

    content: str
    model: str
    usage: Dict[str, int] = field(default_factory=dict)
    latency_ms: float = 0.0
    raw_response: Optional[Dict[str, Any]] = None


class LLMClient(ABC):
    """Abstract base for LLM providers.

    Subclasses build the provider payload and parse its reply; the shared
    ``_post`` handles timing, logging and the retry policy.
    """

    provider_name: str = "unknown"

    def __init__(
        self,
        model: str,
        temperature: float,
        max_tokens: int,
        timeout: float,
        base_url: str,
        api_key: str,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.base_url = base_url
        self.api_key = api_key

        log.info(
            "llm_client_initialized",
            provider=self.provider_name,
            model=self.model,
            timeout=self.timeout,
        )

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        system: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        """
        Generate a completion from the LLM.

        Args:
            prompt: User message/prompt
            system: Optional system prompt
            temperature: Sampling temperature (0.0-2.0)
            max_tokens: Maximum tokens in response

        Returns:
            LLMResponse with content and metadata
        """

    async def _post(
        self, path: str, headers: Dict[str, str], payload: Dict[str, Any]
    ) -> tuple[Dict[str, Any], float]:
        """POST to the provider, retrying once on timeout or HTTP 429.

        Returns:
            Tuple of (decoded JSON body, latency in milliseconds)

        Raises:
            OracleTimeoutError: After all retries exhausted on timeout
            OracleRateLimitError: After all retries exhausted on rate limit
            httpx.HTTPStatusError: On other API errors (no retry)
        """
        for attempt in range(MAX_RETRIES + 1):
            start = time.perf_counter()

            log.debug(
                "llm_call_start",
                provider=self.provider_name,
                model=self.model,
                max_tokens=payload.get("max_tokens"),
                attempt=attempt + 1,
            )

            try:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(
                        f"{self.base_url}{path}", headers=headers, json=payload
                    )
                    response.raise_for_status()
                    data = response.json()
                return data, (time.perf_counter() - start) * 1000

            except httpx.TimeoutException as e:
                log.warning(
                    "llm_timeout",
                    provider=self.provider_name,
                    attempt=attempt + 1,
                    timeout_seconds=self.timeout,
                )
                if attempt < MAX_RETRIES:
                    await asyncio.sleep(BASE_DELAY * (2**attempt))
                else:
                    raise OracleTimeoutError(
                        f"LLM call timed out after {MAX_RETRIES + 1} attempts "
                        f"(timeout={self.timeout}s)"
                    ) from e

            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code
                if status_code != 429:
                    log.error(
                        "llm_http_error",
                        provider=self.provider_name,
                        status_code=status_code,
                    )
                    raise
                log.warning(
                    "llm_rate_limit", provider=self.provider_name, attempt=attempt + 1
                )
                if attempt < MAX_RETRIES:
                    await asyncio.sleep(BASE_DELAY * (2**attempt))
                else:
                    raise OracleRateLimitError(
                        f"Rate limit exceeded after {MAX_RETRIES + 1} attempts"
                    ) from e

        # Unreachable: loop either returns or raises
        assert False, "unreachable"


# =============================================================================
# Anthropic Client
# =============================================================================


class AnthropicClient(LLMClient):
    """Anthropic Claude API client using the Messages API."""

    provider_name = "anthropic"

    def __init__(
        self,
        model: str,
        temperature: float,
        max_tokens: int,
        timeout: float,
        api_key: Optional[str] = None,
    ):
        """
        Initialize Anthropic client.

        Raises:
            ConfigurationError: If API key is not configured
        """
        api_key = api_key or settings.anthropic_api_key
        if not api_key:
            raise ConfigurationError("ANTHROPIC_API_KEY not configured. Set it in .env.")

        super().__init__(
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
            base_url="https://api.anthropic.com/v1",
            api_key=api_key,
        )

    async def complete(
        self,
        prompt: str,
        system: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        headers = {
            "x-api-key": self.api_key,
            "content-type": "application/json",
            "anthropic-version": "2023-06-01",
        }

        payload: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens if max_tokens is not None else self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature if temperature is not None else self.temperature,
        }
        if system:
            payload["system"] = system

        data, latency_ms = await self._post("/messages", headers, payload)

        content = ""
        if data.get("content"):
            content = data["content"][0].get("text", "")

        usage = {
            "input_tokens": data.get("usage", {}).get("input_tokens", 0),
            "output_tokens": data.get("usage", {}).get("output_tokens", 0),
        }

        log.info(
            "llm_call_complete",
            provider=self.provider_name,
            model=self.model,
            latency_ms=round(latency_ms, 2),
            **usage,
        )

        return LLMResponse(
            content=content,
            model=data.get("model", self.model),
            usage=usage,
            latency_ms=latency_ms,
            raw_response=data,
        )


# =============================================================================
# OpenAI-Compatible Clients
# =============================================================================


class OpenAICompatibleClient(LLMClient):
    """
    Client for providers following the OpenAI chat completions format.

    - OpenAI: https://api.openai.com/v1
    - DeepSeek: https://api.deepseek.com
    """

    async def complete(
        self,
        prompt: str,
        system: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature if temperature is not None else self.temperature,
            "max_tokens": max_tokens if max_tokens is not None else self.max_tokens,
        }

        data, latency_ms = await self._post("/chat/completions", headers, payload)

        content = ""
        if data.get("choices"):
            content = data["choices"][0].get("message", {}).get("content", "") or ""

        usage = {
            "input_tokens": data.get("usage", {}).get("prompt_tokens", 0),
            "output_tokens": data.get("usage", {}).get("completion_tokens", 0),
        }

        log.info(
            "llm_call_complete",
            provider=self.provider_name,
            model=self.model,
            latency_ms=round(latency_ms, 2),
            **usage,
        )

        return LLMResponse(
            content=content,
            model=data.get("model", self.model),
            usage=usage,
            latency_ms=latency_ms,
            raw_response=data,
        )


class OpenAIClient(OpenAICompatibleClient):
    """OpenAI chat completions client."""

    provider_name = "openai"

    def __init__(
        self,
        model: str,
        temperature: float,
        max_tokens: int,
        timeout: float,
        api_key: Optional[str] = None,
    ):
        api_key = api_key or settings.openai_api_key
        if not api_key:
            raise ConfigurationError("OPENAI_API_KEY not configured. Set it in .env.")

        super().__init__(
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
            base_url="https://api.openai.com/v1",
            api_key=api_key,
        )


class DeepSeekClient(OpenAICompatibleClient):
    """
    DeepSeek API client.

    API Docs: https://platform.deepseek.com/api-docs/
    """

    provider_name = "deepseek"

    def __init__(
        self,
        model: str,
        temperature: float,
        max_tokens: int,
        timeout: float,
        api_key: Optional[str] = None,
    ):
        api_key = api_key or settings.deepseek_api_key
        if not api_key:
            raise ConfigurationError("DEEPSEEK_API_KEY not configured. Set it in .env.")

        super().__init__(
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
            base_url="https://api.deepseek.com",
            api_key=api_key,
        )


# =============================================================================
# Client Factory
# =============================================================================

PROVIDERS = {
    "anthropic": AnthropicClient,
    "openai": OpenAIClient,
    "deepseek": DeepSeekClient,
}


def get_teacher_llm_client() -> LLMClient:
    """
    Build the LLM client for the configured teacher provider.

    Returns:
        LLMClient instance configured from settings

    Raises:
        ConfigurationError: If the provider is unknown or its API key is missing
    """
    provider = settings.llm_provider
    client_cls = PROVIDERS.get(provider)
    if client_cls is None:
        raise ConfigurationError(
            f"Unknown LLM provider '{provider}'. "
            f"Supported providers: {', '.join(PROVIDERS)}"
        )

    return client_cls(
        model=settings.llm_model or DEFAULT_MODELS[provider],
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
        timeout=settings.llm_timeout,
    )
