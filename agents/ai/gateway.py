"""
LLM gateway: one ``call(system_prompt, user_prompt)`` interface over providers
with different request envelopes.

- Chat-completion providers (OpenRouter and other OpenAI-compatible APIs) go
  through the ``openai`` SDK pointed at the provider's base URL.
- Gemini's ``generateContent`` REST endpoint takes one combined content
  string and is called with aiohttp.

Both verify the credential before touching the network, wait on the
per-credential rate limiter, and pipe the model text through the JSON
extractor.
"""
import asyncio
import logging
import os
from abc import abstractmethod
from typing import Any, Callable, Dict, Optional

import aiohttp
from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI

from agents.config import (
    GEMINI_BASE_URL,
    GEMINI_MODEL,
    LLM_MAX_TOKENS,
    LLM_PROVIDER,
    LLM_REQUEST_TIMEOUT,
    LLM_TEMPERATURE,
    OPENROUTER_BASE_URL,
    OPENROUTER_MODEL,
)
from agents.core.interfaces import JSONGateway
from agents.generation.exceptions import ConfigurationError, MissingConfigError, ProviderError, ProviderTimeoutError
from config.logging_config import get_logging_config
from config.rate_limits import get_min_interval
from setup_logging_optimized import get_logger
from utils.json_extract import extract_json
from utils.rate_limiter import MinIntervalRateLimiter, get_rate_limiter

logger = get_logger(__name__)

_PAYLOAD_PREVIEW_CHARS = 500

# Marker phrases in system prompts -> diagnostic context label
CONTEXT_MARKERS = (
    ("segmentation", ("presentation designer", "split the user")),
    ("layout", ("plan element positions", "1600x900px")),
    ("refinement", ("design critic",)),
)


def infer_context(system_prompt: str) -> str:
    """Label a call by the stage that issued it (diagnostics only)."""
    lowered = (system_prompt or "").lower()
    for label, markers in CONTEXT_MARKERS:
        if any(marker in lowered for marker in markers):
            return label
    return "unknown"


class LLMGateway(JSONGateway):
    """Provider-neutral JSON-returning model call."""

    provider = "unknown"
    credential_name = "API_KEY"

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        rate_limiter: Optional[MinIntervalRateLimiter] = None,
        temperature: float = LLM_TEMPERATURE,
        max_tokens: int = LLM_MAX_TOKENS,
        timeout: float = LLM_REQUEST_TIMEOUT,
        log_payloads: Optional[bool] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.rate_limiter = rate_limiter
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        if log_payloads is None:
            log_payloads = get_logging_config()["log_payloads"]
        self.log_payloads = log_payloads

    async def call(self, system_prompt: str, user_prompt: str) -> Any:
        """
        Send one prompt pair and return the parsed JSON response.

        Raises:
            MissingConfigError: no credential configured (no request is made)
            ProviderError: non-success status, timeout or transport failure
            ExtractionError: the response text held no recoverable JSON
        """
        if not self.api_key:
            raise MissingConfigError(self.credential_name, context={"provider": self.provider})

        context = infer_context(system_prompt)

        if self.rate_limiter is not None:
            waited = await self.rate_limiter()
            if waited > 0:
                logger.info(f"[GATEWAY] Rate limit: waited {waited:.1f}s before {context} call")

        logger.info(f"[GATEWAY] {self.provider}/{self.model} call for {context}")
        text = await self._complete(system_prompt, user_prompt)

        if self.log_payloads and logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"[GATEWAY] Raw {context} output: {text[:_PAYLOAD_PREVIEW_CHARS]!r}")

        return extract_json(text, context)

    @abstractmethod
    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        """Issue the provider request and return the model's raw text."""


class ChatCompletionGateway(LLMGateway):
    """OpenAI-compatible chat completions (system + user message array)."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = OPENROUTER_MODEL,
        base_url: str = OPENROUTER_BASE_URL,
        provider: str = "openrouter",
        client: Optional[Any] = None,
        **kwargs
    ):
        super().__init__(api_key, model, **kwargs)
        self.base_url = base_url
        self.provider = provider
        self.credential_name = f"{provider.upper()}_API_KEY"
        self._client = client

    @property
    def client(self):
        if self._client is None:
            # Retries are the caller's policy, not the SDK's
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                response_format={"type": "json_object"},
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except APITimeoutError as e:
            raise ProviderTimeoutError(
                f"{self.provider} request timed out after {self.timeout}s", provider=self.provider, cause=e
            )
        except APIStatusError as e:
            body = e.response.text if e.response is not None else str(e.body)
            logger.error(f"[GATEWAY] {self.provider} returned {e.status_code}: {body[:_PAYLOAD_PREVIEW_CHARS]}")
            raise ProviderError(
                f"{self.provider} API error: {e.status_code}",
                status_code=e.status_code,
                body=body,
                provider=self.provider,
                cause=e,
            )
        except APIConnectionError as e:
            raise ProviderError(f"{self.provider} connection failed", provider=self.provider, cause=e)

        choices = getattr(response, "choices", None) or []
        if not choices:
            raise ProviderError(f"{self.provider} returned no choices", provider=self.provider)
        return choices[0].message.content or ""


class ContentGenerationGateway(LLMGateway):
    """Gemini generateContent: one combined content string, JSON mime type."""

    provider = "gemini"
    credential_name = "GEMINI_API_KEY"

    def __init__(
        self,
        api_key: Optional[str],
        model: str = GEMINI_MODEL,
        base_url: str = GEMINI_BASE_URL,
        session_factory: Optional[Callable[..., aiohttp.ClientSession]] = None,
        **kwargs
    ):
        super().__init__(api_key, model, **kwargs)
        self.base_url = base_url.rstrip("/")
        self.session_factory = session_factory or aiohttp.ClientSession

    def build_payload(self, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        return {
            "contents": [
                {"role": "user", "parts": [{"text": f"{system_prompt}\n\n{user_prompt}"}]}
            ],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_tokens,
                "responseMimeType": "application/json",
            },
        }

    @staticmethod
    def extract_text(data: Dict[str, Any]) -> str:
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts if isinstance(part, dict))

    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        url = f"{self.base_url}/models/{self.model}:generateContent"
        timeout = aiohttp.ClientTimeout(total=self.timeout, connect=10)
        try:
            async with self.session_factory(timeout=timeout) as session:
                async with session.post(
                    url,
                    params={"key": self.api_key},
                    json=self.build_payload(system_prompt, user_prompt),
                ) as response:
                    if response.status != 200:
                        body = await response.text()
                        logger.error(f"[GATEWAY] gemini returned {response.status}: {body[:_PAYLOAD_PREVIEW_CHARS]}")
                        raise ProviderError(
                            f"gemini API error: {response.status}",
                            status_code=response.status,
                            body=body,
                            provider=self.provider,
                        )
                    data = await response.json()
        except asyncio.TimeoutError as e:
            raise ProviderTimeoutError(
                f"gemini request timed out after {self.timeout}s", provider=self.provider, cause=e
            )
        except aiohttp.ClientError as e:
            raise ProviderError("gemini connection failed", provider=self.provider, cause=e)

        return self.extract_text(data)


def get_gateway(provider: Optional[str] = None) -> LLMGateway:
    """Build the configured gateway with its per-credential rate limiter."""
    provider = (provider or LLM_PROVIDER).lower()

    if provider == "openrouter":
        api_key = os.getenv("OPENROUTER_API_KEY")
        return ChatCompletionGateway(
            api_key,
            rate_limiter=get_rate_limiter(provider, api_key, get_min_interval(provider)),
        )
    if provider == "gemini":
        api_key = os.getenv("GEMINI_API_KEY")
        return ContentGenerationGateway(
            api_key,
            rate_limiter=get_rate_limiter(provider, api_key, get_min_interval(provider)),
        )
    raise ConfigurationError(f"Unknown LLM provider: {provider}", context={"provider": provider})
