"""OpenAI chat completion client for the degraded chat path."""

import time
from dataclasses import dataclass

import openai
from openai import AsyncOpenAI

from maos_ai.config import Settings, get_settings
from maos_ai.shared.exceptions import FallbackProviderError
from maos_ai.shared.logging import get_logger

logger = get_logger(__name__)


@dataclass
class AIResponse:
    """Response from AI completion."""

    content: str
    model: str
    input_tokens: int
    output_tokens: int
    latency_ms: float


class FallbackChatClient:
    """Wrapper for the OpenAI chat completion API.

    Exactly one attempt per call: the SDK's built-in retries are disabled so
    that a failing request surfaces immediately as ``FallbackProviderError``.
    """

    provider_name = "openai_chat"

    def __init__(
        self,
        settings: Settings | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.api_key = settings.openai_api_key
        self.client = client or AsyncOpenAI(
            api_key=settings.openai_api_key or "unset",
            timeout=settings.openai_timeout_seconds,
            max_retries=0,
        )
        self.default_model = settings.openai_chat_model
        self.default_max_tokens = settings.fallback_max_tokens
        self.default_temperature = settings.fallback_temperature

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def complete(
        self,
        system_prompt: str,
        messages: list[dict[str, str]],
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> AIResponse:
        """Send a chat completion request.

        Args:
            system_prompt: System persona
            messages: Conversation turns (role/content dicts), oldest first
            model: Model to use (default from settings)
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature

        Returns:
            AIResponse with content and usage info

        Raises:
            FallbackProviderError: For any provider failure
        """
        if not self.is_configured:
            raise FallbackProviderError("not_configured", "OPENAI_API_KEY is not set")

        model = model or self.default_model
        max_tokens = max_tokens or self.default_max_tokens
        temperature = self.default_temperature if temperature is None else temperature
        start_time = time.monotonic()

        try:
            response = await self.client.chat.completions.create(
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=[{"role": "system", "content": system_prompt}, *messages],
            )
        except openai.AuthenticationError as e:
            logger.error("fallback_chat_auth_error", error=str(e))
            raise FallbackProviderError("not_configured", str(e))
        except openai.RateLimitError as e:
            reason = "quota_exceeded" if getattr(e, "code", None) == "insufficient_quota" else "rate_limited"
            logger.warning("fallback_chat_rate_limited", reason=reason, error=str(e))
            raise FallbackProviderError(reason, str(e))
        except openai.APIStatusError as e:
            logger.error("fallback_chat_api_error", status=e.status_code, error=str(e))
            raise FallbackProviderError("api_error", f"HTTP {e.status_code}")
        except openai.APITimeoutError as e:
            logger.error("fallback_chat_timeout", error=str(e))
            raise FallbackProviderError("timeout", str(e))
        except openai.APIConnectionError as e:
            logger.error("fallback_chat_connection_error", error=str(e))
            raise FallbackProviderError("connection_error", str(e))
        except openai.APIError as e:
            logger.error("fallback_chat_api_error", error=str(e))
            raise FallbackProviderError("api_error", str(e))
        except ValueError as e:
            # 2xx with an undecodable JSON body
            logger.error("fallback_chat_invalid_response", error=str(e))
            raise FallbackProviderError("invalid_response", str(e))

        latency_ms = (time.monotonic() - start_time) * 1000
        try:
            usage = response.usage
            input_tokens = usage.prompt_tokens if usage else 0
            output_tokens = usage.completion_tokens if usage else 0
            content = response.choices[0].message.content if response.choices else None
        except (AttributeError, IndexError, TypeError) as e:
            # 2xx whose body is not a chat completion (e.g. an HTML error page)
            logger.error("fallback_chat_invalid_response", error=str(e))
            raise FallbackProviderError("invalid_response", f"Unexpected completion shape: {e}")

        if content is not None and not isinstance(content, str):
            raise FallbackProviderError("invalid_response", "Completion content is not text")

        logger.debug(
            "fallback_chat_completion_success",
            model=model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            latency_ms=round(latency_ms, 2),
        )

        return AIResponse(
            content=content or "",
            model=model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            latency_ms=latency_ms,
        )

    async def close(self) -> None:
        await self.client.close()
