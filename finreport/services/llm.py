# =============================================================================
# LLM Providers — Text-Generation Backend for Narratives
# =============================================================================
#
# The narrative collaborator (services/narrative.py) needs exactly one thing
# from a model: "here is a prompt, give me text back". This module hides the
# two SDK dialects behind that contract:
#
#   LLMProvider (Protocol)
#   ├── AnthropicProvider : native `anthropic` SDK (AsyncAnthropic)
#   ├── OpenAICompatibleProvider : native `openai` SDK (AsyncOpenAI), any
#   │                               OpenAI-compatible endpoint via base_url
#   └── get_llm_provider() : lazy singleton chosen by LLM_PROVIDER
#
# SDKs are imported inside the constructors, so simulation-only deployments
# and the test suite never need network credentials to import this module.
# Constructors raise ValueError when no API key is configured; callers that
# must not fail (NarrativeService) catch it.
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from finreport.config import settings

logger = logging.getLogger(__name__)


@dataclass
class LLMResponse:
    """Provider-neutral completion result."""

    content: str
    model: str
    input_tokens: int
    output_tokens: int


class LLMProvider(Protocol):
    """Anything with an async `complete()` returning an LLMResponse."""

    async def complete(
        self,
        messages: list[dict[str, str]],
        system: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """
        Args:
            messages: [{"role": "user" | "assistant", "content": ...}]
            system: Optional system prompt.
            temperature: Sampling temperature (defaults to LLM_TEMPERATURE).
            max_tokens: Output cap (defaults to LLM_MAX_TOKENS).
        """
        ...


# ---------------------------------------------------------------------------
# Anthropic
# ---------------------------------------------------------------------------


class AnthropicProvider:
    """Claude via AsyncAnthropic. The system prompt is a top-level kwarg."""

    def __init__(self, api_key: str | None = None, model: str | None = None) -> None:
        from anthropic import AsyncAnthropic

        resolved_key = api_key or settings.llm_api_key or settings.anthropic_api_key
        if not resolved_key:
            raise ValueError(
                "No Anthropic API key configured. Set LLM_API_KEY or "
                "ANTHROPIC_API_KEY in .env"
            )

        self._client = AsyncAnthropic(api_key=resolved_key)
        self._model = model or settings.llm_model
        logger.info("Narratives will use AnthropicProvider (model=%s)", self._model)

    async def complete(
        self,
        messages: list[dict[str, str]],
        system: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        kwargs: dict = {
            "model": self._model,
            "messages": messages,
            "max_tokens": max_tokens if max_tokens is not None else settings.llm_max_tokens,
            "temperature": temperature if temperature is not None else settings.llm_temperature,
        }
        if system:
            kwargs["system"] = system

        response = await self._client.messages.create(**kwargs)

        text = next(
            (block.text for block in response.content if block.type == "text"), "",
        )
        return LLMResponse(
            content=text,
            model=response.model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )


# ---------------------------------------------------------------------------
# OpenAI-compatible
# ---------------------------------------------------------------------------


class OpenAICompatibleProvider:
    """
    Any chat-completions endpoint that speaks the OpenAI protocol.

    Point LLM_BASE_URL at the vendor (e.g. a Gemini or DeepSeek
    OpenAI-compatible endpoint) and set LLM_MODEL accordingly. The system
    prompt travels as the first message.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
    ) -> None:
        from openai import AsyncOpenAI

        resolved_key = api_key or settings.llm_api_key or settings.openai_api_key
        if not resolved_key:
            raise ValueError(
                "No API key configured for OpenAI-compatible provider. "
                "Set LLM_API_KEY or OPENAI_API_KEY in .env"
            )

        resolved_base_url = base_url or settings.llm_base_url
        client_kwargs: dict = {"api_key": resolved_key}
        if resolved_base_url:
            client_kwargs["base_url"] = resolved_base_url

        self._client = AsyncOpenAI(**client_kwargs)
        self._model = model or settings.llm_model
        logger.info(
            "Narratives will use OpenAICompatibleProvider (model=%s, base_url=%s)",
            self._model, resolved_base_url or "default",
        )

    async def complete(
        self,
        messages: list[dict[str, str]],
        system: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        chat: list[dict[str, str]] = []
        if system:
            chat.append({"role": "system", "content": system})
        chat.extend(messages)

        response = await self._client.chat.completions.create(
            model=self._model,
            messages=chat,
            max_tokens=max_tokens if max_tokens is not None else settings.llm_max_tokens,
            temperature=temperature if temperature is not None else settings.llm_temperature,
        )

        usage = response.usage
        return LLMResponse(
            content=response.choices[0].message.content or "",
            model=response.model or self._model,
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
        )


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

_provider: AnthropicProvider | OpenAICompatibleProvider | None = None


def get_llm_provider() -> AnthropicProvider | OpenAICompatibleProvider:
    """
    Return the process-wide provider, creating it on first use.

    LLM_PROVIDER=openai_compatible selects OpenAICompatibleProvider; anything
    else selects AnthropicProvider. Raises ValueError if the chosen provider
    has no API key.
    """
    global _provider
    if _provider is None:
        if settings.llm_provider == "openai_compatible":
            _provider = OpenAICompatibleProvider()
        else:
            _provider = AnthropicProvider()
    return _provider
