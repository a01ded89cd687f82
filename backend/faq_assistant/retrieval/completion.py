"""Chat completion clients."""

from __future__ import annotations

from typing import Mapping, Protocol, Sequence

import openai

from faq_assistant.core.logging import get_logger
from faq_assistant.errors import CompletionServiceError

logger = get_logger(__name__)

ChatMessage = Mapping[str, str]


class CompletionClient(Protocol):
    def complete(
        self,
        messages: Sequence[ChatMessage],
        temperature: float = 0.7,
        max_tokens: int = 500,
    ) -> str: ...


class OpenAICompletionClient:
    """Completion client backed by the OpenAI chat completions endpoint."""

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 30.0,
        client: openai.OpenAI | None = None,
    ) -> None:
        self.model = model
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._client = client

    def complete(
        self,
        messages: Sequence[ChatMessage],
        temperature: float = 0.7,
        max_tokens: int = 500,
    ) -> str:
        try:
            completion = self._get_client().chat.completions.create(
                model=self.model,
                messages=[dict(message) for message in messages],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.OpenAIError as exc:
            logger.warning("Completion request failed: %s", exc, extra={"ctx_model": self.model})
            raise CompletionServiceError(f"Completion service error: {exc}") from exc
        if not completion.choices:
            raise CompletionServiceError("Completion service returned no choices")
        return completion.choices[0].message.content or ""

    def _get_client(self) -> openai.OpenAI:
        if self._client is None:
            self._client = openai.OpenAI(
                api_key=self._api_key,
                base_url=self._base_url,
                timeout=self._timeout,
                max_retries=0,
            )
        return self._client


__all__ = ["ChatMessage", "CompletionClient", "OpenAICompletionClient"]
