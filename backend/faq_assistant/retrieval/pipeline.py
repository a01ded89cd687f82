"""Retrieval-augmented answering."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from faq_assistant.core.logging import get_logger
from faq_assistant.core.metrics import PERSIST_FAILURES, REQUEST_LATENCY
from faq_assistant.errors import StoreError, ValidationError
from faq_assistant.ingest.embeddings import EmbeddingClient
from faq_assistant.models.entities import SearchResult
from faq_assistant.retrieval.completion import CompletionClient
from faq_assistant.retrieval.prompt import DEFAULT_EXCERPT_CHARS, build_context, build_system_prompt
from faq_assistant.store.base import DEFAULT_MATCH_COUNT, DEFAULT_MATCH_THRESHOLD, VectorStore

logger = get_logger(__name__)

FALLBACK_ANSWER = "I apologize, but I could not generate a response."


@dataclass(slots=True)
class Source:
    title: str | None
    url: str | None
    similarity: float


@dataclass(slots=True)
class ChatAnswer:
    message: str
    conversation_id: str | None
    sources: list[Source] = field(default_factory=list)


@dataclass(slots=True)
class PersistResult:
    """Outcome of the best-effort conversation write."""

    conversation_id: str | None
    stored: bool
    error: str | None = None


class RetrievalPipeline:
    """Embed a question, retrieve context, and ask the completion service."""

    def __init__(
        self,
        store: VectorStore,
        embedding_client: EmbeddingClient,
        completion_client: CompletionClient,
        match_threshold: float = DEFAULT_MATCH_THRESHOLD,
        match_count: int = DEFAULT_MATCH_COUNT,
        excerpt_chars: int = DEFAULT_EXCERPT_CHARS,
        temperature: float = 0.7,
        max_tokens: int = 500,
    ) -> None:
        self.store = store
        self.embedding_client = embedding_client
        self.completion_client = completion_client
        self.match_threshold = match_threshold
        self.match_count = match_count
        self.excerpt_chars = excerpt_chars
        self.temperature = temperature
        self.max_tokens = max_tokens

    def answer(
        self,
        message: str,
        conversation_id: str | None = None,
        user_id: str | None = None,
    ) -> ChatAnswer:
        if not message or not message.strip():
            raise ValidationError("Message is required")
        start_time = time.perf_counter()

        results = self.retrieve(message)
        system_prompt = build_system_prompt(build_context(results, self.excerpt_chars))
        reply = self.completion_client.complete(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": message},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        reply = reply or FALLBACK_ANSWER

        resolved_conversation: str | None = None
        if user_id and user_id.strip():
            outcome = self.persist_turns(user_id, conversation_id, message, reply)
            resolved_conversation = outcome.conversation_id

        REQUEST_LATENCY.labels(endpoint="chat", method="POST").observe(time.perf_counter() - start_time)
        return ChatAnswer(
            message=reply,
            conversation_id=resolved_conversation,
            sources=[Source(title=item.title, url=item.url, similarity=item.similarity) for item in results],
        )

    def retrieve(self, message: str) -> list[SearchResult]:
        query_embedding = self.embedding_client.embed(message)
        return self.store.search_similar(query_embedding, threshold=self.match_threshold, limit=self.match_count)

    def persist_turns(
        self,
        user_id: str,
        conversation_id: str | None,
        user_text: str,
        assistant_text: str,
    ) -> PersistResult:
        """Store the user/assistant pair; failures are reported, never raised."""
        resolved = conversation_id
        try:
            resolved = self.store.get_or_create_conversation(user_id, conversation_id)
            self.store.append_message_pair(resolved, user_text, assistant_text)
        except StoreError as exc:
            PERSIST_FAILURES.inc()
            logger.warning(
                "Conversation not saved: %s",
                exc,
                extra={"ctx_user_id": user_id, "ctx_conversation_id": resolved},
            )
            return PersistResult(conversation_id=resolved, stored=False, error=str(exc))
        return PersistResult(conversation_id=resolved, stored=True)


__all__ = ["RetrievalPipeline", "ChatAnswer", "Source", "PersistResult", "FALLBACK_ANSWER"]
