"""Tests for the retrieval pipeline and prompt assembly."""

from __future__ import annotations

import pytest
from conftest import TEST_DIM, StubCompletion

from faq_assistant.errors import StoreError, ValidationError
from faq_assistant.ingest.embeddings import HashedEmbeddingClient
from faq_assistant.models.entities import SearchResult
from faq_assistant.retrieval import RetrievalPipeline, build_context
from faq_assistant.retrieval.pipeline import FALLBACK_ANSWER
from faq_assistant.retrieval.prompt import CONTEXT_SEPARATOR, NO_CONTEXT
from faq_assistant.store import InMemoryVectorStore


class BrokenConversationStore(InMemoryVectorStore):
    def append_message_pair(self, conversation_id: str, user_text: str, assistant_text: str) -> None:
        raise StoreError("Failed to store messages: database is locked")


def _index(store: InMemoryVectorStore, embedder: HashedEmbeddingClient, content: str, title: str, url: str) -> str:
    return store.insert_document(content, url, title, embedder.embed(content))


def _pipeline(store, embedder, completion, **kwargs) -> RetrievalPipeline:
    return RetrievalPipeline(store=store, embedding_client=embedder, completion_client=completion, **kwargs)


def test_blank_message_rejected(store, embedder, completion: StubCompletion) -> None:
    with pytest.raises(ValidationError):
        _pipeline(store, embedder, completion).answer("   ")
    assert completion.calls == []


def test_no_matching_documents(store, embedder, completion: StubCompletion) -> None:
    _index(store, embedder, "Contact us at help@example.com", "Contact", "https://example.com/faq")
    answer = _pipeline(store, embedder, completion).answer("What is your refund policy?")

    assert answer.sources == []
    assert answer.conversation_id is None
    prompt = completion.last_system_prompt
    assert NO_CONTEXT in prompt
    assert "knowledge base lacks relevant information" in prompt


def test_sources_follow_similarity_order(store, embedder, completion: StubCompletion) -> None:
    _index(store, embedder, "refund policy", "Refunds", "https://example.com/refunds")
    _index(store, embedder, "refund policy details", "Shipping", "https://example.com/shipping")
    _index(store, embedder, "office opening hours", "Hours", "https://example.com/hours")

    answer = _pipeline(store, embedder, completion).answer("refund policy")

    assert [source.title for source in answer.sources] == ["Refunds", "Shipping"]
    assert answer.sources[0].similarity >= answer.sources[1].similarity
    prompt = completion.last_system_prompt
    assert prompt.index("Title: Refunds") < prompt.index("Title: Shipping")
    assert "Hours" not in prompt


def test_completion_request_shape(store, embedder, completion: StubCompletion) -> None:
    _pipeline(store, embedder, completion).answer("Hello?")
    [call] = completion.calls
    assert call["temperature"] == 0.7
    assert call["max_tokens"] == 500
    assert [m["role"] for m in call["messages"]] == ["system", "user"]
    assert call["messages"][1]["content"] == "Hello?"


def test_empty_completion_uses_fallback(store, embedder) -> None:
    answer = _pipeline(store, embedder, StubCompletion(reply="")).answer("Hello?")
    assert answer.message == FALLBACK_ANSWER


def test_anonymous_requests_persist_nothing(store, embedder, completion: StubCompletion) -> None:
    pipeline = _pipeline(store, embedder, completion)
    pipeline.answer("Where are you?")
    pipeline.answer("Where are you?", user_id="  ")
    assert store.conversations == {}
    assert store.messages == []


def test_user_requests_create_conversation(store, embedder, completion: StubCompletion) -> None:
    pipeline = _pipeline(store, embedder, completion)
    first = pipeline.answer("Where are you?", user_id="user-1")
    assert first.conversation_id in store.conversations

    second = pipeline.answer("And when?", conversation_id=first.conversation_id, user_id="user-1")
    assert second.conversation_id == first.conversation_id
    assert len(store.conversations) == 1
    messages = store.list_messages(first.conversation_id)
    assert [(m.role, m.content) for m in messages] == [
        ("user", "Where are you?"),
        ("assistant", completion.reply),
        ("user", "And when?"),
        ("assistant", completion.reply),
    ]


def test_persistence_failure_does_not_fail_answer(embedder, completion: StubCompletion) -> None:
    store = BrokenConversationStore(dim=TEST_DIM)
    pipeline = _pipeline(store, embedder, completion)
    answer = pipeline.answer("Where are you?", user_id="user-1")
    assert answer.message == completion.reply
    assert answer.conversation_id in store.conversations

    outcome = pipeline.persist_turns("user-1", answer.conversation_id, "q", "a")
    assert outcome.stored is False
    assert "database is locked" in outcome.error


def test_context_excerpt_and_separator() -> None:
    results = [
        SearchResult(id="1", content="x" * 800, url="https://e.com/1", title="One", similarity=0.9),
        SearchResult(id="2", content="short", url=None, title=None, similarity=0.6),
    ]
    context = build_context(results, excerpt_chars=500)
    first, second = context.split(CONTEXT_SEPARATOR)
    assert first == f"Title: One\nURL: https://e.com/1\nContent: {'x' * 500}..."
    assert second.startswith("Title: Untitled\nURL: n/a\nContent: short")
    assert build_context([]) == NO_CONTEXT
