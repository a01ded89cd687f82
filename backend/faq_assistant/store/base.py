"""Vector store capability interface and shared similarity helpers."""

from __future__ import annotations

import math
from array import array
from typing import Any, Iterable, Mapping, Protocol, Sequence

from faq_assistant.models.entities import (
    Conversation,
    CrawlJob,
    CrawlJobUpdate,
    Message,
    SearchResult,
)

DEFAULT_MATCH_THRESHOLD = 0.5
DEFAULT_MATCH_COUNT = 5


class VectorStore(Protocol):
    """Documents with embeddings plus crawl-job and conversation records.

    Every operation raises ``StoreError`` on backend failure and performs no
    hidden retries.
    """

    dim: int

    def insert_document(
        self,
        content: str,
        url: str | None,
        title: str | None,
        embedding: Sequence[float],
        metadata: Mapping[str, Any] | None = None,
    ) -> str: ...

    def search_similar(
        self,
        query_embedding: Sequence[float],
        threshold: float = DEFAULT_MATCH_THRESHOLD,
        limit: int = DEFAULT_MATCH_COUNT,
    ) -> list[SearchResult]: ...

    def count_documents(self) -> int: ...

    def create_crawl_job(self, url: str, metadata: Mapping[str, Any] | None = None) -> CrawlJob: ...

    def update_crawl_job(self, job_id: str, update: CrawlJobUpdate) -> CrawlJob: ...

    def get_crawl_job(self, job_id: str) -> CrawlJob | None: ...

    def list_crawl_jobs(self, limit: int = 50) -> list[CrawlJob]: ...

    def get_or_create_conversation(self, user_id: str, existing_id: str | None = None) -> str: ...

    def append_message_pair(self, conversation_id: str, user_text: str, assistant_text: str) -> None: ...

    def list_messages(self, conversation_id: str) -> list[Message]: ...

    def get_conversation(self, conversation_id: str) -> Conversation | None: ...


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float | None:
    """Cosine similarity, or ``None`` when either vector has zero norm."""
    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b):
        dot += x * y
        norm_a += x * x
        norm_b += y * y
    if norm_a == 0.0 or norm_b == 0.0:
        return None
    return dot / (math.sqrt(norm_a) * math.sqrt(norm_b))


def rank_by_similarity(
    query: Sequence[float],
    candidates: Iterable[tuple[SearchResult, Sequence[float] | None]],
    threshold: float,
    limit: int,
) -> list[SearchResult]:
    """Score candidates against ``query``, keep those at or above ``threshold``.

    Candidates with a missing or wrong-dimension embedding are skipped. The
    result is ordered by descending similarity and holds at most ``limit``
    entries.
    """
    if limit <= 0:
        return []
    scored: list[SearchResult] = []
    for result, embedding in candidates:
        if embedding is None or len(embedding) != len(query):
            continue
        similarity = cosine_similarity(query, embedding)
        if similarity is None or similarity < threshold:
            continue
        result.similarity = similarity
        scored.append(result)
    scored.sort(key=lambda item: item.similarity, reverse=True)
    return scored[:limit]


def vector_to_bytes(vector: Sequence[float]) -> bytes:
    return array("f", vector).tobytes()


def bytes_to_vector(blob: bytes) -> list[float]:
    floats = array("f")
    floats.frombytes(blob)
    return list(floats)


__all__ = [
    "DEFAULT_MATCH_THRESHOLD",
    "DEFAULT_MATCH_COUNT",
    "VectorStore",
    "cosine_similarity",
    "rank_by_similarity",
    "vector_to_bytes",
    "bytes_to_vector",
]
