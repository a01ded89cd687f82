"""In-memory vector store for tests and offline runs."""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import Any, Mapping, Sequence

from faq_assistant.errors import StoreError
from faq_assistant.models.entities import (
    Conversation,
    CrawlJob,
    CrawlJobUpdate,
    Document,
    Message,
    SearchResult,
)
from faq_assistant.store.base import DEFAULT_MATCH_COUNT, DEFAULT_MATCH_THRESHOLD, rank_by_similarity
from faq_assistant.utils.ids import new_id
from faq_assistant.utils.time import utc_now


class InMemoryVectorStore:
    """Dictionary-backed store with the same contract as ``SQLiteVectorStore``."""

    def __init__(self, dim: int) -> None:
        self.dim = dim
        self.documents: dict[str, Document] = {}
        self.jobs: dict[str, CrawlJob] = {}
        self.conversations: dict[str, Conversation] = {}
        self.messages: list[Message] = []
        self._lock = threading.Lock()

    def insert_document(
        self,
        content: str,
        url: str | None,
        title: str | None,
        embedding: Sequence[float],
        metadata: Mapping[str, Any] | None = None,
    ) -> str:
        if len(embedding) != self.dim:
            raise StoreError(f"Embedding dimension {len(embedding)} does not match store dimension {self.dim}")
        now = utc_now()
        document = Document(
            id=new_id("doc"),
            content=content,
            url=url,
            title=title,
            embedding=list(embedding),
            metadata=dict(metadata or {}),
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self.documents[document.id] = document
        return document.id

    def search_similar(
        self,
        query_embedding: Sequence[float],
        threshold: float = DEFAULT_MATCH_THRESHOLD,
        limit: int = DEFAULT_MATCH_COUNT,
    ) -> list[SearchResult]:
        with self._lock:
            documents = list(self.documents.values())
        candidates = (
            (
                SearchResult(
                    id=doc.id,
                    content=doc.content,
                    url=doc.url,
                    title=doc.title,
                    similarity=0.0,
                    metadata=dict(doc.metadata),
                ),
                doc.embedding,
            )
            for doc in documents
        )
        return rank_by_similarity(query_embedding, candidates, threshold, limit)

    def count_documents(self) -> int:
        with self._lock:
            return len(self.documents)

    def create_crawl_job(self, url: str, metadata: Mapping[str, Any] | None = None) -> CrawlJob:
        now = utc_now()
        job = CrawlJob(
            id=new_id("job"),
            url=url,
            status="processing",
            error=None,
            pages_crawled=0,
            metadata=dict(metadata or {}),
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self.jobs[job.id] = job
        return replace(job)

    def update_crawl_job(self, job_id: str, update: CrawlJobUpdate) -> CrawlJob:
        with self._lock:
            job = self.jobs.get(job_id)
            if job is None:
                raise StoreError(f"Crawl job {job_id} not found")
            if job.is_terminal:
                raise StoreError(f"Crawl job {job_id} is already {job.status}")
            job.status = update.status
            job.error = update.error
            if update.pages_crawled is not None:
                job.pages_crawled = update.pages_crawled
            job.updated_at = utc_now()
            return replace(job)

    def get_crawl_job(self, job_id: str) -> CrawlJob | None:
        with self._lock:
            job = self.jobs.get(job_id)
            return replace(job) if job else None

    def list_crawl_jobs(self, limit: int = 50) -> list[CrawlJob]:
        with self._lock:
            jobs = sorted(self.jobs.values(), key=lambda job: job.created_at, reverse=True)
            return [replace(job) for job in jobs[:limit]]

    def get_or_create_conversation(self, user_id: str, existing_id: str | None = None) -> str:
        if existing_id:
            return existing_id
        now = utc_now()
        conversation = Conversation(id=new_id("conv"), user_id=user_id, metadata={}, created_at=now, updated_at=now)
        with self._lock:
            self.conversations[conversation.id] = conversation
        return conversation.id

    def get_conversation(self, conversation_id: str) -> Conversation | None:
        with self._lock:
            return self.conversations.get(conversation_id)

    def append_message_pair(self, conversation_id: str, user_text: str, assistant_text: str) -> None:
        now = utc_now()
        pair = [
            Message(
                id=new_id("msg"),
                conversation_id=conversation_id,
                role=role,
                content=content,
                metadata={},
                created_at=now,
            )
            for role, content in (("user", user_text), ("assistant", assistant_text))
        ]
        with self._lock:
            self.messages.extend(pair)

    def list_messages(self, conversation_id: str) -> list[Message]:
        with self._lock:
            return [message for message in self.messages if message.conversation_id == conversation_id]


__all__ = ["InMemoryVectorStore"]
