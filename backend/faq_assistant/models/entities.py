"""Internal dataclasses representing persisted entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

JobStatus = Literal["pending", "processing", "completed", "failed"]
MessageRole = Literal["user", "assistant", "system"]

TERMINAL_JOB_STATUSES: frozenset[str] = frozenset({"completed", "failed"})


@dataclass(slots=True)
class Document:
    id: str
    content: str
    url: str | None
    title: str | None
    embedding: list[float] | None
    metadata: dict[str, Any]
    created_at: datetime
    updated_at: datetime


@dataclass(slots=True)
class CrawlJob:
    id: str
    url: str
    status: JobStatus
    error: str | None
    pages_crawled: int
    metadata: dict[str, Any]
    created_at: datetime
    updated_at: datetime

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_JOB_STATUSES


@dataclass(slots=True, frozen=True)
class CrawlJobUpdate:
    """A single allowed transition out of ``processing``."""

    status: JobStatus
    pages_crawled: int | None = None
    error: str | None = None

    @classmethod
    def completed(cls, pages_crawled: int) -> "CrawlJobUpdate":
        return cls(status="completed", pages_crawled=pages_crawled)

    @classmethod
    def failed(cls, error: str) -> "CrawlJobUpdate":
        return cls(status="failed", error=error or "Unknown error")


@dataclass(slots=True)
class Conversation:
    id: str
    user_id: str
    metadata: dict[str, Any]
    created_at: datetime
    updated_at: datetime


@dataclass(slots=True)
class Message:
    id: str
    conversation_id: str
    role: MessageRole
    content: str
    metadata: dict[str, Any]
    created_at: datetime


@dataclass(slots=True)
class SearchResult:
    """Transient nearest-neighbour hit, never persisted."""

    id: str
    content: str
    url: str | None
    title: str | None
    similarity: float
    metadata: dict[str, Any] = field(default_factory=dict)


__all__ = [
    "JobStatus",
    "MessageRole",
    "TERMINAL_JOB_STATUSES",
    "Document",
    "CrawlJob",
    "CrawlJobUpdate",
    "Conversation",
    "Message",
    "SearchResult",
]
