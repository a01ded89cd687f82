"""Pydantic DTOs exposed via API."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class CrawlRequest(_CamelModel):
    url: str = ""
    selector: str | None = None
    max_pages: int = Field(default=10, alias="maxPages")
    follow_links: bool = Field(default=False, alias="followLinks")


class CrawlResponse(_CamelModel):
    success: bool = True
    job_id: str = Field(alias="jobId")
    pages_crawled: int = Field(alias="pagesCrawled")
    message: str


class CrawlJobResponse(_CamelModel):
    id: str
    url: str
    status: Literal["pending", "processing", "completed", "failed"]
    error: str | None = None
    pages_crawled: int = Field(alias="pagesCrawled")
    metadata: dict[str, Any]
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class ChatRequest(_CamelModel):
    message: str = ""
    conversation_id: str | None = Field(default=None, alias="conversationId")
    user_id: str | None = Field(default=None, alias="userId")


class SourceRef(_CamelModel):
    title: str | None = None
    url: str | None = None
    similarity: float


class ChatResponse(_CamelModel):
    message: str
    conversation_id: str | None = Field(default=None, alias="conversationId")
    sources: list[SourceRef]


class MessageResponse(_CamelModel):
    id: str
    role: Literal["user", "assistant", "system"]
    content: str
    created_at: datetime = Field(alias="createdAt")


class ErrorResponse(BaseModel):
    error: str
    message: str | None = None


__all__ = [
    "CrawlRequest",
    "CrawlResponse",
    "CrawlJobResponse",
    "ChatRequest",
    "SourceRef",
    "ChatResponse",
    "MessageResponse",
    "ErrorResponse",
]
