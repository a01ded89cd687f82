"""SQLite-backed vector store."""

from __future__ import annotations

import sqlite3
from typing import Any, Mapping, Sequence

import orjson

from faq_assistant.db.sqlite import SQLiteDatabase
from faq_assistant.errors import StoreError
from faq_assistant.models.entities import (
    TERMINAL_JOB_STATUSES,
    Conversation,
    CrawlJob,
    CrawlJobUpdate,
    Message,
    SearchResult,
)
from faq_assistant.store.base import (
    DEFAULT_MATCH_COUNT,
    DEFAULT_MATCH_THRESHOLD,
    bytes_to_vector,
    rank_by_similarity,
    vector_to_bytes,
)
from faq_assistant.utils.ids import new_id
from faq_assistant.utils.time import ms_to_datetime, now_ms


_JOB_COLUMNS = "id, url, status, error, pages_crawled, meta_json, created_at, updated_at"


class SQLiteVectorStore:
    """Persist documents, crawl jobs and conversations in SQLite.

    Embeddings are stored as float32 blobs next to their dimension; cosine
    similarity is computed in-process over rows whose dimension matches the
    query vector.
    """

    def __init__(self, db: SQLiteDatabase, dim: int) -> None:
        self.db = db
        self.dim = dim

    # Documents --------------------------------------------------------

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
        document_id = new_id("doc")
        now = now_ms()
        try:
            with self.db.transaction() as cursor:
                cursor.execute(
                    """
                    INSERT INTO documents (id, content, url, title, embedding, dim, meta_json, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    [
                        document_id,
                        content,
                        url,
                        title,
                        vector_to_bytes(embedding),
                        len(embedding),
                        _dumps(metadata),
                        now,
                        now,
                    ],
                )
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to store document: {exc}") from exc
        return document_id

    def search_similar(
        self,
        query_embedding: Sequence[float],
        threshold: float = DEFAULT_MATCH_THRESHOLD,
        limit: int = DEFAULT_MATCH_COUNT,
    ) -> list[SearchResult]:
        try:
            rows = self.db.query(
                """
                SELECT id, content, url, title, embedding, meta_json
                FROM documents
                WHERE embedding IS NOT NULL AND dim = ?
                """,
                [len(query_embedding)],
            )
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to search documents: {exc}") from exc
        candidates = (
            (
                SearchResult(
                    id=row["id"],
                    content=row["content"],
                    url=row["url"],
                    title=row["title"],
                    similarity=0.0,
                    metadata=_loads(row["meta_json"]),
                ),
                bytes_to_vector(row["embedding"]),
            )
            for row in rows
        )
        return rank_by_similarity(query_embedding, candidates, threshold, limit)

    def count_documents(self) -> int:
        try:
            row = self.db.execute("SELECT COUNT(*) AS count FROM documents").fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to count documents: {exc}") from exc
        return int(row["count"]) if row else 0

    # Crawl jobs -------------------------------------------------------

    def create_crawl_job(self, url: str, metadata: Mapping[str, Any] | None = None) -> CrawlJob:
        job_id = new_id("job")
        now = now_ms()
        try:
            with self.db.transaction() as cursor:
                cursor.execute(
                    f"INSERT INTO crawl_jobs ({_JOB_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                    [job_id, url, "processing", None, 0, _dumps(metadata), now, now],
                )
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to create crawl job: {exc}") from exc
        return CrawlJob(
            id=job_id,
            url=url,
            status="processing",
            error=None,
            pages_crawled=0,
            metadata=dict(metadata or {}),
            created_at=ms_to_datetime(now),
            updated_at=ms_to_datetime(now),
        )

    def update_crawl_job(self, job_id: str, update: CrawlJobUpdate) -> CrawlJob:
        placeholders = ",".join("?" for _ in TERMINAL_JOB_STATUSES)
        try:
            with self.db.transaction() as cursor:
                cursor.execute(
                    f"""
                    UPDATE crawl_jobs
                    SET status = ?, error = ?, pages_crawled = COALESCE(?, pages_crawled), updated_at = ?
                    WHERE id = ? AND status NOT IN ({placeholders})
                    """,
                    [update.status, update.error, update.pages_crawled, now_ms(), job_id, *TERMINAL_JOB_STATUSES],
                )
                changed = cursor.rowcount
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to update crawl job: {exc}") from exc
        job = self.get_crawl_job(job_id)
        if job is None:
            raise StoreError(f"Crawl job {job_id} not found")
        if not changed:
            raise StoreError(f"Crawl job {job_id} is already {job.status}")
        return job

    def get_crawl_job(self, job_id: str) -> CrawlJob | None:
        try:
            row = self.db.execute(f"SELECT {_JOB_COLUMNS} FROM crawl_jobs WHERE id = ?", [job_id]).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to load crawl job: {exc}") from exc
        return _row_to_job(row) if row else None

    def list_crawl_jobs(self, limit: int = 50) -> list[CrawlJob]:
        try:
            rows = self.db.query(
                f"SELECT {_JOB_COLUMNS} FROM crawl_jobs ORDER BY created_at DESC, rowid DESC LIMIT ?",
                [limit],
            )
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to list crawl jobs: {exc}") from exc
        return [_row_to_job(row) for row in rows]

    # Conversations ----------------------------------------------------

    def get_or_create_conversation(self, user_id: str, existing_id: str | None = None) -> str:
        if existing_id:
            return existing_id
        conversation_id = new_id("conv")
        now = now_ms()
        try:
            with self.db.transaction() as cursor:
                cursor.execute(
                    "INSERT INTO conversations (id, user_id, meta_json, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
                    [conversation_id, user_id, _dumps(None), now, now],
                )
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to create conversation: {exc}") from exc
        return conversation_id

    def get_conversation(self, conversation_id: str) -> Conversation | None:
        try:
            row = self.db.execute(
                "SELECT id, user_id, meta_json, created_at, updated_at FROM conversations WHERE id = ?",
                [conversation_id],
            ).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to load conversation: {exc}") from exc
        if row is None:
            return None
        return Conversation(
            id=row["id"],
            user_id=row["user_id"],
            metadata=_loads(row["meta_json"]),
            created_at=ms_to_datetime(row["created_at"]),
            updated_at=ms_to_datetime(row["updated_at"]),
        )

    def append_message_pair(self, conversation_id: str, user_text: str, assistant_text: str) -> None:
        now = now_ms()
        try:
            with self.db.transaction() as cursor:
                cursor.executemany(
                    """
                    INSERT INTO messages (id, conversation_id, role, content, meta_json, created_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    [
                        (new_id("msg"), conversation_id, "user", user_text, _dumps(None), now),
                        (new_id("msg"), conversation_id, "assistant", assistant_text, _dumps(None), now),
                    ],
                )
                cursor.execute(
                    "UPDATE conversations SET updated_at = ? WHERE id = ?",
                    [now, conversation_id],
                )
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to store messages: {exc}") from exc

    def list_messages(self, conversation_id: str) -> list[Message]:
        try:
            rows = self.db.query(
                """
                SELECT id, conversation_id, role, content, meta_json, created_at
                FROM messages
                WHERE conversation_id = ?
                ORDER BY created_at ASC, rowid ASC
                """,
                [conversation_id],
            )
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to list messages: {exc}") from exc
        return [
            Message(
                id=row["id"],
                conversation_id=row["conversation_id"],
                role=row["role"],
                content=row["content"],
                metadata=_loads(row["meta_json"]),
                created_at=ms_to_datetime(row["created_at"]),
            )
            for row in rows
        ]


def _row_to_job(row: sqlite3.Row) -> CrawlJob:
    return CrawlJob(
        id=row["id"],
        url=row["url"],
        status=row["status"],
        error=row["error"],
        pages_crawled=int(row["pages_crawled"]),
        metadata=_loads(row["meta_json"]),
        created_at=ms_to_datetime(row["created_at"]),
        updated_at=ms_to_datetime(row["updated_at"]),
    )


def _dumps(value: Mapping[str, Any] | None) -> str:
    return orjson.dumps(dict(value or {})).decode("utf-8")


def _loads(value: str | None) -> dict[str, Any]:
    return orjson.loads(value) if value else {}


__all__ = ["SQLiteVectorStore"]
