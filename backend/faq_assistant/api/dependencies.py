"""Shared FastAPI dependencies."""

from __future__ import annotations

from functools import lru_cache

from faq_assistant.core.config import Settings, get_settings
from faq_assistant.db.sqlite import SQLiteDatabase
from faq_assistant.ingest.embeddings import EmbeddingClient, HashedEmbeddingClient, OpenAIEmbeddingClient
from faq_assistant.ingest.fetcher import PageFetcher
from faq_assistant.ingest.pipeline import CrawlPipeline
from faq_assistant.retrieval import OpenAICompletionClient, RetrievalPipeline
from faq_assistant.retrieval.completion import CompletionClient
from faq_assistant.store import SQLiteVectorStore, VectorStore

_DB: SQLiteDatabase | None = None
_STORE: VectorStore | None = None
_EMBEDDING_CLIENT: EmbeddingClient | None = None
_COMPLETION_CLIENT: CompletionClient | None = None
_CRAWL_PIPELINE: CrawlPipeline | None = None
_RETRIEVAL_PIPELINE: RetrievalPipeline | None = None


@lru_cache(maxsize=1)
def get_app_settings() -> Settings:
    return get_settings()


def get_database() -> SQLiteDatabase:
    global _DB
    if _DB is None:
        settings = get_app_settings()
        db = SQLiteDatabase(settings.db_path)
        db.ensure_schema()
        _DB = db
    return _DB


def get_vector_store() -> VectorStore:
    global _STORE
    if _STORE is None:
        _STORE = SQLiteVectorStore(get_database(), dim=get_app_settings().embedding_dim)
    return _STORE


def get_embedding_client() -> EmbeddingClient:
    global _EMBEDDING_CLIENT
    if _EMBEDDING_CLIENT is None:
        settings = get_app_settings()
        if settings.embedding_backend == "hashed":
            _EMBEDDING_CLIENT = HashedEmbeddingClient(dim=settings.embedding_dim)
        else:
            _EMBEDDING_CLIENT = OpenAIEmbeddingClient(
                model=settings.embedding_model,
                dim=settings.embedding_dim,
                api_key=settings.openai_api_key,
                base_url=settings.openai_base_url,
                timeout=settings.request_timeout,
            )
    return _EMBEDDING_CLIENT


def get_completion_client() -> CompletionClient:
    global _COMPLETION_CLIENT
    if _COMPLETION_CLIENT is None:
        settings = get_app_settings()
        _COMPLETION_CLIENT = OpenAICompletionClient(
            model=settings.chat_model,
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            timeout=settings.request_timeout,
        )
    return _COMPLETION_CLIENT


def get_crawl_pipeline() -> CrawlPipeline:
    global _CRAWL_PIPELINE
    if _CRAWL_PIPELINE is None:
        settings = get_app_settings()
        _CRAWL_PIPELINE = CrawlPipeline(
            store=get_vector_store(),
            embedding_client=get_embedding_client(),
            fetcher=PageFetcher(timeout=settings.fetch_timeout, user_agent=settings.user_agent),
            embedding_max_chars=settings.embedding_max_chars,
        )
    return _CRAWL_PIPELINE


def get_retrieval_pipeline() -> RetrievalPipeline:
    global _RETRIEVAL_PIPELINE
    if _RETRIEVAL_PIPELINE is None:
        settings = get_app_settings()
        _RETRIEVAL_PIPELINE = RetrievalPipeline(
            store=get_vector_store(),
            embedding_client=get_embedding_client(),
            completion_client=get_completion_client(),
            match_threshold=settings.match_threshold,
            match_count=settings.match_count,
            excerpt_chars=settings.excerpt_chars,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
        )
    return _RETRIEVAL_PIPELINE


def reset_dependencies() -> None:
    """Drop cached singletons so the next request rebuilds them."""
    global _DB, _STORE, _EMBEDDING_CLIENT, _COMPLETION_CLIENT, _CRAWL_PIPELINE, _RETRIEVAL_PIPELINE
    if _DB is not None:
        _DB.close()
    get_app_settings.cache_clear()
    get_settings.cache_clear()
    _DB = None
    _STORE = None
    _EMBEDDING_CLIENT = None
    _COMPLETION_CLIENT = None
    _CRAWL_PIPELINE = None
    _RETRIEVAL_PIPELINE = None


__all__ = [
    "get_app_settings",
    "get_database",
    "get_vector_store",
    "get_embedding_client",
    "get_completion_client",
    "get_crawl_pipeline",
    "get_retrieval_pipeline",
    "reset_dependencies",
]
