"""Crawl pipeline orchestration."""

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass
from urllib.parse import urlparse, urlunparse

from faq_assistant.core.logging import get_logger
from faq_assistant.core.metrics import CRAWL_JOBS, DOCUMENT_COUNT, PAGES_INDEXED
from faq_assistant.errors import EmbeddingServiceError, EmptyContentError, FetchError, StoreError, ValidationError
from faq_assistant.ingest.embeddings import DEFAULT_MAX_CHARS, EmbeddingClient, truncate_for_embedding
from faq_assistant.ingest.extractor import ContentExtractor, validate_selector
from faq_assistant.ingest.fetcher import PageFetcher
from faq_assistant.models.entities import CrawlJob, CrawlJobUpdate
from faq_assistant.store.base import VectorStore
from faq_assistant.utils.time import utc_now

logger = get_logger(__name__)

DEFAULT_MAX_PAGES = 10


@dataclass(slots=True)
class CrawlOutcome:
    job_id: str
    pages_crawled: int
    message: str


@dataclass(slots=True)
class _IndexedPage:
    document_id: str
    html: str


class CrawlPipeline:
    """Coordinate fetching, extraction, embeddings, and persistence for one job.

    The job row is written before any network work so every attempt leaves an
    audit trail. Any failure after that point is recorded on the job as
    ``failed`` and then re-raised.
    """

    def __init__(
        self,
        store: VectorStore,
        embedding_client: EmbeddingClient,
        fetcher: PageFetcher | None = None,
        extractor: ContentExtractor | None = None,
        embedding_max_chars: int = DEFAULT_MAX_CHARS,
    ) -> None:
        self.store = store
        self.embedding_client = embedding_client
        self.fetcher = fetcher or PageFetcher()
        self.extractor = extractor or ContentExtractor()
        self.embedding_max_chars = embedding_max_chars

    def crawl(
        self,
        url: str,
        selector: str | None = None,
        max_pages: int = DEFAULT_MAX_PAGES,
        follow_links: bool = False,
    ) -> CrawlOutcome:
        url = _validate_url(url)
        selector = (selector or "").strip() or None
        if selector:
            validate_selector(selector)
        if max_pages < 1:
            raise ValidationError("maxPages must be at least 1")

        job = self.store.create_crawl_job(
            url,
            {"maxPages": max_pages, "selector": selector, "followLinks": follow_links},
        )
        log_ctx = {"ctx_job_id": job.id, "ctx_url": url}
        logger.info("Crawl job started", extra=log_ctx)
        started = time.perf_counter()
        try:
            if follow_links:
                pages = self._crawl_site(job, url, selector, max_pages)
            else:
                self._index_page(job, url, selector)
                pages = 1
            self.store.update_crawl_job(job.id, CrawlJobUpdate.completed(pages))
        except Exception as exc:
            logger.warning("Crawl job failed: %s", exc, extra=log_ctx)
            self._mark_failed(job, str(exc))
            raise

        CRAWL_JOBS.labels(status="completed").inc()
        self._update_document_metric()
        logger.info(
            "Crawl job completed",
            extra={**log_ctx, "ctx_pages": pages, "ctx_seconds": round(time.perf_counter() - started, 3)},
        )
        message = "Page crawled successfully" if pages == 1 else f"Crawled {pages} pages successfully"
        return CrawlOutcome(job_id=job.id, pages_crawled=pages, message=message)

    # Internal helpers -------------------------------------------------

    def _index_page(self, job: CrawlJob, url: str, selector: str | None) -> _IndexedPage:
        page = self.fetcher.fetch(url)
        extracted = self.extractor.extract(page.text, selector=selector, url=url)
        embedding = self.embedding_client.embed(truncate_for_embedding(extracted.content, self.embedding_max_chars))
        document_id = self.store.insert_document(
            content=extracted.content,
            url=url,
            title=extracted.title,
            embedding=embedding,
            metadata={
                "crawled_at": utc_now().isoformat(),
                "content_length": len(extracted.content),
                "job_id": job.id,
            },
        )
        PAGES_INDEXED.inc()
        logger.debug("Indexed %s as %s", url, document_id, extra={"ctx_job_id": job.id})
        return _IndexedPage(document_id=document_id, html=page.text)

    def _crawl_site(self, job: CrawlJob, start_url: str, selector: str | None, max_pages: int) -> int:
        """Breadth-first crawl of same-host links, bounded by ``max_pages``.

        The seed page must succeed. Any later page that cannot be indexed is
        skipped, so the returned count equals the documents the job inserted.
        """
        seed = self._index_page(job, start_url, selector)
        pages = 1
        visited = {normalize_url(start_url)}
        queue: deque[str] = deque()
        self._enqueue_links(seed.html, start_url, visited, queue)
        while queue and pages < max_pages:
            url = queue.popleft()
            try:
                page = self._index_page(job, url, selector)
            except (FetchError, EmptyContentError, EmbeddingServiceError, StoreError) as exc:
                logger.info("Skipping %s: %s", url, exc, extra={"ctx_job_id": job.id})
                continue
            pages += 1
            self._enqueue_links(page.html, url, visited, queue)
        return pages

    def _enqueue_links(self, html: str, base_url: str, visited: set[str], queue: deque[str]) -> None:
        for link in self.extractor.discover_links(html, base_url):
            key = normalize_url(link)
            if key not in visited:
                visited.add(key)
                queue.append(link)

    def _mark_failed(self, job: CrawlJob, error: str) -> None:
        CRAWL_JOBS.labels(status="failed").inc()
        try:
            self.store.update_crawl_job(job.id, CrawlJobUpdate.failed(error))
        except StoreError:
            logger.exception("Could not record failure on crawl job %s", job.id)

    def _update_document_metric(self) -> None:
        try:
            DOCUMENT_COUNT.set(self.store.count_documents())
        except StoreError:
            logger.debug("Document count unavailable", exc_info=True)


def normalize_url(url: str) -> str:
    """Canonical form used to de-duplicate crawl targets."""
    parsed = urlparse(url)
    path = parsed.path or "/"
    if len(path) > 1 and path.endswith("/"):
        path = path.rstrip("/")
    return urlunparse((parsed.scheme.lower(), parsed.netloc.lower(), path, "", parsed.query, ""))


def _validate_url(url: str | None) -> str:
    url = (url or "").strip()
    if not url:
        raise ValidationError("URL is required")
    parsed = urlparse(url)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValidationError(f"URL must be an absolute http(s) URL: {url}")
    return url


__all__ = ["CrawlPipeline", "CrawlOutcome", "DEFAULT_MAX_PAGES", "normalize_url"]
