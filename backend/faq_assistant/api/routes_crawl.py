"""Crawl API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from faq_assistant.api.cors import preflight_response
from faq_assistant.api.dependencies import get_crawl_pipeline, get_vector_store
from faq_assistant.core.metrics import REQUEST_COUNT
from faq_assistant.ingest.pipeline import CrawlPipeline
from faq_assistant.models.dto import CrawlJobResponse, CrawlRequest, CrawlResponse
from faq_assistant.models.entities import CrawlJob
from faq_assistant.store import VectorStore

router = APIRouter()


@router.post("/crawl", response_model=CrawlResponse, summary="Crawl a page into the knowledge base")
def crawl(
    request: CrawlRequest,
    pipeline: CrawlPipeline = Depends(get_crawl_pipeline),
) -> CrawlResponse:
    outcome = pipeline.crawl(
        url=request.url,
        selector=request.selector,
        max_pages=request.max_pages,
        follow_links=request.follow_links,
    )
    REQUEST_COUNT.labels(endpoint="crawl", method="POST", status="200").inc()
    return CrawlResponse(job_id=outcome.job_id, pages_crawled=outcome.pages_crawled, message=outcome.message)


# Options call for /crawl
@router.options("/crawl", summary="Options for /crawl")
async def options_crawl() -> Response:
    return preflight_response()


@router.get("/crawl/jobs", response_model=list[CrawlJobResponse], summary="List recent crawl jobs")
def list_jobs(
    limit: int = Query(default=50, ge=1, le=500),
    store: VectorStore = Depends(get_vector_store),
) -> list[CrawlJobResponse]:
    return [_job_to_response(job) for job in store.list_crawl_jobs(limit)]


@router.get("/crawl/jobs/{job_id}", response_model=CrawlJobResponse, summary="Fetch one crawl job")
def get_job(job_id: str, store: VectorStore = Depends(get_vector_store)) -> CrawlJobResponse:
    job = store.get_crawl_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Crawl job not found")
    return _job_to_response(job)


def _job_to_response(job: CrawlJob) -> CrawlJobResponse:
    return CrawlJobResponse(
        id=job.id,
        url=job.url,
        status=job.status,
        error=job.error,
        pages_crawled=job.pages_crawled,
        metadata=job.metadata,
        created_at=job.created_at,
        updated_at=job.updated_at,
    )


__all__ = ["router"]
