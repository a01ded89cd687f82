"""FastAPI application setup for FAQ Assistant."""

from __future__ import annotations

from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from faq_assistant.api.dependencies import get_app_settings, get_database, get_vector_store
from faq_assistant.api.routes_chat import router as chat_router
from faq_assistant.api.routes_crawl import router as crawl_router
from faq_assistant.core.logging import configure_logging, get_logger
from faq_assistant.core.metrics import REQUEST_COUNT, metrics_response
from faq_assistant.errors import FaqAssistantError

configure_logging()
logger = get_logger(__name__)

app = FastAPI(
    title="FAQ Assistant",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_app_settings().cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(crawl_router, prefix="/api", tags=["crawl"])
app.include_router(chat_router, prefix="/api", tags=["chat"])


@app.exception_handler(FaqAssistantError)
async def handle_app_error(request: Request, exc: FaqAssistantError) -> JSONResponse:
    REQUEST_COUNT.labels(endpoint=request.url.path, method=request.method, status=str(exc.status_code)).inc()
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", exc.code, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'] if part != 'body')}: {error['msg']}" for error in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": "ValidationError", "message": details or "Invalid request"})


@app.exception_handler(StarletteHTTPException)
async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    phrase = HTTPStatus(exc.status_code).phrase
    content: dict[str, str] = {"error": "Not found" if exc.status_code == 404 else phrase}
    if exc.detail and exc.detail != phrase:
        content["message"] = str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(status_code=500, content={"error": "InternalError", "message": str(exc) or "Unknown error"})


@app.on_event("startup")
async def startup() -> None:
    """Open the database and apply the schema on startup."""
    get_app_settings()
    get_database()
    get_vector_store()


@app.get("/health", tags=["admin"])
def health() -> dict[str, bool]:
    """Simple liveness check."""
    return {"ok": True}


@app.get("/metrics", tags=["admin"], summary="Prometheus metrics")
async def get_metrics():
    return metrics_response()
