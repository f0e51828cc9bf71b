"""FastAPI application setup for Policy QA."""

from __future__ import annotations

import time

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from openai import OpenAIError
from qdrant_client.http.exceptions import ResponseHandlingException, UnexpectedResponse

from policy_qa.api.dependencies import (
    get_app_settings,
    get_index_manager,
    get_ingest_pipeline,
    get_qa_service,
)
from policy_qa.api.routes_admin import router as admin_router
from policy_qa.api.routes_ingest import router as ingest_router
from policy_qa.api.routes_query import router as query_router
from policy_qa.core.errors import DocumentSourceError, QuestionRequiredError, VectorDimensionError
from policy_qa.core.logging import configure_logging, get_logger, log_context
from policy_qa.core.metrics import REQUEST_COUNT, REQUEST_LATENCY

configure_logging()
logger = get_logger(__name__)

UPSTREAM_ERRORS = (
    OpenAIError,
    UnexpectedResponse,
    ResponseHandlingException,
    httpx.HTTPError,
    ConnectionError,
)

app = FastAPI(
    title="Policy QA",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.include_router(ingest_router, prefix="", tags=["ingest"])
app.include_router(query_router, prefix="", tags=["query"])
app.include_router(admin_router, prefix="", tags=["admin"])


@app.middleware("http")
async def record_request_metrics(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    # Label by route template; unmatched paths share one label.
    endpoint = getattr(request.scope.get("route"), "path", None) or "unmatched"
    REQUEST_LATENCY.labels(endpoint=endpoint, method=request.method).observe(time.perf_counter() - started)
    REQUEST_COUNT.labels(endpoint=endpoint, method=request.method, status=str(response.status_code)).inc()
    return response


@app.exception_handler(QuestionRequiredError)
async def question_required(_request: Request, exc: QuestionRequiredError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"ok": False, "error": str(exc)})


@app.exception_handler(DocumentSourceError)
async def docs_missing(_request: Request, exc: DocumentSourceError) -> JSONResponse:
    logger.warning("Docs folder %s is missing or has no .md/.txt files", exc.path)
    return JSONResponse(status_code=400, content={"ok": False, "error": str(exc)})


@app.exception_handler(VectorDimensionError)
async def vector_dimension_mismatch(request: Request, exc: VectorDimensionError) -> JSONResponse:
    logger.error("%s on %s; check vector_size against the embedding model", exc, request.url.path)
    return JSONResponse(status_code=500, content={"ok": False, "error": "vector dimension mismatch"})


async def upstream_failure(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Upstream failure on %s", request.url.path, exc_info=exc)
    return JSONResponse(status_code=502, content={"ok": False, "error": "upstream service failure"})


for _error in UPSTREAM_ERRORS:
    app.add_exception_handler(_error, upstream_failure)


@app.on_event("startup")
async def startup() -> None:
    """Warm up core singletons on startup."""
    settings = get_app_settings()
    get_index_manager()
    get_ingest_pipeline()
    get_qa_service()
    with log_context(collection=settings.collection):
        logger.info("Policy QA ready; docs folder %s", settings.docs_dir)


@app.get("/health", tags=["admin"])
def health() -> dict[str, bool]:
    """Simple liveness check."""
    return {"ok": True}
