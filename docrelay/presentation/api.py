"""FastAPI application – thin HTTP layer over the search pipeline."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from docrelay.config.settings import Settings
from docrelay.container import Container
from docrelay.domain.exceptions import AdapterError
from docrelay.domain.models import Document, ParsedResult
from docrelay.presentation.middleware import BodySizeLimitMiddleware, LatencyBudgetMiddleware
from docrelay.presentation.rate_limit import RateLimitMiddleware

logger = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = ["POST /api/search", "GET /health", "GET /stats"]


# ---------------------------------------------------------------------------
# Request / Response schemas
# ---------------------------------------------------------------------------
class SearchRequest(BaseModel):
    query: str = Field(..., min_length=1)
    documents: list[Document] = Field(..., min_length=1)


class HealthResponse(BaseModel):
    status: str
    llm_configured: bool
    provider: str
    timestamp: str
    version: str


def validation_error_message(exc: RequestValidationError) -> str:
    """Map pydantic errors to the relay's request error messages.

    Checked in the order a client would fix them: the query, then the
    document list, then the individual documents.
    """
    fields = [tuple(error.get("loc", ()))[1:] for error in exc.errors()]
    if any(loc[:1] == ("query",) for loc in fields):
        return "Invalid query parameter"
    if any(loc == ("documents",) for loc in fields):
        return "No documents provided"
    if any(loc[:1] == ("documents",) for loc in fields):
        return "Invalid document structure"
    return "Invalid request body"


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------
@asynccontextmanager
async def _lifespan(app: FastAPI):
    """Close the LLM client and the tracer provider on shutdown."""
    container: Container = app.state.container
    logger.info(
        "Relay ready: provider=%s, configured=%s",
        container.settings.LLM_PROVIDER,
        container.settings.llm_configured,
    )
    yield
    adapter = vars(container).get("llm_adapter")
    if adapter is not None and hasattr(adapter, "aclose"):
        try:
            await adapter.aclose()
        except Exception:
            logger.debug("Failed to close LLM adapter (non-fatal)", exc_info=True)

    try:
        from opentelemetry import trace as _trace

        provider = _trace.get_tracer_provider()
        if hasattr(provider, "shutdown"):
            provider.shutdown()
    except Exception:
        logger.debug("Tracer provider shutdown failed (non-fatal)", exc_info=True)


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application with DI container."""
    settings = settings or Settings()

    app = FastAPI(
        title="docrelay – document Q&A relay",
        version=settings.APP_VERSION,
        description="Answers questions about uploaded documents via an LLM",
        lifespan=_lifespan,
    )

    # -- Middleware (last added runs first) --
    app.add_middleware(
        LatencyBudgetMiddleware,
        budget_seconds=settings.LATENCY_BUDGET_SECONDS,
    )
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_minute=settings.RATE_LIMIT_RPM,
        burst=settings.RATE_LIMIT_BURST,
    )
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.MAX_REQUEST_BYTES)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    # -- DI Container --
    container = Container(settings)
    app.state.container = container

    # -- Telemetry must be configured before instrumentation --
    _ = container.tracer
    FastAPIInstrumentor.instrument_app(app)

    # ------------------------------------------------------------------
    # Error handlers
    # ------------------------------------------------------------------
    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = validation_error_message(exc)
        logger.info("Rejected %s: %s", request.url.path, message)
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            return JSONResponse(
                status_code=404,
                content={
                    "error": "Endpoint not found",
                    "available_endpoints": AVAILABLE_ENDPOINTS,
                },
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def server_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "message": str(exc)},
        )

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------
    @app.post("/api/search", response_model=ParsedResult)
    async def search_endpoint(req: SearchRequest):
        """Answer the query from the supplied documents."""
        cached = await container.search_cache.get(req.query, req.documents)
        if cached is not None:
            logger.info("Cache hit for search request (returning cached result)")
            return ParsedResult.model_validate(cached)

        try:
            result = await container.search_service.search(req.query, req.documents)
        except AdapterError as exc:
            logger.error("Error in /api/search: %s", exc)
            return JSONResponse(
                status_code=500,
                content={
                    "error": str(exc) or "Search service temporarily unavailable",
                    "details": "Please try again in a moment",
                },
            )

        await container.search_cache.put(
            req.query, req.documents, result.model_dump(by_alias=True)
        )
        return result

    @app.get("/health", response_model=HealthResponse)
    async def health_endpoint() -> HealthResponse:
        """Liveness plus whether the selected LLM provider has a key."""
        return HealthResponse(
            status="healthy",
            llm_configured=settings.llm_configured,
            provider=settings.LLM_PROVIDER.lower(),
            timestamp=datetime.now(timezone.utc).isoformat(),
            version=settings.APP_VERSION,
        )

    @app.get("/stats")
    async def stats_endpoint() -> dict:
        """Return LLM usage statistics for cost monitoring."""
        adapter = vars(container).get("llm_adapter")
        return {
            "llm_usage": adapter.usage_summary if adapter is not None else None,
            "cache_size": container.search_cache.size,
        }

    return app
