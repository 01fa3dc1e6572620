"""
FastAPI application factory for the SEC Filing Store.

The public symbol is ``app`` — the ASGI application object used by
uvicorn and by the test client.

Architecture:
    - Singletons (DocumentStore, DocumentSearchService,
      MetricsAggregator) are initialised once in the lifespan context
      manager and stored on ``app.state``.
    - Route modules access them through dependency functions in
      ``dependencies.py`` (which read from ``request.app.state``).
    - No business logic lives here — this is pure wiring.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sec_filing_store import __version__
from sec_filing_store.api.dependencies import get_store
from sec_filing_store.api.schemas import HealthResponse
from sec_filing_store.config import get_settings
from sec_filing_store.core import get_logger
from sec_filing_store.storage import DocumentStore

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Lifespan — initialise singletons, store on app.state
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Initialise and clean up application-level singletons.

    Startup order:
        1. DocumentStore (provider chosen by STORAGE_PROVIDER)
        2. store.initialize() — fails fast if the backend is unreachable
        3. DocumentSearchService and MetricsAggregator over that store
    """
    from sec_filing_store.metrics import MetricsAggregator
    from sec_filing_store.search import DocumentSearchService
    from sec_filing_store.storage import create_store

    logger.info("SEC Filing Store API starting up (v%s)", __version__)

    settings = get_settings()

    store = create_store(settings.storage)
    store.initialize()

    app.state.store = store
    app.state.search_service = DocumentSearchService(store, settings.search)
    app.state.metrics = MetricsAggregator(store)
    app.state.settings = settings

    logger.info("Using %s. API ready.", store.storage_type)
    yield
    logger.info("SEC Filing Store API shutting down.")


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns a fully configured ASGI application with CORS middleware,
    lifespan management, the search/metrics/documents routers and a
    health-check endpoint.
    """
    settings = get_settings()

    application = FastAPI(
        title="SEC Filing Store API",
        description=(
            "REST API for searching tracked SEC filings by company, form "
            "type and full text, and for crawl processing metrics."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # -- CORS ---------------------------------------------------------------
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -- Routers ------------------------------------------------------------
    from sec_filing_store.api.routes.documents import router as documents_router
    from sec_filing_store.api.routes.metrics import router as metrics_router
    from sec_filing_store.api.routes.search import router as search_router

    application.include_router(search_router, prefix="/api/search", tags=["search"])
    application.include_router(metrics_router, prefix="/api/metrics", tags=["metrics"])
    application.include_router(
        documents_router, prefix="/api/documents", tags=["documents"]
    )

    # -- Health check -------------------------------------------------------
    @application.get(
        "/api/health",
        response_model=HealthResponse,
        tags=["meta"],
        summary="Health check",
    )
    def health(store: DocumentStore = Depends(get_store)) -> HealthResponse:
        """Return API liveness and whether the storage backend answers."""
        healthy = store.is_healthy()
        return HealthResponse(
            status="ok" if healthy else "degraded",
            version=__version__,
            storage_type=store.storage_type,
            storage_healthy=healthy,
        )

    return application


app = create_app()
