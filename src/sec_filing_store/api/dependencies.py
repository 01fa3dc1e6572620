"""
FastAPI dependency providers for the SEC Filing Store API.

All dependencies read pre-initialised singletons from ``request.app.state``
(set during the lifespan startup in ``app.py``).  Route handlers therefore
share one store connection, one search service and one metrics aggregator
across the process, and tests swap them via ``app.dependency_overrides``.

Usage in route modules::

    from fastapi import Depends
    from sec_filing_store.api.dependencies import get_search_service

    @router.post("/company")
    async def search_company(
        service: DocumentSearchService = Depends(get_search_service),
    ):
        ...
"""

from fastapi import Request

from sec_filing_store.metrics import MetricsAggregator
from sec_filing_store.search import DocumentSearchService
from sec_filing_store.storage import DocumentStore


def get_store(request: Request) -> DocumentStore:
    """Provide the DocumentStore singleton."""
    store: DocumentStore = request.app.state.store
    return store


def get_search_service(request: Request) -> DocumentSearchService:
    """Provide the DocumentSearchService singleton."""
    service: DocumentSearchService = request.app.state.search_service
    return service


def get_metrics(request: Request) -> MetricsAggregator:
    """Provide the MetricsAggregator singleton."""
    aggregator: MetricsAggregator = request.app.state.metrics
    return aggregator
