"""Domain layer for commtrack application."""

from commtrack.domain.analytics import AnalyticsService, compute_analytics
from commtrack.domain.catalog import CatalogService
from commtrack.domain.ingest import IngestService
from commtrack.domain.orders import OrderService
from commtrack.domain.payout import PayoutService
from commtrack.domain.review import ReviewService

__all__ = [
    "AnalyticsService",
    "CatalogService",
    "IngestService",
    "OrderService",
    "PayoutService",
    "ReviewService",
    "compute_analytics",
]
