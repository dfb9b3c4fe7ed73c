"""Domain model entities for commtrack.

These are pure data classes representing business concepts, independent of
the storage layer. The store only ever sees their JSON projections (see
commtrack.database.mappers), so the engine behind it can change freely.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class MessageHeader:
    """Single header of a raw notification message."""

    name: str
    value: str


@dataclass(frozen=True)
class MessageBody:
    """Message body, either carrying data directly or split into parts.

    ``data`` is base64 (standard or URL-safe) text when ``encoding`` is
    ``"base64"`` and already-decoded text when it is ``"identity"``.
    """

    mime_type: str = "text/plain"
    data: Optional[str] = None
    encoding: str = "base64"
    parts: tuple["MessageBody", ...] = ()


@dataclass(frozen=True)
class RawMessage:
    """Provider-supplied notification, read once per ingestion pass."""

    id: str
    headers: tuple[MessageHeader, ...]
    body: MessageBody

    def get_header(self, name: str) -> Optional[str]:
        """Return the first header value matching name, case-insensitively."""
        wanted = name.lower()
        for header in self.headers:
            if header.name.lower() == wanted:
                return header.value
        return None


@dataclass(frozen=True)
class NormalizedMessage:
    """Plain-text view of a raw message."""

    message_id: str
    subject: str
    text: str
    timestamp: datetime
    timestamp_fallback: bool = False


@dataclass(frozen=True)
class ExtractedOrder:
    """Order candidate produced by extraction, before deduplication."""

    message_id: str
    order_id: str
    price: Decimal
    date: datetime


@dataclass(frozen=True)
class Order:
    """Order domain entity.

    ``id`` is the source message identifier, ``order_id`` the business order
    code found in the message text.
    """

    id: str
    order_id: str
    price: Decimal
    commission: Decimal
    date: datetime
    product: str
    product_name: str
    needs_review: bool


@dataclass(frozen=True)
class CatalogEntry:
    """Catalog entry identifying a product by its price point."""

    product_type: str
    display_name: str
    price_point: Decimal
    tolerance: Decimal

    @property
    def lower_bound(self) -> Decimal:
        return self.price_point - self.tolerance

    @property
    def upper_bound(self) -> Decimal:
        return self.price_point + self.tolerance

    def matches(self, price: Decimal) -> bool:
        """Return True if price lies in the inclusive acceptance interval."""
        return self.lower_bound <= price <= self.upper_bound


@dataclass(frozen=True)
class Classification:
    """Result of classifying a single price."""

    product_type: str
    product_name: str
    needs_review: bool


@dataclass(frozen=True)
class ClassifierConfig:
    """Configuration supplied per classification run."""

    catalog: tuple[CatalogEntry, ...]
    accessory_threshold: Decimal
    commission_rate: Decimal


class ReviewStatus(str, Enum):
    """Manual review state of a flagged order."""

    PENDING = "pending"
    APPROVED = "approved"
    DISMISSED = "dismissed"

    @property
    def is_terminal(self) -> bool:
        return self is not ReviewStatus.PENDING


@dataclass(frozen=True)
class ReviewDecision:
    """Manual override decision for one order."""

    order_id: str
    status: ReviewStatus
    assigned_product: Optional[str]
    notes: Optional[str]
    reviewed_at: datetime


@dataclass(frozen=True)
class PayoutRecord:
    """Snapshot of the orders a real-world payment covers."""

    id: str
    amount: Decimal
    date: datetime
    period_start: datetime
    period_end: datetime
    order_ids: tuple[str, ...]
    notes: Optional[str] = None


class DateRangePreset(str, Enum):
    """Date range presets for analytics and order views."""

    THIS_MONTH = "this_month"
    LAST_30_DAYS = "last_30_days"
    LAST_90_DAYS = "last_90_days"
    YTD = "ytd"
    ALL_TIME = "all_time"
    CUSTOM = "custom"


@dataclass(frozen=True)
class DateRange:
    """Date range selection; bounds are only used for CUSTOM ranges."""

    preset: DateRangePreset = DateRangePreset.ALL_TIME
    start: Optional[datetime] = None
    end: Optional[datetime] = None


@dataclass(frozen=True)
class DashboardStats:
    """Headline figures for the dashboard."""

    total_commission: Decimal
    total_orders: int
    total_revenue: Decimal
    average_order_value: Decimal
    this_month_commission: Decimal
    this_month_orders: int
    this_week_commission: Decimal
    this_week_orders: int


@dataclass(frozen=True)
class MonthlyBucket:
    """Per calendar month totals."""

    month: str
    year: int
    month_number: int
    commission: Decimal
    orders: int
    revenue: Decimal


@dataclass(frozen=True)
class ProductStats:
    """Per product totals with share of the filtered totals in percent."""

    product_type: str
    product_name: str
    orders: int
    revenue: Decimal
    commission: Decimal
    order_share: Decimal
    revenue_share: Decimal


class TrendDirection(str, Enum):
    """Qualitative trend of the two most recent monthly totals."""

    GROWING = "growing"
    STABLE = "stable"
    DECLINING = "declining"


@dataclass(frozen=True)
class GrowthMetrics:
    """Growth and trend metrics computed over the full order history."""

    this_month_commission: Decimal
    last_month_commission: Decimal
    month_over_month: Decimal
    projected_monthly: Decimal
    best_month: Optional[str]
    best_month_commission: Decimal
    trend: TrendDirection
    orders_per_week: Decimal


@dataclass(frozen=True)
class AnalyticsReport:
    """Complete analytics output for one date range."""

    date_range: DateRange
    start: Optional[datetime]
    end: Optional[datetime]
    orders: tuple[Order, ...]
    stats: DashboardStats
    monthly: tuple[MonthlyBucket, ...]
    products: tuple[ProductStats, ...]
    growth: GrowthMetrics


@dataclass(frozen=True)
class IngestResult:
    """Outcome of one ingestion batch."""

    imported: int
    skipped: int
    ignored: int
    errors: tuple[str, ...] = ()
    orders: tuple[Order, ...] = field(default=())
