"""Commission analytics domain service.

Everything here except AnalyticsService is a pure function of an order
snapshot, a date range, the review ledger and a reference time.
"""

from collections import defaultdict
from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from dateutil.relativedelta import relativedelta

from commtrack.database.base import Database
from commtrack.domain.catalog import CatalogService
from commtrack.domain.entities import (
    AnalyticsReport,
    CatalogEntry,
    DashboardStats,
    DateRange,
    GrowthMetrics,
    MonthlyBucket,
    Order,
    ProductStats,
    ReviewDecision,
    TrendDirection,
)
from commtrack.domain.orders import OrderService, filter_orders_by_date
from commtrack.domain.review import ReviewService, resolve_product
from commtrack.utils.date_parser import (
    days_in_month,
    ensure_utc,
    get_date_range,
    start_of_day,
    start_of_month,
    start_of_week,
    utc_now,
)

ZERO = Decimal("0")
HUNDRED = Decimal("100")
GROWING_FACTOR = Decimal("1.1")
DECLINING_FACTOR = Decimal("0.9")
SECONDS_PER_WEEK = Decimal(7 * 24 * 3600)


def _sum_commission(orders: Sequence[Order]) -> Decimal:
    return sum((o.commission for o in orders), ZERO)


def _sum_revenue(orders: Sequence[Order]) -> Decimal:
    return sum((o.price for o in orders), ZERO)


def _percent(part: Decimal, whole: Decimal) -> Decimal:
    if whole == 0:
        return ZERO
    return part / whole * HUNDRED


def build_stats(filtered: Sequence[Order], history: Sequence[Order], now: datetime) -> DashboardStats:
    """Build headline stats.

    Totals cover the filtered orders; the this-month and this-week figures
    always cover the full history relative to now.
    """
    month_start = start_of_month(now)
    week_start = start_of_day(start_of_week(now.date()))
    this_month = [o for o in history if o.date >= month_start]
    this_week = [o for o in history if o.date >= week_start]

    revenue = _sum_revenue(filtered)
    return DashboardStats(
        total_commission=_sum_commission(filtered),
        total_orders=len(filtered),
        total_revenue=revenue,
        average_order_value=revenue / len(filtered) if filtered else ZERO,
        this_month_commission=_sum_commission(this_month),
        this_month_orders=len(this_month),
        this_week_commission=_sum_commission(this_week),
        this_week_orders=len(this_week),
    )


def build_monthly_rollup(orders: Sequence[Order]) -> list[MonthlyBucket]:
    """Group orders by calendar month, oldest month first."""
    grouped: dict[tuple[int, int], list[Order]] = defaultdict(list)
    for order in orders:
        grouped[(order.date.year, order.date.month)].append(order)

    buckets = []
    for (year, month), month_orders in sorted(grouped.items()):
        buckets.append(
            MonthlyBucket(
                month=datetime(year, month, 1).strftime("%b %Y"),
                year=year,
                month_number=month,
                commission=_sum_commission(month_orders),
                orders=len(month_orders),
                revenue=_sum_revenue(month_orders),
            )
        )
    return buckets


def build_product_stats(
    orders: Sequence[Order],
    ledger: Mapping[str, ReviewDecision],
    catalog: Sequence[CatalogEntry] = (),
) -> list[ProductStats]:
    """Group orders by effective product, highest revenue first."""
    grouped: dict[str, dict[str, Any]] = {}
    for order in orders:
        product_type, product_name = resolve_product(order, ledger, catalog)
        group = grouped.setdefault(
            product_type,
            {"name": product_name, "orders": 0, "revenue": ZERO, "commission": ZERO},
        )
        group["orders"] += 1
        group["revenue"] += order.price
        group["commission"] += order.commission

    total_orders = Decimal(len(orders))
    total_revenue = _sum_revenue(orders)
    results = [
        ProductStats(
            product_type=product_type,
            product_name=data["name"],
            orders=data["orders"],
            revenue=data["revenue"],
            commission=data["commission"],
            order_share=_percent(Decimal(data["orders"]), total_orders),
            revenue_share=_percent(data["revenue"], total_revenue),
        )
        for product_type, data in grouped.items()
    ]
    results.sort(key=lambda p: (-p.revenue, p.product_type))
    return results


def month_over_month(this_month: Decimal, last_month: Decimal) -> Decimal:
    """Percentage change from last month; 100 for growth from nothing."""
    if last_month == 0:
        return HUNDRED if this_month > 0 else ZERO
    return (this_month - last_month) / last_month * HUNDRED


def classify_trend(monthly: Sequence[MonthlyBucket]) -> TrendDirection:
    """Compare the two most recent monthly commission totals."""
    if len(monthly) < 2:
        return TrendDirection.STABLE
    previous = monthly[-2].commission
    recent = monthly[-1].commission
    if recent > previous * GROWING_FACTOR:
        return TrendDirection.GROWING
    if recent < previous * DECLINING_FACTOR:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE


def orders_per_week(orders: Sequence[Order]) -> Decimal:
    """Average orders per week between the oldest and newest order."""
    if not orders:
        return ZERO
    dates = [o.date for o in orders]
    span = Decimal(str((max(dates) - min(dates)).total_seconds()))
    weeks = max(Decimal(1), span / SECONDS_PER_WEEK)
    return Decimal(len(orders)) / weeks


def build_growth_metrics(history: Sequence[Order], now: datetime) -> GrowthMetrics:
    """Build growth metrics from the full, unfiltered order history."""
    last_month_start = now - relativedelta(months=1)
    this_month = _sum_commission(
        [o for o in history if (o.date.year, o.date.month) == (now.year, now.month)]
    )
    last_month = _sum_commission(
        [
            o
            for o in history
            if (o.date.year, o.date.month) == (last_month_start.year, last_month_start.month)
        ]
    )

    projected = this_month / Decimal(now.day) * Decimal(days_in_month(now.year, now.month))

    monthly = build_monthly_rollup(history)
    best = None
    for bucket in monthly:
        if best is None or bucket.commission > best.commission:
            best = bucket

    return GrowthMetrics(
        this_month_commission=this_month,
        last_month_commission=last_month,
        month_over_month=month_over_month(this_month, last_month),
        projected_monthly=projected,
        best_month=best.month if best is not None else None,
        best_month_commission=best.commission if best is not None else ZERO,
        trend=classify_trend(monthly),
        orders_per_week=orders_per_week(history),
    )


def compute_analytics(
    orders: Sequence[Order],
    date_range: DateRange,
    review_ledger: Mapping[str, ReviewDecision],
    catalog: Sequence[CatalogEntry] = (),
    now: Optional[datetime] = None,
) -> AnalyticsReport:
    """Compute the full analytics report for a date range.

    Args:
        orders: Full order history
        date_range: Range applied to totals, monthly rollup and product stats
        review_ledger: Review decisions keyed by order ID
        catalog: Catalog used to name products assigned during review
        now: Reference time; defaults to the current UTC time
    """
    now = ensure_utc(now) if now is not None else utc_now()
    start, end = get_date_range(date_range.preset, now, date_range.start, date_range.end)
    filtered = filter_orders_by_date(list(orders), start, end)

    return AnalyticsReport(
        date_range=date_range,
        start=start,
        end=end,
        orders=tuple(filtered),
        stats=build_stats(filtered, orders, now),
        monthly=tuple(build_monthly_rollup(filtered)),
        products=tuple(build_product_stats(filtered, review_ledger, catalog)),
        growth=build_growth_metrics(orders, now),
    )


class AnalyticsService:
    """Service computing analytics over the cached orders."""

    def __init__(self, db: Database):
        """Initialize analytics service.

        Args:
            db: Database instance
        """
        self.db = db
        self.order_service = OrderService(db)
        self.review_service = ReviewService(db)
        self.catalog_service = CatalogService(db)

    def build_report(self, date_range: DateRange, now: Optional[datetime] = None) -> AnalyticsReport:
        """Build an analytics report from the stored orders and review ledger."""
        return compute_analytics(
            self.order_service.list_orders(),
            date_range,
            self.review_service.get_ledger(),
            catalog=self.catalog_service.list_entries(),
            now=now,
        )
