"""Order cache domain service."""

from datetime import datetime
from typing import Optional

from commtrack.database.base import ORDERS_KEY, Database
from commtrack.database.mappers import order_from_record, order_to_record
from commtrack.domain.classifier import reclassify_orders
from commtrack.domain.entities import ClassifierConfig, Order
from commtrack.domain.errors import NotFoundError, order_not_found
from commtrack.utils.date_parser import utc_now


def filter_orders_by_date(
    orders: list[Order],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> list[Order]:
    """Return orders whose date lies within the inclusive bounds."""
    return [
        o
        for o in orders
        if (start is None or o.date >= start) and (end is None or o.date <= end)
    ]


class OrderService:
    """Service for the cached order set.

    Orders are stored under a single key together with the time of the last
    successful ingestion, newest first.
    """

    def __init__(self, db: Database):
        """Initialize order service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_orders(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> list[Order]:
        """List cached orders, newest first, with optional inclusive date bounds."""
        stored = self.db.get(ORDERS_KEY, {})
        orders = [order_from_record(r) for r in stored.get("orders", [])]
        return filter_orders_by_date(orders, start_date, end_date)

    def get_order(self, order_id: str) -> Optional[Order]:
        """Get an order by its business order ID."""
        for order in self.list_orders():
            if order.order_id == order_id:
                return order
        return None

    def require_order(self, order_id: str) -> Order:
        """Get an order by its business order ID.

        Raises:
            NotFoundError: If the order is not cached
        """
        order = self.get_order(order_id)
        if order is None:
            raise NotFoundError(order_not_found(order_id))
        return order

    def get_last_updated(self) -> Optional[datetime]:
        """Get the time of the last successful ingestion, if any."""
        stored = self.db.get(ORDERS_KEY, {})
        value = stored.get("last_updated")
        return datetime.fromisoformat(value) if value else None

    def save_orders(self, orders: list[Order], last_updated: Optional[datetime] = None) -> None:
        """Replace the cached order set, sorting it newest first."""
        ordered = sorted(orders, key=lambda o: o.date, reverse=True)
        last_updated = last_updated or utc_now()
        self.db.set(
            ORDERS_KEY,
            {
                "orders": [order_to_record(o) for o in ordered],
                "last_updated": last_updated.isoformat(),
            },
        )

    def reclassify(self, config: ClassifierConfig) -> list[Order]:
        """Re-classify every cached order with the given configuration.

        Returns:
            Orders whose classification changed
        """
        orders = self.list_orders()
        updated = reclassify_orders(orders, config.catalog, config.accessory_threshold)
        changed = [new for old, new in zip(orders, updated) if new != old]
        if changed:
            self.save_orders(updated, self.get_last_updated())
        return changed
