"""Manual review ledger domain service.

A flagged order starts out pending (no ledger entry, or an explicit pending
entry once a user opens it) and ends either approved, with a product
assignment, or dismissed. Both end states are final.
"""

import logging
from datetime import datetime
from typing import Mapping, Optional, Sequence

from commtrack.database.base import REVIEW_DECISIONS_KEY, Database
from commtrack.database.mappers import review_decision_from_record, review_decision_to_record
from commtrack.domain.classifier import product_display_name
from commtrack.domain.entities import CatalogEntry, Order, ReviewDecision, ReviewStatus
from commtrack.domain.errors import (
    ConflictError,
    ValidationError,
    order_not_flagged,
    review_already_resolved,
)
from commtrack.domain.orders import OrderService
from commtrack.utils.date_parser import utc_now

logger = logging.getLogger(__name__)


def resolve_product(
    order: Order,
    ledger: Mapping[str, ReviewDecision],
    catalog: Sequence[CatalogEntry] = (),
) -> tuple[str, str]:
    """Return the effective (product_type, product_name) of an order.

    An approved review decision replaces the classifier's label; anything
    else leaves the stored classification as is.
    """
    decision = ledger.get(order.order_id)
    if (
        order.needs_review
        and decision is not None
        and decision.status == ReviewStatus.APPROVED
        and decision.assigned_product
    ):
        product_type = decision.assigned_product
        return product_type, product_display_name(product_type, catalog)
    return order.product, order.product_name


def review_status_of(order: Order, ledger: Mapping[str, ReviewDecision]) -> Optional[ReviewStatus]:
    """Return the review status of a flagged order, or None if it is not flagged."""
    if not order.needs_review:
        return None
    decision = ledger.get(order.order_id)
    return decision.status if decision is not None else ReviewStatus.PENDING


class ReviewService:
    """Service for reviewing orders the classifier could not identify."""

    def __init__(self, db: Database):
        """Initialize review service.

        Args:
            db: Database instance
        """
        self.db = db
        self.order_service = OrderService(db)

    def get_ledger(self) -> dict[str, ReviewDecision]:
        """Get all review decisions keyed by order ID."""
        stored = self.db.get(REVIEW_DECISIONS_KEY, {})
        return {order_id: review_decision_from_record(r) for order_id, r in stored.items()}

    def get_decision(self, order_id: str) -> Optional[ReviewDecision]:
        """Get the review decision for an order, if one was recorded."""
        return self.get_ledger().get(order_id)

    def get_status(self, order_id: str) -> ReviewStatus:
        """Get the review status of an order; no entry means pending."""
        decision = self.get_decision(order_id)
        return decision.status if decision is not None else ReviewStatus.PENDING

    def list_needing_review(self, include_resolved: bool = False) -> list[tuple[Order, ReviewStatus]]:
        """List flagged orders with their review status.

        Orders that do not need review are never listed, whatever the ledger
        says about them.

        Args:
            include_resolved: If True, also list approved and dismissed orders
        """
        ledger = self.get_ledger()
        result = []
        for order in self.order_service.list_orders():
            status = review_status_of(order, ledger)
            if status is None:
                continue
            if status.is_terminal and not include_resolved:
                continue
            result.append((order, status))
        return result

    def open_review(
        self, order_id: str, notes: Optional[str] = None, now: Optional[datetime] = None
    ) -> ReviewDecision:
        """Record that a user opened a flagged order.

        Opening an order that already has a decision returns that decision
        unchanged.

        Raises:
            NotFoundError: If the order is not cached
            ValidationError: If the order does not need review
        """
        self._require_flagged(order_id)
        existing = self.get_decision(order_id)
        if existing is not None:
            return existing
        return self._record(order_id, ReviewStatus.PENDING, None, notes, now)

    def approve(
        self,
        order_id: str,
        product_type: str,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ReviewDecision:
        """Approve a flagged order with a final product assignment.

        Raises:
            NotFoundError: If the order is not cached
            ValidationError: If the order does not need review or product is empty
            ConflictError: If the order was already approved or dismissed
        """
        product_type = product_type.strip()
        if not product_type:
            raise ValidationError("Assigned product must not be empty")
        self._require_flagged(order_id)
        self._require_open(order_id)
        return self._record(order_id, ReviewStatus.APPROVED, product_type, notes, now)

    def dismiss(
        self, order_id: str, notes: Optional[str] = None, now: Optional[datetime] = None
    ) -> ReviewDecision:
        """Dismiss a flagged order; its stored classification is kept.

        Raises:
            NotFoundError: If the order is not cached
            ValidationError: If the order does not need review
            ConflictError: If the order was already approved or dismissed
        """
        self._require_flagged(order_id)
        self._require_open(order_id)
        return self._record(order_id, ReviewStatus.DISMISSED, None, notes, now)

    def _require_flagged(self, order_id: str) -> Order:
        order = self.order_service.require_order(order_id)
        if not order.needs_review:
            raise ValidationError(order_not_flagged(order_id))
        return order

    def _require_open(self, order_id: str) -> None:
        status = self.get_status(order_id)
        if status.is_terminal:
            raise ConflictError(review_already_resolved(order_id, status.value))

    def _record(
        self,
        order_id: str,
        status: ReviewStatus,
        assigned_product: Optional[str],
        notes: Optional[str],
        now: Optional[datetime],
    ) -> ReviewDecision:
        decision = ReviewDecision(
            order_id=order_id,
            status=status,
            assigned_product=assigned_product,
            notes=notes,
            reviewed_at=now or utc_now(),
        )
        stored = self.db.get(REVIEW_DECISIONS_KEY, {})
        stored[order_id] = review_decision_to_record(decision)
        self.db.set(REVIEW_DECISIONS_KEY, stored)
        logger.info("Review for order %s is now %s", order_id, status.value)
        return decision
