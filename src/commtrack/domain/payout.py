"""Payout reconciliation domain service."""

import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from commtrack.database.base import PAYOUTS_KEY, Database
from commtrack.database.mappers import payout_from_record, payout_to_record
from commtrack.domain.entities import PayoutRecord
from commtrack.domain.errors import ValidationError, invalid_period
from commtrack.domain.orders import OrderService
from commtrack.utils.date_parser import ensure_utc, utc_now

logger = logging.getLogger(__name__)


class PayoutService:
    """Service for recording which orders a real-world payment covers.

    Payout records are append-only; a correction is a new record. Periods of
    different payouts may overlap, use find_overlapping to detect that.
    """

    def __init__(self, db: Database):
        """Initialize payout service.

        Args:
            db: Database instance
        """
        self.db = db
        self.order_service = OrderService(db)

    def create_payout(
        self,
        period_start: datetime,
        period_end: datetime,
        amount: Decimal,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> PayoutRecord:
        """Create a payout covering all orders dated within the inclusive period.

        Args:
            period_start: First moment covered by the payout
            period_end: Last moment covered by the payout
            amount: Amount actually paid out
            notes: Optional notes
            now: Payout date; defaults to the current time

        Returns:
            The created PayoutRecord

        Raises:
            ValidationError: If the period is inverted or amount is negative
        """
        period_start = ensure_utc(period_start)
        period_end = ensure_utc(period_end)
        if period_start > period_end:
            raise ValidationError(invalid_period(period_start, period_end))
        if amount < 0:
            raise ValidationError("Payout amount must not be negative")

        orders = self.order_service.list_orders(start_date=period_start, end_date=period_end)
        payout = PayoutRecord(
            id=uuid.uuid4().hex,
            amount=amount,
            date=now or utc_now(),
            period_start=period_start,
            period_end=period_end,
            order_ids=tuple(o.order_id for o in orders),
            notes=notes,
        )

        stored = self.db.get(PAYOUTS_KEY, [])
        stored.append(payout_to_record(payout))
        self.db.set(PAYOUTS_KEY, stored)
        logger.info("Recorded payout %s covering %d orders", payout.id, len(payout.order_ids))
        return payout

    def list_payouts(self) -> list[PayoutRecord]:
        """List payouts, newest first."""
        payouts = [payout_from_record(r) for r in self.db.get(PAYOUTS_KEY, [])]
        return sorted(payouts, key=lambda p: p.date, reverse=True)

    def find_overlapping(self, period_start: datetime, period_end: datetime) -> list[PayoutRecord]:
        """List existing payouts whose period overlaps the given one."""
        period_start = ensure_utc(period_start)
        period_end = ensure_utc(period_end)
        return [
            p
            for p in self.list_payouts()
            if p.period_start <= period_end and period_start <= p.period_end
        ]

    def total_paid(self) -> Decimal:
        return sum((p.amount for p in self.list_payouts()), Decimal("0"))

    def outstanding_commission(self) -> Decimal:
        """Total commission earned minus total paid out."""
        earned = sum((o.commission for o in self.order_service.list_orders()), Decimal("0"))
        return earned - self.total_paid()
