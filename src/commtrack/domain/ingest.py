"""Notification ingestion domain service."""

import logging
from datetime import datetime
from typing import Iterable, Optional

from commtrack.database.base import Database
from commtrack.domain.catalog import CatalogService
from commtrack.domain.classifier import classify_price
from commtrack.domain.deduplicator import deduplicate
from commtrack.domain.entities import (
    ClassifierConfig,
    ExtractedOrder,
    IngestResult,
    Order,
    RawMessage,
)
from commtrack.domain.extractor import OrderExtractor
from commtrack.domain.normalizer import normalize_message
from commtrack.domain.orders import OrderService
from commtrack.utils.date_parser import utc_now

logger = logging.getLogger(__name__)


def build_order(candidate: ExtractedOrder, config: ClassifierConfig) -> Order:
    """Classify a deduplicated candidate and compute its commission."""
    classification = classify_price(
        candidate.price, config.catalog, config.accessory_threshold
    )
    return Order(
        id=candidate.message_id,
        order_id=candidate.order_id,
        price=candidate.price,
        commission=candidate.price * config.commission_rate,
        date=candidate.date,
        product=classification.product_type,
        product_name=classification.product_name,
        needs_review=classification.needs_review,
    )


class IngestService:
    """Service running raw messages through normalize, extract, dedupe and classify."""

    def __init__(self, db: Database, extractor: Optional[OrderExtractor] = None):
        """Initialize ingest service.

        Args:
            db: Database instance
            extractor: Order extractor; defaults to the standard patterns
        """
        self.db = db
        self.extractor = extractor or OrderExtractor()
        self.order_service = OrderService(db)
        self.catalog_service = CatalogService(db)

    def extract_candidates(
        self,
        messages: Iterable[RawMessage],
        now: Optional[datetime] = None,
    ) -> tuple[list[ExtractedOrder], int, list[str]]:
        """Normalize and extract every message.

        A failing message is recorded and skipped; it never aborts the batch.

        Returns:
            Tuple of (candidates in input order, ignored count, error messages)
        """
        candidates: list[ExtractedOrder] = []
        ignored = 0
        errors: list[str] = []

        for message in messages:
            try:
                normalized = normalize_message(message, now=now)
                fields = self.extractor.extract(normalized.text)
            except Exception as e:
                logger.warning("Skipping message %s: %s", message.id, e)
                errors.append(f"Message {message.id}: {e}")
                continue

            if fields is None:
                ignored += 1
                continue

            candidates.append(
                ExtractedOrder(
                    message_id=message.id,
                    order_id=fields.order_id,
                    price=fields.price,
                    date=normalized.timestamp,
                )
            )

        return candidates, ignored, errors

    def ingest(
        self,
        messages: Iterable[RawMessage],
        config: Optional[ClassifierConfig] = None,
        now: Optional[datetime] = None,
    ) -> IngestResult:
        """Ingest one batch of raw messages into the cached order set.

        Args:
            messages: Raw messages, newest first
            config: Classifier configuration; defaults to the stored catalog and settings
            now: Reference time for timestamp fallback and last_updated

        Returns:
            IngestResult with counts of imported, skipped (duplicate) and
            ignored (non-order) messages and per-message errors

        Raises:
            TransportError: If the message source fails; nothing is written
        """
        now = now or utc_now()
        # Materialize first so a failing source leaves the cache untouched
        batch = list(messages)
        config = config or self.catalog_service.get_config()

        candidates, ignored, errors = self.extract_candidates(batch, now=now)

        existing = self.order_service.list_orders()
        dedup = deduplicate(candidates, known_order_ids=(o.order_id for o in existing))
        new_orders = [build_order(c, config) for c in dedup.kept]

        self.order_service.save_orders(existing + new_orders, last_updated=now)

        logger.info(
            "Ingested %d messages: %d imported, %d duplicates, %d ignored, %d errors",
            len(batch),
            len(new_orders),
            len(dedup.discarded),
            ignored,
            len(errors),
        )
        return IngestResult(
            imported=len(new_orders),
            skipped=len(dedup.discarded),
            ignored=ignored,
            errors=tuple(errors),
            orders=tuple(new_orders),
        )

