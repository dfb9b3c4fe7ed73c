"""Mapper functions to convert between domain entities and stored records.

Stored records are plain JSON-compatible dicts. Decimals are kept as strings
so that no precision is lost, and datetimes as ISO 8601 strings in UTC.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from commtrack.domain.entities import (
    CatalogEntry,
    MessageBody,
    MessageHeader,
    Order,
    PayoutRecord,
    RawMessage,
    ReviewDecision,
    ReviewStatus,
)
from commtrack.utils.date_parser import ensure_utc


def _datetime_to_str(value: datetime) -> str:
    return ensure_utc(value).isoformat()


def _datetime_from_str(value: str) -> datetime:
    return ensure_utc(datetime.fromisoformat(value))


def order_to_record(order: Order) -> dict[str, Any]:
    """Convert Order entity to a stored record."""
    return {
        "id": order.id,
        "order_id": order.order_id,
        "price": str(order.price),
        "commission": str(order.commission),
        "date": _datetime_to_str(order.date),
        "product": order.product,
        "product_name": order.product_name,
        "needs_review": order.needs_review,
    }


def order_from_record(record: dict[str, Any]) -> Order:
    """Convert stored record to Order entity."""
    return Order(
        id=record["id"],
        order_id=record["order_id"],
        price=Decimal(record["price"]),
        commission=Decimal(record["commission"]),
        date=_datetime_from_str(record["date"]),
        product=record["product"],
        product_name=record["product_name"],
        needs_review=bool(record["needs_review"]),
    )


def review_decision_to_record(decision: ReviewDecision) -> dict[str, Any]:
    """Convert ReviewDecision entity to a stored record."""
    return {
        "order_id": decision.order_id,
        "status": decision.status.value,
        "assigned_product": decision.assigned_product,
        "notes": decision.notes,
        "reviewed_at": _datetime_to_str(decision.reviewed_at),
    }


def review_decision_from_record(record: dict[str, Any]) -> ReviewDecision:
    """Convert stored record to ReviewDecision entity."""
    return ReviewDecision(
        order_id=record["order_id"],
        status=ReviewStatus(record["status"]),
        assigned_product=record.get("assigned_product"),
        notes=record.get("notes"),
        reviewed_at=_datetime_from_str(record["reviewed_at"]),
    )


def payout_to_record(payout: PayoutRecord) -> dict[str, Any]:
    """Convert PayoutRecord entity to a stored record."""
    return {
        "id": payout.id,
        "amount": str(payout.amount),
        "date": _datetime_to_str(payout.date),
        "period_start": _datetime_to_str(payout.period_start),
        "period_end": _datetime_to_str(payout.period_end),
        "order_ids": list(payout.order_ids),
        "notes": payout.notes,
    }


def payout_from_record(record: dict[str, Any]) -> PayoutRecord:
    """Convert stored record to PayoutRecord entity."""
    return PayoutRecord(
        id=record["id"],
        amount=Decimal(record["amount"]),
        date=_datetime_from_str(record["date"]),
        period_start=_datetime_from_str(record["period_start"]),
        period_end=_datetime_from_str(record["period_end"]),
        order_ids=tuple(record.get("order_ids", [])),
        notes=record.get("notes"),
    )


def catalog_entry_to_record(entry: CatalogEntry) -> dict[str, Any]:
    """Convert CatalogEntry entity to a stored record."""
    return {
        "product_type": entry.product_type,
        "display_name": entry.display_name,
        "price_point": str(entry.price_point),
        "tolerance": str(entry.tolerance),
    }


def catalog_entry_from_record(record: dict[str, Any]) -> CatalogEntry:
    """Convert stored record to CatalogEntry entity."""
    return CatalogEntry(
        product_type=record["product_type"],
        display_name=record["display_name"],
        price_point=Decimal(record["price_point"]),
        tolerance=Decimal(record["tolerance"]),
    )


def _message_body_from_dict(payload: Optional[dict[str, Any]]) -> MessageBody:
    """Build a MessageBody from either the plain or the provider body shape.

    The provider shape keeps the data in a nested ``body`` object next to
    ``mimeType`` and ``parts``; the plain shape has ``data`` at the top level.
    """
    if not payload:
        return MessageBody()

    nested = payload.get("body")
    data = payload.get("data")
    if data is None and isinstance(nested, dict):
        data = nested.get("data")

    mime_type = payload.get("mime_type") or payload.get("mimeType") or "text/plain"
    parts = tuple(_message_body_from_dict(part) for part in payload.get("parts") or [])
    return MessageBody(
        mime_type=mime_type,
        data=data,
        encoding=payload.get("encoding", "base64"),
        parts=parts,
    )


def raw_message_from_dict(payload: dict[str, Any]) -> RawMessage:
    """Convert a JSON message description to a RawMessage entity.

    Accepts ``{"id", "headers", "body"}`` as well as the provider shape
    ``{"id", "payload": {"headers", "body", "parts", "mimeType"}}``.

    Raises:
        KeyError: If the message has no id
    """
    message_id = str(payload["id"])
    container = payload.get("payload", payload)
    headers = tuple(
        MessageHeader(name=str(h.get("name", "")), value=str(h.get("value", "")))
        for h in container.get("headers") or []
    )
    if "payload" in payload:
        body = _message_body_from_dict(container)
    else:
        body = _message_body_from_dict(container.get("body"))
    return RawMessage(id=message_id, headers=headers, body=body)
