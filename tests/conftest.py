"""Shared pytest fixtures for commtrack tests."""

import base64
import json
import os
import tempfile
from datetime import datetime, UTC
from decimal import Decimal
from email.utils import format_datetime

import pytest

from commtrack.database.factories import create_memory_database, create_sqlite_database
from commtrack.domain.catalog import CatalogService
from commtrack.domain.entities import CatalogEntry, MessageBody, MessageHeader, Order, RawMessage
from commtrack.domain.ingest import IngestService
from commtrack.domain.orders import OrderService
from commtrack.domain.payout import PayoutService
from commtrack.domain.review import ReviewService


def encode_body(text: str) -> str:
    """Encode text the way the mail provider does (URL-safe base64, no padding)."""
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def notification_text(order_id: str, price: str) -> str:
    return (
        "Hello,\n\n"
        f"There is a new referred order with ID: {order_id} and price ${price}\n\n"
        "Affiliatly"
    )


def make_message(
    message_id: str,
    order_id: str | None = None,
    price: str | None = None,
    sent_at: datetime | None = None,
    text: str | None = None,
    multipart: bool = False,
) -> RawMessage:
    """Build a raw notification message for tests."""
    if text is None:
        text = notification_text(order_id, price)
    headers = [MessageHeader("Subject", "Sourhouse: New referred order")]
    if sent_at is not None:
        headers.append(MessageHeader("Date", format_datetime(sent_at)))

    if multipart:
        body = MessageBody(
            mime_type="multipart/alternative",
            parts=(
                MessageBody(mime_type="text/html", data=encode_body(f"<p>{text}</p>")),
                MessageBody(mime_type="text/plain", data=encode_body(text)),
            ),
        )
    else:
        body = MessageBody(data=encode_body(text))
    return RawMessage(id=message_id, headers=tuple(headers), body=body)


def make_order(
    order_id: str,
    price: str,
    date: datetime,
    product: str = "goldie",
    product_name: str = "Goldie",
    needs_review: bool = False,
    rate: str = "0.15",
) -> Order:
    """Build a stored order for tests."""
    return Order(
        id=f"msg-{order_id}",
        order_id=order_id,
        price=Decimal(price),
        commission=Decimal(price) * Decimal(rate),
        date=date,
        product=product,
        product_name=product_name,
        needs_review=needs_review,
    )


@pytest.fixture
def temp_db():
    """Create a temporary SQLite store for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def memory_db():
    """Create an in-memory store for testing."""
    return create_memory_database()


@pytest.fixture
def catalog_service(temp_db):
    return CatalogService(temp_db)


@pytest.fixture
def order_service(temp_db):
    return OrderService(temp_db)


@pytest.fixture
def ingest_service(temp_db):
    return IngestService(temp_db)


@pytest.fixture
def review_service(temp_db):
    return ReviewService(temp_db)


@pytest.fixture
def payout_service(temp_db):
    return PayoutService(temp_db)


@pytest.fixture
def goldie_entry():
    return CatalogEntry(
        product_type="goldie",
        display_name="Goldie",
        price_point=Decimal("149"),
        tolerance=Decimal("10"),
    )


@pytest.fixture
def sample_catalog(catalog_service):
    """Store the default Sourhouse catalog and return its entries."""
    from commtrack.cli.commands.init_catalog import INITIAL_CATALOG

    for product_type, display_name, price_point, tolerance in INITIAL_CATALOG:
        catalog_service.add_entry(product_type, display_name, price_point, tolerance)
    return catalog_service.list_entries()


@pytest.fixture
def messages_file(tmp_path):
    """Write raw messages to a JSON file in the plain message shape."""

    def write(messages: list[RawMessage]) -> str:
        payload = []
        for message in messages:
            payload.append(
                {
                    "id": message.id,
                    "headers": [{"name": h.name, "value": h.value} for h in message.headers],
                    "body": {"encoding": message.body.encoding, "data": message.body.data},
                }
            )
        path = tmp_path / "messages.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        return str(path)

    return write


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


NOW = datetime(2024, 3, 15, 12, 0, tzinfo=UTC)
