"""CSV export of the order view."""

import csv
import io
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Mapping, Sequence

from commtrack.domain.entities import CatalogEntry, Order, ReviewDecision, ReviewStatus
from commtrack.domain.review import resolve_product, review_status_of
from commtrack.utils.amount_parser import parse_amount
from commtrack.utils.date_parser import parse_date

CSV_COLUMNS = ["Date", "Order ID", "Product", "Price", "Commission", "Status"]

STATUS_LABELS = {
    None: "Classified",
    ReviewStatus.PENDING: "Needs Review",
    ReviewStatus.APPROVED: "Approved",
    ReviewStatus.DISMISSED: "Dismissed",
}

CENTS = Decimal("0.01")


def format_money(amount: Decimal) -> str:
    """Format an amount with two decimals and no separators."""
    return str(amount.quantize(CENTS, rounding=ROUND_HALF_UP))


def export_orders_csv(
    orders: Sequence[Order],
    review_ledger: Mapping[str, ReviewDecision],
    catalog: Sequence[CatalogEntry] = (),
) -> str:
    """Render orders as CSV with one header row and every field quoted."""
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for order in orders:
        _, product_name = resolve_product(order, review_ledger, catalog)
        writer.writerow(
            [
                order.date.strftime("%Y-%m-%d"),
                order.order_id,
                product_name,
                format_money(order.price),
                format_money(order.commission),
                STATUS_LABELS[review_status_of(order, review_ledger)],
            ]
        )
    return output.getvalue()


def parse_orders_csv(text: str) -> list[dict[str, Any]]:
    """Parse CSV produced by export_orders_csv.

    Returns:
        One dict per row with date, order_id, product, price, commission and status

    Raises:
        ValueError: If the header does not match or a value cannot be parsed
    """
    reader = csv.DictReader(io.StringIO(text))
    if reader.fieldnames != CSV_COLUMNS:
        raise ValueError(f"Unexpected CSV columns: {reader.fieldnames}")

    rows = []
    for row in reader:
        rows.append(
            {
                "date": parse_date(row["Date"]),
                "order_id": row["Order ID"],
                "product": row["Product"],
                "price": parse_amount(row["Price"]),
                "commission": parse_amount(row["Commission"]),
                "status": row["Status"],
            }
        )
    return rows
