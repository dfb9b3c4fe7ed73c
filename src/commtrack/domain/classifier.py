"""Price-point product classification."""

from dataclasses import replace
from decimal import Decimal
from typing import Iterable, Sequence

from commtrack.domain.entities import CatalogEntry, Classification, Order

ACCESSORY_TYPE = "accessory"
ACCESSORY_NAME = "Accessory"
UNKNOWN_TYPE = "unknown"
UNKNOWN_NAME = "Unknown"


def classify_price(
    price: Decimal,
    catalog: Sequence[CatalogEntry],
    accessory_threshold: Decimal,
) -> Classification:
    """Classify a price against the catalog.

    Entries are tried in the order given and the first inclusive interval
    containing the price wins. Unmatched prices strictly between zero and the
    accessory threshold are accessories; everything else needs review.
    """
    for entry in catalog:
        if entry.matches(price):
            return Classification(
                product_type=entry.product_type,
                product_name=entry.display_name,
                needs_review=False,
            )

    if 0 < price < accessory_threshold:
        return Classification(
            product_type=ACCESSORY_TYPE, product_name=ACCESSORY_NAME, needs_review=False
        )

    return Classification(product_type=UNKNOWN_TYPE, product_name=UNKNOWN_NAME, needs_review=True)


def reclassify_orders(
    orders: Iterable[Order],
    catalog: Sequence[CatalogEntry],
    accessory_threshold: Decimal,
) -> list[Order]:
    """Re-run classification on existing orders.

    Only product fields change; commission keeps the rate in force when the
    order was ingested.
    """
    result = []
    for order in orders:
        classification = classify_price(order.price, catalog, accessory_threshold)
        result.append(
            replace(
                order,
                product=classification.product_type,
                product_name=classification.product_name,
                needs_review=classification.needs_review,
            )
        )
    return result


def product_display_name(product_type: str, catalog: Sequence[CatalogEntry]) -> str:
    """Return the display name for a product type."""
    for entry in catalog:
        if entry.product_type == product_type:
            return entry.display_name
    if product_type == ACCESSORY_TYPE:
        return ACCESSORY_NAME
    if product_type == UNKNOWN_TYPE:
        return UNKNOWN_NAME
    return product_type
