"""Pattern-based extraction of order fields from notification text."""

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from commtrack.domain.errors import ValidationError
from commtrack.utils.amount_parser import parse_non_negative_amount

# "There is a new referred order with ID: SH43589 and price $329.99"
DEFAULT_ORDER_ID_PATTERN = r"order with ID:\s*([A-Z0-9]+)"
DEFAULT_PRICE_PATTERN = r"price\s*[$€£]?\s*([\d,]+\.?\d*)"


@dataclass(frozen=True)
class ExtractedFields:
    """Order identifier and price found in a message."""

    order_id: str
    price: Decimal


class OrderExtractor:
    """Extracts (order_id, price) pairs using two independent patterns.

    Each pattern must have exactly one capturing group. A text matching only
    one of the patterns is not an order notification.
    """

    def __init__(
        self,
        order_id_pattern: str = DEFAULT_ORDER_ID_PATTERN,
        price_pattern: str = DEFAULT_PRICE_PATTERN,
    ):
        self.order_id_regex = re.compile(order_id_pattern, re.IGNORECASE)
        self.price_regex = re.compile(price_pattern, re.IGNORECASE)

    def extract(self, text: str) -> Optional[ExtractedFields]:
        """Extract order fields from normalized text.

        Returns:
            ExtractedFields, or None if either pattern does not match

        Raises:
            ValidationError: If a price was matched but cannot be parsed
        """
        order_match = self.order_id_regex.search(text)
        price_match = self.price_regex.search(text)
        if order_match is None or price_match is None:
            return None

        try:
            price = parse_non_negative_amount(price_match.group(1))
        except ValueError as e:
            raise ValidationError(str(e)) from e

        return ExtractedFields(order_id=order_match.group(1), price=price)


_default_extractor = OrderExtractor()


def extract_order_fields(text: str) -> Optional[ExtractedFields]:
    """Extract order fields with the default patterns."""
    return _default_extractor.extract(text)
