"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations or resolved reviews."""


class TransportError(DomainError):
    """The message source failed; the whole ingestion batch is aborted."""


class StorageError(DomainError):
    """Reading from or writing to the key-value store failed."""


def order_not_found(order_id: str) -> str:
    """Return message for missing order."""
    return f"Order '{order_id}' not found"


def order_not_flagged(order_id: str) -> str:
    """Return message for an order that does not need review."""
    return f"Order '{order_id}' does not need review"


def review_already_resolved(order_id: str, status: str) -> str:
    """Return message when a review decision is already terminal."""
    return f"Review for order '{order_id}' is already {status}"


def catalog_entry_exists(product_type: str) -> str:
    """Return message for duplicate catalog product type."""
    return f"Catalog entry '{product_type}' already exists"


def catalog_entry_not_found(product_type: str) -> str:
    """Return message for missing catalog entry."""
    return f"Catalog entry '{product_type}' not found"


def invalid_period(period_start, period_end) -> str:
    """Return message for a payout period whose start is after its end."""
    return f"Payout period start {period_start} is after end {period_end}"
