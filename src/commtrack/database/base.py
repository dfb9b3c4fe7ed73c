"""Abstract key-value store interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional

# Named collections. Values are JSON-compatible structures produced by
# commtrack.database.mappers.
ORDERS_KEY = "orders"
REVIEW_DECISIONS_KEY = "review_decisions"
PAYOUTS_KEY = "payouts"
CATALOG_KEY = "catalog"
SETTINGS_KEY = "settings"


class Database(ABC):
    """Abstract key-value store for commtrack.

    Each key holds one JSON-compatible value. Writes to the same key are
    last-write-wins; no locking is performed.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the store."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize storage schema (create tables)."""
        pass

    @abstractmethod
    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """Get the value stored under key, or default if absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key. Removing a missing key is a no-op."""
        pass

    @abstractmethod
    def list_keys(self) -> list[str]:
        """List all stored keys in sorted order."""
        pass
