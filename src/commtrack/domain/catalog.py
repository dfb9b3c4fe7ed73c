"""Catalog and classifier settings domain service."""

from decimal import Decimal
from typing import Any

from commtrack.database.base import CATALOG_KEY, SETTINGS_KEY, Database
from commtrack.database.mappers import catalog_entry_from_record, catalog_entry_to_record
from commtrack.domain.entities import CatalogEntry, ClassifierConfig
from commtrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    catalog_entry_exists,
    catalog_entry_not_found,
)

DEFAULT_ACCESSORY_THRESHOLD = Decimal("100")
DEFAULT_COMMISSION_RATE = Decimal("0.15")


class CatalogService:
    """Service for managing the product catalog and classifier settings."""

    def __init__(self, db: Database):
        """Initialize catalog service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_entries(self) -> list[CatalogEntry]:
        """List catalog entries in priority (declaration) order."""
        return [catalog_entry_from_record(r) for r in self.db.get(CATALOG_KEY, [])]

    def get_entry(self, product_type: str) -> CatalogEntry:
        """Get a catalog entry by product type.

        Raises:
            NotFoundError: If no entry has this product type
        """
        for entry in self.list_entries():
            if entry.product_type == product_type:
                return entry
        raise NotFoundError(catalog_entry_not_found(product_type))

    def add_entry(
        self,
        product_type: str,
        display_name: str,
        price_point: Decimal,
        tolerance: Decimal,
    ) -> CatalogEntry:
        """Append an entry to the catalog.

        Args:
            product_type: Unique product type key (e.g., "goldie")
            display_name: Human readable product name
            price_point: Nominal price
            tolerance: Allowed deviation on either side of the price point

        Returns:
            The created entry

        Raises:
            ValidationError: If values are empty or negative
            ConflictError: If the product type already exists
        """
        product_type = product_type.strip()
        if not product_type:
            raise ValidationError("Product type must not be empty")
        if price_point < 0:
            raise ValidationError("Price point must not be negative")
        if tolerance < 0:
            raise ValidationError("Tolerance must not be negative")

        entries = self.list_entries()
        if any(e.product_type == product_type for e in entries):
            raise ConflictError(catalog_entry_exists(product_type))

        entry = CatalogEntry(
            product_type=product_type,
            display_name=display_name.strip() or product_type,
            price_point=price_point,
            tolerance=tolerance,
        )
        entries.append(entry)
        self._save_entries(entries)
        return entry

    def remove_entry(self, product_type: str) -> None:
        """Remove a catalog entry.

        Raises:
            NotFoundError: If no entry has this product type
        """
        entries = self.list_entries()
        remaining = [e for e in entries if e.product_type != product_type]
        if len(remaining) == len(entries):
            raise NotFoundError(catalog_entry_not_found(product_type))
        self._save_entries(remaining)

    def _save_entries(self, entries: list[CatalogEntry]) -> None:
        self.db.set(CATALOG_KEY, [catalog_entry_to_record(e) for e in entries])

    def get_settings(self) -> dict[str, Decimal]:
        """Get classifier settings, falling back to defaults."""
        stored: dict[str, Any] = self.db.get(SETTINGS_KEY, {})
        return {
            "accessory_threshold": Decimal(
                stored.get("accessory_threshold", DEFAULT_ACCESSORY_THRESHOLD)
            ),
            "commission_rate": Decimal(stored.get("commission_rate", DEFAULT_COMMISSION_RATE)),
        }

    def set_accessory_threshold(self, threshold: Decimal) -> None:
        """Set the price below which unmatched orders count as accessories."""
        if threshold < 0:
            raise ValidationError("Accessory threshold must not be negative")
        self._update_setting("accessory_threshold", threshold)

    def set_commission_rate(self, rate: Decimal) -> None:
        """Set the commission rate used for orders ingested from now on."""
        if rate < 0 or rate > 1:
            raise ValidationError("Commission rate must be between 0 and 1")
        self._update_setting("commission_rate", rate)

    def _update_setting(self, name: str, value: Decimal) -> None:
        stored = self.db.get(SETTINGS_KEY, {})
        stored[name] = str(value)
        self.db.set(SETTINGS_KEY, stored)

    def get_config(self) -> ClassifierConfig:
        """Build the classifier configuration from stored catalog and settings."""
        settings = self.get_settings()
        return ClassifierConfig(
            catalog=tuple(self.list_entries()),
            accessory_threshold=settings["accessory_threshold"],
            commission_rate=settings["commission_rate"],
        )
