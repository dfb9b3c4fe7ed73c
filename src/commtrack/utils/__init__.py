"""Utility functions for commtrack."""

from commtrack.utils.date_parser import parse_date, parse_timestamp, get_date_range
from commtrack.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_timestamp", "get_date_range", "parse_amount"]
