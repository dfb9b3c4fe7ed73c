"""At-most-one order per order ID."""

from dataclasses import dataclass
from typing import Iterable

from commtrack.domain.entities import ExtractedOrder


@dataclass(frozen=True)
class DeduplicationResult:
    """Kept candidates in input order, plus the ones discarded as duplicates."""

    kept: tuple[ExtractedOrder, ...]
    discarded: tuple[ExtractedOrder, ...]


def deduplicate(
    candidates: Iterable[ExtractedOrder],
    known_order_ids: Iterable[str] = (),
) -> DeduplicationResult:
    """Keep the first candidate for each order ID.

    Candidates whose order ID is in known_order_ids (orders already stored)
    are discarded as well, so a resent notification never overwrites an
    existing order. Messages are expected newest first, so the kept
    candidate is normally the most recent notification.
    """
    seen = set(known_order_ids)
    kept = []
    discarded = []
    for candidate in candidates:
        if candidate.order_id in seen:
            discarded.append(candidate)
            continue
        seen.add(candidate.order_id)
        kept.append(candidate)
    return DeduplicationResult(kept=tuple(kept), discarded=tuple(discarded))
