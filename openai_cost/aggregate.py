"""Cost totals over decoded results and buckets.

No currency conversion happens here. Callers that may see more than one
currency should check :func:`currencies` first.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .models.costs import CostBucket, CostResult

GroupKey = Tuple[Optional[str], ...]


def results_total(results: Iterable[CostResult]) -> float:
    return sum((r.amount.value for r in results), 0.0)


def buckets_total(buckets: Iterable[CostBucket]) -> float:
    return sum((results_total(b.results) for b in buckets), 0.0)


def currencies(buckets: Iterable[CostBucket]) -> List[str]:
    """Distinct currency codes in first-seen order."""
    seen: Dict[str, None] = {}
    for bucket in buckets:
        for result in bucket.results:
            seen.setdefault(result.amount.currency, None)
    return list(seen)


def group_totals(buckets: Iterable[CostBucket], fields: Sequence[str]) -> Dict[GroupKey, float]:
    """Sum results per group-key tuple, e.g. ``fields=("project_id",)``.

    Keys keep first-seen order; a missing dimension is ``None``.
    """
    totals: Dict[GroupKey, float] = {}
    for bucket in buckets:
        for result in bucket.results:
            key = tuple(getattr(result, f, None) for f in fields)
            totals[key] = totals.get(key, 0.0) + result.amount.value
    return totals


__all__ = ["results_total", "buckets_total", "currencies", "group_totals"]
