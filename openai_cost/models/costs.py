"""Typed view of the organization costs listing."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple


@dataclass(frozen=True)
class Amount:
    value: float
    currency: str


@dataclass(frozen=True)
class CostResult:
    """One cost line inside a bucket.

    ``line_item`` / ``project_id`` are only populated when the query grouped by
    that dimension.
    """

    object: str
    amount: Amount
    line_item: Optional[str] = None
    project_id: Optional[str] = None


@dataclass(frozen=True)
class CostBucket:
    object: str
    start_time: datetime
    end_time: datetime
    results: Tuple[CostResult, ...]


@dataclass(frozen=True)
class CostResponse:
    """One page of the listing."""

    object: str
    data: Tuple[CostBucket, ...]
    has_more: bool
    next_page: Optional[str] = None


@dataclass(frozen=True)
class ErrorDetail:
    message: str
    type: str
    code: Optional[str] = None
    param: Optional[str] = None


@dataclass(frozen=True)
class ErrorResponse:
    error: ErrorDetail


__all__ = [
    "Amount",
    "CostResult",
    "CostBucket",
    "CostResponse",
    "ErrorDetail",
    "ErrorResponse",
]
