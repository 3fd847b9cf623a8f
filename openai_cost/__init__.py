"""Client and CLI for the OpenAI organization costs API."""

from .aggregate import buckets_total, currencies, group_totals, results_total
from .api.client import AsyncCostClient, CostClient
from .models import (
    Amount,
    CostBucket,
    CostQueryParameters,
    CostResponse,
    CostResult,
    ErrorKind,
    OpenAICostError,
)

__all__ = [
    "AsyncCostClient",
    "CostClient",
    "CostQueryParameters",
    "CostResponse",
    "CostBucket",
    "CostResult",
    "Amount",
    "ErrorKind",
    "OpenAICostError",
    "results_total",
    "buckets_total",
    "currencies",
    "group_totals",
]
