from .classifier import classify_error
from .client import AsyncCostClient, CostClient
from .decode import decode_cost_response, decode_error_response, normalize_keys
from .transport import AsyncHttpTransport, HttpTransport, RawResponse

__all__ = [
    "classify_error",
    "CostClient",
    "AsyncCostClient",
    "decode_cost_response",
    "decode_error_response",
    "normalize_keys",
    "HttpTransport",
    "AsyncHttpTransport",
    "RawResponse",
]
