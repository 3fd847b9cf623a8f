from .costs import Amount, CostBucket, CostResponse, CostResult, ErrorDetail, ErrorResponse
from .errors import ErrorKind, OpenAICostError
from .query import CostQueryParameters, split_csv

__all__ = [
    "Amount",
    "CostBucket",
    "CostResponse",
    "CostResult",
    "ErrorDetail",
    "ErrorResponse",
    "ErrorKind",
    "OpenAICostError",
    "CostQueryParameters",
    "split_csv",
]
