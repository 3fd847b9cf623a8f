from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..models.costs import CostBucket


def _wire_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return int(value.timestamp())
    if isinstance(value, dict):
        return {k: _wire_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_wire_value(v) for v in value]
    return value


def page_document(
    buckets: Sequence[CostBucket],
    has_more: bool = False,
    next_page: Optional[str] = None,
) -> Dict[str, Any]:
    """Rebuild a page-shaped document in wire format (snake_case keys, epoch seconds)."""
    return {
        "object": "page",
        "data": [_wire_value(asdict(b)) for b in buckets],
        "has_more": has_more,
        "next_page": next_page,
    }


def render_json(
    buckets: Sequence[CostBucket],
    has_more: bool = False,
    next_page: Optional[str] = None,
) -> str:
    return json.dumps(page_document(buckets, has_more, next_page), indent=2, ensure_ascii=False)
