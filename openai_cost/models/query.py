# openai_cost/models/query.py
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from .errors import OpenAICostError


QueryItem = Tuple[str, str]


def _epoch_seconds(value: datetime) -> str:
    return str(int(value.timestamp()))


@dataclass(frozen=True)
class CostQueryParameters:
    """Immutable description of one costs query.

    ``start_time`` and ``end_time`` must be timezone-aware; a naive value
    raises ``INVALID_REQUEST_CONSTRUCTION`` rather than being read as local time.

    ``page`` is an opaque cursor. It is only ever set from a value the server
    returned in ``next_page``; use :meth:`with_page` to derive the query for
    the following page.
    """

    start_time: datetime
    bucket_width: Optional[str] = None
    end_time: Optional[datetime] = None
    group_by: Tuple[str, ...] = ()
    limit: Optional[int] = None
    page: Optional[str] = None
    project_ids: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for name in ("start_time", "end_time"):
            value = getattr(self, name)
            if value is not None and value.utcoffset() is None:
                raise OpenAICostError.invalid_request_construction(
                    f"{name} must be timezone-aware (got naive {value.isoformat()})"
                )
        # Accept any sequence from callers but store tuples so the value stays hashable.
        object.__setattr__(self, "group_by", tuple(self.group_by or ()))
        object.__setattr__(self, "project_ids", tuple(self.project_ids or ()))

    def with_page(self, page: Optional[str]) -> "CostQueryParameters":
        return replace(self, page=page)

    def query_items(self) -> List[QueryItem]:
        """Serialize into ordered ``(key, value)`` pairs for the query string."""
        items: List[QueryItem] = [("start_time", _epoch_seconds(self.start_time))]

        if self.bucket_width is not None:
            items.append(("bucket_width", self.bucket_width))

        if self.end_time is not None:
            items.append(("end_time", _epoch_seconds(self.end_time)))

        for group in self.group_by:
            items.append(("group_by[]", group))

        if self.limit is not None:
            items.append(("limit", str(self.limit)))

        if self.page is not None:
            items.append(("page", self.page))

        for project_id in self.project_ids:
            items.append(("project_ids[]", project_id))

        return items


def split_csv(value: Optional[str]) -> Sequence[str]:
    """``"a, b,,c"`` -> ``("a", "b", "c")``; ``None`` -> ``()``."""
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


__all__ = ["CostQueryParameters", "QueryItem", "split_csv"]
