"""JSONL record of every page a client fetched.

One line per page, appended as soon as the page has decoded:

    {"at": "2024-11-01T00:00:03+00:00", "page": 2, "cursor": "c2",
     "buckets": 7, "has_more": true, "next_page": "c3"}

Request metadata only. Cost values and the admin key never reach the file.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


class PageTrace:
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def record(
        self,
        page: int,
        cursor: Optional[str],
        buckets: int,
        has_more: bool,
        next_page: Optional[str],
    ) -> None:
        line = json.dumps(
            {
                "at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
                "page": page,
                "cursor": cursor,
                "buckets": buckets,
                "has_more": has_more,
                "next_page": next_page,
            }
        )
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(line + "\n")

    def __repr__(self) -> str:
        return f"PageTrace({str(self.path)!r})"


__all__ = ["PageTrace"]
