from __future__ import annotations

from datetime import datetime, tzinfo
from typing import List, Optional, Sequence

from ..aggregate import buckets_total, currencies, group_totals, results_total
from ..config import GROUP_BY_FIELDS
from ..models.costs import CostBucket, CostResult

_FIELD_LABELS = {name: name for name in GROUP_BY_FIELDS}
_VERBOSE_LABELS = {"project_id": "Project", "line_item": "Line Item"}


def format_timestamp(value: datetime, tz: Optional[tzinfo] = None) -> str:
    """``Nov 01, 2024 00:00``; local time unless ``tz`` is given."""
    return value.astimezone(tz).strftime("%b %d, %Y %H:%M")


def _format_money(value: float, currency: str) -> str:
    return f"${value:.4f} {currency}"


def _details(result: CostResult, fields: Sequence[str], labels: dict, show_null: bool) -> str:
    parts: List[str] = []
    for name in fields:
        value = getattr(result, name)
        if value is None and not show_null:
            continue
        parts.append(f"{labels[name]}: {value if value is not None else 'null'}")
    return f" ({', '.join(parts)})" if parts else ""


def _result_line(result: CostResult, detail: str) -> str:
    return f"    - ${result.amount.value:.4f}{detail}"


def _has_inherent_grouping(bucket: CostBucket) -> bool:
    return len(bucket.results) > 1 or any(
        r.line_item is not None or r.project_id is not None for r in bucket.results
    )


def _active_fields(group_by: Sequence[str]) -> List[str]:
    requested = [g.strip().lower() for g in group_by if g.strip()]
    return [f for f in GROUP_BY_FIELDS if f in requested]


def render_bucket(
    bucket: CostBucket,
    index: int,
    currency: str,
    group_by: Sequence[str] = (),
    verbose: bool = False,
    tz: Optional[tzinfo] = None,
) -> List[str]:
    lines = [
        f"Bucket {index}:",
        f"  Period: {format_timestamp(bucket.start_time, tz)} - {format_timestamp(bucket.end_time, tz)}",
        f"  Cost: {_format_money(results_total(bucket.results), currency)}",
    ]

    if group_by:
        active = _active_fields(group_by)
        lines.append("  Group Breakdown:")
        if not bucket.results:
            lines.append("    (No results in this bucket for the specified group(s))")
        for result in bucket.results:
            if active:
                detail = _details(result, active, _FIELD_LABELS, show_null=True)
            else:
                # Unrecognized group fields: show whatever the result carries.
                detail = _details(result, GROUP_BY_FIELDS, _FIELD_LABELS, show_null=False)
            lines.append(_result_line(result, detail))
    elif _has_inherent_grouping(bucket):
        lines.append("  Breakdown:")
        for result in bucket.results:
            lines.append(_result_line(result, _details(result, GROUP_BY_FIELDS, _FIELD_LABELS, show_null=False)))
    elif verbose and bucket.results:
        lines.append("  Results:")
        for result in bucket.results:
            lines.append(_result_line(result, _details(result, GROUP_BY_FIELDS, _VERBOSE_LABELS, show_null=False)))

    return lines


def render_group_totals(buckets: Sequence[CostBucket], group_by: Sequence[str], currency: str) -> List[str]:
    active = _active_fields(group_by)
    if not active:
        return []
    lines = ["Totals by group:"]
    for key, total in group_totals(buckets, active).items():
        label = ", ".join(f"{name}: {value if value is not None else 'null'}" for name, value in zip(active, key))
        lines.append(f"  - {label}: {_format_money(total, currency)}")
    return lines


def render_report(
    buckets: Sequence[CostBucket],
    *,
    group_by: Sequence[str] = (),
    verbose: bool = False,
    has_more: bool = False,
    next_page: Optional[str] = None,
    tz: Optional[tzinfo] = None,
) -> str:
    """Plain-text cost report for a bucket sequence."""
    lines: List[str] = ["OpenAI Cost Report", "==================", ""]

    if not buckets:
        lines.append("No cost data found for the specified time range.")
        return "\n".join(lines)

    seen = currencies(buckets)
    currency = seen[0].upper() if seen else "USD"

    lines.append(f"Total Cost: {_format_money(buckets_total(buckets), currency)}")
    lines.append(f"Time Buckets: {len(buckets)}")
    if len(seen) > 1:
        lines.append(
            "Warning: results use more than one currency ("
            + ", ".join(c.upper() for c in seen)
            + "); totals are summed without conversion."
        )
    lines.append("")

    for index, bucket in enumerate(buckets, start=1):
        lines.extend(render_bucket(bucket, index, currency, group_by=group_by, verbose=verbose, tz=tz))
        lines.append("")

    group_lines = render_group_totals(buckets, group_by, currency)
    if group_lines:
        lines.extend(group_lines)
        lines.append("")

    if has_more:
        lines.append("Note: More data available. Use --fetch-all to retrieve all pages.")
        if next_page:
            lines.append(f"Next page: {next_page}")

    return "\n".join(lines).rstrip()


__all__ = ["format_timestamp", "render_bucket", "render_group_totals", "render_report"]
