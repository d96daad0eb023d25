"""Invoice line-item aggregation.

Groups tracked time into one billing row per issue (plus one row for time
not tied to an issue) and derives hours and amounts from the hourly rate.
"""

import math
from typing import Iterable, Optional, Sequence

from timebill.domain.entities import (
    GENERAL_GROUP_KEY,
    MS_PER_HOUR,
    InvoiceLineItem,
    InvoiceTotals,
    TimeEntrySnapshot,
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves going up."""
    return math.floor(value + 0.5)


def duration_ms(entry: TimeEntrySnapshot) -> int:
    """Billable duration of an entry; running timers count as zero."""
    if entry.ended_at is None:
        return 0
    return max(0, entry.ended_at - entry.started_at)


def build_line_items(
    entries: Iterable[TimeEntrySnapshot], hourly_rate_cents: int
) -> list[InvoiceLineItem]:
    """Aggregate time entries into invoice line items.

    Entries are grouped by issue ID, or under ``"general"`` when they have
    none. A group's label comes from the first entry seen for it and is not
    updated by later entries.

    Args:
        entries: Time entry snapshots to bill
        hourly_rate_cents: Hourly rate applied to every line

    Returns:
        Line items ordered by total duration, longest first. Groups with the
        same duration keep the order in which they were first seen.
    """
    groups: dict[str, dict] = {}

    for entry in entries:
        issue_id = entry.issue_id or None
        key = issue_id if issue_id is not None else GENERAL_GROUP_KEY
        group = groups.get(key)
        if group is None:
            if issue_id is None:
                label = "General"
            else:
                label = entry.issue_title if entry.issue_title is not None else "Issue"
            groups[key] = {
                "issue_id": issue_id,
                "label": label,
                "total_duration_ms": duration_ms(entry),
            }
            continue

        group["total_duration_ms"] += duration_ms(entry)

    items = []
    for key, group in groups.items():
        hours = group["total_duration_ms"] / MS_PER_HOUR
        items.append(
            InvoiceLineItem(
                group_key=key,
                label=group["label"],
                target_issue_id=group["issue_id"],
                total_duration_ms=group["total_duration_ms"],
                hours=hours,
                hourly_rate_cents=hourly_rate_cents,
                amount_cents=round_half_up(hours * hourly_rate_cents),
            )
        )

    # sorted() is stable, so ties keep first-seen order
    return sorted(items, key=lambda item: -item.total_duration_ms)


def totals_from_line_items(items: Sequence[InvoiceLineItem]) -> InvoiceTotals:
    """Sum duration and amount over line items.

    The total amount is the sum of the already rounded item amounts.
    """
    total_duration_ms = sum(item.total_duration_ms for item in items)
    total_amount_cents = sum(item.amount_cents for item in items)
    return InvoiceTotals(
        total_duration_ms=total_duration_ms,
        total_hours=total_duration_ms / MS_PER_HOUR,
        total_amount_cents=total_amount_cents,
    )


def find_line_item(
    items: Sequence[InvoiceLineItem], issue_id: Optional[str]
) -> Optional[InvoiceLineItem]:
    """Return the line item billing the given issue (None for general time)."""
    key = issue_id if issue_id else GENERAL_GROUP_KEY
    for item in items:
        if item.group_key == key:
            return item
    return None
