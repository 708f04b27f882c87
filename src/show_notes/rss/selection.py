"""Validate RSS filter options and resolve them into the items to process.

Validation runs before any filtering and fails the whole run. Selection then
applies exactly one branch, in this precedence: ``item``, ``last_days``,
``date``, ``last``, and finally ``order``/``skip``.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional, Sequence

from ..exceptions import ValidationError
from ..models import RSSItem
from ..options import ProcessingOptions

logger = logging.getLogger(__name__)

VALID_ORDERS = ("newest", "oldest")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_ordering_options(options: ProcessingOptions) -> None:
    """Validate ``last``, ``skip`` and ``order``, shared by RSS and channel runs.

    Raises:
        ValidationError: On the first violated rule
    """
    if options.last is not None:
        if not _is_int(options.last) or options.last < 1:
            raise ValidationError("The --last option must be a positive integer.", "last")
        if options.skip is not None or options.order is not None:
            raise ValidationError(
                "The --last option cannot be used with --skip or --order.", "last"
            )

    if options.skip is not None and (not _is_int(options.skip) or options.skip < 0):
        raise ValidationError("The --skip option must be a non-negative integer.", "skip")

    if options.order is not None and options.order not in VALID_ORDERS:
        raise ValidationError("The --order option must be either 'newest' or 'oldest'.", "order")


def validate_rss_options(options: ProcessingOptions) -> None:
    """Validate every RSS filter flag before any item is selected.

    Raises:
        ValidationError: On the first violated rule
    """
    validate_ordering_options(options)

    if options.last_days is not None:
        if not _is_int(options.last_days) or options.last_days < 1:
            raise ValidationError("The --lastDays option must be a positive integer.", "last_days")
        if (
            options.last is not None
            or options.skip is not None
            or options.order is not None
            or options.date
        ):
            raise ValidationError(
                "The --lastDays option cannot be used with --last, --skip, --order, or --date.",
                "last_days",
            )

    if options.date:
        for value in options.date:
            if not DATE_PATTERN.match(value):
                raise ValidationError(
                    f'Invalid date format "{value}". Please use YYYY-MM-DD format.', "date"
                )
        if options.last is not None or options.skip is not None or options.order is not None:
            raise ValidationError(
                "The --date option cannot be used with --last, --skip, or --order.", "date"
            )


def _published_at(item: RSSItem) -> Optional[datetime]:
    try:
        return datetime.strptime(item.publish_date, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError:
        logger.debug("Item %r has unparseable publish date %r", item.title, item.publish_date)
        return None


def select_items(
    items: Sequence[RSSItem],
    options: ProcessingOptions,
    now: Optional[datetime] = None,
) -> List[RSSItem]:
    """Resolve validated filter options into the list of items to process.

    ``last`` takes the first N items in feed order; it does not sort by date.
    An empty result is not an error.

    Args:
        items: Normalized items in feed order
        options: Validated processing options
        now: Reference time for ``last_days`` (default: current UTC time)

    Returns:
        Selected items
    """
    if options.item:
        wanted = set(options.item)
        return [i for i in items if i.show_link in wanted]

    if options.last_days is not None:
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(days=options.last_days)
        selected = []
        for item in items:
            published = _published_at(item)
            if published is not None and published >= cutoff:
                selected.append(item)
        return selected

    if options.date:
        wanted_dates = set(options.date)
        return [i for i in items if i.publish_date in wanted_dates]

    if options.last is not None:
        return list(items[: options.last])

    ordered = list(items)
    if options.order == "oldest":
        ordered.reverse()
    return ordered[options.skip or 0 :]


def describe_selection(total: int, selected: int, options: ProcessingOptions) -> str:
    """Return a one-line summary of how many items a run will process."""
    if options.item:
        how = f"matching {len(options.item)} requested item URL(s)"
    elif options.last_days is not None:
        how = f"published in the last {options.last_days} day(s)"
    elif options.date:
        how = f"published on {', '.join(options.date)}"
    elif options.last is not None:
        how = f"the first {options.last} item(s)"
    else:
        how = f"order={options.order or 'newest'}, skip={options.skip or 0}"
    return f"Processing {selected} of {total} item(s) ({how})"
