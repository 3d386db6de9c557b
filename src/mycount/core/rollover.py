"""Rollover engine — annual advancement of overdue countdowns."""

from __future__ import annotations

import dataclasses
import logging
from datetime import datetime, timedelta
from typing import Sequence

from dateutil.relativedelta import relativedelta

from mycount.core.event import CountdownEvent, CountMode

logger = logging.getLogger(__name__)

FALLBACK_YEAR = timedelta(seconds=31_536_000)


def add_years(value: datetime, years: int = 1) -> datetime:
    """Add calendar years to *value*, clamping Feb 29 to Feb 28.

    Raises ``ValueError`` or ``OverflowError`` when the result falls outside
    the representable calendar.
    """
    return value + relativedelta(years=years)


def next_occurrence(target: datetime, now: datetime) -> datetime:
    """Advance *target* a year at a time until it is strictly after *now*.

    At the end of the calendar the result is clamped to ``datetime.max``.
    """
    while target <= now:
        try:
            target = add_years(target)
        except (ValueError, OverflowError):
            logger.debug("Year addition failed for %s; using fixed interval", target)
            try:
                target = target + FALLBACK_YEAR
            except OverflowError:
                return datetime.max.replace(tzinfo=target.tzinfo)
    return target


def sort_newest_first(events: Sequence[CountdownEvent]) -> list[CountdownEvent]:
    """Return *events* sorted by ``created_at`` descending (stable)."""
    return sorted(events, key=lambda event: event.created_at, reverse=True)


def roll_over_expired(
    events: Sequence[CountdownEvent], now: datetime
) -> tuple[list[CountdownEvent], bool]:
    """Move every overdue countdown target past *now*.

    Returns ``(events, changed)``.  Changed events are new objects with
    ``updated_at`` set to *now*; the input is not modified.  When anything
    changed the result is re-sorted newest first, otherwise it keeps the
    input order.  Calling this again with the same *now* changes nothing.
    """
    result: list[CountdownEvent] = []
    changed = False

    for event in events:
        if event.mode is not CountMode.COUNTDOWN or event.target_date > now:
            result.append(event)
            continue

        target = next_occurrence(event.target_date, now)
        logger.info("Rolled over %s from %s to %s", event.id, event.target_date, target)
        result.append(dataclasses.replace(event, target_date=target, updated_at=now))
        changed = True

    if changed:
        result = sort_newest_first(result)
    return result, changed
