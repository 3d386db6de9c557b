"""Time formatter — pure display computations for countdown events.

Every function here takes ``now`` explicitly and reads nothing else, so the
same inputs always give the same text.  Durations are clamped at zero and
truncated to whole seconds; nothing is rounded.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta

from mycount.core.event import CountdownEvent

SECONDS_PER_DAY = 86_400
SECONDS_PER_HOUR = 3_600

HEADER_COUNTUP = "since"
HEADER_COUNTDOWN = "remaining"
ENDED_MARKER = "終了"
DAY_SUFFIX = "日"

_WEEKDAYS_JA = ("月", "火", "水", "木", "金", "土", "日")


@dataclass(frozen=True)
class Summary:
    """Compact display for list contexts."""

    header_label: str
    display_value: str
    shows_day_unit: bool
    critical: bool
    expired: bool


@dataclass(frozen=True)
class Detail:
    """Display for a single-event view."""

    date_text: str
    time_text: str
    date_tab: str
    time_tab: str
    until_midnight: str
    expired: bool


def summarize(event: CountdownEvent, now: datetime) -> Summary:
    """Summarise *event* as seen at *now*."""
    diff = _seconds_until(event, now)
    expired = _is_expired(event, diff)
    critical = _is_critical(event, diff)

    if event.is_countup:
        value = str(_whole_days(_seconds_since(event, now)))
    elif expired:
        value = "0"
    elif critical:
        value = format_ms(diff) if diff < SECONDS_PER_HOUR else format_hms(diff)
    else:
        value = str(_whole_days(diff))

    return Summary(
        header_label=HEADER_COUNTUP if event.is_countup else HEADER_COUNTDOWN,
        display_value=value,
        shows_day_unit=not critical,
        critical=critical,
        expired=expired,
    )


def detail(event: CountdownEvent, now: datetime) -> Detail:
    """Build the date tab, time tab and midnight countdown for *event*."""
    diff = _seconds_until(event, now)
    expired = _is_expired(event, diff)
    critical = _is_critical(event, diff)

    if event.is_countup:
        elapsed = _seconds_since(event, now)
        date_tab = f"{_whole_days(elapsed)}{DAY_SUFFIX}"
        time_tab = format_total_hours(elapsed)
    elif expired:
        date_tab = ENDED_MARKER
        time_tab = format_total_hours(0)
    else:
        date_tab = format_hms(diff) if critical else f"{_whole_days(diff)}{DAY_SUFFIX}"
        time_tab = format_total_hours(diff)

    return Detail(
        date_text=date_text(event.target_date),
        time_text=time_text(event.target_date),
        date_tab=date_tab,
        time_tab=time_tab,
        until_midnight=time_until_midnight(now),
        expired=expired,
    )


def time_until_midnight(now: datetime) -> str:
    """Return ``HH:MM:SS`` until the start of the next local day."""
    next_day = datetime.combine(now.date() + timedelta(days=1), time.min, tzinfo=now.tzinfo)
    return format_hms((next_day - now).total_seconds())


# -- duration text -----------------------------------------------------------


def _split(seconds: float) -> tuple[int, int, int]:
    total = max(0, int(seconds))
    return total // SECONDS_PER_HOUR, (total % SECONDS_PER_HOUR) // 60, total % 60


def format_hms(seconds: float) -> str:
    """Format *seconds* as ``HH:MM:SS``."""
    hours, minutes, secs = _split(seconds)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_ms(seconds: float) -> str:
    """Format *seconds* as ``MM:SS``; hours fold into the minutes."""
    total = max(0, int(seconds))
    return f"{total // 60:02d}:{total % 60:02d}"


def format_total_hours(seconds: float) -> str:
    """Format *seconds* as ``H:MM:SS`` with unpadded, unbounded hours."""
    hours, minutes, secs = _split(seconds)
    return f"{hours}:{minutes:02d}:{secs:02d}"


# -- date text ---------------------------------------------------------------


def date_text(value: datetime) -> str:
    return value.strftime("%Y/%m/%d")


def time_text(value: datetime) -> str:
    return value.strftime("%H:%M")


def date_with_day_text(value: datetime) -> str:
    """Render e.g. ``2025年1月1日 (水)``."""
    return f"{value.year}年{value.month}月{value.day}日 ({_WEEKDAYS_JA[value.weekday()]})"


# -- private helpers ---------------------------------------------------------


def _seconds_until(event: CountdownEvent, now: datetime) -> float:
    return (event.target_date - now).total_seconds()


def _seconds_since(event: CountdownEvent, now: datetime) -> float:
    return max(0.0, (now - event.target_date).total_seconds())


def _is_expired(event: CountdownEvent, diff: float) -> bool:
    return not event.is_countup and diff <= 0


def _is_critical(event: CountdownEvent, diff: float) -> bool:
    return not event.is_countup and 0 < diff < SECONDS_PER_DAY


def _whole_days(seconds: float) -> int:
    return int(max(0.0, seconds) // SECONDS_PER_DAY)
