"""Edit-boundary validation for event input.

Nothing in the formatter, rollover engine or store validates; callers run
their input through here first.
"""

from __future__ import annotations

from datetime import datetime

from mycount.core.images import is_known_sample


class InvalidEventError(ValueError):
    """Raised when event input is rejected at the edit boundary."""


def normalize_title(title: str) -> str:
    """Strip surrounding whitespace and reject an empty title."""
    trimmed = title.strip()
    if not trimmed:
        raise InvalidEventError("Title is required")
    return trimmed


def normalize_target(target: datetime) -> datetime:
    """Truncate *target* to the minute."""
    return target.replace(second=0, microsecond=0)


def check_image_id(image_id: str) -> str:
    if not is_known_sample(image_id):
        raise InvalidEventError(f"Unknown image: {image_id}")
    return image_id
