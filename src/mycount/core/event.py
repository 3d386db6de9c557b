"""Event model — the countdown/count-up record and its JSON record codec."""

from __future__ import annotations

import base64
import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class CountMode(Enum):
    """Direction an event counts in."""

    COUNTDOWN = "countdown"
    COUNTUP = "countup"

    @property
    def title(self) -> str:
        """Display title of the mode."""
        return _MODE_TITLES[self]


_MODE_TITLES = {
    CountMode.COUNTDOWN: "カウントダウン",
    CountMode.COUNTUP: "カウントアップ",
}


@dataclass
class CountdownEvent:
    """A named target instant, counted down to or up from.

    ``target_date``, ``created_at`` and ``updated_at`` are naive datetimes in
    the local calendar.  ``custom_image_data`` is an opaque payload owned by
    the event; nothing in the core inspects it.
    """

    id: uuid.UUID
    title: str
    target_date: datetime
    created_at: datetime
    updated_at: datetime
    image_id: str
    mode: CountMode = CountMode.COUNTDOWN
    custom_image_data: bytes | None = None

    @property
    def is_countup(self) -> bool:
        return self.mode is CountMode.COUNTUP

    # -- record codec --------------------------------------------------------

    def to_record(self) -> dict[str, Any]:
        """Return a JSON-serialisable dict for this event."""
        image = self.custom_image_data
        return {
            "id": str(self.id),
            "title": self.title,
            "target_date": self.target_date.isoformat(),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "image_id": self.image_id,
            "custom_image_data": base64.b64encode(image).decode("ascii") if image else None,
            "count_mode": self.mode.value,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> CountdownEvent:
        """Build an event from a dict produced by :meth:`to_record`.

        Raises ``KeyError``, ``TypeError`` or ``ValueError`` on a malformed
        record.
        """
        if not isinstance(record, dict):
            raise TypeError(f"event record must be an object, got {type(record).__name__}")
        raw_image = record.get("custom_image_data")
        return cls(
            id=uuid.UUID(record["id"]),
            title=str(record["title"]),
            target_date=datetime.fromisoformat(record["target_date"]),
            created_at=datetime.fromisoformat(record["created_at"]),
            updated_at=datetime.fromisoformat(record["updated_at"]),
            image_id=str(record.get("image_id", "")),
            mode=CountMode(record.get("count_mode", CountMode.COUNTDOWN.value)),
            custom_image_data=base64.b64decode(raw_image) if raw_image else None,
        )
