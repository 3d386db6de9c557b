"""Event store — owns the event collection and its JSON persistence."""

from __future__ import annotations

import dataclasses
import fcntl
import json
import logging
import os
import tempfile
import uuid
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable

from mycount.core import clock as _clock
from mycount.core.event import CountdownEvent, CountMode
from mycount.core.images import DEFAULT_SAMPLE
from mycount.core.rollover import roll_over_expired, sort_newest_first

logger = logging.getLogger(__name__)

_DEFAULT_DATA_DIR = Path.home() / ".config" / "mycount"
_STATE_FILE = "events.json"
_LOCK_FILE = ".events.lock"

Subscriber = Callable[[list[CountdownEvent]], None]


class EventStore:
    """Owns the event collection and writes it to disk after every mutation.

    The collection lives in memory and is always sorted newest first by
    ``created_at``.  It is persisted to ``<data_dir>/events.json``.  Storage
    failures are logged and otherwise ignored: a failed load looks like an
    empty store and a failed save leaves the in-memory state as it is.
    """

    def __init__(self, data_dir: Path | None = None, clock: _clock.Clock | None = None) -> None:
        self._data_dir: Path = data_dir if data_dir is not None else _DEFAULT_DATA_DIR
        self._clock = clock
        self._events: list[CountdownEvent] = []
        self._subscribers: list[Subscriber] = []
        self._load()

    # -- queries -------------------------------------------------------------

    @property
    def path(self) -> Path:
        return self._data_dir / _STATE_FILE

    @property
    def events(self) -> list[CountdownEvent]:
        """Snapshot of the collection, newest first."""
        return list(self._events)

    def get(self, event_id: uuid.UUID) -> CountdownEvent | None:
        return next((event for event in self._events if event.id == event_id), None)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Call *callback* with a fresh snapshot after every mutation.

        Returns a function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    # -- mutations -----------------------------------------------------------

    def create(
        self,
        title: str,
        target_date: datetime,
        mode: CountMode,
        image_id: str = DEFAULT_SAMPLE.id,
        custom_image_data: bytes | None = None,
    ) -> CountdownEvent:
        """Add a new event and return it."""
        now = self._now()
        event = CountdownEvent(
            id=uuid.uuid4(),
            title=title,
            target_date=target_date,
            created_at=now,
            updated_at=now,
            image_id=image_id,
            mode=mode,
            custom_image_data=custom_image_data,
        )
        self._events.append(event)
        logger.debug("Created event %s", event.id)
        self._commit()
        return event

    def update(
        self,
        event_id: uuid.UUID,
        title: str,
        target_date: datetime,
        mode: CountMode,
        image_id: str,
        custom_image_data: bytes | None = None,
    ) -> CountdownEvent | None:
        """Replace the editable fields of an event.  No-op if *event_id* is absent."""
        current = self.get(event_id)
        if current is None:
            return None
        event = dataclasses.replace(
            current,
            title=title,
            target_date=target_date,
            mode=mode,
            image_id=image_id,
            custom_image_data=custom_image_data,
            updated_at=self._now(),
        )
        self._events = [event if item.id == event_id else item for item in self._events]
        logger.debug("Updated event %s", event.id)
        self._commit()
        return event

    def delete(self, ids: Iterable[uuid.UUID]) -> None:
        """Remove every event whose id is in *ids*."""
        doomed = set(ids)
        if not doomed:
            return
        self._events = [event for event in self._events if event.id not in doomed]
        logger.debug("Deleted %d id(s)", len(doomed))
        self._commit()

    def delete_at(self, indices: Iterable[int]) -> None:
        """Remove events by list position; out-of-range positions are ignored."""
        for index in sorted(set(indices), reverse=True):
            if 0 <= index < len(self._events):
                del self._events[index]
        self._commit()

    def rollover_pass(self, now: datetime | None = None) -> bool:
        """Roll overdue countdowns forward a year at a time.

        Persists only when something moved.  Returns whether anything did.
        """
        reference = now if now is not None else self._now()
        self._events, changed = roll_over_expired(self._events, reference)
        if changed:
            self._commit()
        return changed

    # -- private helpers -----------------------------------------------------

    def _now(self) -> datetime:
        return self._clock() if self._clock is not None else _clock.now()

    def _commit(self) -> None:
        """Re-sort, persist, and notify subscribers."""
        self._events = sort_newest_first(self._events)
        self._save()
        snapshot = self.events
        for callback in list(self._subscribers):
            callback(snapshot)

    # -- persistence ---------------------------------------------------------

    def _save(self) -> None:
        """Atomically replace the JSON file with the current collection."""
        records = [event.to_record() for event in self._events]
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            with open(self._data_dir / _LOCK_FILE, "w") as lock:
                fcntl.flock(lock, fcntl.LOCK_EX)
                fd, tmp_name = tempfile.mkstemp(
                    dir=self._data_dir, prefix=".events-", suffix=".tmp"
                )
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as f:
                        json.dump(records, f, ensure_ascii=False)
                        f.flush()
                        os.fsync(f.fileno())
                    os.replace(tmp_name, self.path)
                except BaseException:
                    Path(tmp_name).unlink(missing_ok=True)
                    raise
        except OSError as exc:
            logger.warning("Could not save events to %s: %s", self.path, exc)

    def _load(self) -> None:
        """Load the collection from disk; anything unreadable means empty."""
        path = self.path
        if not path.exists():
            self._events = []
            return

        try:
            with open(path, encoding="utf-8") as f:
                fcntl.flock(f, fcntl.LOCK_SH)
                data = json.load(f)
            if not isinstance(data, list):
                raise TypeError(f"expected a list of events, got {type(data).__name__}")
            events = [CountdownEvent.from_record(record) for record in data]
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.warning("Could not load events from %s: %s", path, exc)
            self._events = []
            return

        self._events = sort_newest_first(events)
        logger.debug("Loaded %d event(s) from %s", len(self._events), path)
