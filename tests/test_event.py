"""Tests for the event model, sample images, validation and the ticker."""

import uuid
from datetime import datetime

import pytest

from mycount.core.clock import Ticker
from mycount.core.event import CountdownEvent, CountMode
from mycount.core.images import DEFAULT_SAMPLE, find_sample
from mycount.core.validation import (
    InvalidEventError,
    check_image_id,
    normalize_target,
    normalize_title,
)


class TestRecordCodec:
    def test_record_fields(self) -> None:
        event = CountdownEvent(
            id=uuid.UUID("12345678-1234-5678-1234-567812345678"),
            title="誕生日",
            target_date=datetime(2025, 12, 24, 18, 30),
            created_at=datetime(2025, 1, 1, 9, 0),
            updated_at=datetime(2025, 1, 2, 9, 0),
            image_id="birthday",
            mode=CountMode.COUNTUP,
            custom_image_data=b"abc",
        )
        assert event.to_record() == {
            "id": "12345678-1234-5678-1234-567812345678",
            "title": "誕生日",
            "target_date": "2025-12-24T18:30:00",
            "created_at": "2025-01-01T09:00:00",
            "updated_at": "2025-01-02T09:00:00",
            "image_id": "birthday",
            "custom_image_data": "YWJj",
            "count_mode": "countup",
        }
        assert CountdownEvent.from_record(event.to_record()) == event

    def test_missing_mode_defaults_to_countdown(self) -> None:
        record = {
            "id": str(uuid.uuid4()),
            "title": "Old record",
            "target_date": "2025-01-01T00:00:00",
            "created_at": "2024-01-01T00:00:00",
            "updated_at": "2024-01-01T00:00:00",
        }
        event = CountdownEvent.from_record(record)
        assert event.mode is CountMode.COUNTDOWN
        assert event.custom_image_data is None

    @pytest.mark.parametrize("record", [1, "x", None, ["id"]])
    def test_non_object_record_raises_type_error(self, record: object) -> None:
        with pytest.raises(TypeError):
            CountdownEvent.from_record(record)  # type: ignore[arg-type]

    def test_unknown_mode_raises(self) -> None:
        record = {
            "id": str(uuid.uuid4()),
            "title": "x",
            "target_date": "2025-01-01T00:00:00",
            "created_at": "2024-01-01T00:00:00",
            "updated_at": "2024-01-01T00:00:00",
            "count_mode": "sideways",
        }
        with pytest.raises(ValueError):
            CountdownEvent.from_record(record)

    def test_mode_titles(self) -> None:
        assert CountMode.COUNTDOWN.title == "カウントダウン"
        assert CountMode.COUNTUP.title == "カウントアップ"


class TestImages:
    def test_find_known_sample(self) -> None:
        assert find_sample("sunset").asset_name == "image_sample"

    def test_unknown_sample_falls_back_to_default(self) -> None:
        assert find_sample("nope") is DEFAULT_SAMPLE
        assert DEFAULT_SAMPLE.id == "birthday"


class TestValidation:
    def test_title_is_trimmed(self) -> None:
        assert normalize_title("  Trip \n") == "Trip"

    @pytest.mark.parametrize("title", ["", "   ", "\n\t"])
    def test_blank_title_rejected(self, title: str) -> None:
        with pytest.raises(InvalidEventError, match="Title is required"):
            normalize_title(title)

    def test_target_truncated_to_minute(self) -> None:
        assert normalize_target(datetime(2025, 1, 1, 10, 30, 59, 123)) == datetime(2025, 1, 1, 10, 30)

    def test_unknown_image_rejected(self) -> None:
        assert check_image_id("anniversary") == "anniversary"
        with pytest.raises(InvalidEventError):
            check_image_id("cat")


class TestTicker:
    def test_ticks_count_times_and_sleeps_between(self) -> None:
        instants = iter([datetime(2025, 1, 1, 0, 0, s) for s in range(3)])
        sleeps: list[float] = []
        ticker = Ticker(interval=1.5, count=3, clock=lambda: next(instants), sleep=sleeps.append)
        assert [t.second for t in ticker] == [0, 1, 2]
        assert sleeps == [1.5, 1.5]

    def test_rejects_non_positive_interval(self) -> None:
        with pytest.raises(ValueError):
            Ticker(interval=0)
