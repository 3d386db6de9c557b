"""Built-in sample images an event can display."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ImageSample:
    id: str
    label: str
    asset_name: str


SAMPLES: tuple[ImageSample, ...] = (
    ImageSample(id="birthday", label="誕生日", asset_name="happy_birthday"),
    ImageSample(id="anniversary", label="記念日", asset_name="anniversary"),
    ImageSample(id="sunset", label="夕焼け", asset_name="image_sample"),
)

DEFAULT_SAMPLE = SAMPLES[0]


def find_sample(image_id: str) -> ImageSample:
    """Return the sample with *image_id*, or the default sample if unknown."""
    for sample in SAMPLES:
        if sample.id == image_id:
            return sample
    return DEFAULT_SAMPLE


def is_known_sample(image_id: str) -> bool:
    return any(sample.id == image_id for sample in SAMPLES)
