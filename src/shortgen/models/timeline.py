"""Timeline data model shared by the video, subtitle and dialogue tracks."""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ImageSegment:
    """Slice of the video during which one image is on screen."""

    index: int
    start: float
    duration: float

    @property
    def end(self) -> float:
        return self.start + self.duration


@dataclass(frozen=True)
class CaptionSegment:
    """Slice of the video assigned to one sentence's subtitle."""

    sentence_index: int
    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class TimeAllocation:
    """Image and caption partitions of the same total duration.

    Both partitions start at 0, are contiguous, and end exactly at
    ``total_duration``. They are independent of each other apart from
    sharing the total.
    """

    total_duration: float
    hook_duration: float
    image_segments: Tuple[ImageSegment, ...]
    caption_segments: Tuple[CaptionSegment, ...]

    @property
    def image_count(self) -> int:
        return len(self.image_segments)

    @property
    def sentence_count(self) -> int:
        return len(self.caption_segments)
