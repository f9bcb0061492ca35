"""Time allocation for image and caption segments."""

from typing import List

from ..models import CaptionSegment, ImageSegment, TimeAllocation


def allocate(
    sentence_count: int,
    image_count: int,
    total_duration: float,
    hook_duration: float,
) -> TimeAllocation:
    """Partition the video duration between images and between sentences.

    With more than one image, the first (hook) image is held for
    ``hook_duration`` and the remaining images share the rest equally. A
    single image spans the whole video. Captions split the total evenly
    with no hook special case.

    Args:
        sentence_count: Number of script sentences (>= 1).
        image_count: Number of images (>= 1).
        total_duration: Video duration in seconds (> 0).
        hook_duration: Duration of the first image, 0 <= hook < total.

    Returns:
        TimeAllocation whose two partitions both cover [0, total_duration).

    Raises:
        ValueError: If any precondition is violated.
    """
    if sentence_count < 1:
        raise ValueError(f"sentence_count must be >= 1, got {sentence_count}")
    if image_count < 1:
        raise ValueError(f"image_count must be >= 1, got {image_count}")
    if total_duration <= 0:
        raise ValueError(f"total_duration must be > 0, got {total_duration}")
    if not 0 <= hook_duration < total_duration:
        raise ValueError(
            f"hook_duration must be in [0, {total_duration}), got {hook_duration}"
        )

    return TimeAllocation(
        total_duration=total_duration,
        hook_duration=hook_duration,
        image_segments=tuple(_image_segments(image_count, total_duration, hook_duration)),
        caption_segments=tuple(_caption_segments(sentence_count, total_duration)),
    )


def _image_segments(count: int, total: float, hook: float) -> List[ImageSegment]:
    if count == 1:
        return [ImageSegment(index=0, start=0.0, duration=total)]

    segments = [ImageSegment(index=0, start=0.0, duration=hook)]
    share = (total - hook) / (count - 1)
    start = hook
    for index in range(1, count):
        # Last segment absorbs the rounding so the partition ends exactly at total
        end = total if index == count - 1 else hook + share * index
        segments.append(ImageSegment(index=index, start=start, duration=end - start))
        start = end
    return segments


def _caption_segments(count: int, total: float) -> List[CaptionSegment]:
    share = total / count
    segments = []
    start = 0.0
    for index in range(count):
        end = total if index == count - 1 else share * (index + 1)
        segments.append(CaptionSegment(sentence_index=index, start=start, end=end))
        start = end
    return segments
