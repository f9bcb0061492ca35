"""SRT subtitle track builder."""

import logging
from pathlib import Path
from typing import Optional, Sequence

from ..models import TimeAllocation

logger = logging.getLogger(__name__)


def format_srt_time(seconds: float) -> str:
    """Format seconds as an SRT timestamp (``HH:MM:SS,mmm``).

    The value is rounded to whole milliseconds before being split, so
    ``3661.234`` formats as ``01:01:01,234`` despite float error.
    """
    total_ms = int(round(seconds * 1000))
    hours, remainder = divmod(total_ms, 3_600_000)
    minutes, remainder = divmod(remainder, 60_000)
    secs, ms = divmod(remainder, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d},{ms:03d}"


def build_captions(sentences: Sequence[str], allocation: TimeAllocation) -> str:
    """Build an SRT document with one record per sentence.

    Args:
        sentences: Script sentences, in order.
        allocation: Time allocation whose caption segments match the sentences.

    Returns:
        SRT document text.

    Raises:
        ValueError: If the sentence and caption segment counts differ.
    """
    if len(sentences) != allocation.sentence_count:
        raise ValueError(
            f"Got {len(sentences)} sentences for {allocation.sentence_count} caption segments"
        )

    records = []
    for number, segment in enumerate(allocation.caption_segments, start=1):
        records.append(
            f"{number}\n"
            f"{format_srt_time(segment.start)} --> {format_srt_time(segment.end)}\n"
            f"{sentences[segment.sentence_index].strip()}\n\n"
        )
    return "".join(records)


def write_captions(
    output_path: Path,
    sentences: Sequence[str],
    allocation: TimeAllocation,
    log: Optional[logging.Logger] = None,
) -> Path:
    """Write the SRT document to ``output_path``."""
    log = log or logger
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(build_captions(sentences, allocation), encoding="utf-8")
    log.info(f"Wrote {allocation.sentence_count} subtitle records to {output_path}")
    return output_path
