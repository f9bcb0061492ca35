"""Dialogue transcript and publish metadata writers."""

import re
from typing import Iterable, List, Sequence

from ..models import ContentUnit, TimeAllocation

DEFAULT_HOOK = "{title}"
DEFAULT_CTA = "Follow for a new tip every day!"


def format_clock(seconds: float) -> str:
    """Format seconds as ``MM:SS``, truncated to whole seconds."""
    whole = int(seconds)
    minutes, secs = divmod(whole, 60)
    return f"{minutes:02d}:{secs:02d}"


def build_dialogue(sentences: Sequence[str], allocation: TimeAllocation) -> str:
    """Build the human-readable dialogue transcript.

    Uses the same caption partition as the subtitle track, at whole-second
    granularity.
    """
    if len(sentences) != allocation.sentence_count:
        raise ValueError(
            f"Got {len(sentences)} sentences for {allocation.sentence_count} caption segments"
        )

    blocks = []
    for segment in allocation.caption_segments:
        blocks.append(
            f"{format_clock(segment.start)} - {format_clock(segment.end)}\n"
            f"{sentences[segment.sentence_index].strip()}\n\n"
        )
    return "".join(blocks)


def hashtag(keyword: str) -> str:
    """Turn a keyword into a hashtag, joining words with underscores."""
    return "#" + re.sub(r"\s+", "_", keyword.strip().lstrip("#"))


def hashtags(keywords: Iterable[str], extra_tags: Iterable[str] = ()) -> List[str]:
    """Hashtags for the keywords followed by the extra tags, without duplicates."""
    tags: List[str] = []
    for word in list(keywords) + list(extra_tags):
        if not word.strip():
            continue
        tag = hashtag(word)
        if tag not in tags:
            tags.append(tag)
    return tags


def build_metadata(
    content: ContentUnit,
    hook: str = DEFAULT_HOOK,
    call_to_action: str = DEFAULT_CTA,
    extra_tags: Iterable[str] = (),
) -> str:
    """Build the publish metadata block: hook, caption, CTA and hashtags.

    Args:
        content: Content unit of the run.
        hook: Hook line template; ``{title}`` is replaced by the title.
        call_to_action: Call-to-action line.
        extra_tags: Hashtags added after the keyword hashtags.
    """
    return (
        f"Hook: {hook.format(title=content.title)}\n"
        f"Caption: {content.script.strip()}\n"
        f"CTA: {call_to_action}\n"
        f"Hashtags: {' '.join(hashtags(content.keywords, extra_tags))}\n"
    )


def build_description(content: ContentUnit, extra_tags: Iterable[str] = ()) -> str:
    """Upload description: the script followed by the hashtags."""
    return f"{content.script.strip()}\n\n{' '.join(hashtags(content.keywords, extra_tags))}"
