"""Timeline, subtitle, transcript, video and thumbnail assembly."""

from .timeline import allocate
from .captions import format_srt_time, build_captions, write_captions
from .transcript import (
    format_clock,
    build_dialogue,
    build_metadata,
    build_description,
    hashtags,
)
from .compositor import (
    build_concat_manifest,
    build_filter_chain,
    build_command,
    composite,
    probe_duration,
)
from .thumbnail import (
    ThumbnailStyle,
    wrap_title,
    layout_lines,
    build_svg,
    render_thumbnail,
)

__all__ = [
    # Timeline
    "allocate",
    # Captions
    "format_srt_time",
    "build_captions",
    "write_captions",
    # Transcript
    "format_clock",
    "build_dialogue",
    "build_metadata",
    "build_description",
    "hashtags",
    # Compositor
    "build_concat_manifest",
    "build_filter_chain",
    "build_command",
    "composite",
    "probe_duration",
    # Thumbnail
    "ThumbnailStyle",
    "wrap_title",
    "layout_lines",
    "build_svg",
    "render_thumbnail",
]
