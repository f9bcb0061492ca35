"""Render job and render result models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from .timeline import TimeAllocation


@dataclass(frozen=True)
class FrameSpec:
    """Fixed output frame of the compositor."""

    width: int = 1080
    height: int = 1920
    fps: int = 30
    bitrate: str = "5000k"
    pixel_format: str = "yuv420p"
    codec: str = "libx264"


@dataclass(frozen=True)
class SubtitleStyle:
    """Styling of the burned-in subtitle track.

    Sizes and margins are in libass script units, where an SRT track is laid
    out on a 288-pixel-high canvas and scaled to the output frame.
    """

    font: str = "Arial"
    font_size: int = 12
    primary_colour: str = "&H00FFFFFF"
    outline_colour: str = "&H00000000"
    outline: int = 2
    margin_v: int = 40

    def force_style(self) -> str:
        """Render the style as an ASS ``force_style`` value."""
        return ",".join([
            f"FontName={self.font}",
            f"FontSize={self.font_size}",
            f"PrimaryColour={self.primary_colour}",
            f"OutlineColour={self.outline_colour}",
            "BorderStyle=1",
            f"Outline={self.outline}",
            f"MarginV={self.margin_v}",
        ])


@dataclass(frozen=True)
class RenderJob:
    """Everything the compositor needs to render one video."""

    images: Tuple[Path, ...]
    allocation: TimeAllocation
    subtitle_path: Path
    output_path: Path
    frame: FrameSpec = field(default_factory=FrameSpec)
    subtitle_style: SubtitleStyle = field(default_factory=SubtitleStyle)

    def __post_init__(self) -> None:
        if len(self.images) != self.allocation.image_count:
            raise ValueError(
                f"RenderJob has {len(self.images)} images but the allocation "
                f"has {self.allocation.image_count} image segments"
            )

    def timed_images(self) -> List[Tuple[Path, float]]:
        """Pair each image with its allotted duration, in segment order."""
        return [
            (self.images[segment.index], segment.duration)
            for segment in self.allocation.image_segments
        ]


class RenderStatus(str, Enum):
    """Status of an external render step."""

    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class RenderResult:
    """Result of a compositor or thumbnail render."""

    output_path: Path
    status: RenderStatus = RenderStatus.COMPLETED
    error_message: Optional[str] = None
    stdout: str = ""
    stderr: str = ""
    command: List[str] = field(default_factory=list)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @property
    def ok(self) -> bool:
        return self.status == RenderStatus.COMPLETED
