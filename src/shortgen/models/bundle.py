"""Output bundle and run result models."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field
import yaml


class OutputBundle(BaseModel):
    """Files produced by one run, plus the fields needed to publish them."""

    video: Path = Field(..., description="Rendered video file")
    thumbnail: Path = Field(..., description="Cover image")
    subtitles: Path = Field(..., description="SRT subtitle file")
    dialogue: Path = Field(..., description="Timed dialogue transcript")
    metadata: Path = Field(..., description="Publish metadata text")
    title: str = Field(..., description="Video title")
    description: str = Field(default="", description="Upload description")
    tags: List[str] = Field(default_factory=list, description="Upload tags")

    class Config:
        """Pydantic config."""
        frozen = True

    def files(self) -> List[Path]:
        """Return the produced file paths."""
        return [self.video, self.thumbnail, self.subtitles, self.dialogue, self.metadata]

    @classmethod
    def from_yaml(cls, path: Path) -> "OutputBundle":
        """Load a bundle from a YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls(**data)

    def to_yaml(self, path: Path) -> None:
        """Save the bundle to a YAML file."""
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                self.model_dump(mode="json"), f, default_flow_style=False, allow_unicode=True
            )


class PipelineStage(str, Enum):
    """Stage of a run, used to report where it stopped."""

    CONTENT = "content"
    ASSETS = "assets"
    TIMELINE = "timeline"
    CAPTIONS = "captions"
    TRANSCRIPT = "transcript"
    VIDEO = "video"
    THUMBNAIL = "thumbnail"
    PUBLISH = "publish"
    COMPLETED = "completed"


@dataclass
class PublishResult:
    """Result of publishing a bundle."""

    success: bool
    video_id: Optional[str] = None
    video_url: Optional[str] = None
    short_url: Optional[str] = None
    thumbnail_set: bool = False
    error_message: Optional[str] = None


@dataclass
class RunResult:
    """Overall outcome of one pipeline run."""

    success: bool
    stage: PipelineStage
    bundle: Optional[OutputBundle] = None
    error_message: Optional[str] = None
    publish: Optional[PublishResult] = None
