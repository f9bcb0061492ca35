"""Data models for the short generator."""

from .content import ContentUnit, split_sentences
from .timeline import ImageSegment, CaptionSegment, TimeAllocation
from .render import FrameSpec, SubtitleStyle, RenderJob, RenderStatus, RenderResult
from .bundle import OutputBundle, PipelineStage, PublishResult, RunResult

__all__ = [
    "ContentUnit",
    "split_sentences",
    "ImageSegment",
    "CaptionSegment",
    "TimeAllocation",
    "FrameSpec",
    "SubtitleStyle",
    "RenderJob",
    "RenderStatus",
    "RenderResult",
    "OutputBundle",
    "PipelineStage",
    "PublishResult",
    "RunResult",
]
