"""Run orchestration: content -> assets -> timeline -> tracks -> video -> thumbnail -> publish."""

import asyncio
import logging
import random
from pathlib import Path
from typing import Iterable, Optional

from .config import Config
from .content import ContentProvider
from .editor import (
    allocate,
    build_description,
    build_dialogue,
    build_metadata,
    composite,
    probe_duration,
    render_thumbnail,
    write_captions,
)
from .editor.thumbnail import ThumbnailStyle
from .editor.transcript import DEFAULT_CTA
from .models import (
    FrameSpec,
    OutputBundle,
    PipelineStage,
    RenderJob,
    RunResult,
    SubtitleStyle,
)
from .services import AssetAcquirer, ImageSource, Publisher

logger = logging.getLogger(__name__)

SUBTITLES_NAME = "subtitles.srt"
VIDEO_NAME = "output.mp4"
THUMBNAIL_NAME = "thumbnail.jpg"
DIALOGUE_NAME = "dialogue.txt"
METADATA_NAME = "metadata.txt"
BUNDLE_NAME = "bundle.yaml"


def publish_bundle(
    publisher: Publisher,
    bundle: OutputBundle,
    log: Optional[logging.Logger] = None,
) -> RunResult:
    """Publish an existing bundle, independently of the rest of the pipeline."""
    log = log or logger
    publish = publisher.publish(bundle)
    if not publish.success:
        log.error(f"Publish failed; bundle kept at {bundle.video.parent}")
        return RunResult(
            success=False,
            stage=PipelineStage.PUBLISH,
            bundle=bundle,
            error_message=publish.error_message,
            publish=publish,
        )
    return RunResult(success=True, stage=PipelineStage.COMPLETED, bundle=bundle, publish=publish)


class ShortPipeline:
    """Produces one asset bundle per run.

    All collaborators are injected. Stages run strictly in sequence and write
    into a single output directory; on failure the files written so far are
    left in place.
    """

    def __init__(
        self,
        *,
        content_provider: ContentProvider,
        asset_acquirer: AssetAcquirer,
        output_dir: Path,
        publisher: Optional[Publisher] = None,
        total_duration: float = 25.0,
        hook_duration: float = 4.0,
        max_images: int = 5,
        frame: Optional[FrameSpec] = None,
        subtitle_style: Optional[SubtitleStyle] = None,
        thumbnail_style: Optional[ThumbnailStyle] = None,
        tagline: str = "",
        call_to_action: str = DEFAULT_CTA,
        extra_tags: Iterable[str] = (),
        font_file: Optional[Path] = None,
        ffmpeg_binary: Optional[str] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self._content = content_provider
        self._assets = asset_acquirer
        self._output_dir = output_dir
        self._publisher = publisher
        self._total_duration = total_duration
        self._hook_duration = hook_duration
        self._max_images = max_images
        self._frame = frame or FrameSpec()
        self._subtitle_style = subtitle_style or SubtitleStyle()
        self._thumbnail_style = thumbnail_style or ThumbnailStyle(
            width=self._frame.width, height=self._frame.height
        )
        self._tagline = tagline
        self._call_to_action = call_to_action
        self._extra_tags = list(extra_tags)
        self._font_file = font_file
        self._ffmpeg_binary = ffmpeg_binary
        self._log = log or logger

    @classmethod
    def from_config(
        cls,
        cfg: Config,
        content_provider: ContentProvider,
        *,
        image_source: Optional[ImageSource] = None,
        publisher: Optional[Publisher] = None,
        output_dir: Optional[Path] = None,
        rng: Optional[random.Random] = None,
        log: Optional[logging.Logger] = None,
    ) -> "ShortPipeline":
        """Build a pipeline from configuration and injected collaborators."""
        cfg.validate_required()
        log = log or logger
        acquirer = AssetAcquirer(
            image_source,
            placeholder=cfg.placeholder_image,
            search_prefix=cfg.search_prefix,
            rng=rng,
            log=log,
        )
        return cls(
            content_provider=content_provider,
            asset_acquirer=acquirer,
            output_dir=output_dir or cfg.output_dir,
            publisher=publisher,
            total_duration=cfg.total_duration,
            hook_duration=cfg.hook_duration,
            max_images=cfg.max_images,
            tagline=cfg.tagline,
            call_to_action=cfg.call_to_action,
            extra_tags=cfg.extra_tags,
            font_file=cfg.font_file,
            ffmpeg_binary=cfg.ffmpeg_binary,
            log=log,
        )

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def _failure(self, stage: PipelineStage, message: str) -> RunResult:
        self._log.error(f"Run failed at {stage.value}: {message}")
        return RunResult(success=False, stage=stage, error_message=message)

    async def run(self, upload: bool = False) -> RunResult:
        """Execute one run.

        Args:
            upload: Publish the bundle after it is produced.

        Returns:
            RunResult with the bundle on success, or the failing stage and
            cause on failure.
        """
        log = self._log
        out = self._output_dir
        out.mkdir(parents=True, exist_ok=True)
        log.info("Starting short generation...")

        stage = PipelineStage.CONTENT
        try:
            content = self._content.next_content_unit()
            sentences = content.sentences()

            stage = PipelineStage.ASSETS
            images = self._assets.acquire(content.keywords, self._max_images, out)

            stage = PipelineStage.TIMELINE
            allocation = allocate(
                len(sentences), len(images), self._total_duration, self._hook_duration
            )
        except (OSError, ValueError) as e:
            return self._failure(stage, str(e))

        log.info(
            f"Timeline: {len(sentences)} sentences, {len(images)} images, "
            f"{allocation.total_duration:g}s"
        )

        subtitles_path = out / SUBTITLES_NAME
        dialogue_path = out / DIALOGUE_NAME
        metadata_path = out / METADATA_NAME

        try:
            stage = PipelineStage.CAPTIONS
            write_captions(subtitles_path, sentences, allocation, log=log)

            stage = PipelineStage.TRANSCRIPT
            dialogue_path.write_text(build_dialogue(sentences, allocation), encoding="utf-8")
            metadata_path.write_text(
                build_metadata(
                    content,
                    call_to_action=self._call_to_action,
                    extra_tags=self._extra_tags,
                ),
                encoding="utf-8",
            )
            log.info(f"Wrote dialogue and metadata to {out}")
        except (OSError, ValueError) as e:
            return self._failure(stage, str(e))

        stage = PipelineStage.VIDEO
        video_path = out / VIDEO_NAME
        job = RenderJob(
            images=tuple(images),
            allocation=allocation,
            subtitle_path=subtitles_path,
            output_path=video_path,
            frame=self._frame,
            subtitle_style=self._subtitle_style,
        )
        render = await composite(job, ffmpeg_binary=self._ffmpeg_binary, log=log)
        if not render.ok:
            return self._failure(stage, render.error_message or "Video compositing failed")

        try:
            duration = await asyncio.to_thread(probe_duration, video_path)
            log.info(f"Rendered duration: {duration:.2f}s (cap {allocation.total_duration:g}s)")
        except Exception as e:
            log.warning(f"Could not read rendered duration: {e}")

        stage = PipelineStage.THUMBNAIL
        thumbnail_path = out / THUMBNAIL_NAME
        thumbnail = await asyncio.to_thread(
            render_thumbnail,
            content.title,
            thumbnail_path,
            self._tagline,
            self._thumbnail_style,
            self._font_file,
            log,
        )
        if not thumbnail.ok:
            return self._failure(stage, thumbnail.error_message or "Thumbnail rendering failed")

        bundle = OutputBundle(
            video=video_path,
            thumbnail=thumbnail_path,
            subtitles=subtitles_path,
            dialogue=dialogue_path,
            metadata=metadata_path,
            title=content.title,
            description=build_description(content, self._extra_tags),
            tags=list(dict.fromkeys([*content.keywords, *self._extra_tags])),
        )
        bundle.to_yaml(out / BUNDLE_NAME)
        log.info("Short generated successfully")

        if not upload:
            return RunResult(success=True, stage=PipelineStage.COMPLETED, bundle=bundle)

        if self._publisher is None:
            result = self._failure(PipelineStage.PUBLISH, "No publisher configured")
            result.bundle = bundle
            return result

        return await asyncio.to_thread(publish_bundle, self._publisher, bundle, log)
