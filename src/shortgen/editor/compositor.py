"""Video compositor driving ffmpeg's concat demuxer."""

import asyncio
import logging
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

import imageio_ffmpeg
from moviepy import VideoFileClip

from ..models import FrameSpec, RenderJob, RenderResult, RenderStatus, SubtitleStyle

logger = logging.getLogger(__name__)

MANIFEST_NAME = "input_list.txt"


def get_ffmpeg(binary: Optional[str] = None) -> str:
    """Return the ffmpeg executable, preferring an explicit binary."""
    return binary or imageio_ffmpeg.get_ffmpeg_exe()


def format_seconds(value: float) -> str:
    """Format a duration for ffmpeg with at most millisecond precision."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return text or "0"


def _quote_concat_path(path: Path) -> str:
    # concat demuxer quoting: close the quote, emit an escaped quote, reopen
    return "'" + str(Path(path).resolve()).replace("'", "'\\''") + "'"


def build_concat_manifest(timed_images: Sequence[Tuple[Path, float]]) -> str:
    """Build a concat demuxer manifest of ``file``/``duration`` pairs.

    The last file is listed once more without a duration; the demuxer
    otherwise ignores the final ``duration`` directive.

    Args:
        timed_images: (image path, seconds) pairs in playback order.

    Returns:
        Manifest text.

    Raises:
        ValueError: If timed_images is empty.
    """
    if not timed_images:
        raise ValueError("No images provided")

    lines: List[str] = []
    for path, duration in timed_images:
        lines.append(f"file {_quote_concat_path(path)}")
        lines.append(f"duration {format_seconds(duration)}")
    lines.append(f"file {_quote_concat_path(timed_images[-1][0])}")
    return "\n".join(lines) + "\n"


@contextmanager
def concat_manifest(
    path: Path,
    timed_images: Sequence[Tuple[Path, float]],
) -> Iterator[Path]:
    """Write a scratch manifest and remove it when the block exits."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(build_concat_manifest(timed_images), encoding="utf-8")
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)


def escape_filter_path(path: Path) -> str:
    """Escape a file path for use as a filtergraph option value.

    ffmpeg unescapes the value twice: once when parsing the filtergraph and
    again when splitting the filter's ``key=value`` options. The path is
    escaped for the option parser first, then for the graph parser.
    """
    escaped = str(Path(path).resolve())
    for char in ("\\", ":", "'"):
        escaped = escaped.replace(char, "\\" + char)
    for char in ("\\", "'", ",", ";", "[", "]"):
        escaped = escaped.replace(char, "\\" + char)
    return escaped


def build_filter_chain(
    subtitle_path: Path,
    frame: FrameSpec,
    style: SubtitleStyle,
) -> str:
    """Build the video filter chain: fit into the frame, then burn subtitles."""
    return ",".join([
        f"scale={frame.width}:{frame.height}:force_original_aspect_ratio=decrease",
        f"pad={frame.width}:{frame.height}:(ow-iw)/2:(oh-ih)/2",
        "setsar=1:1",
        f"subtitles={escape_filter_path(subtitle_path)}:force_style='{style.force_style()}'",
    ])


def build_command(ffmpeg: str, manifest_path: Path, job: RenderJob) -> List[str]:
    """Build the ffmpeg argument list for a render job.

    Output is silent and hard-capped to the allocation's total duration.
    """
    frame = job.frame
    return [
        ffmpeg,
        "-y",
        "-hide_banner",
        "-f", "concat",
        "-safe", "0",
        "-i", str(manifest_path),
        "-vf", build_filter_chain(job.subtitle_path, frame, job.subtitle_style),
        "-c:v", frame.codec,
        "-r", str(frame.fps),
        "-b:v", frame.bitrate,
        "-pix_fmt", frame.pixel_format,
        "-an",
        "-t", format_seconds(job.allocation.total_duration),
        str(job.output_path),
    ]


async def _run_process(command: List[str]) -> Tuple[int, str, str]:
    """Run a process to completion and capture its output."""
    process = await asyncio.create_subprocess_exec(
        *command,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await process.communicate()
    except asyncio.CancelledError:
        process.kill()
        await process.wait()
        raise
    return (
        process.returncode,
        stdout.decode("utf-8", errors="replace"),
        stderr.decode("utf-8", errors="replace"),
    )


def _last_line(text: str) -> str:
    lines = [line for line in text.strip().splitlines() if line.strip()]
    return lines[-1] if lines else ""


async def composite(
    job: RenderJob,
    ffmpeg_binary: Optional[str] = None,
    manifest_path: Optional[Path] = None,
    log: Optional[logging.Logger] = None,
) -> RenderResult:
    """Render a silent slideshow with burned-in subtitles.

    Args:
        job: Images, timing, subtitle file and output settings.
        ffmpeg_binary: ffmpeg executable. Defaults to the imageio-ffmpeg binary.
        manifest_path: Where to write the scratch concat manifest. Defaults to
            ``input_list.txt`` next to the output video.
        log: Logger for this run. Defaults to the module logger.

    Returns:
        RenderResult; on failure it carries ffmpeg's stdout and stderr.
    """
    log = log or logger
    manifest_path = manifest_path or job.output_path.parent / MANIFEST_NAME
    result = RenderResult(output_path=job.output_path, started_at=datetime.now())

    missing = [str(p) for p in [*job.images, job.subtitle_path] if not Path(p).exists()]
    if missing:
        result.status = RenderStatus.FAILED
        result.error_message = f"Input files not found: {', '.join(missing)}"
        result.completed_at = datetime.now()
        log.error(result.error_message)
        return result

    try:
        ffmpeg = get_ffmpeg(ffmpeg_binary)
        with concat_manifest(manifest_path, job.timed_images()) as manifest:
            command = build_command(ffmpeg, manifest, job)
            result.command = command
            log.info(
                f"Compositing {len(job.images)} images into {job.output_path} "
                f"({format_seconds(job.allocation.total_duration)}s)"
            )
            log.debug(f"ffmpeg command: {' '.join(command)}")
            returncode, result.stdout, result.stderr = await _run_process(command)

    except (OSError, RuntimeError) as e:
        log.error(f"Failed to run ffmpeg: {e}")
        result.status = RenderStatus.FAILED
        result.error_message = str(e)
        result.completed_at = datetime.now()
        return result

    result.completed_at = datetime.now()

    if returncode != 0:
        result.status = RenderStatus.FAILED
        result.error_message = (
            f"ffmpeg exited with code {returncode}: {_last_line(result.stderr)}"
        )
        log.error(result.error_message)
        return result

    if not job.output_path.exists():
        result.status = RenderStatus.FAILED
        result.error_message = f"ffmpeg reported success but {job.output_path} was not written"
        log.error(result.error_message)
        return result

    log.info(f"Video created: {job.output_path}")
    return result


def probe_duration(video_path: Path) -> float:
    """Return the duration of a rendered video in seconds."""
    clip = VideoFileClip(str(video_path), audio=False)
    try:
        return clip.duration
    finally:
        clip.close()
