"""
Tests for the ffmpeg compositor
"""
import asyncio
from pathlib import Path

import pytest

from shortgen.editor import compositor
from shortgen.editor.compositor import (
    build_command,
    build_concat_manifest,
    build_filter_chain,
    composite,
    concat_manifest,
    escape_filter_path,
    format_seconds,
)
from shortgen.editor.timeline import allocate
from shortgen.models import FrameSpec, RenderJob, RenderStatus, SubtitleStyle


@pytest.fixture
def render_job(tmp_path):
    images = []
    for index in range(3):
        path = tmp_path / f"broll_{index}.jpg"
        path.write_bytes(b"jpeg")
        images.append(path)
    subtitles = tmp_path / "subtitles.srt"
    subtitles.write_text("1\n00:00:00,000 --> 00:00:25,000\nA\n\n", encoding="utf-8")
    return RenderJob(
        images=tuple(images),
        allocation=allocate(3, 3, 25.0, 4.0),
        subtitle_path=subtitles,
        output_path=tmp_path / "output.mp4",
    )


class FakeProcess:
    """Stands in for the ffmpeg subprocess."""

    def __init__(self, returncode=0, stderr="", write_output=True):
        self.returncode = returncode
        self.stderr = stderr
        self.write_output = write_output
        self.commands = []
        self.manifests = []

    async def __call__(self, command):
        self.commands.append(command)
        manifest = Path(command[command.index("-i") + 1])
        self.manifests.append(manifest.read_text(encoding="utf-8"))
        if self.write_output and self.returncode == 0:
            Path(command[-1]).write_bytes(b"mp4")
        return self.returncode, "", self.stderr


@pytest.mark.parametrize(
    "value,expected",
    [(4.0, "4"), (10.5, "10.5"), (25, "25"), (8.3333333, "8.333"), (0.0, "0")],
)
def test_format_seconds(value, expected):
    assert format_seconds(value) == expected


def test_concat_manifest_repeats_last_file(tmp_path):
    a, b = tmp_path / "a.jpg", tmp_path / "b.jpg"

    manifest = build_concat_manifest([(a, 4.0), (b, 21.0)])

    assert manifest.splitlines() == [
        f"file '{a.resolve()}'",
        "duration 4",
        f"file '{b.resolve()}'",
        "duration 21",
        f"file '{b.resolve()}'",
    ]


def test_concat_manifest_quotes_apostrophes(tmp_path):
    path = tmp_path / "it's.jpg"

    manifest = build_concat_manifest([(path, 1.0)])

    assert "it'\\''s.jpg'" in manifest.splitlines()[0]


def test_concat_manifest_requires_images():
    with pytest.raises(ValueError):
        build_concat_manifest([])


def test_concat_manifest_removed_on_error(tmp_path):
    path = tmp_path / "input_list.txt"

    with pytest.raises(RuntimeError):
        with concat_manifest(path, [(tmp_path / "a.jpg", 1.0)]):
            assert path.exists()
            raise RuntimeError("boom")

    assert not path.exists()


def unescape(text, separator=None):
    """Undo one level of ffmpeg backslash escaping, splitting at unescaped separators."""
    fields, current, chars = [], "", iter(text)
    for char in chars:
        if char == "\\":
            current += next(chars, "")
        elif char == separator:
            fields.append(current)
            current = ""
        else:
            current += char
    fields.append(current)
    return fields


def test_escape_filter_path():
    escaped = escape_filter_path(Path("/tmp/my,subs:[1]'s.srt"))

    assert escaped == r"/tmp/my\,subs\\:\[1\]\\\'s.srt"


@pytest.mark.parametrize("dirname", ["run-12:30", "Bob's shorts", "a,b;[c]", "back\\slash"])
def test_escaped_path_survives_both_parse_levels(tmp_path, dirname):
    path = (tmp_path / dirname / "subtitles.srt").resolve()

    graph_fields = unescape(escape_filter_path(path), separator=",")
    assert len(graph_fields) == 1
    option_fields = unescape(graph_fields[0], separator=":")

    assert option_fields == [str(path)]


def test_filter_chain_escapes_colon_in_directory(tmp_path):
    subtitles = tmp_path / "run-12:30" / "subtitles.srt"

    chain = build_filter_chain(subtitles, FrameSpec(), SubtitleStyle())

    assert "run-12\\\\:30/subtitles.srt:force_style=" in chain


def test_filter_chain_fits_frame_then_burns_subtitles(tmp_path):
    chain = build_filter_chain(tmp_path / "subtitles.srt", FrameSpec(), SubtitleStyle())

    assert chain.startswith(
        "scale=1080:1920:force_original_aspect_ratio=decrease,"
        "pad=1080:1920:(ow-iw)/2:(oh-ih)/2,setsar=1:1,subtitles="
    )
    assert chain.endswith(
        ":force_style='FontName=Arial,FontSize=12,PrimaryColour=&H00FFFFFF,"
        "OutlineColour=&H00000000,BorderStyle=1,Outline=2,MarginV=40'"
    )


def test_command_is_silent_and_capped(render_job, tmp_path):
    command = build_command("ffmpeg", tmp_path / "input_list.txt", render_job)

    assert command[0] == "ffmpeg"
    assert command[-1] == str(render_job.output_path)
    assert command[command.index("-t") + 1] == "25"
    assert command[command.index("-r") + 1] == "30"
    assert command[command.index("-b:v") + 1] == "5000k"
    assert command[command.index("-pix_fmt") + 1] == "yuv420p"
    assert command[command.index("-f") + 1] == "concat"
    assert "-an" in command


def test_render_job_checks_image_count(tmp_path):
    with pytest.raises(ValueError):
        RenderJob(
            images=(tmp_path / "a.jpg",),
            allocation=allocate(3, 2, 25.0, 4.0),
            subtitle_path=tmp_path / "s.srt",
            output_path=tmp_path / "o.mp4",
        )


def test_composite_success(render_job, monkeypatch, run_logger):
    process = FakeProcess()
    monkeypatch.setattr(compositor, "_run_process", process)

    result = asyncio.run(composite(render_job, ffmpeg_binary="ffmpeg", log=run_logger))

    assert result.ok
    assert result.status == RenderStatus.COMPLETED
    assert result.command == process.commands[0]
    assert "duration 4\n" in process.manifests[0]
    assert process.manifests[0].count("duration 10.5") == 2
    assert not (render_job.output_path.parent / "input_list.txt").exists()


def test_composite_failure_carries_stderr(render_job, monkeypatch):
    stderr = "Input #0, concat\n[AVFilterGraph] No such filter: 'subtitles'\n"
    monkeypatch.setattr(compositor, "_run_process", FakeProcess(returncode=1, stderr=stderr))

    result = asyncio.run(composite(render_job, ffmpeg_binary="ffmpeg"))

    assert not result.ok
    assert result.stderr == stderr
    assert result.error_message == (
        "ffmpeg exited with code 1: [AVFilterGraph] No such filter: 'subtitles'"
    )
    assert not (render_job.output_path.parent / "input_list.txt").exists()


def test_composite_missing_output(render_job, monkeypatch):
    monkeypatch.setattr(compositor, "_run_process", FakeProcess(write_output=False))

    result = asyncio.run(composite(render_job, ffmpeg_binary="ffmpeg"))

    assert not result.ok
    assert "was not written" in result.error_message


def test_composite_missing_inputs(render_job, monkeypatch):
    process = FakeProcess()
    monkeypatch.setattr(compositor, "_run_process", process)
    render_job.images[1].unlink()

    result = asyncio.run(composite(render_job, ffmpeg_binary="ffmpeg"))

    assert not result.ok
    assert "broll_1.jpg" in result.error_message
    assert process.commands == []


def test_composite_missing_binary(render_job, monkeypatch):
    async def missing(command):
        raise FileNotFoundError(2, "No such file or directory", command[0])

    monkeypatch.setattr(compositor, "_run_process", missing)
    manifest = render_job.output_path.parent / "scratch" / "list.txt"

    result = asyncio.run(
        composite(render_job, ffmpeg_binary="/nonexistent/ffmpeg", manifest_path=manifest)
    )

    assert not result.ok
    assert "/nonexistent/ffmpeg" in result.error_message
    assert not manifest.exists()
