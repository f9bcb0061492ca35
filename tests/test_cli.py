"""
Tests for the command line interface
"""
from typer.testing import CliRunner

from shortgen import __version__
from shortgen.cli import app
from shortgen.models import OutputBundle

runner = CliRunner()


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_status_lists_bundle_files(tmp_path):
    (tmp_path / "output.mp4").write_bytes(b"mp4")
    bundle = OutputBundle(
        video=tmp_path / "output.mp4",
        thumbnail=tmp_path / "thumbnail.jpg",
        subtitles=tmp_path / "subtitles.srt",
        dialogue=tmp_path / "dialogue.txt",
        metadata=tmp_path / "metadata.txt",
        title="How to stop your walls from cracking",
        tags=["humidity", "shorts"],
    )
    bundle.to_yaml(tmp_path / "bundle.yaml")

    result = runner.invoke(app, ["status", "--bundle", str(tmp_path / "bundle.yaml")])

    assert result.exit_code == 0
    assert "How to stop your walls from cracking" in result.output
    assert "Tags: humidity, shorts" in result.output
    assert f"✅ {tmp_path / 'output.mp4'}" in result.output
    assert f"❌ {tmp_path / 'thumbnail.jpg'}" in result.output


def test_status_missing_bundle(tmp_path):
    result = runner.invoke(app, ["status", "--bundle", str(tmp_path / "bundle.yaml")])

    assert result.exit_code == 1
    assert "No bundle found" in result.output


def test_generate_rejects_long_hook(tmp_path):
    content = tmp_path / "content.yaml"
    content.write_text("- {title: T, script: S.}\n", encoding="utf-8")

    result = runner.invoke(
        app, ["generate", "--content", str(content), "--duration", "5", "--hook", "6"]
    )

    assert result.exit_code == 1
    assert "Configuration error" in result.output
