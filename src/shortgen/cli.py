"""CLI entry point for the short generator."""

import asyncio
import logging
import random
import typer
from pathlib import Path
from typing import Optional

from . import __version__
from .config import config
from .models import OutputBundle, RunResult

app = typer.Typer(
    name="short-maker",
    help="Assemble vertical image shorts with burned-in subtitles",
    no_args_is_help=True
)

LOG_FORMAT = "%(levelname)s: %(message)s"
FILE_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(verbose: bool = False, log_dir: Optional[Path] = None) -> logging.Logger:
    """Configure logging and return the run logger.

    With ``log_dir``, everything is also written to ``combined.log`` and
    errors to ``error.log``.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
    )

    run_logger = logging.getLogger("shortgen.run")
    if log_dir:
        log_dir.mkdir(parents=True, exist_ok=True)
        for filename, file_level in (("combined.log", level), ("error.log", logging.ERROR)):
            handler = logging.FileHandler(log_dir / filename, encoding="utf-8")
            handler.setLevel(file_level)
            handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
            logging.getLogger().addHandler(handler)
    return run_logger


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"short-maker version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit"
    )
) -> None:
    """Short Generator - Turn a title, script and keywords into a vertical short."""
    pass


def _report(result: RunResult) -> None:
    """Print a run outcome and exit non-zero on failure."""
    if result.bundle:
        typer.echo("\n📁 Output files:")
        for path in result.bundle.files():
            typer.echo(f"   {path}")

    if result.publish and result.publish.success:
        typer.echo(f"\n🎉 Video URL: {result.publish.video_url}")
        typer.echo(f"   Short URL: {result.publish.short_url}")
        if not result.publish.thumbnail_set:
            typer.echo(f"⚠️  {result.publish.error_message or 'Thumbnail was not set'}")

    if not result.success:
        typer.echo(f"\n❌ Failed at stage '{result.stage.value}': {result.error_message}")
        raise typer.Exit(1)

    typer.echo("\n✅ Short generated successfully!")


@app.command()
def generate(
    content_file: Path = typer.Option(
        Path("content.yaml"),
        "--content",
        "-c",
        help="YAML file with content units (title, script, keywords)",
        exists=True,
        file_okay=True,
        dir_okay=False
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output directory (defaults to SHORTGEN_OUTPUT_DIR)"
    ),
    duration: Optional[float] = typer.Option(
        None,
        "--duration",
        "-d",
        help="Target duration in seconds",
        min=1
    ),
    hook: Optional[float] = typer.Option(
        None,
        "--hook",
        help="Duration of the first (hook) image in seconds",
        min=0
    ),
    sequential: bool = typer.Option(
        False,
        "--sequential",
        help="Take content units in file order instead of at random"
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Random seed for content and image selection"
    ),
    upload: bool = typer.Option(
        False,
        "--upload",
        "-u",
        help="Upload the finished short to YouTube"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
    log_dir: Optional[Path] = typer.Option(
        None,
        "--log-dir",
        help="Also write combined.log and error.log here"
    ),
) -> None:
    """Generate one short from the content file."""
    from .content import YamlContentProvider
    from .pipeline import ShortPipeline
    from .services import PexelsClient, YouTubePublisher

    run_logger = setup_logging(verbose, log_dir)
    cfg = config.model_copy()
    if duration is not None:
        cfg.total_duration = duration
    if hook is not None:
        cfg.hook_duration = hook

    try:
        cfg.validate_required()
        if upload:
            cfg.validate_publish_required()
    except ValueError as e:
        typer.echo(f"❌ Configuration error: {e}")
        raise typer.Exit(1)

    rng = random.Random(seed)
    try:
        provider = YamlContentProvider(content_file, sequential=sequential, rng=rng)
    except Exception as e:
        typer.echo(f"❌ Error loading content: {e}")
        raise typer.Exit(1)

    image_source = None
    if cfg.pexels_api_key:
        image_source = PexelsClient(api_key=cfg.pexels_api_key)
    else:
        typer.echo("⚠️  PEXELS_API_KEY not set, using placeholder images")

    publisher = None
    if upload:
        publisher = YouTubePublisher(
            client_id=cfg.youtube_client_id,
            client_secret=cfg.youtube_client_secret,
            refresh_token=cfg.youtube_refresh_token,
            category_id=cfg.youtube_category_id,
            privacy_status=cfg.youtube_privacy_status,
            log=run_logger,
        )

    pipeline = ShortPipeline.from_config(
        cfg,
        provider,
        image_source=image_source,
        publisher=publisher,
        output_dir=output,
        rng=rng,
        log=run_logger,
    )

    typer.echo(f"🎬 Generating short into {pipeline.output_dir}")
    typer.echo(f"   Target duration: {cfg.total_duration:g}s (hook {cfg.hook_duration:g}s)")

    result = asyncio.run(pipeline.run(upload=upload))
    _report(result)


@app.command()
def publish(
    bundle_file: Path = typer.Option(
        Path("output/bundle.yaml"),
        "--bundle",
        "-b",
        help="Bundle file written by 'generate'",
        exists=True,
        file_okay=True,
        dir_okay=False
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
) -> None:
    """Upload a previously generated bundle to YouTube."""
    from .pipeline import publish_bundle
    from .services import YouTubePublisher

    run_logger = setup_logging(verbose)

    try:
        config.validate_publish_required()
    except ValueError as e:
        typer.echo(f"❌ Configuration error: {e}")
        raise typer.Exit(1)

    try:
        bundle = OutputBundle.from_yaml(bundle_file)
    except Exception as e:
        typer.echo(f"❌ Error loading bundle: {e}")
        raise typer.Exit(1)

    typer.echo(f"📤 Publishing: {bundle.title}")
    result = publish_bundle(YouTubePublisher(log=run_logger), bundle, log=run_logger)
    _report(result)


@app.command()
def status(
    bundle_file: Path = typer.Option(
        Path("output/bundle.yaml"),
        "--bundle",
        "-b",
        help="Bundle file written by 'generate'",
        exists=False,
        file_okay=True,
        dir_okay=False
    )
) -> None:
    """Show the files of a generated bundle."""
    if not bundle_file.exists():
        typer.echo(f"❌ No bundle found at {bundle_file}")
        typer.echo("   Run 'short-maker generate' to create one")
        raise typer.Exit(1)

    try:
        bundle = OutputBundle.from_yaml(bundle_file)
    except Exception as e:
        typer.echo(f"❌ Error loading bundle: {e}")
        raise typer.Exit(1)

    typer.echo(f"📁 Bundle: {bundle.title}")
    typer.echo(f"   Tags: {', '.join(bundle.tags)}")
    for path in bundle.files():
        status_icon = "✅" if path.exists() else "❌"
        typer.echo(f"   {status_icon} {path}")


@app.command()
def authorize(
    port: int = typer.Option(
        0,
        "--port",
        "-p",
        help="Local port for the OAuth redirect (0 picks a free port)"
    ),
) -> None:
    """Obtain a YouTube refresh token through the browser consent flow."""
    from .services.youtube import authorize as run_authorization

    if not config.youtube_client_id or not config.youtube_client_secret:
        typer.echo("❌ YT_CLIENT_ID and YT_CLIENT_SECRET must be set")
        raise typer.Exit(1)

    typer.echo("🌐 Opening the Google consent screen...")
    try:
        refresh_token = run_authorization(
            config.youtube_client_id, config.youtube_client_secret, port=port
        )
    except Exception as e:
        typer.echo(f"❌ Error getting refresh token: {e}")
        raise typer.Exit(1)

    if not refresh_token:
        typer.echo("⚠️  No refresh token received.")
        typer.echo("   Revoke the app at https://myaccount.google.com/permissions and retry.")
        raise typer.Exit(1)

    typer.echo("\n✅ Successfully obtained refresh token!")
    typer.echo(f"YT_REFRESH_TOKEN={refresh_token}")


if __name__ == "__main__":
    app()
