"""Configuration management."""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _optional_path(name: str) -> Optional[Path]:
    value = os.getenv(name, "")
    return Path(value) if value else None


class Config(BaseModel):
    """Application configuration."""

    # API Keys
    pexels_api_key: str = Field(
        default_factory=lambda: os.getenv("PEXELS_API_KEY", ""),
        description="Pexels API key for B-roll image search"
    )
    youtube_client_id: str = Field(
        default_factory=lambda: os.getenv("YT_CLIENT_ID", ""),
        description="YouTube OAuth2 client ID"
    )
    youtube_client_secret: str = Field(
        default_factory=lambda: os.getenv("YT_CLIENT_SECRET", ""),
        description="YouTube OAuth2 client secret"
    )
    youtube_refresh_token: str = Field(
        default_factory=lambda: os.getenv("YT_REFRESH_TOKEN", ""),
        description="Long-lived YouTube refresh token"
    )

    # Paths
    output_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("SHORTGEN_OUTPUT_DIR", "output")),
        description="Per-run output directory"
    )
    placeholder_image: Path = Field(
        default_factory=lambda: Path(os.getenv("SHORTGEN_PLACEHOLDER_IMAGE", "placeholder.jpg")),
        description="Image copied for every slot when B-roll download fails"
    )
    font_file: Optional[Path] = Field(
        default_factory=lambda: _optional_path("SHORTGEN_FONT_FILE"),
        description="TTF/OTF font inlined into the thumbnail SVG"
    )
    ffmpeg_binary: Optional[str] = Field(
        default_factory=lambda: os.getenv("SHORTGEN_FFMPEG") or None,
        description="ffmpeg executable (defaults to the imageio-ffmpeg binary)"
    )

    # Timeline settings
    total_duration: float = Field(
        default_factory=lambda: float(os.getenv("SHORTGEN_TOTAL_DURATION", "25")),
        description="Target video duration in seconds",
        gt=0
    )
    hook_duration: float = Field(
        default_factory=lambda: float(os.getenv("SHORTGEN_HOOK_DURATION", "4")),
        description="Duration of the first (hook) image in seconds",
        ge=0
    )
    max_images: int = Field(
        default_factory=lambda: int(os.getenv("SHORTGEN_MAX_IMAGES", "5")),
        description="Maximum number of B-roll images",
        ge=1
    )

    # Content settings
    search_prefix: str = Field(
        default_factory=lambda: os.getenv("SHORTGEN_SEARCH_PREFIX", ""),
        description="Text prepended to every image search keyword"
    )
    tagline: str = Field(
        default_factory=lambda: os.getenv("SHORTGEN_TAGLINE", "Quick Tips"),
        description="Fixed caption text on the thumbnail"
    )
    call_to_action: str = Field(
        default="Follow for a new tip every day!",
        description="Call-to-action line in the publish metadata"
    )
    extra_tags: list[str] = Field(
        default_factory=lambda: ["shorts", "tips"],
        description="Hashtags appended after the keyword hashtags"
    )

    # YouTube settings
    youtube_category_id: str = Field(
        default_factory=lambda: os.getenv("YT_CATEGORY_ID", "28"),
        description="YouTube category (28 = Science & Technology)"
    )
    youtube_privacy_status: str = Field(
        default_factory=lambda: os.getenv("YT_PRIVACY_STATUS", "public"),
        description="public, unlisted or private"
    )

    class Config:
        """Pydantic config."""
        frozen = False

    def validate_required(self) -> None:
        """Validate the timeline settings against each other."""
        if self.hook_duration >= self.total_duration:
            raise ValueError(
                f"SHORTGEN_HOOK_DURATION ({self.hook_duration}) must be shorter than "
                f"SHORTGEN_TOTAL_DURATION ({self.total_duration})"
            )

    def validate_publish_required(self) -> None:
        """Validate that YouTube credentials are set.

        Raises:
            ValueError: If any required credential is missing.
        """
        missing: list[str] = []

        if not self.youtube_client_id:
            missing.append("YT_CLIENT_ID")
        if not self.youtube_client_secret:
            missing.append("YT_CLIENT_SECRET")
        if not self.youtube_refresh_token:
            missing.append("YT_REFRESH_TOKEN")

        if missing:
            raise ValueError(
                f"Missing required YouTube configuration: {', '.join(missing)}. "
                "Set the corresponding environment variables."
            )


# Global config instance
config = Config()
