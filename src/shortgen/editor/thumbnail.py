"""Thumbnail rendering: word-wrapped title on an SVG cover, rasterized to JPEG."""

import base64
import io
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional
from xml.sax.saxutils import escape, quoteattr

from PIL import Image

from ..models import RenderResult, RenderStatus

logger = logging.getLogger(__name__)

EMBEDDED_FONT_FAMILY = "ThumbnailFont"


@dataclass(frozen=True)
class ThumbnailStyle:
    """Layout and colours of the cover image."""

    width: int = 1080
    height: int = 1920
    gradient_start: str = "#FF6B35"
    gradient_end: str = "#C2185B"
    panel_x: int = 50
    panel_y: int = 600
    panel_width: int = 980
    panel_height: int = 800
    panel_radius: int = 20
    panel_opacity: float = 0.7
    text_box_top: int = 620
    text_box_height: int = 660
    font_family: str = "Arial, sans-serif"
    title_font_size: int = 80
    title_color: str = "#FFFFFF"
    line_height: float = 1.2
    max_chars_per_line: int = 18
    tagline_font_size: int = 40
    tagline_color: str = "#FFD700"
    tagline_y: int = 1340
    quality: int = 90


def wrap_title(title: str, max_chars: int) -> List[str]:
    """Greedy word wrap.

    A word joins the current line while the line stays within ``max_chars``;
    otherwise it starts a new line. A word longer than ``max_chars`` is kept
    whole on its own line.
    """
    lines: List[str] = []
    current = ""
    for word in title.split():
        candidate = f"{current} {word}" if current else word
        if not current or len(candidate) <= max_chars:
            current = candidate
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines


def layout_lines(
    line_count: int,
    box_top: float,
    box_height: float,
    font_size: float,
    line_height: float = 1.2,
) -> List[float]:
    """Vertical centre of each line so the stack is centred in the box.

    Args:
        line_count: Number of wrapped lines.
        box_top: Top edge of the text box.
        box_height: Height of the text box.
        font_size: Font size in pixels.
        line_height: Line pitch as a multiple of the font size.

    Returns:
        The y coordinate of each line's middle, top to bottom.
    """
    step = font_size * line_height
    first = box_top + (box_height - step * line_count) / 2 + step / 2
    return [first + step * i for i in range(line_count)]


def _font_face(font_file: Path) -> str:
    data = base64.b64encode(font_file.read_bytes()).decode("ascii")
    if font_file.suffix.lower() == ".otf":
        mime, fmt = "font/otf", "opentype"
    else:
        mime, fmt = "font/ttf", "truetype"
    return (
        "<style>@font-face { "
        f"font-family: '{EMBEDDED_FONT_FAMILY}'; "
        f"src: url(data:{mime};base64,{data}) format('{fmt}'); "
        "}</style>"
    )


def build_svg(
    title: str,
    tagline: str,
    style: Optional[ThumbnailStyle] = None,
    font_file: Optional[Path] = None,
) -> str:
    """Compose the self-contained cover SVG.

    Args:
        title: Video title, wrapped to ``style.max_chars_per_line``.
        tagline: Fixed text drawn under the title.
        style: Layout settings. Uses defaults if None.
        font_file: Optional font inlined as base64 so the document needs no
            external resources.

    Returns:
        SVG document text.
    """
    if style is None:
        style = ThumbnailStyle()

    family = style.font_family
    defs = ""
    if font_file is not None:
        defs = _font_face(font_file)
        family = f"{EMBEDDED_FONT_FAMILY}, {family}"

    lines = wrap_title(title, style.max_chars_per_line)
    positions = layout_lines(
        len(lines),
        style.text_box_top,
        style.text_box_height,
        style.title_font_size,
        style.line_height,
    )
    centre_x = style.width / 2
    title_text = "\n".join(
        f'  <text x="{centre_x:g}" y="{y:g}" font-family={quoteattr(family)} '
        f'font-size="{style.title_font_size}" font-weight="bold" fill="{style.title_color}" '
        f'text-anchor="middle" dominant-baseline="middle">{escape(line)}</text>'
        for line, y in zip(lines, positions)
    )

    return (
        f'<svg width="{style.width}" height="{style.height}" '
        f'viewBox="0 0 {style.width} {style.height}" xmlns="http://www.w3.org/2000/svg">\n'
        f"  <defs>{defs}\n"
        '    <linearGradient id="bg" x1="0" y1="0" x2="0" y2="1">\n'
        f'      <stop offset="0%" stop-color="{style.gradient_start}"/>\n'
        f'      <stop offset="100%" stop-color="{style.gradient_end}"/>\n'
        "    </linearGradient>\n"
        "  </defs>\n"
        f'  <rect width="{style.width}" height="{style.height}" fill="url(#bg)"/>\n'
        f'  <rect x="{style.panel_x}" y="{style.panel_y}" width="{style.panel_width}" '
        f'height="{style.panel_height}" rx="{style.panel_radius}" '
        f'fill="#000000" fill-opacity="{style.panel_opacity:g}"/>\n'
        f"{title_text}\n"
        f'  <text x="{centre_x:g}" y="{style.tagline_y}" font-family={quoteattr(family)} '
        f'font-size="{style.tagline_font_size}" fill="{style.tagline_color}" '
        f'text-anchor="middle">{escape(tagline)}</text>\n'
        "</svg>\n"
    )


def rasterize(svg: str, output_path: Path, width: int, height: int, quality: int = 90) -> Path:
    """Render an SVG document to a JPEG file at a fixed size and quality."""
    import cairosvg

    png = cairosvg.svg2png(
        bytestring=svg.encode("utf-8"),
        output_width=width,
        output_height=height,
    )
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with Image.open(io.BytesIO(png)) as image:
        image.convert("RGB").save(output_path, "JPEG", quality=quality)
    return output_path


def render_thumbnail(
    title: str,
    output_path: Path,
    tagline: str = "",
    style: Optional[ThumbnailStyle] = None,
    font_file: Optional[Path] = None,
    log: Optional[logging.Logger] = None,
) -> RenderResult:
    """Render the cover image for a title.

    Returns:
        RenderResult; on failure ``error_message`` names the rendering error.
    """
    log = log or logger
    if style is None:
        style = ThumbnailStyle()

    result = RenderResult(output_path=output_path, started_at=datetime.now())
    log.info("Generating thumbnail...")

    try:
        svg = build_svg(title, tagline, style, font_file)
        rasterize(svg, output_path, style.width, style.height, style.quality)
    except Exception as e:
        log.error(f"Error generating thumbnail: {e}")
        result.status = RenderStatus.FAILED
        result.error_message = f"{type(e).__name__}: {e}"
        result.completed_at = datetime.now()
        return result

    result.completed_at = datetime.now()
    log.info(f"Thumbnail generated: {output_path}")
    return result
