"""B-roll acquisition with an all-or-nothing placeholder fallback."""

import logging
import random
import shutil
from pathlib import Path
from typing import List, Optional, Sequence
from urllib.parse import urlparse

from PIL import Image

from .base import ImageSource

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp"}
GENERATED_PLACEHOLDER = "placeholder.jpg"


def _extension(url: str) -> str:
    suffix = Path(urlparse(url).path).suffix.lower()
    return suffix if suffix in IMAGE_EXTENSIONS else ".jpg"


class AssetAcquirer:
    """Resolves topic keywords to local images.

    One image is fetched per keyword, picked at random among the top search
    results. If any fetch fails, the whole batch is replaced by copies of the
    placeholder image so a video never mixes real and placeholder images.
    """

    DEFAULT_PER_PAGE = 5

    def __init__(
        self,
        image_source: Optional[ImageSource],
        placeholder: Path,
        search_prefix: str = "",
        per_page: int = DEFAULT_PER_PAGE,
        rng: Optional[random.Random] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        """Initialize the acquirer.

        Args:
            image_source: Image search backend. None always falls back.
            placeholder: Image copied into every slot on fallback. Drawn
                with Pillow if the file is missing or cannot be copied.
            search_prefix: Text prepended to every keyword query.
            per_page: Number of top results to choose from.
            rng: Random source for picking among results.
            log: Logger for this run.
        """
        self._source = image_source
        self._placeholder = placeholder
        self._search_prefix = search_prefix
        self._per_page = per_page
        self._rng = rng or random.Random()
        self._log = log or logger

    def acquire(
        self,
        keywords: Sequence[str],
        max_count: int,
        output_dir: Path,
    ) -> List[Path]:
        """Fetch up to ``max_count`` images into ``output_dir``.

        Files are named ``broll_<index>.<ext>`` in keyword order. Never raises
        on acquisition errors; falls back to placeholders instead.

        Args:
            keywords: Topic keywords in priority order.
            max_count: Maximum number of images (>= 1).
            output_dir: Run output directory.

        Returns:
            Non-empty list of image paths, index 0 being the hook image.

        Raises:
            ValueError: If max_count < 1.
        """
        if max_count < 1:
            raise ValueError(f"max_count must be >= 1, got {max_count}")

        output_dir.mkdir(parents=True, exist_ok=True)
        slots = min(max_count, len(keywords)) if keywords else max_count

        if not keywords:
            self._log.warning("No keywords provided")
            return self._fallback(slots, output_dir)
        if self._source is None:
            self._log.warning("No image source configured")
            return self._fallback(slots, output_dir)

        self._log.info("Downloading B-roll images...")
        images: List[Path] = []
        image_path: Optional[Path] = None
        try:
            for index, keyword in enumerate(keywords[:slots]):
                query = f"{self._search_prefix} {keyword}".strip()
                urls = self._source.search(query, per_page=self._per_page)
                if not urls:
                    raise LookupError(f"No images found for {query!r}")

                url = self._rng.choice(urls[: self._per_page])
                image_path = output_dir / f"broll_{index}{_extension(url)}"
                self._source.download(url, image_path)
                images.append(image_path)
                self._log.info(f"Downloaded image {index + 1}: {url}")

        except Exception as e:
            self._log.warning(f"Error downloading B-roll images: {e}")
            # includes the file of an interrupted download
            for partial in [*images, image_path]:
                if partial is not None:
                    partial.unlink(missing_ok=True)
            return self._fallback(slots, output_dir)

        return images

    def _fallback(self, count: int, output_dir: Path) -> List[Path]:
        if self._placeholder.is_file():
            try:
                images = self._copy_placeholder(self._placeholder, count, output_dir)
            except OSError as e:
                self._log.warning(f"Cannot copy placeholder image {self._placeholder}: {e}")
                suffix = self._placeholder.suffix.lower() or ".jpg"
                for index in range(count):
                    (output_dir / f"broll_{index}{suffix}").unlink(missing_ok=True)
            else:
                self._log.warning(f"Using {count} placeholder images due to download failure")
                return images
        else:
            self._log.warning(
                f"Placeholder image not found at {self._placeholder}; drawing a plain one"
            )

        images = self._copy_placeholder(self._draw_placeholder(output_dir), count, output_dir)
        self._log.warning(f"Using {count} placeholder images due to download failure")
        return images

    @staticmethod
    def _copy_placeholder(source: Path, count: int, output_dir: Path) -> List[Path]:
        images = []
        for index in range(count):
            image_path = output_dir / f"broll_{index}{source.suffix.lower() or '.jpg'}"
            shutil.copyfile(source, image_path)
            images.append(image_path)
        return images

    @staticmethod
    def _draw_placeholder(output_dir: Path) -> Path:
        generated = output_dir / GENERATED_PLACEHOLDER
        if not generated.is_file():
            Image.new("RGB", (1080, 1920), (38, 50, 56)).save(generated, "JPEG", quality=90)
        return generated
