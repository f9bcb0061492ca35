"""Abstractions for the external collaborators of a run."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from ..models import OutputBundle, PublishResult


class ImageSource(ABC):
    """Keyword-indexed image search.

    Implementations raise on network or API errors; the asset acquirer turns
    any such error into its placeholder fallback.
    """

    @abstractmethod
    def search(self, query: str, per_page: int = 5) -> List[str]:
        """Return candidate image URLs for a query, best match first."""
        ...

    @abstractmethod
    def download(self, url: str, output_path: Path) -> Path:
        """Download an image to ``output_path`` and return the path."""
        ...


class Publisher(ABC):
    """Uploads a finished bundle to a video platform."""

    @abstractmethod
    def publish(self, bundle: OutputBundle) -> PublishResult:
        """Upload the bundle's video and thumbnail."""
        ...
