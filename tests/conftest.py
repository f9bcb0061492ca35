"""
Pytest configuration and fixtures for short generator tests
"""
import logging
from pathlib import Path
from typing import List, Optional

import pytest
from PIL import Image

from shortgen.models import ContentUnit
from shortgen.services.base import ImageSource


class FakeImageSource(ImageSource):
    """Image source returning canned URLs and writing small files."""

    def __init__(self, urls: Optional[List[str]] = None, fail_on: Optional[str] = None):
        self.urls = urls if urls is not None else [
            "https://images.example.com/photos/1/photo-1.jpeg?h=350",
            "https://images.example.com/photos/2/photo-2.jpeg?h=350",
            "https://images.example.com/photos/3/photo-3.jpeg?h=350",
        ]
        self.fail_on = fail_on
        self.queries: List[str] = []
        self.downloads: List[str] = []

    def search(self, query: str, per_page: int = 5) -> List[str]:
        self.queries.append(query)
        if self.fail_on is not None and self.fail_on in query:
            raise ConnectionError(f"network unreachable for {query}")
        return self.urls[:per_page]

    def download(self, url: str, output_path: Path) -> Path:
        self.downloads.append(url)
        output_path.write_bytes(b"downloaded " + url.encode())
        return output_path


@pytest.fixture
def content_unit():
    """Content unit with three sentences and three keywords"""
    return ContentUnit(
        title="How to stop your walls from cracking",
        script="A. B. C.",
        keywords=["humidity", "temperature", "fiberglass mesh"],
    )


@pytest.fixture
def placeholder(tmp_path):
    """Placeholder image on disk"""
    path = tmp_path / "assets" / "placeholder.jpg"
    path.parent.mkdir(parents=True)
    Image.new("RGB", (108, 192), (200, 120, 40)).save(path, "JPEG")
    return path


@pytest.fixture
def image_source():
    """Image source that always succeeds"""
    return FakeImageSource()


@pytest.fixture
def failing_source():
    """Image source that fails on every query"""
    return FakeImageSource(fail_on="")


@pytest.fixture
def run_logger():
    """Logger injected into components under test"""
    return logging.getLogger("tests.run")
