"""External service integrations."""

from .base import ImageSource, Publisher
from .pexels import PexelsClient
from .assets import AssetAcquirer
from .youtube import YouTubePublisher, authorize

__all__ = [
    "ImageSource",
    "Publisher",
    "PexelsClient",
    "AssetAcquirer",
    "YouTubePublisher",
    "authorize",
]
