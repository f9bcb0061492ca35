"""Pexels photo search client."""

import logging
from pathlib import Path
from typing import List, Optional

import requests

from ..config import config
from .base import ImageSource

logger = logging.getLogger(__name__)


class PexelsClient(ImageSource):
    """Client for the Pexels photo search API."""

    SEARCH_URL = "https://api.pexels.com/v1/search"
    DEFAULT_TIMEOUT = 30.0
    DEFAULT_SIZE = "medium"

    def __init__(
        self,
        api_key: Optional[str] = None,
        orientation: str = "portrait",
        size: str = DEFAULT_SIZE,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the Pexels client.

        Args:
            api_key: Pexels API key. Defaults to PEXELS_API_KEY env var.
            orientation: Preferred photo orientation.
            size: Key of the ``src`` rendition to download.
            timeout: Request timeout in seconds.
            session: Optional requests session to reuse.
        """
        self._api_key = api_key or config.pexels_api_key
        if not self._api_key:
            raise ValueError("Pexels API key not provided. Set PEXELS_API_KEY env var.")

        self._orientation = orientation
        self._size = size
        self._timeout = timeout
        self._session = session or requests.Session()

    def search(self, query: str, per_page: int = 5) -> List[str]:
        """Search photos and return their download URLs.

        Raises:
            requests.RequestException: On network errors or non-2xx responses.
        """
        logger.debug(f"Searching Pexels: {query!r} (per_page={per_page})")
        response = self._session.get(
            self.SEARCH_URL,
            headers={"Authorization": self._api_key},
            params={
                "query": query,
                "per_page": per_page,
                "orientation": self._orientation,
            },
            timeout=self._timeout,
        )
        response.raise_for_status()

        photos = response.json().get("photos", [])
        return [
            photo["src"][self._size]
            for photo in photos
            if photo.get("src", {}).get(self._size)
        ]

    def download(self, url: str, output_path: Path) -> Path:
        """Stream an image to disk.

        Raises:
            requests.RequestException: On network errors or non-2xx responses.
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with self._session.get(url, stream=True, timeout=self._timeout) as response:
            response.raise_for_status()
            with open(output_path, "wb") as f:
                for chunk in response.iter_content(chunk_size=64 * 1024):
                    f.write(chunk)
        return output_path
