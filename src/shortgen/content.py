"""Content providers supplying one content unit per run."""

import logging
import random
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence

import yaml

from .models import ContentUnit

logger = logging.getLogger(__name__)


class ContentProvider(ABC):
    """Source of the content unit that drives a run."""

    @abstractmethod
    def next_content_unit(self) -> ContentUnit:
        """Return the content unit for the next run."""
        ...


class StaticContentProvider(ContentProvider):
    """Serves content units from an in-memory list.

    Picks at random by default, or in order (wrapping around) when
    ``sequential`` is set.
    """

    def __init__(
        self,
        units: Sequence[ContentUnit],
        sequential: bool = False,
        rng: Optional[random.Random] = None,
    ) -> None:
        if not units:
            raise ValueError("No content units provided")
        self._units: List[ContentUnit] = list(units)
        self._sequential = sequential
        self._rng = rng or random.Random()
        self._position = 0

    def __len__(self) -> int:
        return len(self._units)

    def next_content_unit(self) -> ContentUnit:
        if self._sequential:
            unit = self._units[self._position % len(self._units)]
            self._position += 1
        else:
            unit = self._rng.choice(self._units)
        logger.info(f"Selected title: {unit.title}")
        return unit


class YamlContentProvider(StaticContentProvider):
    """Loads content units from a YAML file.

    The file holds either a list of units or a mapping with a ``units`` list;
    each unit has ``title``, ``script`` and ``keywords``.
    """

    def __init__(
        self,
        path: Path,
        sequential: bool = False,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.path = path
        super().__init__(self._load(path), sequential=sequential, rng=rng)

    @staticmethod
    def _load(path: Path) -> List[ContentUnit]:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if isinstance(data, dict):
            data = data.get("units", [])
        if not isinstance(data, list):
            raise ValueError(f"{path}: expected a list of content units")

        units = [ContentUnit(**item) for item in data]
        logger.debug(f"Loaded {len(units)} content units from {path}")
        return units
