"""Content unit data model."""

import re
from typing import List, Tuple

from pydantic import BaseModel, Field, field_validator

_SENTENCE_TERMINATORS = re.compile(r"[.!?]+")


def split_sentences(script: str) -> List[str]:
    """Split a script into sentences on runs of '.', '!' and '?'.

    Whitespace-only fragments are dropped and order is preserved, so a
    script without terminators comes back as a single sentence.
    """
    fragments = (part.strip() for part in _SENTENCE_TERMINATORS.split(script))
    return [fragment for fragment in fragments if fragment]


class ContentUnit(BaseModel):
    """Title, narration script and topic keywords driving one video."""

    title: str = Field(..., description="Video title", min_length=1)
    script: str = Field(..., description="Narration script shown as subtitles")
    keywords: Tuple[str, ...] = Field(
        default_factory=tuple,
        description="Topic keywords used for B-roll search, in priority order"
    )

    class Config:
        """Pydantic config."""
        frozen = True

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be blank")
        return value

    @field_validator("script")
    @classmethod
    def _script_has_sentences(cls, value: str) -> str:
        if not split_sentences(value):
            raise ValueError("script must contain at least one sentence")
        return value

    @field_validator("keywords")
    @classmethod
    def _strip_keywords(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(k.strip() for k in value if k and k.strip())

    def sentences(self) -> List[str]:
        """Return the script split into sentences."""
        return split_sentences(self.script)
