"""Data models used throughout the gallery pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass
class ExtractedMeta:
    """Title, description and image discovered for a single link."""

    title: str
    description: str
    image: str


@dataclass(frozen=True)
class GalleryItem:
    """Final record for one input link, in display order."""

    title: str
    description: str
    image: str
    url: str


class MetaExtractor(Protocol):
    """Strategy that turns a URL into page metadata without raising."""

    async def extract(self, url: str) -> ExtractedMeta:
        ...
