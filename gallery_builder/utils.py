"""Utility helpers for text normalization and URL handling."""

from __future__ import annotations

import hashlib
import re
from typing import Optional
from urllib.parse import unquote, urljoin, urlparse

SLUG_PATTERN = re.compile(r"[^a-z0-9]+")
WHITESPACE_PATTERN = re.compile(r"\s+")
TRAILING_PUNCTUATION = re.compile(r"[.,;:!?-]+$")
ELLIPSIS = "…"
# A word boundary is only used when it keeps at least this much text.
MIN_WORD_CUT = 60


def collapse_whitespace(value: Optional[str]) -> str:
    """Collapse whitespace runs to single spaces and trim the ends."""
    if not value:
        return ""
    return WHITESPACE_PATTERN.sub(" ", str(value)).strip()


def shorten(text: Optional[str], limit: int = 120) -> str:
    """Shorten text to ``limit`` characters, preferring a word boundary.

    Truncated results end with an ellipsis after any trailing punctuation
    has been removed. Text that already fits is returned unchanged.
    """
    clean = collapse_whitespace(text)
    if len(clean) <= limit:
        return clean
    cutoff = max(0, limit - 1)
    piece = clean[:cutoff]
    last_space = piece.rfind(" ")
    if last_space > MIN_WORD_CUT:
        piece = piece[:last_space]
    return TRAILING_PUNCTUATION.sub("", piece) + ELLIPSIS


def slugify(value: str, fallback: str = "image") -> str:
    """Generate an identifier-friendly slug using ASCII characters only."""
    normalized = value.encode("ascii", "ignore").decode("ascii")
    normalized = normalized.lower()
    normalized = SLUG_PATTERN.sub("-", normalized).strip("-")
    return normalized or fallback


def stable_public_id(image_url: str, max_length: int = 80) -> str:
    """Derive a repeatable hosting identifier for a source image URL."""
    parsed = urlparse(image_url)
    stem = parsed.path.rsplit("/", 1)[-1].rsplit(".", 1)[0]
    digest = hashlib.sha1(image_url.encode("utf-8")).hexdigest()[:10]
    slug = slugify(unquote(stem))[: max_length - len(digest) - 1].strip("-")
    return f"{slug or 'image'}-{digest}"


def absolutize(src: str, base_url: str) -> str:
    """Rewrite protocol-relative and relative references to absolute URLs."""
    src = src.strip()
    if not src:
        return ""
    if src.startswith("//"):
        return "https:" + src
    return urljoin(base_url, src)


def title_from_url(url: str) -> str:
    """Build a readable title from the last path segment of a URL."""
    parsed = urlparse(url)
    segments = [segment for segment in parsed.path.split("/") if segment]
    if not segments:
        return parsed.netloc or url
    name = unquote(segments[-1]).replace("-", " ").replace("_", " ")
    return collapse_whitespace(name) or parsed.netloc or url
