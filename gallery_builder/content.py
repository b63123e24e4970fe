"""HTML metadata parsing for product pages."""

from __future__ import annotations

import re
from typing import Iterable, Optional, Sequence, Union

from bs4 import BeautifulSoup, Tag

from .config import BuildConfig
from .models import ExtractedMeta
from .utils import absolutize, collapse_whitespace, shorten

ABOUT_KEYWORD = "About"
ABOUT_HEADING_TAGS = ("h2",)
MAX_SECTION_SIBLINGS = 20
_HEADING_PATTERN = re.compile(r"^h([1-6])$")
_ABSOLUTE_URL = re.compile(r"^https?://", re.IGNORECASE)


def parse_html(markup: Union[bytes, str], encoding: Optional[str] = None) -> BeautifulSoup:
    """Parse markup; bytes are decoded from the declared or detected charset."""
    if isinstance(markup, bytes):
        return BeautifulSoup(markup, "html.parser", from_encoding=encoding)
    return BeautifulSoup(markup, "html.parser")


def _heading_level(tag: Tag) -> Optional[int]:
    match = _HEADING_PATTERN.match(tag.name or "")
    return int(match.group(1)) if match else None


def _tag_text(tag: Optional[Tag]) -> str:
    if tag is None:
        return ""
    return collapse_whitespace(tag.get_text(" "))


def _meta_content(soup: BeautifulSoup, **attrs: str) -> str:
    tag = soup.find("meta", attrs=attrs)
    if tag and tag.get("content"):
        return collapse_whitespace(tag["content"])
    return ""


def collect_section_text(
    soup: BeautifulSoup,
    keyword: str = ABOUT_KEYWORD,
    heading_tags: Sequence[str] = ABOUT_HEADING_TAGS,
    max_siblings: int = MAX_SECTION_SIBLINGS,
) -> str:
    """Collect the text that follows the first heading mentioning ``keyword``.

    Sibling elements are walked until the next heading of the same or a
    higher level. At most ``max_siblings`` elements are visited.
    """
    anchor = None
    for heading in soup.find_all(list(heading_tags)):
        if keyword in heading.get_text():
            anchor = heading
            break
    if anchor is None:
        return ""

    level = _heading_level(anchor) or 6
    parts = []
    current = anchor.find_next_sibling()
    visited = 0
    while current is not None and visited < max_siblings:
        current_level = _heading_level(current)
        if current_level is not None and current_level <= level:
            break
        parts.append(current.get_text(" "))
        current = current.find_next_sibling()
        visited += 1
    return collapse_whitespace(" ".join(parts))


def _image_sources(soup: BeautifulSoup) -> Iterable[str]:
    for img in soup.find_all("img"):
        for attr in ("src", "data-src"):
            src = (img.get(attr) or "").strip()
            # Lazy loaders keep an inline data: placeholder in src.
            if src and not src.startswith("data:"):
                yield src
                break


def _first_matching(sources: Iterable[str], *patterns: re.Pattern) -> str:
    for src in sources:
        if any(pattern.search(src) for pattern in patterns):
            return src
    return ""


def _finish(
    title: str,
    description: str,
    image: str,
    base_url: str,
    config: BuildConfig,
) -> ExtractedMeta:
    description = shorten(description, config.description_limit)
    return ExtractedMeta(
        title=collapse_whitespace(title),
        description=description or config.default_description,
        image=absolutize(image, base_url) if image else "",
    )


def fallback_meta(config: BuildConfig) -> ExtractedMeta:
    """Metadata used when a page could not be fetched or parsed."""
    return ExtractedMeta(title="", description=config.default_description, image="")


def extract_static_meta(
    html: Union[bytes, str],
    base_url: str,
    config: BuildConfig,
    encoding: Optional[str] = None,
) -> ExtractedMeta:
    """Extract metadata from raw HTML fetched without a browser."""
    soup = parse_html(html, encoding)
    uploads = config.uploads_regex

    title = (
        _tag_text(soup.find("h1"))
        or _meta_content(soup, property="og:title")
        or _tag_text(soup.title)
    )
    description = (
        collect_section_text(soup)
        or _meta_content(soup, name="description")
        or _meta_content(soup, property="og:description")
    )

    image = _meta_content(soup, property="og:image")
    if not image:
        link = soup.find("link", rel="image_src")
        if link and link.get("href"):
            image = link["href"].strip()
    if not image:
        image = _first_matching(_image_sources(soup), uploads, _ABSOLUTE_URL)

    return _finish(title, description, image, base_url, config)


def extract_rendered_meta(
    html: str,
    base_url: str,
    page_title: str,
    config: BuildConfig,
) -> ExtractedMeta:
    """Extract metadata from HTML produced by a full browser render."""
    soup = parse_html(html)
    uploads = config.uploads_regex

    title = (
        _tag_text(soup.find("h1"))
        or _meta_content(soup, property="og:title")
        or page_title
    )
    description = (
        _meta_content(soup, name="description")
        or _meta_content(soup, property="og:description")
        or collect_section_text(soup)
    )

    image = _meta_content(soup, property="og:image")
    if not image:
        sources = list(_image_sources(soup))
        image = _first_matching(sources, uploads) or _first_matching(
            sources, _ABSOLUTE_URL
        )

    return _finish(title, description, image, base_url, config)
