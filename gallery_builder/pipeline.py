"""High-level orchestration for turning links into gallery items."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from playwright.async_api import Browser, Playwright, async_playwright

from .config import BuildConfig, GalleryError
from .extractors import RenderedExtractor, StaticExtractor
from .hosting import ImageRehoster
from .models import GalleryItem, MetaExtractor
from .utils import title_from_url

logger = logging.getLogger("gallery_builder")

BROWSER_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]


class NoLinksError(GalleryError):
    """Raised when the input yields no links to process."""


@dataclass
class BuildStats:
    """Counters describing how many items needed a fallback."""

    total: int = 0
    rendered: int = 0
    placeholders: int = 0
    seconds: float = 0.0
    placeholder_urls: List[str] = field(default_factory=list)


async def launch_browser(playwright: Playwright, config: BuildConfig) -> Browser:
    """Start the Chromium instance shared by every rendered extraction."""
    return await playwright.chromium.launch(headless=config.headless, args=BROWSER_ARGS)


async def process_link(
    url: str,
    static: MetaExtractor,
    rendered: MetaExtractor,
    rehoster: ImageRehoster,
    stats: BuildStats,
) -> GalleryItem:
    """Produce the gallery item for one link; never raises for page failures.

    The static fetch and the upload are blocking calls made from the event
    loop, so links are handled strictly one after another.
    """
    logger.info("Parsing: %s", url)
    meta = await static.extract(url)
    if not meta.image:
        logger.info("  -> No image from static fetch, rendering in browser")
        stats.rendered += 1
        meta = await rendered.extract(url)

    image = rehoster.rehost(meta.image)
    if not image:
        logger.info("  -> Image upload failed, using placeholder")
        stats.placeholders += 1
        stats.placeholder_urls.append(url)
        image = rehoster.placeholder_url()

    return GalleryItem(
        title=meta.title or title_from_url(url),
        description=meta.description,
        image=image,
        url=url,
    )


async def build_gallery(
    links: Sequence[str],
    config: BuildConfig,
    rehoster: ImageRehoster,
    stats: Optional[BuildStats] = None,
) -> List[GalleryItem]:
    """Process every link in order with a single shared browser."""
    if not links:
        raise NoLinksError("No links found in sheet.")
    stats = stats if stats is not None else BuildStats()
    start = time.perf_counter()

    static = StaticExtractor(config)
    items: List[GalleryItem] = []
    async with async_playwright() as playwright:
        browser = await launch_browser(playwright, config)
        try:
            rendered = RenderedExtractor(browser, config)
            for url in links:
                items.append(await process_link(url, static, rendered, rehoster, stats))
        finally:
            await browser.close()

    stats.total = len(items)
    stats.seconds = time.perf_counter() - start
    return items
