"""Static and browser-rendered metadata extractors."""

from __future__ import annotations

import logging
from typing import Optional

import requests
from playwright.async_api import (
    Browser,
    Page,
    TimeoutError as PlaywrightTimeoutError,
)

from .config import BuildConfig
from .content import extract_rendered_meta, extract_static_meta, fallback_meta
from .models import ExtractedMeta

logger = logging.getLogger("gallery_builder")


def declared_charset(resp: requests.Response) -> Optional[str]:
    """Charset named in the Content-Type header, if the server sent one.

    requests assumes ISO-8859-1 for text/* responses without a charset, which
    would override the <meta charset> the parser can find in the markup.
    """
    content_type = resp.headers.get("Content-Type", "")
    if "charset=" not in content_type.lower():
        return None
    return resp.encoding


class StaticExtractor:
    """Fetch raw HTML over plain HTTP and parse it without running scripts."""

    def __init__(
        self,
        config: BuildConfig,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = config.user_agent

    def fetch(self, url: str) -> requests.Response:
        resp = self.session.get(url, timeout=self.config.fetch_timeout)
        resp.raise_for_status()
        return resp

    async def extract(self, url: str) -> ExtractedMeta:
        try:
            resp = self.fetch(url)
        except requests.RequestException as exc:
            logger.warning("Static fetch failed for %s: %s", url, exc)
            return fallback_meta(self.config)

        try:
            return extract_static_meta(
                resp.content, resp.url or url, self.config, declared_charset(resp)
            )
        except Exception:  # pylint: disable=broad-except
            logger.exception("Unexpected error parsing %s", url)
            return fallback_meta(self.config)


class RenderedExtractor:
    """Render pages in a shared Playwright browser, one tab at a time."""

    def __init__(self, browser: Browser, config: BuildConfig) -> None:
        self.browser = browser
        self.config = config

    async def _render(self, page: Page, url: str) -> ExtractedMeta:
        page.set_default_navigation_timeout(self.config.navigation_timeout * 1000)
        logger.info("Rendering %s", url)
        await page.goto(url, wait_until="networkidle")
        if self.config.wait_after_load:
            await page.wait_for_timeout(int(self.config.wait_after_load * 1000))
        html = await page.content()
        page_title = await page.title()
        return extract_rendered_meta(html, page.url or url, page_title, self.config)

    async def _close(self, page: Page, url: str) -> None:
        try:
            await page.close()
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Failed to close page for %s: %s", url, exc)

    async def extract(self, url: str) -> ExtractedMeta:
        try:
            page = await self.browser.new_page(user_agent=self.config.user_agent)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Could not open a browser page for %s", url)
            return fallback_meta(self.config)

        try:
            return await self._render(page, url)
        except PlaywrightTimeoutError as exc:
            logger.warning("Timeout while rendering %s: %s", url, exc)
            return fallback_meta(self.config)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Unexpected error rendering %s", url)
            return fallback_meta(self.config)
        finally:
            await self._close(page, url)
