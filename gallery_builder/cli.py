"""Command-line entry point for the gallery builder."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import List, Sequence

from dotenv import load_dotenv

from .config import (
    DEFAULT_UPLOADS_PATTERN,
    ENV_SHEET_URL,
    BuildConfig,
    ConfigError,
    GalleryError,
    load_hosting_config,
)
from .hosting import ImageRehoster
from .output import write_artifacts
from .pipeline import BuildStats, build_gallery
from .sources import fetch_csv, parse_links, read_csv

logger = logging.getLogger("gallery_builder.cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Scrape product links into a static gallery page with images hosted on Cloudinary."
        ),
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--sheet-url",
        default=None,
        help=f"Published CSV URL of the link sheet (default: ${ENV_SHEET_URL})",
    )
    source.add_argument(
        "--input",
        type=Path,
        default=None,
        help="Local CSV file with a Link or URL column",
    )
    parser.add_argument(
        "--output",
        default="dist",
        type=Path,
        help="Directory where index.html, data.json and products.csv are written",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Timeout in seconds for plain HTTP fetches",
    )
    parser.add_argument(
        "--navigation-timeout",
        type=float,
        default=60.0,
        help="Browser navigation timeout in seconds",
    )
    parser.add_argument(
        "--wait",
        type=float,
        default=1.2,
        help="Seconds to wait after network idle before reading rendered HTML",
    )
    parser.add_argument(
        "--description-limit",
        type=int,
        default=120,
        help="Maximum description length in characters",
    )
    parser.add_argument(
        "--uploads-pattern",
        default=DEFAULT_UPLOADS_PATTERN,
        help="Regular expression marking preferred <img> sources",
    )
    parser.add_argument(
        "--headful",
        action="store_true",
        help="Show the browser window used for rendered extraction",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def _load_links(args: argparse.Namespace) -> List[str]:
    if args.input:
        return parse_links(read_csv(args.input))
    sheet_url = args.sheet_url or os.getenv(ENV_SHEET_URL)
    if not sheet_url:
        raise ConfigError(
            f"Missing {ENV_SHEET_URL} (Google Sheet published CSV) or --input file."
        )
    return parse_links(fetch_csv(sheet_url, timeout=args.timeout))


def _run_build(args: argparse.Namespace) -> None:
    config = BuildConfig(
        output_root=Path(args.output).resolve(),
        fetch_timeout=args.timeout,
        navigation_timeout=args.navigation_timeout,
        wait_after_load=args.wait,
        description_limit=args.description_limit,
        uploads_pattern=args.uploads_pattern,
        headless=not args.headful,
    )
    rehoster = ImageRehoster(
        load_hosting_config(), user_agent=config.user_agent, timeout=config.fetch_timeout
    )

    links = _load_links(args)
    logger.info("Found %d links.", len(links))

    stats = BuildStats()
    items = asyncio.run(build_gallery(links, config, rehoster, stats))
    write_artifacts(items, config.output_root, config.page)

    logger.info(
        "Finished in %.2fs (%d items, %d rendered in browser, %d placeholders)",
        stats.seconds,
        stats.total,
        stats.rendered,
        stats.placeholders,
    )
    for url in stats.placeholder_urls:
        logger.debug("Placeholder image used for %s", url)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    load_dotenv()
    try:
        _run_build(args)
    except GalleryError as exc:
        logger.error("%s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
