"""Read the ordered list of product links from a CSV sheet."""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import requests

logger = logging.getLogger("gallery_builder")

LINK_COLUMNS = ("link", "url")


def fetch_csv(url: str, timeout: float = 30.0) -> str:
    """Download a published sheet as CSV text."""
    logger.info("Fetching sheet CSV from %s", url)
    resp = requests.get(url, timeout=timeout)
    resp.raise_for_status()
    if "charset=" in resp.headers.get("Content-Type", "").lower():
        return resp.text
    return resp.content.decode("utf-8-sig")


def read_csv(path: Path) -> str:
    return Path(path).read_text(encoding="utf-8-sig")


def _link_column(fieldnames: Optional[Sequence[str]]) -> Optional[str]:
    by_name: Dict[str, str] = {}
    for name in fieldnames or ():
        by_name.setdefault(name.strip().lower(), name)
    for candidate in LINK_COLUMNS:
        if candidate in by_name:
            return by_name[candidate]
    return None


def dedupe(links: Sequence[str]) -> List[str]:
    """Drop repeated links, keeping the first occurrence of each."""
    return list(dict.fromkeys(links))


def parse_links(csv_text: str) -> List[str]:
    """Return trimmed, non-empty, unique links in sheet order."""
    reader = csv.DictReader(io.StringIO(csv_text))
    column = _link_column(reader.fieldnames)
    if column is None:
        logger.warning("No Link/URL column found in %s", reader.fieldnames)
        return []
    links = [(row.get(column) or "").strip() for row in reader]
    return dedupe([link for link in links if link])
