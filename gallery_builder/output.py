"""Write the gallery page and its machine-readable exports."""

from __future__ import annotations

import csv
import io
import json
import logging
from dataclasses import asdict
from html import escape
from pathlib import Path
from typing import Dict, List, Sequence

from .config import PageConfig
from .models import GalleryItem

logger = logging.getLogger("gallery_builder")

JSON_FILENAME = "data.json"
CSV_FILENAME = "products.csv"
HTML_FILENAME = "index.html"
CSV_HEADER = ("Name", "Description", "Image URL", "Download Link")

GALLERY_CSS = """
:root { --gap: 16px; --radius: 14px; --shadow: 0 6px 20px rgba(0,0,0,0.08); --blue: #0B5FFF; --blue-dark: #0A4EE0; }
* { box-sizing: border-box; }
body { margin: 0; padding: 40px 20px; font-family: system-ui, -apple-system, Segoe UI, Roboto, Inter, Arial, sans-serif; color: #111; background: #fafafa; }
.wrap { max-width: 1040px; margin: 0 auto; }
h1 { font-size: 44px; line-height: 1.12; margin: 0 0 8px; letter-spacing: -0.02em; }
.subtitle { font-size: 18px; color: #444; margin-bottom: 28px; }
hr { border: none; border-top: 1px solid #e9e9e9; margin: 16px 0 28px; }
.grid { display: grid; grid-template-columns: repeat(2, minmax(0, 1fr)); gap: var(--gap); }
@media (max-width: 720px) { .grid { grid-template-columns: 1fr; } }
.card { background: #fff; border: 1px solid #eee; border-radius: var(--radius); overflow: hidden; box-shadow: var(--shadow); display: flex; flex-direction: column; transition: transform .12s ease, box-shadow .12s ease; }
.card:hover { transform: translateY(-2px); box-shadow: 0 10px 26px rgba(0,0,0,0.10); }
.cover { position: relative; width: 100%; padding-top: 66.66%; overflow: hidden; background: #f2f2f2; }
.cover img { position: absolute; inset: 0; width: 100%; height: 100%; object-fit: cover; }
.content { padding: 14px 14px 18px; display: flex; flex-direction: column; gap: 8px; }
.title { font-weight: 650; font-size: 16px; line-height: 1.3; }
.desc { font-size: 14px; color: #555; line-height: 1.4; white-space: nowrap; overflow: hidden; text-overflow: ellipsis; }
.actions { margin-top: 6px; }
.btn { display: inline-block; text-decoration: none; border: 1px solid var(--blue); background: var(--blue); color: #fff; padding: 10px 14px; border-radius: 10px; font-size: 14px; font-weight: 600; }
.btn:hover { background: var(--blue-dark); border-color: var(--blue-dark); color: #fff; }
.footer { margin-top: 36px; font-size: 13px; color: #666; }
"""


def _card(item: GalleryItem, call_to_action: str) -> str:
    return (
        '<article class="card">\n'
        f'  <div class="cover"><img src="{escape(item.image)}" alt="{escape(item.title)} cover" loading="lazy" /></div>\n'
        '  <div class="content">\n'
        f'    <div class="title">{escape(item.title)}</div>\n'
        f'    <div class="desc">{escape(item.description)}</div>\n'
        f'    <div class="actions"><a class="btn" href="{escape(item.url)}" target="_blank" rel="noopener">'
        f"{escape(call_to_action)}</a></div>\n"
        "  </div>\n"
        "</article>"
    )


def render_gallery(items: Sequence[GalleryItem], page: PageConfig) -> str:
    """Render the two-column gallery document."""
    cards = "\n".join(_card(item, page.call_to_action) for item in items)
    parts = [
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '<meta charset="utf-8"/>',
        '<meta name="viewport" content="width=device-width, initial-scale=1"/>',
        f"<title>{escape(page.title)}</title>",
        f"<style>{GALLERY_CSS}</style>",
        "</head>",
        "<body>",
        '<div class="wrap">',
        f"<h1>{escape(page.title)}</h1>",
        f'<div class="subtitle">{escape(page.subtitle)}</div>',
        "<hr/>",
        '<div class="grid">',
        cards,
        "</div>",
        f'<div class="footer">{escape(page.footer)}</div>',
        "</div>",
        "</body>",
        "</html>",
    ]
    return "\n".join(parts) + "\n"


def render_json(items: Sequence[GalleryItem]) -> str:
    records: List[Dict[str, str]] = [asdict(item) for item in items]
    return json.dumps(records, indent=2, ensure_ascii=False)


def render_csv(items: Sequence[GalleryItem]) -> str:
    """Tabular export with every field quoted."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for item in items:
        writer.writerow([item.title, item.description, item.image, item.url])
    return buffer.getvalue()


def write_artifacts(
    items: Sequence[GalleryItem],
    output_root: Path,
    page: PageConfig,
) -> List[Path]:
    """Persist the JSON, CSV and HTML representations of ``items``."""
    output_root.mkdir(parents=True, exist_ok=True)
    outputs = {
        JSON_FILENAME: render_json(items),
        CSV_FILENAME: render_csv(items),
        HTML_FILENAME: render_gallery(items, page),
    }
    written: List[Path] = []
    for filename, body in outputs.items():
        path = output_root / filename
        path.write_text(body, encoding="utf-8")
        logger.info("Saved %s", path)
        written.append(path)
    return written
