import csv
import json

import pytest

from gallery_builder.config import PageConfig
from gallery_builder.models import GalleryItem
from gallery_builder.output import (
    CSV_FILENAME,
    CSV_HEADER,
    HTML_FILENAME,
    JSON_FILENAME,
    render_csv,
    render_gallery,
    write_artifacts,
)


@pytest.fixture
def items():
    return [
        GalleryItem(
            title='Deck "Pro"',
            description="Slides, charts; icons.",
            image="https://res.cloudinary.com/demo/image/upload/a.png",
            url="https://shop.example.com/a",
        ),
        GalleryItem(
            title="<script>alert('x')</script>",
            description="Café résumé template.",
            image="https://res.cloudinary.com/demo/image/upload/b.png",
            url="https://shop.example.com/b?ref=1&utm=2",
        ),
    ]


class TestWriteArtifacts:
    def test_writes_three_files(self, tmp_path, items):
        paths = write_artifacts(items, tmp_path / "dist", PageConfig())
        assert sorted(p.name for p in paths) == sorted([JSON_FILENAME, CSV_FILENAME, HTML_FILENAME])
        assert all(p.exists() for p in paths)

    def test_json_and_csv_match_items(self, tmp_path, items):
        write_artifacts(items, tmp_path, PageConfig())

        records = json.loads((tmp_path / JSON_FILENAME).read_text(encoding="utf-8"))
        with (tmp_path / CSV_FILENAME).open(encoding="utf-8", newline="") as handle:
            rows = list(csv.DictReader(handle))

        assert len(records) == len(rows) == len(items)
        for item, record, row in zip(items, records, rows):
            assert record == {
                "title": item.title,
                "description": item.description,
                "image": item.image,
                "url": item.url,
            }
            assert row == {
                "Name": item.title,
                "Description": item.description,
                "Image URL": item.image,
                "Download Link": item.url,
            }

    def test_csv_quotes_every_field(self, items):
        lines = render_csv(items).splitlines()
        assert lines[0] == ",".join(f'"{name}"' for name in CSV_HEADER)
        assert lines[1].startswith('"Deck ""Pro""","Slides, charts; icons."')

    def test_empty_list(self, tmp_path):
        write_artifacts([], tmp_path, PageConfig())
        assert json.loads((tmp_path / JSON_FILENAME).read_text(encoding="utf-8")) == []
        assert render_csv([]).splitlines() == [",".join(f'"{name}"' for name in CSV_HEADER)]


class TestRenderGallery:
    def test_script_title_is_escaped(self, items):
        html = render_gallery(items, PageConfig())
        assert "<script>" not in html
        assert "&lt;script&gt;alert(&#x27;x&#x27;)&lt;/script&gt;" in html

    def test_cards_in_order_with_links(self, items):
        html = render_gallery(items, PageConfig())
        assert html.count('<article class="card">') == 2
        assert html.index("https://shop.example.com/a") < html.index("https://shop.example.com/b")
        assert 'href="https://shop.example.com/b?ref=1&amp;utm=2"' in html
        assert 'target="_blank" rel="noopener"' in html
        assert "Deck &quot;Pro&quot;" in html

    def test_page_copy(self, items):
        page = PageConfig(title="Free Fonts", subtitle="Hand picked.", footer="Built nightly.")
        html = render_gallery(items, page)
        assert "<title>Free Fonts</title>" in html
        assert "<h1>Free Fonts</h1>" in html
        assert "Hand picked." in html
        assert "Built nightly." in html

    def test_two_column_grid(self, items):
        html = render_gallery(items, PageConfig())
        assert "grid-template-columns: repeat(2, minmax(0, 1fr))" in html
        assert "@media (max-width: 720px)" in html
