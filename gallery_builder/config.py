"""Configuration objects and constants for the gallery builder."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/125 Safari/537.36"
)
DEFAULT_DESCRIPTION = "Professional presentation template with modern, editable slides."
DEFAULT_UPLOADS_PATTERN = r"wp-content/uploads"
PLACEHOLDER_SOURCE = "https://placehold.co/1200x800/jpg"

ENV_CLOUD_NAME = "CLOUDINARY_CLOUD"
ENV_API_KEY = "CLOUDINARY_API_KEY"
ENV_API_SECRET = "CLOUDINARY_API_SECRET"
ENV_SHEET_URL = "SHEET_CSV_URL"


class GalleryError(RuntimeError):
    """Base class for errors that abort a whole build."""


class ConfigError(GalleryError):
    """Raised when required start-up configuration is missing."""


@dataclass
class HostingConfig:
    """Cloudinary credentials and the transformation applied to uploads."""

    cloud_name: str
    api_key: str
    api_secret: str
    folder: str = "products"
    width: int = 1200
    height: int = 800
    placeholder_source: str = PLACEHOLDER_SOURCE


@dataclass
class PageConfig:
    """Static copy shown on the rendered gallery page."""

    title: str = "Free Digital Products"
    subtitle: str = (
        "Curated resources for creators, designers, and marketers. "
        "Download and use them in your next project."
    )
    footer: str = "Images hosted on Cloudinary • Auto-built from Google Sheets."
    call_to_action: str = "Download for Free"


@dataclass
class BuildConfig:
    """Top-level settings that control extraction and output."""

    output_root: Path
    user_agent: str = DEFAULT_USER_AGENT
    fetch_timeout: float = 30.0
    navigation_timeout: float = 60.0
    wait_after_load: float = 1.2
    description_limit: int = 120
    default_description: str = DEFAULT_DESCRIPTION
    uploads_pattern: str = DEFAULT_UPLOADS_PATTERN
    headless: bool = True
    page: PageConfig = field(default_factory=PageConfig)
    uploads_regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            self.uploads_regex = re.compile(self.uploads_pattern)
        except re.error as exc:
            raise ConfigError(
                f"Invalid uploads pattern {self.uploads_pattern!r}: {exc}"
            ) from exc


def load_hosting_config(environ: Optional[Mapping[str, str]] = None) -> HostingConfig:
    """Read Cloudinary credentials from the environment."""
    env = os.environ if environ is None else environ
    values = {
        name: (env.get(name) or "").strip()
        for name in (ENV_CLOUD_NAME, ENV_API_KEY, ENV_API_SECRET)
    }
    missing: List[str] = [name for name, value in values.items() if not value]
    if missing:
        raise ConfigError(
            "Missing Cloudinary config: " + ", ".join(missing)
        )
    return HostingConfig(
        cloud_name=values[ENV_CLOUD_NAME],
        api_key=values[ENV_API_KEY],
        api_secret=values[ENV_API_SECRET],
    )
