"""Rehost product images on Cloudinary."""

from __future__ import annotations

import io
import logging
from typing import Any, Dict, List, Optional

import cloudinary
import cloudinary.uploader
import cloudinary.utils
import requests
from filetype import guess

from .config import DEFAULT_USER_AGENT, HostingConfig
from .utils import stable_public_id

logger = logging.getLogger("gallery_builder")

IMAGE_ACCEPT = "image/avif,image/webp,image/apng,image/*,*/*;q=0.8"
DOWNLOAD_TIMEOUT = 30.0


def is_image(data: bytes) -> bool:
    kind = guess(data)
    return bool(kind and kind.mime.startswith("image/"))


class ImageRehoster:
    """Upload source images to Cloudinary, falling back to a direct download."""

    def __init__(
        self,
        config: HostingConfig,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
        timeout: float = DOWNLOAD_TIMEOUT,
    ) -> None:
        self.config = config
        self.user_agent = user_agent
        self.session = session or requests.Session()
        self.timeout = timeout
        cloudinary.config(
            cloud_name=config.cloud_name,
            api_key=config.api_key,
            api_secret=config.api_secret,
            secure=True,
        )

    @property
    def transformation(self) -> List[Dict[str, Any]]:
        return [
            {"width": self.config.width, "height": self.config.height, "crop": "fill"},
            {"fetch_format": "auto", "quality": "auto"},
        ]

    def _upload_options(self, image_url: str) -> Dict[str, Any]:
        return {
            "folder": self.config.folder,
            "public_id": stable_public_id(image_url),
            "overwrite": True,
            "resource_type": "image",
        }

    def placeholder_url(self) -> str:
        """Cloudinary delivery URL for the fixed placeholder image."""
        url, _ = cloudinary.utils.cloudinary_url(
            self.config.placeholder_source,
            type="fetch",
            secure=True,
            cloud_name=self.config.cloud_name,
            transformation=self.transformation,
        )
        return url

    def upload_remote(self, image_url: str) -> str:
        """Let Cloudinary fetch the image itself and apply the cover crop."""
        result = cloudinary.uploader.upload(
            image_url,
            transformation=self.transformation,
            **self._upload_options(image_url),
        )
        return result["secure_url"]

    def download(self, image_url: str) -> bytes:
        """Fetch image bytes directly, presenting as a regular browser."""
        resp = self.session.get(
            image_url,
            timeout=self.timeout,
            headers={"User-Agent": self.user_agent, "Accept": IMAGE_ACCEPT},
        )
        resp.raise_for_status()
        data = resp.content
        if not is_image(data):
            raise ValueError(
                f"Response is not an image (Content-Type={resp.headers.get('Content-Type', '')})"
            )
        return data

    def upload_bytes(self, image_url: str, data: bytes) -> str:
        """Stream downloaded bytes to Cloudinary as a raw upload."""
        result = cloudinary.uploader.upload(
            io.BytesIO(data),
            **self._upload_options(image_url),
        )
        return result["secure_url"]

    def rehost(self, image_url: str) -> str:
        """Return a hosted URL for ``image_url`` or an empty string on failure."""
        if not image_url:
            return ""
        try:
            return self.upload_remote(image_url)
        except Exception as exc:  # pylint: disable=broad-except
            logger.info("Remote upload rejected for %s (%s); downloading directly", image_url, exc)

        try:
            data = self.download(image_url)
            return self.upload_bytes(image_url, data)
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Could not rehost %s: %s", image_url, exc)
            return ""
