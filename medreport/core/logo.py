from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
import logging

import httpx
from reportlab.lib.utils import ImageReader

from medreport.core.config import settings


@dataclass(frozen=True)
class ImageSize:
    width: float
    height: float


@dataclass(frozen=True)
class EmbeddedImage:
    reader: ImageReader
    width: float
    height: float

    def scale(self, factor: float) -> ImageSize:
        return ImageSize(width=self.width * factor, height=self.height * factor)


def embed_raster_image(image_bytes: bytes) -> EmbeddedImage:
    """Decode PNG/JPEG bytes into an image reportlab can draw.

    Raises whatever the decoder raises for unreadable input; callers on the
    best-effort path catch it.
    """
    if not image_bytes:
        raise ValueError("image payload is empty")
    reader = ImageReader(BytesIO(image_bytes))
    width, height = reader.getSize()
    return EmbeddedImage(reader=reader, width=float(width), height=float(height))


class LogoLoader:
    def __init__(
        self,
        url: str | None = None,
        *,
        client: httpx.Client | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self._logger = logging.getLogger(__name__)
        self._url = settings.logo_url if url is None else url
        timeout = settings.logo_timeout_seconds if timeout_seconds is None else timeout_seconds
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout), follow_redirects=True)

    def __enter__(self) -> LogoLoader:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client unless it was passed in by the caller."""
        if self._owns_client:
            self._client.close()

    def load(self) -> EmbeddedImage | None:
        """Fetch and decode the logo; any failure yields ``None``."""
        if not self._url:
            self._logger.info("report_logo_disabled")
            return None
        try:
            response = self._client.get(self._url)
            response.raise_for_status()
            return embed_raster_image(response.content)
        except httpx.HTTPError as exc:
            self._logger.warning(
                "report_logo_unavailable",
                extra={"url": self._url, "stage": "fetch", "error": str(exc)},
            )
        except Exception as exc:
            self._logger.warning(
                "report_logo_unavailable",
                extra={"url": self._url, "stage": "embed", "error": str(exc)},
            )
        return None
