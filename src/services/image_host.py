"""Cloudinary image host client."""

import hashlib
import logging
import time
from dataclasses import dataclass
from pathlib import Path

import anyio
import httpx

from src.config import Settings, get_settings
from src.errors import UploadError

logger = logging.getLogger(__name__)


@dataclass
class HostedImage:
    """Result of a successful upload."""

    secure_url: str
    public_id: str | None = None


def sign_params(params: dict[str, str], api_secret: str) -> str:
    """Cloudinary request signature: sha1 of the sorted params plus the secret."""
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params) if params[key] != "")
    return hashlib.sha1(f"{to_sign}{api_secret}".encode()).hexdigest()  # noqa: S324


class CloudinaryImageHost:
    """Forwards staged images to Cloudinary and returns their public URL.

    The underlying HTTP client is opened by ``connect`` and released by
    ``close``; the application does both in its lifespan.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.timeout = 60.0
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def upload_url(self) -> str:
        base = self.settings.cloudinary_base_url.rstrip("/")
        return f"{base}/{self.settings.cloudinary_cloud_name}/image/upload"

    async def connect(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def upload(self, path: Path, folder: str) -> HostedImage:
        """Upload one image file into ``folder``.

        Raises UploadError on any transport or HTTP failure. No retries.
        """
        await self.connect()

        params = {"folder": folder, "timestamp": str(int(time.time()))}
        signature = sign_params(params, self.settings.cloudinary_api_secret)
        data = {**params, "api_key": self.settings.cloudinary_api_key, "signature": signature}

        try:
            content = await anyio.Path(path).read_bytes()
            response = await self._client.post(
                self.upload_url,
                data=data,
                files={"file": (Path(path).name, content)},
            )
            response.raise_for_status()
            payload = response.json()
            return HostedImage(secure_url=payload["secure_url"], public_id=payload.get("public_id"))
        except (httpx.HTTPError, OSError, KeyError, ValueError) as e:
            logger.error(f"Image upload of {path} failed: {e}")
            raise UploadError("Image could not be uploaded") from e
