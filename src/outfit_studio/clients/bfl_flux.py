from __future__ import annotations

import base64
import binascii
import logging

import httpx

from ..config import BFLFluxConfig
from ..errors import ServiceError
from ..types import ImageAsset
from .base import extract_image_base64, sniff_mime_type

logger = logging.getLogger(__name__)


class BFLFluxClient:
    """Client for the official BFL Flux image modification endpoint."""

    def __init__(
        self,
        config: BFLFluxConfig,
        *,
        timeout_seconds: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        url = httpx.URL(config.api_url)
        base_url = url.copy_with(path="/", query=None, fragment=None)
        self._session = httpx.AsyncClient(
            base_url=str(base_url),
            headers={
                "Authorization": f"Bearer {config.api_key}",
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
        )

        path = (url.path or "").rstrip("/")
        if not path or path == "/v1/images":
            self._modification_path = "/v1/images/edits"
        elif "/images/generations" in path:
            self._modification_path = path.replace("images/generations", "images/edits")
        else:
            self._modification_path = path

    @property
    def modification_path(self) -> str:
        return self._modification_path

    async def aclose(self) -> None:
        await self._session.aclose()

    async def transform(self, image: str, mime_type: str, prompt: str) -> str:
        """
        Issue an image modification request to the BFL API.

        Request body::

            {"input": {"prompt": "...", "image": "<base64>"}}
        """
        if not prompt:
            raise ServiceError("BFL request missing required 'prompt' value")
        source = ImageAsset.from_data_uri(image)
        payload = {
            "input": {
                "prompt": prompt,
                "image": base64.b64encode(source.data).decode("utf-8"),
            }
        }

        logger.info("Calling BFL Flux edits endpoint at %s", self._modification_path)
        response = await self._session.post(self._modification_path, json=payload)
        response.raise_for_status()

        encoded = extract_image_base64(response.json())
        try:
            image_bytes = base64.b64decode(encoded, validate=True)
        except (ValueError, binascii.Error) as exc:
            raise ServiceError("BFL response did not include valid base64 image data") from exc

        return ImageAsset(data=image_bytes, mime_type=sniff_mime_type(image_bytes)).data_uri

    async def __aenter__(self) -> "BFLFluxClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.aclose()
