from __future__ import annotations

import base64

import httpx

from ..config import AzureFluxConfig
from ..errors import ServiceError
from ..types import ImageAsset
from .azure_common import AzureImageEditClient


class AzureFluxClient(AzureImageEditClient):
    """Outfit edits through an Azure-hosted Flux Kontext deployment (JSON body)."""

    provider_name = "azure_flux"

    def __init__(
        self,
        config: AzureFluxConfig,
        *,
        timeout_seconds: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            endpoint=config.endpoint,
            deployment=config.deployment,
            api_version=config.api_version,
            headers={"api-key": config.api_key, "Content-Type": "application/json"},
            poll_interval_seconds=config.poll_interval_seconds,
            max_poll_attempts=config.max_poll_attempts,
            timeout_seconds=timeout_seconds,
            transport=transport,
        )

    async def transform(self, image: str, mime_type: str, prompt: str) -> str:
        if not prompt:
            raise ServiceError("Azure Flux request missing required 'prompt' value")
        source = ImageAsset.from_data_uri(image)

        body = {
            "model": self._deployment,
            "prompt": prompt,
            "image": base64.b64encode(source.data).decode("utf-8"),
        }
        data = await self._submit(json=body)
        return self._to_data_uri(data)
