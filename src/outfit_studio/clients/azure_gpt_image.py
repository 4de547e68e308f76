from __future__ import annotations

import mimetypes

import httpx

from ..config import AzureGPTImageConfig
from ..errors import ServiceError
from ..types import ImageAsset
from .azure_common import AzureImageEditClient


class AzureGPTImageClient(AzureImageEditClient):
    """Outfit edits through an Azure GPT-Image-1 deployment (multipart upload)."""

    provider_name = "azure_gpt_image_1"

    def __init__(
        self,
        config: AzureGPTImageConfig,
        *,
        timeout_seconds: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            endpoint=config.endpoint,
            deployment=config.deployment,
            api_version=config.api_version,
            headers={"api-key": config.api_key, "Accept": "application/json"},
            poll_interval_seconds=config.poll_interval_seconds,
            max_poll_attempts=config.max_poll_attempts,
            timeout_seconds=timeout_seconds,
            transport=transport,
        )

    async def transform(self, image: str, mime_type: str, prompt: str) -> str:
        """
        Submit the photo and prompt to the edits endpoint and return the edited image.

        The edits endpoint follows the OpenAI spec and takes the image as a
        multipart file part, with ``prompt`` as a form field.
        """
        if not prompt:
            raise ServiceError("GPT-Image-1 request missing required 'prompt' value")
        source = ImageAsset.from_data_uri(image)

        extension = mimetypes.guess_extension(mime_type) or ".png"
        files = [("image", (f"image{extension}", source.data, mime_type))]

        data = await self._submit(data={"prompt": prompt}, files=files)
        return self._to_data_uri(data)
