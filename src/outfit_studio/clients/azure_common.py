from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from typing import Any, Dict

import httpx

from ..errors import ServiceError
from ..types import ImageAsset
from .base import extract_image_base64, sniff_mime_type

logger = logging.getLogger(__name__)


class AzureImageEditClient:
    """
    Shared plumbing for Azure OpenAI-style ``images/edits`` deployments.

    Resolves the edits path from whatever URL the portal hands out, polls
    ``Operation-Location`` when the service answers asynchronously, and
    turns the final payload into a data URI.
    """

    provider_name = "azure"

    def __init__(
        self,
        *,
        endpoint: str,
        deployment: str,
        api_version: str,
        headers: Dict[str, str],
        poll_interval_seconds: float,
        max_poll_attempts: int,
        timeout_seconds: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        url = httpx.URL(endpoint)
        base_url = url.copy_with(path="/", query=None, fragment=None)
        self._session = httpx.AsyncClient(
            base_url=str(base_url),
            headers=headers,
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
        )
        self._poll_interval = poll_interval_seconds
        self._max_poll_attempts = max_poll_attempts
        self._api_version = dict(url.params).get("api-version", api_version)
        self._deployment = deployment

        deployment_path = f"/openai/deployments/{deployment}"
        modification_path: str | None = None

        path = (url.path or "").rstrip("/")
        if path and not path.startswith("/"):
            path = f"/{path}"

        if "/openai/deployments/" in path:
            segment = path.split("/openai/deployments/")[1].split("/")[0]
            if segment:
                deployment_path = f"/openai/deployments/{segment}"
        if "/images/edits" in path or "/images/modifications" in path:
            modification_path = path
        elif "/images/generations" in path:
            modification_path = path.replace("/images/generations", "/images/edits")

        self._modification_path = modification_path or f"{deployment_path}/images/edits"

    @property
    def modification_path(self) -> str:
        return self._modification_path

    async def aclose(self) -> None:
        await self._session.aclose()

    async def _submit(self, **request: Any) -> Dict[str, Any]:
        """POST the edit request and wait for the final payload."""
        logger.info("Calling %s edits endpoint at %s", self.provider_name, self._modification_path)
        response = await self._session.post(
            self._modification_path,
            params={"api-version": self._api_version},
            **request,
        )
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                raise ServiceError(
                    f"{self.provider_name} edits endpoint not found at {self._modification_path}. "
                    "Ensure the endpoint is the full edits URL from the Azure portal "
                    "(.../openai/deployments/<name>/images/edits?api-version=...)."
                ) from exc
            raise

        operation_url = (
            response.headers.get("Operation-Location")
            or response.headers.get("Azure-AsyncOperation")
        )
        if operation_url:
            return await self._poll_operation(operation_url)
        return response.json()

    async def _poll_operation(self, operation_url: str) -> Dict[str, Any]:
        url = self._session.base_url.join(operation_url)
        params: Dict[str, Any] = {}
        if "api-version" not in url.params:
            params["api-version"] = self._api_version

        for _ in range(self._max_poll_attempts):
            response = await self._session.get(url, params=params or None)
            response.raise_for_status()
            data: Dict[str, Any] = response.json()
            status = (data.get("status") or "").lower()

            if status in {"succeeded", "success"}:
                return data
            if status in {"failed", "cancelled", "canceled"}:
                raise ServiceError(f"{self.provider_name} edit failed with status '{status}'")

            await asyncio.sleep(self._poll_interval)

        raise TimeoutError(f"Azure operation did not complete after {self._max_poll_attempts} polls.")

    @staticmethod
    def _to_data_uri(data: Dict[str, Any]) -> str:
        encoded = extract_image_base64(data)
        try:
            image_bytes = base64.b64decode(encoded, validate=True)
        except (ValueError, binascii.Error) as exc:
            raise ServiceError(f"Failed to decode base64 image data: {exc}") from exc
        return ImageAsset(data=image_bytes, mime_type=sniff_mime_type(image_bytes)).data_uri

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.aclose()
