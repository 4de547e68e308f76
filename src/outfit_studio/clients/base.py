from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable

from ..errors import ServiceError


@runtime_checkable
class TransformationService(Protocol):
    """Black-box image editor: ``(image, mime_type, prompt) -> image``.

    Images cross this boundary as base64 data URIs.
    """

    async def transform(self, image: str, mime_type: str, prompt: str) -> str:
        ...


def sniff_mime_type(data: bytes, default: str = "image/png") -> str:
    """Guess an image MIME type from its leading bytes."""
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data[:3] == b"\xff\xd8\xff":
        return "image/jpeg"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if data.startswith(b"GIF8"):
        return "image/gif"
    return default


def extract_image_base64(data: Mapping[str, Any]) -> str:
    """
    Pull the first base64 image out of an image-edit response.

    Providers disagree on the envelope, so the OpenAI-style ``data`` list,
    a nested ``result.data`` list, an ``images`` list and top-level
    ``b64_json``/``image`` keys are all accepted.
    """
    entries = (
        data.get("data")
        or (data.get("result") or {}).get("data")
        or data.get("images")
        or []
    )
    if entries:
        first = entries[0]
        if isinstance(first, str):
            return first
        encoded = first.get("b64_json") or first.get("base64")
        if encoded:
            return encoded

    for key in ("b64_json", "image"):
        value = data.get(key)
        if isinstance(value, str) and value:
            return value

    raise ServiceError(f"Response missing image data. Response format: {list(data.keys())}")
