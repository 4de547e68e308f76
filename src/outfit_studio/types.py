from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from .errors import ServiceError

_DATA_URI_PATTERN = re.compile(r"^data:(?P<mime>[^;,]*)(?P<params>(;[^;,]*)*),(?P<data>.*)$", re.DOTALL)


@dataclass(frozen=True, slots=True)
class ImageAsset:
    """Image bytes tagged with their MIME type."""

    data: bytes
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def data_uri(self) -> str:
        """Return the image as a base64 data URI."""
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"

    @classmethod
    def from_data_uri(cls, value: str) -> "ImageAsset":
        """
        Parse a base64 data URI.

        A bare base64 string, or a URI with no MIME type, is treated as
        ``image/png``.
        """
        match = _DATA_URI_PATTERN.match(value.strip())
        if match is None:
            mime_type = "image/png"
            payload = value.strip()
        else:
            mime_type = match.group("mime") or "image/png"
            if ";base64" not in match.group("params"):
                raise ServiceError("Only base64 data URIs are supported")
            payload = match.group("data")
        try:
            data = base64.b64decode(payload, validate=True)
        except (ValueError, binascii.Error) as exc:
            raise ServiceError(f"Invalid base64 image data: {exc}") from exc
        if not data:
            raise ServiceError("Image data URI is empty")
        return cls(data=data, mime_type=mime_type)


@dataclass(frozen=True, slots=True)
class UploadedImage(ImageAsset):
    """A validated upload. Only produced by ``MediaValidator.validate``."""

    filename: str | None = None


@dataclass(frozen=True, slots=True)
class StyleRequest:
    """Prompt plus the preset id (or ``custom``) it came from."""

    prompt: str
    style_id: str

    def __post_init__(self) -> None:
        prompt = self.prompt.strip()
        if not prompt:
            raise ValueError("Style prompt must not be empty")
        if not self.style_id:
            raise ValueError("Style id must not be empty")
        object.__setattr__(self, "prompt", prompt)


@dataclass(frozen=True, slots=True)
class TransformationResult:
    original: UploadedImage
    generated: ImageAsset
    style_id: str


class WorkflowStatus(str, Enum):
    IDLE = "IDLE"
    PROCESSING = "PROCESSING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


@dataclass(frozen=True, slots=True)
class Idle:
    status: ClassVar[WorkflowStatus] = WorkflowStatus.IDLE


@dataclass(frozen=True, slots=True)
class Processing:
    request: StyleRequest

    status: ClassVar[WorkflowStatus] = WorkflowStatus.PROCESSING


@dataclass(frozen=True, slots=True)
class Success:
    result: TransformationResult

    status: ClassVar[WorkflowStatus] = WorkflowStatus.SUCCESS


@dataclass(frozen=True, slots=True)
class Failed:
    message: str

    status: ClassVar[WorkflowStatus] = WorkflowStatus.ERROR


WorkflowState = Union[Idle, Processing, Success, Failed]


@dataclass(frozen=True, slots=True)
class WorkflowSnapshot:
    """Read-only view of the controller handed to listeners and views.

    ``error_message`` is the message to display: it always holds the most
    recent error. ``Failed.message`` records why the last transformation
    failed and is not updated by later upload rejections.
    """

    state: WorkflowState
    image: UploadedImage | None
    selected_style_id: str | None
    error_message: str | None

    @property
    def status(self) -> WorkflowStatus:
        return self.state.status

    @property
    def result(self) -> TransformationResult | None:
        if isinstance(self.state, Success):
            return self.state.result
        return None


@dataclass(frozen=True, slots=True)
class ExportArtifact:
    """A downloadable file produced from the generated image."""

    filename: str
    data: bytes
    mime_type: str = "image/png"
