from __future__ import annotations

import io
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path

from PIL import Image

from ..config import UploadConfig
from ..errors import DecodeFailed, TooLarge, UnsupportedType
from ..types import UploadedImage

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IncomingFile:
    """A file handed over by the picker: name, declared MIME type and bytes."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path: str | Path) -> "IncomingFile":
        file_path = Path(path)
        content_type, _ = mimetypes.guess_type(file_path.name)
        return cls(
            filename=file_path.name,
            content_type=content_type or "application/octet-stream",
            data=file_path.read_bytes(),
        )


class MediaValidator:
    """Check uploads against the configured limits and decode them."""

    def __init__(self, config: UploadConfig | None = None) -> None:
        self._config = config or UploadConfig()

    @property
    def config(self) -> UploadConfig:
        return self._config

    def validate(self, file: IncomingFile) -> UploadedImage:
        """
        Return the upload as an :class:`UploadedImage`.

        Raises
        ------
        UnsupportedType
            Declared MIME type is not in the allowed set.
        TooLarge
            File exceeds the configured maximum size.
        DecodeFailed
            Bytes do not form a readable image.
        """
        content_type = (file.content_type or "").split(";")[0].strip().lower()
        if content_type not in self._config.allowed_types:
            logger.info("Rejected %s: unsupported type %r", file.filename, file.content_type)
            raise UnsupportedType()

        if file.size > self._config.max_size_bytes:
            logger.info("Rejected %s: %d bytes exceeds limit", file.filename, file.size)
            raise TooLarge(self._config.max_size_mb)

        self._verify_decodable(file)
        return UploadedImage(data=file.data, mime_type=content_type, filename=file.filename)

    @staticmethod
    def _verify_decodable(file: IncomingFile) -> None:
        if not file.data:
            raise DecodeFailed()
        try:
            with Image.open(io.BytesIO(file.data)) as image:
                image.verify()
            # verify() only walks headers for some formats; load() decodes the pixel data
            with Image.open(io.BytesIO(file.data)) as image:
                image.load()
        except Exception as exc:
            logger.info("Rejected %s: could not decode image (%s)", file.filename, exc)
            raise DecodeFailed() from exc
