from __future__ import annotations

import io
import logging
import time
from pathlib import Path
from typing import Callable

from PIL import Image

from ..errors import NothingToExport
from ..types import ExportArtifact, ImageAsset, WorkflowSnapshot
from .controller import WorkflowController

logger = logging.getLogger(__name__)


def active_image(snapshot: WorkflowSnapshot, comparing: bool) -> ImageAsset | None:
    """Pick the image to display for ``snapshot``.

    While comparing, the original is shown; otherwise the generated look,
    falling back to the upload. ``comparing`` is ignored without a result.
    """
    result = snapshot.result
    if comparing and result is not None:
        return result.original
    if result is not None:
        return result.generated
    return snapshot.image


def export_filename(product_name: str, timestamp_ms: int) -> str:
    return f"{product_name}-{timestamp_ms}.png"


def _as_png(image: ImageAsset) -> bytes:
    if image.mime_type == "image/png":
        return image.data
    with Image.open(io.BytesIO(image.data)) as source:
        with io.BytesIO() as buffer:
            source.save(buffer, format="PNG")
            return buffer.getvalue()


class CompareExportView:
    """Hold-to-compare toggle and export for a :class:`WorkflowController`."""

    def __init__(
        self,
        controller: WorkflowController,
        *,
        product_name: str = "outfit-studio",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._controller = controller
        self._product_name = product_name
        self._clock = clock
        self._comparing = False

    @property
    def comparing(self) -> bool:
        return self._comparing

    def press(self) -> None:
        self._comparing = True

    def release(self) -> None:
        self._comparing = False

    @property
    def active_image(self) -> ImageAsset | None:
        return active_image(self._controller.snapshot(), self._comparing)

    @property
    def can_export(self) -> bool:
        return self._controller.result is not None

    def export(self) -> ExportArtifact:
        """Build the download for the current generated image."""
        result = self._controller.result
        if result is None:
            raise NothingToExport()
        timestamp_ms = int(self._clock() * 1000)
        return ExportArtifact(
            filename=export_filename(self._product_name, timestamp_ms),
            data=_as_png(result.generated),
        )

    def save(self, directory: str | Path) -> Path:
        """Write :meth:`export` into ``directory`` and return the file path."""
        artifact = self.export()
        target_dir = Path(directory)
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / artifact.filename
        path.write_bytes(artifact.data)
        logger.info("Saved look to %s", path)
        return path
