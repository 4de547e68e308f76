from __future__ import annotations

import asyncio
import logging
from typing import Callable, List

from ..clients.base import TransformationService
from ..errors import NoImage, TransformationFailed, ValidationError
from ..types import (
    Failed,
    Idle,
    ImageAsset,
    Processing,
    StyleRequest,
    Success,
    TransformationResult,
    UploadedImage,
    WorkflowSnapshot,
    WorkflowState,
    WorkflowStatus,
)
from .styles import CUSTOM_STYLE_ID, DEFAULT_STYLES, StyleCatalog
from .validator import IncomingFile, MediaValidator

logger = logging.getLogger(__name__)

Listener = Callable[[WorkflowSnapshot], None]


class WorkflowController:
    """
    Drive one photo through upload, outfit transformation and result.

    All mutation goes through the event methods below, and every one of them
    runs to completion without yielding except for the service call inside
    :meth:`request_transformation`. ``_in_flight`` is the single request slot:
    a resolution is only applied if its request still occupies the slot.
    """

    def __init__(
        self,
        service: TransformationService,
        *,
        validator: MediaValidator | None = None,
        styles: StyleCatalog = DEFAULT_STYLES,
    ) -> None:
        self._service = service
        self._validator = validator or MediaValidator()
        self._styles = styles
        self._state: WorkflowState = Idle()
        self._image: UploadedImage | None = None
        self._selected_style_id: str | None = None
        self._error_message: str | None = None
        self._in_flight: StyleRequest | None = None
        self._listeners: List[Listener] = []

    # -- read access ---------------------------------------------------------

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def status(self) -> WorkflowStatus:
        return self._state.status

    @property
    def image(self) -> UploadedImage | None:
        return self._image

    @property
    def result(self) -> TransformationResult | None:
        if isinstance(self._state, Success):
            return self._state.result
        return None

    @property
    def selected_style_id(self) -> str | None:
        return self._selected_style_id

    @property
    def error_message(self) -> str | None:
        return self._error_message

    @property
    def is_processing(self) -> bool:
        return self._in_flight is not None

    @property
    def styles(self) -> StyleCatalog:
        return self._styles

    def snapshot(self) -> WorkflowSnapshot:
        return WorkflowSnapshot(
            state=self._state,
            image=self._image,
            selected_style_id=self._selected_style_id,
            error_message=self._error_message,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with a snapshot after every transition."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Workflow listener %r failed on %s", listener, snapshot.status.value)

    # -- upload --------------------------------------------------------------

    def upload(self, file: IncomingFile) -> UploadedImage | None:
        """Validate ``file`` and install it, or record why it was rejected."""
        if self.is_processing:
            logger.info("Ignoring upload of %s while a transformation is in flight", file.filename)
            return None
        try:
            image = self._validator.validate(file)
        except ValidationError as exc:
            self.reject_upload(exc)
            return None
        self.accept_upload(image)
        return image

    def accept_upload(self, image: UploadedImage) -> None:
        if self.is_processing:
            return
        self._image = image
        self._state = Idle()
        self._selected_style_id = None
        self._error_message = None
        logger.info("Accepted upload %s (%s, %d bytes)", image.filename, image.mime_type, image.size)
        self._notify()

    def reject_upload(self, error: ValidationError) -> None:
        if self.is_processing:
            return
        self._error_message = error.message
        logger.info("Upload rejected: %s", error.message)
        self._notify()

    # -- transformation ------------------------------------------------------

    async def select_style(self, style_id: str) -> TransformationResult | None:
        """Run the preset ``style_id``. Raises ``UnknownStyle`` for ids not in the catalog."""
        preset = self._styles.get(style_id)
        return await self.request_transformation(preset.prompt, preset.id)

    async def submit_custom(self, prompt: str) -> TransformationResult | None:
        """Run a free-text style. Blank prompts are ignored."""
        if not prompt or not prompt.strip():
            return None
        return await self.request_transformation(prompt, CUSTOM_STYLE_ID)

    async def request_transformation(self, prompt: str, style_id: str) -> TransformationResult | None:
        """
        Send the current photo to the transformation service.

        Returns the new result on success. Returns ``None`` when the request
        was refused by a guard (no image, already processing), failed, or
        was overtaken by a reset or new upload before resolving.
        """
        if self._image is None:
            self._error_message = NoImage().message
            logger.info("Transformation requested before any upload")
            self._notify()
            return None
        if self.is_processing:
            logger.debug("Ignoring request for %r: a transformation is already in flight", style_id)
            return None

        request = StyleRequest(prompt=prompt, style_id=style_id)
        image = self._image

        self._in_flight = request
        self._state = Processing(request)
        self._selected_style_id = request.style_id
        self._error_message = None
        logger.info("Requesting outfit transformation with style %r", request.style_id)
        self._notify()

        try:
            output = await self._service.transform(image.data_uri, image.mime_type, request.prompt)
            generated = ImageAsset.from_data_uri(output)
        except asyncio.CancelledError:
            self._fail(request)
            raise
        except Exception:
            logger.warning("Transformation with style %r failed", request.style_id, exc_info=True)
            self._fail(request)
            return None

        return self._succeed(request, image, generated)

    def _succeed(
        self, request: StyleRequest, image: UploadedImage, generated: ImageAsset
    ) -> TransformationResult | None:
        if self._in_flight is not request:
            logger.info("Discarding stale transformation result for style %r", request.style_id)
            return None
        result = TransformationResult(original=image, generated=generated, style_id=request.style_id)
        self._in_flight = None
        self._state = Success(result)
        logger.info("Transformation with style %r succeeded", request.style_id)
        self._notify()
        return result

    def _fail(self, request: StyleRequest) -> None:
        if self._in_flight is not request:
            return
        message = TransformationFailed().message
        self._in_flight = None
        self._state = Failed(message)
        self._error_message = message
        self._notify()

    # -- reset ---------------------------------------------------------------

    def reset(self) -> None:
        """Forget the photo, result, selected style and error."""
        self._in_flight = None
        self._image = None
        self._state = Idle()
        self._selected_style_id = None
        self._error_message = None
        logger.info("Workflow reset")
        self._notify()
