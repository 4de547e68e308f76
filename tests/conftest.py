"""
Shared fixtures for the outfit workflow tests.
"""

import asyncio
import io
import os

import pytest
from PIL import Image

from outfit_studio.types import ImageAsset
from outfit_studio.workflow import IncomingFile, MediaValidator, WorkflowController


def make_image_bytes(fmt="PNG", size=(8, 8), color=(200, 30, 30)):
    """Encode a solid-colour image with Pillow."""
    with io.BytesIO() as buffer:
        Image.new("RGB", size, color).save(buffer, format=fmt)
        return buffer.getvalue()


def make_noise_image(fmt, size):
    """Random pixels; compresses badly so file size tracks pixel count."""
    width, height = size
    image = Image.frombytes("RGB", size, os.urandom(width * height * 3))
    with io.BytesIO() as buffer:
        image.save(buffer, format=fmt)
        return buffer.getvalue()


def make_noise_png(size):
    return make_noise_image("PNG", size)


class GatedService:
    """Transformation service that blocks until ``release`` is set."""

    def __init__(self, output=None, error=None):
        self.output = output
        self.error = error
        self.calls = []
        self.release = asyncio.Event()

    async def transform(self, image, mime_type, prompt):
        self.calls.append((image, mime_type, prompt))
        await self.release.wait()
        if self.error is not None:
            raise self.error
        return self.output


@pytest.fixture
def png_bytes():
    return make_image_bytes("PNG")


@pytest.fixture
def png_file(png_bytes):
    return IncomingFile(filename="portrait.png", content_type="image/png", data=png_bytes)


@pytest.fixture
def generated_asset():
    return ImageAsset(data=make_image_bytes("PNG", color=(20, 200, 90)), mime_type="image/png")


@pytest.fixture
def gated_service(generated_asset):
    return GatedService(output=generated_asset.data_uri)


@pytest.fixture
def controller(gated_service):
    return WorkflowController(gated_service, validator=MediaValidator())
