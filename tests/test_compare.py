"""
Tests for hold-to-compare and export.
"""

from unittest.mock import AsyncMock

import pytest

from conftest import make_image_bytes
from outfit_studio.errors import NothingToExport
from outfit_studio.types import ImageAsset
from outfit_studio.workflow import CompareExportView, IncomingFile, WorkflowController

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@pytest.fixture
def service(generated_asset):
    mock = AsyncMock()
    mock.transform.return_value = generated_asset.data_uri
    return mock


@pytest.fixture
def controller(service):
    return WorkflowController(service)


@pytest.fixture
def view(controller):
    return CompareExportView(controller, product_name="gemini-vogue", clock=lambda: 1_700_000_000.5)


class TestActiveImage:

    def test_nothing_uploaded(self, view):
        assert view.active_image is None

    def test_shows_upload_before_any_result(self, view, controller, png_file):
        uploaded = controller.upload(png_file)
        assert view.active_image == uploaded

    def test_compare_has_no_effect_without_result(self, view, controller, png_file):
        uploaded = controller.upload(png_file)
        view.press()
        assert view.comparing
        assert view.active_image == uploaded

    @pytest.mark.asyncio
    async def test_hold_to_compare(self, view, controller, png_file, generated_asset):
        uploaded = controller.upload(png_file)
        await controller.select_style("cyberpunk")

        assert view.active_image == generated_asset
        view.press()
        assert view.active_image == uploaded
        view.release()
        assert not view.comparing
        assert view.active_image == generated_asset

    @pytest.mark.asyncio
    async def test_new_upload_replaces_stale_generated_image(self, view, controller, png_file):
        controller.upload(png_file)
        await controller.select_style("cyberpunk")

        second = controller.upload(IncomingFile("b.png", "image/png", make_image_bytes(color=(1, 2, 3))))

        assert view.active_image == second


class TestExport:

    def test_export_requires_result(self, view, controller, png_file):
        controller.upload(png_file)
        assert not view.can_export
        with pytest.raises(NothingToExport):
            view.export()

    @pytest.mark.asyncio
    async def test_export_uses_timestamped_name(self, view, controller, png_file, generated_asset):
        controller.upload(png_file)
        await controller.select_style("gala")

        artifact = view.export()

        assert view.can_export
        assert artifact.filename == "gemini-vogue-1700000000500.png"
        assert artifact.mime_type == "image/png"
        assert artifact.data == generated_asset.data

    @pytest.mark.asyncio
    async def test_export_reencodes_non_png_output(self, png_file):
        jpeg = ImageAsset(data=make_image_bytes("JPEG"), mime_type="image/jpeg")
        service = AsyncMock()
        service.transform.return_value = jpeg.data_uri
        controller = WorkflowController(service)
        view = CompareExportView(controller)
        controller.upload(png_file)
        await controller.select_style("winter")

        artifact = view.export()

        assert artifact.filename.startswith("outfit-studio-")
        assert artifact.data.startswith(PNG_SIGNATURE)

    @pytest.mark.asyncio
    async def test_save_writes_file(self, view, controller, png_file, generated_asset, tmp_path):
        controller.upload(png_file)
        await controller.select_style("casual")

        path = view.save(tmp_path / "looks")

        assert path == tmp_path / "looks" / "gemini-vogue-1700000000500.png"
        assert path.read_bytes() == generated_asset.data
