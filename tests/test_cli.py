"""
Tests for the command-line surface.
"""

import io
from unittest.mock import patch

import pytest
from rich.console import Console

from conftest import make_image_bytes
from outfit_studio import cli
from outfit_studio.config import AppConfig, BFLFluxConfig, ExportConfig


class FakeService:
    def __init__(self, output=None, error=None):
        self.output = output
        self.error = error
        self.prompts = []
        self.closed = False

    async def transform(self, image, mime_type, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.output

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.closed = True


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=200)


@pytest.fixture
def config():
    return AppConfig(provider="bfl", bfl=BFLFluxConfig(api_key="k"), export=ExportConfig(product_name="looks"))


@pytest.fixture
def photo(tmp_path):
    path = tmp_path / "me.png"
    path.write_bytes(make_image_bytes("PNG"))
    return path


class TestParseArgs:

    def test_transform_with_style(self, tmp_path):
        args = cli.parse_args(["transform", "me.png", "--style", "cyberpunk", "--output-dir", str(tmp_path)])
        assert args.command == "transform"
        assert args.style == "cyberpunk"
        assert args.prompt is None
        assert args.output_dir == tmp_path

    def test_style_and_prompt_are_exclusive(self):
        with pytest.raises(SystemExit):
            cli.parse_args(["transform", "me.png", "--style", "gala", "--prompt", "a tux"])

    def test_one_of_style_or_prompt_required(self):
        with pytest.raises(SystemExit):
            cli.parse_args(["transform", "me.png"])


class TestRunTransform:

    @pytest.mark.asyncio
    async def test_saves_generated_look(self, config, photo, console, tmp_path, generated_asset):
        service = FakeService(output=generated_asset.data_uri)
        with patch("outfit_studio.cli.create_service", return_value=service):
            path = await cli.run_transform(
                config, photo, style="business", prompt=None, output_dir=tmp_path / "out", console=console
            )

        assert path is not None
        assert path.parent == tmp_path / "out"
        assert path.name.startswith("looks-")
        assert path.read_bytes() == generated_asset.data
        assert service.closed
        assert "navy blue business suit" in service.prompts[0]

    @pytest.mark.asyncio
    async def test_custom_prompt(self, config, photo, console, tmp_path, generated_asset):
        service = FakeService(output=generated_asset.data_uri)
        with patch("outfit_studio.cli.create_service", return_value=service):
            await cli.run_transform(
                config, photo, style=None, prompt="a yellow raincoat", output_dir=tmp_path, console=console
            )
        assert service.prompts == ["a yellow raincoat"]

    @pytest.mark.asyncio
    async def test_rejected_upload_reports_error(self, config, tmp_path, console):
        bogus = tmp_path / "notes.txt"
        bogus.write_text("hello")
        service = FakeService()
        with patch("outfit_studio.cli.create_service", return_value=service):
            path = await cli.run_transform(
                config, bogus, style="gala", prompt=None, output_dir=tmp_path, console=console
            )

        assert path is None
        assert service.prompts == []
        assert "Please upload a valid image" in console.file.getvalue()

    @pytest.mark.asyncio
    async def test_service_failure_reports_generic_message(self, config, photo, console, tmp_path):
        service = FakeService(error=RuntimeError("quota exceeded"))
        with patch("outfit_studio.cli.create_service", return_value=service):
            path = await cli.run_transform(
                config, photo, style="gala", prompt=None, output_dir=tmp_path, console=console
            )

        assert path is None
        assert "Failed to generate outfit" in console.file.getvalue()
        assert list(tmp_path.glob("*.png")) == [photo]


class TestMain:

    def test_styles_command_lists_presets(self, capsys):
        cli.main(["styles"])
        out = capsys.readouterr().out
        for style_id in ("cyberpunk", "business", "casual", "fantasy", "gala", "summer", "winter"):
            assert style_id in out

    def test_missing_photo_exits(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["transform", str(tmp_path / "nope.png"), "--style", "gala"])
        assert exc_info.value.code == 1

    def test_unknown_style_exits(self, photo):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["transform", str(photo), "--style", "pirate"])
        assert exc_info.value.code == 2
