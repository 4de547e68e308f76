from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from .clients import create_service
from .config import AppConfig, load_config
from .errors import UnknownStyle
from .workflow import DEFAULT_STYLES, CompareExportView, IncomingFile, MediaValidator, WorkflowController


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="outfit-studio",
        description="Restyle the outfit in a photo with a generative image editor.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("styles", help="List the preset styles.")

    transform = subparsers.add_parser("transform", help="Transform the outfit in a photo.")
    transform.add_argument("photo", type=Path, help="JPEG, PNG or WebP photo of a person.")
    style_group = transform.add_mutually_exclusive_group(required=True)
    style_group.add_argument("--style", help="Preset style id (see the 'styles' command).")
    style_group.add_argument("--prompt", help="Free-text description of the outfit.")
    transform.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Where to save the look (defaults to OUTPUT_ROOT_DIR).",
    )
    transform.add_argument(
        "--dotenv",
        type=Path,
        default=None,
        help="Optional path to a .env file containing provider credentials.",
    )
    return parser.parse_args(argv)


def _configure_logging(console: Console, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


def print_styles(console: Console) -> None:
    table = Table(title="Preset styles")
    table.add_column("id", style="bold")
    table.add_column("name")
    table.add_column("prompt", overflow="fold")
    for preset in DEFAULT_STYLES:
        table.add_row(preset.id, f"{preset.icon} {preset.name}".strip(), preset.prompt)
    console.print(table)


async def run_transform(
    config: AppConfig,
    photo: Path,
    *,
    style: str | None,
    prompt: str | None,
    output_dir: Path,
    console: Console,
) -> Path | None:
    """Upload ``photo``, run one transformation and save the result."""
    async with create_service(config) as service:
        controller = WorkflowController(service, validator=MediaValidator(config.upload))
        view = CompareExportView(controller, product_name=config.export.product_name)

        if controller.upload(IncomingFile.from_path(photo)) is None:
            console.print(f"[red]{controller.error_message}[/red]")
            return None

        with Progress(
            SpinnerColumn(),
            TextColumn("[bold]Weaving your new style...[/bold]"),
            TimeElapsedColumn(),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("transform", total=None)
            if style is not None:
                result = await controller.select_style(style)
            else:
                result = await controller.submit_custom(prompt or "")

        if result is None:
            console.print(f"[red]{controller.error_message or 'Nothing to transform.'}[/red]")
            return None

        path = view.save(output_dir)
        console.print(f"[green]Look saved to[/green] {path}")
        return path


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    console = Console()
    _configure_logging(console, args.verbose)

    if args.command == "styles":
        print_styles(console)
        return

    if not args.photo.exists():
        console.print(f"[red]Photo not found:[/red] {args.photo}")
        raise SystemExit(1)
    if args.style is not None and args.style not in DEFAULT_STYLES:
        console.print(f"[red]{UnknownStyle(args.style)}[/red]")
        raise SystemExit(2)

    config = load_config(args.dotenv)
    output_dir = args.output_dir or config.export.root_dir

    saved = asyncio.run(
        run_transform(
            config,
            args.photo,
            style=args.style,
            prompt=args.prompt,
            output_dir=output_dir,
            console=console,
        )
    )
    if saved is None:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
