"""CLI entry point for snapmatch."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from PIL import Image
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from snapmatch.diff.image_diff import pixel_diff_ratio
from snapmatch.exceptions import SnapshotConfigurationError
from snapmatch.models.config import SnapshotConfig
from snapmatch.resolver.naming import sanitize_test_name
from snapmatch.resolver.paths import resolve_reference_directory

console = Console()

DEFAULT_CONFIG = "snapmatch.json"


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _load_config(path: str) -> SnapshotConfig:
    if Path(path).exists():
        return SnapshotConfig.from_env(SnapshotConfig.load(path))
    return SnapshotConfig.from_env()


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Snapshot testing helpers: resolve names and reference folders, inspect images."""
    setup_logging(verbose)


@cli.command()
@click.option("--reference-dir", "-r", default=None, help="Fixed reference image directory")
@click.option("--tolerance", "-t", default=0.0, type=float, help="Default tolerance (0..1)")
@click.option("--test-folder", default=None, help="Custom test folder suffix")
def init(reference_dir: str | None, tolerance: float, test_folder: str | None) -> None:
    """Create a default configuration file."""
    config_path = Path(DEFAULT_CONFIG)
    if config_path.exists():
        if not click.confirm(f"{DEFAULT_CONFIG} already exists. Overwrite?"):
            return

    data: dict = {"reference_images_directory": reference_dir, "tolerance": tolerance}
    if test_folder:
        data["folder_suffixes"] = [test_folder]
    cfg = SnapshotConfig(**data)
    cfg.save(config_path)
    console.print(f"[green]Created {config_path}[/green]")
    console.print("\nPoint pytest at it with:")
    console.print(f"  [blue]pytest --snapshot-config {config_path}[/blue]")


@cli.command()
@click.argument("test_file")
@click.option("--config", "-c", default=DEFAULT_CONFIG, help="Config file path")
def resolve(test_file: str, config: str) -> None:
    """Print the reference image directory for a test file."""
    cfg = _load_config(config)
    try:
        directory = resolve_reference_directory(test_file, cfg)
    except SnapshotConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    console.print(str(directory), soft_wrap=True)


@cli.command()
@click.argument("text")
def name(text: str) -> None:
    """Print the snapshot name a test description maps to."""
    console.print(sanitize_test_name(text), markup=False, soft_wrap=True)


@cli.command("list")
@click.argument("directory", type=click.Path(exists=True, file_okay=False, path_type=Path))
def list_images(directory: Path) -> None:
    """List reference images under a directory."""
    images = sorted(directory.rglob("*.png"))
    if not images:
        console.print(f"[yellow]No reference images in {directory}[/yellow]")
        return

    table = Table(title=f"Reference images in {directory}")
    table.add_column("Group", style="bold")
    table.add_column("Snapshot")
    table.add_column("Size", justify="right")
    for path in images:
        with Image.open(path) as img:
            size = f"{img.width}x{img.height}"
        group = str(path.parent.relative_to(directory)) if path.parent != directory else ""
        table.add_row(group, path.stem, size)
    console.print(table)


@cli.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("reference", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--tolerance", "-t", default=0.0, type=float, help="Fraction of pixels allowed to differ")
def compare(image: Path, reference: Path, tolerance: float) -> None:
    """Compare an image against a reference image."""
    with Image.open(image) as a, Image.open(reference) as b:
        current = a.convert("RGBA")
        expected = b.convert("RGBA")

    if current.size != expected.size:
        console.print(
            f"[red]Size mismatch:[/red] {current.width}x{current.height} vs {expected.width}x{expected.height}"
        )
        sys.exit(1)

    ratio = pixel_diff_ratio(expected, current)
    if ratio <= tolerance:
        console.print(f"[green]Match[/green] (pixel diff {ratio:.2%}, tolerance {tolerance:.2%})")
        return
    console.print(f"[red]Mismatch[/red] (pixel diff {ratio:.2%}, tolerance {tolerance:.2%})")
    sys.exit(1)


if __name__ == "__main__":
    cli()
