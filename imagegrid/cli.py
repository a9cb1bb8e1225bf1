"""Command Line Interface for ImageGrid."""

from pathlib import Path
from typing import List, Optional, Tuple

import typer
from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, IntPrompt, Prompt

from .config import Config, load_config
from .dates import EPOCH_DATE, estimate_rows
from .exceptions import CompositionProcessFailure, DirectoryNotFound, NoImagesFound
from .montage import COMPOSITORS, parse_resolution
from .pipeline import ScanResult, compose_grid, find_images
from .utils import (
    build_output_path,
    configure_logging,
    normalize_extensions,
    split_extension_list,
    validate_directory_path,
)


console = Console()
app = typer.Typer(
    name="imagegrid",
    help="Create a single image grid from many date-named images",
    no_args_is_help=True,
    rich_markup_mode="rich"
)


def _print_message(message: str, style: Optional[str] = None) -> None:
    """Print message with optional styling."""
    console.print(message, style=style)


def _print_error(message: str) -> None:
    """Print error message."""
    console.print(f"[red]Error:[/red] {message}")


def _print_warning(message: str) -> None:
    """Print warning message."""
    console.print(f"[yellow]Warning:[/yellow] {message}")


def _print_success(message: str) -> None:
    """Print success message."""
    console.print(f"[green]Success:[/green] {message}")


def _prepare_config(config_file: Optional[str], verbose: bool,
                    backend: Optional[str] = None) -> Config:
    """Load configuration and apply command line overrides."""
    config = load_config(config_file)

    if verbose:
        config.set('output.verbosity', 2)
    if backend is not None:
        if backend not in COMPOSITORS:
            _print_error(f"Unknown backend '{backend}'. Available: {', '.join(COMPOSITORS)}")
            raise typer.Exit(1)
        config.set('compositor.backend', backend)

    configure_logging(config.verbosity)
    return config


def _resolve_extensions(config: Config, extensions: Optional[List[str]], ask: bool) -> List[str]:
    """Work out the extensions to search for, prompting if needed."""
    if extensions:
        selected = normalize_extensions(
            ext for value in extensions for ext in split_extension_list(value)
        )
    elif not ask:
        selected = normalize_extensions(config.extensions)
    else:
        available = ', '.join(config.available_extensions)
        while True:
            answer = Prompt.ask(
                f"Select the image extensions to include (at least one of {available})",
                default=', '.join(config.extensions),
                console=console,
            )
            selected = split_extension_list(answer)
            unsupported = [ext for ext in selected if not config.is_supported_extension(ext)]
            if selected and not unsupported:
                break
            if unsupported:
                _print_message(f"[red]Unsupported extension(s): {', '.join(unsupported)}[/red]")
            else:
                _print_message("[red]You must choose at least one extension.[/red]")

    unsupported = [ext for ext in selected if not config.is_supported_extension(ext)]
    if unsupported:
        _print_error(f"Unsupported extension(s): {', '.join(unsupported)}. "
                     f"Choose from {', '.join(config.available_extensions)}")
        raise typer.Exit(1)
    if not selected:
        _print_error("You must choose at least one extension.")
        raise typer.Exit(1)
    return selected


def _resolve_directory(directory: Optional[str], ask: bool) -> Path:
    """Work out the directory holding the photos, prompting if needed."""
    if directory is not None:
        problem = validate_directory_path(directory)
        if problem:
            _print_error(escape(problem))
            raise typer.Exit(1)
        return Path(directory).resolve()

    if not ask or Confirm.ask("Are you currently in the directory with the photos?",
                              default=True, console=console):
        return Path.cwd()

    while True:
        chosen = Prompt.ask("Please enter the directory path where the photos are located",
                            console=console)
        problem = validate_directory_path(chosen)
        if problem is None:
            return Path(chosen).resolve()
        _print_message(f"[red]{escape(problem)}[/red]")


def _resolve_images_per_row(config: Config, per_row: Optional[int], ask: bool) -> int:
    if per_row is not None:
        return per_row
    if not ask:
        return config.images_per_row

    while True:
        value = IntPrompt.ask("How many images should be in each row?",
                              default=config.images_per_row, console=console)
        if value > 0:
            return value
        _print_message("[red]Please enter a valid positive integer.[/red]")


def _resolve_resolution(config: Config, resolution: Optional[str], ask: bool) -> str:
    if resolution is None:
        if not ask:
            resolution = config.resolution
        else:
            resolution = Prompt.ask(
                "Select the resolution of each photo in the output grid",
                choices=config.resolution_choices,
                default=config.resolution,
                console=console,
            )

    try:
        return str(parse_resolution(resolution))
    except ValueError as e:
        _print_error(str(e))
        raise typer.Exit(1)


def _resolve_output(config: Config, name: Optional[str], output_format: Optional[str],
                    ask: bool) -> Tuple[str, str]:
    if name is None:
        name = config.output_name
        if ask:
            name = Prompt.ask("Enter a name for the output file (without extension)",
                              default=name, console=console)

    formats = normalize_extensions(config.output_formats)
    if output_format is None:
        output_format = config.output_format
        if ask:
            output_format = Prompt.ask("Choose output image format", choices=formats,
                                       default=output_format, console=console)

    output_format = normalize_extensions([output_format])[0] if output_format.strip() else ''
    if output_format not in formats:
        _print_error(f"Unsupported output format '{output_format}'. Choose from {', '.join(formats)}")
        raise typer.Exit(1)
    return name, output_format


def _report_scan(scan: ScanResult) -> None:
    """Print duplicates and the date summary of a scan."""
    if scan.duplicates:
        _print_message("\n[yellow]Duplicate filenames detected (these will be skipped):[/yellow]")
        for duplicate in scan.duplicates:
            _print_message(f"[yellow]{escape(str(duplicate.path))}[/yellow]")
        _print_message("")

    summary = scan.summary
    for path in summary.fallback_dated:
        _print_warning(f"No valid date in {escape(path.name)}, sorted as {EPOCH_DATE.isoformat()}")

    _print_message(f"[green]Found a total of {len(summary)} images.[/green]")
    _print_message(f"[green]Earliest date: {summary.earliest_date.isoformat()}[/green]")
    _print_message(f"[green]Latest date:   {summary.latest_date.isoformat()}[/green]")
    _print_message(f"[green]Number of days: {summary.day_difference}[/green]\n")


def _locate(directory: Path, extensions: List[str]) -> Optional[ScanResult]:
    """Run the search, reporting an empty result as a notice."""
    try:
        return find_images(directory, extensions)
    except NoImagesFound:
        _print_message("[red]No images found matching the given extensions.[/red]")
        return None
    except DirectoryNotFound as e:
        _print_error(escape(str(e)))
        raise typer.Exit(1)


@app.command()
def create(
    directory: Optional[str] = typer.Argument(None, help="Directory containing the photos (default: ask, or current directory)"),
    extensions: Optional[List[str]] = typer.Option(None, "--ext", "-e", help="Image extension to include, may be repeated"),
    per_row: Optional[int] = typer.Option(None, "--per-row", "-n", min=1, help="Number of images in each row"),
    resolution: Optional[str] = typer.Option(None, "--resolution", "-r", help="Size of each image in the grid, WIDTHxHEIGHT"),
    name: Optional[str] = typer.Option(None, "--name", "-o", help="Output file name without extension"),
    output_format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: .jpg or .png"),
    backend: Optional[str] = typer.Option(None, "--backend", "-b", help="Compositor: montage or pillow"),
    config_file: Optional[str] = typer.Option(None, "--config", "-c", help="Path to configuration file"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Use configured defaults instead of prompting"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output")
) -> None:
    """Create a single image grid from date-named photos."""
    config = _prepare_config(config_file, verbose, backend)
    ask = not yes

    working_dir = _resolve_directory(directory, ask)
    selected = _resolve_extensions(config, extensions, ask)

    ext_list = ','.join(selected)
    _print_message(f"\n[cyan]All files should be in yyyymmdd*{{{ext_list}}} format.[/cyan]\n")

    scan = _locate(working_dir, selected)
    if scan is None:
        return
    _report_scan(scan)

    images_per_row = _resolve_images_per_row(config, per_row, ask)
    row_estimate = estimate_rows(len(scan.sorted_files), images_per_row)
    _print_message(f"\n[cyan]With {images_per_row} images per row, you would have "
                   f"approximately {row_estimate} rows.[/cyan]\n")

    cell_resolution = _resolve_resolution(config, resolution, ask)
    output_name, output_ext = _resolve_output(config, name, output_format, ask)

    output_file = build_output_path(working_dir, output_name, output_ext)
    _print_message(f"\n[cyan]Creating image grid: {escape(str(output_file))}[/cyan]\n")

    try:
        compose_grid(scan, images_per_row, cell_resolution, output_file, config)
    except CompositionProcessFailure as e:
        _print_error(f"Error while creating montage: {escape(str(e))}")
        raise typer.Exit(1)

    _print_success(f"Created output file at: {escape(str(output_file))}")


@app.command()
def scan(
    source_path: str = typer.Argument(..., help="Directory to scan for date-named photos"),
    extensions: Optional[List[str]] = typer.Option(None, "--ext", "-e", help="Image extension to include, may be repeated"),
    config_file: Optional[str] = typer.Option(None, "--config", "-c", help="Path to configuration file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output")
) -> None:
    """Report the date-named photos a grid would contain."""
    config = _prepare_config(config_file, verbose)
    directory = _resolve_directory(source_path, ask=False)
    selected = _resolve_extensions(config, extensions, ask=False)

    _print_message(f"[blue]Scanning:[/blue] {escape(str(directory))}")
    _print_message(f"[blue]Extensions:[/blue] {', '.join(selected)}\n")

    result = _locate(directory, selected)
    if result is None:
        return
    _report_scan(result)

    if verbose:
        for record in result.summary.records:
            _print_message(f"  {record.parsed_date.isoformat()}  {escape(str(record.path))}")


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    config_file: Optional[str] = typer.Option(None, "--config", "-c", help="Path to configuration file"),
    create_default: bool = typer.Option(False, "--create-default", help="Create default configuration file")
) -> None:
    """Manage ImageGrid configuration."""
    try:
        if create_default:
            default_config_path = Path("imagegrid_config.yaml")
            cfg = load_config()
            cfg.save_config(default_config_path)
            _print_success(f"Created default configuration: {default_config_path}")
            return

        cfg = load_config(config_file)

        if show:
            _print_message("[blue]Current Configuration:[/blue]")
            _print_message(f"Extensions: {', '.join(cfg.extensions)}")
            _print_message(f"Images per row: {cfg.images_per_row}")
            _print_message(f"Resolution: {cfg.resolution}")
            _print_message(f"Background: {cfg.background}")
            _print_message(f"Output: {cfg.output_name}{cfg.output_format}")
            _print_message(f"Compositor: {cfg.compositor_backend} ({cfg.compositor_command})")
            _print_message(f"Verbosity: {cfg.verbosity}")
        else:
            _print_message("Use --show to display current configuration")
            _print_message("Use --create-default to create a default configuration file")

    except OSError as e:
        _print_error(f"Failed to manage configuration: {e}")
        raise typer.Exit(1)


@app.callback(invoke_without_command=True)
def main(
    version: bool = typer.Option(False, "--version", help="Show version and exit")
) -> None:
    """ImageGrid - Create a single image grid from many date-named images."""
    if version:
        from . import __version__
        _print_message(f"ImageGrid {__version__}")
        raise typer.Exit()


if __name__ == "__main__":
    app()
