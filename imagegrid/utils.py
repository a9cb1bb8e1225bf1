"""Utility functions for ImageGrid."""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from rich.console import Console
from rich.logging import RichHandler


def normalize_extensions(extensions: Iterable[str]) -> List[str]:
    """Normalize file extensions to lower case with a leading dot.

    Order is preserved and repeated entries are dropped.

    Args:
        extensions: Extensions such as 'JPG', '.png' or 'jpeg'

    Returns:
        Normalized extensions (e.g., ['.jpg', '.png', '.jpeg'])
    """
    normalized = []
    for ext in extensions:
        ext = ext.strip().lower()
        if not ext:
            continue
        if not ext.startswith('.'):
            ext = '.' + ext
        if ext not in normalized:
            normalized.append(ext)
    return normalized


def split_extension_list(value: str) -> List[str]:
    """Split a comma or space separated extension list.

    Args:
        value: Text such as '.jpg, .png' or 'jpg png'

    Returns:
        Normalized extensions
    """
    parts = value.replace(',', ' ').split()
    return normalize_extensions(parts)


def validate_directory_path(path: Union[str, Path]) -> Optional[str]:
    """Validate that a path is an existing directory.

    Args:
        path: Directory path to validate

    Returns:
        None if valid, otherwise a message describing the problem
    """
    path = Path(path)
    if not path.exists():
        return f'Directory "{path}" does not exist.'
    if not path.is_dir():
        return f'"{path}" is not a directory.'
    return None


def clean_filename(filename: str) -> str:
    """Clean filename by removing/replacing invalid characters.

    Args:
        filename: Original filename

    Returns:
        Cleaned filename safe for filesystem
    """
    # Characters that are problematic on various filesystems
    invalid_chars = '<>:"/\\|?*'

    cleaned = filename
    for char in invalid_chars:
        cleaned = cleaned.replace(char, '_')

    cleaned = cleaned.strip('. ')

    if not cleaned:
        cleaned = "image-grid"

    return cleaned


def build_output_path(directory: Union[str, Path], name: str, output_format: str) -> Path:
    """Build the absolute path of the grid image.

    Args:
        directory: Directory the grid is written to
        name: Output name without extension
        output_format: Extension such as '.jpg'

    Returns:
        Absolute output path
    """
    suffix = normalize_extensions([output_format])[0]
    return Path(directory).resolve() / f"{clean_filename(name)}{suffix}"


def configure_logging(verbosity: int = 1, console: Optional[Console] = None) -> None:
    """Route ImageGrid log records to a rich handler.

    An existing rich handler is kept unless a console is given, in which
    case it is replaced.

    Args:
        verbosity: 0 = errors only, 1 = warnings, 2 or more = debug
        console: Console to log to, defaults to stderr
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.WARNING
    else:
        level = logging.ERROR

    logger = logging.getLogger("imagegrid")
    logger.setLevel(level)
    logger.propagate = False

    # Other handlers (e.g. test capture handlers) are left alone
    existing = [h for h in logger.handlers if isinstance(h, RichHandler)]
    if existing and console is None:
        return
    for handler in existing:
        logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
