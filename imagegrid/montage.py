"""Grid image composition."""

import logging
import re
import subprocess
from pathlib import Path
from typing import Dict, List, NamedTuple, Sequence, Type, Union

from PIL import Image, ImageColor, ImageOps, UnidentifiedImageError

from .dates import estimate_rows
from .exceptions import CompositionProcessFailure

logger = logging.getLogger(__name__)

_RESOLUTION_RE = re.compile(r'^\s*(\d+)\s*[xX]\s*(\d+)\s*$')


class Resolution(NamedTuple):
    """Width and height of a single grid cell."""

    width: int
    height: int

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


def parse_resolution(value: Union[str, Resolution]) -> Resolution:
    """Parse a WIDTHxHEIGHT string.

    Args:
        value: Resolution such as '64x48'

    Returns:
        Resolution instance

    Raises:
        ValueError: If value is malformed or a dimension is zero
    """
    if isinstance(value, Resolution):
        return value

    match = _RESOLUTION_RE.match(value)
    if not match:
        raise ValueError(f"Invalid resolution '{value}', expected WIDTHxHEIGHT (e.g., 64x48)")

    width, height = int(match.group(1)), int(match.group(2))
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid resolution '{value}', width and height must be positive")
    return Resolution(width, height)


class MontageRequest(NamedTuple):
    """Everything needed to compose one grid image."""

    ordered_files: Sequence[Path]
    tile_columns: int
    cell_resolution: Resolution
    output_path: Path
    background: str = 'white'

    @classmethod
    def create(cls, files: Sequence[Union[str, Path]], images_per_row: int,
               resolution: Union[str, Resolution], output_path: Union[str, Path],
               background: str = 'white') -> 'MontageRequest':
        """Create a validated request.

        Args:
            files: Input images in grid order
            images_per_row: Number of columns
            resolution: Cell size, as a Resolution or 'WxH' string
            output_path: File the grid is written to
            background: Fill color for empty cells

        Returns:
            MontageRequest instance

        Raises:
            ValueError: If images_per_row is not positive or resolution is invalid
        """
        if images_per_row <= 0:
            raise ValueError(f"Images per row must be a positive integer, got {images_per_row}")
        return cls(
            ordered_files=tuple(Path(f) for f in files),
            tile_columns=images_per_row,
            cell_resolution=parse_resolution(resolution),
            output_path=Path(output_path),
            background=background,
        )

    @property
    def rows(self) -> int:
        return estimate_rows(len(self.ordered_files), self.tile_columns)


def build_montage_args(request: MontageRequest, command: str = 'montage') -> List[str]:
    """Build the argument list for ImageMagick's montage.

    Rows are left for montage to compute, cells have no spacing, and
    frames, shadows and labels are disabled.

    Args:
        request: Montage request
        command: Name or path of the montage executable

    Returns:
        Full command line, program first
    """
    return [
        command,
        *[str(path) for path in request.ordered_files],
        '-tile', f"{request.tile_columns}x",
        '-geometry', f"{request.cell_resolution}+0+0",
        '-background', request.background,
        '+frame',
        '+shadow',
        '+label',
        str(request.output_path),
    ]


class GridCompositor:
    """Base class for grid compositors."""

    name = 'base'

    def compose(self, request: MontageRequest) -> Path:
        """Compose the grid image.

        Args:
            request: Montage request

        Returns:
            Path of the written image

        Raises:
            CompositionProcessFailure: If the grid could not be produced
        """
        raise NotImplementedError


class MontageCompositor(GridCompositor):
    """Compose grids by running ImageMagick's montage command."""

    name = 'montage'

    def __init__(self, command: str = 'montage'):
        """Initialize compositor.

        Args:
            command: Name or path of the montage executable
        """
        self.command = command

    def compose(self, request: MontageRequest) -> Path:
        args = build_montage_args(request, self.command)
        logger.debug("Running %s with %d input files", self.command, len(request.ordered_files))

        # Output streams go straight to the terminal
        try:
            completed = subprocess.run(args, check=False)
        except OSError as e:
            raise CompositionProcessFailure(args, spawn_error=e) from e

        if completed.returncode != 0:
            raise CompositionProcessFailure(args, exit_code=completed.returncode)

        return request.output_path


class PillowCompositor(GridCompositor):
    """Compose grids in-process with Pillow.

    Each image is scaled to fit its cell keeping its aspect ratio and is
    centered in the cell, matching montage's handling of -geometry.
    """

    name = 'pillow'

    def compose(self, request: MontageRequest) -> Path:
        cell_w, cell_h = request.cell_resolution
        columns = request.tile_columns
        rows = request.rows

        try:
            background = ImageColor.getrgb(request.background)
        except ValueError as e:
            raise CompositionProcessFailure(
                [self.name], message=f"Unknown background color: {request.background}"
            ) from e

        sheet = Image.new('RGB', (columns * cell_w, rows * cell_h), background)

        for index, file_path in enumerate(request.ordered_files):
            try:
                with Image.open(file_path) as img:
                    # Transparent pixels show the background, as with montage
                    tile = ImageOps.exif_transpose(img).convert('RGBA')
            except (OSError, UnidentifiedImageError) as e:
                raise CompositionProcessFailure(
                    [self.name, str(file_path)], message=f"Could not read {file_path}: {e}"
                ) from e

            tile = ImageOps.contain(tile, (cell_w, cell_h), Image.Resampling.LANCZOS)
            x = (index % columns) * cell_w + (cell_w - tile.width) // 2
            y = (index // columns) * cell_h + (cell_h - tile.height) // 2
            sheet.paste(tile, (x, y), tile)

        try:
            sheet.save(request.output_path)
        except (OSError, ValueError) as e:
            raise CompositionProcessFailure(
                [self.name, str(request.output_path)],
                message=f"Could not write {request.output_path}: {e}",
            ) from e

        logger.debug("Wrote %dx%d grid to %s", columns, rows, request.output_path)
        return request.output_path


COMPOSITORS: Dict[str, Type[GridCompositor]] = {
    MontageCompositor.name: MontageCompositor,
    PillowCompositor.name: PillowCompositor,
}


def get_compositor(name: str = 'montage', command: str = 'montage') -> GridCompositor:
    """Get a compositor by backend name.

    Args:
        name: 'montage' or 'pillow'
        command: Executable used by the montage backend

    Returns:
        GridCompositor instance

    Raises:
        ValueError: If the backend is unknown
    """
    if name not in COMPOSITORS:
        raise ValueError(f"Unknown compositor '{name}'. Available: {', '.join(COMPOSITORS)}")
    if name == MontageCompositor.name:
        return MontageCompositor(command)
    return COMPOSITORS[name]()


def create_montage(files: Sequence[Union[str, Path]], images_per_row: int,
                   resolution: Union[str, Resolution], output_file: Union[str, Path]) -> Path:
    """Create a grid image with ImageMagick's montage.

    Args:
        files: Input images in grid order
        images_per_row: Number of columns
        resolution: Cell size such as '64x48'
        output_file: File the grid is written to

    Returns:
        Path of the written image
    """
    request = MontageRequest.create(files, images_per_row, resolution, output_file)
    return MontageCompositor().compose(request)
