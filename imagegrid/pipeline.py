"""Search, sort and compose: the steps behind one grid image."""

import logging
from pathlib import Path
from typing import Iterable, List, Union

from .config import Config
from .dates import DateSummary, summarize
from .exceptions import NoImagesFound
from .locator import DuplicateSkipped, ImageLocator, SearchCriteria
from .montage import MontageRequest, get_compositor

logger = logging.getLogger(__name__)


class ScanResult:
    """Located images, sorted by date."""

    def __init__(self, criteria: SearchCriteria, summary: DateSummary,
                 duplicates: List[DuplicateSkipped]):
        self.criteria = criteria
        self.summary = summary
        self.duplicates = duplicates

    @property
    def sorted_files(self) -> List[Path]:
        return self.summary.sorted_files


def find_images(directory: Union[str, Path], extensions: Iterable[str]) -> ScanResult:
    """Locate date-named images and sort them chronologically.

    Args:
        directory: Directory to search recursively
        extensions: Allowed extensions

    Returns:
        ScanResult with the sorted files and skipped duplicates

    Raises:
        DirectoryNotFound: If directory is missing or not a directory
        NoImagesFound: If no file matches
    """
    criteria = SearchCriteria.create(directory, extensions)
    located = ImageLocator().search(criteria)

    if not located:
        raise NoImagesFound(criteria.root_directory, sorted(criteria.allowed_extensions))

    summary = summarize(located.files)
    logger.debug("Sorted %d images from %s to %s", len(summary),
                 summary.earliest_date, summary.latest_date)
    return ScanResult(criteria, summary, located.duplicates)


def compose_grid(scan: ScanResult, images_per_row: int, resolution: str,
                 output_path: Union[str, Path], config: Config) -> Path:
    """Compose the grid image for a scan.

    Args:
        scan: Result of find_images
        images_per_row: Number of columns
        resolution: Cell size such as '64x48'
        output_path: File the grid is written to
        config: Configuration supplying background and compositor backend

    Returns:
        Path of the written image

    Raises:
        CompositionProcessFailure: If composition fails
    """
    request = MontageRequest.create(
        scan.sorted_files,
        images_per_row,
        resolution,
        output_path,
        background=config.background,
    )
    compositor = get_compositor(config.compositor_backend, config.compositor_command)
    return compositor.compose(request)
