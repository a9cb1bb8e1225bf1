"""Filename date parsing and chronological ordering."""

import logging
import math
from datetime import date, timedelta
from pathlib import Path
from typing import Iterable, List, NamedTuple, Optional, Union

logger = logging.getLogger(__name__)

# Sentinel date for filenames whose leading digits are not a calendar date
EPOCH_DATE = date(1970, 1, 1)

_ONE_DAY = timedelta(days=1)


class ImageFileRecord(NamedTuple):
    """An image file and the date embedded in its name."""

    path: Path
    basename: str
    parsed_date: date


def parse_filename_date(basename: str) -> Optional[date]:
    """Parse the leading YYYYMMDD of a filename.

    Args:
        basename: File name (e.g., '20210101_beach.jpg')

    Returns:
        The date, or None if the first 8 characters are not a valid date
    """
    digits = basename[:8]
    if len(digits) != 8 or not digits.isdigit():
        return None

    try:
        return date(int(digits[0:4]), int(digits[4:6]), int(digits[6:8]))
    except ValueError:
        return None


def make_record(file_path: Union[str, Path]) -> ImageFileRecord:
    """Create a record for a file, falling back to EPOCH_DATE.

    Args:
        file_path: Path to image file

    Returns:
        ImageFileRecord for the file
    """
    file_path = Path(file_path)
    parsed = parse_filename_date(file_path.name)
    if parsed is None:
        logger.debug("Could not parse a date from %s, using %s",
                       file_path.name, EPOCH_DATE.isoformat())
        parsed = EPOCH_DATE
    return ImageFileRecord(file_path, file_path.name, parsed)


def sort_by_date(file_paths: Iterable[Union[str, Path]]) -> List[ImageFileRecord]:
    """Sort files by the date in their names, oldest first.

    Files with the same date keep their relative order.

    Args:
        file_paths: Files to sort

    Returns:
        Records sorted by parsed date
    """
    records = [make_record(path) for path in file_paths]
    return sorted(records, key=lambda record: record.parsed_date)


def day_difference(earliest: date, latest: date) -> int:
    """Number of days between two dates, rounded up.

    Args:
        earliest: Start date
        latest: End date

    Returns:
        Whole days from earliest to latest (0 when equal)
    """
    return math.ceil((latest - earliest) / _ONE_DAY)


def estimate_rows(file_count: int, images_per_row: int) -> int:
    """Estimate the number of grid rows needed for all files.

    Args:
        file_count: Number of images in the grid
        images_per_row: Images in each row

    Returns:
        Row count

    Raises:
        ValueError: If images_per_row is not positive
    """
    if images_per_row <= 0:
        raise ValueError(f"Images per row must be a positive integer, got {images_per_row}")
    return math.ceil(file_count / images_per_row)


class DateSummary:
    """Chronologically sorted files with date range statistics."""

    def __init__(self, records: List[ImageFileRecord]):
        """Initialize summary.

        Args:
            records: Records already sorted by date (must not be empty)
        """
        if not records:
            raise ValueError("Cannot summarize an empty file list")
        self.records = records

    @property
    def sorted_files(self) -> List[Path]:
        """Get file paths in date order."""
        return [record.path for record in self.records]

    @property
    def earliest_date(self) -> date:
        return self.records[0].parsed_date

    @property
    def latest_date(self) -> date:
        return self.records[-1].parsed_date

    @property
    def day_difference(self) -> int:
        return day_difference(self.earliest_date, self.latest_date)

    @property
    def fallback_dated(self) -> List[Path]:
        """Get files that were given EPOCH_DATE because their name had no valid date."""
        return [record.path for record in self.records
                if parse_filename_date(record.basename) is None]

    def __len__(self) -> int:
        return len(self.records)


def summarize(file_paths: Iterable[Union[str, Path]]) -> DateSummary:
    """Sort files by date and compute the date range.

    Args:
        file_paths: Files to summarize

    Returns:
        DateSummary for the files
    """
    return DateSummary(sort_by_date(file_paths))
