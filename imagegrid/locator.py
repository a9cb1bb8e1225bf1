"""Locating date-named images in a directory tree."""

import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, NamedTuple, Pattern, Union

from .exceptions import DirectoryNotFound
from .utils import normalize_extensions

logger = logging.getLogger(__name__)

# Number of leading digits holding the YYYYMMDD date
DATE_PREFIX_LENGTH = 8


def build_filename_pattern(extensions: Iterable[str]) -> Pattern[str]:
    """Build the regex accepted basenames must match.

    The basename must start with 8 digits and end with one of the
    extensions, compared case-insensitively.

    Args:
        extensions: Normalized extensions (e.g., ['.jpg', '.png'])

    Returns:
        Compiled pattern
    """
    alternatives = '|'.join(re.escape(ext.lstrip('.')) for ext in extensions)
    return re.compile(
        rf'^[0-9]{{{DATE_PREFIX_LENGTH}}}.*\.({alternatives})\Z',
        re.IGNORECASE,
    )


class SearchCriteria(NamedTuple):
    """What to search for and where."""

    root_directory: Path
    allowed_extensions: frozenset
    filename_pattern: Pattern[str]

    @classmethod
    def create(cls, root_directory: Union[str, Path],
               extensions: Iterable[str]) -> 'SearchCriteria':
        """Create criteria from a root and a set of extensions.

        Args:
            root_directory: Directory to search recursively
            extensions: Allowed extensions, with or without leading dot

        Returns:
            SearchCriteria instance

        Raises:
            ValueError: If no extension is given
        """
        normalized = normalize_extensions(extensions)
        if not normalized:
            raise ValueError("At least one extension is required")
        return cls(
            root_directory=Path(root_directory),
            allowed_extensions=frozenset(normalized),
            filename_pattern=build_filename_pattern(sorted(normalized)),
        )

    def matches(self, basename: str) -> bool:
        """Check whether a basename satisfies the date-name pattern."""
        return self.filename_pattern.match(basename) is not None


class DuplicateSkipped(NamedTuple):
    """A file excluded because an earlier file has the same basename."""

    path: Path
    kept_path: Path


class LocatorResult:
    """Results from searching a directory tree."""

    def __init__(self, files: List[Path], duplicates: List[DuplicateSkipped]):
        self.files = files
        self.duplicates = duplicates

    def __len__(self) -> int:
        return len(self.files)

    def __bool__(self) -> bool:
        return bool(self.files)


class ImageLocator:
    """Finds date-named images beneath a root directory.

    Files are visited in lexicographic order of their POSIX path relative to
    the root, skipping hidden files and directories, so the file kept among
    same-named duplicates is the same on every run and every platform.
    """

    def search(self, criteria: SearchCriteria) -> LocatorResult:
        """Search for matching images.

        Args:
            criteria: Search criteria

        Returns:
            LocatorResult with unique files and skipped duplicates

        Raises:
            DirectoryNotFound: If the root is missing or not a directory
        """
        root = criteria.root_directory
        if not root.exists():
            raise DirectoryNotFound(root)
        if not root.is_dir():
            raise DirectoryNotFound(root, reason="is not a directory")

        root = root.resolve()
        seen: Dict[str, Path] = {}
        duplicates: List[DuplicateSkipped] = []

        for file_path in self._iter_files(root):
            if not criteria.matches(file_path.name):
                continue

            key = file_path.name.lower()
            if key in seen:
                duplicates.append(DuplicateSkipped(file_path, seen[key]))
                logger.debug("Skipping duplicate %s (keeping %s)", file_path, seen[key])
            else:
                seen[key] = file_path

        logger.debug("Found %d matching files under %s", len(seen), root)
        return LocatorResult(list(seen.values()), duplicates)

    def _iter_files(self, root: Path) -> List[Path]:
        """List all regular files under root in the pinned traversal order.

        Hidden files and anything inside a hidden directory are skipped.
        """
        files = []
        for path in root.rglob('*'):
            if any(part.startswith('.') for part in path.relative_to(root).parts):
                continue
            if path.is_file():
                files.append(path)
        files.sort(key=lambda path: path.relative_to(root).as_posix())
        return files


def search_for_images(directory: Union[str, Path], extensions: Iterable[str]) -> LocatorResult:
    """Recursively search a directory for images named yyyymmdd*.ext.

    Args:
        directory: Directory to search
        extensions: Allowed extensions (e.g., ['.jpg', '.jpeg', '.png'])

    Returns:
        LocatorResult with unique files and skipped duplicates
    """
    criteria = SearchCriteria.create(directory, extensions)
    return ImageLocator().search(criteria)
