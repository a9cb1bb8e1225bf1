"""Exceptions raised by ImageGrid."""

from pathlib import Path
from typing import List, Optional, Union


class ImageGridError(Exception):
    """Base class for ImageGrid errors."""


class DirectoryNotFound(ImageGridError):
    """Raised when the search root is missing or is not a directory."""

    def __init__(self, directory: Union[str, Path], reason: str = "does not exist"):
        self.directory = Path(directory)
        self.reason = reason
        super().__init__(f"Directory {reason}: {self.directory}")


class NoImagesFound(ImageGridError):
    """Raised when no file under the root matches the search criteria."""

    def __init__(self, directory: Union[str, Path], extensions: List[str]):
        self.directory = Path(directory)
        self.extensions = list(extensions)
        super().__init__(
            f"No images found matching the given extensions "
            f"({', '.join(self.extensions)}) in {self.directory}"
        )


class CompositionProcessFailure(ImageGridError):
    """Raised when the grid could not be composed.

    For the external compositor either ``exit_code`` is set (the process ran
    and failed) or ``spawn_error`` is set (the process could not be started).
    """

    def __init__(self, command: List[str], exit_code: Optional[int] = None,
                 spawn_error: Optional[BaseException] = None,
                 message: Optional[str] = None):
        self.command = list(command)
        self.exit_code = exit_code
        self.spawn_error = spawn_error

        program = self.command[0] if self.command else "compositor"
        if message is None:
            if exit_code is not None:
                message = f"{program} exited with code {exit_code}"
            elif spawn_error is not None:
                message = f"{program} could not be started: {spawn_error}"
            else:
                message = f"{program} failed"
        super().__init__(message)
