"""ImageGrid - Create a single image grid from many date-named images."""

__version__ = "1.0.0"
__author__ = "ImageGrid Contributors"
__description__ = "A command line tool to build a chronological contact-sheet grid from yyyymmdd-named photos"

from .cli import app

__all__ = ["app"]
