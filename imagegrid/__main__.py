"""Main entry point for ImageGrid when run as python -m imagegrid."""

from .cli import app

if __name__ == "__main__":
    app()
