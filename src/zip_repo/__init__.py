"""zip_repo — archive a directory tree into a zip file, honoring .zipignore rules."""

__version__ = "0.1.0"
