from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ZipRepoError(Exception):
    """Base exception for errors in the zip_repo package."""


@dataclass(frozen=True)
class WalkError(ZipRepoError):
    """Raised when listing or stating an entry fails during the directory walk."""

    root: Path
    path: str
    cause: str

    def __str__(self) -> str:
        return f"cannot scan {self.path} under {self.root}: {self.cause}"


@dataclass(frozen=True)
class ArchiveCreationError(ZipRepoError):
    """Raised when the destination file or the zip writer cannot be created."""

    destination: Path
    cause: str

    def __str__(self) -> str:
        return f"cannot create archive {self.destination}: {self.cause}"


@dataclass(frozen=True)
class ArchiveFinalizeError(ZipRepoError):
    """Raised when the archive cannot be closed (central directory not written)."""

    destination: Path
    cause: str

    def __str__(self) -> str:
        return f"cannot finalize archive {self.destination}: {self.cause}"
