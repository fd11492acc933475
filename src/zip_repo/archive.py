from __future__ import annotations

import zipfile
from typing import TYPE_CHECKING

from zip_repo.config import COPY_CHUNK_SIZE, ArchiveReport, FailureStage, FileOutcome, OutcomeStatus
from zip_repo.exceptions import ArchiveCreationError, ArchiveFinalizeError
from zip_repo.logging import logger

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from pathlib import Path

    ProgressFn = Callable[[int], object]


def failed(path: str, stage: FailureStage, err: BaseException) -> FileOutcome:
    """Report a per-file failure and build its outcome record.

    Args:
        path (str): the relative path of the file that failed
        stage (FailureStage): the step that failed
        err (BaseException): the underlying error

    Returns:
        FileOutcome: a failed outcome carrying the stage and error message
    """
    logger.warning("Failed to archive %s (%s): %s", path, stage, err)
    return FileOutcome(path=path, status=OutcomeStatus.FAILED, stage=stage, error=str(err))


def write_entry(zf: zipfile.ZipFile, root: Path, rel: str) -> FileOutcome:
    """Stream one source file into a new archive entry named `rel`.

    Args:
        zf (zipfile.ZipFile): the open archive writer
        root (Path): the source directory
        rel (str): the POSIX path of the file relative to `root`

    Returns:
        FileOutcome: the outcome; failures are reported, never raised
    """
    full = root / rel
    try:
        src = full.open("rb")
    except OSError as e:
        return failed(rel, FailureStage.OPEN, e)

    with src:
        try:
            info = zipfile.ZipInfo.from_file(full, arcname=rel, strict_timestamps=False)
            info.compress_type = zf.compression
            dst = zf.open(info, mode="w")
        except (OSError, ValueError) as e:
            return failed(rel, FailureStage.ENTRY, e)

        size = 0
        try:
            with dst:
                for blk in iter(lambda: src.read(COPY_CHUNK_SIZE), b""):
                    dst.write(blk)
                    size += len(blk)
        except (OSError, RuntimeError, ValueError) as e:
            return failed(rel, FailureStage.WRITE, e)

    return FileOutcome(path=rel, status=OutcomeStatus.OK, size=size)


def write_archive(
    root: Path,
    paths: Sequence[str],
    destination: Path,
    *,
    progress: ProgressFn | None = None,
    compression: int = zipfile.ZIP_DEFLATED,
) -> ArchiveReport:
    """Write the collected files into a zip archive at `destination`.

    The destination is truncated first. Each path becomes one entry, in order.
    A file that cannot be opened, added or fully copied is reported and
    skipped; the remaining files are still written and the archive is closed
    exactly once at the end.

    Args:
        root (Path): the source directory
        paths (Sequence[str]): relative POSIX paths to archive, in archive order
        destination (Path): the zip file to create
        progress (ProgressFn | None): called with 1 after each successful entry
        compression (int): zipfile compression method

    Raises:
        ArchiveCreationError: if the destination file or the zip writer cannot be created
        ArchiveFinalizeError: if the archive cannot be closed

    Returns:
        ArchiveReport: the per-file outcomes in archive order
    """
    try:
        handle = destination.open("wb")
    except OSError as e:
        raise ArchiveCreationError(destination=destination, cause=str(e)) from e

    outcomes: list[FileOutcome] = []
    with handle:
        try:
            zf = zipfile.ZipFile(handle, mode="w", compression=compression)
        except (OSError, RuntimeError, ValueError) as e:
            raise ArchiveCreationError(destination=destination, cause=str(e)) from e

        try:
            for rel in paths:
                outcome = write_entry(zf, root, rel)
                outcomes.append(outcome)
                if outcome.ok and progress is not None:
                    progress(1)
        finally:
            try:
                zf.close()
            except OSError as e:
                raise ArchiveFinalizeError(destination=destination, cause=str(e)) from e

    return ArchiveReport(destination=destination, outcomes=outcomes)
