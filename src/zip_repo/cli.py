# /// script
# requires-python = ">=3.13"
# dependencies = [
#     "pathspec",
#     "pydantic",
#     "structlog",
#     "tqdm",
# ]
# ///
#  -*- coding: utf-8 -*-
"""
zip_repo — Archive a directory tree into a single zip file.

Overview
--------
Every regular file under the source directory is stored in the archive under
its relative path, except the files excluded by ignore rules:

1) **`.zipignore`** — an optional file inside the source directory, one
   gitignore-style pattern per line.

2) **`--ignore`** — extra comma separated patterns, appended after the rules
   file patterns.

Ignored directories are pruned (nothing below them is archived). The
`.zipignore` file itself is configuration and is never put in the archive.
A file that cannot be read while writing is reported and skipped; the run
still completes and the rest of the archive is usable.

Usage
-----
    - Archive a folder next to the current directory (writes xxx.zip):
        uv run python -m zip_repo ../xxx

    - Choose the archive path:
        uv run python -m zip_repo ../xxx ../xxx.zip

    - Also ignore the target and dist directories:
        uv run python -m zip_repo --ignore "target/,dist/" ../xxx ../xxx.zip
"""

from __future__ import annotations

import argparse
import contextlib
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from tqdm import tqdm

from zip_repo import __version__
from zip_repo.archive import write_archive
from zip_repo.config import ARCHIVE_EXTENSION, RunResult, RunState
from zip_repo.exceptions import ZipRepoError
from zip_repo.file_manipulation import relpath, walk_tree
from zip_repo.logging import logger
from zip_repo.rules import compile_rules, load_rules_file
from zip_repo.settings import Settings

if TYPE_CHECKING:
    from collections.abc import Sequence

    from zip_repo.archive import ProgressFn


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="zip-repo",
        description="Archive a directory into a zip file, honoring .zipignore rules.",
        epilog=(
            "the .zipignore file itself is never archived.\n\n"
            "examples:\n"
            "  zip-repo ../xxx\n"
            "  zip-repo ../xxx ../xxx.zip\n"
            '  zip-repo --ignore "target/,dist/" ../xxx ../xxx.zip'
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument(
        "--ignore",
        type=str,
        default="",
        help='Extra ignore rules, comma separated (e.g. "*.log,tmp/,secret.txt"). '
        "Combined with the .zipignore file of the source directory.",
    )
    p.add_argument("source", nargs="?", default=None, help="Directory to archive.")
    p.add_argument(
        "destination",
        nargs="?",
        default=None,
        help="Output zip path (default: <source folder name>.zip).",
    )
    return p


def parse_args(argv: Sequence[str] | None = None) -> Settings | None:
    """Parse command-line arguments into settings.

    Args:
        argv (Sequence[str] | None): arguments, `sys.argv[1:]` when None

    Returns:
        Settings | None: the run settings, or None when no source directory was
            given (the help text has been printed)
    """
    p = build_parser()
    args = p.parse_args(argv)
    if args.source is None:
        p.print_help()
        return None
    return Settings(
        source=Path(args.source),
        destination=Path(args.destination) if args.destination else None,
        ignore=args.ignore,
    )


def default_destination(source: Path) -> Path:
    """Name the archive after the source folder, in the current directory.

    Args:
        source (Path): the source directory; `.` and `..` are resolved first

    Returns:
        Path: `<folder name>.zip`
    """
    name = source.resolve().name or "archive"
    return Path(name + ARCHIVE_EXTENSION)


def drop_own_files(
    paths: list[str],
    source: Path,
    destination: Path,
    rules_file: str | None = None,
) -> list[str]:
    """Remove the archive being written and the rules file from the collected files.

    The `.zipignore` that supplied the rules is never archived, even when no
    pattern excludes it. Neither is the destination when it lies inside the source.

    Args:
        paths (list[str]): the collected relative paths
        source (Path): the source directory
        destination (Path): the archive path; only relevant when inside `source`
        rules_file (str | None): relative path of the rules file that was used

    Returns:
        list[str]: `paths` without those two files, order kept
    """
    own: set[str] = set()
    if rules_file:
        own.add(rules_file)
    with contextlib.suppress(ValueError):
        own.add(relpath(destination.resolve(), source.resolve()))
    dropped = [p for p in paths if p in own]
    if not dropped:
        return paths
    logger.info("Not archiving %s", ", ".join(dropped))
    return [p for p in paths if p not in own]


def run(settings: Settings, *, progress: ProgressFn | None = None) -> RunResult:
    """Run the pipeline once: compile rules, walk the source, write the archive.

    Args:
        settings (Settings): the run settings
        progress (ProgressFn | None): progress sink handed to the archive writer;
            when None and `settings.show_progress` is set, a tqdm bar is used

    Returns:
        RunResult: the final state, with the archive report on completion or
            the error message on failure
    """
    source = settings.source
    destination = settings.destination
    if destination is None:
        destination = default_destination(source)
        logger.info("No destination given, using default %s", destination)
    result = RunResult(destination=destination)

    rules = load_rules_file(source, settings.rules_file_name)
    matcher = compile_rules(rules, settings.ignore)
    result.state = RunState.RULES_COMPILED

    try:
        paths = walk_tree(source, matcher)
    except ZipRepoError as e:
        logger.error("Scanning files failed: %s", e)
        result.state = RunState.FAILED
        result.error = str(e)
        return result
    rules_file = settings.rules_file_name if rules is not None else None
    paths = drop_own_files(paths, source, destination, rules_file)
    result.state = RunState.FILES_COLLECTED
    logger.info("Collected %d files from %s", len(paths), source)

    try:
        if progress is not None:
            report = write_archive(source, paths, destination, progress=progress)
        else:
            with tqdm(total=len(paths), unit="file", disable=not settings.show_progress) as bar:
                report = write_archive(source, paths, destination, progress=bar.update)
    except ZipRepoError as e:
        logger.error("Writing archive failed: %s", e)
        result.state = RunState.FAILED
        result.error = str(e)
        return result
    result.report = report
    result.state = RunState.ARCHIVE_WRITTEN

    logger.info(
        "Archive written",
        destination=str(destination),
        succeeded=report.succeeded,
        failed=report.failed,
    )
    result.state = RunState.DONE
    return result


def main(argv: Sequence[str] | None = None) -> int:
    settings = parse_args(argv)
    if settings is None:
        return 0

    result = run(settings)
    if not result.ok:
        print(f"Failed: {result.error}", file=sys.stderr)
        return 1

    report = result.report
    print(f"Wrote {result.destination} files={report.succeeded} failed={report.failed}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
