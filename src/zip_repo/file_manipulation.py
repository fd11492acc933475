from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import TYPE_CHECKING

from zip_repo.exceptions import WalkError
from zip_repo.logging import logger

if TYPE_CHECKING:
    from zip_repo.rules import Matcher


def relpath(path: Path, root: Path) -> str:
    """Send the relative path of path from root.

    Args:
        path (Path): the path to "relativise"
        root (Path): the root to relativise from

    Returns:
        str: the relative path from root to path, with POSIX separators.
            The root itself gives an empty string.
    """
    rel = path.relative_to(root).as_posix()
    return "" if rel == "." else rel


def non_regular_reason(path: Path, root: Path) -> str | None:
    """Tell why a walked entry is not a regular file, following symlinks.

    Args:
        path (Path): the entry to test
        root (Path): the walk root, used to report errors

    Raises:
        WalkError: if the entry cannot be stated (other than a dangling symlink)

    Returns:
        str | None: None for a regular file, otherwise a short reason
            ("dangling symlink" or "not a regular file")
    """
    try:
        st = path.stat()
    except FileNotFoundError:
        if path.is_symlink():
            return "dangling symlink"
        raise WalkError(root=root, path=relpath(path, root), cause="vanished during walk") from None
    except OSError as e:
        raise WalkError(root=root, path=relpath(path, root), cause=str(e)) from e
    return None if stat.S_ISREG(st.st_mode) else "not a regular file"


def walk_tree(root: Path, matcher: Matcher) -> list[str]:
    """Collect the files to archive under `root`.

    Walk top-down with siblings in sorted order. A matched directory is pruned
    with everything below it, a matched file is skipped. Directories are never
    collected themselves.

    Args:
        root (Path): the source directory
        matcher (Matcher): compiled ignore rules

    Raises:
        WalkError: on any error listing a directory or stating an entry

    Returns:
        list[str]: relative POSIX paths of the regular files to archive, in walk order
    """

    def on_error(err: OSError) -> None:
        where = Path(err.filename) if err.filename else root
        try:
            rel = relpath(where, root) or "."
        except ValueError:
            rel = str(where)
        raise WalkError(root=root, path=rel, cause=err.strerror or str(err)) from err

    results: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error, followlinks=True):
        base = Path(dirpath)

        kept: list[str] = []
        for d in sorted(dirnames):
            rel = relpath(base / d, root)
            if matcher.matches(rel, is_dir=True):
                logger.debug("Pruned directory %s", rel)
                continue
            kept.append(d)
        dirnames[:] = kept

        for f in sorted(filenames):
            p = base / f
            rel = relpath(p, root)
            if matcher.matches(rel):
                continue
            reason = non_regular_reason(p, root)
            if reason:
                logger.warning("Skipping %s: %s", rel, reason)
                continue
            results.append(rel)
    return results
