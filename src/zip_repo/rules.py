"""Ignore-rule compilation.

Patterns come from two sources, in this order:

1) the project rules file (``.zipignore``) inside the source directory,
   one pattern per line;
2) the ``--ignore`` command-line option, comma separated.

Both lists are concatenated and compiled with gitignore semantics, so a later
``!pattern`` can re-include a path an earlier pattern excluded. An empty list
compiles to :class:`NoFilter`, which never matches.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import pathspec

from zip_repo.config import RULES_FILE_NAME
from zip_repo.logging import logger

if TYPE_CHECKING:
    from pathlib import Path


@dataclass(frozen=True)
class NoFilter:
    """Matcher built from zero patterns: nothing is ever ignored."""

    patterns: tuple[str, ...] = field(default=())

    def matches(self, rel_path: str, *, is_dir: bool = False) -> bool:  # noqa: ARG002, PLR6301
        return False


@dataclass(frozen=True)
class CompiledFilter:
    """Matcher backed by a compiled gitignore spec.

    Attributes:
        spec: the compiled `pathspec.GitIgnoreSpec`.
        patterns: the ordered patterns the spec was built from.
    """

    spec: pathspec.GitIgnoreSpec
    patterns: tuple[str, ...]

    def matches(self, rel_path: str, *, is_dir: bool = False) -> bool:
        """Tell whether `rel_path` is ignored.

        Args:
            rel_path (str): path relative to the source root; backslashes are
                normalized to forward slashes
            is_dir (bool): whether the path names a directory. Directories are
                queried with a trailing slash so `name/` patterns only apply to them.

        Returns:
            bool: True if the last matching pattern excludes the path. A
                directory only excluded by a `name/**` pattern does not match:
                that pattern covers its contents, which a later `!` may re-include.
        """
        rel = rel_path.replace("\\", "/").strip("/")
        if not rel:
            return False
        if not is_dir:
            return self.spec.match_file(rel)
        result = self.spec.check_file(rel + "/")
        if not result.include:
            return False
        return not self.patterns[result.index].rstrip().endswith("/**")


Matcher = NoFilter | CompiledFilter


def split_rules_lines(text: str | None) -> list[str]:
    """Split rules file content into patterns, one per non-blank trimmed line."""
    if not text:
        return []
    return [s for s in (ln.strip() for ln in text.splitlines()) if s]


def split_cli_patterns(text: str | None) -> list[str]:
    """Split comma separated command-line patterns, dropping empty tokens."""
    if not text:
        return []
    return [s for s in (tok.strip() for tok in text.split(",")) if s]


def compile_rules(rules_file_content: str | None, cli_patterns: str | None) -> Matcher:
    """Compile the rules file content and command-line patterns into one matcher.

    Args:
        rules_file_content (str | None): content of the rules file, or None if absent
        cli_patterns (str | None): comma separated patterns from the command line

    Returns:
        Matcher: `NoFilter` when no pattern remains, a `CompiledFilter` otherwise
    """
    patterns = [*split_rules_lines(rules_file_content), *split_cli_patterns(cli_patterns)]
    if not patterns:
        return NoFilter()
    return CompiledFilter(spec=pathspec.GitIgnoreSpec.from_lines(patterns), patterns=tuple(patterns))


def load_rules_file(source: Path, name: str = RULES_FILE_NAME) -> str | None:
    """Read the rules file from the source directory, if there is one.

    Args:
        source (Path): the source directory
        name (str): file name of the rules file inside `source`

    Returns:
        str | None: the file content, or None when the file is missing or unreadable
    """
    path = source / name
    if not path.is_file():
        return None
    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.warning("Cannot read rules file %s: %s", path, e)
        return None
    logger.info("Using rules file %s", path)
    return content
