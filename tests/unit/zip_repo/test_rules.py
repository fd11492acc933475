from pathlib import Path

import pytest

from zip_repo.rules import (
    CompiledFilter,
    NoFilter,
    compile_rules,
    load_rules_file,
    split_cli_patterns,
    split_rules_lines,
)


@pytest.mark.unit
def test_split_rules_lines_trims_and_drops_blank_lines() -> None:
    text = "  *.log \n\n\tbuild/\r\n   \n!keep.log"

    assert split_rules_lines(text) == ["*.log", "build/", "!keep.log"]


@pytest.mark.unit
def test_split_cli_patterns_trims_and_drops_empty_tokens() -> None:
    assert split_cli_patterns(" *.log, ,tmp/ ,secret.txt,") == ["*.log", "tmp/", "secret.txt"]
    assert split_cli_patterns("") == []
    assert split_cli_patterns(None) == []


@pytest.mark.unit
@pytest.mark.parametrize(
    ("content", "cli"),
    [(None, None), ("", ""), ("\n   \n", " , ,")],
)
def test_compile_rules_without_patterns_gives_no_filter(content: str | None, cli: str | None) -> None:
    matcher = compile_rules(content, cli)

    assert isinstance(matcher, NoFilter)
    assert matcher.matches("anything.log") is False
    assert matcher.matches("build", is_dir=True) is False


@pytest.mark.unit
def test_compile_rules_keeps_file_patterns_before_cli_patterns() -> None:
    matcher = compile_rules("*.log\n  build/ \n", "tmp/, secret.txt")

    assert isinstance(matcher, CompiledFilter)
    assert matcher.patterns == ("*.log", "build/", "tmp/", "secret.txt")


@pytest.mark.unit
def test_star_pattern_matches_at_any_depth() -> None:
    matcher = compile_rules("*.log", None)

    assert matcher.matches("b.log")
    assert matcher.matches("sub/deeper/d.log")
    assert not matcher.matches("a.txt")


@pytest.mark.unit
def test_question_mark_matches_one_character() -> None:
    matcher = compile_rules("?.txt", None)

    assert matcher.matches("a.txt")
    assert not matcher.matches("ab.txt")


@pytest.mark.unit
def test_double_star_matches_nested_directories() -> None:
    matcher = compile_rules("docs/**/*.md", None)

    assert matcher.matches("docs/a/b/readme.md")
    assert not matcher.matches("src/readme.md")


@pytest.mark.unit
def test_leading_slash_anchors_to_root() -> None:
    matcher = compile_rules("/build", None)

    assert matcher.matches("build", is_dir=True)
    assert not matcher.matches("sub/build", is_dir=True)


@pytest.mark.unit
def test_trailing_slash_only_matches_directories() -> None:
    matcher = compile_rules("logs/", None)

    assert matcher.matches("logs", is_dir=True)
    assert matcher.matches("sub/logs", is_dir=True)
    assert not matcher.matches("logs")


@pytest.mark.unit
def test_negation_reincludes_earlier_match() -> None:
    matcher = compile_rules("*.log", "!keep.log")

    assert matcher.matches("other.log")
    assert not matcher.matches("keep.log")


@pytest.mark.unit
def test_comment_lines_are_ignored() -> None:
    matcher = compile_rules("# comment\n*.tmp", None)

    assert matcher.matches("x.tmp")
    assert not matcher.matches("# comment")


@pytest.mark.unit
def test_backslash_paths_are_normalized() -> None:
    matcher = compile_rules("sub/*.log", None)

    assert matcher.matches("sub\\d.log")


@pytest.mark.unit
def test_empty_path_never_matches() -> None:
    matcher = compile_rules("*", None)

    assert not matcher.matches("", is_dir=True)


@pytest.mark.unit
def test_load_rules_file_returns_none_when_missing(tmp_path: Path) -> None:
    assert load_rules_file(tmp_path) is None


@pytest.mark.unit
def test_load_rules_file_reads_content(tmp_path: Path) -> None:
    (tmp_path / ".zipignore").write_text("*.log\n", encoding="utf-8")

    assert load_rules_file(tmp_path) == "*.log\n"


@pytest.mark.unit
def test_load_rules_file_uses_custom_name(tmp_path: Path) -> None:
    (tmp_path / ".archiveignore").write_text("dist/\n", encoding="utf-8")

    assert load_rules_file(tmp_path) is None
    assert load_rules_file(tmp_path, ".archiveignore") == "dist/\n"


@pytest.mark.unit
def test_load_rules_file_ignores_directory_with_rules_name(tmp_path: Path) -> None:
    (tmp_path / ".zipignore").mkdir()

    assert load_rules_file(tmp_path) is None


@pytest.mark.unit
def test_double_star_contents_pattern_does_not_match_the_directory() -> None:
    matcher = compile_rules("build/**", None)

    assert not matcher.matches("build", is_dir=True)
    assert matcher.matches("build/sub", is_dir=True) is False
    assert matcher.matches("build/x.o")
    assert matcher.matches("build/sub/y.txt")


@pytest.mark.unit
def test_directory_pattern_matches_directory_despite_later_file_negation() -> None:
    matcher = compile_rules("build/\n!build/keep.txt", None)

    assert matcher.matches("build", is_dir=True)
