"""Tests for ignore-file parsing and matching."""

import logging
import os

import pytest

from lang_audit.gitignore import GitignoreRule, load_gitignore, match_pattern, parse_gitignore, parse_rules


@pytest.fixture
def base(tmp_path):
    return str(tmp_path)


def p(base, rel):
    return os.path.join(base, *rel.split("/"))


def test_negation_reincludes_file_under_ignored_directory(base):
    matcher = parse_gitignore("build/\n!build/keep.txt\n", base)
    assert not matcher.is_ignored(p(base, "build/keep.txt"))
    assert matcher.is_ignored(p(base, "build/other.txt"))
    assert matcher.is_ignored(p(base, "build"), is_directory=True)


def test_last_matching_rule_wins(base):
    matcher = parse_gitignore("*.log\n!important.log\nimportant.log\n", base)
    assert matcher.is_ignored(p(base, "important.log"))
    assert matcher.is_ignored(p(base, "debug.log"))


def test_parse_rules_flags():
    rules = parse_rules("# comment\n\n!keep.txt\n/dist/\nlogs #old logs\n")
    assert rules == [
        GitignoreRule("keep.txt", negated=True),
        GitignoreRule("dist", dir_only=True, rooted=True),
        GitignoreRule("logs"),
    ]


def test_directory_rule_never_matches_plain_file(base):
    matcher = parse_gitignore("cache/\n", base)
    assert not matcher.is_ignored(p(base, "cache"))
    assert matcher.is_ignored(p(base, "cache"), is_directory=True)
    assert matcher.is_ignored(p(base, "cache/data.json"))


def test_rooted_pattern_only_matches_from_base(base):
    matcher = parse_gitignore("/dist\n", base)
    assert matcher.is_ignored(p(base, "dist/app.js"))
    assert not matcher.is_ignored(p(base, "packages/ui/dist/app.js"))


def test_unrooted_pattern_matches_at_any_depth(base):
    matcher = parse_gitignore("dist\n*.min.js\n", base)
    assert matcher.is_ignored(p(base, "packages/ui/dist/app.js"))
    assert matcher.is_ignored(p(base, "js/vendor.min.js"))
    assert not matcher.is_ignored(p(base, "js/vendor.js"))


def test_paths_outside_base_are_not_ignored(base):
    matcher = parse_gitignore("*\n", base)
    assert not matcher.is_ignored(os.path.dirname(base))
    assert not matcher.is_ignored(base, is_directory=True)


@pytest.mark.parametrize("path,pattern,expected", [
    ("file1.txt", "file?.txt", True),
    ("file12.txt", "file?.txt", False),
    ("docs/a/b/c.md", "docs/**/*.md", True),
    ("docs/a/c.md", "docs/*.md", False),
    ("app.log.txt", "*.log", False),
    ("src/generated", "src/generated", True),
    ("bad[", "bad[", True),
    ("bad[x", "bad[", False),
])
def test_match_pattern(path, pattern, expected):
    assert match_pattern(path, pattern) is expected


def test_invalid_rule_skipped_with_warning(caplog):
    caplog.set_level(logging.WARNING, logger="lang_audit")
    rules = parse_rules("ok.txt\nbad[\n")
    assert [r.pattern for r in rules] == ["ok.txt"]
    assert "bad[" in caplog.text


def test_load_gitignore(tmp_path):
    assert load_gitignore(str(tmp_path / ".gitignore"), str(tmp_path)) is None

    (tmp_path / ".gitignore").write_text("node_cache/\n*.tmp\n", encoding="utf-8")
    matcher = load_gitignore(str(tmp_path / ".gitignore"), str(tmp_path))
    assert len(matcher) == 2
    assert matcher(str(tmp_path / "a.tmp"), False)
