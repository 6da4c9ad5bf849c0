"""
Lang Audit Ignore Rules

Parses .gitignore text into ordered rules and answers "is this path ignored?".
Rules are evaluated in file order and the last matching rule wins, so a
negated rule can re-include a path an earlier rule excluded.
"""

import logging
import os
import posixpath
import re
from dataclasses import dataclass, field
from typing import List, Optional, Pattern, Tuple

logger = logging.getLogger("lang_audit.gitignore")

_DOUBLESTAR = "\x00DOUBLESTAR\x00"


@dataclass(frozen=True)
class GitignoreRule:
    """One parsed ignore-file line."""

    pattern: str
    negated: bool = False
    dir_only: bool = False
    rooted: bool = False
    _regexes: Tuple[Pattern, ...] = field(default=(), init=False, repr=False, compare=False)

    def __post_init__(self):
        # Raises re.error for globs that do not translate; parse_rules skips those.
        object.__setattr__(self, "_regexes", _compile(self.pattern))

    def matches(self, relative_path: str) -> bool:
        """Match against a posix path relative to the ignore file's directory."""
        if self.rooted:
            return self._match(relative_path)
        if self._match(relative_path):
            return True
        parts = relative_path.split("/")
        for i in range(1, len(parts)):
            if self._match("/".join(parts[i:])):
                return True
        return False

    def _match(self, test_path: str) -> bool:
        if test_path == self.pattern:
            return True
        return any(regex.search(test_path) for regex in self._regexes)


def _glob_to_regex(pattern: str) -> str:
    regex = pattern.replace(".", r"\.")
    regex = regex.replace("**", _DOUBLESTAR)
    regex = regex.replace("*", "[^/]*")
    regex = regex.replace(_DOUBLESTAR, ".*")
    regex = regex.replace("?", "[^/]")
    return regex


def _compile(pattern: str) -> Tuple[Pattern, Pattern]:
    body = _glob_to_regex(pattern)
    return (re.compile(f"^{body}(/|$)"), re.compile(f"^{body}$"))


def match_pattern(test_path: str, pattern: str) -> bool:
    """Match a relative posix path against a single glob pattern."""
    try:
        rule = GitignoreRule(pattern)
    except re.error:
        return test_path == pattern
    return rule._match(test_path)


def parse_rules(text: str) -> List[GitignoreRule]:
    """
    Parse ignore-file text into rules.

    A line starting with '#' is dropped; a '#' later in the line truncates it.
    One leading '!' negates, one trailing '/' makes the rule directory-only and
    one leading '/' anchors it to the base directory. Rules whose glob does not
    translate to a valid regex are skipped with a warning.
    """
    rules: List[GitignoreRule] = []
    for line in text.split("\n"):
        comment_index = line.find("#")
        if comment_index == 0:
            continue
        if comment_index > 0:
            line = line[:comment_index]
        line = line.strip()
        if not line:
            continue

        negated = line.startswith("!")
        if negated:
            line = line[1:]
        dir_only = line.endswith("/")
        if dir_only:
            line = line[:-1]
        rooted = line.startswith("/")
        if rooted:
            line = line[1:]

        try:
            rules.append(GitignoreRule(line, negated, dir_only, rooted))
        except re.error as e:
            logger.warning("Skipping invalid ignore pattern %r: %s", line, e)
    return rules


class GitignoreMatcher:
    """Callable predicate over absolute paths built from ordered rules."""

    def __init__(self, rules: List[GitignoreRule], base_dir: str):
        self.rules = list(rules)
        self.base_dir = os.path.abspath(base_dir)

    def __len__(self) -> int:
        return len(self.rules)

    def relative(self, path: str) -> Optional[str]:
        """Return the posix path relative to base_dir, or None when outside it."""
        rel = os.path.relpath(os.path.abspath(path), self.base_dir)
        if rel == "." or rel.startswith(".."):
            return None
        return rel.replace(os.sep, "/")

    def is_ignored(self, path: str, is_directory: bool = False) -> bool:
        rel = self.relative(path)
        if rel is None:
            return False

        ignored = False
        for rule in self.rules:
            target = rel
            if rule.dir_only and not is_directory:
                # A directory rule still covers files beneath the directory,
                # but never the file itself.
                target = posixpath.dirname(rel)
                if not target:
                    continue
            if rule.matches(target):
                ignored = not rule.negated
        return ignored

    __call__ = is_ignored


def parse_gitignore(text: str, base_dir: str) -> GitignoreMatcher:
    """Build a matcher from raw ignore-file text."""
    return GitignoreMatcher(parse_rules(text), base_dir)


def load_gitignore(gitignore_path: str, base_dir: str) -> Optional[GitignoreMatcher]:
    """
    Load an ignore file from disk.

    Returns None when the file does not exist or cannot be read.
    """
    if not os.path.isfile(gitignore_path):
        return None
    try:
        with open(gitignore_path, "r", encoding="utf-8", errors="replace") as f:
            text = f.read()
    except OSError as e:
        logger.warning("Failed to read %s: %s", gitignore_path, e)
        return None

    matcher = parse_gitignore(text, base_dir)
    logger.debug("Loaded .gitignore with %d patterns", len(matcher))
    return matcher
