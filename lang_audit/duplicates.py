"""
Lang Audit Intra-File Duplicates

A PHP array with the same key twice silently keeps the last value, so these
duplicates are invisible once the file is decoded. They are recovered from
the raw text instead: a stack of (key, indent) frames follows bracket depth
line by line to rebuild each key's dotted path, then paths seen more than
once in a file are reported.

This is bracket counting, not a PHP grammar. Irregular formatting or a ')'
closing an unrelated call at line end can shift the stack; that is accepted.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Dict, List

from .catalog import namespace_files

logger = logging.getLogger("lang_audit.duplicates")

PHP_KEY = re.compile(r"^\s*(['\"`]?)([a-zA-Z0-9_.-]+)\1\s*=>")
JSON_KEY = re.compile(r'^\s*"([^"]+)"\s*:')
LEADING_WS = re.compile(r"^\s*")

OPEN_BRACKET = re.compile(r"\[")
CLOSE_BRACKET = re.compile(r"\]")
OPEN_ARRAY = re.compile(r"array\s*\(")
# Only ')' followed by , ; or end of line counts as closing an array()
CLOSE_ARRAY_PUNCT = re.compile(r"\)\s*[,;]")
CLOSE_ARRAY_EOL = re.compile(r"\)\s*$")


@dataclass
class KeyOccurrence:
    key: str
    line: int
    path: str
    indent: int = 0
    raw: str = ""


@dataclass
class DuplicateKey:
    """A dotted path defined more than once in one file."""

    key: str
    full_path: str
    count: int
    lines: List[int]

    def to_dict(self) -> dict:
        return {"key": self.key, "fullPath": self.full_path, "count": self.count, "lines": list(self.lines)}


@dataclass
class FileDuplicates:
    locale: str
    file: str
    path: str
    duplicates: List[DuplicateKey] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "locale": self.locale,
            "file": self.file,
            "path": self.path,
            "duplicates": [d.to_dict() for d in self.duplicates],
        }


def _opens(line: str) -> int:
    return len(OPEN_BRACKET.findall(line)) + len(OPEN_ARRAY.findall(line))


def _closes(line: str) -> int:
    return (
        len(CLOSE_BRACKET.findall(line))
        + len(CLOSE_ARRAY_PUNCT.findall(line))
        + len(CLOSE_ARRAY_EOL.findall(line))
    )


def extract_php_array_keys(content: str) -> List[KeyOccurrence]:
    """Every key definition in PHP array text with its reconstructed dotted path."""
    keys: List[KeyOccurrence] = []
    stack: List[KeyOccurrence] = []

    for index, line in enumerate(content.split("\n")):
        indent = len(LEADING_WS.match(line).group(0))
        match = PHP_KEY.match(line)

        if match:
            key = match.group(2)
            path = ".".join([frame.key for frame in stack] + [key])
            occurrence = KeyOccurrence(key, index + 1, path, indent, line.strip())
            keys.append(occurrence)

            net_depth = _opens(line) - _closes(line)
            if net_depth > 0:
                stack.append(occurrence)
            elif net_depth < 0:
                del stack[max(0, len(stack) + net_depth):]
            # net 0: a one-line nested array stays a single leaf
        else:
            net_closes = _closes(line) - _opens(line)
            if net_closes > 0:
                del stack[max(0, len(stack) - net_closes):]

    return keys


def extract_json_keys(content: str) -> List[KeyOccurrence]:
    """Keys of a flat JSON catalog; each key is its own full path."""
    keys: List[KeyOccurrence] = []
    for index, line in enumerate(content.split("\n")):
        match = JSON_KEY.match(line)
        if match:
            key = match.group(1)
            keys.append(KeyOccurrence(key, index + 1, key, raw=line.strip()))
    return keys


def find_intra_file_duplicates(keys: List[KeyOccurrence]) -> List[DuplicateKey]:
    """Group occurrences by full path; paths seen more than once are duplicates."""
    by_path: Dict[str, List[int]] = {}
    for occurrence in keys:
        by_path.setdefault(occurrence.path, []).append(occurrence.line)

    duplicates: List[DuplicateKey] = []
    for full_path, lines in by_path.items():
        if len(lines) > 1:
            duplicates.append(DuplicateKey(
                key=full_path.split(".")[-1],
                full_path=full_path,
                count=len(lines),
                lines=sorted(lines),
            ))
    return duplicates


def _check_file(locale: str, label: str, abs_path: str, extract) -> List[FileDuplicates]:
    try:
        with open(abs_path, "r", encoding="utf-8", errors="replace") as f:
            content = f.read()
    except OSError as e:
        logger.debug("  Failed to check %s: %s", abs_path, e)
        return []
    duplicates = find_intra_file_duplicates(extract(content))
    if not duplicates:
        return []
    return [FileDuplicates(locale, label, abs_path, duplicates)]


def check_intra_file_duplicates(lang_dir: str, locales: List[str]) -> List[FileDuplicates]:
    """Scan every catalog file of every locale for repeated keys."""
    issues: List[FileDuplicates] = []
    for locale in locales:
        single_php = os.path.join(lang_dir, f"{locale}.php")
        if os.path.isfile(single_php):
            issues += _check_file(locale, f"{locale}.php", single_php, extract_php_array_keys)

        for name in namespace_files(lang_dir, locale):
            abs_path = os.path.join(lang_dir, locale, name)
            issues += _check_file(locale, name, abs_path, extract_php_array_keys)

        json_path = os.path.join(lang_dir, f"{locale}.json")
        if os.path.isfile(json_path):
            issues += _check_file(locale, f"{locale}.json", json_path, extract_json_keys)
    return issues
