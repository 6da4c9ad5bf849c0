"""
Lang Audit Key Extractor

Pulls translation-key literals out of Blade/PHP and JS/TS/Vue source.

Calls are often formatted across several lines, so every pattern is run
against a sliding window of three consecutive (comment-stripped) lines.
Overlapping windows rediscover the same call, so matches are deduplicated on
(key, line). Candidates must look like a dot-path key ("auth.failed") or a
sentence key ("Welcome back"); anything else is dropped silently.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, NamedTuple, Optional, Pattern, Set, Tuple

from .comments import strip_comments
from .walker import IgnorePredicate, walk

logger = logging.getLogger("lang_audit.extractor")

WINDOW_SIZE = 3
MAX_LOCATIONS_PER_KEY = 100


class KeyPattern(NamedTuple):
    regex: Pattern
    group: int


# Order matters only for which pattern records a (key, line) first.
KEY_PATTERNS: Tuple[KeyPattern, ...] = (
    # __('key')
    KeyPattern(re.compile(r"__\(\s*['\"`]([^'\"`]+?)['\"`]\s*[,)]"), 1),
    # @lang('key')
    KeyPattern(re.compile(r"@lang\(\s*['\"`]([^'\"`]+?)['\"`]\s*[,)]"), 1),
    # @choice('key', n)
    KeyPattern(re.compile(r"@choice\(\s*['\"`]([^'\"`]+?)['\"`]\s*,"), 1),
    # trans_choice('key', n)
    KeyPattern(re.compile(r"trans_choice\(\s*['\"`]([^'\"`]+?)['\"`]\s*[,)]"), 1),
    # trans('key')
    KeyPattern(re.compile(r"\btrans\(\s*['\"`]([^'\"`]+?)['\"`]\s*[,)]"), 1),
    # Lang::get('key')
    KeyPattern(re.compile(r"Lang::get\(\s*['\"`]([^'\"`]+?)['\"`]\s*[,)]"), 1),
    # t('key')
    KeyPattern(re.compile(r"\bt\(\s*['\"`]([^'\"`]+?)['\"`]\s*[,)]"), 1),
    # usePage().props.__('key') / page.props.__('key')
    KeyPattern(re.compile(r"(?:usePage\(\)\.props|page\.props)\.__\(\s*['\"`]([^'\"`]+?)['\"`]"), 1),
    # {__('key')} / {t('key')}
    KeyPattern(re.compile(r"\{(?:__|t)\(\s*['\"`]([^'\"`]+?)['\"`]\s*[,)]\}"), 1),
)

DYNAMIC_PATTERNS: Tuple[Pattern, ...] = (
    re.compile(r"__\(\s*['\"`][^'\"`]*\$\{"),   # __(`key.${var}`)
    re.compile(r"__\(\s*['\"`][^'\"`]*\$"),     # __("key.$var")
    re.compile(r"\bt\(\s*['\"`][^'\"`]*\$\{"),  # t(`key.${var}`)
)

DOT_PATH_KEY = re.compile(r"[A-Za-z0-9_]+(?:\.[A-Za-z0-9_]+)*")
INTERPOLATED_VARIABLE = re.compile(r"\$[A-Za-z_]")


@dataclass(frozen=True)
class KeyLocation:
    """Where a key (or a dynamic call) was seen."""

    file: str
    line: int
    snippet: str

    def to_dict(self) -> dict:
        return {"file": self.file, "line": self.line, "snippet": self.snippet}


@dataclass
class ExtractionResult:
    """Keys found in one file."""

    keys: Set[str] = field(default_factory=set)
    locations: Dict[str, List[KeyLocation]] = field(default_factory=dict)
    dynamic_keys: List[KeyLocation] = field(default_factory=list)


@dataclass
class UsedKeyIndex:
    """Keys referenced anywhere in the scanned tree. Append-only during a walk."""

    keys: Set[str] = field(default_factory=set)
    locations: Dict[str, List[KeyLocation]] = field(default_factory=dict)
    dynamic_keys: List[KeyLocation] = field(default_factory=list)

    def merge(self, result: ExtractionResult) -> None:
        """Fold one file's result in, keeping at most MAX_LOCATIONS_PER_KEY per key."""
        self.keys.update(result.keys)
        self.dynamic_keys.extend(result.dynamic_keys)
        for key, locs in result.locations.items():
            stored = self.locations.setdefault(key, [])
            room = MAX_LOCATIONS_PER_KEY - len(stored)
            if room > 0:
                stored.extend(locs[:room])

    def __len__(self) -> int:
        return len(self.keys)


def is_dot_path_key(key: str) -> bool:
    return DOT_PATH_KEY.fullmatch(key) is not None


def is_sentence_key(key: str) -> bool:
    """
    Free-text keys as used by JSON catalogs.

    '$' followed by a letter or underscore is a PHP variable ("User $username")
    and is rejected, while currency text ("Price: $99") is accepted.
    """
    return (
        len(key) > 0
        and INTERPOLATED_VARIABLE.search(key) is None
        and "`" not in key
        and not key.startswith("{")
        and key.strip() == key
    )


def is_valid_key(key: str) -> bool:
    return is_dot_path_key(key) or is_sentence_key(key)


def extract_keys(content: str, file_path: str = "") -> ExtractionResult:
    """
    Extract translation keys from one file's content.

    Args:
        content: Raw file content
        file_path: Path used for comment-dialect detection and in locations

    Returns:
        ExtractionResult with keys, first locations per key and dynamic calls
    """
    result = ExtractionResult()
    if not isinstance(content, str):
        return result

    lines = content.split("\n")
    cleaned_lines = strip_comments(content, file_path).split("\n")

    seen_matches: Set[Tuple[str, int]] = set()
    seen_dynamic: Set[Tuple[str, int]] = set()

    for i in range(len(lines)):
        window = cleaned_lines[i:i + WINDOW_SIZE]
        buf = "\n".join(window)

        for pattern in KEY_PATTERNS:
            for match in pattern.regex.finditer(buf):
                key = match.group(pattern.group).strip()
                offset = buf.count("\n", 0, match.start())
                line_num = i + offset + 1

                if (key, line_num) in seen_matches:
                    continue
                seen_matches.add((key, line_num))

                if not is_valid_key(key):
                    continue

                result.keys.add(key)
                locs = result.locations.setdefault(key, [])
                if len(locs) < MAX_LOCATIONS_PER_KEY:
                    snippet = lines[i + offset] if i + offset < len(lines) else ""
                    locs.append(KeyLocation(file_path, line_num, snippet.strip()))

        dynamic = _find_dynamic(window, buf, i, file_path, seen_dynamic)
        if dynamic is not None:
            result.dynamic_keys.append(dynamic)

    return result


def _find_dynamic(window, buf, start, file_path, seen):
    # At most one dynamic report per window.
    for pattern in DYNAMIC_PATTERNS:
        if not pattern.search(buf):
            continue
        for j, line in enumerate(window):
            if not pattern.search(line):
                continue
            line_num = start + j + 1
            if (file_path, line_num) in seen:
                continue
            seen.add((file_path, line_num))
            return KeyLocation(file_path, line_num, line.strip())
    return None


def _read_source(file_path: str, max_file_size: int) -> Optional[str]:
    try:
        size = os.path.getsize(file_path)
    except OSError as e:
        logger.warning("Cannot stat %s: %s", file_path, e)
        return None
    if size > max_file_size:
        logger.debug("  Skipping large file: %s (%.1fMB)", file_path, size / 1024 / 1024)
        return None
    try:
        with open(file_path, "r", encoding="utf-8", errors="replace") as f:
            return f.read()
    except OSError as e:
        logger.warning("Failed to read %s: %s", file_path, e)
        return None


def scan_tree(
    src: str,
    extensions: Iterable[str],
    matcher: Optional[IgnorePredicate] = None,
    max_file_size: int = 10 * 1024 * 1024,
) -> Tuple[UsedKeyIndex, int]:
    """
    Walk the source tree and extract keys from every matching file.

    Locations are recorded relative to src.

    Returns:
        (UsedKeyIndex, number of files scanned)
    """
    index = UsedKeyIndex()
    files_scanned = 0

    for file_path in walk(src, extensions, matcher=matcher):
        content = _read_source(file_path, max_file_size)
        if content is None:
            continue
        files_scanned += 1
        index.merge(extract_keys(content, os.path.relpath(file_path, src)))

    logger.info("Scanned %d files, found %d keys", files_scanned, len(index))
    return index, files_scanned
