"""
Lang Audit Tree Walker

Lazily yields source files under a root directory. Hidden entries are always
skipped, well-known build/vendor directories are pruned, and symlink cycles
are detected through a visited set of real paths shared by the whole walk.
"""

import logging
import os
from typing import Callable, Iterable, Iterator, Optional, Set

logger = logging.getLogger("lang_audit.walker")

IGNORED_DIRS = frozenset({
    ".claude", "node_modules", "vendor", ".git", ".idea", ".vscode",
    "config", "storage", "database", "routes", "bootstrap",
    "public", "build", "dist", ".next", "out",
    "tests", "testdata", "docs", "doc", "scripts", "bin",
})

DEFAULT_EXTENSIONS = ("php", "blade.php", "ts", "tsx", "js", "jsx", "vue")

# Double extensions that must match as a whole suffix
COMPOUND_EXTENSIONS = frozenset({"blade.php"})

IgnorePredicate = Callable[[str, bool], bool]


def matches_extension(name: str, extensions: Iterable[str]) -> bool:
    """Check a file name (case-insensitive) against the configured extensions."""
    lower = name.lower()
    _, dot, last_segment = lower.rpartition(".")
    for ext in extensions:
        ext = ext.lower().lstrip(".")
        if ext in COMPOUND_EXTENSIONS:
            if lower.endswith("." + ext):
                return True
        elif dot and last_segment == ext:
            return True
    return False


def walk(
    root: str,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    ignored_dirs: Iterable[str] = IGNORED_DIRS,
    matcher: Optional[IgnorePredicate] = None,
    visited: Optional[Set[str]] = None,
) -> Iterator[str]:
    """
    Walk a directory tree depth-first, yielding matching file paths.

    Entries are visited in sorted name order so the sequence is deterministic.
    Unreadable directories are logged and treated as empty.

    Args:
        root: Directory to walk
        extensions: File extensions to yield (without leading dot)
        ignored_dirs: Directory names that are never descended into
        matcher: Optional ignore predicate called as matcher(path, is_directory)
        visited: Real paths already walked (shared across recursion)
    """
    if visited is None:
        visited = set()
    extensions = tuple(extensions)
    ignored_dirs = frozenset(ignored_dirs)

    if not os.path.isdir(root):
        return

    real_path = os.path.realpath(root)
    if real_path in visited:
        logger.warning("Skipping circular symlink: %s", root)
        return
    visited.add(real_path)

    try:
        with os.scandir(root) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        logger.warning("Error walking directory %s: %s", root, e)
        return

    for entry in entries:
        if entry.name.startswith("."):
            continue

        try:
            is_dir = entry.is_dir()
        except OSError:
            is_dir = False

        if matcher is not None and matcher(entry.path, is_dir):
            logger.debug("  Gitignored: %s", entry.path)
            continue

        if is_dir:
            if entry.name in ignored_dirs:
                continue
            yield from walk(entry.path, extensions, ignored_dirs, matcher, visited)
        elif matches_extension(entry.name, extensions):
            yield entry.path
