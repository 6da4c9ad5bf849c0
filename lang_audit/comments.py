"""
Lang Audit Comment Stripper

Blanks out comments so keys mentioned in them are not extracted. Every
removed character becomes a space and newlines are kept, so line numbers in
the stripped text match the original exactly. Comment markers inside string
literals are not special-cased.
"""

import re

PHP_SUFFIXES = (".php",)
SCRIPT_SUFFIXES = (".js", ".jsx", ".ts", ".tsx", ".vue")

BLOCK_COMMENT = re.compile(r"/\*[\s\S]*?\*/")
SLASH_COMMENT = re.compile(r"//[^\n]*")
HASH_COMMENT = re.compile(r"#[^\n]*")


def _blank(match: "re.Match") -> str:
    return re.sub(r"[^\n]", " ", match.group(0))


def comment_family(file_path: str) -> str:
    """Return 'php', 'script' or '' for a path."""
    lower = file_path.lower()
    if lower.endswith(PHP_SUFFIXES):
        return "php"
    if lower.endswith(SCRIPT_SUFFIXES):
        return "script"
    return ""


def strip_comments(content: str, file_path: str = "") -> str:
    """Replace comments with whitespace; unknown file types are returned unchanged."""
    family = comment_family(file_path)
    if not family:
        return content

    result = BLOCK_COMMENT.sub(_blank, content)
    result = SLASH_COMMENT.sub(_blank, result)
    if family == "php":
        result = HASH_COMMENT.sub(_blank, result)
    return result
