"""
Lang Audit Catalog Cache

Decoding PHP catalogs means one php process per file, so loaded locale maps
can be kept in a sidecar JSON file between runs. An entry is reused only when
its key (locales, lang dir, newest catalog mtime) matches and it is younger
than CACHE_TTL.
"""

import hashlib
import json
import logging
import os
import tempfile
import time
from typing import Dict, List, Optional

from .catalog import LocaleMap, TranslationEntry, catalog_files

logger = logging.getLogger("lang_audit.cache")

CACHE_TTL = 3600  # seconds


def latest_mtime(lang_dir: str, locales: List[str]) -> float:
    """Newest modification time among every catalog source file, 0 if none."""
    newest = 0.0
    for locale in locales:
        for _, path in catalog_files(lang_dir, locale):
            try:
                newest = max(newest, os.path.getmtime(path))
            except OSError:
                continue
    return newest


def cache_key(locales: List[str], lang_dir: str, mtime: float) -> str:
    payload = json.dumps(locales) + lang_dir + repr(mtime)
    return hashlib.md5(payload.encode("utf-8")).hexdigest()


def serialize(locale_maps: Dict[str, LocaleMap]) -> dict:
    return {
        locale: {key: entry.to_dict() for key, entry in entries.items()}
        for locale, entries in locale_maps.items()
    }


def deserialize(data: dict) -> Dict[str, LocaleMap]:
    return {
        locale: {key: TranslationEntry.from_dict(raw) for key, raw in entries.items()}
        for locale, entries in data.items()
    }


def load_cache(cache_file: str, key: str, now: Optional[float] = None) -> Optional[Dict[str, LocaleMap]]:
    """Cached locale maps for key, or None when absent, stale or unreadable."""
    if not os.path.isfile(cache_file):
        return None
    now = time.time() if now is None else now
    try:
        with open(cache_file, "r", encoding="utf-8") as f:
            cached = json.load(f)
        if cached.get("key") != key:
            logger.debug("Cache key mismatch, reloading")
            return None
        if now - float(cached.get("timestamp", 0)) >= CACHE_TTL:
            logger.debug("Cache expired, reloading")
            return None
        maps = deserialize(cached["data"])
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
        logger.debug("Cache read failed: %s", e)
        return None
    logger.info("Using cached translations")
    return maps


def save_cache(cache_file: str, key: str, locale_maps: Dict[str, LocaleMap], now: Optional[float] = None) -> bool:
    """
    Write the cache atomically: a sibling temp file replaced into place.

    Returns False (after logging) when the write fails.
    """
    entry = {
        "key": key,
        "timestamp": time.time() if now is None else now,
        "data": serialize(locale_maps),
    }
    directory = os.path.dirname(os.path.abspath(cache_file))
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=".i18n-cache-", suffix=".tmp", dir=directory)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(entry, f, ensure_ascii=False)
        os.replace(tmp_path, cache_file)
        tmp_path = None
    except (OSError, TypeError, ValueError) as e:
        logger.warning("Failed to write cache %s: %s", cache_file, e)
        return False
    finally:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
    logger.debug("Cache saved to %s", cache_file)
    return True


def clear_cache(cache_file: str) -> bool:
    """Delete the cache file; True if one was removed."""
    try:
        os.unlink(cache_file)
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.warning("Failed to clear cache %s: %s", cache_file, e)
        return False
    logger.info("Cache cleared")
    return True
