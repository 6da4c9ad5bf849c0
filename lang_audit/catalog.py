"""
Lang Audit Catalog Loader

Builds one key -> TranslationEntry map per locale from up to three sources,
merged in a fixed order:

1. lang/<locale>.php        single array file, flattened to dot paths
2. lang/<locale>/*.php      one file per namespace, prefixed with its name
3. lang/<locale>.json       flat JSON, keys taken as-is

When a dotted key is produced more than once the first value wins; later
definitions only bump reference_count and append to defining_files.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .decoders import CatalogDecoder, JsonDecoder, PhpArrayDecoder
from .placeholders import PluralInfo, extract_params, extract_plurals

logger = logging.getLogger("lang_audit.catalog")


@dataclass
class TranslationEntry:
    """One key's definition(s) within a locale."""

    value: Any
    reference_count: int = 1
    defining_files: List[str] = field(default_factory=list)
    parameters: List[str] = field(default_factory=list)
    plurals: Optional[PluralInfo] = None

    @classmethod
    def create(cls, value: Any, file_name: str) -> "TranslationEntry":
        return cls(
            value=value,
            reference_count=1,
            defining_files=[file_name],
            parameters=extract_params(value),
            plurals=extract_plurals(value),
        )

    def add_definition(self, file_name: str) -> None:
        self.reference_count += 1
        self.defining_files.append(file_name)

    def to_dict(self) -> dict:
        return {
            "value": self.value,
            "count": self.reference_count,
            "files": list(self.defining_files),
            "params": list(self.parameters),
            "plurals": self.plurals.to_dict() if self.plurals else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TranslationEntry":
        plurals = data.get("plurals")
        return cls(
            value=data.get("value"),
            reference_count=int(data.get("count", 1)),
            defining_files=list(data.get("files", [])),
            parameters=list(data.get("params", [])),
            plurals=PluralInfo.from_dict(plurals) if plurals else None,
        )


LocaleMap = Dict[str, TranslationEntry]


def flatten(obj: Any, prefix: str = "", result: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Flatten a nested mapping to dot-notation keys.

    Lists are leaves; only mappings are recursed into.
    """
    if result is None:
        result = {}
    for key, value in (obj or {}).items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            flatten(value, full_key, result)
        else:
            result[full_key] = value
    return result


def _merge(target: LocaleMap, flat: Dict[str, Any], file_name: str) -> None:
    for key, value in flat.items():
        entry = target.get(key)
        if entry is None:
            target[key] = TranslationEntry.create(value, file_name)
        else:
            entry.add_definition(file_name)


def namespace_files(lang_dir: str, locale: str, suffix: str = ".php") -> List[str]:
    """Sorted file names in lang/<locale>/ with the given suffix."""
    locale_dir = os.path.join(lang_dir, locale)
    if not os.path.isdir(locale_dir):
        return []
    try:
        entries = os.listdir(locale_dir)
    except OSError as e:
        logger.warning("Cannot list %s: %s", locale_dir, e)
        return []
    return sorted(
        name for name in entries
        if name.endswith(suffix) and os.path.isfile(os.path.join(locale_dir, name))
    )


def catalog_files(lang_dir: str, locale: str) -> List[Tuple[str, str]]:
    """
    Every catalog source for a locale as (kind, absolute path), in merge order.
    """
    files: List[Tuple[str, str]] = []
    single_php = os.path.join(lang_dir, f"{locale}.php")
    if os.path.isfile(single_php):
        files.append(("php", single_php))
    for name in namespace_files(lang_dir, locale):
        files.append(("php", os.path.join(lang_dir, locale, name)))
    json_path = os.path.join(lang_dir, f"{locale}.json")
    if os.path.isfile(json_path):
        files.append(("json", json_path))
    return files


def needs_php(lang_dir: str, locales: List[str]) -> bool:
    """True when any locale has a PHP catalog that must be decoded."""
    return any(
        kind == "php"
        for locale in locales
        for kind, _ in catalog_files(lang_dir, locale)
    )


def load_locale(
    locale: str,
    lang_dir: str,
    php_decoder: Optional[CatalogDecoder] = None,
    json_decoder: Optional[CatalogDecoder] = None,
) -> LocaleMap:
    """
    Load all translations for one locale.

    Args:
        locale: Locale code, e.g. 'en'
        lang_dir: Directory holding the catalogs
        php_decoder: Decoder for array-literal files (defaults to php binary)
        json_decoder: Decoder for the JSON catalog

    Returns:
        Map of dotted key -> TranslationEntry
    """
    php_decoder = php_decoder or PhpArrayDecoder()
    json_decoder = json_decoder or JsonDecoder()
    entries: LocaleMap = {}

    suffix = php_decoder.suffix
    single_php = os.path.join(lang_dir, locale + suffix)
    if os.path.isfile(single_php):
        data = php_decoder.load(single_php)
        _merge(entries, flatten(data), locale + suffix)

    for name in namespace_files(lang_dir, locale, suffix):
        namespace = name[: -len(suffix)]
        data = php_decoder.load(os.path.join(lang_dir, locale, name))
        _merge(entries, flatten(data, namespace), name)

    json_path = os.path.join(lang_dir, f"{locale}.json")
    if os.path.isfile(json_path):
        data = json_decoder.load(json_path)
        _merge(entries, {str(k): v for k, v in data.items()}, f"{locale}.json")

    logger.debug("  Loaded %d keys for %s", len(entries), locale)
    return entries


def load_locales(
    locales: List[str],
    lang_dir: str,
    php_decoder: Optional[CatalogDecoder] = None,
    json_decoder: Optional[CatalogDecoder] = None,
) -> Dict[str, LocaleMap]:
    """Load every locale; one failing locale yields an empty map, not an error."""
    maps: Dict[str, LocaleMap] = {}
    for locale in locales:
        logger.debug("  Loading %s...", locale)
        try:
            maps[locale] = load_locale(locale, lang_dir, php_decoder, json_decoder)
        except OSError as e:
            logger.warning("Failed to load locale %s: %s", locale, e)
            maps[locale] = {}
    return maps
