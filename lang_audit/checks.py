"""
Lang Audit Checks

Set and map comparisons between the used-key index and the locale maps.
All functions are pure over their inputs.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Pattern, Set

from .catalog import LocaleMap
from .placeholders import PluralRule

logger = logging.getLogger("lang_audit.checks")

MISSING_PLURALIZATION = "missing_pluralization"
PLURAL_COUNT_MISMATCH = "plural_count_mismatch"


@dataclass
class ParityIssue:
    missing_from_locale: List[str]
    extra_in_locale: List[str]

    def to_dict(self) -> dict:
        return {"missingFromLocale": self.missing_from_locale, "extraInLocale": self.extra_in_locale}


@dataclass
class DuplicateEntry:
    key: str
    count: int
    files: List[str]

    def to_dict(self) -> dict:
        return {"key": self.key, "count": self.count, "files": list(self.files)}


@dataclass
class ParameterIssue:
    key: str
    locale: str
    base_params: List[str]
    locale_params: List[str]
    missing: List[str]
    extra: List[str]

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "locale": self.locale,
            "baseParams": self.base_params,
            "localeParams": self.locale_params,
            "missing": self.missing,
            "extra": self.extra,
        }


@dataclass
class PluralizationIssue:
    key: str
    locale: str
    issue: str
    base_rules: List[PluralRule]
    locale_rules: Optional[List[PluralRule]] = None

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "locale": self.locale,
            "issue": self.issue,
            "baseRules": [r.to_dict() for r in self.base_rules],
            "localeRules": [r.to_dict() for r in self.locale_rules] if self.locale_rules is not None else None,
        }


def find_missing(used_keys: Iterable[str], locale_maps: Mapping[str, LocaleMap], locales: List[str]) -> Dict[str, List[str]]:
    """Used keys absent from each locale; locales with nothing missing are omitted."""
    used = set(used_keys)
    missing_by_locale: Dict[str, List[str]] = {}
    for locale in locales:
        entries = locale_maps.get(locale) or {}
        missing = sorted(k for k in used if k not in entries)
        if missing:
            missing_by_locale[locale] = missing
    return missing_by_locale


def check_parity(locale_maps: Mapping[str, LocaleMap], locales: List[str]) -> Dict[str, ParityIssue]:
    """Compare every locale's key set against the first (base) locale."""
    if not locales:
        return {}
    base_keys = set(locale_maps.get(locales[0]) or {})
    parity: Dict[str, ParityIssue] = {}
    for locale in locales[1:]:
        locale_keys = set(locale_maps.get(locale) or {})
        missing = sorted(base_keys - locale_keys)
        extra = sorted(locale_keys - base_keys)
        if missing or extra:
            parity[locale] = ParityIssue(missing, extra)
    return parity


def check_duplicates(locale_maps: Mapping[str, LocaleMap]) -> Dict[str, List[DuplicateEntry]]:
    """Keys defined more than once within a locale."""
    duplicates: Dict[str, List[DuplicateEntry]] = {}
    for locale, entries in locale_maps.items():
        for key, entry in entries.items():
            if entry.reference_count > 1:
                duplicates.setdefault(locale, []).append(
                    DuplicateEntry(key, entry.reference_count, list(entry.defining_files))
                )
    return duplicates


def check_parameters(locale_maps: Mapping[str, LocaleMap], base_locale: str) -> List[ParameterIssue]:
    """Placeholder sets that differ between the base locale and another locale."""
    issues: List[ParameterIssue] = []
    base_map = locale_maps.get(base_locale) or {}

    for key, base_entry in base_map.items():
        base_params = list(base_entry.parameters)
        for locale, entries in locale_maps.items():
            if locale == base_locale or key not in entries:
                continue
            locale_params = list(entries[key].parameters)
            missing = [p for p in base_params if p not in locale_params]
            extra = [p for p in locale_params if p not in base_params]
            if missing or extra:
                issues.append(ParameterIssue(key, locale, base_params, locale_params, missing, extra))
    return issues


def check_pluralization(locale_maps: Mapping[str, LocaleMap], base_locale: str) -> List[PluralizationIssue]:
    """
    Plural rules missing or with a different rule count in another locale.

    Only presence and count are compared, never rule content.
    """
    issues: List[PluralizationIssue] = []
    base_map = locale_maps.get(base_locale) or {}

    for key, base_entry in base_map.items():
        base_plurals = base_entry.plurals
        if base_plurals is None:
            continue
        for locale, entries in locale_maps.items():
            if locale == base_locale or key not in entries:
                continue
            locale_plurals = entries[key].plurals
            if locale_plurals is None:
                issues.append(PluralizationIssue(
                    key, locale, MISSING_PLURALIZATION, list(base_plurals.rules), None,
                ))
            elif len(base_plurals.rules) != len(locale_plurals.rules):
                issues.append(PluralizationIssue(
                    key, locale, PLURAL_COUNT_MISMATCH, list(base_plurals.rules), list(locale_plurals.rules),
                ))
    return issues


@dataclass
class KeyFilter:
    """Orphan exclusions: exact keys, domain prefixes and regex patterns."""

    keys: Set[str] = field(default_factory=set)
    domains: List[str] = field(default_factory=list)
    patterns: List[Pattern] = field(default_factory=list)

    @classmethod
    def build(cls, keys: Iterable[str] = (), domains: Iterable[str] = (), patterns: Iterable[str] = ()) -> "KeyFilter":
        """Compile patterns once; invalid ones are skipped with a warning."""
        compiled: List[Pattern] = []
        for pattern in patterns:
            try:
                compiled.append(re.compile(pattern))
            except re.error as e:
                logger.warning("Invalid regex pattern in ignorePatterns: %s (%s)", pattern, e)
        return cls(set(keys), list(domains), compiled)

    def excludes(self, key: str) -> bool:
        if key in self.keys:
            return True
        for domain in self.domains:
            if key == domain or key.startswith(domain + "."):
                return True
        return any(p.search(key) for p in self.patterns)


def find_orphans(
    used_keys: Iterable[str],
    locale_maps: Mapping[str, LocaleMap],
    locales: List[str],
    key_filter: Optional[KeyFilter] = None,
) -> List[str]:
    """Catalog keys (union over locales) never referenced in scanned source."""
    used = set(used_keys)
    all_keys: Set[str] = set()
    for locale in locales:
        all_keys.update(locale_maps.get(locale) or {})

    key_filter = key_filter or KeyFilter()
    return sorted(k for k in all_keys if k not in used and not key_filter.excludes(k))


def compute_coverage(used_keys: Iterable[str], locale_maps: Mapping[str, LocaleMap], locales: List[str]) -> int:
    """Percentage of (used key, locale) pairs that have a translation."""
    used = set(used_keys)
    total = len(used) * len(locales)
    if not total:
        return 100
    provided = sum(
        1
        for locale in locales
        for key in used
        if key in (locale_maps.get(locale) or {})
    )
    # Half rounds up
    return int(provided * 100 / total + 0.5)
