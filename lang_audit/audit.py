"""
Lang Audit Runner

One audit run: load the catalogs, scan the source tree, compare the two and
fold the findings into an exit-code bit set. Everything the run needs comes
in through AuditSettings.
"""

import enum
import logging
import os
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .cache import cache_key, clear_cache, latest_mtime, load_cache, save_cache
from .catalog import LocaleMap, load_locales, needs_php
from .checks import (
    DuplicateEntry,
    KeyFilter,
    ParameterIssue,
    ParityIssue,
    PluralizationIssue,
    check_duplicates,
    check_parameters,
    check_parity,
    check_pluralization,
    compute_coverage,
    find_missing,
    find_orphans,
)
from .decoders import CatalogDecoder, JsonDecoder, PhpArrayDecoder
from .duplicates import FileDuplicates, check_intra_file_duplicates
from .exceptions import ConfigError, PhpUnavailableError, SourceDirectoryError
from .extractor import UsedKeyIndex, scan_tree
from .gitignore import load_gitignore
from .models import AuditSettings

logger = logging.getLogger("lang_audit.audit")

EXIT_FATAL = 1
EXIT_INTERRUPTED = 130


class ExitCode(enum.IntFlag):
    """Process exit status; issue kinds are OR-ed together."""
    SUCCESS = 0
    MISSING_TRANSLATIONS = 1
    PARITY_ISSUES = 2
    DUPLICATE_KEYS = 4
    PARAMETER_MISMATCHES = 8
    ORPHAN_KEYS = 16
    PLURALIZATION_ISSUES = 32
    INTRA_FILE_DUPLICATES = 64


# Verdict lines, in report order
EXIT_CODE_LABELS = (
    (ExitCode.MISSING_TRANSLATIONS, "Missing translations"),
    (ExitCode.PARITY_ISSUES, "Parity issues"),
    (ExitCode.DUPLICATE_KEYS, "Duplicate keys (across files)"),
    (ExitCode.PARAMETER_MISMATCHES, "Parameter mismatches"),
    (ExitCode.PLURALIZATION_ISSUES, "Pluralization issues"),
    (ExitCode.INTRA_FILE_DUPLICATES, "Duplicate keys within files"),
    (ExitCode.ORPHAN_KEYS, "Orphan keys"),
)


@dataclass
class AuditResult:
    """Everything one run found. Disabled checks leave their field empty."""

    settings: AuditSettings
    used: UsedKeyIndex
    files_scanned: int
    locale_maps: Dict[str, LocaleMap]
    missing: Dict[str, List[str]] = field(default_factory=dict)
    parity: Dict[str, ParityIssue] = field(default_factory=dict)
    duplicates: Dict[str, List[DuplicateEntry]] = field(default_factory=dict)
    parameter_issues: List[ParameterIssue] = field(default_factory=list)
    pluralization_issues: List[PluralizationIssue] = field(default_factory=list)
    file_duplicates: List[FileDuplicates] = field(default_factory=list)
    orphans: List[str] = field(default_factory=list)
    coverage: int = 100
    duration: float = 0.0

    @property
    def base_locale(self) -> str:
        return self.settings.base_locale

    @property
    def exit_code(self) -> ExitCode:
        code = ExitCode.SUCCESS
        if self.missing:
            code |= ExitCode.MISSING_TRANSLATIONS
        if self.parity:
            code |= ExitCode.PARITY_ISSUES
        if self.duplicates:
            code |= ExitCode.DUPLICATE_KEYS
        if self.parameter_issues:
            code |= ExitCode.PARAMETER_MISMATCHES
        if self.pluralization_issues:
            code |= ExitCode.PLURALIZATION_ISSUES
        if self.file_duplicates:
            code |= ExitCode.INTRA_FILE_DUPLICATES
        if self.orphans and self.settings.fail_on_orphans:
            code |= ExitCode.ORPHAN_KEYS
        return code

    @property
    def success(self) -> bool:
        return self.exit_code == ExitCode.SUCCESS


def describe_exit_code(code: int) -> List[str]:
    return [label for flag, label in EXIT_CODE_LABELS if code & flag]


def validate_directories(settings: AuditSettings) -> None:
    """
    Raises:
        SourceDirectoryError: src missing or not a directory
        ConfigError: lang path exists but is not a directory
    """
    if not os.path.exists(settings.src):
        raise SourceDirectoryError(f"Source directory not found: {settings.src}")
    if not os.path.isdir(settings.src):
        raise SourceDirectoryError(f"Source path is not a directory: {settings.src}")

    if not os.path.exists(settings.lang_dir):
        logger.warning("Language directory not found: %s", settings.lang_dir)
    elif not os.path.isdir(settings.lang_dir):
        raise ConfigError(f"Language path is not a directory: {settings.lang_dir}")


def load_catalogs(
    settings: AuditSettings,
    php_decoder: CatalogDecoder,
    json_decoder: CatalogDecoder,
) -> Dict[str, LocaleMap]:
    """Locale maps from the cache when enabled and fresh, otherwise from disk."""
    key = None
    if settings.use_cache:
        key = cache_key(settings.locales, settings.lang_dir, latest_mtime(settings.lang_dir, settings.locales))
        cached = load_cache(settings.cache_file, key)
        if cached is not None:
            return cached

    logger.info("Loading translation files...")
    maps = load_locales(settings.locales, settings.lang_dir, php_decoder, json_decoder)

    if key is not None:
        save_cache(settings.cache_file, key, maps)
    return maps


def run_audit(
    settings: AuditSettings,
    php_decoder: Optional[CatalogDecoder] = None,
    json_decoder: Optional[CatalogDecoder] = None,
) -> AuditResult:
    """
    Run every enabled check.

    Args:
        settings: Merged run settings
        php_decoder: Decoder for PHP catalogs (defaults to the php binary)
        json_decoder: Decoder for JSON catalogs

    Raises:
        SourceDirectoryError, ConfigError, PhpUnavailableError
    """
    t0 = time.time()
    php_decoder = php_decoder or PhpArrayDecoder()
    json_decoder = json_decoder or JsonDecoder()

    validate_directories(settings)

    if needs_php(settings.lang_dir, settings.locales):
        if not php_decoder.is_available():
            raise PhpUnavailableError(
                "PHP is required to parse PHP translation files but was not found in PATH. "
                "Install PHP or use JSON translation files."
            )
        logger.debug("PHP found: %s", php_decoder.version() or php_decoder.name)
    else:
        logger.debug("Skipping PHP validation (JSON-only project)")

    if settings.clear_cache:
        clear_cache(settings.cache_file)

    locale_maps = load_catalogs(settings, php_decoder, json_decoder)

    matcher = None
    if settings.respect_gitignore:
        matcher = load_gitignore(os.path.join(settings.src, ".gitignore"), settings.src)
        if matcher is not None:
            logger.debug("Using .gitignore patterns to filter files (%d rules)", len(matcher))
        else:
            logger.debug("No .gitignore found")

    logger.info("Scanning codebase...")
    used, files_scanned = scan_tree(settings.src, settings.extensions, matcher, settings.max_file_size)

    base = settings.base_locale
    result = AuditResult(
        settings=settings,
        used=used,
        files_scanned=files_scanned,
        locale_maps=locale_maps,
        missing=find_missing(used.keys, locale_maps, settings.locales),
        parity=check_parity(locale_maps, settings.locales),
    )

    if settings.show_duplicates:
        result.duplicates = check_duplicates(locale_maps)
    if settings.check_params:
        result.parameter_issues = check_parameters(locale_maps, base)
    if settings.check_plurals:
        result.pluralization_issues = check_pluralization(locale_maps, base)
    if settings.check_file_duplicates:
        result.file_duplicates = check_intra_file_duplicates(settings.lang_dir, settings.locales)
    if settings.show_orphans:
        key_filter = KeyFilter.build(settings.ignore_keys, settings.ignore_domains, settings.ignore_patterns)
        result.orphans = find_orphans(used.keys, locale_maps, settings.locales, key_filter)

    result.coverage = compute_coverage(used.keys, locale_maps, settings.locales)
    result.duration = round(time.time() - t0, 2)
    return result
