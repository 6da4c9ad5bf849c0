"""
Lang Audit Pydantic Models

Config-file schema, merged run settings and the JSON report.
"""

import os
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .walker import DEFAULT_EXTENSIONS

DEFAULT_LOCALES = ("en", "ar")
MAX_FILE_SIZE = 10 * 1024 * 1024  # bytes; larger files are not read
CACHE_FILE_NAME = ".i18n-cache.json"


# --- Config File (.i18nrc.json) ---

class ConfigFile(BaseModel):
    """Validated contents of .i18nrc.json; every field is optional."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        strict=True,
        extra="ignore",
    )

    schema_ref: Optional[str] = Field(default=None, alias="$schema")  # ignored
    src: Optional[str] = None
    lang: Optional[str] = None
    locales: Optional[list[str]] = None
    extensions: Optional[list[str]] = None
    show_orphans: Optional[bool] = None
    fail_on_orphans: Optional[bool] = None
    show_duplicates: Optional[bool] = None
    check_params: Optional[bool] = None
    check_plurals: Optional[bool] = None
    check_file_duplicates: Optional[bool] = None
    respect_gitignore: Optional[bool] = None
    cache: Optional[bool] = None
    verbose: Optional[bool] = None
    json_output: Optional[bool] = Field(default=None, alias="json")
    ignore_keys: Optional[list[str]] = None
    ignore_patterns: Optional[list[str]] = None
    ignore_domains: Optional[list[str]] = None

    @field_validator("locales", "extensions", "ignore_keys", "ignore_patterns", "ignore_domains")
    @classmethod
    def _not_empty(cls, value):
        if value is not None and len(value) == 0:
            raise ValueError("Array is empty")
        return value

    @classmethod
    def aliases(cls) -> set[str]:
        """JSON key names accepted in the file."""
        return {field.alias or name for name, field in cls.model_fields.items()}


# --- Run Settings ---

class AuditSettings(BaseModel):
    """Everything one audit run needs; passed explicitly, never global."""

    model_config = ConfigDict(frozen=True)

    src: str = Field(default_factory=os.getcwd)
    lang_dir: str = Field(default_factory=lambda: os.path.join(os.getcwd(), "resources", "lang"))
    locales: list[str] = Field(default_factory=lambda: list(DEFAULT_LOCALES))
    extensions: list[str] = Field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    show_orphans: bool = False
    fail_on_orphans: bool = False
    show_duplicates: bool = True
    check_params: bool = False
    check_plurals: bool = False
    check_file_duplicates: bool = False
    respect_gitignore: bool = False
    use_cache: bool = False
    clear_cache: bool = False
    json_output: bool = False
    verbose: bool = False
    cache_file: str = Field(default_factory=lambda: os.path.join(os.getcwd(), CACHE_FILE_NAME))
    ignore_keys: list[str] = Field(default_factory=list)
    ignore_patterns: list[str] = Field(default_factory=list)
    ignore_domains: list[str] = Field(default_factory=list)
    max_file_size: int = MAX_FILE_SIZE

    @property
    def base_locale(self) -> str:
        return self.locales[0]


# --- JSON Report ---

class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AuditStats(_CamelModel):
    """Run statistics"""
    source: str
    locales: list[str]
    files_scanned: int
    translation_keys_used: int
    coverage: int
    duration: float


class AuditIssues(_CamelModel):
    """Issue sets; each is None when empty"""
    missing_translations: Optional[dict[str, list[str]]] = None
    parity_issues: Optional[dict[str, Any]] = None
    duplicate_keys: Optional[dict[str, Any]] = None
    parameter_mismatches: Optional[list[Any]] = None
    pluralization_issues: Optional[list[Any]] = None
    intra_file_duplicates: Optional[list[Any]] = None
    orphan_keys: Optional[list[str]] = None
    dynamic_keys: Optional[list[Any]] = None


class AuditReport(_CamelModel):
    """Top-level JSON report"""
    success: bool
    exit_code: int
    stats: AuditStats
    issues: AuditIssues
