"""
Lang Audit Config Loader

Reads .i18nrc.json, validates it field by field and merges it with CLI
flags into one immutable AuditSettings.

Precedence: CLI flag > config file > built-in default.
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .exceptions import ConfigError
from .models import CACHE_FILE_NAME, AuditSettings, ConfigFile

logger = logging.getLogger("lang_audit.config_loader")

CONFIG_FILE_NAME = ".i18nrc.json"
CONFIG_ENV_VAR = "LANG_AUDIT_CONFIG"

# pydantic error type -> expected JSON type for warning messages
_EXPECTED = {
    "string_type": "string",
    "bool_type": "boolean",
    "list_type": "array",
}


def resolve_config_path(explicit: Optional[str] = None, cwd: Optional[str] = None) -> str:
    """--config wins, then LANG_AUDIT_CONFIG, then .i18nrc.json in cwd."""
    cwd = cwd or os.getcwd()
    path = explicit or os.getenv(CONFIG_ENV_VAR) or CONFIG_FILE_NAME
    return os.path.abspath(os.path.join(cwd, path))


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def _describe(error: dict, value: Any) -> str:
    if len(error["loc"]) > 1:
        return "Expected array of strings"
    if error["type"] in _EXPECTED:
        return f"Expected {_EXPECTED[error['type']]}, got {_json_type(value)}"
    return error.get("msg", "Invalid value").replace("Value error, ", "")


def validate_config(raw: Dict[str, Any], source: str = CONFIG_FILE_NAME) -> ConfigFile:
    """
    Validate raw config data, dropping bad fields instead of failing.

    Unknown keys and invalid fields are reported as warnings; every field
    that survives keeps its value.
    """
    known = ConfigFile.aliases()
    data: Dict[str, Any] = {}
    for key, value in raw.items():
        if key in known:
            data[key] = value
        else:
            logger.warning("Unknown config key in %s: \"%s\" (ignored)", source, key)

    while True:
        try:
            return ConfigFile.model_validate(data)
        except ValidationError as e:
            dropped = False
            for error in e.errors():
                if not error["loc"]:
                    continue
                key = str(error["loc"][0])
                if key not in data:
                    continue
                logger.warning("Config validation in %s: \"%s\": %s", source, key, _describe(error, data[key]))
                del data[key]
                dropped = True
            if not dropped:
                raise ConfigError(f"Invalid config in {source}: {e}") from e


def load_config_file(path: str) -> ConfigFile:
    """
    Load and validate a config file.

    Args:
        path: Absolute path to the JSON config

    Returns:
        ConfigFile; all fields None when the file does not exist

    Raises:
        ConfigError: when the file exists but is not a JSON object
    """
    if not os.path.isfile(path):
        logger.debug("No config file at %s", path)
        return ConfigFile()

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(
            f"Failed to parse {os.path.basename(path)}: {e.msg} (line {e.lineno}, column {e.colno}). "
            "Check for trailing commas, missing brackets, or unquoted keys."
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to read {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"{os.path.basename(path)} must contain a JSON object")

    logger.debug("Loaded config from %s", path)
    return validate_config(raw, os.path.basename(path))


def split_list(value: Optional[str]) -> Optional[List[str]]:
    """Comma-separated CLI value -> list; None passes through."""
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


def _pick(*values):
    for value in values:
        if value is not None:
            return value
    return None


def build_settings(args: Any, file_config: Optional[ConfigFile] = None, cwd: Optional[str] = None) -> AuditSettings:
    """
    Merge parsed CLI arguments with the config file.

    CLI attributes left at None are treated as not given.
    """
    cwd = cwd or os.getcwd()
    fc = file_config or ConfigFile()
    defaults = AuditSettings(
        src=cwd,
        lang_dir=os.path.join(cwd, "resources", "lang"),
        cache_file=os.path.join(cwd, CACHE_FILE_NAME),
    )

    def flag(name: str, file_value: Optional[bool]) -> bool:
        return bool(_pick(getattr(args, name, None), file_value, getattr(defaults, name)))

    src = _pick(getattr(args, "src", None), fc.src)
    lang = _pick(getattr(args, "lang", None), fc.lang)
    locales = _pick(split_list(getattr(args, "locales", None)), fc.locales, defaults.locales)
    extensions = _pick(split_list(getattr(args, "ext", None)), fc.extensions, defaults.extensions)

    if getattr(args, "no_duplicates", False):
        show_duplicates = False
    elif getattr(args, "show_duplicates", None):
        show_duplicates = True
    else:
        show_duplicates = _pick(fc.show_duplicates, defaults.show_duplicates)

    if not locales:
        raise ConfigError("At least one locale is required")

    return AuditSettings(
        src=os.path.abspath(os.path.join(cwd, src)) if src else defaults.src,
        lang_dir=os.path.abspath(os.path.join(cwd, lang)) if lang else defaults.lang_dir,
        locales=list(locales),
        extensions=[ext.lstrip(".") for ext in extensions],
        show_orphans=flag("show_orphans", fc.show_orphans),
        fail_on_orphans=flag("fail_on_orphans", fc.fail_on_orphans),
        show_duplicates=bool(show_duplicates),
        check_params=flag("check_params", fc.check_params),
        check_plurals=flag("check_plurals", fc.check_plurals),
        check_file_duplicates=flag("check_file_duplicates", fc.check_file_duplicates),
        respect_gitignore=flag("respect_gitignore", fc.respect_gitignore),
        use_cache=bool(_pick(getattr(args, "cache", None), fc.cache, False)),
        clear_cache=bool(getattr(args, "clear_cache", None)),
        json_output=bool(_pick(getattr(args, "json", None), fc.json_output, False)),
        verbose=flag("verbose", fc.verbose),
        cache_file=defaults.cache_file,
        ignore_keys=list(fc.ignore_keys or []),
        ignore_patterns=list(fc.ignore_patterns or []),
        ignore_domains=list(fc.ignore_domains or []),
    )
