# Shared fixtures: a fake in-process PHP decoder (no php binary needed) and a
# small project builder that lays out src/ and lang/ under tmp_path.

import json
import logging
import os
from typing import Any, Dict

import pytest

from lang_audit.audit import run_audit
from lang_audit.decoders import CatalogDecoder
from lang_audit.exceptions import DecodeError
from lang_audit.models import AuditSettings

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")


def php_literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return "'" + str(value).replace("\\", "\\\\").replace("'", "\\'") + "'"


def render_php(data: Dict[str, Any], depth: int = 1) -> str:
    """Render a dict as a short-syntax PHP array, one key per line."""
    pad = "    " * depth
    lines = ["["]
    for key, value in data.items():
        if isinstance(value, dict):
            lines.append(f"{pad}'{key}' => {render_php(value, depth + 1)},")
        else:
            lines.append(f"{pad}'{key}' => {php_literal(value)},")
    lines.append("    " * (depth - 1) + "]")
    return "\n".join(lines)


class FakePhpDecoder(CatalogDecoder):
    """Returns registered data per absolute path instead of running php."""

    def __init__(self, available: bool = True):
        self.available = available
        self.catalogs: Dict[str, Dict[str, Any]] = {}
        self.calls = []

    @property
    def name(self) -> str:
        return "php"

    @property
    def suffix(self) -> str:
        return ".php"

    def is_available(self) -> bool:
        return self.available

    def register(self, path: str, data: Dict[str, Any]) -> None:
        self.catalogs[os.path.abspath(path)] = data

    def decode_file(self, abs_path: str) -> Dict[str, Any]:
        self.calls.append(abs_path)
        try:
            return self.catalogs[os.path.abspath(abs_path)]
        except KeyError:
            raise DecodeError(f"no fixture for {abs_path}")


class Project:
    """A throwaway Laravel-shaped tree: <root>/src and <root>/lang."""

    def __init__(self, root):
        self.root = str(root)
        self.src = os.path.join(self.root, "src")
        self.lang = os.path.join(self.root, "lang")
        os.makedirs(self.src)
        os.makedirs(self.lang)
        self.php = FakePhpDecoder()

    def write(self, path: str, content: str) -> str:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        return path

    def source(self, rel: str, content: str) -> str:
        return self.write(os.path.join(self.src, rel), content)

    def php_catalog(self, rel: str, data: Dict[str, Any]) -> str:
        """Write lang/<rel> as a PHP array file and register its decoded form."""
        path = self.write(os.path.join(self.lang, rel), "<?php\n\nreturn " + render_php(data) + ";\n")
        self.php.register(path, data)
        return path

    def json_catalog(self, locale: str, data: Dict[str, Any]) -> str:
        return self.write(os.path.join(self.lang, f"{locale}.json"), json.dumps(data, indent=4, ensure_ascii=False))

    def settings(self, **overrides) -> AuditSettings:
        values = dict(
            src=self.src,
            lang_dir=self.lang,
            cache_file=os.path.join(self.root, ".i18n-cache.json"),
        )
        values.update(overrides)
        return AuditSettings(**values)

    def run(self, **overrides):
        return run_audit(self.settings(**overrides), php_decoder=self.php)


@pytest.fixture
def project(tmp_path):
    return Project(tmp_path / "app")


@pytest.fixture
def fixture_text():
    def _read(name: str) -> str:
        with open(os.path.join(FIXTURES_DIR, name), "r", encoding="utf-8") as f:
            return f.read()
    return _read


@pytest.fixture(autouse=True)
def _restore_root_logging():
    # The CLI reconfigures the root logger; put it back after every test.
    root = logging.getLogger()
    level = root.level
    handlers = list(root.handlers)
    yield
    root.setLevel(level)
    root.handlers[:] = handlers
