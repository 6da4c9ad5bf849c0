"""
PHP Array Catalog Decoder

Laravel lang files are PHP scripts returning an array. They are evaluated by
the php binary through a small loader script that prints the array as JSON;
the path is passed as an argument, never interpolated into code.
"""

import json
import logging
import os
import shutil
import subprocess
import tempfile
from typing import Any, Dict, Optional

from ..exceptions import DecodeError
from .base import CatalogDecoder

logger = logging.getLogger("lang_audit.decoders.php")

PHP_TIMEOUT_SECONDS = 5

LOADER_SCRIPT = """<?php
$file = $argv[1];
if (!is_file($file)) { echo '{}'; exit; }
$arr = require $file;
if (!is_array($arr)) { echo '{}'; exit; }
echo json_encode($arr, JSON_UNESCAPED_UNICODE | JSON_UNESCAPED_SLASHES);
"""


class PhpArrayDecoder(CatalogDecoder):
    """Decoder for PHP array-literal catalogs."""

    def __init__(self, php_binary: Optional[str] = None):
        self.php_binary = php_binary or os.getenv("LANG_AUDIT_PHP", "php")

    @property
    def name(self) -> str:
        return "php"

    @property
    def suffix(self) -> str:
        return ".php"

    def is_available(self) -> bool:
        return shutil.which(self.php_binary) is not None

    def version(self) -> Optional[str]:
        """First line of `php -v`, or None when php cannot run."""
        try:
            out = subprocess.run(
                [self.php_binary, "-v"],
                capture_output=True,
                text=True,
                timeout=PHP_TIMEOUT_SECONDS,
            )
        except (OSError, subprocess.SubprocessError):
            return None
        if out.returncode != 0:
            return None
        return out.stdout.split("\n")[0]

    def decode_file(self, abs_path: str) -> Dict[str, Any]:
        resolved = os.path.abspath(abs_path)

        fd, loader_path = tempfile.mkstemp(prefix="i18n-loader-", suffix=".php")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(LOADER_SCRIPT)

            try:
                res = subprocess.run(
                    [self.php_binary, loader_path, resolved],
                    capture_output=True,
                    text=True,
                    encoding="utf-8",
                    timeout=PHP_TIMEOUT_SECONDS,
                )
            except (OSError, subprocess.SubprocessError) as e:
                raise DecodeError(str(e)) from e

            if res.returncode != 0:
                raise DecodeError(res.stderr or res.stdout or f"php exited with {res.returncode}")

            try:
                data = json.loads(res.stdout or "{}")
            except ValueError as e:
                raise DecodeError(f"php output is not JSON: {e}") from e
            # json_encode turns list-like arrays into JSON lists
            return data if isinstance(data, dict) else {}
        finally:
            try:
                os.unlink(loader_path)
            except OSError:
                logger.debug("Could not remove loader script %s", loader_path)
