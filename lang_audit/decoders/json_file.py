"""
JSON Catalog Decoder

Reads flat JSON catalogs (lang/<locale>.json).
"""

import json
from typing import Any, Dict

from ..exceptions import DecodeError
from .base import CatalogDecoder


class JsonDecoder(CatalogDecoder):
    """Decoder for JSON catalogs."""

    @property
    def name(self) -> str:
        return "json"

    @property
    def suffix(self) -> str:
        return ".json"

    def decode_text(self, text: str) -> Dict[str, Any]:
        try:
            data = json.loads(text)
        except ValueError as e:
            raise DecodeError(str(e)) from e
        if not isinstance(data, dict):
            raise DecodeError("top-level JSON value is not an object")
        return data

    def decode_file(self, abs_path: str) -> Dict[str, Any]:
        try:
            with open(abs_path, "r", encoding="utf-8") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise DecodeError(str(e)) from e
        return self.decode_text(text)
