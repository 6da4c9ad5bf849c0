"""
Catalog Decoder Base Class and Factory

A decoder turns one catalog file into a nested key -> value structure.
Decoders never raise to their caller: any failure is logged and an empty
structure is returned.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

logger = logging.getLogger("lang_audit.decoders")


class CatalogDecoder(ABC):
    """Abstract base class for catalog file decoders."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Decoder identifier ('php' or 'json')."""
        pass

    @property
    @abstractmethod
    def suffix(self) -> str:
        """File suffix this decoder reads, including the dot."""
        pass

    def is_available(self) -> bool:
        """Whether the decoder can run in this environment."""
        return True

    def version(self) -> Optional[str]:
        """Version string of the underlying tool, when there is one."""
        return None

    @abstractmethod
    def decode_file(self, abs_path: str) -> Dict[str, Any]:
        """
        Decode one file.

        Raises:
            DecodeError: when the file cannot be read or decoded
        """
        pass

    def load(self, abs_path: str) -> Dict[str, Any]:
        """Decode a file, returning {} (with a warning) on any failure."""
        try:
            data = self.decode_file(abs_path)
        except Exception as e:
            logger.warning("Could not parse %s", abs_path)
            logger.debug("   Error: %s", e)
            return {}
        if not isinstance(data, dict):
            return {}
        return data


def get_decoder(kind: str) -> CatalogDecoder:
    """
    Factory function for the decoder of a catalog format.

    Args:
        kind: 'php' or 'json'
    """
    requested = (kind or "").strip().lower()
    if requested == "php":
        from .php import PhpArrayDecoder
        return PhpArrayDecoder()
    if requested == "json":
        from .json_file import JsonDecoder
        return JsonDecoder()
    raise ValueError(f"Unknown catalog format: {kind!r}")
