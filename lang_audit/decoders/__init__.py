"""
Lang Audit Catalog Decoders

Format-specific readers for translation catalogs.
"""

from .base import CatalogDecoder, get_decoder
from .json_file import JsonDecoder
from .php import PhpArrayDecoder

__all__ = ["CatalogDecoder", "JsonDecoder", "PhpArrayDecoder", "get_decoder"]
