"""
Lang Audit Exceptions

Errors raised at run level. Per-file and per-locale failures never surface
as exceptions; they are logged and the unit contributes nothing.
"""


class AuditError(Exception):
    """Base exception for audit errors"""
    pass


class ConfigError(AuditError):
    """Raised when the config file cannot be parsed or settings are unusable"""
    pass


class SourceDirectoryError(AuditError):
    """Raised when the source directory is missing or not a directory"""
    pass


class PhpUnavailableError(AuditError):
    """Raised when PHP catalogs exist but no php binary can decode them"""
    pass


class DecodeError(AuditError):
    """Raised by a catalog decoder; always caught at the file boundary"""
    pass
