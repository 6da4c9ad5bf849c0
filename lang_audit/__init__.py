"""
Lang Audit

Translation coverage auditor for Laravel/Inertia projects.
"""

__version__ = "3.3.0"

from .audit import AuditResult, ExitCode, run_audit  # noqa: E402
from .exceptions import AuditError  # noqa: E402
from .extractor import UsedKeyIndex, extract_keys  # noqa: E402
from .models import AuditSettings  # noqa: E402

__all__ = [
    "AuditError",
    "AuditResult",
    "AuditSettings",
    "ExitCode",
    "UsedKeyIndex",
    "__version__",
    "extract_keys",
    "run_audit",
]
