#!/usr/bin/env python3
"""
i18n audit for a Laravel/Inertia checkout.

Runs lang-audit without installing the package.

Usage:
  python3 scripts/i18n_audit.py --src app --lang resources/lang
  python3 scripts/i18n_audit.py --check-params --check-plurals --json
"""

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from lang_audit.cli import main  # noqa: E402


if __name__ == "__main__":
  raise SystemExit(main())
