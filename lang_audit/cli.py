"""
Lang Audit CLI

Usage:
  lang-audit
  lang-audit --src app --lang resources/lang --locales en,ar,fr
  lang-audit --check-params --check-plurals --json
"""

import argparse
import json
import logging
import signal
import sys
import threading
from typing import List, Optional

from . import __version__
from .audit import EXIT_FATAL, EXIT_INTERRUPTED, run_audit
from .config_loader import build_settings, load_config_file, resolve_config_path
from .exceptions import AuditError
from .report import Style, render_header, use_color, write_report

logger = logging.getLogger("lang_audit.cli")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="lang-audit",
        description="Audit Laravel/Inertia translation keys against locale catalogs.",
    )
    # Every option defaults to None so the config file can fill it in
    ap.add_argument("--src", help="Source directory to scan (default: cwd)")
    ap.add_argument("--lang", help="Language directory (default: resources/lang)")
    ap.add_argument("--locales", help="Comma-separated locales; the first is the base (default: en,ar)")
    ap.add_argument("--ext", help="Comma-separated file extensions to scan")
    ap.add_argument("--config", help="Config file path (default: .i18nrc.json)")

    checks = ap.add_argument_group("checks")
    checks.add_argument("--show-orphans", action="store_true", default=None, help="Report keys never used in code")
    checks.add_argument("--fail-on-orphans", action="store_true", default=None, help="Orphan keys fail the run")
    dup = checks.add_mutually_exclusive_group()
    dup.add_argument("--show-duplicates", action="store_true", default=None, help="Report keys defined more than once")
    dup.add_argument("--no-duplicates", action="store_true", default=None, help="Skip the duplicate-key check")
    checks.add_argument("--check-params", action="store_true", default=None, help="Compare :param / {param} placeholders")
    checks.add_argument("--check-plurals", action="store_true", default=None, help="Compare pluralization rules")
    checks.add_argument("--check-file-duplicates", action="store_true", default=None,
                        help="Find keys repeated inside one catalog file")
    checks.add_argument("--respect-gitignore", action="store_true", default=None, help="Skip files matched by .gitignore")

    run = ap.add_argument_group("run")
    run.add_argument("--cache", action="store_true", default=None, help="Cache loaded catalogs for an hour")
    run.add_argument("--clear-cache", action="store_true", default=None, help="Delete the cache before running")
    run.add_argument("--json", action="store_true", default=None, help="Print a JSON report to stdout")
    run.add_argument("--verbose", "-v", action="store_true", default=None, help="Debug logging and extra detail")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def configure_logging(verbose: bool, json_output: bool) -> None:
    if json_output:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)


def _raise_interrupt(signum, frame):
    raise KeyboardInterrupt(signal.Signals(signum).name)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    json_output = bool(args.json)
    configure_logging(bool(args.verbose), json_output)
    # signal handlers can only be installed from the main thread
    in_main_thread = threading.current_thread() is threading.main_thread()
    if in_main_thread:
        previous_handler = signal.signal(signal.SIGTERM, _raise_interrupt)

    try:
        file_config = load_config_file(resolve_config_path(args.config))
        settings = build_settings(args, file_config)
        json_output = settings.json_output
        configure_logging(settings.verbose, json_output)

        if not json_output:
            print(render_header(Style(use_color(sys.stdout))))
            print()

        result = run_audit(settings)
        write_report(result)
        return int(result.exit_code)
    except KeyboardInterrupt as e:
        if not json_output:
            print(f"\nReceived {str(e) or 'SIGINT'}, exiting...")
        return EXIT_INTERRUPTED
    except AuditError as e:
        logger.error("%s", e)
        if json_output:
            print(json.dumps({"success": False, "exitCode": EXIT_FATAL, "error": str(e)}))
        return EXIT_FATAL
    finally:
        if in_main_thread:
            signal.signal(signal.SIGTERM, previous_handler)


if __name__ == "__main__":
    sys.exit(main())
