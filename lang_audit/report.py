"""
Lang Audit Reporting

Human-readable console report and the JSON report. Both read an AuditResult
and never change it.
"""

import json
import os
import sys
from typing import List, Optional, TextIO

from . import __version__
from .audit import AuditResult, ExitCode, describe_exit_code
from .models import AuditIssues, AuditReport, AuditStats

LIST_LIMIT = 10
PARITY_LIMIT = 5
DYNAMIC_FILE_LIMIT = 5
RULE = "=" * 60


def use_color(stream: TextIO) -> bool:
    """ANSI only for a terminal, and never when NO_COLOR is set."""
    if os.getenv("NO_COLOR") is not None:
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class Style:
    CODES = {
        "red": "31", "green": "32", "yellow": "33",
        "magenta": "35", "cyan": "36", "bold": "1", "dim": "2",
    }

    def __init__(self, enabled: bool):
        self.enabled = enabled

    def __call__(self, text: str, *names: str) -> str:
        if not self.enabled or not names:
            return text
        codes = ";".join(self.CODES[n] for n in names)
        return f"\x1b[{codes}m{text}\x1b[0m"


def coverage_color(coverage: int) -> str:
    if coverage >= 95:
        return "green"
    if coverage >= 80:
        return "yellow"
    return "red"


def _more(lines: List[str], style: Style, total: int, shown: int, indent: str = "    ") -> None:
    if total > shown:
        lines.append(style(f"{indent}... and {total - shown} more", "dim"))


def render_header(style: Style) -> str:
    title = f"  i18n Translation Checker v{__version__}"
    box = "=" * 42
    return "\n".join([
        style(box, "bold", "cyan"),
        style(title, "bold", "cyan"),
        style(box, "bold", "cyan"),
    ])


def render_console(result: AuditResult, color: bool = False) -> str:
    """Full console report as one string."""
    s = Style(color)
    settings = result.settings
    base = result.base_locale
    lines: List[str] = []

    lines += [
        s(RULE, "cyan"),
        s("SCAN RESULTS", "bold"),
        s(RULE, "cyan"),
        f"  Source: {settings.src}",
        f"  Locales: {', '.join(settings.locales)}",
        f"  Files scanned: {result.files_scanned}",
        f"  Translation keys used: {len(result.used)}",
        f"  Coverage: {s(f'{result.coverage}%', 'bold', coverage_color(result.coverage))}",
        f"  Duration: {result.duration:.2f}s",
        "",
    ]

    if result.missing:
        lines.append(s("MISSING TRANSLATIONS", "bold", "red"))
        for locale, keys in result.missing.items():
            lines.append(s(f"\n  {locale}: {len(keys)} missing keys", "red"))
            for key in keys[:LIST_LIMIT]:
                lines.append(f"    - {key}")
                locs = result.used.locations.get(key) or []
                if settings.verbose and locs:
                    lines.append(s(f"      {locs[0].file}:{locs[0].line}", "dim"))
            _more(lines, s, len(keys), LIST_LIMIT)
    else:
        lines.append(s("No missing translations", "green"))

    if result.parity:
        lines.append(s(f"\nPARITY ISSUES (vs {base})", "bold", "yellow"))
        for locale, issue in result.parity.items():
            for label, keys in (("keys missing", issue.missing_from_locale), ("extra keys", issue.extra_in_locale)):
                if not keys:
                    continue
                lines.append(s(f"\n  {locale}: {len(keys)} {label}", "yellow"))
                lines += [f"    - {k}" for k in keys[:PARITY_LIMIT]]
                _more(lines, s, len(keys), PARITY_LIMIT)
    else:
        lines.append(s(f"Parity OK (base: {base})", "green"))

    if settings.show_duplicates:
        if result.duplicates:
            lines.append(s("\nDUPLICATE KEYS", "bold", "red"))
            for locale, dups in result.duplicates.items():
                lines.append(s(f"\n  {locale}: {len(dups)} duplicates", "red"))
                for d in dups:
                    lines.append(f"    - {d.key} (x{d.count} in: {', '.join(d.files)})")
        else:
            lines.append(s("No duplicate keys", "green"))

    if settings.check_params:
        if result.parameter_issues:
            lines.append(s("\nPARAMETER MISMATCHES", "bold", "yellow"))
            for issue in result.parameter_issues[:LIST_LIMIT]:
                lines.append(s(f"\n  {issue.key} [{issue.locale}]", "yellow"))
                if issue.missing:
                    lines.append(s(f"    Missing params: {', '.join(issue.missing)}", "red"))
                if issue.extra:
                    lines.append(s(f"    Extra params: {', '.join(issue.extra)}", "yellow"))
            _more(lines, s, len(result.parameter_issues), LIST_LIMIT, "  ")
        else:
            lines.append(s("Parameter consistency OK", "green"))

    if settings.check_plurals:
        if result.pluralization_issues:
            lines.append(s("\nPLURALIZATION ISSUES", "bold", "yellow"))
            for issue in result.pluralization_issues[:LIST_LIMIT]:
                lines.append(s(f"\n  {issue.key} [{issue.locale}]", "yellow"))
                if issue.locale_rules is None:
                    lines.append(s("    Missing pluralization (base locale has plural rules)", "red"))
                else:
                    lines.append(s("    Plural rule count mismatch", "yellow"))
                    lines.append(s(
                        f"      Base: {len(issue.base_rules)} rules, Locale: {len(issue.locale_rules)} rules", "dim"
                    ))
            _more(lines, s, len(result.pluralization_issues), LIST_LIMIT, "  ")
        else:
            lines.append(s("Pluralization consistency OK", "green"))

    if settings.check_file_duplicates:
        if result.file_duplicates:
            lines.append(s("\nDUPLICATE KEYS WITHIN FILES", "bold", "red"))
            lines.append(s("  (Same key appears multiple times - second value overwrites first)\n", "dim"))
            for issue in result.file_duplicates:
                lines.append(s(f"  {issue.locale}/{issue.file}:", "red"))
                for dup in issue.duplicates:
                    joined = ", ".join(str(n) for n in dup.lines)
                    lines.append(s(f"    - {dup.full_path} (x{dup.count} at lines: {joined})", "yellow"))
                lines.append("")
        else:
            lines.append(s("No duplicate keys within files", "green"))

    if result.used.dynamic_keys and settings.verbose:
        lines.append(s("\nDYNAMIC KEYS DETECTED", "bold", "magenta"))
        lines.append(s("  (These cannot be validated automatically)", "dim"))
        files = list(dict.fromkeys(d.file for d in result.used.dynamic_keys))
        lines += [s(f"  - {f}", "magenta") for f in files[:DYNAMIC_FILE_LIMIT]]
        if len(files) > DYNAMIC_FILE_LIMIT:
            lines.append(s(f"  ... in {len(files) - DYNAMIC_FILE_LIMIT} more files", "dim"))
        lines.append("")

    if settings.show_orphans:
        if result.orphans:
            lines.append(s(f"\nORPHAN KEYS: {len(result.orphans)}", "bold", "yellow"))
            lines.append(s("  (Defined in lang files but not used in code)", "dim"))
            lines += [f"    - {k}" for k in result.orphans[:LIST_LIMIT]]
            _more(lines, s, len(result.orphans), LIST_LIMIT, "  ")
            lines.append("")
        else:
            lines.append(s("No orphan keys", "green"))

    lines.append(s(RULE, "cyan"))
    code = result.exit_code
    if code == ExitCode.SUCCESS:
        lines.append(s("\nAll checks passed!\n", "bold", "green"))
    else:
        lines.append(s(f"\nFound issues. Exit code: {int(code)}\n", "bold", "red"))
        lines.append("Issues found:")
        lines += [f"  - {label}" for label in describe_exit_code(code)]
        lines.append("")

    return "\n".join(lines)


def build_report(result: AuditResult) -> AuditReport:
    used = result.used
    return AuditReport(
        success=result.success,
        exit_code=int(result.exit_code),
        stats=AuditStats(
            source=result.settings.src,
            locales=list(result.settings.locales),
            files_scanned=result.files_scanned,
            translation_keys_used=len(used),
            coverage=result.coverage,
            duration=result.duration,
        ),
        issues=AuditIssues(
            missing_translations=result.missing or None,
            parity_issues={k: v.to_dict() for k, v in result.parity.items()} or None,
            duplicate_keys={k: [d.to_dict() for d in v] for k, v in result.duplicates.items()} or None,
            parameter_mismatches=[i.to_dict() for i in result.parameter_issues] or None,
            pluralization_issues=[i.to_dict() for i in result.pluralization_issues] or None,
            intra_file_duplicates=[i.to_dict() for i in result.file_duplicates] or None,
            orphan_keys=list(result.orphans) or None,
            dynamic_keys=[d.to_dict() for d in used.dynamic_keys] or None,
        ),
    )


def render_json(result: AuditResult) -> str:
    return json.dumps(build_report(result).model_dump(by_alias=True), indent=2, ensure_ascii=False)


def write_report(result: AuditResult, out: Optional[TextIO] = None) -> None:
    """Print the report chosen by settings.json_output."""
    out = out or sys.stdout
    if result.settings.json_output:
        print(render_json(result), file=out)
    else:
        print(render_console(result, use_color(out)), file=out)
