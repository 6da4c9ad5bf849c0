"""Tests for console and JSON reporting."""

import io
import json

import pytest

from lang_audit.report import coverage_color, render_console, render_json, use_color, write_report


@pytest.fixture
def result(project):
    project.source("views/home.blade.php", "{{ __('auth.failed') }}\n{{ __('Welcome back') }}\n")
    project.source("helpers/errors.php", "<?php echo __(\"errors.$code\");\n")
    project.php_catalog("en/auth.php", {"failed": "Nope"})
    project.json_catalog("en", {"Welcome back": "Welcome back"})
    project.php_catalog("ar/auth.php", {"failed": "لا"})
    return project.run(show_orphans=True, verbose=True)


def test_json_report_shape(result):
    report = json.loads(render_json(result))

    assert report["success"] is False
    assert report["exitCode"] == 3
    assert set(report["stats"]) == {
        "source", "locales", "filesScanned", "translationKeysUsed", "coverage", "duration",
    }
    assert report["stats"]["coverage"] == 75
    issues = report["issues"]
    assert issues["missingTranslations"] == {"ar": ["Welcome back"]}
    assert issues["parityIssues"] == {"ar": {"missingFromLocale": ["Welcome back"], "extraInLocale": []}}
    assert issues["orphanKeys"] is None
    assert issues["parameterMismatches"] is None
    assert issues["intraFileDuplicates"] is None
    assert issues["dynamicKeys"][0]["file"] == "helpers/errors.php"


def test_console_report_plain(result):
    text = render_console(result, color=False)
    assert "\x1b[" not in text
    assert "Coverage: 75%" in text
    assert "ar: 1 missing keys" in text
    assert "views/home.blade.php:2" in text
    assert "PARITY ISSUES (vs en)" in text
    assert "DYNAMIC KEYS DETECTED" in text
    assert "No orphan keys" in text
    assert "Found issues. Exit code: 3" in text
    assert "  - Parity issues" in text


def test_console_report_colored(result):
    assert "\x1b[" in render_console(result, color=True)


def test_write_report_respects_json_setting(result):
    out = io.StringIO()
    write_report(result, out)
    assert out.getvalue().startswith("=")


def test_use_color(monkeypatch):
    class Tty(io.StringIO):
        def isatty(self):
            return True

    monkeypatch.delenv("NO_COLOR", raising=False)
    assert use_color(Tty())
    assert not use_color(io.StringIO())
    monkeypatch.setenv("NO_COLOR", "1")
    assert not use_color(Tty())


@pytest.mark.parametrize("coverage,color", [(100, "green"), (95, "green"), (94, "yellow"), (80, "yellow"), (79, "red")])
def test_coverage_color(coverage, color):
    assert coverage_color(coverage) == color
