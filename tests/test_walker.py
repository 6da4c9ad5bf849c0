"""Tests for the lazy source tree walker."""

import logging
import os
import types

import pytest

from lang_audit.gitignore import parse_gitignore
from lang_audit.walker import DEFAULT_EXTENSIONS, matches_extension, walk


def touch(root, rel, content=""):
    path = os.path.join(root, *rel.split("/"))
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    return path


def rel_paths(root, paths):
    return [os.path.relpath(path, root).replace(os.sep, "/") for path in paths]


@pytest.mark.parametrize("name,extensions,expected", [
    ("view.blade.php", ["blade.php"], True),
    ("view.php", ["blade.php"], False),
    ("view.blade.php", ["php"], True),
    ("App.TSX", ["tsx"], True),
    ("App.tsx", [".tsx"], True),
    ("script.mjs", ["js"], False),
    ("php", ["php"], False),
])
def test_matches_extension(name, extensions, expected):
    assert matches_extension(name, extensions) is expected


def test_walk_filters_and_prunes(tmp_path):
    root = str(tmp_path / "src")
    touch(root, "app/a.php")
    touch(root, "app/view.blade.php")
    touch(root, "app/readme.txt")
    touch(root, "node_modules/pkg/index.js")
    touch(root, "vendor/laravel/x.php")
    touch(root, ".hidden/h.js")
    touch(root, "app/.env.js")
    touch(root, "resources/js/App.tsx")

    found = rel_paths(root, walk(root, DEFAULT_EXTENSIONS))

    assert found == ["app/a.php", "app/view.blade.php", "resources/js/App.tsx"]


def test_walk_is_lazy(tmp_path):
    root = str(tmp_path)
    touch(root, "a/one.js")
    touch(root, "b/two.js")
    gen = walk(root, ["js"])
    assert isinstance(gen, types.GeneratorType)
    assert rel_paths(root, [next(gen)]) == ["a/one.js"]


def test_walk_honors_ignore_matcher(tmp_path):
    root = str(tmp_path)
    touch(root, "generated/g.js")
    touch(root, "app/x.min.js")
    touch(root, "app/x.js")
    matcher = parse_gitignore("generated/\n*.min.js\n", root)

    assert rel_paths(root, walk(root, ["js"], matcher=matcher)) == ["app/x.js"]


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
def test_walk_survives_symlink_cycle(tmp_path, caplog):
    caplog.set_level(logging.WARNING, logger="lang_audit")
    root = str(tmp_path / "src")
    touch(root, "a/f.js")
    try:
        os.symlink(root, os.path.join(root, "a", "loop"))
    except OSError:
        pytest.skip("cannot create symlink")

    assert rel_paths(root, walk(root, ["js"])) == ["a/f.js"]
    assert "circular symlink" in caplog.text


def test_walk_missing_root_yields_nothing(tmp_path):
    assert list(walk(str(tmp_path / "nope"), ["js"])) == []


def test_walk_unreadable_directory_treated_as_empty(tmp_path, caplog, monkeypatch):
    caplog.set_level(logging.WARNING, logger="lang_audit")
    root = str(tmp_path / "src")
    touch(root, "locked/x.js")
    touch(root, "open/y.js")
    real_scandir = os.scandir

    def scandir(path):
        if os.path.basename(path) == "locked":
            raise PermissionError(13, "Permission denied", path)
        return real_scandir(path)

    monkeypatch.setattr("lang_audit.walker.os.scandir", scandir)

    assert rel_paths(root, walk(root, ["js"])) == ["open/y.js"]
    assert "Error walking directory" in caplog.text
