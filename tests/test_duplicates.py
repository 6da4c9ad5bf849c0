"""Tests for intra-file duplicate detection."""

import os

from lang_audit.duplicates import (
    check_intra_file_duplicates,
    extract_json_keys,
    extract_php_array_keys,
    find_intra_file_duplicates,
)

NESTED_TWICE = """'a' => [
  'b' => 'x',
],
'a' => [
  'b' => 'y',
],
"""


def paths(keys):
    return [k.path for k in keys]


def test_repeated_block_reports_parent_and_child():
    duplicates = find_intra_file_duplicates(extract_php_array_keys(NESTED_TWICE))
    found = {d.full_path: d for d in duplicates}

    assert set(found) == {"a", "a.b"}
    assert found["a"].lines == [1, 4]
    assert found["a.b"].lines == [2, 5]
    assert found["a.b"].key == "b"
    assert found["a.b"].count == 2


def test_full_php_file_paths():
    content = """<?php

return [
    'failed' => 'These credentials do not match.',
    'throttle' => [
        'short' => 'Too many attempts.',
        "long" => 'Please wait :seconds seconds.',
    ],
    bare_key => 'ok',
];
"""
    assert paths(extract_php_array_keys(content)) == [
        "failed", "throttle", "throttle.short", "throttle.long", "bare_key",
    ]


def test_single_line_nested_array_is_a_leaf():
    content = "'list' => ['x', 'y'],\n'next' => 'z',\n"
    assert paths(extract_php_array_keys(content)) == ["list", "next"]


def test_closing_brackets_on_key_line_unwind_stack():
    content = "'group' => [\n  'leaf' => 'x']],\n'after' => 1\n"
    assert paths(extract_php_array_keys(content)) == ["group", "group.leaf", "after"]


def test_array_function_syntax():
    content = """return array(
  'a' => array(
    'b' => 'x',
  ),
  'c' => 'y',
);
"""
    assert paths(extract_php_array_keys(content)) == ["a", "a.b", "c"]


def test_same_leaf_in_different_parents_is_not_duplicate():
    content = """'auth' => [
    'title' => 'Login',
],
'profile' => [
    'title' => 'Profile',
],
"""
    assert find_intra_file_duplicates(extract_php_array_keys(content)) == []


def test_json_keys():
    content = '{\n  "Welcome": "Hi",\n  "Bye": "Ciao",\n  "Welcome": "Hello"\n}\n'
    keys = extract_json_keys(content)
    assert paths(keys) == ["Welcome", "Bye", "Welcome"]
    [dup] = find_intra_file_duplicates(keys)
    assert dup.to_dict() == {"key": "Welcome", "fullPath": "Welcome", "count": 2, "lines": [2, 4]}


def test_check_intra_file_duplicates_over_lang_dir(project):
    project.write(os.path.join(project.lang, "en.php"), "<?php\nreturn [\n'x' => 1,\n'x' => 2,\n];\n")
    project.write(os.path.join(project.lang, "en", "auth.php"), "<?php\nreturn [\n" + NESTED_TWICE + "];\n")
    project.write(os.path.join(project.lang, "en", "clean.php"), "<?php\nreturn [\n'y' => 1,\n];\n")
    project.write(os.path.join(project.lang, "en.json"), '{\n"Hi": "a",\n"Hi": "b"\n}\n')

    issues = check_intra_file_duplicates(project.lang, ["en", "ar"])

    assert [(i.locale, i.file) for i in issues] == [("en", "en.php"), ("en", "auth.php"), ("en", "en.json")]
    assert [d.full_path for d in issues[1].duplicates] == ["a", "a.b"]
    assert issues[0].duplicates[0].lines == [3, 4]
