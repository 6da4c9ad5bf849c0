"""Tests for parameter and pluralization extraction."""

from lang_audit.placeholders import ExactRule, PluralInfo, RangeRule, extract_params, extract_plurals


def test_params_sorted_and_deduplicated():
    assert extract_params("Hi :name, you have :count new {count} :name") == ["count", "name"]


def test_brace_and_colon_params_combined():
    assert extract_params("Order {order_id} ships on :date") == ["date", "order_id"]


def test_digit_braces_are_not_params():
    assert extract_params("{0} none|{1} one") == []


def test_params_of_non_string_value():
    assert extract_params(["a", ":b"]) == []
    assert extract_params(None) == []


def test_plural_rules_in_text_order():
    info = extract_plurals("{0} none|[1,1] one|[2,*] many")
    assert info.rules == (ExactRule(0), RangeRule(1, 1), RangeRule(2, None))
    assert info.raw == "{0} none|[1,1] one|[2,*] many"
    assert info.rules[2].unbounded


def test_no_markers_means_no_plurals():
    assert extract_plurals("apple|apples") is None
    assert extract_plurals("Hello :name") is None
    assert extract_plurals(42) is None


def test_plural_info_dict_form():
    info = extract_plurals("[0,5] few|[6,*] lots")
    data = info.to_dict()
    assert data["rules"] == [
        {"type": "range", "from": 0, "to": 5},
        {"type": "range", "from": 6, "to": "*"},
    ]
    assert PluralInfo.from_dict(data) == info
