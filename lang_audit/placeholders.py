"""
Lang Audit Placeholders

Parameter and pluralization metadata derived from translation values.
"""

import re
from dataclasses import dataclass
from typing import Any, List, Optional, Union

COLON_PARAM = re.compile(r":(\w+)", re.ASCII)
BRACE_PARAM = re.compile(r"\{(\w+)\}", re.ASCII)
PLURAL_MARKER = re.compile(r"\{(\d+)\}|\[(\d+),(\d+|\*)\]", re.ASCII)


@dataclass(frozen=True)
class ExactRule:
    """Matches when count == value."""

    value: int

    def to_dict(self) -> dict:
        return {"type": "exact", "value": self.value}


@dataclass(frozen=True)
class RangeRule:
    """Matches start <= count <= end; end None means unbounded ('*')."""

    start: int
    end: Optional[int] = None

    @property
    def unbounded(self) -> bool:
        return self.end is None

    def to_dict(self) -> dict:
        return {"type": "range", "from": self.start, "to": "*" if self.unbounded else self.end}


PluralRule = Union[ExactRule, RangeRule]


@dataclass(frozen=True)
class PluralInfo:
    """Ordered plural rules found in a value, plus the raw value."""

    rules: tuple
    raw: str

    def to_dict(self) -> dict:
        return {"rules": [r.to_dict() for r in self.rules], "raw": self.raw}

    @classmethod
    def from_dict(cls, data: dict) -> "PluralInfo":
        rules: List[PluralRule] = []
        for rule in data.get("rules", []):
            if rule.get("type") == "exact":
                rules.append(ExactRule(int(rule["value"])))
            else:
                end = rule.get("to")
                rules.append(RangeRule(int(rule["from"]), None if end in ("*", None) else int(end)))
        return cls(tuple(rules), data.get("raw", ""))


def extract_params(text: Any) -> List[str]:
    """
    Extract placeholder names from a translation value.

    Recognizes ':name' and '{name}'; brace markers holding only digits are
    pluralization markers and are not parameters. Non-strings yield [].
    """
    if not isinstance(text, str):
        return []

    params = set(COLON_PARAM.findall(text))
    for name in BRACE_PARAM.findall(text):
        if not name.isdigit():
            params.add(name)
    return sorted(params)


def extract_plurals(text: Any) -> Optional[PluralInfo]:
    """
    Extract pluralization rules, e.g. "{0} none|[1,1] one|[2,*] many".

    Returns None when the value carries no '{N}' or '[N,M]' / '[N,*]' marker.
    """
    if not isinstance(text, str):
        return None

    rules: List[PluralRule] = []
    for match in PLURAL_MARKER.finditer(text):
        exact, start, end = match.groups()
        if exact is not None:
            rules.append(ExactRule(int(exact)))
        else:
            rules.append(RangeRule(int(start), None if end == "*" else int(end)))

    if not rules:
        return None
    return PluralInfo(tuple(rules), text)
