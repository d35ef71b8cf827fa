"""key=value attribute parsing for attribute records and trailing row text."""

from __future__ import annotations

import re

from kofparse.common.constants import RAW_ATTRS_KEY

_KV_RE = re.compile(
    r"""([^\s=]+)=(?:"((?:\\.|[^"\\])*)"|'((?:\\.|[^'\\])*)'|(\S+))"""
)
_ESCAPE_RE = re.compile(r"""\\(["'\\])""")
_ATTRIBUTE_RECORD_RE = re.compile(r"^\s*(?:10|11|12|20|30)(?!\S)\s*")


def _unescape(value: str) -> str:
    return _ESCAPE_RE.sub(r"\1", value)


def parse_kv_pairs(text: str) -> dict[str, str]:
    """Collect every key=value pair in ``text``.

    Values may be double-quoted or single-quoted (with backslash escapes for
    the quote character and the backslash itself) or a bare token.
    """
    pairs: dict[str, str] = {}
    for match in _KV_RE.finditer(text):
        key = match.group(1)
        if match.group(2) is not None:
            value = _unescape(match.group(2))
        elif match.group(3) is not None:
            value = _unescape(match.group(3))
        else:
            value = match.group(4)
        pairs[key] = value
    return pairs


def parse_attrs(remainder: str) -> dict:
    remainder = _ATTRIBUTE_RECORD_RE.sub("", remainder, count=1).strip()
    pairs = parse_kv_pairs(remainder)
    if not pairs:
        return {RAW_ATTRS_KEY: remainder.split()}
    return pairs
