"""Render raw parameter strings as Python literals.

Rules, first match wins:
  "2,2"    -> (2,2)      comma-separated values become an unquoted tuple
  "0.001"  -> 0.001      numeric values stay bare
  "relu"   -> "relu"     anything else is double-quoted

Embedded quotes are not escaped.
"""

import re

_NUMERIC_RE = re.compile(r"^[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?$")
SEPARATOR = ","


def format_literal(key: str, raw: str) -> str:
    if SEPARATOR in raw:
        return "(" + SEPARATOR.join(part.strip() for part in raw.split(SEPARATOR)) + ")"
    if _NUMERIC_RE.match(raw):
        return raw
    return f'"{raw}"'


def format_keyword(key: str, raw: str) -> str:
    """Render one ``key=literal`` keyword argument."""
    return f"{key}={format_literal(key, raw)}"


def format_string_list(values: list[str]) -> str:
    return "[" + ", ".join(f'"{v}"' for v in values) + "]"
