"""
Parsing and formatting of numeric triples and labeled composite strings.

Accepted triple forms::

    1, 2, 3        1; 2; 3        1 2 3
    (1, 2, 3)      [1, 2, 3]      {1, 2, 3}
    1,5; 2,0; 3    (decimal comma, requires ';' or whitespace separators)

``decimal_separator`` selects "." or ","; ``None`` tries "." first, then ",".
"""

from __future__ import annotations
import re
from typing import Dict, List, Optional, Sequence, Tuple

_NUMBER_POINT = r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?"
_NUMBER_COMMA = r"[+-]?(?:\d+(?:,\d*)?|,\d+)(?:[eE][+-]?\d+)?"

_SEPARATOR_POINT = r"(?:\s*[,;]\s*|\s+)"
_SEPARATOR_COMMA = r"(?:\s*;\s*|\s+)"

_TRIPLE_PATTERN = (
    r"^\s*(?P<open>[(\[{{])?\s*"
    r"(?P<x>{num}){sep}(?P<y>{num}){sep}(?P<z>{num})"
    r"\s*(?P<close>[)\]}}])?\s*$"
)

_TRIPLE_POINT = re.compile(_TRIPLE_PATTERN.format(num=_NUMBER_POINT, sep=_SEPARATOR_POINT))
_TRIPLE_COMMA = re.compile(_TRIPLE_PATTERN.format(num=_NUMBER_COMMA, sep=_SEPARATOR_COMMA))

_NUMBER_POINT_ONLY = re.compile(rf"^\s*{_NUMBER_POINT}\s*$")
_NUMBER_COMMA_ONLY = re.compile(rf"^\s*{_NUMBER_COMMA}\s*$")

_BRACKETS = {"(": ")", "[": "]", "{": "}"}

_TUPLE_GROUP = re.compile(r"[(\[{][^()\[\]{}]*[)\]}]")


def _to_float(token: str, decimal_separator: str) -> float:
    if decimal_separator == ",":
        token = token.replace(",", ".")
    return float(token)


def _match_triple(text: str, decimal_separator: Optional[str]) -> Optional[Tuple[re.Match, str]]:
    if decimal_separator not in (None, ".", ","):
        raise ValueError(f"decimal_separator must be '.', ',' or None, got {decimal_separator!r}")

    candidates = []
    if decimal_separator in (None, "."):
        candidates.append((_TRIPLE_POINT, "."))
    if decimal_separator in (None, ","):
        candidates.append((_TRIPLE_COMMA, ","))

    for pattern, separator in candidates:
        match = pattern.match(text)
        if match is None:
            continue
        opening, closing = match.group("open"), match.group("close")
        if opening is None and closing is None:
            return match, separator
        if opening is not None and _BRACKETS[opening] == closing:
            return match, separator
    return None


def try_parse_3d(text: str, decimal_separator: Optional[str] = None) -> Optional[Tuple[float, float, float]]:
    """
    Parse a numeric triple.

    Args:
        text: Input string
        decimal_separator: "." or ",", or None to accept either

    Returns:
        (x, y, z) or None if the text is not a triple
    """
    if not isinstance(text, str) or not text.strip():
        return None

    found = _match_triple(text, decimal_separator)
    if found is None:
        return None

    match, separator = found
    return (
        _to_float(match.group("x"), separator),
        _to_float(match.group("y"), separator),
        _to_float(match.group("z"), separator),
    )


def try_parse_number(text: str, decimal_separator: Optional[str] = None) -> Optional[float]:
    """Parse a single number, honouring the decimal separator."""
    if not isinstance(text, str):
        return None
    if decimal_separator in (None, ".") and _NUMBER_POINT_ONLY.match(text):
        return float(text)
    if decimal_separator in (None, ",") and _NUMBER_COMMA_ONLY.match(text):
        return _to_float(text.strip(), ",")
    return None


def format_number(value: float, fmt: Optional[str] = None, decimal_separator: str = ".") -> str:
    """Format a float; the default keeps full round-trip precision."""
    token = format(value, fmt) if fmt else repr(float(value))
    if decimal_separator == ",":
        token = token.replace(".", ",")
    return token


def format_3d(
    x: float,
    y: float,
    z: float,
    fmt: Optional[str] = None,
    decimal_separator: str = ".",
    brackets: str = "()",
) -> str:
    """
    Format a triple as ``(x, y, z)``.

    With a "," decimal separator the values are separated by ";" instead.
    """
    separator = "; " if decimal_separator == "," else ", "
    values = separator.join(format_number(v, fmt, decimal_separator) for v in (x, y, z))
    return f"{brackets[0]}{values}{brackets[1]}" if brackets else values


def split_labeled(text: str, labels: Sequence[str]) -> Optional[Dict[str, str]]:
    """
    Split ``"Label1: value1, Label2: value2 ..."`` into its values.

    Labels must appear in the given order; values may contain commas.

    Returns:
        Mapping label -> raw value text, or None if the layout does not match
    """
    if not isinstance(text, str):
        return None

    parts = [rf"{re.escape(label)}\s*:\s*(?P<g{i}>.+?)" for i, label in enumerate(labels)]
    pattern = r"^\s*" + r"\s*,?\s*".join(parts) + r"\s*$"
    match = re.match(pattern, text, flags=re.DOTALL)
    if match is None:
        return None
    return {label: match.group(f"g{i}") for i, label in enumerate(labels)}


def split_tuples(text: str) -> Optional[List[str]]:
    """
    Split ``"[(..), (..), ...]"`` into the bracketed groups it contains.

    Returns:
        List of group strings, or None if anything other than groups and
        separators is present
    """
    if not isinstance(text, str):
        return None

    body = text.strip()
    if len(body) >= 2 and body[0] == "[" and body[-1] == "]":
        body = body[1:-1]

    groups = _TUPLE_GROUP.findall(body)
    leftover = _TUPLE_GROUP.sub("", body)
    if leftover.strip(" ,;\t\n") or not groups:
        return None
    return groups
