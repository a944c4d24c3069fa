r"""
String scanning utilities shared by the parser and the evaluator.

Every search works on a source string plus inclusive index bounds
`[begin, end]` and reports "not found" as `end + 1`, so callers can compare
the result against their own bound.

Escapes:
    A backslash directly before a character neutralises it for searching.
    Only `\{{` and `\}}` are rewritten at render time (see `escape_remove`).

Example:
    >>> char_find("a\\,b,c", ",", 0, 5)
    4
    >>> whitespace_clean("X\tY  Z")
    'X Y Z'
"""

import re
from typing import Final

TOKEN_ESCAPE: Final[str] = "\\"

# ASCII whitespace only; Unicode spaces stay literal text.
WHITESPACE: Final[frozenset[str]] = frozenset(" \t\n\v\f\r")

_whitespace_run: Final[re.Pattern[str]] = re.compile(r"[ \t\n\v\f\r]+")
_escaped_marker: Final[re.Pattern[str]] = re.compile(r"\\(\{\{|\}\})")
_brace_run: Final[re.Pattern[str]] = re.compile(r"\{+|\}+")


def is_escaped(string: str, index: int) -> bool:
    """True when the character at `index` is preceded by the escape character."""
    return index > 0 and string[index - 1] == TOKEN_ESCAPE


def whitespace_skipLeading(string: str, index: int) -> int:
    """Advance past whitespace.

    Returns:
        The first non-whitespace index at or after `index`, or `len(string)`.
    """
    size: int = len(string)
    while index < size and string[index] in WHITESPACE:
        index += 1
    return index


def whitespace_skipTrailing(string: str, index: int) -> int:
    """Retreat over whitespace.

    Returns:
        The last non-whitespace index at or before `index`, or 0.
    """
    while index > 0 and string[index] in WHITESPACE:
        index -= 1
    return index


def whitespace_clean(string: str) -> str:
    """Collapse every run of whitespace into a single space.

    Leading and trailing runs are kept as one space each.
    """
    return _whitespace_run.sub(" ", string)


def char_find(string: str, ch: str, begin: int, end: int) -> int:
    """Find the first unescaped `ch` in `[begin, end]`.

    Returns:
        The index found, or `end + 1`.
    """
    index: int = begin
    while index <= end:
        if string[index] == ch and not is_escaped(string, index):
            return index
        index += 1
    return end + 1


def char_findMatching(
    string: str, char_open: str, char_close: str, begin: int, end: int
) -> int:
    """Find the `char_close` that balances the `char_open` at `begin`.

    Scanning starts at `begin + 1`. Unescaped `char_open` increases the depth
    and unescaped `char_close` decreases it; the close seen at depth zero wins.

    Returns:
        The index of the balancing `char_close`, or `end + 1`.
    """
    index: int = begin + 1
    depth: int = 0
    while index <= end:
        ch: str = string[index]
        if not is_escaped(string, index):
            if ch == char_open:
                depth += 1
            elif ch == char_close:
                if depth == 0:
                    return index
                depth -= 1
        index += 1
    return end + 1


def char_findSeparator(
    string: str,
    ch: str,
    begin: int,
    end: int,
    char_open: str = "(",
    char_close: str = ")",
) -> int:
    """Find the first unescaped `ch` in `[begin, end]` outside any nested parentheses.

    Returns:
        The index found, or `end + 1`.
    """
    index: int = begin
    depth: int = 0
    while index <= end:
        if not is_escaped(string, index):
            c: str = string[index]
            if c == ch and depth == 0:
                return index
            if c == char_open:
                depth += 1
            elif c == char_close and depth > 0:
                depth -= 1
        index += 1
    return end + 1


def marker_at(string: str, index: int, marker: str, end: int) -> bool:
    """True when the two-character `marker` starts at `index`, within `end`, unescaped."""
    return (
        index + 1 <= end
        and string[index] == marker[0]
        and string[index + 1] == marker[1]
        and not is_escaped(string, index)
    )


def substr(string: str, begin: int, end: int) -> str:
    """Inclusive slice `string[begin..end]`."""
    return string[begin : end + 1]


def escape_remove(string: str) -> str:
    r"""Drop one backslash from every `\{{` and `\}}`; everything else is untouched."""
    return _escaped_marker.sub(r"\1", string)


def _braceRun_escape(match: re.Match[str]) -> str:
    run: str = match.group(0)
    lead: str = run[0] if len(run) % 2 else ""
    return lead + (TOKEN_ESCAPE + run[:2]) * (len(run) // 2)


def escape_add(string: str) -> str:
    r"""Escape braces so the text parses back as literal text.

    Each run of identical braces is split into escaped pairs. An odd run keeps
    its first brace bare, so `{{{` becomes `{\{{` and no unescaped `{{` or
    `}}` is left anywhere in the result.
    """
    return _brace_run.sub(_braceRun_escape, string)
