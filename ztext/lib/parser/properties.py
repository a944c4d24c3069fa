r"""
Property map parser for command tokens.

Parses `(key=value, other = some value)` into a string mapping. Pairs are
split on unescaped commas outside nested parentheses; keys and values are
trimmed and whitespace-cleaned. A value may carry a literal comma as `\,`.

Example:
    result = parse_map("(title=Hello, level = 2)")
    # result.mapping == {"title": "Hello", "level": "2"}
"""

from typing import Optional
from ztext.lib.log import LOG
from ztext.lib.scanner import (
    char_find,
    char_findSeparator,
    is_escaped,
    substr,
    whitespace_clean,
    whitespace_skipLeading,
    whitespace_skipTrailing,
)
from ztext.models.dataModel import ErrorCode, MapResult

MAP_BEGIN: str = "("
MAP_END: str = ")"
MAP_SEPARATOR: str = ","
MAP_ASSIGN: str = "="


def _failure(error: ErrorCode, position: int) -> MapResult:
    LOG(f"Property map error at {position}: {error.message}")
    return MapResult(error=error, success=False, position=position)


def _pair_parse(
    string: str, begin: int, end: int
) -> tuple[ErrorCode, str, str, int]:
    """Parse the key/value pair strictly between the delimiters at `begin` and `end`.

    Returns:
        (error, key, value, error position)
    """
    index: int = char_find(string, MAP_ASSIGN, begin + 1, end - 1)
    if index > end - 1:
        return ErrorCode.MAP_KEY_VALUE_PAIR_MISSING, "", "", begin + 1

    key_begin: int = whitespace_skipLeading(string, begin + 1)
    key_end: int = whitespace_skipTrailing(string, index - 1)
    if key_begin > key_end:
        return ErrorCode.MAP_KEY_MISSING, "", "", index

    value_begin: int = whitespace_skipLeading(string, index + 1)
    value_end: int = whitespace_skipTrailing(string, end - 1)
    if value_begin > value_end:
        return ErrorCode.MAP_VALUE_MISSING, "", "", index

    key: str = whitespace_clean(substr(string, key_begin, key_end))
    value: str = whitespace_clean(substr(string, value_begin, value_end))
    return ErrorCode.NONE, key, value.replace("\\" + MAP_SEPARATOR, MAP_SEPARATOR), index


def parse_map(
    string: str, begin: Optional[int] = None, end: Optional[int] = None
) -> MapResult:
    """Parse a parenthesised property map.

    Args:
        string: Source text
        begin: First index of the map, defaults to 0
        end: Last index of the map (inclusive), defaults to the end of `string`

    Returns:
        MapResult with the mapping on success. Duplicate keys keep the last
        value. Errors report the offending position.
    """
    if not string:
        return _failure(ErrorCode.NO_TEXT_FOUND, 0)

    begin = whitespace_skipLeading(string, 0 if begin is None else begin)
    end = whitespace_skipTrailing(string, len(string) - 1 if end is None else end)

    if begin > end or string[begin] != MAP_BEGIN:
        return _failure(ErrorCode.MAP_BEGIN_MISSING, min(begin, len(string) - 1))
    if end == begin or string[end] != MAP_END or is_escaped(string, end):
        return _failure(ErrorCode.MAP_END_MISSING, end)

    mapping: dict[str, str] = {}
    if whitespace_skipLeading(string, begin + 1) == end:
        return MapResult(mapping=mapping)

    pair_begin: int = begin
    while pair_begin < end:
        pair_end: int = char_findSeparator(string, MAP_SEPARATOR, pair_begin + 1, end - 1)
        error, key, value, position = _pair_parse(string, pair_begin, pair_end)
        if error:
            return _failure(error, position)
        mapping[key] = value
        pair_begin = pair_end

    return MapResult(mapping=mapping)
