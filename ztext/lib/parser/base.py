r"""
Template parser for ZText.

Turns a source string into an element chain. Text runs become Text elements
and every `{{ ... }}` token becomes a Variable or Command element whose body
is parsed over the same source string, so error positions always refer to
the full source string. Nested bodies are parsed from a work list, so the
nesting depth is not bounded by the call stack.

The parser handles:
- Text runs with whitespace collapsed and escaped markers kept verbatim
- Variable references `{{name$}}` and assignments `{{name$ body}}`
- Commands with optional properties `{{name(key=value) body}}`
- Arbitrarily nested tokens within bodies
- Error reports carrying line, column and the offending source line

Example:
    result = parse("Hello {{name$ World}}!")
    if result.success:
        head = result.element
    else:
        print(result.report)
"""

from typing import Optional, Self
from ztext.lib.element import (
    element_commandCreate,
    element_commandContentSet,
    element_commandPropertySet,
    element_append,
    element_destroy,
    element_destroyAll,
    element_textCreate,
    element_variableCreate,
    element_variableSet,
)
from ztext.lib.log import LOG
from ztext.lib.parser.properties import parse_map
from ztext.lib.scanner import (
    char_findMatching,
    marker_at,
    substr,
    whitespace_clean,
    whitespace_skipLeading,
    whitespace_skipTrailing,
)
from ztext.config.settings import appsettings, NAME_CHARACTERS
from ztext.models.dataModel import (
    Element,
    ElementType,
    ErrorCode,
    MapResult,
    ParseResult,
    Token,
)

TOKEN_BEGIN: str = "{{"
TOKEN_END: str = "}}"
TOKEN_VARIABLE: str = "$"
TOKEN_PROPERTY_BEGIN: str = "("
TOKEN_PROPERTY_END: str = ")"

# Outcome of one parsing step: error, element, and the next index to scan
# (or the error position when the step failed).
Step = tuple[ErrorCode, Optional[Element], int]


class ElementParser:
    """Parser over a single source string.

    Attributes:
        string: The source being parsed; every index refers into it
    """

    def __init__(self: Self, string: str) -> None:
        self.string: str = string

    def parse(
        self: Self, begin: Optional[int] = None, end: Optional[int] = None
    ) -> ParseResult:
        """Parse the inclusive range `[begin, end]` of the source.

        Args:
            begin: First index, defaults to the start of the source
            end: Last index, defaults to the end of the source

        Returns:
            ParseResult holding the chain head on success, or the error with
            its position, line and column
        """
        if not self.string:
            return ParseResult(element=element_textCreate(""))

        begin = 0 if begin is None else begin
        end = len(self.string) - 1 if end is None else end
        if appsettings.errorChecks and (
            begin < 0 or end >= len(self.string) or begin > end + 1
        ):
            LOG(f"Invalid parse range [{begin}, {end}] for length {len(self.string)}")
            return ParseResult(
                error=ErrorCode.INVALID_PARAMETER, success=False, position=begin
            )

        error, head, position = self._body_parse(begin, end)
        if error:
            return self._failure(error, position)
        return ParseResult(element=head)

    def _failure(self: Self, error: ErrorCode, position: int) -> ParseResult:
        """Build the failed result, locating `position` by line and column."""
        string: str = self.string
        position = max(0, min(position, len(string)))

        line: int = string.count("\n", 0, position) + 1
        line_start: int = string.rfind("\n", 0, position) + 1
        while line_start < position and string[line_start] in " \t":
            line_start += 1
        line_end: int = string.find("\n", line_start)
        if line_end == -1:
            line_end = len(string)

        result: ParseResult = ParseResult(
            error=error,
            success=False,
            position=position,
            line=line,
            column=position - line_start + 1,
            source_line=string[line_start:line_end],
        )
        LOG(result.report)
        return result

    def _body_parse(self: Self, begin: int, end: int) -> Step:
        """Parse a range and every nested body below it, using an empty Text for blank input.

        Bodies are parsed from a work list rather than by recursion, so the
        nesting depth of the source is not limited by the call stack.
        """
        retval: Optional[Element] = None
        index: int = begin
        pending: list[tuple[Optional[Element], int, int]] = [(None, begin, end)]

        while pending:
            owner, body_begin, body_end = pending.pop()
            error, head, position = self._chain_parse(body_begin, body_end, pending)
            if error:
                element_destroyAll(retval)
                return error, None, position
            if head is None:
                head = element_textCreate("")

            if owner is None:
                retval, index = head, position
            elif owner.kind is ElementType.VARIABLE:
                element_variableSet(owner, head)
            else:
                element_commandContentSet(owner, head)

        return ErrorCode.NONE, retval, index

    def _chain_parse(
        self: Self,
        begin: int,
        end: int,
        pending: list[tuple[Optional[Element], int, int]],
    ) -> Step:
        """Parse consecutive text runs and tokens into one sibling chain.

        Token bodies are queued on `pending` in source order once the chain
        is complete.
        """
        head: Optional[Element] = None
        tail: Optional[Element] = None
        bodies: list[tuple[Optional[Element], int, int]] = []
        index: int = begin

        while index <= end:
            if marker_at(self.string, index, TOKEN_BEGIN, end):
                error, element, position = self._token_parse(index, end, bodies)
            else:
                error, element, position = self._text_parse(index, end)
                if error is ErrorCode.NO_TEXT_FOUND:
                    index = position
                    continue

            if error:
                element_destroyAll(head)
                return error, None, position

            if tail is None:
                head = element
            else:
                element_append(tail, element)
            tail = element
            index = position

        pending.extend(reversed(bodies))
        return ErrorCode.NONE, head, index

    def _text_parse(self: Self, begin: int, end: int) -> Step:
        """Consume literal text up to the next unescaped `{{`.

        A stray unescaped `}}` inside the run is an error. Runs that are empty
        after whitespace cleaning yield `NO_TEXT_FOUND`.
        """
        string: str = self.string
        index: int = begin
        while index <= end:
            if marker_at(string, index, TOKEN_BEGIN, end):
                break
            if marker_at(string, index, TOKEN_END, end):
                return ErrorCode.TOKEN_BEGIN_MISSING, None, index
            index += 1

        text: str = whitespace_clean(substr(string, begin, index - 1))
        if not text:
            return ErrorCode.NO_TEXT_FOUND, None, index
        return ErrorCode.NONE, element_textCreate(text), index

    def _tokenEnd_find(self: Self, token: Token, end: int) -> ErrorCode:
        """Locate the `}}` closing the token, skipping nested tokens."""
        string: str = self.string
        index: int = token.begin + len(TOKEN_BEGIN)
        depth: int = 0
        while index <= end:
            if marker_at(string, index, TOKEN_BEGIN, end):
                depth += 1
                index += 2
                continue
            if marker_at(string, index, TOKEN_END, end):
                if depth == 0:
                    token.end = index + 1
                    return ErrorCode.NONE
                depth -= 1
                index += 2
                continue
            index += 1
        return ErrorCode.TOKEN_END_MISSING

    def _tokenName_find(self: Self, token: Token) -> ErrorCode:
        string: str = self.string
        index: int = whitespace_skipLeading(string, token.begin + len(TOKEN_BEGIN))
        token.name_begin = index
        if string[index] in (TOKEN_VARIABLE, TOKEN_PROPERTY_BEGIN, TOKEN_END[0]):
            return ErrorCode.TOKEN_NAME_MISSING

        while string[index] in NAME_CHARACTERS:
            index += 1
        if index == token.name_begin:
            return ErrorCode.TOKEN_NAME_INVALID
        token.name_end = index - 1
        return ErrorCode.NONE

    def _tokenParts_find(self: Self, token: Token) -> tuple[ErrorCode, int]:
        """Classify the token and locate its property and content ranges.

        Anything other than `$` after the name marks a command; the rest of
        the token, from that character on, is the command body.
        """
        string: str = self.string
        closing: int = token.end - 1
        token.type_index = whitespace_skipLeading(string, token.name_end + 1)

        if string[token.type_index] == TOKEN_VARIABLE:
            token.kind = ElementType.VARIABLE
            index: int = whitespace_skipLeading(string, token.type_index + 1)
        else:
            token.kind = ElementType.COMMAND
            index = token.type_index
            if string[index] == TOKEN_PROPERTY_BEGIN:
                property_end: int = char_findMatching(
                    string, TOKEN_PROPERTY_BEGIN, TOKEN_PROPERTY_END, index, closing - 1
                )
                if property_end > closing - 1:
                    return ErrorCode.PROPERTY_END_MISSING, index
                token.property_begin = index
                token.property_end = property_end
                index = whitespace_skipLeading(string, property_end + 1)

        if index < closing:
            token.content_begin = index
            token.content_end = whitespace_skipTrailing(string, closing - 1)
        return ErrorCode.NONE, index

    def _token_parse(
        self: Self,
        begin: int,
        end: int,
        bodies: list[tuple[Optional[Element], int, int]],
    ) -> Step:
        """Parse one `{{ ... }}` token starting at `begin`.

        The body range, if any, is appended to `bodies` for the caller to parse.
        """
        token: Token = Token(begin=begin)

        if self._tokenEnd_find(token, end):
            return ErrorCode.TOKEN_END_MISSING, None, begin + len(TOKEN_BEGIN)

        error: ErrorCode = self._tokenName_find(token)
        if error:
            return error, None, token.name_begin

        error, position = self._tokenParts_find(token)
        if error:
            return error, None, position

        name: str = substr(self.string, token.name_begin, token.name_end)
        if token.kind is ElementType.VARIABLE:
            element: Element = element_variableCreate(name)
        else:
            element = element_commandCreate(name)
            if token.property_begin is not None:
                mapped: MapResult = parse_map(
                    self.string, token.property_begin, token.property_end
                )
                if not mapped.success:
                    element_destroy(element)
                    return mapped.error, None, mapped.position
                element_commandPropertySet(element, mapped.mapping)

        if token.content_begin is not None:
            bodies.append((element, token.content_begin, token.content_end))

        return ErrorCode.NONE, element, token.end + 1


def parse(
    string: str, begin: Optional[int] = None, end: Optional[int] = None
) -> ParseResult:
    """Parse ZText source into an element chain.

    Args:
        string: Source text
        begin: Optional first index of the range to parse
        end: Optional last index (inclusive) of the range to parse

    Returns:
        ParseResult; `element` is the chain head on success and the caller
        owns it
    """
    return ElementParser(string).parse(begin, end)
