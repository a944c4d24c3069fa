"""
dataModel.py

This module defines the data models and schemas used throughout ZText.
Result objects leverage Pydantic for validation and type safety; the parse
tree itself is a plain dataclass so that elements keep identity semantics.

Features:
- Enum classes for element kinds and error codes.
- The `Element` tree node with sibling and parent/child links.
- Parse and property-map result models.
- The token bookkeeping structure used by the parser.
- The protocol every host command must satisfy.

Usage:
Import these models to build, inspect, or validate ZText trees and results.
"""

from pydantic import BaseModel, Field
from typing import Any, Optional, Protocol, TYPE_CHECKING
from enum import Enum
from dataclasses import dataclass, field

if TYPE_CHECKING:
    from ztext.lib.context import Context


class ElementType(Enum):
    """
    Enum for the kind of an element.
    """

    TEXT = 1
    VARIABLE = 2
    COMMAND = 3


class ErrorCode(Enum):
    """
    Stable error codes returned by the parser and the tree operations.

    The integer values are part of the public contract; `message` gives the
    human-readable description.
    """

    NONE = 0
    INVALID_PARAMETER = 1
    ELEMENT_IN_USE = 2
    ELEMENT_TYPE_NOT_COMMAND = 3
    ELEMENT_TYPE_NOT_TEXT = 4
    ELEMENT_TYPE_NOT_VARIABLE = 5
    TOKEN_NAME_INVALID = 6
    NO_TEXT_FOUND = 7
    TOKEN_END_MISSING = 8
    TOKEN_NAME_MISSING = 9
    TOKEN_IDENTIFIER_INVALID = 10
    TOKEN_BEGIN_MISSING = 11
    PROPERTY_END_MISSING = 12
    MAP_BEGIN_MISSING = 13
    MAP_END_MISSING = 14
    MAP_KEY_VALUE_PAIR_MISSING = 15
    MAP_KEY_MISSING = 16
    MAP_VALUE_MISSING = 17

    @property
    def message(self) -> str:
        """Human-readable description of the error."""
        return _ERROR_MESSAGES[self]

    def __bool__(self) -> bool:
        # Truthy only for real errors
        return self is not ErrorCode.NONE


_ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.NONE: "No Error",
    ErrorCode.INVALID_PARAMETER: "A parameter is invalid",
    ErrorCode.ELEMENT_IN_USE: "The requested Element is already linked into another chain",
    ErrorCode.ELEMENT_TYPE_NOT_COMMAND: "The expected Element type is command",
    ErrorCode.ELEMENT_TYPE_NOT_TEXT: "The expected Element type is text",
    ErrorCode.ELEMENT_TYPE_NOT_VARIABLE: "The expected Element type is a variable",
    ErrorCode.TOKEN_NAME_INVALID: "The Parser found an invalid token name",
    ErrorCode.NO_TEXT_FOUND: "The Parser was not able to find any text",
    ErrorCode.TOKEN_END_MISSING: "The Parser was not able to find the token end marker '}}'",
    ErrorCode.TOKEN_NAME_MISSING: "The Parser was not able to find the token name",
    ErrorCode.TOKEN_IDENTIFIER_INVALID: "The Parser found an invalid token type",
    ErrorCode.TOKEN_BEGIN_MISSING: "The Parser encountered a token end marker '}}' without a preceding begin marker '{{'",
    ErrorCode.PROPERTY_END_MISSING: "The Parser was not able to find the command property end marker ')'",
    ErrorCode.MAP_BEGIN_MISSING: "The Parser was not able to find the map begin marker '('",
    ErrorCode.MAP_END_MISSING: "The Parser was not able to find the map end marker ')'",
    ErrorCode.MAP_KEY_VALUE_PAIR_MISSING: "The Parser was not able to find the map's key/value pair",
    ErrorCode.MAP_KEY_MISSING: "The Parser was not able to find the key of the map's key/value pair",
    ErrorCode.MAP_VALUE_MISSING: "The Parser was not able to find the value of the map's key/value pair",
}


@dataclass(eq=False)
class Element:
    """The single node type of a ZText tree.

    Attributes:
        kind: Text, Variable or Command
        text: Literal payload for Text, the name for Variable and Command
        property: Command properties (empty for the other kinds)
        next: Following sibling
        prev: Preceding sibling
        child: Head of the child chain (variable or command body)
        parent: Element whose `child` chain contains this element

    Note:
        Equality is identity. The link fields are excluded from `repr` so
        that printing a node never walks the whole tree.
    """

    kind: ElementType
    text: str = ""
    property: dict[str, str] = field(default_factory=dict)
    next: Optional["Element"] = field(default=None, repr=False)
    prev: Optional["Element"] = field(default=None, repr=False)
    child: Optional["Element"] = field(default=None, repr=False)
    parent: Optional["Element"] = field(default=None, repr=False)


@dataclass
class Token:
    """Token bookkeeping used while parsing a `{{ ... }}` construct.

    All indices are inclusive positions into the source string. Property and
    content bounds stay None when the token has no such part.

    Example:
        * "{{cmd(a=b) hi}}" has:
          begin = 0, end = 14
          name_begin = 2, name_end = 4
          type_index = 5
          property_begin = 5, property_end = 9
          content_begin = 11, content_end = 12
    """

    begin: int = 0
    end: int = 0
    name_begin: int = 0
    name_end: int = 0
    type_index: int = 0
    kind: ElementType = ElementType.COMMAND
    property_begin: Optional[int] = None
    property_end: Optional[int] = None
    content_begin: Optional[int] = None
    content_end: Optional[int] = None


class ParseResult(BaseModel):
    """Result of parsing a source string into an element chain.

    Attributes:
        element: Head of the parsed chain, None on failure
        error: Error code, `ErrorCode.NONE` on success
        success: Whether parsing succeeded
        position: Source index the error refers to
        line: 1-based line of `position`
        column: 1-based column of `position` within its line
        source_line: The offending line, leading whitespace removed
    """

    element: Any = Field(default=None, description="Head of the parsed chain.")
    error: ErrorCode = ErrorCode.NONE
    success: bool = True
    position: Optional[int] = None
    line: Optional[int] = None
    column: Optional[int] = None
    source_line: Optional[str] = None

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def report(self) -> str:
        """Line/char/error summary, the offending line and a caret under the column.

        Returns:
            Empty string for successful results
        """
        if self.success or self.position is None:
            return ""
        caret_offset: int = max(self.column or 1, 1)
        return (
            f"Line: {self.line}, Char: {self.position}, Error: {self.message}\n"
            f"{self.source_line or ''}\n"
            f"{'^':>{caret_offset}}"
        )


class MapResult(BaseModel):
    """Result of parsing a property map such as `(key=value, other=thing)`.

    Attributes:
        mapping: Parsed key/value pairs
        error: Error code, `ErrorCode.NONE` on success
        success: Whether parsing succeeded
        position: Source index the error refers to
    """

    mapping: dict[str, str] = Field(default_factory=dict)
    error: ErrorCode = ErrorCode.NONE
    success: bool = True
    position: Optional[int] = None


class CommandHandler(Protocol):
    """Protocol for host commands.

    Handlers receive the evaluating context and the command element; they read
    `element.property` and may evaluate `element.child` through the context.

    Note:
        The returned string is owned by the caller and is concatenated into the
        evaluation output.
    """

    def __call__(self, ctx: "Context", element: Element) -> str:
        ...
