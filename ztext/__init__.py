"""
ZText: a small templating language with variables and host commands.

Example:
    from ztext import Context, parse

    ctx = Context()
    result = parse("{{name$ World}}, hello {{name$}}!")
    print(ctx.eval(result.element))  # World, hello World!
"""

__version__: str = "0.1.0"

from ztext.lib.context import Context
from ztext.lib.element import (
    element_append,
    element_commandContent,
    element_commandContentSet,
    element_commandCreate,
    element_commandProperty,
    element_commandPropertySet,
    element_copy,
    element_copyAll,
    element_destroy,
    element_destroyAll,
    element_findHead,
    element_findTail,
    element_insert,
    element_next,
    element_prev,
    element_remove,
    element_siblings,
    element_textCreate,
    element_textSet,
    element_variableContent,
    element_variableCreate,
    element_variableSet,
)
from ztext.lib.evaluator import element_eval
from ztext.lib.parser import parse, parse_map
from ztext.lib.scanner import escape_add, escape_remove
from ztext.models.dataModel import (
    CommandHandler,
    Element,
    ElementType,
    ErrorCode,
    MapResult,
    ParseResult,
)
