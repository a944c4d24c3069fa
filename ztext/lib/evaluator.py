"""
Evaluator for ZText element trees.

Renders an element chain to a string against a `Context`:
- Text renders its payload with escaped markers unescaped
- A Variable with a body renders the body and stores a copy in the cache
- A bare Variable renders its cached chain, or "" when unset
- A Command renders whatever its registered handler returns

Recursion is bounded two ways. A bare reference to a variable that is
already being expanded renders "" (cycle detection), and evaluation nested
deeper than `appsettings.maxDepth` renders "". A failing command handler is
reported through `WARN`.

Example:
    ctx = Context()
    text = element_eval(ctx, parse("{{who$ World}}, hello {{who$}}").element)
"""

from typing import Callable, Optional, TYPE_CHECKING
from ztext.config.settings import appsettings
from ztext.lib.element import element_copyAll
from ztext.lib.log import LOG, WARN
from ztext.lib.scanner import escape_remove
from ztext.models.dataModel import CommandHandler, Element, ElementType

if TYPE_CHECKING:
    from ztext.lib.context import Context


def _text_eval(ctx: "Context", element: Element) -> str:
    return escape_remove(element.text)


def _variable_eval(ctx: "Context", element: Element) -> str:
    """Assign-and-render when the variable has a body, otherwise expand the cache."""
    name: str = element.text

    if element.child is not None:
        value: str = element_eval(ctx, element.child)
        ctx.cache_variableSet(
            name, element_copyAll(element.child), ctx.cache_variableReadOnly(name)
        )
        return value

    chain: Optional[Element] = ctx.cache_variableGet(name)
    if chain is None:
        return ""
    if ctx.cache_variableExpanding(name):
        LOG(f"Circular reference to variable '{name}', rendering empty")
        return ""

    with ctx.cache_variablePin(name, chain):
        return element_eval(ctx, chain)


def _command_eval(ctx: "Context", element: Element) -> str:
    """Call the registered handler; unknown or failing commands render ""."""
    name: str = element.text
    handler: Optional[CommandHandler] = ctx.command_get(name)
    if handler is None:
        LOG(f"Command '{name}' not found")
        return ""

    try:
        retval = handler(ctx, element)
    except Exception as e:
        WARN(f"Command '{name}' failed: {e}")
        return ""
    return "" if retval is None else str(retval)


_EVALUATORS: dict[ElementType, Callable[["Context", Element], str]] = {
    ElementType.TEXT: _text_eval,
    ElementType.VARIABLE: _variable_eval,
    ElementType.COMMAND: _command_eval,
}


def element_eval(
    ctx: "Context", element: Optional[Element], to_end: bool = True
) -> str:
    """Render `element`, and by default every sibling after it.

    Args:
        ctx: Context holding the variable cache and command registry
        element: Chain head (or any element within a chain); None renders ""
        to_end: Continue through the following siblings when True

    Returns:
        Concatenated output of the rendered elements
    """
    if element is None:
        return ""
    if ctx.depth >= appsettings.maxDepth:
        LOG(f"Maximum evaluation depth {appsettings.maxDepth} reached, rendering empty")
        return ""

    ctx.depth += 1
    try:
        parts: list[str] = []
        node: Optional[Element] = element
        while node is not None:
            parts.append(_EVALUATORS[node.kind](ctx, node))
            if not to_end:
                break
            node = node.next
        return "".join(parts)
    finally:
        ctx.depth -= 1
