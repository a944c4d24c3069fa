"""
HTML Command Set

Registers commands that render ZText documents as HTML fragments.

Commands:
- {{title <content>}}: Level-one heading.
- {{section(title=<text>) <content>}}: Paragraph with an optional bold title line.
- {{b <content>}}: Bold text.
- {{i <content>}}: Italic text.

Usage:
    ctx = Context()
    html_commandsAdd(ctx)
    ctx.eval(parse("{{title Hello}}").element)  # "<h1>Hello</h1>\\n"
"""

from ztext.lib.context import Context
from ztext.lib.element import element_commandContent, element_commandProperty
from ztext.models.dataModel import Element


def html_title(ctx: Context, element: Element) -> str:
    return f"<h1>{ctx.eval(element_commandContent(element))}</h1>\n"


def html_section(ctx: Context, element: Element) -> str:
    properties: dict[str, str] = element_commandProperty(element)
    retval: str = "<p>"
    if "title" in properties:
        retval += f"<b>{properties['title']}</b><br/>\n"
    retval += ctx.eval(element_commandContent(element))
    return retval + "</p>\n"


def html_bold(ctx: Context, element: Element) -> str:
    return f"<b>{ctx.eval(element_commandContent(element))}</b>"


def html_italic(ctx: Context, element: Element) -> str:
    return f"<i>{ctx.eval(element_commandContent(element))}</i>"


def html_commandsAdd(ctx: Context) -> None:
    """
    Register the HTML commands on a context.

    :param ctx: The context receiving `title`, `section`, `b` and `i`.
    """
    ctx.command_create("title", html_title)
    ctx.command_create("section", html_section)
    ctx.command_create("b", html_bold)
    ctx.command_create("i", html_italic)
