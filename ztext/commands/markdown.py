"""
Markdown Command Set

Registers commands that render ZText documents as Markdown.

Commands:
- {{title <content>}}: `# ` heading line.
- {{section(title=<text>) <content>}}: Block with an optional bold title.
- {{b <content>}}: `**bold**`.
- {{i <content>}}: `*italic*`.
"""

from ztext.lib.context import Context
from ztext.lib.element import element_commandContent, element_commandProperty
from ztext.models.dataModel import Element


def markdown_title(ctx: Context, element: Element) -> str:
    return f"# {ctx.eval(element_commandContent(element))}\n"


def markdown_section(ctx: Context, element: Element) -> str:
    properties: dict[str, str] = element_commandProperty(element)
    retval: str = "\n"
    if "title" in properties:
        retval += f"**{properties['title']}**\n\n"
    retval += ctx.eval(element_commandContent(element))
    return retval + "\n\n"


def markdown_bold(ctx: Context, element: Element) -> str:
    return f"**{ctx.eval(element_commandContent(element))}**"


def markdown_italic(ctx: Context, element: Element) -> str:
    return f"*{ctx.eval(element_commandContent(element))}*"


def markdown_commandsAdd(ctx: Context) -> None:
    """Register `title`, `section`, `b` and `i` for Markdown output."""
    ctx.command_create("title", markdown_title)
    ctx.command_create("section", markdown_section)
    ctx.command_create("b", markdown_bold)
    ctx.command_create("i", markdown_italic)
