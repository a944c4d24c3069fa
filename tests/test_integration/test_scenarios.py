"""End-to-end tests: parse, evaluate and tear down whole documents."""

import pytest
from ztext import (
    Context,
    ErrorCode,
    element_commandContent,
    element_commandProperty,
    element_destroyAll,
    escape_add,
    parse,
    parse_map,
)
from ztext.commands.html import html_commandsAdd
from ztext.models.dataModel import Element


@pytest.fixture
def ctx():
    context = Context()
    yield context
    context.destroy()


def render(ctx: Context, source: str) -> str:
    result = parse(source)
    assert result.success, result.report
    output = ctx.eval(result.element)
    element_destroyAll(result.element)
    return output


def test_whitespace_collapses(ctx):
    assert render(ctx, "X\tY  Z") == "X Y Z"


def test_escaped_markers_render_literally(ctx):
    assert render(ctx, "foo \\{{token\\}} bar") == "foo {{token}} bar"


def test_assignment_fills_cache(ctx):
    assert render(ctx, "{{var$ foo}}") == "foo"
    assert ctx.cache_variableList() == ["var"]
    assert ctx.eval(ctx.cache_variableGet("var")) == "foo"


def test_chained_assignments(ctx):
    assert render(ctx, "{{var$ abc}}{{foo$ {{var$}} }}{{bar$ {{foo$}} }}") == "abcabcabc"


def test_reassignment_changes_later_references(ctx):
    source = (
        "{{ name$ Billy Bob }} lives at {{ place$ {{name$}}'s House }}. "
        "{{ name$ Johnny Ray }} lives at {{ place$ }}."
    )
    assert render(ctx, source) == (
        "Billy Bob lives at Billy Bob's House. "
        "Johnny Ray lives at Johnny Ray's House."
    )


def test_command_with_property_and_content(ctx):
    def cmd(ctx: Context, element: Element) -> str:
        properties = element_commandProperty(element)
        return "|" + properties["foo"] + "|--" + ctx.eval(element_commandContent(element)) + "--"

    ctx.command_create("cmd", cmd)
    assert render(ctx, "{{cmd(foo=bar) hi}}") == "|bar|--hi--"


@pytest.mark.parametrize(
    "source, error",
    [
        ("{{", ErrorCode.TOKEN_END_MISSING),
        ("}}", ErrorCode.TOKEN_BEGIN_MISSING),
        ("{{*$}}", ErrorCode.TOKEN_NAME_INVALID),
    ],
)
def test_malformed_sources(source, error):
    result = parse(source)
    assert not result.success
    assert result.error is error


def test_map_value_missing():
    assert parse_map("(foo=)").error is ErrorCode.MAP_VALUE_MISSING


def test_recursive_definition_renders_empty(ctx):
    assert render(ctx, "{{foo$ {{bar$ {{foo$}} }} }}") == ""


def test_empty_and_blank_documents(ctx):
    assert render(ctx, "") == ""
    assert render(ctx, " \n\t ") == " "


@pytest.mark.parametrize(
    "text",
    [
        "",
        "plain",
        "literal {{braces}} here",
        "}} before {{",
        "a {{b}} c }} d",
        "path\\to {{x}}",
        "{{{",
        "}}}",
        "{{{{{ x }}}}}",
        "a{{{b}}}c {}",
    ],
)
def test_escape_round_trip(ctx, text):
    assert render(ctx, escape_add(text)) == text


def test_same_source_renders_the_same(ctx):
    source = "{{a$ 1}}{{b$ {{a$}}{{a$}}}}-{{b$}}"
    first = render(ctx, source)
    ctx.cache_clear()
    assert render(ctx, source) == first == "111-11"


def test_cache_outlives_parsed_tree(ctx):
    render(ctx, "{{greeting$ Hello {{who$ World}}}}")
    assert render(ctx, "{{greeting$}}!") == "Hello World!"


def test_html_document(ctx):
    html_commandsAdd(ctx)
    source = """
{{title ZText}}
{{author$ Ada}}
{{section(title=Intro)
    Written by {{b {{author$}}}}, with {{i escaped \\{{markers\\}} }}.
}}
"""
    assert render(ctx, source) == (
        " <h1>ZText</h1>\n Ada <p><b>Intro</b><br/>\n"
        "Written by <b>Ada</b>, with <i>escaped {{markers}}</i>.</p>\n "
    )
