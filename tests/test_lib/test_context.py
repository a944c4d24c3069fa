"""Tests for the evaluation context: variable cache and command registry."""

import pytest
from unittest.mock import Mock
from ztext.lib.context import Context
from ztext.lib.element import (
    element_append,
    element_commandContentSet,
    element_commandCreate,
    element_siblings,
    element_textCreate,
)
from ztext.lib.parser import parse
from ztext.models.dataModel import ErrorCode


@pytest.fixture
def ctx():
    context = Context()
    yield context
    context.destroy()


def test_new_context_is_empty(ctx):
    assert ctx.cache_variableList() == []
    assert ctx.command_list() == []
    assert ctx.depth == 0


def test_variable_set_get(ctx):
    chain = element_textCreate("value")
    assert ctx.cache_variableSet("name", chain) is ErrorCode.NONE
    assert ctx.cache_variableGet("name") is chain
    assert ctx.cache_variableContains("name")
    assert ctx.cache_variableList() == ["name"]
    assert ctx.cache_variableGet("missing") is None


def test_variable_set_none_is_present_but_empty(ctx):
    assert ctx.cache_variableSet("empty", None) is ErrorCode.NONE
    assert ctx.cache_variableContains("empty")
    assert ctx.cache_variableGet("empty") is None
    assert ctx.eval(parse("[{{empty$}}]").element) == "[]"


def test_variable_replace_destroys_previous(ctx):
    old = element_textCreate("old")
    old_tail = element_textCreate("tail")
    element_append(old, old_tail)
    ctx.cache_variableSet("v", old)
    ctx.cache_variableSet("v", element_textCreate("new"))
    assert old.next is None
    assert old_tail.prev is None
    assert ctx.cache_variableGet("v").text == "new"


def test_variable_set_same_chain_keeps_it(ctx):
    chain = element_textCreate("same")
    ctx.cache_variableSet("v", chain)
    ctx.cache_variableSet("v", chain)
    assert ctx.cache_variableGet("v") is chain


def test_variable_set_errors(ctx):
    assert ctx.cache_variableSet("bad-name", element_textCreate("x")) is (
        ErrorCode.INVALID_PARAMETER
    )
    a, b = element_textCreate("a"), element_textCreate("b")
    element_append(a, b)
    assert ctx.cache_variableSet("v", b) is ErrorCode.ELEMENT_IN_USE

    command = element_commandCreate("c")
    body = element_textCreate("body")
    element_commandContentSet(command, body)
    assert ctx.cache_variableSet("v", body) is ErrorCode.ELEMENT_IN_USE
    assert ctx.cache_variableList() == []


def test_variable_erase(ctx):
    chain = element_textCreate("x")
    ctx.cache_variableSet("a", chain)
    ctx.cache_variableSet("b", element_textCreate("y"))
    ctx.cache_variableErase("a")
    ctx.cache_variableErase("not_there")
    assert ctx.cache_variableList() == ["b"]


def test_variable_clear_all(ctx):
    first = parse("one {{two$ three}}").element
    ctx.cache_variableSet("a", first)
    ctx.cache_variableSet("b", element_textCreate("y"))
    ctx.cache_variableClearAll()
    assert ctx.cache_variableList() == []
    assert first.next is None
    ctx.cache_variableSet("c", element_textCreate("z"))
    ctx.cache_clear()
    assert ctx.cache_variableList() == []


def test_read_only_flag_is_stored(ctx):
    ctx.cache_variableSet("ro", element_textCreate("x"), read_only=True)
    assert ctx.cache_variableReadOnly("ro")
    assert not ctx.cache_variableReadOnly("unknown")
    ctx.cache_variableSet("ro", element_textCreate("y"))
    assert not ctx.cache_variableReadOnly("ro")


def test_read_only_flag_survives_inline_assignment(ctx):
    ctx.cache_variableSet("ro", element_textCreate("x"), read_only=True)
    assert ctx.eval(parse("{{ro$ y}}").element) == "y"
    assert ctx.cache_variableReadOnly("ro")


def test_command_registry(ctx):
    handler = Mock(return_value="out")
    assert ctx.command_create("cmd", handler) is ErrorCode.NONE
    assert ctx.command_get("cmd") is handler
    assert ctx.command_list() == ["cmd"]

    replacement = Mock(return_value="new")
    ctx.command_create("cmd", replacement)
    assert ctx.command_get("cmd") is replacement

    ctx.command_destroy("cmd")
    ctx.command_destroy("cmd")
    assert ctx.command_get("cmd") is None


def test_command_create_errors(ctx):
    assert ctx.command_create("", Mock()) is ErrorCode.INVALID_PARAMETER
    assert ctx.command_create("a b", Mock()) is ErrorCode.INVALID_PARAMETER
    assert ctx.command_create("ok", "not callable") is ErrorCode.INVALID_PARAMETER
    assert ctx.command_list() == []


def test_command_destroy_all(ctx):
    ctx.command_create("a", Mock())
    ctx.command_create("b", Mock())
    ctx.command_destroyAll()
    assert ctx.command_list() == []


def test_destroy_clears_everything(ctx):
    ctx.command_create("a", Mock())
    ctx.cache_variableSet("v", element_textCreate("x"))
    ctx.destroy()
    assert ctx.command_list() == []
    assert ctx.cache_variableList() == []


def test_pinned_chain_is_destroyed_after_expansion(ctx):
    chain = element_textCreate("first")
    ctx.cache_variableSet("v", chain)
    with ctx.cache_variablePin("v", chain):
        assert ctx.cache_variableExpanding("v")
        ctx.cache_variableSet("v", element_textCreate("second"))
        assert chain.text == "first"
        tail = element_textCreate("tail")
        element_append(chain, tail)
    assert not ctx.cache_variableExpanding("v")
    assert chain.next is None
    assert tail.prev is None


def test_reassignment_during_expansion_finishes_old_value(ctx):
    result = parse("{{v$ a{{v$ b}}c}}")
    assert ctx.eval(result.element) == "abc"
    assert [e.text for e in element_siblings(ctx.cache_variableGet("v"))] == ["a", "v", "c"]
    assert ctx.eval(parse("{{v$}}").element) == "abc"
    assert ctx.eval(parse("{{v$}}").element) == "b"

    ctx.cache_variableSet("w", parse("1{{w$ 2}}3").element)
    assert ctx.eval(parse("{{w$}}").element) == "123"
    assert [e.text for e in element_siblings(ctx.cache_variableGet("w"))] == ["2"]
