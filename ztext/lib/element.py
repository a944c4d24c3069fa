"""
Element tree operations for ZText.

Elements form sibling chains (`prev`/`next`) and hold an optional child chain
(`child`), whose members all point back at their owner through `parent`.

Provides:
- Builders for Text, Variable and Command elements
- Splicing (append/insert), detaching (remove) and destruction
- Accessors for siblings, chain ends, command/variable content and properties
- Deep copies used by the variable cache

Every mutating operation returns an `ErrorCode`. Parameter checks run while
`appsettings.errorChecks` is enabled.

Example:
    foo = element_textCreate("Hello, ")
    bar = element_variableCreate("name")
    element_append(foo, bar)
"""

from typing import Iterator, Mapping, Optional
from ztext.config.settings import appsettings, NAME_CHARACTERS
from ztext.lib.log import LOG
from ztext.models.dataModel import Element, ElementType, ErrorCode


def name_isValid(name: str) -> bool:
    """True for a non-empty run of `[A-Za-z0-9_]`."""
    return bool(name) and all(c in NAME_CHARACTERS for c in name)


# --- Builders --- #


def element_textCreate(text: str) -> Element:
    """Create an unlinked Text element holding `text` verbatim."""
    return Element(kind=ElementType.TEXT, text=text)


def element_variableCreate(name: str) -> Optional[Element]:
    """Create an unlinked Variable element.

    Returns:
        The element, or None when `name` is not a valid name
    """
    if not name_isValid(name):
        return None
    return Element(kind=ElementType.VARIABLE, text=name)


def element_commandCreate(name: str) -> Optional[Element]:
    """Create an unlinked Command element.

    Returns:
        The element, or None when `name` is not a valid name
    """
    if not name_isValid(name):
        return None
    return Element(kind=ElementType.COMMAND, text=name)


# --- Linking --- #


def _chain_adopt(
    element: Element, position: Element, parent: Optional[Element]
) -> tuple[ErrorCode, Element]:
    """Walk the chain headed by `element`, re-parent it and return its tail.

    The chain is checked before anything is modified so a failure leaves it
    untouched.
    """
    tail: Element = element
    while True:
        if appsettings.errorChecks and tail is position:
            LOG("Element In-Use: 'position' is part of the chain being linked.")
            return ErrorCode.ELEMENT_IN_USE, element
        if tail.next is None:
            break
        tail = tail.next

    node: Optional[Element] = element
    while node is not None:
        node.parent = parent
        node = node.next
    return ErrorCode.NONE, tail


def _link_check(position: Optional[Element], element: Optional[Element]) -> ErrorCode:
    if position is None or element is None:
        return ErrorCode.INVALID_PARAMETER
    if element.prev is not None or element.parent is not None:
        LOG("Element In-Use: 'element' is already linked.")
        return ErrorCode.ELEMENT_IN_USE
    return ErrorCode.NONE


def element_append(position: Optional[Element], element: Optional[Element]) -> ErrorCode:
    """Place `element`, and everything linked after it, directly after `position`.

    Args:
        position: Element already in the target chain
        element: Head of an unlinked chain

    Returns:
        `ErrorCode.NONE`, `INVALID_PARAMETER` or `ELEMENT_IN_USE`
    """
    if appsettings.errorChecks:
        error: ErrorCode = _link_check(position, element)
        if error:
            return error

    error, tail = _chain_adopt(element, position, position.parent)
    if error:
        return error

    element.prev = position
    tail.next = position.next
    position.next = element
    if tail.next is not None:
        tail.next.prev = tail
    return ErrorCode.NONE


def element_insert(position: Optional[Element], element: Optional[Element]) -> ErrorCode:
    """Place `element`, and everything linked after it, directly before `position`.

    When `position` heads a child chain the parent's `child` moves to `element`.

    Returns:
        `ErrorCode.NONE`, `INVALID_PARAMETER` or `ELEMENT_IN_USE`
    """
    if appsettings.errorChecks:
        error: ErrorCode = _link_check(position, element)
        if error:
            return error

    error, tail = _chain_adopt(element, position, position.parent)
    if error:
        return error

    element.prev = position.prev
    tail.next = position
    position.prev = tail
    if element.prev is not None:
        element.prev.next = element
    elif position.parent is not None and position.parent.child is position:
        position.parent.child = element
    return ErrorCode.NONE


def element_remove(element: Optional[Element]) -> ErrorCode:
    """Detach `element` from its chain. Its children travel with it."""
    if element is None:
        return ErrorCode.INVALID_PARAMETER

    if element.parent is not None and element.parent.child is element:
        element.parent.child = element.next
    if element.next is not None:
        element.next.prev = element.prev
    if element.prev is not None:
        element.prev.next = element.next

    element.next = None
    element.prev = None
    element.parent = None
    return ErrorCode.NONE


def _element_release(element: Element) -> None:
    element.next = None
    element.prev = None
    element.child = None
    element.parent = None
    element.property = {}


def element_destroy(element: Optional[Element]) -> Optional[Element]:
    """Remove `element` from its chain and release it with its whole subtree.

    Descendants are released with an explicit stack, so deeply nested bodies
    never grow the call stack.

    Returns:
        The element that followed `element` before it was destroyed
    """
    if element is None:
        return None

    retval: Optional[Element] = element.next
    element_remove(element)

    stack: list[Element] = []
    if element.child is not None:
        stack.append(element.child)
    _element_release(element)

    while stack:
        node: Optional[Element] = stack.pop()
        while node is not None:
            if node.child is not None:
                stack.append(node.child)
            following: Optional[Element] = node.next
            _element_release(node)
            node = following

    return retval


def element_destroyAll(element: Optional[Element]) -> None:
    """Destroy `element` and every sibling after it."""
    while element is not None:
        element = element_destroy(element)


# --- Navigation --- #


def element_next(element: Element) -> Optional[Element]:
    return element.next


def element_prev(element: Element) -> Optional[Element]:
    return element.prev


def element_findHead(element: Element) -> Element:
    while element.prev is not None:
        element = element.prev
    return element


def element_findTail(element: Element) -> Element:
    while element.next is not None:
        element = element.next
    return element


def element_siblings(element: Optional[Element]) -> Iterator[Element]:
    """Yield `element` and every sibling after it."""
    while element is not None:
        yield element
        element = element.next


# --- Content --- #


def _content_install(
    element: Element,
    content: Optional[Element | str],
    begin: Optional[int],
    end: Optional[int],
) -> ErrorCode:
    """Take ownership of `content` (a chain or source text) as the body of `element`."""
    if isinstance(content, str):
        # Import here to avoid circular import
        from ztext.lib.parser.base import parse

        result = parse(content, begin, end)
        if not result.success:
            return result.error
        content = result.element

    if appsettings.errorChecks and content is not None:
        if content.prev is not None:
            return ErrorCode.ELEMENT_IN_USE
        for node in element_siblings(content):
            if node.parent is not None or node is element:
                LOG("Element In-Use: 'content' is already owned by another element.")
                return ErrorCode.ELEMENT_IN_USE

    if element.child is not None:
        element_destroyAll(element.child)

    for node in element_siblings(content):
        node.parent = element
    element.child = content
    return ErrorCode.NONE


def element_commandContent(element: Element) -> Optional[Element]:
    """The head of the command's body chain, or None."""
    if appsettings.errorChecks and element.kind is not ElementType.COMMAND:
        LOG(f"Element '{element.text}' is not a command.")
        return None
    return element.child


def element_commandContentSet(
    element: Optional[Element],
    content: Optional[Element | str],
    begin: Optional[int] = None,
    end: Optional[int] = None,
) -> ErrorCode:
    """Replace the body of a command.

    Args:
        element: The command element
        content: An unparented chain, source text to parse, or None to clear
        begin: First index of the source range (text content only)
        end: Last index of the source range (text content only)

    Returns:
        `ErrorCode.NONE`, a kind/parameter/in-use error, or the parse error
    """
    if appsettings.errorChecks:
        if element is None:
            return ErrorCode.INVALID_PARAMETER
        if element.kind is not ElementType.COMMAND:
            return ErrorCode.ELEMENT_TYPE_NOT_COMMAND
    return _content_install(element, content, begin, end)


def element_commandProperty(element: Element) -> dict[str, str]:
    """The live property mapping of a command."""
    return element.property


def element_commandPropertySet(
    element: Optional[Element], mapping: Mapping[str, str]
) -> ErrorCode:
    if appsettings.errorChecks:
        if element is None or mapping is None:
            return ErrorCode.INVALID_PARAMETER
        if element.kind is not ElementType.COMMAND:
            return ErrorCode.ELEMENT_TYPE_NOT_COMMAND
    element.property = dict(mapping)
    return ErrorCode.NONE


def element_variableContent(element: Element) -> Optional[Element]:
    """The head of the variable's assignment body, or None for a pure reference."""
    if appsettings.errorChecks and element.kind is not ElementType.VARIABLE:
        LOG(f"Element '{element.text}' is not a variable.")
        return None
    return element.child


def element_variableSet(
    element: Optional[Element],
    content: Optional[Element | str],
    begin: Optional[int] = None,
    end: Optional[int] = None,
) -> ErrorCode:
    """Replace the assignment body of a variable element.

    Same contract as `element_commandContentSet`; None turns the element back
    into a pure reference.
    """
    if appsettings.errorChecks:
        if element is None:
            return ErrorCode.INVALID_PARAMETER
        if element.kind is not ElementType.VARIABLE:
            return ErrorCode.ELEMENT_TYPE_NOT_VARIABLE
    return _content_install(element, content, begin, end)


def element_textSet(element: Optional[Element], text: str) -> ErrorCode:
    if appsettings.errorChecks:
        if element is None or text is None:
            return ErrorCode.INVALID_PARAMETER
        if element.kind is not ElementType.TEXT:
            return ErrorCode.ELEMENT_TYPE_NOT_TEXT
    element.text = text
    return ErrorCode.NONE


# --- Copies --- #


def _element_clone(element: Element) -> Element:
    return Element(kind=element.kind, text=element.text, property=dict(element.property))


def element_copy(element: Element) -> Element:
    """Deep copy of a single element and its children; the copy is unlinked.

    Child chains are copied with an explicit stack of (source, copy) pairs,
    so deeply nested bodies never grow the call stack.
    """
    retval: Element = _element_clone(element)
    stack: list[tuple[Element, Element]] = [(element, retval)]

    while stack:
        source, owner = stack.pop()
        tail: Optional[Element] = None
        for node in element_siblings(source.child):
            copy: Element = _element_clone(node)
            copy.parent = owner
            if tail is None:
                owner.child = copy
            else:
                copy.prev = tail
                tail.next = copy
            tail = copy
            if node.child is not None:
                stack.append((node, copy))

    return retval


def element_copyAll(element: Optional[Element]) -> Optional[Element]:
    """Deep copy of `element` and every sibling after it, in order.

    Returns:
        Head of the new unlinked chain, or None for an empty chain
    """
    head: Optional[Element] = None
    tail: Optional[Element] = None
    for node in element_siblings(element):
        copy: Element = element_copy(node)
        if tail is None:
            head = copy
        else:
            copy.prev = tail
            tail.next = copy
        tail = copy
    return head
