"""
Evaluation context for ZText.

A `Context` owns the per-document state shared by every evaluation:
- The variable cache, mapping names to stored element chains
- The command registry, mapping names to host callbacks
- Recursion bookkeeping (current depth and the variables being expanded)

Cached chains are owned by the context. Replacing or erasing an entry
destroys the old chain, unless that chain is currently being rendered; such
chains are retired and destroyed once their rendering finishes.

Example:
    ctx = Context()
    ctx.command_create("b", lambda ctx, e: f"<b>{ctx.eval(e.child)}</b>")
    result = parse("{{b {{name$ Ada}}}}")
    print(ctx.eval(result.element))  # <b>Ada</b>
"""

from contextlib import contextmanager
from typing import Iterator, Optional, Self
from ztext.config.settings import appsettings
from ztext.lib.element import element_destroyAll, name_isValid
from ztext.lib.evaluator import element_eval
from ztext.lib.log import LOG
from ztext.models.dataModel import CommandHandler, Element, ErrorCode


class Context:
    """Variable cache, command registry and evaluation entry point.

    Attributes:
        depth: Current evaluation nesting, maintained by the evaluator
    """

    def __init__(self: Self) -> None:
        self._variable: dict[str, Optional[Element]] = {}
        self._readOnly: dict[str, bool] = {}
        self._command: dict[str, CommandHandler] = {}
        self._expanding: set[str] = set()
        self._pinned: dict[Element, int] = {}
        self._retired: list[Element] = []
        self.depth: int = 0

    # --- Evaluation --- #

    def eval(self: Self, element: Optional[Element], to_end: bool = True) -> str:
        """Render `element` (and its following siblings when `to_end`)."""
        return element_eval(self, element, to_end)

    def destroy(self: Self) -> None:
        """Drop every cached variable and registered command."""
        self.cache_clear()
        self.command_destroyAll()

    # --- Variable cache --- #

    def cache_variableSet(
        self: Self, name: str, chain: Optional[Element], read_only: bool = False
    ) -> ErrorCode:
        """Store `chain` under `name`, taking ownership of it.

        Args:
            name: Variable name
            chain: Unlinked chain head; None stores a present but empty value
            read_only: Reserved flag, stored but not enforced

        Returns:
            `ErrorCode.NONE`, `INVALID_PARAMETER` for a bad name, or
            `ELEMENT_IN_USE` when `chain` is linked elsewhere
        """
        if appsettings.errorChecks:
            if not name_isValid(name):
                LOG(f"Invalid variable name '{name}'")
                return ErrorCode.INVALID_PARAMETER
            if chain is not None and (chain.prev is not None or chain.parent is not None):
                return ErrorCode.ELEMENT_IN_USE

        previous: Optional[Element] = self._variable.get(name)
        if previous is not None and previous is not chain:
            self._chain_retire(previous)
        self._variable[name] = chain
        self._readOnly[name] = read_only
        return ErrorCode.NONE

    def cache_variableGet(self: Self, name: str) -> Optional[Element]:
        """The cached chain for `name`, or None when absent or empty."""
        return self._variable.get(name)

    def cache_variableContains(self: Self, name: str) -> bool:
        return name in self._variable

    def cache_variableReadOnly(self: Self, name: str) -> bool:
        return self._readOnly.get(name, False)

    def cache_variableErase(self: Self, name: str) -> None:
        """Remove `name` from the cache; absent names are ignored."""
        if name not in self._variable:
            return
        chain: Optional[Element] = self._variable.pop(name)
        self._readOnly.pop(name, None)
        if chain is not None:
            self._chain_retire(chain)

    def cache_variableClearAll(self: Self) -> None:
        for chain in self._variable.values():
            if chain is not None:
                self._chain_retire(chain)
        self._variable.clear()
        self._readOnly.clear()

    def cache_clear(self: Self) -> None:
        """Empty the variable cache."""
        self.cache_variableClearAll()

    def cache_variableList(self: Self) -> list[str]:
        """Names currently in the cache, in insertion order."""
        return list(self._variable)

    def cache_variableExpanding(self: Self, name: str) -> bool:
        """True while the cached value of `name` is being rendered."""
        return name in self._expanding

    @contextmanager
    def cache_variablePin(self: Self, name: str, chain: Element) -> Iterator[None]:
        """Mark `name` as expanding and keep `chain` alive while it renders."""
        self._expanding.add(name)
        self._pinned[chain] = self._pinned.get(chain, 0) + 1
        try:
            yield
        finally:
            self._expanding.discard(name)
            self._pinned[chain] -= 1
            if not self._pinned[chain]:
                del self._pinned[chain]
                if chain in self._retired:
                    self._retired.remove(chain)
                    element_destroyAll(chain)

    def _chain_retire(self: Self, chain: Element) -> None:
        if chain in self._pinned:
            self._retired.append(chain)
        else:
            element_destroyAll(chain)

    # --- Command registry --- #

    def command_create(self: Self, name: str, handler: CommandHandler) -> ErrorCode:
        """Register `handler` under `name`, replacing any previous one.

        Returns:
            `ErrorCode.NONE`, or `INVALID_PARAMETER` for a bad name or a
            handler that is not callable
        """
        if appsettings.errorChecks and (not name_isValid(name) or not callable(handler)):
            LOG(f"Cannot register command '{name}'")
            return ErrorCode.INVALID_PARAMETER
        self._command[name] = handler
        return ErrorCode.NONE

    def command_get(self: Self, name: str) -> Optional[CommandHandler]:
        return self._command.get(name)

    def command_destroy(self: Self, name: str) -> None:
        self._command.pop(name, None)

    def command_destroyAll(self: Self) -> None:
        self._command.clear()

    def command_list(self: Self) -> list[str]:
        return list(self._command)
