"""Per-call item allowance shared by the recursive item builders."""

import logging
from typing import Optional

from ..models.config import Syntax
from ..models.diagnostics import Diagnostic, DiagnosticKind
from ..models.items import Item

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITEMS = 10_000


class ItemBudget:
    """
    Counts the items one extraction call produces for a syntax.

    Every item built, and every copy made for an element that is the value
    of several properties, draws from the same allowance. Once a request
    does not fit, the budget is exhausted and every later request fails too,
    so the caller drops the rest of the traversal the same way it drops a
    branch past the depth limit.

    Example:
        budget = ItemBudget(max_items=500)
        if budget.take_copy(nested):
            item.add_item_property(name, copy.deepcopy(nested))
        budget.report(Syntax.MICRODATA, diagnostics)
    """

    def __init__(self, max_items: int = DEFAULT_MAX_ITEMS):
        self.max_items = max_items
        self.used = 0
        self.exhausted = False

    def take(self, count: int = 1) -> bool:
        """
        Reserve room for ``count`` items.

        Returns:
            True if reserved; False once the allowance is spent
        """
        if self.exhausted:
            return False
        if self.used + count > self.max_items:
            self.exhausted = True
            return False
        self.used += count
        return True

    def take_copy(self, item: Item) -> bool:
        """Reserve room for a deep copy of ``item`` and everything nested in it."""
        return not self.exhausted and self.take(item.count_items())

    def report(self, syntax: Syntax, diagnostics: Optional[list[Diagnostic]]) -> None:
        """Log and record an item_limit diagnostic if the budget ran out."""
        if not self.exhausted:
            return

        message = f"Stopped after {self.used} {syntax.value} items (limit {self.max_items}); the rest were dropped"
        logger.warning(message)
        if diagnostics is not None:
            diagnostics.append(Diagnostic(kind=DiagnosticKind.ITEM_LIMIT, message=message, syntax=syntax))
