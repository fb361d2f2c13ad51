"""Process-local expense store for tests and local development."""
import logging
from typing import Any, Dict, List, Optional, Tuple
from uuid import uuid4

from models.expense import Expense
from services.predicates import ExpensePredicate
from stores.base import ExpenseStore

logger = logging.getLogger(__name__)


class InMemoryExpenseStore(ExpenseStore):
    """Keeps expenses in a dict keyed by id. Returned records are copies."""

    name = "memory"

    def __init__(self):
        self._expenses: Dict[str, Expense] = {}

    def _matching(self, predicate: ExpensePredicate) -> List[Expense]:
        return [expense for expense in self._expenses.values() if predicate.matches(expense)]

    async def find(self, predicate: ExpensePredicate, sort: Optional[Tuple[str, int]] = None) -> List[Expense]:
        expenses = self._matching(predicate)
        if sort:
            field, direction = sort
            expenses.sort(key=lambda expense: getattr(expense, field), reverse=direction < 0)
        return [expense.model_copy() for expense in expenses]

    async def find_one(self, predicate: ExpensePredicate) -> Optional[Expense]:
        expenses = self._matching(predicate)
        return expenses[0].model_copy() if expenses else None

    async def insert(self, expense: Expense) -> Expense:
        stored = expense.model_copy(update={"id": uuid4().hex})
        self._expenses[stored.id] = stored
        logger.debug(f"Stored expense {stored.id} for owner {stored.owner_id}")
        return stored.model_copy()

    async def update_fields(self, predicate: ExpensePredicate, fields: Dict[str, Any]) -> Optional[Expense]:
        expenses = self._matching(predicate)
        if not expenses:
            return None
        updated = expenses[0].model_copy(update=fields)
        self._expenses[updated.id] = updated
        return updated.model_copy()

    async def find_and_delete(self, predicate: ExpensePredicate) -> Optional[Expense]:
        expenses = self._matching(predicate)
        if not expenses:
            return None
        return self._expenses.pop(expenses[0].id)
