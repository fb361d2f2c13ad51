"""
Abstract expense store.

Business logic only talks to this interface, so the MongoDB-backed store can
be swapped for the in-memory one in tests and local development. Every
operation takes an ExpensePredicate, which always carries the owner.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from models.expense import Expense
from services.predicates import ExpensePredicate


class ExpenseStore(ABC):
    """
    Persistence operations needed by the expense service.

    Implementations raise ConnectionError when the underlying storage fails.
    """

    name = "abstract"

    @abstractmethod
    async def find(self, predicate: ExpensePredicate, sort: Optional[Tuple[str, int]] = None) -> List[Expense]:
        """
        Return every expense matching the predicate.

        Args:
            predicate: Selection to apply
            sort: Optional (field, direction) pair, direction -1 for descending

        Returns:
            Matching expenses, in sort order when one is given
        """

    @abstractmethod
    async def find_one(self, predicate: ExpensePredicate) -> Optional[Expense]:
        """Return the first expense matching the predicate, or None."""

    @abstractmethod
    async def insert(self, expense: Expense) -> Expense:
        """
        Persist a new expense.

        Returns:
            The stored expense, carrying its newly assigned id
        """

    @abstractmethod
    async def update_fields(self, predicate: ExpensePredicate, fields: Dict[str, Any]) -> Optional[Expense]:
        """
        Set the given fields on the expense matching the predicate.

        Returns:
            The expense after the update, or None if nothing matched
        """

    @abstractmethod
    async def find_and_delete(self, predicate: ExpensePredicate) -> Optional[Expense]:
        """
        Remove the expense matching the predicate in one step.

        Returns:
            The removed expense, or None if nothing matched
        """

    async def ping(self) -> bool:
        """Reports whether the backing storage is reachable."""
        return True

    async def close(self) -> None:
        """Releases any resources held by the store."""
