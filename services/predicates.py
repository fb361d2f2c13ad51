"""Query predicates that scope every expense lookup to its owner."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from models.expense import Expense, ExpenseFilters

# Listing order: most recent first
DATE_DESCENDING: Tuple[str, int] = ("date", -1)


@dataclass(frozen=True)
class ExpensePredicate:
    """
    Declarative selection over the expense store.

    owner_id is always present, so a predicate can never reach records of
    another identity. The remaining attributes narrow the selection when set;
    the date bounds are inclusive.
    """
    owner_id: str
    expense_id: Optional[str] = None
    category: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    def matches(self, expense: Expense) -> bool:
        """Evaluates the predicate against a single record."""
        if expense.owner_id != self.owner_id:
            return False
        if self.expense_id is not None and expense.id != self.expense_id:
            return False
        if self.category is not None and expense.category != self.category:
            return False
        if self.start_date is not None and expense.date < self.start_date:
            return False
        if self.end_date is not None and expense.date > self.end_date:
            return False
        return True


def build_expense_predicate(owner_id: str, filters: Optional[ExpenseFilters] = None) -> ExpensePredicate:
    """Builds the listing predicate for owner_id, narrowed by whichever filters were supplied."""
    if filters is None:
        return ExpensePredicate(owner_id=owner_id)

    category = filters.category.strip() if filters.category else None
    return ExpensePredicate(
        owner_id=owner_id,
        category=category or None,
        start_date=filters.start_date,
        end_date=filters.end_date,
    )


def record_predicate(owner_id: str, expense_id: str) -> ExpensePredicate:
    """Predicate locating one record. The id alone is never enough."""
    return ExpensePredicate(owner_id=owner_id, expense_id=expense_id)
