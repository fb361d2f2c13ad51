"""Summary statistics over an identity's expenses."""
from typing import Dict, Iterable

from models.expense import CategoryBreakdown, Expense, ExpenseStats


def format_percentage(amount: float, total: float) -> str:
    """
    Share of total as a two-decimal string.

    A zero total (no expenses, or only zero amounts) gives "0.00" for every
    category instead of dividing by zero.
    """
    if total == 0:
        return "0.00"
    return f"{(amount / total) * 100:.2f}"


def summarize_expenses(expenses: Iterable[Expense]) -> ExpenseStats:
    """Totals the expenses and breaks them down per category, in order of first appearance."""
    total_expense = 0.0
    total_count = 0
    category_totals: Dict[str, float] = {}

    for expense in expenses:
        total_expense += expense.amount
        total_count += 1
        category_totals[expense.category] = category_totals.get(expense.category, 0.0) + expense.amount

    breakdown = [
        CategoryBreakdown(
            category=category,
            amount=amount,
            percentage=format_percentage(amount, total_expense),
        )
        for category, amount in category_totals.items()
    ]

    return ExpenseStats(
        total_expense=total_expense,
        total_count=total_count,
        category_breakdown=breakdown,
    )
