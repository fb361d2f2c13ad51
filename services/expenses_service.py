"""Service layer for handling expense-related logic."""
import logging
from typing import List, Optional

from models.expense import Expense, ExpenseCreate, ExpenseFilters, ExpenseStats, ExpenseUpdate
from services.predicates import DATE_DESCENDING, build_expense_predicate, record_predicate
from services.statistics import summarize_expenses
from stores.base import ExpenseStore

logger = logging.getLogger(__name__)

# --- Store Interaction Functions (Depend on store passed from route) ---
# Lookups that match nothing return None; the route turns that into a not-found response.

async def list_expenses(store: ExpenseStore, owner_id: str, filters: Optional[ExpenseFilters] = None) -> List[Expense]:
    """Fetches the owner's expenses matching the filters, most recent first."""
    predicate = build_expense_predicate(owner_id, filters)
    logger.info(f"Listing expenses for owner {owner_id} (category={predicate.category}, start={predicate.start_date}, end={predicate.end_date})")
    expenses = await store.find(predicate, sort=DATE_DESCENDING)
    logger.info(f"Fetched {len(expenses)} expenses for owner {owner_id}.")
    return expenses


async def get_expense_stats(store: ExpenseStore, owner_id: str) -> ExpenseStats:
    """Summarizes every expense the owner has, ignoring any listing filters."""
    expenses = await store.find(build_expense_predicate(owner_id))
    stats = summarize_expenses(expenses)
    logger.info(f"Computed stats for owner {owner_id}: {stats.total_count} expenses, {len(stats.category_breakdown)} categories.")
    return stats


async def get_expense(store: ExpenseStore, owner_id: str, expense_id: str) -> Optional[Expense]:
    return await store.find_one(record_predicate(owner_id, expense_id))


async def create_expense(store: ExpenseStore, owner_id: str, data: ExpenseCreate) -> Expense:
    """Stores a new expense owned by owner_id."""
    expense = Expense(owner_id=owner_id, **data.model_dump())
    stored = await store.insert(expense)
    logger.info(f"Created expense {stored.id} for owner {owner_id}.")
    return stored


async def update_expense(store: ExpenseStore, owner_id: str, expense_id: str, changes: ExpenseUpdate) -> Optional[Expense]:
    """
    Applies the supplied mutable fields to the owner's expense.
    With nothing to change, the current record is returned as-is.
    """
    predicate = record_predicate(owner_id, expense_id)
    fields = changes.changed_fields()
    if not fields:
        logger.info(f"Update of expense {expense_id} carried no mutable fields.")
        return await store.find_one(predicate)

    updated = await store.update_fields(predicate, fields)
    if updated:
        logger.info(f"Updated expense {expense_id} fields: {', '.join(fields)}")
    return updated


async def delete_expense(store: ExpenseStore, owner_id: str, expense_id: str) -> Optional[Expense]:
    deleted = await store.find_and_delete(record_predicate(owner_id, expense_id))
    if deleted:
        logger.info(f"Deleted expense {expense_id} for owner {owner_id}.")
    return deleted
