"""API Routes for expenses"""
from datetime import datetime
from typing import Annotated, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, Response
import logging

from models.expense import Expense, ExpenseCreate, ExpenseFilters, ExpenseStats, ExpenseUpdate, MessageResponse
from services import expenses_service
from stores.base import ExpenseStore
from utils.auth import OwnerIdDep

router = APIRouter()
logger = logging.getLogger(__name__)

NOT_FOUND_DETAIL = "Expense not found"

# --- Dependency Function ---
def get_expense_store(request: Request) -> ExpenseStore:
    """Dependency to get the expense store from the request state."""
    store = request.state.expense_store
    if store is None:
        logger.error("Expense store not found in application state. Check the database connection.")
        raise HTTPException(status_code=503, detail="Database service not available.")
    return store

# Type hint for the dependency
ExpenseStoreDep = Annotated[ExpenseStore, Depends(get_expense_store)]


def store_unavailable(action: str, error: ConnectionError) -> HTTPException:
    """Logs a store failure and builds the generic 503 for it."""
    logger.error(f"Connection error {action}: {error}")
    return HTTPException(status_code=503, detail=f"Database error while {action}.")


def unexpected_failure(action: str, error: Exception) -> HTTPException:
    """Logs an unexpected failure and builds the generic 500 for it."""
    logger.exception(f"Unexpected error {action}: {error}")
    return HTTPException(status_code=500, detail=f"An unexpected server error occurred while {action}.")

# --- API Routes ---

@router.get("/health", summary="Health Check", description="Reports whether the expense store is reachable.")
async def health(store: ExpenseStoreDep, response: Response):
    """API endpoint reporting store reachability."""
    reachable = await store.ping()
    if not reachable:
        response.status_code = 503
    return {"status": "ok" if reachable else "unavailable", "store": store.name}


@router.get("/expenses", response_model=List[Expense], summary="List Expenses", description="Retrieves the caller's expenses, optionally filtered by category and an inclusive date range, most recent first.")
async def list_expenses(
    store: ExpenseStoreDep,
    owner_id: OwnerIdDep,
    category: Optional[str] = Query(None, description="Exact category to match."),
    start_date: Optional[datetime] = Query(None, alias="startDate", description="Earliest expense date (inclusive), ISO 8601."),
    end_date: Optional[datetime] = Query(None, alias="endDate", description="Latest expense date (inclusive), ISO 8601."),
) -> List[Expense]:
    """API endpoint listing the caller's expenses."""
    logger.info(f"GET /expenses endpoint called by {owner_id}.")
    filters = ExpenseFilters(category=category, start_date=start_date, end_date=end_date)
    try:
        return await expenses_service.list_expenses(store, owner_id, filters)
    except ConnectionError as ce:
        raise store_unavailable("fetching expenses", ce)
    except Exception as e:
        raise unexpected_failure("fetching expenses", e)


@router.get("/expenses/stats", response_model=ExpenseStats, summary="Expense Statistics", description="Totals and per-category breakdown over all of the caller's expenses.")
async def get_expense_stats(store: ExpenseStoreDep, owner_id: OwnerIdDep) -> ExpenseStats:
    """API endpoint summarizing all of the caller's expenses."""
    logger.info(f"GET /expenses/stats endpoint called by {owner_id}.")
    try:
        return await expenses_service.get_expense_stats(store, owner_id)
    except ConnectionError as ce:
        raise store_unavailable("computing statistics", ce)
    except Exception as e:
        raise unexpected_failure("computing statistics", e)


@router.get("/expenses/{expense_id}", response_model=Expense, summary="Get Expense")
async def get_expense(expense_id: str, store: ExpenseStoreDep, owner_id: OwnerIdDep) -> Expense:
    """API endpoint fetching one of the caller's expenses."""
    logger.info(f"GET /expenses/{expense_id} endpoint called by {owner_id}.")
    try:
        expense = await expenses_service.get_expense(store, owner_id, expense_id)
    except ConnectionError as ce:
        raise store_unavailable("fetching the expense", ce)
    except Exception as e:
        raise unexpected_failure("fetching the expense", e)

    if expense is None:
        logger.info(f"Expense {expense_id} not found for {owner_id}.")
        raise HTTPException(status_code=404, detail=NOT_FOUND_DETAIL)
    return expense


@router.post("/expenses", response_model=Expense, status_code=201, summary="Create Expense")
async def create_expense(store: ExpenseStoreDep, owner_id: OwnerIdDep, data: Annotated[ExpenseCreate, Body(...)]) -> Expense:
    """API endpoint creating an expense owned by the caller."""
    logger.info(f"POST /expenses endpoint called by {owner_id}: {data.title[:50]}")
    try:
        return await expenses_service.create_expense(store, owner_id, data)
    except ConnectionError as ce:
        raise store_unavailable("creating the expense", ce)
    except Exception as e:
        raise unexpected_failure("creating the expense", e)


@router.put("/expenses/{expense_id}", response_model=Expense, summary="Update Expense", description="Changes any of title, amount, category and date. Other fields in the body are ignored.")
async def update_expense(
    expense_id: str,
    store: ExpenseStoreDep,
    owner_id: OwnerIdDep,
    changes: Annotated[ExpenseUpdate, Body(...)],
) -> Expense:
    """API endpoint applying a partial update to one of the caller's expenses."""
    logger.info(f"PUT /expenses/{expense_id} endpoint called by {owner_id}.")
    try:
        expense = await expenses_service.update_expense(store, owner_id, expense_id, changes)
    except ConnectionError as ce:
        raise store_unavailable("updating the expense", ce)
    except Exception as e:
        raise unexpected_failure("updating the expense", e)

    if expense is None:
        logger.info(f"Expense {expense_id} not found for {owner_id}.")
        raise HTTPException(status_code=404, detail=NOT_FOUND_DETAIL)
    return expense


@router.delete("/expenses/{expense_id}", response_model=MessageResponse, summary="Delete Expense")
async def delete_expense(expense_id: str, store: ExpenseStoreDep, owner_id: OwnerIdDep) -> MessageResponse:
    """API endpoint permanently deleting one of the caller's expenses."""
    logger.info(f"DELETE /expenses/{expense_id} endpoint called by {owner_id}.")
    try:
        deleted = await expenses_service.delete_expense(store, owner_id, expense_id)
    except ConnectionError as ce:
        raise store_unavailable("deleting the expense", ce)
    except Exception as e:
        raise unexpected_failure("deleting the expense", e)

    if deleted is None:
        logger.info(f"Expense {expense_id} not found for {owner_id}.")
        raise HTTPException(status_code=404, detail=NOT_FOUND_DETAIL)
    return MessageResponse(message="Expense deleted successfully")
