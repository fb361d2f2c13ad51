"""MongoDB-backed expense store on top of motor."""
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pydantic import ValidationError
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from models.expense import Expense
from services.predicates import ExpensePredicate
from stores.base import ExpenseStore

logger = logging.getLogger(__name__)


def predicate_to_query(predicate: ExpensePredicate) -> Optional[Dict[str, Any]]:
    """
    Translates a predicate into a MongoDB filter document.

    Returns None when the predicate names an id that cannot be an ObjectId,
    since such a predicate can match nothing.
    """
    query: Dict[str, Any] = {"owner_id": predicate.owner_id}
    if predicate.expense_id is not None:
        if not ObjectId.is_valid(predicate.expense_id):
            return None
        query["_id"] = ObjectId(predicate.expense_id)
    if predicate.category is not None:
        query["category"] = predicate.category

    date_range: Dict[str, Any] = {}
    if predicate.start_date is not None:
        date_range["$gte"] = predicate.start_date
    if predicate.end_date is not None:
        date_range["$lte"] = predicate.end_date
    if date_range:
        query["date"] = date_range
    return query


def document_to_expense(doc: Mapping[str, Any]) -> Expense:
    """Converts a stored document to an Expense, turning the ObjectId into a string id."""
    data = dict(doc)
    if "_id" in data:
        data["id"] = str(data.pop("_id"))
    return Expense.model_validate(data)


class MongoExpenseStore(ExpenseStore):
    name = "mongo"

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    def _readable(self, doc: Optional[Mapping[str, Any]]) -> Optional[Expense]:
        """Converts a single looked-up document; one that fails validation is logged and treated as absent."""
        if not doc:
            return None
        try:
            return document_to_expense(doc)
        except ValidationError as e:
            logger.error(f"Data validation error for document ID {doc.get('_id', 'N/A')}: {e}")
            return None

    async def ensure_indexes(self) -> None:
        """Creates the index backing owner-scoped, date-sorted listings."""
        try:
            await self.collection.create_index([("owner_id", ASCENDING), ("date", DESCENDING)])
        except PyMongoError as e:
            logger.error(f"Failed to create indexes on collection '{self.collection.name}': {e}")
            raise ConnectionError(f"Database error creating indexes: {e}")

    async def find(self, predicate: ExpensePredicate, sort: Optional[Tuple[str, int]] = None) -> List[Expense]:
        query = predicate_to_query(predicate)
        if query is None:
            return []

        expenses = []
        try:
            cursor = self.collection.find(query)
            if sort:
                cursor = cursor.sort(*sort)
            async for doc in cursor:
                expense = self._readable(doc)
                # Skip invalid documents
                if expense is not None:
                    expenses.append(expense)
        except PyMongoError as e:
            logger.error(f"Database error fetching expenses: {e}")
            raise ConnectionError(f"Database error fetching expenses: {e}")
        logger.debug(f"Fetched {len(expenses)} expenses from collection '{self.collection.name}'.")
        return expenses

    async def find_one(self, predicate: ExpensePredicate) -> Optional[Expense]:
        query = predicate_to_query(predicate)
        if query is None:
            return None
        try:
            doc = await self.collection.find_one(query)
        except PyMongoError as e:
            logger.error(f"Database error fetching expense: {e}")
            raise ConnectionError(f"Database error fetching expense: {e}")
        return self._readable(doc)

    async def insert(self, expense: Expense) -> Expense:
        doc = expense.model_dump(exclude={"id"})
        try:
            result = await self.collection.insert_one(doc)
        except PyMongoError as e:
            logger.error(f"Database error inserting expense: {e}")
            raise ConnectionError(f"Database error inserting expense: {e}")
        return expense.model_copy(update={"id": str(result.inserted_id)})

    async def update_fields(self, predicate: ExpensePredicate, fields: Dict[str, Any]) -> Optional[Expense]:
        query = predicate_to_query(predicate)
        if query is None:
            return None
        try:
            doc = await self.collection.find_one_and_update(
                query,
                {"$set": fields},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error(f"Database error updating expense: {e}")
            raise ConnectionError(f"Database error updating expense: {e}")
        return self._readable(doc)

    async def find_and_delete(self, predicate: ExpensePredicate) -> Optional[Expense]:
        query = predicate_to_query(predicate)
        if query is None:
            return None
        try:
            doc = await self.collection.find_one_and_delete(query)
        except PyMongoError as e:
            logger.error(f"Database error deleting expense: {e}")
            raise ConnectionError(f"Database error deleting expense: {e}")
        return self._readable(doc)

    async def ping(self) -> bool:
        try:
            await self.collection.database.client.admin.command('ping')
            return True
        except PyMongoError as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False

    async def close(self) -> None:
        self.collection.database.client.close()
