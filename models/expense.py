"""Pydantic models for Expense data"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_serializer, field_validator
from pydantic.alias_generators import to_camel

# Fields a caller may change on an existing expense, in the order they are applied
MUTABLE_FIELDS = ("title", "amount", "category", "date")


def normalize_timestamp(value: Optional[datetime]) -> Optional[datetime]:
    """Converts timezone-aware timestamps to naive UTC, the form MongoDB hands back."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def require_text(value: str, field_name: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{field_name.capitalize()} is required")
    return value


def reject_boolean_amount(value: Any) -> Any:
    # bool is an int subclass, so lax float parsing would store true as 1.0
    if isinstance(value, bool):
        raise ValueError("Amount must be a number")
    return value


class ApiModel(BaseModel):
    """Base model speaking camelCase on the wire and snake_case in Python."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Expense(ApiModel):
    """
    Represents a single expense owned by exactly one identity.
    """
    id: Optional[str] = None
    owner_id: str
    title: str
    amount: float = Field(..., ge=0)
    category: str
    date: datetime

    @field_serializer("date", when_used="json")
    def serialize_date_as_utc(self, value: datetime) -> datetime:
        """Stored dates are naive UTC; mark them as such on the wire."""
        return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


class ExpenseCreate(ApiModel):
    """Body of a create request. Any owner supplied here is ignored."""
    title: str
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    category: str
    date: datetime

    @field_validator("title", "category")
    @classmethod
    def strip_required_text(cls, value: str, info: ValidationInfo) -> str:
        return require_text(value, info.field_name)

    @field_validator("amount", mode="before")
    @classmethod
    def reject_boolean(cls, value: Any) -> Any:
        return reject_boolean_amount(value)

    @field_validator("date")
    @classmethod
    def normalize_date(cls, value: datetime) -> datetime:
        return normalize_timestamp(value)


class ExpenseUpdate(ApiModel):
    """
    Body of a partial update. Only the fields in MUTABLE_FIELDS are ever
    applied; unknown keys (including any owner) are dropped during parsing.
    A field sent as null is treated as not supplied.
    """
    title: Optional[str] = None
    amount: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    category: Optional[str] = None
    date: Optional[datetime] = None

    @field_validator("title", "category")
    @classmethod
    def strip_optional_text(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        if value is None:
            return value
        return require_text(value, info.field_name)

    @field_validator("amount", mode="before")
    @classmethod
    def reject_boolean(cls, value: Any) -> Any:
        return reject_boolean_amount(value)

    @field_validator("date")
    @classmethod
    def normalize_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return normalize_timestamp(value)

    def changed_fields(self) -> Dict[str, Any]:
        """Returns the allow-listed fields the caller actually supplied."""
        changes = {}
        for name in MUTABLE_FIELDS:
            value = getattr(self, name)
            if name in self.model_fields_set and value is not None:
                changes[name] = value
        return changes


class ExpenseFilters(ApiModel):
    """Optional narrowing of an expense listing. A blank category means no category filter."""
    category: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("category")
    @classmethod
    def strip_category(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_bounds(cls, value: Optional[datetime]) -> Optional[datetime]:
        return normalize_timestamp(value)


class CategoryBreakdown(ApiModel):
    category: str
    amount: float
    percentage: str


class ExpenseStats(ApiModel):
    """Summary of everything one identity owns."""
    total_expense: float
    total_count: int
    category_breakdown: List[CategoryBreakdown]


class MessageResponse(BaseModel):
    message: str
