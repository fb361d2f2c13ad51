"""Tests for building owner-scoped expense predicates."""
from datetime import datetime

import pytest

from models.expense import ExpenseFilters
from services.predicates import ExpensePredicate, build_expense_predicate, record_predicate
from stores.mongo import predicate_to_query


class TestBuildExpensePredicate:

    def test_owner_only_matches_all_owner_records(self, make_expense):
        predicate = build_expense_predicate("alice")
        assert predicate == ExpensePredicate(owner_id="alice")
        assert predicate.matches(make_expense(category="Food", date=datetime(2020, 1, 1)))
        assert predicate.matches(make_expense(category="Rent", date=datetime(2030, 6, 1)))

    def test_empty_filters_behave_like_none(self):
        assert build_expense_predicate("alice", ExpenseFilters()) == ExpensePredicate(owner_id="alice")

    def test_other_owner_never_matches(self, make_expense):
        predicate = build_expense_predicate("alice")
        assert not predicate.matches(make_expense(owner_id="bob"))

    def test_category_exact_match_after_trim(self, make_expense):
        predicate = build_expense_predicate("alice", ExpenseFilters(category="  Food "))
        assert predicate.category == "Food"
        assert predicate.matches(make_expense(category="Food"))
        assert not predicate.matches(make_expense(category="food"))
        assert not predicate.matches(make_expense(category="Fast Food"))

    def test_blank_category_is_ignored(self):
        predicate = build_expense_predicate("alice", ExpenseFilters(category="   "))
        assert predicate.category is None

    def test_inclusive_date_range(self, make_expense):
        start = datetime(2024, 1, 1)
        end = datetime(2024, 1, 31)
        predicate = build_expense_predicate("alice", ExpenseFilters(start_date=start, end_date=end))
        assert predicate.matches(make_expense(date=start))
        assert predicate.matches(make_expense(date=end))
        assert predicate.matches(make_expense(date=datetime(2024, 1, 15)))
        assert not predicate.matches(make_expense(date=datetime(2023, 12, 31, 23, 59)))
        assert not predicate.matches(make_expense(date=datetime(2024, 1, 31, 0, 0, 1)))

    def test_start_date_only_restricts_lower_bound(self, make_expense):
        predicate = build_expense_predicate("alice", ExpenseFilters(start_date=datetime(2024, 1, 1)))
        assert predicate.end_date is None
        assert predicate.matches(make_expense(date=datetime(2099, 1, 1)))
        assert not predicate.matches(make_expense(date=datetime(2023, 1, 1)))

    def test_end_date_only_restricts_upper_bound(self, make_expense):
        predicate = build_expense_predicate("alice", ExpenseFilters(end_date=datetime(2024, 1, 1)))
        assert predicate.start_date is None
        assert predicate.matches(make_expense(date=datetime(1999, 1, 1)))
        assert not predicate.matches(make_expense(date=datetime(2024, 1, 2)))

    def test_predicate_is_immutable(self):
        predicate = build_expense_predicate("alice")
        with pytest.raises(AttributeError):
            predicate.owner_id = "bob"

    def test_timezone_aware_bounds_are_normalized_to_utc(self):
        filters = ExpenseFilters.model_validate({"startDate": "2024-01-01T02:00:00+02:00"})
        assert filters.start_date == datetime(2024, 1, 1, 0, 0)


class TestRecordPredicate:

    def test_requires_id_and_owner(self, make_expense):
        predicate = record_predicate("alice", "abc")
        assert predicate.matches(make_expense(expense_id="abc"))
        assert not predicate.matches(make_expense(expense_id="other"))
        assert not predicate.matches(make_expense(owner_id="bob", expense_id="abc"))


class TestMongoQuery:

    def test_owner_only_query(self):
        assert predicate_to_query(build_expense_predicate("alice")) == {"owner_id": "alice"}

    def test_full_query(self):
        start = datetime(2024, 1, 1)
        end = datetime(2024, 2, 1)
        predicate = build_expense_predicate("alice", ExpenseFilters(category="Food", start_date=start, end_date=end))
        assert predicate_to_query(predicate) == {
            "owner_id": "alice",
            "category": "Food",
            "date": {"$gte": start, "$lte": end},
        }

    def test_single_bound_query(self):
        end = datetime(2024, 2, 1)
        predicate = build_expense_predicate("alice", ExpenseFilters(end_date=end))
        assert predicate_to_query(predicate) == {"owner_id": "alice", "date": {"$lte": end}}

    def test_record_query_uses_object_id(self):
        query = predicate_to_query(record_predicate("alice", "65a1b2c3d4e5f6a7b8c9d0e1"))
        assert str(query["_id"]) == "65a1b2c3d4e5f6a7b8c9d0e1"
        assert query["owner_id"] == "alice"

    def test_unparseable_id_matches_nothing(self):
        assert predicate_to_query(record_predicate("alice", "not-an-object-id")) is None
