"""Tests for expense summary statistics."""
from services.statistics import format_percentage, summarize_expenses


class TestSummarizeExpenses:

    def test_empty_collection(self):
        stats = summarize_expenses([])
        assert stats.total_expense == 0
        assert stats.total_count == 0
        assert stats.category_breakdown == []

    def test_category_breakdown(self, make_expense):
        stats = summarize_expenses([
            make_expense(category="Food", amount=30),
            make_expense(category="Food", amount=20),
            make_expense(category="Transport", amount=50),
        ])
        assert stats.total_expense == 100
        assert stats.total_count == 3
        breakdown = [entry.model_dump() for entry in stats.category_breakdown]
        assert breakdown == [
            {"category": "Food", "amount": 50, "percentage": "50.00"},
            {"category": "Transport", "amount": 50, "percentage": "50.00"},
        ]

    def test_first_encounter_order(self, make_expense):
        stats = summarize_expenses([
            make_expense(category="Rent", amount=1),
            make_expense(category="Food", amount=100),
            make_expense(category="Rent", amount=1),
            make_expense(category="Bills", amount=5),
        ])
        assert [entry.category for entry in stats.category_breakdown] == ["Rent", "Food", "Bills"]

    def test_percentages_sum_to_hundred(self, make_expense):
        stats = summarize_expenses([
            make_expense(category="A", amount=1),
            make_expense(category="B", amount=1),
            make_expense(category="C", amount=1),
            make_expense(category="D", amount=7.35),
        ])
        total = sum(float(entry.percentage) for entry in stats.category_breakdown)
        assert abs(total - 100) <= 0.01 * len(stats.category_breakdown)

    def test_all_zero_amounts_give_zero_percentages(self, make_expense):
        stats = summarize_expenses([
            make_expense(category="Food", amount=0),
            make_expense(category="Gifts", amount=0),
        ])
        assert stats.total_expense == 0
        assert stats.total_count == 2
        assert [(entry.category, entry.amount, entry.percentage) for entry in stats.category_breakdown] == [
            ("Food", 0, "0.00"),
            ("Gifts", 0, "0.00"),
        ]

    def test_zero_amount_category_alongside_spending(self, make_expense):
        stats = summarize_expenses([
            make_expense(category="Food", amount=0),
            make_expense(category="Rent", amount=40),
        ])
        assert [entry.percentage for entry in stats.category_breakdown] == ["0.00", "100.00"]

    def test_serializes_with_camel_case_keys(self, make_expense):
        stats = summarize_expenses([make_expense(amount=12.5)])
        assert stats.model_dump(by_alias=True) == {
            "totalExpense": 12.5,
            "totalCount": 1,
            "categoryBreakdown": [{"category": "Food", "amount": 12.5, "percentage": "100.00"}],
        }


class TestFormatPercentage:

    def test_two_decimal_places(self):
        assert format_percentage(1, 3) == "33.33"
        assert format_percentage(2, 3) == "66.67"

    def test_zero_total(self):
        assert format_percentage(0, 0) == "0.00"
