"""Shared fixtures. The app runs against the in-memory store with rate limiting off."""
import os

os.environ["EXPENSE_STORE"] = "memory"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from main import app
from models.expense import Expense


@pytest.fixture
def client():
    # Entering the client runs the lifespan, which opens a fresh store per test
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_expense():
    def _make(owner_id="alice", title="Lunch", amount=10.0, category="Food", date=datetime(2024, 1, 15, 12, 0), expense_id=None):
        return Expense(id=expense_id, owner_id=owner_id, title=title, amount=amount, category=category, date=date)
    return _make
