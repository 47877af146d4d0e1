# conftest.py
import os
import sys
from datetime import date
from decimal import Decimal

import pytest

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from expense_ledger.ledger import LedgerController
from expense_ledger.models import Expense


def pytest_configure(config):
    """Register custom markers to avoid warnings."""
    config.addinivalue_line(
        "markers", "gui: marks tests as GUI tests (require display)"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests (no GUI required)"
    )
    config.addinivalue_line("markers", "integration: marks tests as integration tests")


class NotificationRecorder:
    """Stands in for the message channel and remembers what it was told."""

    def __init__(self):
        self.messages = []

    def __call__(self, text, kind="success"):
        self.messages.append((text, kind))

    @property
    def last(self):
        return self.messages[-1] if self.messages else None


@pytest.fixture
def notifications():
    return NotificationRecorder()


@pytest.fixture
def ledger(notifications):
    """Controller seeded with the five sample expenses."""
    return LedgerController(notifier=notifications)


@pytest.fixture
def empty_ledger(notifications):
    return LedgerController(expenses=[], notifier=notifications)


@pytest.fixture
def valid_form():
    return {
        "amount": "75.50",
        "category": "Food",
        "date": "2025-10-06",
        "description": "Dinner with friends",
    }


@pytest.fixture
def sample_expense():
    return Expense(
        id=1,
        amount=Decimal("25.50"),
        category="Food",
        date=date(2023, 1, 15),
        description="Lunch",
    )
