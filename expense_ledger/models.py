"""
Value types for the expense ledger.
"""
import datetime
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Tuple

from expense_ledger.constants import (CONFIRM_CLEAR_ALL, CONFIRM_DELETE,
                                      DATE_FORMAT, ERR_AMOUNT, ERR_CATEGORY,
                                      ERR_DATE_INVALID, ERR_DATE_MISSING,
                                      KIND_SUCCESS, MAX_AMOUNT_DIGITS)
from expense_ledger.errors import ValidationError

EDITABLE_FIELDS = ("amount", "category", "date", "description")


def parse_amount(value) -> Decimal:
    """Return a positive Decimal or raise ValidationError."""
    if value is None or isinstance(value, bool):
        raise ValidationError("amount", ERR_AMOUNT)
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError("amount", ERR_AMOUNT)
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("amount", ERR_AMOUNT)
    if (
        amount.adjusted() >= MAX_AMOUNT_DIGITS
        or amount.as_tuple().exponent < -MAX_AMOUNT_DIGITS
    ):
        raise ValidationError("amount", ERR_AMOUNT)
    return amount


def parse_category(value) -> str:
    category = str(value).strip() if value is not None else ""
    if not category:
        raise ValidationError("category", ERR_CATEGORY)
    return category


def parse_date(value) -> datetime.date:
    """Accept a date or a YYYY-MM-DD string."""
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValidationError("date", ERR_DATE_MISSING)
    try:
        return datetime.datetime.strptime(text, DATE_FORMAT).date()
    except ValueError:
        raise ValidationError("date", ERR_DATE_INVALID)


def parse_description(value) -> str:
    return str(value).strip() if value is not None else ""


_PARSERS = {
    "amount": parse_amount,
    "category": parse_category,
    "date": parse_date,
    "description": parse_description,
}


def parse_changes(data) -> dict:
    """Validate the editable fields present in ``data``; other keys are dropped."""
    return {
        name: _PARSERS[name](data[name]) for name in EDITABLE_FIELDS if name in data
    }


@dataclass(frozen=True)
class Expense:
    id: int
    amount: Decimal
    category: str
    date: datetime.date
    description: str = ""

    @classmethod
    def from_form(cls, expense_id, data):
        """Build a record from a complete form payload.

        Fields are checked in form order (amount, category, date) and the
        first failure is raised.
        """
        return cls(
            id=expense_id,
            amount=parse_amount(data.get("amount")),
            category=parse_category(data.get("category")),
            date=parse_date(data.get("date")),
            description=parse_description(data.get("description")),
        )

    def merged(self, changes):
        """Return a copy with ``changes`` applied. The id is never touched."""
        return replace(self, **parse_changes(changes))

    def matches(self, category_filter="", search=""):
        if category_filter and self.category != category_filter:
            return False
        if search:
            needle = search.lower()
            return (
                needle in self.description.lower() or needle in self.category.lower()
            )
        return True

    def to_dict(self):
        return {
            "id": self.id,
            "amount": self.amount,
            "category": self.category,
            "date": self.date.strftime(DATE_FORMAT),
            "description": self.description,
        }


@dataclass(frozen=True)
class PendingDelete:
    expense_id: int

    @property
    def prompt(self):
        return CONFIRM_DELETE


@dataclass(frozen=True)
class PendingClearAll:
    @property
    def prompt(self):
        return CONFIRM_CLEAR_ALL


@dataclass(frozen=True)
class Notification:
    text: str
    kind: str = KIND_SUCCESS


@dataclass(frozen=True)
class ExportDocument:
    filename: str
    content: str


@dataclass(frozen=True)
class LedgerView:
    """Snapshot handed to the presentation layer on every change."""

    expenses: List[Expense] = field(default_factory=list)
    category_totals: List[Tuple[str, Decimal]] = field(default_factory=list)
    grand_total: Decimal = Decimal("0")
    count: int = 0
    count_label: str = "0 expenses"
    search: str = ""
    category_filter: str = ""
    editing_id: Optional[int] = None

    @property
    def is_editing(self):
        return self.editing_id is not None
