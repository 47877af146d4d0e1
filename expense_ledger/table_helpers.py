from datetime import date

from expense_ledger.constants import CATEGORY_ICONS, CURRENCY_SYMBOL, DEFAULT_ICON
from expense_ledger.errors import ValidationError
from expense_ledger.models import parse_date


def category_icon(category):
    """Return the glyph for a category, falling back to the default icon."""
    return CATEGORY_ICONS.get(category, DEFAULT_ICON)


def format_amount(amount):
    return f"{CURRENCY_SYMBOL}{amount:.2f}"


def format_date(value):
    """Format a date as '5 Oct 2025'. Unparseable strings are returned as is."""
    if not isinstance(value, date):
        try:
            value = parse_date(value)
        except ValidationError:
            return str(value or "")
    return f"{value.day} {value:%b %Y}"


def format_expense_row(expense):
    """Return a dict for an expense row (used in QTableWidget)."""
    return {
        "id": expense.id,
        "icon": category_icon(expense.category),
        "category": expense.category,
        "description": expense.description or "No description",
        "date": format_date(expense.date),
        "amount": format_amount(expense.amount),
    }


def format_stat_card(category, total):
    return {
        "icon": category_icon(category),
        "label": category,
        "value": format_amount(total),
    }


def prepare_chart_data(totals, top_n=5):
    """Sort (category, total) pairs and combine small ones into 'Others'."""
    if not totals:
        return [], []
    sorted_data = sorted(totals, key=lambda x: x[1], reverse=True)
    cats_sorted, amts_sorted = zip(*sorted_data)
    top_categories = list(cats_sorted[:top_n])
    top_amounts = [float(a) for a in amts_sorted[:top_n]]
    if len(cats_sorted) > top_n:
        top_categories.append("Others")
        top_amounts.append(float(sum(amts_sorted[top_n:])))
    return top_categories, top_amounts
