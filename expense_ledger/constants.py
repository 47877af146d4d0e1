APP_NAME = "Expense Ledger"
APP_WIDTH = 1200
APP_HEIGHT = 800
LOG_FILE = "expense_ledger.log"

DATE_FORMAT = "%Y-%m-%d"
CURRENCY_SYMBOL = "₹"
# Amounts are limited to this many integer digits and decimal places
MAX_AMOUNT_DIGITS = 12
MESSAGE_DURATION_MS = 3000

CATEGORIES = [
    "Food",
    "Travel",
    "Shopping",
    "Entertainment",
    "Bills",
    "Healthcare",
    "Education",
    "Other",
]

CATEGORY_ICONS = {
    "Food": "🍽️",
    "Travel": "✈️",
    "Shopping": "🛍️",
    "Entertainment": "🎬",
    "Bills": "💳",
    "Healthcare": "🏥",
    "Education": "📚",
    "Other": "📄",
}
DEFAULT_ICON = "📄"

# Sample records a fresh session starts with
SEED_EXPENSES = [
    {"id": 1, "amount": "250", "category": "Food",
     "description": "Lunch at college cafeteria", "date": "2025-10-05"},
    {"id": 2, "amount": "1200", "category": "Travel",
     "description": "Monthly metro pass", "date": "2025-10-01"},
    {"id": 3, "amount": "500", "category": "Shopping",
     "description": "Study materials and notebooks", "date": "2025-10-03"},
    {"id": 4, "amount": "180", "category": "Entertainment",
     "description": "Movie ticket", "date": "2025-10-04"},
    {"id": 5, "amount": "2500", "category": "Bills",
     "description": "Mobile recharge", "date": "2025-09-28"},
]

CSV_HEADERS = ["Date", "Category", "Amount", "Description"]
EXPORT_FILENAME = "expenses_{date}.csv"

MSG_ADDED = "Expense added successfully!"
MSG_UPDATED = "Expense updated successfully!"
MSG_DELETED = "Expense deleted successfully!"
MSG_EXPORTED = "Expenses exported successfully!"
MSG_CLEARED = "All expenses cleared!"

ERR_AMOUNT = "Please enter a valid amount"
ERR_CATEGORY = "Please select a category"
ERR_DATE_MISSING = "Please select a date"
ERR_DATE_INVALID = "Please enter a valid date"
ERR_EMPTY_EXPORT = "No expenses to export"
ERR_NOT_FOUND = "Expense not found"

CONFIRM_DELETE = "Are you sure you want to delete this expense?"
CONFIRM_CLEAR_ALL = (
    "Are you sure you want to clear all expenses? This action cannot be undone."
)

KIND_SUCCESS = "success"
KIND_ERROR = "error"
