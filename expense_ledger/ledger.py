import logging
from decimal import Decimal

from expense_ledger.confirmation import ConfirmationGate
from expense_ledger.constants import (CATEGORIES, ERR_EMPTY_EXPORT,
                                      ERR_NOT_FOUND, KIND_ERROR, KIND_SUCCESS,
                                      MSG_ADDED, MSG_CLEARED, MSG_DELETED,
                                      MSG_EXPORTED, MSG_UPDATED, SEED_EXPENSES)
from expense_ledger.errors import (EmptyExportError, RecordNotFoundError,
                                   ValidationError)
from expense_ledger.models import (Expense, LedgerView, PendingClearAll,
                                   PendingDelete)
from expense_ledger.reports import ReportService

logger = logging.getLogger(__name__)


def seed_expenses():
    """Return fresh copies of the sample records a new session starts with."""
    return [Expense.from_form(row["id"], row) for row in SEED_EXPENSES]


class ExpenseSelection:
    """Filtered, date-sorted view over the ledger.

    Nothing is computed until iteration, and every iteration starts over
    from the ledger's current records.
    """

    def __init__(self, expenses, category_filter="", search=""):
        self._expenses = expenses
        self.category_filter = category_filter or ""
        self.search = search or ""

    def __iter__(self):
        matching = (
            e for e in self._expenses if e.matches(self.category_filter, self.search)
        )
        # sorted() is stable, so same-day records keep collection order
        return iter(sorted(matching, key=lambda e: e.date, reverse=True))

    def __len__(self):
        return sum(1 for _ in self)

    def __bool__(self):
        return any(True for _ in self)


class LedgerController:
    def __init__(self, expenses=None, notifier=None):
        if expenses is None:
            self.expenses = seed_expenses()
        else:
            self.expenses = list(expenses)
        self.categories = list(CATEGORIES)
        self.notifier = notifier
        self.confirmation = ConfirmationGate()
        self.current_search = ""
        self.current_filter = ""
        self.editing_id = None
        self.next_id = max((e.id for e in self.expenses), default=0) + 1
        self._listeners = []
        logger.info(
            "Ledger started with %d expenses (next id %d)",
            len(self.expenses),
            self.next_id,
        )

    # ---------- Listeners and notifications ----------

    def add_listener(self, callback):
        self._listeners.append(callback)

    def remove_listener(self, callback):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _changed(self):
        if not self._listeners:
            return
        view = self.snapshot()
        for callback in list(self._listeners):
            callback(view)

    def notify(self, text, kind=KIND_SUCCESS):
        log = logger.warning if kind == KIND_ERROR else logger.info
        log("Notification [%s]: %s", kind, text)
        if self.notifier is not None:
            self.notifier(text, kind)

    # ---------- Mutations ----------

    def find_expense(self, expense_id):
        for expense in self.expenses:
            if expense.id == expense_id:
                return expense
        return None

    def add_expense(self, data):
        """Validate ``data`` and insert a new record at the front."""
        expense = Expense.from_form(self.next_id, data)
        self.next_id += 1
        self.expenses.insert(0, expense)
        logger.info("Added expense: %s", expense)
        self._changed()
        return expense

    def update_expense(self, expense_id, data):
        """Merge the supplied fields into an existing record."""
        for index, expense in enumerate(self.expenses):
            if expense.id == expense_id:
                updated = expense.merged(data)
                self.expenses[index] = updated
                logger.info("Updated expense %s -> %s", expense, updated)
                self._changed()
                return updated
        logger.debug("Update failed, no expense with id %s", expense_id)
        raise RecordNotFoundError(expense_id, ERR_NOT_FOUND)

    def delete_expense(self, expense_id):
        remaining = [e for e in self.expenses if e.id != expense_id]
        if len(remaining) == len(self.expenses):
            logger.debug("Delete ignored, no expense with id %s", expense_id)
            return False
        self.expenses[:] = remaining
        if self.editing_id == expense_id:
            self.editing_id = None
        logger.warning("Deleted expense %s", expense_id)
        self._changed()
        return True

    def clear_all(self):
        count = len(self.expenses)
        self.expenses.clear()
        self.editing_id = None
        logger.warning("All expenses cleared (%d removed)", count)
        self._changed()

    # ---------- Derived views ----------

    def list_expenses(self, category_filter="", search=""):
        return ExpenseSelection(self.expenses, category_filter, search)

    def visible_expenses(self):
        return self.list_expenses(self.current_filter, self.current_search)

    def get_category_totals(self):
        """Return (category, total) pairs, largest total first.

        Categories with equal totals keep the order they were first seen in.
        """
        totals = {}
        for expense in self.expenses:
            totals[expense.category] = (
                totals.get(expense.category, Decimal("0")) + expense.amount
            )
        ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)
        logger.debug("Calculated category totals: %s", ordered)
        return ordered

    def get_grand_total(self):
        return sum((e.amount for e in self.expenses), Decimal("0"))

    def count(self):
        return len(self.expenses)

    def count_label(self):
        count = self.count()
        return "1 expense" if count == 1 else f"{count} expenses"

    def export_csv(self, on_date=None):
        if not self.expenses:
            raise EmptyExportError(ERR_EMPTY_EXPORT)
        return ReportService.build_document(self.expenses, on_date)

    def snapshot(self):
        return LedgerView(
            expenses=list(self.visible_expenses()),
            category_totals=self.get_category_totals(),
            grand_total=self.get_grand_total(),
            count=self.count(),
            count_label=self.count_label(),
            search=self.current_search,
            category_filter=self.current_filter,
            editing_id=self.editing_id,
        )

    # ---------- View state ----------

    def set_search(self, text):
        self.current_search = text or ""
        logger.debug("Search set to %r", self.current_search)
        self._changed()

    def set_filter(self, category):
        self.current_filter = category or ""
        logger.debug("Category filter set to %r", self.current_filter)
        self._changed()

    # ---------- Edit workflow ----------

    @property
    def is_editing(self):
        return self.editing_id is not None

    def start_edit(self, expense_id):
        """Enter edit mode for a record and return it for the form.

        Starting an edit while another is open switches to the new record.
        """
        expense = self.find_expense(expense_id)
        if expense is None:
            logger.debug("Edit ignored, no expense with id %s", expense_id)
            return None
        if self.editing_id is not None and self.editing_id != expense_id:
            logger.debug("Switching edit from %s to %s", self.editing_id, expense_id)
        self.editing_id = expense_id
        self._changed()
        return expense

    def cancel_edit(self):
        if self.editing_id is not None:
            logger.debug("Edit of %s cancelled", self.editing_id)
        self.editing_id = None
        self._changed()

    def submit(self, data):
        """Handle a form submission: add in idle mode, update while editing."""
        try:
            if self.editing_id is None:
                self.add_expense(data)
                message = MSG_ADDED
            else:
                # A full form is required even though update merges fields
                Expense.from_form(self.editing_id, data)
                self.update_expense(self.editing_id, data)
                message = MSG_UPDATED
        except ValidationError as e:
            logger.debug("Validation failed on %s: %s", e.field, e.message)
            self.notify(e.message, KIND_ERROR)
            return False
        except RecordNotFoundError as e:
            self.editing_id = None
            self.notify(str(e), KIND_ERROR)
            self._changed()
            return False

        self.editing_id = None
        self.notify(message, KIND_SUCCESS)
        self._changed()
        return True

    # ---------- Confirmation gate ----------

    def request_delete(self, expense_id):
        return self.confirmation.request(PendingDelete(expense_id))

    def request_clear_all(self):
        return self.confirmation.request(PendingClearAll())

    def resolve_confirmation(self, accepted):
        """Run the pending destructive action if the user accepted it."""
        action = self.confirmation.resolve(accepted)
        if isinstance(action, PendingDelete):
            if self.delete_expense(action.expense_id):
                self.notify(MSG_DELETED, KIND_SUCCESS)
        elif isinstance(action, PendingClearAll):
            self.clear_all()
            self.notify(MSG_CLEARED, KIND_SUCCESS)
        return action

    # ---------- Export ----------

    def request_export(self, save=None, on_date=None):
        """Build the CSV export and hand it to ``save``.

        ``save`` returns a falsy value when the user abandons the export.
        """
        try:
            document = self.export_csv(on_date)
        except EmptyExportError as e:
            self.notify(str(e), KIND_ERROR)
            return None
        if save is not None and not save(document):
            logger.info("Export of %s abandoned", document.filename)
            return document
        self.notify(MSG_EXPORTED, KIND_SUCCESS)
        return document
