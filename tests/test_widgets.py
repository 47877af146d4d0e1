# test_widgets.py
import os
import tempfile
from datetime import date
from unittest.mock import patch

import pytest
from PyQt5.QtCore import QDate
from PyQt5.QtWidgets import QMessageBox

from expense_ledger.ledger import LedgerController
from expense_ledger.notifications import MessageChannel
from expense_ledger.widgets import ID_PROPERTY, LedgerWidget


@pytest.fixture
def controller():
    return LedgerController()


@pytest.fixture
def widget(qtbot, controller):
    w = LedgerWidget(controller, MessageChannel(duration_ms=5000))
    qtbot.addWidget(w)
    return w


def row_buttons(widget, row):
    cell = widget.table.cellWidget(row, 5)
    edit_btn, delete_btn = cell.layout().itemAt(0).widget(), cell.layout().itemAt(1).widget()
    return edit_btn, delete_btn


class TestLedgerWidgetRendering:
    @pytest.mark.gui
    def test_initial_render(self, widget):
        assert widget.table.rowCount() == 5
        assert widget.table.item(0, 1).text() == "Food"
        assert widget.table.item(0, 4).text() == "₹250.00"
        assert widget.total_label.text() == "Total: ₹4630.00"
        assert widget.count_label.text() == "5 expenses"
        assert len(widget.stats.cards) == 5
        assert widget.submit_btn.text() == "Add Expense"
        assert widget.cancel_btn.isHidden()

    @pytest.mark.gui
    def test_controller_gets_channel_as_notifier(self, widget, controller):
        assert controller.notifier is widget.channel

    @pytest.mark.gui
    def test_buttons_carry_record_id(self, widget):
        ids = []
        for row in range(widget.table.rowCount()):
            edit_btn, delete_btn = row_buttons(widget, row)
            assert edit_btn.property(ID_PROPERTY) == delete_btn.property(ID_PROPERTY)
            ids.append(edit_btn.property(ID_PROPERTY))
        assert ids == [1, 4, 3, 2, 5]

    @pytest.mark.gui
    def test_search_filters_table(self, widget):
        widget.search_input.setText("metro")
        assert widget.table.rowCount() == 1
        assert widget.table.item(0, 1).text() == "Travel"
        # totals still cover everything
        assert widget.total_label.text() == "Total: ₹4630.00"

    @pytest.mark.gui
    def test_category_filter(self, widget, controller):
        index = widget.category_filter.findData("Bills")
        widget.category_filter.setCurrentIndex(index)
        assert controller.current_filter == "Bills"
        assert widget.table.rowCount() == 1

    @pytest.mark.gui
    def test_empty_state(self, widget):
        widget.search_input.setText("nothing matches this")
        assert widget.table.rowCount() == 0
        assert not widget.empty_label.isHidden()
        assert widget.table.isHidden()


class TestLedgerWidgetForm:
    @pytest.mark.gui
    def test_submit_adds_expense_and_resets(self, widget, controller):
        widget.amount_input.setText("99.90")
        widget.category_input.setEditText("Education")
        widget.date_input.setDate(QDate(2025, 10, 10))
        widget.desc_input.setText("Course fee")

        widget.submit_btn.click()

        assert controller.count() == 6
        assert controller.expenses[0].description == "Course fee"
        assert controller.expenses[0].date == date(2025, 10, 10)
        assert widget.amount_input.text() == ""
        assert widget.message_label.text() == "Expense added successfully!"
        assert widget.table.rowCount() == 6

    @pytest.mark.gui
    def test_invalid_submit_shows_error(self, widget, controller):
        widget.amount_input.setText("")
        widget.category_input.setEditText("Food")
        widget.submit_btn.click()

        assert controller.count() == 5
        assert widget.message_label.text() == "Please enter a valid amount"
        assert widget.message_label.property("kind") == "error"
        assert not widget.message_label.isHidden()

    @pytest.mark.gui
    def test_amount_formatted_on_editing_finished(self, widget):
        widget.amount_input.setText("12.5")
        widget.amount_input.editingFinished.emit()
        assert widget.amount_input.text() == "12.50"

    @pytest.mark.gui
    def test_out_of_range_amount_reports_error(self, widget, controller):
        widget.amount_input.setText("1e999999999999999999")
        widget.amount_input.editingFinished.emit()
        assert widget.amount_input.text() == "1e999999999999999999"

        widget.category_input.setEditText("Food")
        widget.submit_btn.click()

        assert controller.count() == 5
        assert widget.message_label.text() == "Please enter a valid amount"
        assert widget.total_label.text() == "Total: ₹4630.00"

    @pytest.mark.gui
    def test_edit_button_enters_edit_mode(self, widget, controller):
        edit_btn, _ = row_buttons(widget, 3)  # Travel, id 2
        edit_btn.click()

        assert controller.editing_id == 2
        assert widget.amount_input.text() == "1200.00"
        assert widget.category_input.currentText() == "Travel"
        assert widget.desc_input.text() == "Monthly metro pass"
        assert widget.date_input.date() == QDate(2025, 10, 1)
        assert widget.submit_btn.text() == "Update Expense"
        assert not widget.cancel_btn.isHidden()

    @pytest.mark.gui
    def test_update_through_form(self, widget, controller):
        widget.edit_expense(2)
        widget.amount_input.setText("1500")
        widget.submit_btn.click()

        assert controller.find_expense(2).amount == 1500
        assert controller.count() == 5
        assert controller.editing_id is None
        assert widget.submit_btn.text() == "Add Expense"
        assert widget.amount_input.text() == ""

    @pytest.mark.gui
    def test_cancel_edit(self, widget, controller):
        widget.edit_expense(4)
        widget.amount_input.setText("1")
        widget.cancel_btn.click()

        assert controller.editing_id is None
        assert controller.find_expense(4).amount == 180
        assert widget.amount_input.text() == ""
        assert widget.cancel_btn.isHidden()


class TestLedgerWidgetConfirmations:
    @pytest.mark.gui
    def test_delete_confirmed(self, widget, controller):
        _, delete_btn = row_buttons(widget, 0)
        with patch(
            "expense_ledger.widgets.QMessageBox.question", return_value=QMessageBox.Yes
        ) as mock_question:
            delete_btn.click()

        assert "delete this expense" in mock_question.call_args[0][2]
        assert controller.find_expense(1) is None
        assert widget.table.rowCount() == 4
        assert widget.message_label.text() == "Expense deleted successfully!"

    @pytest.mark.gui
    def test_delete_cancelled(self, widget, controller):
        _, delete_btn = row_buttons(widget, 0)
        with patch(
            "expense_ledger.widgets.QMessageBox.question", return_value=QMessageBox.No
        ):
            delete_btn.click()

        assert controller.count() == 5
        assert controller.confirmation.pending is None

    @pytest.mark.gui
    def test_clear_all_confirmed(self, widget, controller):
        widget.edit_expense(1)
        with patch(
            "expense_ledger.widgets.QMessageBox.question", return_value=QMessageBox.Yes
        ):
            widget.clear_all_btn.click()

        assert controller.count() == 0
        assert widget.count_label.text() == "0 expenses"
        assert widget.total_label.text() == "Total: ₹0.00"
        assert widget.stats.cards == []
        assert widget.amount_input.text() == ""
        assert widget.submit_btn.text() == "Add Expense"


class TestLedgerWidgetExport:
    @pytest.mark.gui
    def test_export_writes_file(self, widget):
        temp_dir = tempfile.mkdtemp()
        path = os.path.join(temp_dir, "export.csv")
        try:
            with patch(
                "expense_ledger.widgets.QFileDialog.getSaveFileName",
                return_value=(path, "CSV Files (*.csv)"),
            ) as mock_dialog:
                widget.export_btn.click()

            assert mock_dialog.call_args[0][2].startswith("expenses_")
            with open(path, encoding="utf-8") as f:
                assert f.readline().strip() == "Date,Category,Amount,Description"
            assert widget.message_label.text() == "Expenses exported successfully!"
        finally:
            if os.path.exists(path):
                os.unlink(path)
            os.rmdir(temp_dir)

    @pytest.mark.gui
    def test_export_dialog_cancelled(self, widget):
        with patch(
            "expense_ledger.widgets.QFileDialog.getSaveFileName", return_value=("", "")
        ):
            widget.export_btn.click()
        assert widget.message_label.isHidden()

    @pytest.mark.gui
    def test_export_empty_ledger(self, qtbot):
        w = LedgerWidget(LedgerController(expenses=[]))
        qtbot.addWidget(w)
        with patch("expense_ledger.widgets.QFileDialog.getSaveFileName") as mock_dialog:
            w.export_btn.click()

        mock_dialog.assert_not_called()
        assert w.message_label.text() == "No expenses to export"

    @pytest.mark.gui
    def test_export_write_failure_warns(self, widget):
        with patch(
            "expense_ledger.widgets.QFileDialog.getSaveFileName",
            return_value=("/tmp/x.csv", ""),
        ), patch(
            "expense_ledger.widgets.ReportService.export_to_csv", return_value=None
        ), patch("expense_ledger.widgets.QMessageBox.warning") as mock_warning:
            widget.export_btn.click()

        mock_warning.assert_called_once()
        assert widget.message_label.isHidden()


class TestLedgerWidgetMessages:
    @pytest.mark.gui
    def test_message_hides_with_channel(self, widget):
        widget.channel.show("Hello")
        assert widget.message_label.text() == "Hello"
        widget.channel.hide()
        assert widget.message_label.isHidden()
