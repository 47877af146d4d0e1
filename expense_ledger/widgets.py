import logging

import matplotlib.pyplot as plt
from matplotlib.backends.backend_qt5agg import \
    FigureCanvasQTAgg as FigureCanvas
from PyQt5.QtCore import QDate, Qt
from PyQt5.QtGui import QKeySequence
from PyQt5.QtWidgets import (QAbstractItemView, QComboBox, QDateEdit,
                             QFileDialog, QFrame, QGridLayout, QHBoxLayout,
                             QHeaderView, QLabel, QLineEdit, QMessageBox,
                             QPushButton, QShortcut, QTableWidget,
                             QTableWidgetItem, QVBoxLayout, QWidget)

from expense_ledger.constants import CATEGORIES, KIND_ERROR
from expense_ledger.errors import ValidationError
from expense_ledger.models import PendingClearAll, parse_amount
from expense_ledger.notifications import MessageChannel
from expense_ledger.reports import ReportService
from expense_ledger.table_helpers import (format_amount, format_expense_row,
                                          format_stat_card, prepare_chart_data)

logger = logging.getLogger(__name__)

ID_PROPERTY = "expense_id"

BUTTON_STYLE = """
    QPushButton {
        background-color: #007acc;
        color: white;
        border: none;
        padding: 8px 16px;
        border-radius: 4px;
        font-weight: 500;
        font-family: "Segoe UI";
        font-size: 12px;
    }
    QPushButton:hover {
        background-color: #005a9e;
    }
    QPushButton:pressed {
        background-color: #004578;
    }
"""

DANGER_BUTTON_STYLE = """
    QPushButton {
        background-color: #c0392b;
        color: white;
        border: none;
        padding: 8px 16px;
        border-radius: 4px;
        font-weight: 500;
        font-family: "Segoe UI";
        font-size: 12px;
    }
    QPushButton:hover {
        background-color: #e94560;
    }
"""

INPUT_STYLE = """
    QLineEdit, QComboBox, QDateEdit {
        background-color: #2d2d2d;
        color: #e0e0e0;
        border: 1px solid #404040;
        border-radius: 4px;
        padding: 6px;
        font-family: "Segoe UI";
        font-size: 12px;
    }
    QLineEdit:focus, QComboBox:focus, QDateEdit:focus {
        border: 1px solid #007acc;
    }
"""

MESSAGE_STYLES = {
    "success": "background-color: #1e4620; color: #b8f5c0; border: 1px solid #2e7d32;",
    "error": "background-color: #4a1c1c; color: #ffb4b4; border: 1px solid #c62828;",
}


class StatsWidget(QWidget):
    """Per-category totals as cards plus a bar chart."""

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.cards_layout = QGridLayout()
        layout.addLayout(self.cards_layout)

        self.chart_fig, self.chart_ax = plt.subplots(figsize=(5, 2.5))
        self.chart_fig.patch.set_facecolor("#252526")
        self.chart_canvas = FigureCanvas(self.chart_fig)
        self.chart_canvas.setMinimumHeight(180)
        plt.close(self.chart_fig)
        layout.addWidget(self.chart_canvas)

        self.cards = []

    def update_stats(self, category_totals):
        while self.cards_layout.count():
            item = self.cards_layout.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()
        self.cards = []

        for index, (category, total) in enumerate(category_totals):
            card = format_stat_card(category, total)
            label = QLabel(f"{card['icon']}\n{card['label']}\n{card['value']}")
            label.setAlignment(Qt.AlignCenter)
            label.setStyleSheet(
                """
                QLabel {
                    background-color: #2d2d2d;
                    color: #e0e0e0;
                    border: 1px solid #404040;
                    border-radius: 6px;
                    padding: 8px;
                    font-family: "Segoe UI";
                }
            """
            )
            self.cards_layout.addWidget(label, index // 4, index % 4)
            self.cards.append(label)

        self.update_chart(category_totals)

    def update_chart(self, category_totals):
        ax = self.chart_ax
        ax.clear()
        ax.set_facecolor("#252526")
        categories, amounts = prepare_chart_data(category_totals)
        if categories:
            ax.bar(categories, amounts, color="#007acc")
            ax.tick_params(colors="#e0e0e0", labelsize=8)
        else:
            ax.text(
                0.5, 0.5, "No data", ha="center", va="center",
                color="#e0e0e0", transform=ax.transAxes,
            )
            ax.set_xticks([])
            ax.set_yticks([])
        self.chart_canvas.draw_idle()


class LedgerWidget(QWidget):
    """Renders ledger snapshots and forwards user events to the controller."""

    def __init__(self, controller, channel=None, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.channel = channel or MessageChannel(parent=self)
        if self.controller.notifier is None:
            self.controller.notifier = self.channel
        self._editing_id = None

        self.initUI()

        self.channel.shown.connect(self.show_message)
        self.channel.hidden.connect(self.hide_message)
        self.controller.add_listener(self.render)
        self.render(self.controller.snapshot())

    def initUI(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(10, 10, 10, 10)
        layout.setSpacing(10)

        title_label = QLabel("💼 Personal Expense Tracker")
        title_label.setAlignment(Qt.AlignCenter)
        title_label.setStyleSheet(
            """
            QLabel {
                color: #00ffff;
                font-family: "Segoe UI";
                font-size: 18px;
                font-weight: bold;
                padding: 10px;
                background: qlineargradient(x1:0, y1:0, x2:1, y2:0,
                    stop:0 #0f3460, stop:0.5 #533483, stop:1 #e94560);
                border-radius: 8px;
                margin: 5px;
            }
        """
        )
        layout.addWidget(title_label)

        self.message_label = QLabel()
        self.message_label.setAlignment(Qt.AlignCenter)
        self.message_label.hide()
        layout.addWidget(self.message_label)

        layout.addWidget(self._build_form())

        summary_layout = QHBoxLayout()
        self.total_label = QLabel()
        self.total_label.setStyleSheet(
            "color: #ffff00; font-size: 16px; font-weight: bold; padding: 6px;"
        )
        self.count_label = QLabel()
        self.count_label.setStyleSheet("color: #e0e0e0; padding: 6px;")
        summary_layout.addWidget(self.total_label)
        summary_layout.addStretch()
        summary_layout.addWidget(self.count_label)
        layout.addLayout(summary_layout)

        self.stats = StatsWidget(self)
        layout.addWidget(self.stats)

        layout.addLayout(self._build_toolbar())

        self.table = QTableWidget(0, 6)
        self.table.setHorizontalHeaderLabels(
            ["", "Category", "Description", "Date", "Amount", "Actions"]
        )
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.verticalHeader().setVisible(False)
        self.table.horizontalHeader().setSectionResizeMode(2, QHeaderView.Stretch)
        self.table.setStyleSheet(
            """
            QTableWidget {
                background-color: #252526;
                color: #e0e0e0;
                gridline-color: #404040;
                border: 1px solid #404040;
                border-radius: 4px;
                font-family: "Segoe UI";
                font-size: 12px;
            }
            QTableWidget::item:selected {
                background-color: #007acc;
                color: #ffffff;
            }
            QHeaderView::section {
                background-color: #333333;
                color: #ffffff;
                padding: 8px;
                border: none;
                border-bottom: 2px solid #007acc;
                font-weight: 600;
            }
        """
        )
        layout.addWidget(self.table)

        self.empty_label = QLabel("📭 No expenses found")
        self.empty_label.setAlignment(Qt.AlignCenter)
        self.empty_label.setStyleSheet("color: #888888; font-size: 14px; padding: 20px;")
        layout.addWidget(self.empty_label)

    def _build_form(self):
        form = QFrame()
        form.setStyleSheet(INPUT_STYLE)
        grid = QGridLayout(form)

        self.amount_input = QLineEdit()
        self.amount_input.setPlaceholderText("Enter amount")
        self.amount_input.editingFinished.connect(self.format_amount_input)

        self.category_input = QComboBox()
        self.category_input.setEditable(True)
        self.category_input.addItem("")
        self.category_input.addItems(CATEGORIES)
        self.category_input.lineEdit().setPlaceholderText("Select category")

        self.date_input = QDateEdit()
        self.date_input.setCalendarPopup(True)
        self.date_input.setDisplayFormat("yyyy-MM-dd")
        self.date_input.setDate(QDate.currentDate())

        self.desc_input = QLineEdit()
        self.desc_input.setPlaceholderText("Enter description (optional)")

        grid.addWidget(QLabel("Amount:"), 0, 0)
        grid.addWidget(self.amount_input, 0, 1)
        grid.addWidget(QLabel("Category:"), 0, 2)
        grid.addWidget(self.category_input, 0, 3)
        grid.addWidget(QLabel("Date:"), 1, 0)
        grid.addWidget(self.date_input, 1, 1)
        grid.addWidget(QLabel("Description:"), 1, 2)
        grid.addWidget(self.desc_input, 1, 3)

        btn_layout = QHBoxLayout()
        self.submit_btn = QPushButton("Add Expense")
        self.submit_btn.setStyleSheet(BUTTON_STYLE)
        self.submit_btn.clicked.connect(self.submit_form)
        self.cancel_btn = QPushButton("Cancel")
        self.cancel_btn.setStyleSheet(BUTTON_STYLE)
        self.cancel_btn.clicked.connect(self.cancel_edit)
        self.cancel_btn.hide()
        btn_layout.addStretch()
        btn_layout.addWidget(self.cancel_btn)
        btn_layout.addWidget(self.submit_btn)
        grid.addLayout(btn_layout, 2, 0, 1, 4)

        for sequence in ("Ctrl+Return", "Ctrl+Enter"):
            shortcut = QShortcut(QKeySequence(sequence), form)
            shortcut.activated.connect(self.submit_form)

        return form

    def _build_toolbar(self):
        toolbar = QHBoxLayout()

        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("🔍 Search expenses...")
        self.search_input.setStyleSheet(INPUT_STYLE)
        self.search_input.textChanged.connect(self.controller.set_search)

        self.category_filter = QComboBox()
        self.category_filter.setStyleSheet(INPUT_STYLE)
        self.category_filter.addItem("All Categories", "")
        for category in CATEGORIES:
            self.category_filter.addItem(category, category)
        self.category_filter.currentIndexChanged.connect(self.on_filter_changed)

        self.export_btn = QPushButton("📤 Export CSV")
        self.export_btn.setStyleSheet(BUTTON_STYLE)
        self.export_btn.clicked.connect(self.export_csv)

        self.clear_all_btn = QPushButton("🗑️ Clear All")
        self.clear_all_btn.setStyleSheet(DANGER_BUTTON_STYLE)
        self.clear_all_btn.clicked.connect(self.confirm_clear_all)

        toolbar.addWidget(self.search_input, 2)
        toolbar.addWidget(self.category_filter, 1)
        toolbar.addWidget(self.export_btn)
        toolbar.addWidget(self.clear_all_btn)
        return toolbar

    # ---------- Form ----------

    def get_form_data(self):
        return {
            "amount": self.amount_input.text(),
            "category": self.category_input.currentText(),
            "date": self.date_input.date().toString("yyyy-MM-dd"),
            "description": self.desc_input.text(),
        }

    def format_amount_input(self):
        text = self.amount_input.text().strip()
        if not text:
            return
        try:
            self.amount_input.setText(f"{parse_amount(text):.2f}")
        except ValidationError:
            # left as typed; submit reports the error
            pass

    def reset_form(self):
        self.amount_input.clear()
        self.category_input.setCurrentIndex(0)
        self.category_input.setEditText("")
        self.date_input.setDate(QDate.currentDate())
        self.desc_input.clear()

    def fill_form(self, expense):
        self.amount_input.setText(f"{expense.amount:.2f}")
        self.category_input.setEditText(expense.category)
        index = self.category_input.findText(expense.category)
        if index >= 0:
            self.category_input.setCurrentIndex(index)
        self.date_input.setDate(
            QDate(expense.date.year, expense.date.month, expense.date.day)
        )
        self.desc_input.setText(expense.description)

    def submit_form(self):
        if self.controller.submit(self.get_form_data()):
            self.reset_form()

    def cancel_edit(self):
        self.controller.cancel_edit()
        self.reset_form()

    # ---------- Row actions ----------

    def on_edit_clicked(self):
        self.edit_expense(self.sender().property(ID_PROPERTY))

    def on_delete_clicked(self):
        self.confirm_delete(self.sender().property(ID_PROPERTY))

    def edit_expense(self, expense_id):
        expense = self.controller.start_edit(expense_id)
        if expense is not None:
            self.fill_form(expense)
            self.amount_input.setFocus()

    def confirm_delete(self, expense_id):
        self.ask_confirmation(self.controller.request_delete(expense_id))

    def confirm_clear_all(self):
        self.ask_confirmation(self.controller.request_clear_all())

    def ask_confirmation(self, action):
        reply = QMessageBox.question(
            self,
            "Confirm Action",
            action.prompt,
            QMessageBox.Yes | QMessageBox.No,
            QMessageBox.No,
        )
        accepted = reply == QMessageBox.Yes
        self.controller.resolve_confirmation(accepted)
        if accepted and isinstance(action, PendingClearAll):
            self.reset_form()

    def on_filter_changed(self, index):
        self.controller.set_filter(self.category_filter.itemData(index))

    # ---------- Export ----------

    def export_csv(self):
        return self.controller.request_export(save=self.save_export)

    def save_export(self, document):
        path, _ = QFileDialog.getSaveFileName(
            self, "Export CSV", document.filename, "CSV Files (*.csv)"
        )
        if not path:
            return None
        if not path.lower().endswith(".csv"):
            path += ".csv"
        saved = ReportService.export_to_csv(document, path)
        if saved is None:
            QMessageBox.warning(self, "Export Error", f"Could not write {path}")
        return saved

    # ---------- Rendering ----------

    def render(self, view):
        self.render_table(view.expenses, view.editing_id)
        self.total_label.setText(f"Total: {format_amount(view.grand_total)}")
        self.count_label.setText(view.count_label)
        self.stats.update_stats(view.category_totals)

        if self._editing_id is not None and not view.is_editing:
            self.reset_form()
        self._editing_id = view.editing_id
        self.submit_btn.setText("Update Expense" if view.is_editing else "Add Expense")
        self.cancel_btn.setVisible(view.is_editing)

    def render_table(self, expenses, editing_id=None):
        self.table.setRowCount(0)
        for expense in expenses:
            row = self.table.rowCount()
            self.table.insertRow(row)
            formatted = format_expense_row(expense)

            for col, key in enumerate(("icon", "category", "description", "date")):
                self.table.setItem(row, col, QTableWidgetItem(formatted[key]))
            amount_item = QTableWidgetItem(formatted["amount"])
            amount_item.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
            self.table.setItem(row, 4, amount_item)

            self.table.setCellWidget(row, 5, self._action_buttons(expense.id))
            if expense.id == editing_id:
                self.table.selectRow(row)

        empty = self.table.rowCount() == 0
        self.table.setVisible(not empty)
        self.empty_label.setVisible(empty)

    def _action_buttons(self, expense_id):
        widget = QWidget()
        layout = QHBoxLayout(widget)
        layout.setContentsMargins(4, 2, 4, 2)
        layout.setSpacing(4)

        edit_btn = QPushButton("✏️")
        edit_btn.setToolTip("Edit expense")
        edit_btn.setProperty(ID_PROPERTY, expense_id)
        edit_btn.clicked.connect(self.on_edit_clicked)

        delete_btn = QPushButton("🗑️")
        delete_btn.setToolTip("Delete expense")
        delete_btn.setProperty(ID_PROPERTY, expense_id)
        delete_btn.clicked.connect(self.on_delete_clicked)

        layout.addWidget(edit_btn)
        layout.addWidget(delete_btn)
        return widget

    def show_message(self, text, kind):
        style = MESSAGE_STYLES.get(kind, MESSAGE_STYLES["success"])
        self.message_label.setStyleSheet(
            f"QLabel {{ {style} border-radius: 6px; padding: 8px; font-weight: bold; }}"
        )
        self.message_label.setText(text)
        self.message_label.setProperty("kind", kind)
        self.message_label.show()
        if kind == KIND_ERROR:
            logger.debug("Error message shown: %s", text)

    def hide_message(self):
        self.message_label.hide()
        self.message_label.clear()
