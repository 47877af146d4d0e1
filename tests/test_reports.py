# test_reports.py
import csv
import io
import os
import tempfile
from datetime import date
from decimal import Decimal
from unittest.mock import patch

import pytest

from expense_ledger.ledger import seed_expenses
from expense_ledger.models import Expense, ExportDocument
from expense_ledger.reports import ReportService


def expense_with_description(description, category="Food"):
    return Expense(
        id=1,
        amount=Decimal("12.50"),
        category=category,
        date=date(2025, 10, 5),
        description=description,
    )


class TestReportService:
    @pytest.mark.unit
    def test_export_filename(self):
        assert ReportService.export_filename(date(2025, 10, 5)) == "expenses_2025-10-05.csv"

    @pytest.mark.unit
    def test_export_filename_defaults_to_today(self):
        expected = f"expenses_{date.today().isoformat()}.csv"
        assert ReportService.export_filename() == expected

    @pytest.mark.unit
    def test_build_csv_header_and_rows(self):
        content = ReportService.build_csv(seed_expenses())
        assert content.split("\n") == [
            "Date,Category,Amount,Description",
            '2025-10-05,Food,250,"Lunch at college cafeteria"',
            '2025-10-01,Travel,1200,"Monthly metro pass"',
            '2025-10-03,Shopping,500,"Study materials and notebooks"',
            '2025-10-04,Entertainment,180,"Movie ticket"',
            '2025-09-28,Bills,2500,"Mobile recharge"',
        ]

    @pytest.mark.unit
    def test_empty_description_is_quoted(self):
        assert ReportService.format_row(expense_with_description("")) == (
            '2025-10-05,Food,12.50,""'
        )

    @pytest.mark.unit
    def test_embedded_quotes_are_doubled(self):
        row = ReportService.format_row(expense_with_description('The "big" one'))
        assert row.endswith('"The ""big"" one"')

    @pytest.mark.unit
    def test_category_with_comma_is_quoted(self):
        row = ReportService.format_row(
            expense_with_description("x", category="Food, Drinks")
        )
        assert row == '2025-10-05,"Food, Drinks",12.50,"x"'

    @pytest.mark.unit
    def test_export_is_lossless(self):
        expenses = seed_expenses() + [
            Expense(
                id=6,
                amount=Decimal("1234.56"),
                category='Odd, "category"',
                date=date(2024, 2, 29),
                description='Comma, quote " and\nnewline',
            )
        ]
        content = ReportService.build_csv(expenses)

        rows = list(csv.DictReader(io.StringIO(content)))
        assert len(rows) == len(expenses)
        for row, expense in zip(rows, expenses):
            assert row["Date"] == expense.date.isoformat()
            assert row["Category"] == expense.category
            assert Decimal(row["Amount"]) == expense.amount
            assert row["Description"] == expense.description

    @pytest.mark.unit
    def test_build_document(self):
        document = ReportService.build_document(seed_expenses(), date(2025, 1, 1))
        assert isinstance(document, ExportDocument)
        assert document.filename == "expenses_2025-01-01.csv"


class TestExportToCsv:
    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.path = os.path.join(self.temp_dir, "out.csv")

    def teardown_method(self):
        if os.path.exists(self.path):
            os.unlink(self.path)
        os.rmdir(self.temp_dir)

    @pytest.mark.unit
    def test_writes_document(self):
        document = ReportService.build_document(seed_expenses())
        result = ReportService.export_to_csv(document, self.path)

        assert result == self.path
        with open(self.path, newline="", encoding="utf-8") as f:
            assert f.read() == document.content

    @pytest.mark.unit
    def test_accepts_expense_list(self):
        ReportService.export_to_csv(seed_expenses(), self.path)
        with open(self.path, newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        assert [r["Category"] for r in rows][:2] == ["Food", "Travel"]

    @pytest.mark.unit
    def test_write_failure_returns_none(self):
        with patch("builtins.open", side_effect=OSError("disk full")):
            with patch("expense_ledger.reports.logger.exception") as mock_error:
                assert ReportService.export_to_csv(seed_expenses(), self.path) is None
                mock_error.assert_called_once()
