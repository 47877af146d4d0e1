import csv
import io
import logging
from datetime import date

from expense_ledger.constants import CSV_HEADERS, DATE_FORMAT, EXPORT_FILENAME
from expense_ledger.models import ExportDocument

logger = logging.getLogger(__name__)


def _quote(text):
    """Wrap a field in double quotes, doubling any quote inside it."""
    return '"%s"' % (text or "").replace('"', '""')


class ReportService:
    """Builds and writes the CSV export of the ledger."""

    @staticmethod
    def export_filename(on_date=None):
        on_date = on_date or date.today()
        return EXPORT_FILENAME.format(date=on_date.strftime(DATE_FORMAT))

    @staticmethod
    def format_row(expense):
        """Return one CSV line for an expense.

        Date, category and amount use minimal CSV quoting. The description is
        always quoted so separators inside it survive.
        """
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="")
        writer.writerow(
            [
                expense.date.strftime(DATE_FORMAT),
                expense.category,
                format(expense.amount, "f"),
            ]
        )
        return "%s,%s" % (buf.getvalue(), _quote(expense.description))

    @staticmethod
    def build_csv(expenses):
        lines = [",".join(CSV_HEADERS)]
        lines.extend(ReportService.format_row(e) for e in expenses)
        logger.debug("Built CSV with %d rows", len(lines) - 1)
        return "\n".join(lines)

    @staticmethod
    def build_document(expenses, on_date=None):
        return ExportDocument(
            filename=ReportService.export_filename(on_date),
            content=ReportService.build_csv(expenses),
        )

    @staticmethod
    def export_to_csv(data, filename=None):
        """Write an ExportDocument (or a list of expenses) to ``filename``.

        Returns the filename on success and None when writing failed.
        """
        if isinstance(data, ExportDocument):
            document = data
        else:
            document = ReportService.build_document(data)
        filename = filename or document.filename
        logger.info("Starting CSV export -> %s", filename)

        try:
            with open(filename, mode="w", newline="", encoding="utf-8") as f:
                f.write(document.content)
            logger.info("CSV export successful: %s", filename)
            return filename
        except OSError as e:
            logger.exception("CSV export failed: %s", e)
            return None
