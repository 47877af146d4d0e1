import logging
import sys

from PyQt5.QtWidgets import QAction, QApplication, QMainWindow

from expense_ledger.constants import APP_HEIGHT, APP_NAME, APP_WIDTH, LOG_FILE
from expense_ledger.ledger import LedgerController
from expense_ledger.notifications import MessageChannel
from expense_ledger.widgets import LedgerWidget

logger = logging.getLogger(__name__)

APP_STYLESHEET = """
    QMainWindow {
        background-color: #1e1e1e;
        color: #e0e0e0;
    }
    QWidget {
        background-color: #1e1e1e;
        color: #e0e0e0;
    }
    QMenuBar {
        background-color: #2d2d2d;
        color: #e0e0e0;
        border-bottom: 1px solid #404040;
        font-family: "Segoe UI";
    }
    QMenuBar::item:selected, QMenu::item:selected {
        background-color: #007acc;
    }
    QMenu {
        background-color: #2d2d2d;
        color: #e0e0e0;
        border: 1px solid #404040;
    }
    QMessageBox {
        background-color: #2d2d2d;
        color: #e0e0e0;
    }
    QMessageBox QLabel {
        color: #e0e0e0;
        font-family: "Segoe UI";
        font-size: 13px;
    }
    QMessageBox QPushButton {
        background-color: #007acc;
        color: #ffffff;
        border: none;
        padding: 8px 16px;
        border-radius: 4px;
        min-width: 80px;
    }
    QLabel {
        color: #e0e0e0;
    }
"""


def configure_logging(level=logging.DEBUG, log_file=LOG_FILE):
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.insert(0, logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
    )

    # Quiet down noisy libraries
    logging.getLogger("matplotlib").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)
    logger.debug("Logging configured")


class MainWindow(QMainWindow):
    def __init__(self, controller=None, channel=None):
        super().__init__()
        self.controller = controller or LedgerController()
        self.channel = channel or MessageChannel(parent=self)
        self.setWindowTitle(APP_NAME)
        self.setGeometry(100, 100, APP_WIDTH, APP_HEIGHT)
        self.setMinimumSize(900, 600)

        self.ledger_widget = LedgerWidget(self.controller, self.channel, self)
        self.setCentralWidget(self.ledger_widget)

        self.create_menus()
        logger.debug("Main window ready")

    def create_menus(self):
        menubar = self.menuBar()

        file_menu = menubar.addMenu("File")

        self.export_action = QAction("📤 Export CSV", self)
        self.export_action.setShortcut("Ctrl+E")
        self.export_action.triggered.connect(self.ledger_widget.export_csv)
        file_menu.addAction(self.export_action)

        self.clear_all_action = QAction("🗑️ Clear All", self)
        self.clear_all_action.triggered.connect(self.ledger_widget.confirm_clear_all)
        file_menu.addAction(self.clear_all_action)

        file_menu.addSeparator()

        self.exit_action = QAction("Exit", self)
        self.exit_action.setShortcut("Ctrl+Q")
        self.exit_action.triggered.connect(self.close)
        file_menu.addAction(self.exit_action)


def main(argv=None):
    configure_logging()
    app = QApplication(argv if argv is not None else sys.argv)
    app.setStyleSheet(APP_STYLESHEET)

    window = MainWindow()
    window.show()
    logger.info("Application started")
    return app.exec_()


if __name__ == "__main__":
    sys.exit(main())
