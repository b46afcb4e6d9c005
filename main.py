import sys

from PyQt6.QtWidgets import QApplication

from pixelguard.config.settings import get_settings
from pixelguard.ui.main_window import MainWindow
from pixelguard.ui.styles import STYLE_SHEET
from pixelguard.utils.log import configure_logging


if __name__ == "__main__":
    configure_logging()
    app = QApplication(sys.argv)
    app.setStyleSheet(STYLE_SHEET)

    window = MainWindow(get_settings())
    window.show()
    sys.exit(app.exec())
