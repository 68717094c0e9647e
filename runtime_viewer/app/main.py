"""
Main entry point for the Runtime Log Viewer application.
"""
import argparse
import locale
import logging
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt

from ..core import ViewOptions
from .main_window import MainWindow


logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Browse and triage game server JSON logs")
    parser.add_argument(
        "logfile",
        nargs="?",
        type=Path,
        help="Log file to open at start-up"
    )
    parser.add_argument(
        "--organized",
        action="store_true",
        help="Start with entries grouped into buckets"
    )
    parser.add_argument(
        "--ignore-non-runtimes",
        action="store_true",
        help="Only show runtime errors"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Diagnostic logging level"
    )
    return parser.parse_args(argv)


def main():
    """Run the Runtime Log Viewer application."""
    args = parse_args(sys.argv[1:])

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    # Title sorting follows the user's collation order
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logger.warning(f"Falling back to the C collation order: {e}")

    # Enable high DPI scaling
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv[:1])

    # Set application metadata
    app.setApplicationName("Runtime Log Viewer")
    app.setOrganizationName("RuntimeViewer")
    app.setApplicationVersion("1.0.0")

    # Apply dark style
    app.setStyle("Fusion")

    # Create dark palette
    from PySide6.QtGui import QPalette, QColor

    palette = QPalette()
    palette.setColor(QPalette.ColorRole.Window, QColor(53, 53, 53))
    palette.setColor(QPalette.ColorRole.WindowText, Qt.GlobalColor.white)
    palette.setColor(QPalette.ColorRole.Base, QColor(25, 25, 25))
    palette.setColor(QPalette.ColorRole.AlternateBase, QColor(53, 53, 53))
    palette.setColor(QPalette.ColorRole.ToolTipBase, Qt.GlobalColor.white)
    palette.setColor(QPalette.ColorRole.ToolTipText, Qt.GlobalColor.white)
    palette.setColor(QPalette.ColorRole.Text, Qt.GlobalColor.white)
    palette.setColor(QPalette.ColorRole.Button, QColor(53, 53, 53))
    palette.setColor(QPalette.ColorRole.ButtonText, Qt.GlobalColor.white)
    palette.setColor(QPalette.ColorRole.BrightText, Qt.GlobalColor.red)
    palette.setColor(QPalette.ColorRole.Link, QColor(42, 130, 218))
    palette.setColor(QPalette.ColorRole.Highlight, QColor(42, 130, 218))
    palette.setColor(QPalette.ColorRole.HighlightedText, Qt.GlobalColor.black)

    app.setPalette(palette)

    # Create and show main window
    options = ViewOptions(
        organized=args.organized,
        ignore_non_runtimes=args.ignore_non_runtimes
    )
    window = MainWindow(options)
    window.show()

    if args.logfile:
        window.load_file(args.logfile)

    # Run event loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
