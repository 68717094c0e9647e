"""
Main Window for the Runtime Log Viewer application.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PySide6.QtCore import Qt, Slot
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
    QFileDialog,
    QMainWindow,
    QMessageBox,
    QStackedWidget,
    QToolBar,
)

from ..core import (
    EntryDetailView,
    FilterManager,
    GroupBucket,
    GroupDetailView,
    LogRecord,
    LogSession,
    ViewOptions,
)
from .widgets import EntryPage, GroupPage, HomePage


logger = logging.getLogger(__name__)

EXAMPLE_LOG_NAME = "example_log.json"


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self, options: Optional[ViewOptions] = None):
        super().__init__()

        self.setWindowTitle("Runtime Log Viewer")
        self.setMinimumSize(900, 600)
        self.resize(1200, 800)

        # Core data
        self.filter_manager = FilterManager(options, self)
        self.session = LogSession(filter_manager=self.filter_manager)

        self._setup_ui()
        self._setup_menus()
        self._setup_toolbar()
        self._setup_connections()

        self.refresh()
        self.statusBar().showMessage("Ready")

    def _setup_ui(self):
        """Set up the stacked pages."""
        self.stack = QStackedWidget()
        self.setCentralWidget(self.stack)

        self.home_page = HomePage(self.filter_manager)
        self.group_page = GroupPage()
        self.entry_page = EntryPage(self.filter_manager)

        self.stack.addWidget(self.home_page)
        self.stack.addWidget(self.group_page)
        self.stack.addWidget(self.entry_page)

    def _setup_menus(self):
        """Set up the menu bar."""
        menubar = self.menuBar()

        # File menu
        file_menu = menubar.addMenu("&File")

        open_action = QAction("Open Log...", self)
        open_action.setShortcut(QKeySequence.StandardKey.Open)
        open_action.triggered.connect(self.on_open_log)
        file_menu.addAction(open_action)

        example_action = QAction("Load Example Log", self)
        example_action.triggered.connect(self.on_load_example)
        file_menu.addAction(example_action)

        file_menu.addSeparator()

        exit_action = QAction("Exit", self)
        exit_action.setShortcut(QKeySequence.StandardKey.Quit)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        # View menu
        view_menu = menubar.addMenu("&View")

        back_action = QAction("Back", self)
        back_action.setShortcuts(
            QKeySequence.keyBindings(QKeySequence.StandardKey.Back) + [QKeySequence("Backspace")]
        )
        back_action.triggered.connect(self.on_back)
        view_menu.addAction(back_action)

        forward_action = QAction("Forward", self)
        forward_action.setShortcut(QKeySequence.StandardKey.Forward)
        forward_action.triggered.connect(self.on_forward)
        view_menu.addAction(forward_action)

        previous_action = QAction("Previous Entry", self)
        previous_action.setShortcut(QKeySequence("Left"))
        previous_action.triggered.connect(self.on_previous_entry)
        view_menu.addAction(previous_action)

        next_action = QAction("Next Entry", self)
        next_action.setShortcut(QKeySequence("Right"))
        next_action.triggered.connect(self.on_next_entry)
        view_menu.addAction(next_action)

        view_menu.addSeparator()

        self.censor_action = QAction("Censor Copies", self)
        self.censor_action.setCheckable(True)
        self.censor_action.setChecked(self.filter_manager.options.censor_copies)
        self.censor_action.toggled.connect(self.filter_manager.set_censor)
        view_menu.addAction(self.censor_action)

        reset_action = QAction("Reset Filters", self)
        reset_action.triggered.connect(self.on_reset_filters)
        view_menu.addAction(reset_action)

        # Help menu
        help_menu = menubar.addMenu("&Help")

        about_action = QAction("About", self)
        about_action.triggered.connect(self.on_about)
        help_menu.addAction(about_action)

    def _setup_toolbar(self):
        """Set up the toolbar."""
        toolbar = QToolBar("Main Toolbar")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        toolbar.addAction("Upload Log", self.on_open_log)
        toolbar.addAction("(?)", self.on_load_example)
        toolbar.addSeparator()
        toolbar.addAction("Back", self.on_back)
        toolbar.addAction("Forward", self.on_forward)

    def _setup_connections(self):
        """Set up signal/slot connections."""
        self.filter_manager.options_changed.connect(self.on_options_changed)

        self.home_page.record_activated.connect(self.on_record_activated)
        self.home_page.bucket_activated.connect(self.on_bucket_activated)

        self.group_page.back_requested.connect(self.on_back)
        self.group_page.member_activated.connect(self.on_member_activated)

        self.entry_page.back_requested.connect(self.on_back)
        self.entry_page.previous_requested.connect(self.on_previous_entry)
        self.entry_page.next_requested.connect(self.on_next_entry)
        self.entry_page.copied.connect(self.statusBar().showMessage)

    # =========================================================================
    # Rendering
    # =========================================================================

    def refresh(self) -> None:
        """Show the page for the current view state."""
        state = self.session.current_view

        if isinstance(state, EntryDetailView):
            self.entry_page.show_entry(
                state,
                self.session.position_in_log(state.record),
                len(self.session.records)
            )
            self.stack.setCurrentWidget(self.entry_page)
        elif isinstance(state, GroupDetailView):
            self.group_page.show_members(state.members)
            self.stack.setCurrentWidget(self.group_page)
        else:
            self._refresh_home()
            self.stack.setCurrentWidget(self.home_page)

    def _refresh_home(self) -> None:
        self.home_page.set_header(self.session.file_name, self.session.summary())
        if self.filter_manager.options.organized:
            self.home_page.show_buckets(self.session.visible_buckets())
        else:
            self.home_page.show_records(self.session.visible_records())

    def load_file(self, filepath: Path | str) -> None:
        """Load a log file, reporting failures to the user."""
        try:
            loaded = self.session.load_file(filepath)
        except OSError as e:
            logger.warning(f"Failed to read {filepath}: {e}")
            QMessageBox.warning(
                self,
                "Import Error",
                f"Failed to read {filepath}:\n{str(e)}"
            )
            return

        if not loaded:
            self.statusBar().showMessage(f"{Path(filepath).name} is empty, nothing loaded")
            return

        self.refresh()
        self.statusBar().showMessage(
            f"Loaded {len(self.session.records)} entries from {self.session.file_name}"
        )

    # =========================================================================
    # Slots
    # =========================================================================

    @Slot()
    def on_open_log(self):
        """Pick a log file to load."""
        filepath, _ = QFileDialog.getOpenFileName(
            self,
            "Upload Log",
            "",
            "JSON Logs (*.json *.log *.txt);;All Files (*)"
        )

        if filepath:
            self.load_file(filepath)

    @Slot()
    def on_load_example(self):
        """Load the example log from the working directory."""
        example = Path.cwd() / EXAMPLE_LOG_NAME
        if not example.exists():
            QMessageBox.information(
                self, "No Example Log",
                f"Failed to load {EXAMPLE_LOG_NAME}: generate one with "
                f"scripts/generate_sample_log.py."
            )
            return
        self.load_file(example)

    @Slot()
    def on_options_changed(self):
        self.home_page.filter_panel.sync_from_options()
        self.censor_action.blockSignals(True)
        self.censor_action.setChecked(self.filter_manager.options.censor_copies)
        self.censor_action.blockSignals(False)
        self.refresh()

    @Slot()
    def on_reset_filters(self):
        self.filter_manager.reset()
        self.statusBar().showMessage("All filters cleared")

    @Slot(object)
    def on_record_activated(self, record: LogRecord):
        self.session.open_record(record)
        self.refresh()

    @Slot(object)
    def on_bucket_activated(self, bucket: GroupBucket):
        self.session.open_bucket(bucket)
        self.refresh()

    @Slot(int)
    def on_member_activated(self, index: int):
        self.session.open_member(index)
        self.refresh()

    @Slot()
    def on_back(self):
        self.session.back()
        self.refresh()

    @Slot()
    def on_forward(self):
        self.session.forward()
        self.refresh()

    @Slot()
    def on_previous_entry(self):
        if self.session.previous_entry():
            self.refresh()

    @Slot()
    def on_next_entry(self):
        if self.session.next_entry():
            self.refresh()

    @Slot()
    def on_about(self):
        """Show about dialog."""
        QMessageBox.about(
            self,
            "About Runtime Log Viewer",
            "Runtime Log Viewer\n\n"
            "Triage game server JSON log dumps:\n"
            "- Runtime error titles from crash context\n"
            "- Grouping of repeated entries\n"
            "- Substring and regex search\n"
            "- Clipboard export (text, markdown, JSON)"
        )

    # =========================================================================
    # Events
    # =========================================================================

    def keyPressEvent(self, event):
        """Enter on the entry list page jumps to the search box."""
        if event.key() in (Qt.Key.Key_Return, Qt.Key.Key_Enter) and self.stack.currentWidget() is self.home_page:
            self.home_page.search_edit.setFocus()
            return

        super().keyPressEvent(event)

    def mousePressEvent(self, event):
        """Mouse back/forward buttons drive the history."""
        if event.button() == Qt.MouseButton.BackButton:
            self.on_back()
            return
        if event.button() == Qt.MouseButton.ForwardButton:
            self.on_forward()
            return
        super().mousePressEvent(event)
