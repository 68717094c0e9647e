"""
Widget components for the Runtime Log Viewer application.
"""
from __future__ import annotations

import html
from typing import Any, Optional

from PySide6.QtCore import Qt, Signal, Slot
from PySide6.QtGui import QColor, QFont, QGuiApplication
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QPlainTextEdit,
    QPushButton,
    QTreeWidget,
    QTreeWidgetItem,
    QVBoxLayout,
    QWidget,
)

from ..core import (
    EntryDetailView,
    FilterManager,
    GroupBucket,
    LogRecord,
    SortMode,
)
from ..core.export import (
    censor,
    data_markdown,
    data_text,
    file_line_variants,
    format_timestamp,
    message_text,
    pretty_json,
    raw_json,
    record_markdown,
    wstate_text,
)
from ..core.session import SessionSummary


ARRAY_COLOR = QColor("#FFD700")
OBJECT_COLOR = QColor("#ADD8E6")


def entry_caption(record: LogRecord) -> str:
    return f"[{format_timestamp(record.timestamp)}] {record.title}"


def entry_heading(record: LogRecord) -> str:
    """Rich-text heading of the entry page, with the title escaped."""
    return f"<b>[{format_timestamp(record.timestamp)}]</b> {html.escape(record.title)}"


class FilterPanel(QWidget):
    """Search box and view toggles above the entry list."""

    def __init__(self, filter_manager: FilterManager, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self.filter_manager = filter_manager

        layout = QHBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)

        self.organized_check = QCheckBox("Organized")
        self.organized_check.toggled.connect(self.filter_manager.set_organized)
        layout.addWidget(self.organized_check)

        self.runtimes_check = QCheckBox("Ignore non-runtimes")
        self.runtimes_check.toggled.connect(self.filter_manager.set_ignore_non_runtimes)
        layout.addWidget(self.runtimes_check)

        self.sort_combo = QComboBox()
        self.sort_combo.addItem("In Order", SortMode.ARRIVAL)
        self.sort_combo.addItem("Alphabetically", SortMode.ALPHABETICAL)
        self.sort_combo.addItem("By Time", SortMode.TIMESTAMP)
        self.sort_combo.currentIndexChanged.connect(self._on_sort_changed)
        layout.addWidget(self.sort_combo)

        self.descending_check = QCheckBox("Descending")
        self.descending_check.toggled.connect(self.filter_manager.set_descending)
        layout.addWidget(self.descending_check)

        layout.addStretch(1)

        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText("Search...")
        self.search_edit.setMinimumWidth(200)
        self.search_edit.textChanged.connect(self.filter_manager.set_search)
        layout.addWidget(self.search_edit)

        self.regex_check = QCheckBox("Regex")
        self.regex_check.toggled.connect(self.filter_manager.set_use_regex)
        layout.addWidget(self.regex_check)

        self.sync_from_options()

    def sync_from_options(self) -> None:
        """Update controls from the filter manager without re-emitting."""
        opts = self.filter_manager.options
        for widget in (self.organized_check, self.runtimes_check, self.sort_combo,
                       self.descending_check, self.search_edit, self.regex_check):
            widget.blockSignals(True)

        self.organized_check.setChecked(opts.organized)
        self.runtimes_check.setChecked(opts.ignore_non_runtimes)
        self.sort_combo.setCurrentIndex(self.sort_combo.findData(opts.sort_mode))
        self.descending_check.setChecked(opts.descending)
        self.search_edit.setText(opts.search_text)
        self.regex_check.setChecked(opts.use_regex)

        for widget in (self.organized_check, self.runtimes_check, self.sort_combo,
                       self.descending_check, self.search_edit, self.regex_check):
            widget.blockSignals(False)

    @Slot(int)
    def _on_sort_changed(self, index: int):
        self.filter_manager.set_sort_mode(self.sort_combo.itemData(index))


class HomePage(QWidget):
    """Entry list, either linear or grouped into buckets."""

    record_activated = Signal(object)  # LogRecord
    bucket_activated = Signal(object)  # GroupBucket

    def __init__(self, filter_manager: FilterManager, parent: Optional[QWidget] = None):
        super().__init__(parent)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.file_label = QLabel("No file selected")
        layout.addWidget(self.file_label)

        self.summary_label = QLabel()
        layout.addWidget(self.summary_label)

        self.filter_panel = FilterPanel(filter_manager)
        layout.addWidget(self.filter_panel)

        self.list = QListWidget()
        self.list.itemActivated.connect(self._on_item_activated)
        layout.addWidget(self.list, 1)

    @property
    def search_edit(self) -> QLineEdit:
        return self.filter_panel.search_edit

    def set_header(self, file_name: str, summary: SessionSummary) -> None:
        self.file_label.setText(file_name or "No file selected")
        self.summary_label.setText(
            f"{summary.total} Logs | {summary.runtimes} Runtimes | "
            f"{summary.unique_runtimes} Unique"
        )

    def show_records(self, records: list[LogRecord]) -> None:
        """Fill the list with individual entries."""
        self.list.clear()
        for record in records:
            item = QListWidgetItem(entry_caption(record))
            item.setData(Qt.ItemDataRole.UserRole, record)
            self.list.addItem(item)

    def show_buckets(self, buckets: list[GroupBucket]) -> None:
        """Fill the list with group buckets."""
        self.list.clear()
        for bucket in buckets:
            text = f"[{format_timestamp(bucket.first.timestamp)}] {bucket.label}"
            if bucket.count > 1:
                text += f" x{bucket.count}"
            item = QListWidgetItem(text)
            item.setData(Qt.ItemDataRole.UserRole, bucket)
            self.list.addItem(item)

    @Slot(QListWidgetItem)
    def _on_item_activated(self, item: QListWidgetItem):
        payload = item.data(Qt.ItemDataRole.UserRole)
        if isinstance(payload, GroupBucket):
            self.bucket_activated.emit(payload)
        elif isinstance(payload, LogRecord):
            self.record_activated.emit(payload)


class GroupPage(QWidget):
    """Members of one bucket."""

    back_requested = Signal()
    member_activated = Signal(int)

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        header = QHBoxLayout()
        back_btn = QPushButton("<<<")
        back_btn.clicked.connect(lambda: self.back_requested.emit())
        header.addWidget(back_btn)
        self.count_label = QLabel()
        header.addWidget(self.count_label, 1)
        layout.addLayout(header)

        self.list = QListWidget()
        self.list.itemActivated.connect(
            lambda item: self.member_activated.emit(self.list.row(item))
        )
        layout.addWidget(self.list, 1)

    def show_members(self, members: tuple[LogRecord, ...]) -> None:
        self.count_label.setText(f"{len(members)} Entries in group")
        self.list.clear()
        for record in members:
            self.list.addItem(entry_caption(record))
        if members:
            self.list.setCurrentRow(0)


class DataTreeWidget(QTreeWidget):
    """Nested view of a JSON value."""

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setHeaderLabels(["Key", "Value"])
        self.header().setSectionResizeMode(0, QHeaderView.ResizeMode.ResizeToContents)
        self.header().setStretchLastSection(True)

    def set_value(self, value: Any, omit: tuple[str, ...] = ()) -> None:
        self.clear()
        if isinstance(value, dict):
            for key, child in value.items():
                if key in omit:
                    continue
                self.addTopLevelItem(self._build_item(str(key), child))
        self.expandAll()

    def _build_item(self, label: str, value: Any) -> QTreeWidgetItem:
        if isinstance(value, (dict, list)):
            is_array = isinstance(value, list)
            item = QTreeWidgetItem([
                f"{label} [{len(value)}]" if is_array else f"{label} {{{len(value)}}}",
                ""
            ])
            item.setForeground(0, ARRAY_COLOR if is_array else OBJECT_COLOR)
            children = enumerate(value) if is_array else value.items()
            for key, child in children:
                child_label = f"[{key}]" if is_array else str(key)
                item.addChild(self._build_item(child_label, child))
            return item

        if value is None:
            text = "null"
        elif isinstance(value, bool):
            text = "true" if value else "false"
        else:
            text = str(value)
        return QTreeWidgetItem([label, text])


class EntryPage(QWidget):
    """A single entry with copy actions."""

    back_requested = Signal()
    previous_requested = Signal()
    next_requested = Signal()
    copied = Signal(str)  # status text

    def __init__(self, filter_manager: FilterManager, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self.filter_manager = filter_manager
        self._record: Optional[LogRecord] = None

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        header = QHBoxLayout()
        back_btn = QPushButton("<<<")
        back_btn.clicked.connect(lambda: self.back_requested.emit())
        header.addWidget(back_btn)
        self.position_label = QLabel()
        header.addWidget(self.position_label, 1)
        layout.addLayout(header)

        # Group navigation
        group_row = QHBoxLayout()
        self.prev_btn = QPushButton("Prev")
        self.prev_btn.clicked.connect(lambda: self.previous_requested.emit())
        group_row.addWidget(self.prev_btn)
        self.next_btn = QPushButton("Next")
        self.next_btn.clicked.connect(lambda: self.next_requested.emit())
        group_row.addWidget(self.next_btn)
        self.group_label = QLabel()
        group_row.addWidget(self.group_label, 1)
        layout.addLayout(group_row)

        # Copy buttons
        self.copy_row = QHBoxLayout()
        layout.addLayout(self.copy_row)

        self.title_label = QLabel()
        self.title_label.setWordWrap(True)
        self.title_label.setTextFormat(Qt.TextFormat.RichText)
        self.title_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        layout.addWidget(self.title_label)

        self.message_view = QPlainTextEdit()
        self.message_view.setReadOnly(True)
        self.message_view.setFont(QFont("monospace"))
        self.message_view.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        layout.addWidget(self.message_view, 2)

        self.wstate_label = QLabel("WState")
        layout.addWidget(self.wstate_label)
        self.wstate_row = QHBoxLayout()
        layout.addLayout(self.wstate_row)
        self.wstate_tree = DataTreeWidget()
        layout.addWidget(self.wstate_tree, 1)

        self.data_label = QLabel('Extra Data (omits "desc")')
        layout.addWidget(self.data_label)
        self.data_row = QHBoxLayout()
        layout.addLayout(self.data_row)
        self.data_tree = DataTreeWidget()
        layout.addWidget(self.data_tree, 1)

    def show_entry(self, state: EntryDetailView, log_index: int, log_total: int) -> None:
        """Display the entry of an entry view state."""
        record = state.record
        self._record = record

        self.position_label.setText(f"Entry #{log_index + 1} of {log_total}")

        in_group = state.in_group
        for widget in (self.prev_btn, self.next_btn, self.group_label):
            widget.setVisible(in_group)
        if in_group:
            total = len(state.origin_group)
            self.group_label.setText(f"{state.index_in_group + 1} of {total} in group")
            self.prev_btn.setEnabled(state.index_in_group > 0)
            self.next_btn.setEnabled(state.index_in_group < total - 1)

        self.title_label.setText(entry_heading(record))
        self.message_view.setPlainText(record.message)

        self._fill_copy_row(self.copy_row, [
            ("Copy Log", message_text(record), True),
            ("(Markdown)", record_markdown(record), True),
            None,
            ("Copy Raw Log", raw_json(record.original), True),
            ("(Formatted)", pretty_json(record.original), True),
            *[(f"File {label}", text, False) for label, text in file_line_variants(record).items()],
        ])

        has_wstate = record.wstate is not None
        for widget in (self.wstate_label, self.wstate_tree):
            widget.setVisible(has_wstate)
        if has_wstate:
            self.wstate_tree.set_value(record.wstate.to_dict())
            self._fill_copy_row(self.wstate_row, [
                ("Copy", wstate_text(record.wstate), False),
                ("Copy Raw", raw_json(record.wstate.to_dict()), False),
                ("(Formatted)", pretty_json(record.wstate.to_dict()), False),
            ])
        else:
            self._fill_copy_row(self.wstate_row, [])

        has_data = isinstance(record.data, dict) and len(record.data) > 0
        for widget in (self.data_label, self.data_tree):
            widget.setVisible(has_data)
        if has_data:
            self.data_tree.set_value(record.data, omit=("desc",))
            self._fill_copy_row(self.data_row, [
                ("Copy", data_text(record.data), True),
                ("(Markdown)", data_markdown(record.data), True),
                None,
                ("Copy Raw", raw_json(record.data), True),
                ("(Formatted)", pretty_json(record.data), True),
            ])
        else:
            self._fill_copy_row(self.data_row, [])

    def _fill_copy_row(self, row: QHBoxLayout, buttons: list) -> None:
        """Rebuild a row of copy buttons; None entries become separators."""
        while row.count():
            item = row.takeAt(0)
            if item.widget():
                item.widget().deleteLater()

        for button in buttons:
            if button is None:
                row.addWidget(QLabel("|"))
                continue
            label, text, supports_censor = button
            btn = QPushButton(label)
            btn.clicked.connect(
                lambda checked=False, t=text, c=supports_censor: self._copy(t, c)
            )
            row.addWidget(btn)
        row.addStretch(1)

    def _copy(self, text: str, supports_censor: bool) -> None:
        censored = supports_censor and self.filter_manager.options.censor_copies
        QGuiApplication.clipboard().setText(censor(text) if censored else text)
        self.copied.emit("Copied censored text to clipboard." if censored else "Copied to clipboard.")
