"""
App module for Runtime Log Viewer application.
Contains Qt UI components and main window.
"""

from .main_window import MainWindow
from .widgets import (
    DataTreeWidget,
    EntryPage,
    FilterPanel,
    GroupPage,
    HomePage,
)

__all__ = [
    "MainWindow",
    "DataTreeWidget",
    "EntryPage",
    "FilterPanel",
    "GroupPage",
    "HomePage",
]
