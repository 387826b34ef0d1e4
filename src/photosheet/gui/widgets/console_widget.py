"""
Console widget showing the workflow log (transitions, collaborator calls,
discarded responses) beneath the step pages.
"""
from datetime import datetime
from typing import Dict, Optional, Set

from PySide6.QtCore import Slot
from PySide6.QtGui import QColor, QFont, QTextCharFormat, QTextCursor
from PySide6.QtWidgets import QApplication, QFileDialog, QGroupBox, QMenu, QPlainTextEdit, QSizePolicy, QVBoxLayout

from photosheet.gui.styles.theme import Fonts, get_colors

# Levels hidden from the console by default (lower case logging level names)
CONSOLE_SUPPRESSED_LEVELS: Set[str] = set()

MAX_CONSOLE_LINES = 1000

# Logging level name -> palette attribute
LEVEL_COLORS: Dict[str, str] = {
    "debug": "TEXT_SECONDARY",
    "info": "TEXT_PRIMARY",
    "warning": "WARNING",
    "error": "ERROR",
    "critical": "ERROR",
}


class ConsoleWidget(QGroupBox):
    def __init__(self, parent=None):
        super().__init__("Activity Log", parent)
        self.setObjectName("console")
        self.suppressed_levels: Set[str] = set(CONSOLE_SUPPRESSED_LEVELS)
        self._formats: Dict[str, QTextCharFormat] = {}

        # Title bar stays visible when the splitter collapses the console
        self.setMinimumHeight(40)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.text_edit = QPlainTextEdit()
        self.text_edit.setReadOnly(True)
        self.text_edit.setLineWrapMode(QPlainTextEdit.LineWrapMode.WidgetWidth)
        self.text_edit.setMaximumBlockCount(MAX_CONSOLE_LINES)
        font = QFont(Fonts.MONO_FONT.split(',')[0])
        if "pt" in Fonts.CONSOLE:
            font.setPointSize(int(Fonts.CONSOLE.replace("pt", "")))
        self.text_edit.setFont(font)
        layout.addWidget(self.text_edit)

        self.update_theme()

    @Slot(str, str)
    def append_log(self, level: str, message: str):
        """Append one record, colored by its logging level."""
        key = level.lower()
        if key in self.suppressed_levels:
            return
        fmt = self._formats.get(key, self._formats["info"])
        timestamp = datetime.now().strftime("%H:%M:%S")

        cursor = self.text_edit.textCursor()
        cursor.movePosition(QTextCursor.MoveOperation.End)
        cursor.insertText(f"[{timestamp}] {level.upper():<7} {message}\n", fmt)
        self.text_edit.setTextCursor(cursor)
        self.text_edit.ensureCursorVisible()

    def set_level_visible(self, level: str, visible: bool) -> None:
        if visible:
            self.suppressed_levels.discard(level.lower())
        else:
            self.suppressed_levels.add(level.lower())

    def contextMenuEvent(self, event):
        menu = QMenu(self)
        copy_action = menu.addAction("Copy")
        copy_all_action = menu.addAction("Copy All")
        menu.addSeparator()
        info_action = menu.addAction("Show Info Messages")
        info_action.setCheckable(True)
        info_action.setChecked("info" not in self.suppressed_levels)
        menu.addSeparator()
        save_action = menu.addAction("Save to File...")
        clear_action = menu.addAction("Clear")

        action = menu.exec(event.globalPos())
        if action == copy_action:
            cursor = self.text_edit.textCursor()
            if cursor.hasSelection():
                QApplication.clipboard().setText(cursor.selectedText())
        elif action == copy_all_action:
            QApplication.clipboard().setText(self.text_edit.toPlainText())
        elif action == info_action:
            self.set_level_visible("info", info_action.isChecked())
        elif action == save_action:
            self._save_to_file()
        elif action == clear_action:
            self.clear()

    def _save_to_file(self, filename: Optional[str] = None):
        if filename is None:
            filename, _ = QFileDialog.getSaveFileName(
                self, "Save Log", "photosheet_log.txt", "Text Files (*.txt);;All Files (*)"
            )
        if not filename:
            return
        try:
            with open(filename, 'w', encoding='utf-8') as f:
                f.write(self.text_edit.toPlainText())
        except OSError as e:
            self.append_log("ERROR", f"Failed to save log: {e}")

    def clear(self):
        self.text_edit.clear()

    def update_theme(self):
        """Rebuild level formats for the active palette (affects new lines only)."""
        C = get_colors()
        for level, attr in LEVEL_COLORS.items():
            fmt = QTextCharFormat()
            fmt.setForeground(QColor(getattr(C, attr)))
            self._formats[level] = fmt
