"""Custom widget for a single todo row: drag handle, checkbox, text, due date and tags."""

from datetime import date, datetime, timezone

from PySide6.QtWidgets import (
    QWidget, QHBoxLayout, QVBoxLayout, QTextEdit, QSizePolicy, QFrame,
    QApplication, QCheckBox, QToolButton, QLabel, QComboBox, QDateEdit
)
from PySide6.QtCore import Qt, Signal, QSize, QPoint, QDate

import style
from config import MAX_TAGS_PER_TODO, MAX_TODO_TEXT_LENGTH
from data import Todo


class DragHandle(QFrame):
    """Narrow strip on the left of a row; dragging it starts a reorder."""
    drag_requested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._drag_start: QPoint | None = None
        self.setFixedWidth(style.ITEM_HANDLE_WIDTH)
        self.setCursor(Qt.CursorShape.OpenHandCursor)
        self.setToolTip("Drag onto another todo to move it there")
        self.setStyleSheet(
            f"QFrame {{ background: {style.ITEM_HANDLE_COLOR}; border-radius: 3px; }}"
            f"QFrame:hover {{ background: {style.ITEM_HANDLE_HOVER_COLOR}; }}"
        )

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self._drag_start = event.position().toPoint()
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        if (self._drag_start is not None
                and event.buttons() & Qt.MouseButton.LeftButton):
            dist = (event.position().toPoint() - self._drag_start).manhattanLength()
            if dist >= QApplication.startDragDistance():
                self._drag_start = None
                self.drag_requested.emit()
                return  # widget may be deleted by the time drag completes
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        self._drag_start = None
        super().mouseReleaseEvent(event)


class ItemTextEdit(QTextEdit):
    """Inline editor that emits editing_finished when focus leaves or Enter is pressed."""
    editing_finished = Signal(str)   # emits new text

    def __init__(self, text: str, parent=None):
        super().__init__(parent)
        self.setPlainText(text)
        self._original_text = text
        self.setAcceptRichText(False)
        self.setTabChangesFocus(True)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Minimum)
        self.document().contentsChanged.connect(self._adjust_height)
        self.setStyleSheet(
            "QTextEdit { border: none; background: transparent; padding: 2px; }"
            f"QTextEdit:focus {{ border: 1px solid {style.ITEM_EDIT_FOCUS_BORDER};"
            " border-radius: 2px; }"
        )

    def _adjust_height(self):
        doc_height = int(self.document().size().height())
        self.setFixedHeight(max(doc_height + 6, 28))

    def focusInEvent(self, event):
        self._original_text = self.toPlainText()
        super().focusInEvent(event)

    def keyPressEvent(self, event):
        if event.key() == Qt.Key.Key_Escape:
            self.setPlainText(self._original_text)
            self.clearFocus()
            event.accept()
            return
        if event.key() in (Qt.Key.Key_Return, Qt.Key.Key_Enter):
            self.clearFocus()
            event.accept()
            return
        if (event.text() and event.text().isprintable()
                and len(self.toPlainText()) >= MAX_TODO_TEXT_LENGTH
                and not self.textCursor().hasSelection()):
            event.accept()
            return
        super().keyPressEvent(event)

    def focusOutEvent(self, event):
        new_text = self.toPlainText().strip()
        if not new_text:
            # an emptied todo keeps its old text
            self.setPlainText(self._original_text)
        elif new_text != self._original_text:
            self._original_text = new_text
            self.editing_finished.emit(new_text)
        super().focusOutEvent(event)

    def sizeHint(self) -> QSize:
        doc_height = int(self.document().size().height())
        return QSize(200, max(doc_height + 6, 28))


class TagChip(QWidget):
    """A tag label with a small remove button."""
    remove_requested = Signal(str)

    def __init__(self, tag: str, dark: bool, parent=None):
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)
        label = QLabel(tag, self)
        label.setStyleSheet(style.tag_chip_css(dark))
        remove = QToolButton(self)
        remove.setText("×")
        remove.setAutoRaise(True)
        remove.setToolTip(f"Remove tag '{tag}'")
        remove.clicked.connect(lambda: self.remove_requested.emit(tag))
        layout.addWidget(label)
        layout.addWidget(remove)


class ItemWidget(QWidget):
    """A single todo row: [handle | checkbox | text + meta | delete]."""
    toggled = Signal()
    text_committed = Signal(str)
    due_date_changed = Signal(object)   # datetime or None
    tag_added = Signal(str)
    tag_removed = Signal(str)
    delete_requested = Signal()
    drag_requested = Signal()

    def __init__(self, todo: Todo, suggested_tags: list[str], dark: bool = False, parent=None):
        super().__init__(parent)
        self.todo_id = todo.id
        self._due_date = todo.due_date

        layout = QHBoxLayout(self)
        layout.setContentsMargins(2, 2, 2, 2)
        layout.setSpacing(4)

        self.handle = DragHandle(self)
        self.handle.drag_requested.connect(self.drag_requested)

        self.checkbox = QCheckBox(self)
        self.checkbox.setChecked(todo.completed)
        self.checkbox.setToolTip("Mark as done")
        self.checkbox.clicked.connect(lambda _: self.toggled.emit())

        self.text_edit = ItemTextEdit(todo.text, self)
        self.text_edit.setAcceptDrops(False)   # row drops belong to the list
        self.text_edit.editing_finished.connect(self.text_committed)
        if todo.completed:
            font = self.text_edit.font()
            font.setStrikeOut(True)
            self.text_edit.setFont(font)
            self.text_edit.setStyleSheet(
                self.text_edit.styleSheet()
                + f"QTextEdit {{ color: {style.COMPLETED_TEXT_COLOR}; }}"
            )

        body = QVBoxLayout()
        body.setContentsMargins(0, 0, 0, 0)
        body.setSpacing(2)
        body.addWidget(self.text_edit)
        body.addLayout(self._build_meta_row(todo, suggested_tags, dark))

        self.delete_button = QToolButton(self)
        self.delete_button.setText("🗑")
        self.delete_button.setAutoRaise(True)
        self.delete_button.setToolTip("Delete todo")
        self.delete_button.clicked.connect(self.delete_requested)

        layout.addWidget(self.handle)
        layout.addWidget(self.checkbox, 0, Qt.AlignmentFlag.AlignTop)
        layout.addLayout(body, 1)
        layout.addWidget(self.delete_button, 0, Qt.AlignmentFlag.AlignTop)

        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Minimum)

    # ------------------------------------------------------------------ #
    # Due date and tags row                                                #
    # ------------------------------------------------------------------ #

    def _build_meta_row(self, todo: Todo, suggested_tags: list[str], dark: bool) -> QHBoxLayout:
        row = QHBoxLayout()
        row.setContentsMargins(0, 0, 0, 0)
        row.setSpacing(4)

        self.due_button = QToolButton(self)
        self.due_button.setAutoRaise(True)
        self.due_button.setText(self._due_label(todo.due_date))
        if todo.due_date is not None and not todo.completed and _is_overdue(todo.due_date):
            self.due_button.setStyleSheet(f"QToolButton {{ color: {style.OVERDUE_COLOR}; }}")
            self.due_button.setToolTip("Overdue")
        self.due_button.clicked.connect(self._on_due_clicked)

        self.date_edit = QDateEdit(self)
        self.date_edit.setCalendarPopup(True)
        self.date_edit.setDisplayFormat("yyyy-MM-dd")
        self.date_edit.hide()

        self.set_due_button = QToolButton(self)
        self.set_due_button.setText("Set")
        self.set_due_button.setAutoRaise(True)
        self.set_due_button.hide()
        self.set_due_button.clicked.connect(self._commit_due_date)

        self.clear_due_button = QToolButton(self)
        self.clear_due_button.setText("Clear")
        self.clear_due_button.setAutoRaise(True)
        self.clear_due_button.hide()
        self.clear_due_button.clicked.connect(self._clear_due_date)

        row.addWidget(self.due_button)
        row.addWidget(self.date_edit)
        row.addWidget(self.set_due_button)
        row.addWidget(self.clear_due_button)

        for tag in todo.tags:
            chip = TagChip(tag, dark, self)
            chip.remove_requested.connect(self.tag_removed)
            row.addWidget(chip)

        self.tag_combo = QComboBox(self)
        self.tag_combo.setEditable(True)
        self.tag_combo.setInsertPolicy(QComboBox.InsertPolicy.NoInsert)
        self.tag_combo.lineEdit().setPlaceholderText("+ tag")
        self.tag_combo.lineEdit().setAcceptDrops(False)
        self.tag_combo.addItems([t for t in suggested_tags if t not in todo.tags])
        self.tag_combo.setCurrentIndex(-1)
        self.tag_combo.setMinimumWidth(90)
        self.tag_combo.lineEdit().returnPressed.connect(self._commit_tag)
        self.tag_combo.activated.connect(lambda _: self._commit_tag())
        if len(todo.tags) >= MAX_TAGS_PER_TODO:
            self.tag_combo.setEnabled(False)
            self.tag_combo.setToolTip(f"At most {MAX_TAGS_PER_TODO} tags per todo")
        row.addWidget(self.tag_combo)
        row.addStretch()
        return row

    @staticmethod
    def _due_label(due_date: datetime | None) -> str:
        # due dates are picked as whole days, stored at midnight UTC
        if due_date is None:
            return "📅 Add due date"
        return "📅 " + due_date.astimezone(timezone.utc).strftime("%b %d, %Y")

    def _on_due_clicked(self) -> None:
        if self._due_date is not None:
            day = self._due_date.astimezone(timezone.utc)
            self.date_edit.setDate(QDate(day.year, day.month, day.day))
        else:
            self.date_edit.setDate(QDate.currentDate())
        self.due_button.hide()
        self.date_edit.show()
        self.set_due_button.show()
        self.clear_due_button.setVisible(self._due_date is not None)
        self.date_edit.setFocus()

    def _close_date_editor(self) -> None:
        self.date_edit.hide()
        self.set_due_button.hide()
        self.clear_due_button.hide()
        self.due_button.show()

    def _commit_due_date(self) -> None:
        d = self.date_edit.date()
        due_date = datetime(d.year(), d.month(), d.day(), tzinfo=timezone.utc)
        self._close_date_editor()
        if due_date != self._due_date:
            self.due_date_changed.emit(due_date)

    def _clear_due_date(self) -> None:
        self._close_date_editor()
        if self._due_date is not None:
            self.due_date_changed.emit(None)

    def _commit_tag(self) -> None:
        tag = self.tag_combo.currentText().strip()
        if tag:
            self.tag_added.emit(tag)
        self.tag_combo.setEditText("")

    def keyPressEvent(self, event):
        if event.key() == Qt.Key.Key_Escape and self.date_edit.isVisible():
            self._close_date_editor()
            event.accept()
            return
        super().keyPressEvent(event)


def _is_overdue(due_date: datetime) -> bool:
    return due_date.astimezone(timezone.utc).date() < date.today()
