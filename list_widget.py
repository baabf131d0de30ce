"""List widget that shows todo rows and turns drag-and-drop into reorder requests."""

from PySide6.QtWidgets import (
    QListWidget, QListWidgetItem, QAbstractItemView, QSizePolicy
)
from PySide6.QtCore import Qt, Signal, QMimeData, QByteArray
from PySide6.QtGui import QDrag, QPainter, QColor

import style
from data import Todo
from item_widget import ItemWidget


_MIME_TYPE = "application/x-tagtodo-item"
_ID_ROLE = Qt.ItemDataRole.UserRole


class TodoListWidget(QListWidget):
    """
    Displays todos as ItemWidgets inside QListWidgetItems, in the order given.
    Dropping a row onto another row emits reorder_requested(source_id, target_id);
    the rows themselves are only rebuilt by set_todos.
    """
    reorder_requested = Signal(int, int)
    toggle_requested = Signal(int)
    text_committed = Signal(int, str)
    due_date_changed = Signal(int, object)
    tag_added = Signal(int, str)
    tag_removed = Signal(int, str)
    delete_requested = Signal(int)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._empty_text = ""
        self._dark = False

        self.setDragDropMode(QAbstractItemView.DragDropMode.DragDrop)
        self.setDefaultDropAction(Qt.DropAction.MoveAction)
        self.setAcceptDrops(True)
        self.setDragEnabled(True)
        self.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.setVerticalScrollMode(QAbstractItemView.ScrollMode.ScrollPerPixel)
        self.setSpacing(2)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self._apply_style()

    # ------------------------------------------------------------------ #
    # Public helpers (called by the window)                                #
    # ------------------------------------------------------------------ #

    def set_todos(self, todos: list[Todo], suggested_tags: list[str],
                  empty_text: str, dark: bool = False) -> None:
        scroll = self.verticalScrollBar().value()
        self._empty_text = empty_text
        if dark != self._dark:
            self._dark = dark
            self._apply_style()
        self.clear()
        for todo in todos:
            self._append_row(todo, suggested_tags)
        self.verticalScrollBar().setValue(scroll)
        self.viewport().update()

    # ------------------------------------------------------------------ #
    # Drag and drop overrides                                              #
    # ------------------------------------------------------------------ #

    def startDrag(self, supported_actions):
        item = self.currentItem()
        if item is not None:
            self._start_drag(item.data(_ID_ROLE))

    def _start_drag(self, todo_id: int) -> None:
        mime = QMimeData()
        mime.setData(_MIME_TYPE, QByteArray(str(todo_id).encode()))

        drag = QDrag(self)
        drag.setMimeData(mime)
        drag.exec(Qt.DropAction.MoveAction)

    def dragEnterEvent(self, event):
        if event.mimeData().hasFormat(_MIME_TYPE):
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragMoveEvent(self, event):
        if not event.mimeData().hasFormat(_MIME_TYPE):
            event.ignore()
            return
        dest_item = self.itemAt(event.position().toPoint())
        if dest_item is not None:
            self.setCurrentItem(dest_item)
        event.acceptProposedAction()

    def dropEvent(self, event):
        if not event.mimeData().hasFormat(_MIME_TYPE):
            event.ignore()
            return

        source_id = int(bytes(event.mimeData().data(_MIME_TYPE)).decode())
        dest_item = self.itemAt(event.position().toPoint())
        if dest_item is None:
            event.ignore()
            return

        target_id = dest_item.data(_ID_ROLE)
        if source_id != target_id:
            self.reorder_requested.emit(source_id, target_id)
        event.acceptProposedAction()

    # ------------------------------------------------------------------ #
    # Painting                                                             #
    # ------------------------------------------------------------------ #

    def paintEvent(self, event):
        super().paintEvent(event)
        if self.count() or not self._empty_text:
            return
        painter = QPainter(self.viewport())
        painter.setPen(QColor(style.EMPTY_TEXT_COLOR))
        font = painter.font()
        font.setItalic(True)
        font.setPointSizeF(font.pointSizeF() * 1.2)
        painter.setFont(font)
        painter.drawText(
            self.viewport().rect(),
            Qt.AlignmentFlag.AlignCenter | Qt.TextFlag.TextWordWrap,
            self._empty_text,
        )
        painter.end()

    # ------------------------------------------------------------------ #
    # Private helpers                                                      #
    # ------------------------------------------------------------------ #

    def _apply_style(self) -> None:
        border = style.ITEM_BORDER_DARK if self._dark else style.ITEM_BORDER
        drop = style.DROP_TARGET_BG
        self.setStyleSheet(
            "QListWidget { border: none; }"
            f"QListWidget::item {{ border: 1px solid {border}; border-radius: 4px; margin: 1px; }}"
            "QListWidget::item:selected {"
            f"  background: rgba({drop.red()}, {drop.green()}, {drop.blue()}, {drop.alpha()}); }}"
        )

    def _append_row(self, todo: Todo, suggested_tags: list[str]) -> QListWidgetItem:
        item = QListWidgetItem()
        item.setData(_ID_ROLE, todo.id)
        self.addItem(item)
        w = self._make_widget(todo, suggested_tags)
        self.setItemWidget(item, w)
        item.setSizeHint(w.sizeHint())
        return item

    def _make_widget(self, todo: Todo, suggested_tags: list[str]) -> ItemWidget:
        todo_id = todo.id
        w = ItemWidget(todo, suggested_tags, self._dark, self)
        w.drag_requested.connect(lambda: self._start_drag(todo_id))
        w.toggled.connect(lambda: self.toggle_requested.emit(todo_id))
        w.text_committed.connect(lambda text: self.text_committed.emit(todo_id, text))
        w.due_date_changed.connect(lambda date: self.due_date_changed.emit(todo_id, date))
        w.tag_added.connect(lambda tag: self.tag_added.emit(todo_id, tag))
        w.tag_removed.connect(lambda tag: self.tag_removed.emit(todo_id, tag))
        w.delete_requested.connect(lambda: self.delete_requested.emit(todo_id))
        w.text_edit.document().contentsChanged.connect(
            lambda: self._sync_size(todo_id, w)
        )
        return w

    def _sync_size(self, todo_id: int, w: ItemWidget) -> None:
        for i in range(self.count()):
            item = self.item(i)
            if item.data(_ID_ROLE) == todo_id:
                item.setSizeHint(w.sizeHint())
                return
