"""Main application window: add form, search, tag filter, todo list and filter bar."""

import logging

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QLineEdit,
    QLabel, QButtonGroup, QApplication, QScrollArea, QFrame
)
from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QKeySequence, QShortcut

import style
from config import APP_NAME, MAX_TODO_TEXT_LENGTH, Settings
from data import FilterState, TodoList
from filters import empty_message, tag_choices, visible_todos
from list_widget import TodoListWidget
from storage import Storage, save_theme, save_todo_list

logger = logging.getLogger(__name__)

_FILTER_LABELS = (
    (FilterState.ALL, "All"),
    (FilterState.ACTIVE, "Active"),
    (FilterState.COMPLETED, "Completed"),
)
_SHORTCUT_HELP = (
    "Keyboard shortcuts: Ctrl+A: All todos | Ctrl+C: Completed todos | "
    "Ctrl+V: Active todos | Ctrl+D: Toggle dark mode"
)


class MainWindow(QMainWindow):
    def __init__(self, todo_list: TodoList, store: Storage, settings: Settings, dark: bool = False):
        super().__init__()
        self.setWindowTitle(APP_NAME)
        self.resize(style.WINDOW_WIDTH, style.WINDOW_HEIGHT)

        self._todo_list = todo_list
        self._store = store
        self._settings = settings
        self._dark = dark
        self._filter = FilterState.ALL
        self._selected_tag: str | None = None
        self._search = ""
        self._refresh_pending = False

        # Shortcuts
        QShortcut(QKeySequence("Ctrl+A"), self, lambda: self._set_filter(FilterState.ALL))
        QShortcut(QKeySequence("Ctrl+C"), self, lambda: self._set_filter(FilterState.COMPLETED))
        QShortcut(QKeySequence("Ctrl+V"), self, lambda: self._set_filter(FilterState.ACTIVE))
        QShortcut(QKeySequence("Ctrl+D"), self, self._toggle_theme)

        self._build_ui()
        self._refresh()

    # ------------------------------------------------------------------ #
    # UI construction                                                      #
    # ------------------------------------------------------------------ #

    def _build_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        root = QVBoxLayout(central)
        root.setContentsMargins(16, 16, 16, 16)
        root.setSpacing(8)

        # Header
        header = QHBoxLayout()
        title = QLabel(APP_NAME)
        font = title.font()
        font.setPointSizeF(font.pointSizeF() * 1.8)
        font.setBold(True)
        title.setFont(font)
        self._theme_button = QPushButton()
        self._theme_button.setFixedHeight(28)
        self._theme_button.clicked.connect(self._toggle_theme)
        header.addWidget(title)
        header.addStretch()
        header.addWidget(self._theme_button)
        root.addLayout(header)

        # Add form
        form = QHBoxLayout()
        self._new_todo_edit = QLineEdit()
        self._new_todo_edit.setPlaceholderText("What needs to be done?")
        self._new_todo_edit.setMaxLength(MAX_TODO_TEXT_LENGTH)
        self._new_todo_edit.returnPressed.connect(self._on_add)
        btn_add = QPushButton("Add")
        btn_add.setFixedHeight(28)
        btn_add.clicked.connect(self._on_add)
        form.addWidget(self._new_todo_edit)
        form.addWidget(btn_add)
        root.addLayout(form)

        # Search
        self._search_edit = QLineEdit()
        self._search_edit.setPlaceholderText("Search todos...")
        self._search_edit.setClearButtonEnabled(True)
        self._search_edit.textChanged.connect(self._on_search)
        root.addWidget(self._search_edit)

        # Tag filter bar, rebuilt on every refresh
        self._tag_bar = QWidget()
        self._tag_bar_layout = QHBoxLayout(self._tag_bar)
        self._tag_bar_layout.setContentsMargins(0, 0, 0, 0)
        self._tag_bar_layout.setSpacing(4)
        self._tag_group = QButtonGroup(self)
        self._tag_group.setExclusive(True)
        tag_scroll = QScrollArea()
        tag_scroll.setWidget(self._tag_bar)
        tag_scroll.setWidgetResizable(True)
        tag_scroll.setFrameShape(QFrame.Shape.NoFrame)
        tag_scroll.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAsNeeded)
        tag_scroll.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        tag_scroll.setFixedHeight(40)
        root.addWidget(tag_scroll)

        # Todo list
        self._list = TodoListWidget()
        self._list.reorder_requested.connect(self._on_reorder)
        self._list.toggle_requested.connect(self._on_toggle)
        self._list.text_committed.connect(self._on_update_text)
        self._list.due_date_changed.connect(self._on_due_date)
        self._list.tag_added.connect(self._on_tag_added)
        self._list.tag_removed.connect(self._on_tag_removed)
        self._list.delete_requested.connect(self._on_delete)
        root.addWidget(self._list, 1)

        # Filter bar
        bar = QHBoxLayout()
        self._count_label = QLabel()
        bar.addWidget(self._count_label)
        bar.addStretch()
        self._filter_group = QButtonGroup(self)
        self._filter_group.setExclusive(True)
        self._filter_buttons: dict[FilterState, QPushButton] = {}
        for state, label in _FILTER_LABELS:
            btn = QPushButton(label)
            btn.setCheckable(True)
            btn.setFixedHeight(28)
            btn.clicked.connect(lambda _, s=state: self._set_filter(s))
            self._filter_group.addButton(btn)
            self._filter_buttons[state] = btn
            bar.addWidget(btn)
        bar.addStretch()
        self._clear_button = QPushButton()
        self._clear_button.setFlat(True)
        self._clear_button.clicked.connect(self._on_clear_completed)
        bar.addWidget(self._clear_button)
        root.addLayout(bar)

        help_label = QLabel(_SHORTCUT_HELP)
        help_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        help_label.setWordWrap(True)
        help_font = help_label.font()
        help_font.setPointSizeF(help_font.pointSizeF() * 0.85)
        help_label.setFont(help_font)
        root.addWidget(help_label)

    # ------------------------------------------------------------------ #
    # View refresh                                                         #
    # ------------------------------------------------------------------ #

    def _schedule_refresh(self) -> None:
        # Rows are rebuilt after the emitting widget's handler has returned.
        if not self._refresh_pending:
            self._refresh_pending = True
            QTimer.singleShot(0, self._refresh)

    def _refresh(self) -> None:
        self._refresh_pending = False
        choices = tag_choices(self._todo_list, self._settings.default_tags)
        if self._selected_tag is not None and self._selected_tag not in choices:
            self._selected_tag = None

        self._theme_button.setText("☀ Light" if self._dark else "☾ Dark")
        self._rebuild_tag_bar(choices)
        self._list.set_todos(
            visible_todos(self._todo_list, self._filter, self._selected_tag, self._search),
            choices,
            empty_message(self._todo_list, self._filter, self._selected_tag, self._search),
            self._dark,
        )

        active = self._todo_list.active_count()
        self._count_label.setText(f"{active} item left" if active == 1 else f"{active} items left")
        self._filter_buttons[self._filter].setChecked(True)
        completed = self._todo_list.completed_count()
        self._clear_button.setText(f"Clear completed ({completed})")
        self._clear_button.setVisible(completed > 0)

    def _rebuild_tag_bar(self, choices: list[str]) -> None:
        for btn in self._tag_group.buttons():
            self._tag_group.removeButton(btn)
        while self._tag_bar_layout.count():
            child = self._tag_bar_layout.takeAt(0)
            if child.widget() is not None:
                child.widget().deleteLater()

        for tag in [None] + choices:
            btn = QPushButton("All tags" if tag is None else tag)
            btn.setCheckable(True)
            btn.setChecked(tag == self._selected_tag)
            btn.clicked.connect(lambda _, t=tag: self._select_tag(t))
            self._tag_group.addButton(btn)
            self._tag_bar_layout.addWidget(btn)
        self._tag_bar_layout.addStretch()

    # ------------------------------------------------------------------ #
    # View state                                                           #
    # ------------------------------------------------------------------ #

    def _set_filter(self, state: FilterState) -> None:
        self._filter = state
        self._schedule_refresh()

    def _select_tag(self, tag: str | None) -> None:
        self._selected_tag = tag
        self._schedule_refresh()

    def _on_search(self, text: str) -> None:
        self._search = text.strip()
        self._schedule_refresh()

    def _toggle_theme(self) -> None:
        self._dark = not self._dark
        style.apply_theme(QApplication.instance(), self._dark)
        save_theme(self._store, self._dark)
        self._schedule_refresh()

    # ------------------------------------------------------------------ #
    # Mutations                                                            #
    # ------------------------------------------------------------------ #

    def _commit(self, action: str, changed: bool) -> None:
        """Persist and redraw after a mutation; a stale id is just a no-op."""
        if not changed:
            logger.debug(f"{action}: nothing changed")
            return
        logger.debug(action)
        save_todo_list(self._store, self._todo_list)
        self._schedule_refresh()

    def _on_add(self) -> None:
        text = self._new_todo_edit.text().strip()
        if not text:
            return
        todo_id = self._todo_list.add(text)
        self._new_todo_edit.clear()
        self._commit(f"Added todo {todo_id}", True)

    def _on_toggle(self, todo_id: int) -> None:
        self._commit(f"Toggled todo {todo_id}", self._todo_list.toggle(todo_id))

    def _on_delete(self, todo_id: int) -> None:
        removed = self._todo_list.remove(todo_id)
        self._commit(f"Deleted todo {todo_id}", removed is not None)

    def _on_update_text(self, todo_id: int, text: str) -> None:
        text = text.strip()
        if not text:
            return
        self._commit(f"Edited todo {todo_id}", self._todo_list.update_text(todo_id, text))

    def _on_due_date(self, todo_id: int, date) -> None:
        self._commit(f"Set due date of todo {todo_id}", self._todo_list.set_due_date(todo_id, date))

    def _on_tag_added(self, todo_id: int, tag: str) -> None:
        tag = tag.strip()
        if not tag:
            return
        self._commit(f"Tagged todo {todo_id} with {tag!r}", self._todo_list.add_tag(todo_id, tag))

    def _on_tag_removed(self, todo_id: int, tag: str) -> None:
        self._commit(f"Untagged {tag!r} from todo {todo_id}", self._todo_list.remove_tag(todo_id, tag))

    def _on_clear_completed(self) -> None:
        removed = self._todo_list.clear_completed()
        self._commit(f"Cleared {removed} completed todos", removed > 0)

    def _on_reorder(self, source_id: int, target_id: int) -> None:
        self._commit(
            f"Moved todo {source_id} to the slot of todo {target_id}",
            self._todo_list.reorder(source_id, target_id),
        )

    # ------------------------------------------------------------------ #
    # Save on close                                                        #
    # ------------------------------------------------------------------ #

    def closeEvent(self, event):
        save_todo_list(self._store, self._todo_list)
        self._store.close()
        event.accept()
