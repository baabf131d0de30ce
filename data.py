"""In-memory data model for the todo app."""

import copy
import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class Todo:
    id: int
    text: str
    completed: bool = False
    due_date: datetime | None = None
    tags: list[str] = field(default_factory=list)
    order: int = 0

    @classmethod
    def create(cls, id: int, text: str) -> "Todo":
        return cls(id=id, text=text, order=id)

    def toggle_completion(self) -> None:
        self.completed = not self.completed

    def set_due_date(self, date: datetime | None) -> None:
        self.due_date = date

    def add_tag(self, tag: str) -> None:
        if tag not in self.tags:
            self.tags.append(tag)

    def remove_tag(self, tag: str) -> None:
        self.tags = [t for t in self.tags if t != tag]

    # ------------------------------------------------------------------ #
    # Snapshot records                                                     #
    # ------------------------------------------------------------------ #

    def to_dict(self) -> dict:
        record = {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "tags": list(self.tags),
            "order": self.order,
        }
        # TOML has no null: an absent due date is an absent key
        if self.due_date is not None:
            record["due_date"] = self.due_date.isoformat()
        return record

    @classmethod
    def from_dict(cls, record: dict) -> "Todo":
        due_date = None
        raw_due = record.get("due_date")
        if raw_due:
            due_date = datetime.fromisoformat(raw_due)
            if due_date.tzinfo is None:
                due_date = due_date.replace(tzinfo=timezone.utc)
        tags: list[str] = []
        for tag in record.get("tags", []):
            if str(tag) not in tags:
                tags.append(str(tag))
        return cls(
            id=int(record["id"]),
            text=str(record["text"]),
            completed=bool(record.get("completed", False)),
            due_date=due_date,
            tags=tags,
            order=int(record.get("order", record["id"])),
        )


class FilterState(enum.Enum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    def matches(self, todo: Todo) -> bool:
        if self is FilterState.ACTIVE:
            return not todo.completed
        if self is FilterState.COMPLETED:
            return todo.completed
        return True


class TodoList:
    """Every todo keyed by id, plus the id counter.

    Presentation order always comes from sorting by ``Todo.order``; the
    dict's own iteration order carries no meaning. Mutators report a
    missing id through their return value instead of raising.
    """

    def __init__(self):
        self.todos: dict[int, Todo] = {}
        self.next_id: int = 1

    # ------------------------------------------------------------------ #
    # Mutations                                                            #
    # ------------------------------------------------------------------ #

    def add(self, text: str) -> int:
        todo_id = self.next_id
        self.todos[todo_id] = Todo.create(todo_id, text)
        self.next_id += 1
        return todo_id

    def remove(self, todo_id: int) -> Todo | None:
        return self.todos.pop(todo_id, None)

    def toggle_completion(self, todo_id: int) -> bool:
        todo = self.todos.get(todo_id)
        if todo is None:
            return False
        todo.toggle_completion()
        return True

    toggle = toggle_completion

    def update_text(self, todo_id: int, text: str) -> bool:
        todo = self.todos.get(todo_id)
        if todo is None:
            return False
        todo.text = text
        return True

    def set_due_date(self, todo_id: int, date: datetime | None) -> bool:
        todo = self.todos.get(todo_id)
        if todo is None:
            return False
        todo.set_due_date(date)
        return True

    def add_tag(self, todo_id: int, tag: str) -> bool:
        todo = self.todos.get(todo_id)
        if todo is None:
            return False
        todo.add_tag(tag)
        return True

    def remove_tag(self, todo_id: int, tag: str) -> bool:
        todo = self.todos.get(todo_id)
        if todo is None:
            return False
        todo.remove_tag(tag)
        return True

    def clear_completed(self) -> int:
        done = [todo_id for todo_id, todo in self.todos.items() if todo.completed]
        for todo_id in done:
            del self.todos[todo_id]
        return len(done)

    def reorder(self, source_id: int, target_id: int) -> bool:
        """Move source into target's slot, shifting everything in between.

        Moving up inserts the source before the target. Moving down puts
        the source where the target was and the target one slot earlier.
        Nothing is touched unless both ids exist and differ.
        """
        if source_id == target_id:
            return False
        source = self.todos.get(source_id)
        target = self.todos.get(target_id)
        if source is None or target is None:
            return False

        source_order = source.order
        target_order = target.order
        if source_order < target_order:
            for todo in self.todos.values():
                if source_order < todo.order <= target_order:
                    todo.order -= 1
        else:
            for todo in self.todos.values():
                if target_order <= todo.order < source_order:
                    todo.order += 1
        source.order = target_order
        return True

    # ------------------------------------------------------------------ #
    # Queries                                                              #
    # ------------------------------------------------------------------ #

    def get(self, todo_id: int) -> Todo | None:
        todo = self.todos.get(todo_id)
        return copy.deepcopy(todo) if todo is not None else None

    def all(self) -> list[Todo]:
        todos = [copy.deepcopy(todo) for todo in self.todos.values()]
        todos.sort(key=lambda todo: (todo.order, todo.id))
        return todos

    def filtered(self, state: FilterState) -> list[Todo]:
        return [todo for todo in self.all() if state.matches(todo)]

    def active_count(self) -> int:
        return sum(1 for todo in self.todos.values() if not todo.completed)

    def completed_count(self) -> int:
        return sum(1 for todo in self.todos.values() if todo.completed)

    def total_count(self) -> int:
        return len(self.todos)

    def all_tags(self) -> set[str]:
        return {tag for todo in self.todos.values() for tag in todo.tags}

    # ------------------------------------------------------------------ #
    # Snapshot                                                             #
    # ------------------------------------------------------------------ #

    def to_dict(self) -> dict:
        return {
            "todos": {str(todo_id): todo.to_dict() for todo_id, todo in self.todos.items()},
            "next_id": self.next_id,
        }

    @classmethod
    def from_dict(cls, snapshot: dict) -> "TodoList":
        """Rebuild a collection from ``to_dict`` output.

        Raises KeyError, TypeError or ValueError on a malformed snapshot.
        """
        todo_list = cls()
        for record in snapshot.get("todos", {}).values():
            todo = Todo.from_dict(record)
            todo_list.todos[todo.id] = todo
        next_id = int(snapshot.get("next_id", 1))
        if todo_list.todos:
            next_id = max(next_id, max(todo_list.todos) + 1)
        todo_list.next_id = next_id
        return todo_list
