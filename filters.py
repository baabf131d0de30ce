"""View-side filtering: what the list shows for the current tag, search and status."""

from data import FilterState, Todo, TodoList


def matches_tag(todo: Todo, tag: str | None) -> bool:
    return tag is None or tag in todo.tags


def matches_search(todo: Todo, text: str) -> bool:
    """Case-insensitive substring match against the text or any tag."""
    if not text:
        return True
    needle = text.lower()
    if needle in todo.text.lower():
        return True
    return any(needle in tag.lower() for tag in todo.tags)


def visible_todos(
    todo_list: TodoList,
    state: FilterState = FilterState.ALL,
    tag: str | None = None,
    search: str = "",
) -> list[Todo]:
    return [
        todo for todo in todo_list.all()
        if state.matches(todo) and matches_tag(todo, tag) and matches_search(todo, search)
    ]


def empty_message(
    todo_list: TodoList,
    state: FilterState = FilterState.ALL,
    tag: str | None = None,
    search: str = "",
) -> str:
    if todo_list.total_count() == 0:
        return "Add your first todo above!"
    if search:
        return f"No todos match your search: '{search}'"
    if tag is not None:
        return "No todos found with the selected tag."
    if state is FilterState.ACTIVE:
        return "All tasks done!"
    if state is FilterState.COMPLETED:
        return "No completed tasks yet."
    return "No tasks match the current filter."


def tag_choices(todo_list: TodoList, default_tags) -> list[str]:
    return sorted(set(default_tags) | todo_list.all_tags())
