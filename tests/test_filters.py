"""
Tests for the tag/search/status view filters.
"""

import pytest

from data import FilterState, TodoList
from filters import empty_message, matches_search, matches_tag, tag_choices, visible_todos


@pytest.fixture
def todo_list():
    todo_list = TodoList()
    milk = todo_list.add("Buy milk")
    report = todo_list.add("Finish quarterly report")
    dentist = todo_list.add("Call dentist")
    todo_list.add_tag(milk, "Shopping")
    todo_list.add_tag(report, "Work")
    todo_list.add_tag(report, "Urgent")
    todo_list.add_tag(dentist, "Personal")
    todo_list.toggle(report)
    return todo_list


def texts(todos):
    return [t.text for t in todos]


def test_matches_tag(todo_list):
    milk = todo_list.get(1)
    assert matches_tag(milk, None)
    assert matches_tag(milk, "Shopping")
    assert not matches_tag(milk, "shopping")


def test_search_is_case_insensitive_over_text_and_tags(todo_list):
    milk = todo_list.get(1)
    assert matches_search(milk, "")
    assert matches_search(milk, "MILK")
    assert matches_search(milk, "shop")
    assert not matches_search(milk, "report")


def test_visible_todos_without_filters_is_all(todo_list):
    assert visible_todos(todo_list) == todo_list.all()


def test_visible_todos_composes_predicates(todo_list):
    assert texts(visible_todos(todo_list, FilterState.ACTIVE)) == ["Buy milk", "Call dentist"]
    assert texts(visible_todos(todo_list, tag="Work")) == ["Finish quarterly report"]
    assert texts(visible_todos(todo_list, FilterState.ACTIVE, tag="Work")) == []
    assert texts(visible_todos(todo_list, search="urg")) == ["Finish quarterly report"]
    assert texts(visible_todos(todo_list, FilterState.COMPLETED, "Work", "QUARTER")) == [
        "Finish quarterly report"
    ]


def test_visible_todos_follow_reorder(todo_list):
    todo_list.reorder(3, 1)
    assert texts(visible_todos(todo_list, FilterState.ACTIVE)) == ["Call dentist", "Buy milk"]


def test_empty_messages(todo_list):
    assert empty_message(TodoList()) == "Add your first todo above!"
    assert empty_message(todo_list, search="zzz") == "No todos match your search: 'zzz'"
    assert empty_message(todo_list, tag="Home") == "No todos found with the selected tag."
    assert empty_message(todo_list, FilterState.ACTIVE) == "All tasks done!"
    assert empty_message(todo_list, FilterState.COMPLETED) == "No completed tasks yet."
    assert empty_message(todo_list) == "No tasks match the current filter."


def test_tag_choices_merges_defaults_sorted(todo_list):
    todo_list.add_tag(1, "Groceries")
    assert tag_choices(todo_list, ["Work", "Home"]) == [
        "Groceries", "Home", "Personal", "Shopping", "Urgent", "Work",
    ]
