"""
Tests for the todo data model: Todo, FilterState and TodoList.
"""

import random
from datetime import datetime, timedelta, timezone

import pytest

from data import FilterState, Todo, TodoList


def ids_in_order(todo_list: TodoList) -> list[int]:
    return [todo.id for todo in todo_list.all()]


@pytest.fixture
def abc():
    """Three todos A, B, C with orders 1, 2, 3."""
    todo_list = TodoList()
    a = todo_list.add("A")
    b = todo_list.add("B")
    c = todo_list.add("C")
    return todo_list, a, b, c


# ─────────────────────────────────────────────
#  Todo
# ─────────────────────────────────────────────

def test_create_defaults():
    todo = Todo.create(7, "Write report")
    assert todo.id == 7
    assert todo.text == "Write report"
    assert not todo.completed
    assert todo.due_date is None
    assert todo.tags == []
    assert todo.order == 7


def test_toggle_completion_is_an_involution():
    todo = Todo.create(1, "x")
    todo.toggle_completion()
    assert todo.completed
    todo.toggle_completion()
    assert not todo.completed


def test_set_due_date_replaces_and_clears():
    todo = Todo.create(1, "x")
    due = datetime(2026, 11, 1, tzinfo=timezone.utc)
    todo.set_due_date(due)
    assert todo.due_date == due
    todo.set_due_date(None)
    assert todo.due_date is None


def test_tags_have_set_semantics():
    todo = Todo.create(1, "x")
    todo.add_tag("Work")
    todo.add_tag("Work")
    todo.add_tag("Urgent")
    assert todo.tags == ["Work", "Urgent"]
    todo.remove_tag("Work")
    todo.remove_tag("missing")
    assert todo.tags == ["Urgent"]


def test_todo_record_omits_missing_due_date():
    record = Todo.create(3, "x").to_dict()
    assert record == {"id": 3, "text": "x", "completed": False, "tags": [], "order": 3}


def test_todo_record_due_date_is_iso_instant():
    todo = Todo.create(3, "x")
    todo.set_due_date(datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc))
    assert todo.to_dict()["due_date"] == "2026-10-19T08:30:00+00:00"
    assert Todo.from_dict(todo.to_dict()) == todo


def test_naive_stored_due_date_is_read_as_utc():
    todo = Todo.from_dict({"id": 1, "text": "x", "due_date": "2026-01-02T00:00:00"})
    assert todo.due_date == datetime(2026, 1, 2, tzinfo=timezone.utc)
    assert todo.order == 1


# ─────────────────────────────────────────────
#  FilterState
# ─────────────────────────────────────────────

def test_filter_state_matches():
    active = Todo.create(1, "active")
    done = Todo.create(2, "done")
    done.toggle_completion()

    assert FilterState.ALL.matches(active)
    assert FilterState.ALL.matches(done)
    assert FilterState.ACTIVE.matches(active)
    assert not FilterState.ACTIVE.matches(done)
    assert not FilterState.COMPLETED.matches(active)
    assert FilterState.COMPLETED.matches(done)


# ─────────────────────────────────────────────
#  TodoList mutations
# ─────────────────────────────────────────────

def test_add_assigns_increasing_ids_and_orders():
    todo_list = TodoList()
    assert todo_list.add("one") == 1
    assert todo_list.add("two") == 2
    assert [(t.id, t.order) for t in todo_list.all()] == [(1, 1), (2, 2)]
    assert todo_list.next_id == 3


def test_ids_are_never_reused():
    todo_list = TodoList()
    first = todo_list.add("one")
    todo_list.remove(first)
    assert todo_list.add("two") == first + 1


def test_remove_returns_entity_or_none():
    todo_list = TodoList()
    todo_id = todo_list.add("gone")
    removed = todo_list.remove(todo_id)
    assert removed is not None and removed.text == "gone"
    assert todo_list.remove(todo_id) is None


def test_mutators_report_missing_ids():
    todo_list = TodoList()
    assert not todo_list.toggle(99)
    assert not todo_list.update_text(99, "x")
    assert not todo_list.set_due_date(99, None)
    assert not todo_list.add_tag(99, "Work")
    assert not todo_list.remove_tag(99, "Work")
    assert todo_list.total_count() == 0


def test_toggle_twice_restores_completion():
    todo_list = TodoList()
    todo_id = todo_list.add("x")
    assert todo_list.toggle(todo_id)
    assert todo_list.get(todo_id).completed
    assert todo_list.toggle_completion(todo_id)
    assert not todo_list.get(todo_id).completed


def test_update_text_does_not_validate():
    todo_list = TodoList()
    todo_id = todo_list.add("x")
    assert todo_list.update_text(todo_id, "   ")
    assert todo_list.get(todo_id).text == "   "


def test_set_due_date_through_collection():
    todo_list = TodoList()
    todo_id = todo_list.add("x")
    due = datetime.now(timezone.utc) + timedelta(days=2)
    assert todo_list.set_due_date(todo_id, due)
    assert todo_list.get(todo_id).due_date == due


def test_add_tag_twice_keeps_one_copy():
    todo_list = TodoList()
    todo_id = todo_list.add("x")
    assert todo_list.add_tag(todo_id, "x")
    assert todo_list.add_tag(todo_id, "x")
    assert todo_list.get(todo_id).tags == ["x"]
    assert todo_list.remove_tag(todo_id, "absent")
    assert todo_list.get(todo_id).tags == ["x"]


def test_clear_completed_returns_removed_count():
    todo_list = TodoList()
    ids = [todo_list.add(f"todo {i}") for i in range(5)]
    todo_list.toggle(ids[0])
    todo_list.toggle(ids[3])

    assert todo_list.clear_completed() == 2
    assert todo_list.completed_count() == 0
    assert ids_in_order(todo_list) == [ids[1], ids[2], ids[4]]
    assert todo_list.clear_completed() == 0


def test_counts():
    todo_list = TodoList()
    a = todo_list.add("a")
    todo_list.add("b")
    todo_list.toggle(a)
    assert todo_list.active_count() == 1
    assert todo_list.completed_count() == 1
    assert todo_list.total_count() == 2


# ─────────────────────────────────────────────
#  Reorder
# ─────────────────────────────────────────────

def test_reorder_down_then_up(abc):
    todo_list, a, b, c = abc
    assert todo_list.reorder(a, c)
    assert ids_in_order(todo_list) == [b, c, a]

    assert todo_list.reorder(c, b)
    assert ids_in_order(todo_list) == [c, b, a]
    assert [t.order for t in todo_list.all()] == [1, 2, 3]


def test_reorder_up_inserts_before_target():
    todo_list = TodoList()
    a, b, c, d = (todo_list.add(t) for t in "ABCD")
    assert todo_list.reorder(d, b)
    assert ids_in_order(todo_list) == [a, d, b, c]


def test_reorder_down_takes_target_slot():
    todo_list = TodoList()
    a, b, c, d = (todo_list.add(t) for t in "ABCD")
    assert todo_list.reorder(a, c)
    assert ids_in_order(todo_list) == [b, c, a, d]


def test_reorder_onto_itself_fails(abc):
    todo_list, a, b, c = abc
    before = todo_list.all()
    assert not todo_list.reorder(b, b)
    assert todo_list.all() == before


def test_reorder_with_unknown_ids_fails(abc):
    todo_list, a, b, c = abc
    before = todo_list.all()
    assert not todo_list.reorder(42, a)
    assert not todo_list.reorder(a, 42)
    assert todo_list.all() == before


def test_reorder_after_remove_keeps_orders_unique():
    todo_list = TodoList()
    a, b, c, d = (todo_list.add(t) for t in "ABCD")
    todo_list.remove(b)
    assert todo_list.reorder(d, a)
    assert ids_in_order(todo_list) == [d, a, c]
    orders = [t.order for t in todo_list.all()]
    assert len(set(orders)) == len(orders)


def test_reorder_keeps_dense_orders_dense():
    rng = random.Random(1234)
    todo_list = TodoList()
    for i in range(12):
        todo_list.add(f"todo {i}")
    for _ in range(200):
        source, target = rng.sample(sorted(todo_list.todos), 2)
        assert todo_list.reorder(source, target)
        assert sorted(t.order for t in todo_list.all()) == list(range(1, 13))


def test_orders_stay_unique_under_mixed_operations():
    rng = random.Random(99)
    todo_list = TodoList()
    for step in range(300):
        ids = sorted(todo_list.todos)
        op = rng.random()
        if op < 0.4 or len(ids) < 2:
            todo_list.add(f"todo {step}")
        elif op < 0.55:
            todo_list.remove(rng.choice(ids))
        else:
            source, target = rng.sample(ids, 2)
            assert todo_list.reorder(source, target)
        orders = [t.order for t in todo_list.all()]
        assert len(set(orders)) == len(orders)


# ─────────────────────────────────────────────
#  Queries
# ─────────────────────────────────────────────

def test_all_returns_copies(abc):
    todo_list, a, b, c = abc
    todos = todo_list.all()
    todos[0].text = "changed"
    todos[0].tags.append("leak")
    assert todo_list.get(a).text == "A"
    assert todo_list.get(a).tags == []
    assert todo_list.all() == todo_list.all()


def test_get_missing_returns_none():
    assert TodoList().get(1) is None


def test_filtered_partitions_all():
    todo_list = TodoList()
    ids = [todo_list.add(f"todo {i}") for i in range(6)]
    for todo_id in ids[::2]:
        todo_list.toggle(todo_id)

    active = {t.id for t in todo_list.filtered(FilterState.ACTIVE)}
    completed = {t.id for t in todo_list.filtered(FilterState.COMPLETED)}
    assert active | completed == {t.id for t in todo_list.all()}
    assert not active & completed
    assert [t.id for t in todo_list.filtered(FilterState.ALL)] == ids_in_order(todo_list)


def test_filtered_keeps_order(abc):
    todo_list, a, b, c = abc
    todo_list.reorder(c, a)
    todo_list.toggle(b)
    assert [t.id for t in todo_list.filtered(FilterState.ACTIVE)] == [c, a]


def test_all_tags():
    todo_list = TodoList()
    a = todo_list.add("a")
    b = todo_list.add("b")
    todo_list.add_tag(a, "Work")
    todo_list.add_tag(b, "Work")
    todo_list.add_tag(b, "Home")
    assert todo_list.all_tags() == {"Work", "Home"}


# ─────────────────────────────────────────────
#  Snapshot
# ─────────────────────────────────────────────

def test_snapshot_round_trip():
    todo_list = TodoList()
    a = todo_list.add("Buy milk")
    b = todo_list.add("Walk dog")
    c = todo_list.add("Pay bills")
    todo_list.remove(todo_list.add("Temporary"))
    todo_list.reorder(c, a)
    todo_list.toggle(b)
    todo_list.add_tag(a, "Shopping")
    todo_list.set_due_date(c, datetime(2026, 12, 24, tzinfo=timezone.utc))

    restored = TodoList.from_dict(todo_list.to_dict())
    assert restored.all() == todo_list.all()
    assert restored.next_id == todo_list.next_id == 5
    assert restored.all_tags() == todo_list.all_tags()
    assert restored.add("next") == 5


def test_snapshot_layout():
    todo_list = TodoList()
    todo_list.add("x")
    assert todo_list.to_dict() == {
        "todos": {"1": {"id": 1, "text": "x", "completed": False, "tags": [], "order": 1}},
        "next_id": 2,
    }


def test_from_dict_never_reuses_stored_ids():
    snapshot = {"todos": {"4": {"id": 4, "text": "x", "order": 1}}, "next_id": 2}
    assert TodoList.from_dict(snapshot).next_id == 5


def test_from_dict_rejects_malformed_records():
    with pytest.raises(KeyError):
        TodoList.from_dict({"todos": {"1": {"text": "no id"}}})
    with pytest.raises(ValueError):
        TodoList.from_dict({"todos": {"1": {"id": 1, "text": "x", "due_date": "soon"}}})


# ─────────────────────────────────────────────
#  End to end
# ─────────────────────────────────────────────

def test_end_to_end_scenario():
    todo_list = TodoList()
    assert todo_list.add("Buy milk") == 1
    assert todo_list.add("Walk dog") == 2
    assert todo_list.add("Pay bills") == 3
    assert [t.order for t in todo_list.all()] == [1, 2, 3]

    assert todo_list.reorder(1, 3)
    assert ids_in_order(todo_list) == [2, 3, 1]
    assert [t.text for t in todo_list.all()] == ["Walk dog", "Pay bills", "Buy milk"]

    todo_list.toggle(2)
    assert todo_list.completed_count() == 1
    assert todo_list.clear_completed() == 1
    assert [t.text for t in todo_list.all()] == ["Pay bills", "Buy milk"]
