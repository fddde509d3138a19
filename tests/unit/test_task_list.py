"""Tests for the priority task list."""

import random

import pytest

from craftagent.exceptions import ToolValidationError
from craftagent.tasks import Task, TaskDescription, TaskList


def priorities(tasks: TaskList) -> list[int]:
    return [task.priority for task in tasks]


def assert_sorted(tasks: TaskList) -> None:
    values = priorities(tasks)
    assert values == sorted(values, reverse=True)


class TestSet:
    """Tests for replacing the whole list."""

    def test_set_sorts_and_defaults(self):
        """Test missing priority/completed default to 0/False and the list is sorted."""
        tasks = TaskList()
        indices = tasks.set(
            [
                {"title": "low"},
                {"title": "high", "priority": 10},
                {"title": "done", "priority": 5, "completed": True},
            ]
        )

        assert [t.title for t in tasks] == ["high", "done", "low"]
        assert indices == [2, 0, 1]
        assert tasks[2].priority == 0
        assert tasks[2].completed is False

    def test_set_is_stable(self):
        """Test equal priorities keep their given order."""
        tasks = TaskList([{"title": "a"}, {"title": "b"}, {"title": "c", "priority": 1}])
        assert [t.title for t in tasks] == ["c", "a", "b"]

    def test_set_replaces(self):
        """Test set discards previous tasks."""
        tasks = TaskList([{"title": "old"}])
        tasks.set([{"title": "new"}])
        assert [t.title for t in tasks] == ["new"]


class TestActive:
    """Tests for the active task."""

    def test_empty_list_has_no_active(self):
        """Test an empty list has no active task."""
        tasks = TaskList()
        assert tasks.active() is None
        assert tasks.active_index() == -1
        assert tasks.active_info() is None

    def test_active_is_first_incomplete(self):
        """Test the active task is the first incomplete one."""
        tasks = TaskList(
            [
                {"title": "a", "priority": 3, "completed": True},
                {"title": "b", "priority": 2},
                {"title": "c", "priority": 1},
            ]
        )
        assert tasks.active().title == "b"
        assert tasks.active_index() == 1

    def test_all_completed_has_no_active(self):
        """Test an all-completed list has no active task."""
        tasks = TaskList([{"title": "a", "completed": True}])
        assert tasks.active() is None

    def test_active_info_prefers_markdown(self):
        """Test active_info returns markdown when present, else title."""
        tasks = TaskList([{"title": "dig", "markdown": "Dig a 3x3 hole"}])
        assert tasks.active_info() == "Dig a 3x3 hole"

        tasks.set([{"title": "dig"}])
        assert tasks.active_info() == "dig"

    def test_mark_completed_moves_active(self):
        """Test completing the active task activates the next one."""
        tasks = TaskList([{"title": "a", "priority": 2}, {"title": "b", "priority": 1}])

        assert tasks.mark_completed() == 0
        assert tasks.active().title == "b"
        assert tasks.mark_completed() == 1
        assert tasks.mark_completed() == -1

    def test_mark_incomplete(self):
        """Test reverting a completed task."""
        tasks = TaskList([{"title": "a", "completed": True}])

        assert tasks.mark_incomplete(0).title == "a"
        assert tasks.active().title == "a"
        assert tasks.mark_incomplete(5) is None
        assert tasks.mark_incomplete(-1) is None


class TestAdd:
    """Tests for priority-ordered insertion."""

    def test_add_high_priority_to_empty_list(self):
        """Test add on an empty list returns 0 and becomes active."""
        tasks = TaskList()

        index = tasks.add({"title": "urgent", "priority": 100})

        assert index == 0
        assert tasks.active().title == "urgent"
        assert tasks.active().priority == 100

    def test_add_places_by_priority(self):
        """Test add inserts before the first lower-priority task."""
        tasks = TaskList([{"title": "a", "priority": 10}, {"title": "c", "priority": 1}])

        assert tasks.add({"title": "b", "priority": 5}) == 1
        assert [t.title for t in tasks] == ["a", "b", "c"]

    def test_add_equal_priority_goes_after(self):
        """Test equal priority tasks are queued after existing ones."""
        tasks = TaskList([{"title": "a", "priority": 5}, {"title": "c", "priority": 1}])

        assert tasks.add({"title": "b", "priority": 5}) == 1
        assert [t.title for t in tasks] == ["a", "b", "c"]

    def test_add_without_priority_goes_last(self):
        """Test a task without priority is appended with the last priority."""
        tasks = TaskList([{"title": "a", "priority": 10}, {"title": "b", "priority": 3}])

        assert tasks.add({"title": "c"}) == 2
        assert tasks[2].priority == 3

    def test_add_lowest_priority_goes_last(self):
        """Test a task with the lowest priority is appended."""
        tasks = TaskList([{"title": "a", "priority": 10}])

        assert tasks.add(TaskDescription(title="b", priority=-5)) == 1

    def test_add_accepts_task(self):
        """Test add takes Task objects too."""
        tasks = TaskList()
        assert tasks.add(Task(title="a", priority=2)) == 0
        assert tasks[0].priority == 2

    def test_add_without_title_is_rejected(self):
        """Test a mapping without a title raises a validation error and changes nothing."""
        tasks = TaskList([{"title": "a", "priority": 1}])

        with pytest.raises(ToolValidationError) as exc_info:
            tasks.add({"priority": 100})

        assert "title" in exc_info.value.fields
        assert [t.title for t in tasks] == ["a"]

    def test_set_without_title_keeps_old_list(self):
        """Test set validates every task before replacing the list."""
        tasks = TaskList([{"title": "a"}])

        with pytest.raises(ToolValidationError):
            tasks.set([{"title": "b"}, {"priority": 3}])

        assert [t.title for t in tasks] == ["a"]


class TestFrontBack:
    """Tests for add_front and add_back."""

    def test_add_front_inherits_active_priority(self):
        """Test add_front inserts before the active task with its priority."""
        tasks = TaskList(
            [
                {"title": "done", "priority": 9, "completed": True},
                {"title": "active", "priority": 4},
                {"title": "later", "priority": 1},
            ]
        )

        assert tasks.add_front({"title": "first"}) == 1
        assert tasks.active().title == "first"
        assert tasks.active().priority == 4

    def test_add_front_without_active_appends(self):
        """Test add_front on a list without active task appends."""
        tasks = TaskList([{"title": "done", "completed": True}])
        assert tasks.add_front({"title": "next"}) == 1

    def test_add_back_rejects_higher_priority(self):
        """Test add_back fails if the task would break the order."""
        tasks = TaskList([{"title": "a", "priority": 1}])

        assert tasks.add_back({"title": "b", "priority": 2}) == -1
        assert len(tasks) == 1


class TestInsert:
    """Tests for positional insertion."""

    def test_insert_between_neighbours(self):
        """Test insert accepts a priority between its neighbours."""
        tasks = TaskList([{"title": "a", "priority": 10}, {"title": "c", "priority": 1}])

        assert tasks.insert(1, {"title": "b", "priority": 5}) == 1
        assert [t.title for t in tasks] == ["a", "b", "c"]

    def test_insert_rejects_priority_above_previous(self):
        """Test insert refuses a priority higher than the previous task."""
        tasks = TaskList([{"title": "a", "priority": 10}, {"title": "c", "priority": 1}])

        assert tasks.insert(1, {"title": "b", "priority": 11}) == -1
        assert [t.title for t in tasks] == ["a", "c"]

    def test_insert_rejects_priority_below_next(self):
        """Test insert refuses a priority lower than the next task."""
        tasks = TaskList([{"title": "a", "priority": 10}, {"title": "c", "priority": 1}])

        assert tasks.insert(1, {"title": "b", "priority": 0}) == -1
        assert len(tasks) == 2

    def test_insert_without_priority_inherits_next(self):
        """Test a task without priority takes the next task's priority."""
        tasks = TaskList([{"title": "a", "priority": 10}, {"title": "c", "priority": 1}])

        tasks.insert(1, {"title": "b"})
        assert tasks[1].priority == 1

    def test_insert_at_end_inherits_previous(self):
        """Test inserting at the end takes the last task's priority."""
        tasks = TaskList([{"title": "a", "priority": 7}])

        assert tasks.insert(1, {"title": "b"}) == 1
        assert tasks[1].priority == 7

    @pytest.mark.parametrize("index", [-1, 3])
    def test_insert_out_of_range(self, index):
        """Test out-of-range indices are refused."""
        tasks = TaskList([{"title": "a"}, {"title": "b"}])
        assert tasks.insert(index, {"title": "x"}) == -1
        assert len(tasks) == 2


class TestRemove:
    """Tests for removal."""

    def test_remove_returns_task(self):
        """Test remove returns the removed task."""
        tasks = TaskList([{"title": "a"}, {"title": "b"}])

        assert tasks.remove(0).title == "a"
        assert [t.title for t in tasks] == ["b"]

    @pytest.mark.parametrize("index", [-1, 2, 100])
    def test_remove_out_of_range(self, index):
        """Test out-of-range indices return None."""
        tasks = TaskList([{"title": "a"}, {"title": "b"}])
        assert tasks.remove(index) is None
        assert len(tasks) == 2

    def test_clear(self):
        """Test clear empties the list."""
        tasks = TaskList([{"title": "a"}])
        tasks.clear()
        assert len(tasks) == 0


def test_random_operations_keep_order():
    """Test the list stays sorted under a random mix of operations."""
    rng = random.Random(1234)
    tasks = TaskList()

    for step in range(500):
        op = rng.choice(["add", "insert", "remove", "add_front", "add_back"])
        priority = rng.choice([None, rng.randint(-5, 5)])
        task = {"title": f"t{step}", "priority": priority}

        if op == "add":
            tasks.add(task)
        elif op == "insert":
            tasks.insert(rng.randint(-1, len(tasks) + 1), task)
        elif op == "remove":
            tasks.remove(rng.randint(-1, len(tasks)))
        elif op == "add_front":
            tasks.add_front(task)
        else:
            tasks.add_back(task)

        assert_sorted(tasks)
