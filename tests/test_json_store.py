"""Tests for the file and in-memory task stores."""

import json
import logging
import os
from datetime import date

import pytest

from taskcycle.adapters import json_store
from taskcycle.adapters.json_store import JsonTaskStore, MemoryTaskStore
from taskcycle.core.occurrences import occurrences
from taskcycle.core.tasks import Recurrence, Task


@pytest.fixture
def path(tmp_path):
    return tmp_path / "data" / "tasks.json"


@pytest.fixture
def store(path):
    return JsonTaskStore(path)


def good_record(id="1", **overrides):
    record = {
        "id": id,
        "text": f"Task {id}",
        "completed": False,
        "priority": 2,
        "category": "Personal",
        "dueDate": "2024-06-01",
        "dueTime": "",
        "recurring": "none",
    }
    record.update(overrides)
    return record


class TestJsonTaskStore:
    def test_missing_file_is_empty(self, store):
        assert store.load_tasks() == []
        assert store.load_completed() == []

    def test_save_and_load(self, store, path):
        tasks = [
            Task(id="a", text="Run", due_date="2024-06-01", recurring=Recurrence.DAILY),
            Task(id="b", text="Call", due_date="2024-06-02", participants=["Sam"]),
        ]
        store.save_tasks(tasks)

        assert path.exists()
        assert store.load_tasks() == tasks
        assert store.load_completed() == []

    def test_lists_are_saved_independently(self, store, path):
        live = [Task(id="a", text="Run", due_date="2024-06-01")]
        done = [Task(id="z", text="Ran", due_date="2024-05-31", completed=True)]

        store.save_tasks(live)
        store.save_completed(done)

        data = json.loads(path.read_text())
        assert [r["id"] for r in data["tasks"]] == ["a"]
        assert [r["id"] for r in data["completedTasks"]] == ["z"]
        assert store.load_tasks() == live
        assert store.load_completed() == done

    def test_records_use_wire_keys(self, store, path):
        store.save_tasks([Task(id="a", text="Run", due_date="2024-06-01", notify_before=True)])
        record = json.loads(path.read_text())["tasks"][0]
        assert record["dueDate"] == "2024-06-01"
        assert record["notifyBefore"] is True
        assert record["recurring"] == "none"

    def test_malformed_records_are_dropped(self, store, path, caplog):
        path.parent.mkdir(parents=True)
        path.write_text(
            json.dumps(
                {
                    "tasks": [
                        good_record("1"),
                        {"id": "2", "priority": 1},
                        good_record("3", priority="high"),
                        "not a record",
                        good_record("5"),
                    ]
                }
            )
        )

        with caplog.at_level(logging.WARNING):
            tasks = store.load_tasks()

        assert [t.id for t in tasks] == ["1", "5"]
        assert "Dropping tasks[1]" in caplog.text

    def test_optional_fields_default(self, store, path):
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"tasks": [good_record("1")]}))

        task = store.load_tasks()[0]
        assert task.notes == ""
        assert task.participants == []
        assert task.notify_before is False

    def test_corrupt_file_is_empty(self, store, path, caplog):
        path.parent.mkdir(parents=True)
        path.write_text("{not json")

        with caplog.at_level(logging.WARNING):
            assert store.load_tasks() == []
        assert "not valid JSON" in caplog.text

    def test_wrong_shape_is_empty(self, store, path):
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"tasks": {"id": "1"}}))
        assert store.load_tasks() == []

    def test_save_leaves_no_temp_files(self, store, path):
        store.save_tasks([Task(id="a", text="Run", due_date="2024-06-01")])
        store.save_completed([])
        assert [p.name for p in path.parent.iterdir()] == ["tasks.json"]

    def test_save_writes_both_lists_in_one_replace(self, store, path, monkeypatch):
        replaced = []
        real_replace = os.replace

        def counting_replace(src, dst):
            replaced.append(dst)
            real_replace(src, dst)

        monkeypatch.setattr(json_store.os, "replace", counting_replace)
        live = [Task(id="a", text="Run", due_date="2024-06-02", recurring=Recurrence.DAILY)]
        done = [Task(id="z", text="Run", due_date="2024-06-01", completed=True)]

        store.save(live, done)

        assert replaced == [path]
        assert store.load_tasks() == live
        assert store.load_completed() == done

    def test_failed_save_keeps_previous_file(self, store, path, monkeypatch):
        store.save([Task(id="a", text="Run", due_date="2024-06-01")], [])

        def failing_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(json_store.os, "replace", failing_replace)
        with pytest.raises(OSError):
            store.save([], [Task(id="a", text="Run", due_date="2024-06-01", completed=True)])

        assert [t.id for t in store.load_tasks()] == ["a"]
        assert store.load_completed() == []
        assert [p.name for p in path.parent.iterdir()] == ["tasks.json"]

    def test_missing_due_date_uses_clock(self, path):
        path.parent.mkdir(parents=True)
        record = good_record("1")
        del record["dueDate"]
        path.write_text(json.dumps({"tasks": [record]}))

        store = JsonTaskStore(path, clock=lambda: date(2031, 3, 4))
        assert store.load_tasks()[0].due_date == "2031-03-04"

    def test_expands_user_path(self):
        store = JsonTaskStore("~/tasks.json")
        assert "~" not in str(store.path)


class TestMemoryTaskStore:
    def test_round_trip_returns_fresh_objects(self):
        store = MemoryTaskStore()
        task = Task(id="a", text="Run", due_date="2024-06-01")
        store.save_tasks([task])

        loaded = store.load_tasks()
        assert loaded == [task]
        assert loaded[0] is not task

    def test_drops_malformed(self):
        store = MemoryTaskStore(tasks=[good_record("1"), {"text": "no priority"}])
        assert [t.id for t in store.load_tasks()] == ["1"]

    def test_save_replaces_both_lists(self):
        store = MemoryTaskStore(tasks=[good_record("1")])
        store.save([], [Task(id="1", text="Task 1", due_date="2024-06-01", completed=True)])

        assert store.load_tasks() == []
        assert [t.id for t in store.load_completed()] == ["1"]

    def test_missing_due_date_uses_clock(self):
        record = good_record("1")
        del record["dueDate"]
        store = MemoryTaskStore(tasks=[record], clock=lambda: date(2031, 3, 4))

        assert store.load_tasks()[0].due_date == "2031-03-04"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"participants": 5},
            {"participants": "Sam"},
            {"category": ["Work"]},
            {"notes": 7},
        ],
    )
    def test_drops_records_with_wrong_field_types(self, overrides, caplog):
        store = MemoryTaskStore(tasks=[good_record("1", **overrides), good_record("2")])

        with caplog.at_level(logging.WARNING):
            tasks = store.load_tasks()

        assert [t.id for t in tasks] == ["2"]
        assert "Dropping tasks[0]" in caplog.text
        assert [o.task.id for o in occurrences(tasks, ["All"], date(2024, 6, 1))] == ["2"]
