"""Unit tests for the JSON file store."""

import json

import pytest

from errors import StorageError
from storage import Todo, TodoStore, next_id


class TestTodoStore:
    """Test cases for TodoStore."""

    def test_load_creates_missing_file(self, db_file):
        """Loading a missing file creates it as an empty array."""
        store = TodoStore(str(db_file))

        assert store.load() == []
        assert json.loads(db_file.read_text()) == []

    def test_save_then_load_keeps_order(self, db_file):
        """Saved todos come back identical and in the same order."""
        store = TodoStore(str(db_file))
        todos = [
            Todo(id=3, title="c", completed=True),
            Todo(id=1, title="a"),
            Todo(id=2, title="b", completed=False),
        ]

        store.save(todos)

        assert store.load() == todos

    def test_save_is_pretty_printed(self, db_file):
        """The file holds an indented JSON array of plain objects."""
        store = TodoStore(str(db_file))
        store.save([Todo(id=1, title="a")])

        text = db_file.read_text()
        assert text.startswith("[\n  {")
        assert json.loads(text) == [{"id": 1, "title": "a", "completed": False}]
        assert not (db_file.parent / "todos.json.tmp").exists()

    def test_load_invalid_json(self, db_file):
        """Garbage in the file is a storage error."""
        db_file.write_text("not json")

        with pytest.raises(StorageError, match="Could not decode"):
            TodoStore(str(db_file)).load()

    def test_load_invalid_utf8(self, db_file):
        """Bytes that do not decode are a storage error, not a crash."""
        db_file.write_bytes(b"[\xff]")

        with pytest.raises(StorageError, match="Could not decode"):
            TodoStore(str(db_file)).load()

    def test_load_not_an_array(self, db_file):
        """A JSON object instead of an array is a storage error."""
        db_file.write_text('{"id": 1}')

        with pytest.raises(StorageError, match="expected a JSON array"):
            TodoStore(str(db_file)).load()

    def test_load_malformed_item(self, db_file):
        """Items must carry an int id, a string title and a bool flag."""
        db_file.write_text('[{"id": "1", "title": "a", "completed": false}]')

        with pytest.raises(StorageError):
            TodoStore(str(db_file)).load()

    def test_load_unreadable(self, tmp_path):
        """A path that cannot be read as a file is a storage error."""
        with pytest.raises(StorageError, match="Could not read"):
            TodoStore(str(tmp_path)).load()

    def test_save_unwritable(self, tmp_path):
        """Writing into a missing directory is a storage error."""
        store = TodoStore(str(tmp_path / "missing" / "todos.json"))

        with pytest.raises(StorageError, match="Could not write"):
            store.save([])


class TestNextId:
    """Test cases for next_id."""

    def test_empty(self):
        assert next_id([]) == 1

    def test_max_plus_one(self):
        todos = [Todo(id=4, title="a"), Todo(id=2, title="b")]
        assert next_id(todos) == 5
