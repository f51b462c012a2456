import json
import os
from typing import List

from pydantic import BaseModel, StrictBool, StrictInt, StrictStr

from errors import StorageError


class Todo(BaseModel):
    id: StrictInt
    title: StrictStr
    completed: StrictBool = False


def next_id(todos: List[Todo]) -> int:
    return max((t.id for t in todos), default=0) + 1


class TodoStore:
    """The whole collection lives in one JSON array on disk.

    Every call reads or rewrites the full file. There is no locking, so two
    requests mutating at the same time can overwrite each other's changes.
    """

    def __init__(self, path: str):
        self.path = path

    def load(self) -> List[Todo]:
        try:
            with open(self.path, "rb") as f:
                data = f.read()
        except FileNotFoundError:
            self.save([])
            return []
        except OSError as e:
            raise StorageError(f"Could not read {self.path}: {e}") from e

        try:
            items = json.loads(data)
            if not isinstance(items, list):
                raise ValueError("expected a JSON array")
            return [Todo.model_validate(item) for item in items]
        except ValueError as e:
            raise StorageError(f"Could not decode {self.path}: {e}") from e

    def save(self, todos: List[Todo]):
        # write atomically
        tmp = self.path + ".tmp"
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump([t.model_dump() for t in todos], f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except OSError as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e
