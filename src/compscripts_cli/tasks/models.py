"""Flat-file task list: tasks, notes and their subtasks."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional

import click

from ..core.data import dump_json_array, find_lowest_free_value, load_json_array, write_text
from ..core.errors import CompscriptsError, RepeatedIdError


@dataclass(order=True)
class Task:
    """A task (``state`` is True once completed) or a note (``state`` is None)."""
    id: int
    name: str = field(compare=False)
    context: Optional[str] = field(default=None, compare=False)
    state: Optional[bool] = field(default=False, compare=False)
    children: List["Task"] = field(default_factory=list, compare=False)

    @property
    def is_note(self) -> bool:
        return self.state is None

    @property
    def state_label(self) -> str:
        if self.state is None:
            return "NOTE"
        return "DONE" if self.state else "TODO"

    def walk(self) -> Iterator["Task"]:
        yield self
        for child in self.children:
            yield from child.walk()

    def lines(self, level: int = 0) -> List[str]:
        """Report lines for this task and its subtasks, two spaces per level."""
        context = f" ({self.context})" if self.context is not None else ""
        lines = [f"{' ' * (level * 2)}({self.id}) {self.state_label} {self.name}{context}"]
        for child in self.children:
            lines.extend(child.lines(level + 1))
        return lines

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        try:
            return cls(
                id=int(data["id"]),
                name=str(data["name"]),
                context=data.get("context"),
                state=data.get("state"),
                children=[cls.from_dict(c) for c in data.get("children", [])],
            )
        except KeyError as e:
            raise ValueError(f"task record is missing field {e}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "context": self.context,
            "state": self.state,
            "children": [c.to_dict() for c in self.children],
        }


class TaskManager:
    """The task list plus the set of ids in use anywhere in the tree."""

    def __init__(self, data: Iterable[Task]):
        self.data: List[Task] = list(data)
        self.used_ids = set()
        self.modified = False

        for task in self.walk():
            if task.id in self.used_ids:
                raise RepeatedIdError(task.id)
            self.used_ids.add(task.id)

    @classmethod
    def from_json(cls, contents: str) -> "TaskManager":
        return cls(Task.from_dict(r) for r in load_json_array(contents))

    def to_json(self) -> str:
        return dump_json_array((t.to_dict() for t in self.data), pretty=False)

    def save_if_modified(self, path: Path) -> bool:
        if not self.modified:
            return False
        write_text(path, self.to_json())
        return True

    def walk(self) -> Iterator[Task]:
        for task in self.data:
            yield from task.walk()

    def find(self, task_id: int) -> Optional[Task]:
        return next((t for t in self.walk() if t.id == task_id), None)

    def find_invalid_ids(self, ids: Iterable[int]) -> List[int]:
        return [i for i in ids if i not in self.used_ids]

    def surface_ids(self) -> List[int]:
        return [t.id for t in self.data]

    def next_ids(self) -> List[int]:
        """Surface tasks that are not completed (notes included)."""
        return [t.id for t in self.data if t.state is not True]

    def _new_task(self, name: str, context: Optional[str], note: bool) -> Task:
        task_id = find_lowest_free_value(self.used_ids)
        self.used_ids.add(task_id)
        self.modified = True
        return Task(id=task_id, name=name, context=context, state=None if note else False)

    def add_task(self, name: str, context: Optional[str] = None, note: bool = False) -> int:
        task = self._new_task(name, context, note)
        self.data.append(task)
        return task.id

    def add_subtask(self, parent_id: int, name: str, context: Optional[str] = None, note: bool = False) -> int:
        parent = self.find(parent_id)
        if parent is None:
            raise CompscriptsError(f"Could not find task with IDs [{parent_id}]")
        task = self._new_task(name, context, note)
        parent.children.append(task)
        return task.id

    def modify(self, task_id: int, name: Optional[str] = None, context: Optional[str] = None,
               note: Optional[bool] = None):
        task = self.find(task_id)
        if name is not None:
            task.name = name
        if context is not None:
            task.context = context or None
        if note is True:
            task.state = None
        elif note is False and task.state is None:
            task.state = False
        self.modified = True

    def complete(self, task_id: int) -> bool:
        """Mark a task as done. Returns False (and changes nothing) for notes."""
        task = self.find(task_id)
        if task.is_note:
            return False
        task.state = True
        self.modified = True
        return True

    def report(self, name: str, ids: Iterable[int], out=None):
        click.echo(f"Report: {name}", file=out)
        for task_id in ids:
            for line in self.find(task_id).lines():
                click.echo(line, file=out)
