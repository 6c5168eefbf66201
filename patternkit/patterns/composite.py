"""
Composite pattern.

Leaf tasks and composite tasks share the :class:`Task` interface, so a client
asks any node for its total time without caring whether it is a single step
or a tree of sub-tasks.
"""
from abc import ABC, abstractmethod
from typing import Iterator, List, Optional, Union

from patternkit.domain.exceptions import CompositeCycleError, PatternUsageError


class Task(ABC):
    """Component interface shared by leaves and composites."""

    def __init__(self, name: str):
        self.name = name
        self.parent: Optional["CompositeTask"] = None

    @abstractmethod
    def get_time_required(self) -> float:
        """Minutes needed to complete this task."""

    def walk(self) -> Iterator["Task"]:
        """Depth-first, pre-order traversal starting at this task."""
        yield self

    def path(self) -> List[str]:
        """Names from the root down to this task."""
        names = []
        node: Optional[Task] = self
        while node is not None:
            names.append(node.name)
            node = node.parent
        return list(reversed(names))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class SimpleTask(Task):
    """Leaf task with a fixed duration."""

    def __init__(self, name: str, minutes: float):
        super().__init__(name)
        self.minutes = minutes

    def get_time_required(self) -> float:
        return self.minutes


class CompositeTask(Task):
    """Task made of sub-tasks; its time is the sum of its children."""

    def __init__(self, name: str, sub_tasks: Optional[List[Task]] = None):
        super().__init__(name)
        self._sub_tasks: List[Task] = []
        for task in sub_tasks or []:
            self.add_sub_task(task)

    def add_sub_task(self, task: Task) -> "CompositeTask":
        """
        Add ``task`` as the last child.

        A task has at most one parent, so a task that already belongs to
        another composite is moved here.

        Raises:
            CompositeCycleError: If ``task`` is this composite or one of its ancestors
        """
        if not isinstance(task, Task):
            raise PatternUsageError(f"Sub-task must be a Task, got {type(task).__name__}")
        node: Optional[Task] = self
        while node is not None:
            if node is task:
                raise CompositeCycleError(self.name, task.name)
            node = node.parent
        if task.parent is not None:
            task.parent.remove_sub_task(task)
        self._sub_tasks.append(task)
        task.parent = self
        return self

    def __lshift__(self, task: Task) -> "CompositeTask":
        return self.add_sub_task(task)

    def remove_sub_task(self, task: Task) -> None:
        self._sub_tasks.remove(task)
        task.parent = None

    def __getitem__(self, index: Union[int, slice]) -> Union[Task, List[Task]]:
        return self._sub_tasks[index]

    def __len__(self) -> int:
        return len(self._sub_tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._sub_tasks))

    def __contains__(self, task: object) -> bool:
        return task in self._sub_tasks

    def get_time_required(self) -> float:
        return sum(task.get_time_required() for task in self._sub_tasks)

    def walk(self) -> Iterator[Task]:
        yield self
        for task in list(self._sub_tasks):
            yield from task.walk()

    def total_leaf_count(self) -> int:
        return sum(1 for task in self.walk() if not isinstance(task, CompositeTask))

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "minutes": self.get_time_required(),
            "sub_tasks": [
                task.to_dict() if isinstance(task, CompositeTask)
                else {"name": task.name, "minutes": task.get_time_required()}
                for task in self._sub_tasks
            ],
        }


class MakeBatterTask(CompositeTask):
    def __init__(self):
        super().__init__(
            "Make batter",
            [
                SimpleTask("Add dry ingredients", 1.0),
                SimpleTask("Add liquids", 1.0),
                SimpleTask("Mix", 3.0),
            ],
        )


class MakeCakeTask(CompositeTask):
    def __init__(self):
        super().__init__(
            "Make cake",
            [
                MakeBatterTask(),
                SimpleTask("Fill pan", 1.0),
                SimpleTask("Bake", 30.0),
                SimpleTask("Frost", 5.0),
            ],
        )
