"""Task list logic: status-grouped ordering, selection cursor, mutation.

Tasks are kept in one list sorted by status (WONTDO, TODO, DONE) with
insertion order preserved inside each group, so the list order is the
visible order. The cursor is None only when the list is empty.
"""
from typing import Iterable, Iterator, List, Optional, Tuple, Dict
from models import Status, Task


class InvalidInput(ValueError):
    """User input rejected before any mutation (e.g. an empty task name)."""


def grouped(tasks: Iterable[Task]) -> List[Task]:
    """Stable sort on the status order."""
    return sorted(tasks, key=lambda t: t.status)


class TaskList:
    def __init__(self, tasks: Optional[Iterable[Task]] = None):
        self.tasks: List[Task] = grouped(tasks or [])
        self.cursor: Optional[int] = 0 if self.tasks else None

    # -------------------- queries --------------------
    @property
    def selected(self) -> Optional[Task]:
        if self.cursor is None:
            return None
        return self.tasks[self.cursor]

    def groups(self) -> List[Tuple[Status, List[Tuple[int, Task]]]]:
        """Every status in order with its (index, task) pairs; empty groups included."""
        result: List[Tuple[Status, List[Tuple[int, Task]]]] = []
        for status in Status:
            result.append((status, [(i, t) for i, t in enumerate(self.tasks) if t.status == status]))
        return result

    def counts(self) -> Dict[Status, int]:
        return {status: len(members) for status, members in self.groups()}

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self.tasks)

    # -------------------- navigation --------------------
    def select_next(self) -> None:
        if self.cursor is not None:
            self.cursor = min(self.cursor + 1, len(self.tasks) - 1)

    def select_previous(self) -> None:
        if self.cursor is not None:
            self.cursor = max(self.cursor - 1, 0)

    def select_first(self) -> None:
        if self.tasks:
            self.cursor = 0

    def select_last(self) -> None:
        if self.tasks:
            self.cursor = len(self.tasks) - 1

    # -------------------- mutation --------------------
    def create(self, name: str) -> Task:
        """Add a TODO task at the end of its group and select it."""
        title = (name or '').strip()
        if not title:
            raise InvalidInput("Task name required.")
        task = Task(name=title, status=Status.TODO)
        self.cursor = self._insert_at_group_end(task)
        return task

    def delete_selected(self) -> Optional[Task]:
        if self.cursor is None:
            return None
        task = self.tasks.pop(self.cursor)
        if not self.tasks:
            self.cursor = None
        else:
            # the next task slides into the vacated slot; fall back to the new last one
            self.cursor = min(self.cursor, len(self.tasks) - 1)
        return task

    def promote_selected(self) -> bool:
        return self._shift_selected(1)

    def demote_selected(self) -> bool:
        return self._shift_selected(-1)

    def toggle_selected(self) -> bool:
        """Flip TODO <-> DONE. WONTDO tasks are left alone."""
        task = self.selected
        if task is None or task.status == Status.WONTDO:
            return False
        return self._shift_selected(1 if task.status == Status.TODO else -1)

    def _shift_selected(self, step: int) -> bool:
        task = self.selected
        if task is None:
            return False
        new_status = task.status.shifted(step)
        if new_status == task.status:
            return False
        del self.tasks[self.cursor]
        task.status = new_status
        self.cursor = self._insert_at_group_end(task)
        return True

    def _insert_at_group_end(self, task: Task) -> int:
        index = sum(1 for t in self.tasks if t.status <= task.status)
        self.tasks.insert(index, task)
        return index

    def __str__(self) -> str:
        counts = self.counts()
        return ', '.join(f'{s.label}: {counts[s]} tasks' for s in Status)
