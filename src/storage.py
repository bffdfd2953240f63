"""Persistence helpers (load/save) for the task list.

The store is a directory, passed in explicitly, holding a single
tasks.json. The file is a JSON object keyed by status storage key
("wontdo", "todo", "done"), each mapping to a list of {"name": ...}
records in display order. Saves replace the whole file atomically.
"""
import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

from models import STATUS_KEYS, Status, Task, status_for_key

logger = logging.getLogger(__name__)

TASKS_FILE_NAME = 'tasks.json'

PathLike = Union[str, Path]
TasksDict = Dict[str, List[Dict[str, Any]]]


class StorageError(Exception):
    """The task store could not be read, parsed or written."""


def load_tasks(directory: PathLike) -> List[Task]:
    """Load all tasks from `directory`, grouped in status order.

    Missing directory or file -> empty list (first run).
    """
    directory = Path(directory)
    path = directory / TASKS_FILE_NAME
    try:
        if not directory.exists():
            return []
        if not directory.is_dir():
            raise StorageError(f"{directory} exists but is not a directory")
        if not path.exists():
            return []
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except OSError as exc:
        raise StorageError(f"could not read {path}: {exc}") from exc
    except ValueError as exc:
        raise StorageError(f"{path} is not valid JSON: {exc}") from exc
    tasks = _tasks_from_dict(data, path)
    logger.debug("Loaded %d tasks from %s", len(tasks), path)
    return tasks


def save_tasks(directory: PathLike, tasks: Iterable[Task]) -> None:
    """Replace the persisted task list with `tasks` (all-or-nothing).

    An existing tasks.json keeps its permission bits.
    """
    directory = Path(directory)
    path = directory / TASKS_FILE_NAME
    data = _tasks_to_dict(tasks)
    tmp_name = None
    try:
        directory.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile('w', delete=False, dir=str(directory),
                                         prefix='.tasks-', suffix='.tmp', encoding='utf-8') as tmp:
            tmp_name = tmp.name
            json.dump(data, tmp, indent=4)
            tmp.flush()
            os.fsync(tmp.fileno())
        if path.exists():
            os.chmod(tmp_name, stat.S_IMODE(os.stat(path).st_mode))
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        raise StorageError(f"could not write {path}: {exc}") from exc
    finally:
        # failed or interrupted saves leave no temp file behind
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
    logger.debug("Saved %d tasks to %s", sum(len(v) for v in data.values()), path)


class Storage:
    """Task store bound to one directory."""

    def __init__(self, directory: PathLike):
        self.directory = Path(directory)

    def load(self) -> List[Task]:
        return load_tasks(self.directory)

    def save(self, tasks: Iterable[Task]) -> None:
        save_tasks(self.directory, tasks)

    def __repr__(self) -> str:
        return f"Storage({str(self.directory)!r})"


# -------------------- encoding --------------------
def _tasks_to_dict(tasks: Iterable[Task]) -> TasksDict:
    data: TasksDict = {STATUS_KEYS[s]: [] for s in Status}
    for task in tasks:
        data[task.status.key].append({'name': task.name})
    return data


def _tasks_from_dict(data: Any, path: Path) -> List[Task]:
    if not isinstance(data, dict):
        raise StorageError(f"{path}: expected an object of status groups")
    groups: Dict[Status, List[Task]] = {s: [] for s in Status}
    for key, records in data.items():
        try:
            status = status_for_key(key)
        except KeyError:
            raise StorageError(f"{path}: unknown status group {key!r}") from None
        if not isinstance(records, list):
            raise StorageError(f"{path}: group {key!r} is not a list")
        for position, raw in enumerate(records):
            name = raw.get('name') if isinstance(raw, dict) else None
            if not isinstance(name, str) or not name.strip():
                raise StorageError(f"{path}: malformed record {position} in {key!r}")
            groups[status].append(Task(name=name, status=status))
    return [task for status in Status for task in groups[status]]
