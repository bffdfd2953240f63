# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from models import Status, Task
from storage import Storage, StorageError


class FailingStorage(Storage):
    """Storage whose saves fail until `fail` is switched off."""

    def __init__(self, directory: Path) -> None:
        super().__init__(directory)
        self.fail = True
        self.saved: list[list[Task]] = []

    def save(self, tasks) -> None:
        if self.fail:
            raise StorageError("disk full")
        self.saved.append(list(tasks))
        super().save(tasks)


@pytest.fixture()
def store_dir(tmp_path: Path) -> Path:
    """Store directory that does not exist yet (first run)."""
    return tmp_path / ".ado"


@pytest.fixture()
def storage(store_dir: Path) -> Storage:
    return Storage(store_dir)


@pytest.fixture()
def failing_storage(store_dir: Path) -> FailingStorage:
    return FailingStorage(store_dir)


@pytest.fixture()
def mixed_tasks() -> list[Task]:
    return [
        Task("ship release", Status.DONE),
        Task("write spec", Status.TODO),
        Task("port to perl", Status.WONTDO),
        Task("buy milk", Status.TODO),
        Task("fix ci", Status.DONE),
    ]
