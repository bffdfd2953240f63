# tests/test_cli.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

import main as main_module
from cli import Session, board_lines, print_board
from keys import Action
from models import Status, Task
from storage import TASKS_FILE_NAME, Storage
from tasklist import TaskList


def _no_name():
    raise AssertionError("text entry should not be requested")


def _answer(text):
    return lambda: text


def _type(session: Session, keys: str, read_name=_no_name) -> list:
    return [session.handle_key(k, read_name) for k in keys]


def _pairs(tasks) -> list[tuple[str, Status]]:
    return [(t.name, t.status) for t in tasks]


def test_end_to_end_promote_delete_create(storage: Storage) -> None:
    storage.save([Task("write spec"), Task("buy milk")])
    session = Session(storage, TaskList(storage.load()))
    tl = session.task_list
    assert tl.cursor == 0

    _type(session, "l")
    assert _pairs(tl) == [("buy milk", Status.TODO), ("write spec", Status.DONE)]
    assert tl.selected.name == "write spec"

    _type(session, "D")
    assert tl.selected.name == "buy milk"

    session.handle_key("o", _answer("rest"))
    assert tl.selected.name == "rest"

    reloaded = Storage(storage.directory).load()
    assert _pairs(reloaded) == [("buy milk", Status.TODO), ("rest", Status.TODO)]


def test_every_mutation_is_persisted(storage: Storage) -> None:
    session = Session(storage, TaskList())
    session.handle_key("o", _answer("a"))
    assert _pairs(storage.load()) == [("a", Status.TODO)]
    _type(session, "h")
    assert _pairs(storage.load()) == [("a", Status.WONTDO)]
    _type(session, "dd")
    assert storage.load() == []


def test_navigation_does_not_write(storage: Storage) -> None:
    session = Session(storage, TaskList([Task("a"), Task("b")]))
    _type(session, "jkgGjq")
    assert not storage.directory.exists()


def test_boundary_status_change_does_not_write(storage: Storage) -> None:
    session = Session(storage, TaskList([Task("w", Status.WONTDO)]))
    _type(session, "h")
    assert not storage.directory.exists()


def test_delete_prefix_then_other_key_moves_instead(storage: Storage) -> None:
    session = Session(storage, TaskList([Task("a"), Task("b")]))
    actions = _type(session, "dj")
    assert actions == [None, Action.SELECT_NEXT]
    assert len(session.task_list) == 2
    assert session.task_list.selected.name == "b"


def test_gg_jumps_to_top(storage: Storage) -> None:
    session = Session(storage, TaskList([Task("a"), Task("b"), Task("c")]))
    _type(session, "G")
    assert session.task_list.cursor == 2
    _type(session, "gg")
    assert session.task_list.cursor == 0


def test_empty_name_is_rejected_without_mutation(storage: Storage) -> None:
    session = Session(storage, TaskList([Task("a")]))
    session.handle_key("o", _answer("   "))
    assert len(session.task_list) == 1
    assert session.message == "Task name required."
    assert not storage.directory.exists()


def test_cancelled_create_does_nothing(storage: Storage) -> None:
    session = Session(storage, TaskList())
    assert session.handle_key("o", _answer(None)) is Action.BEGIN_CREATE
    assert len(session.task_list) == 0
    assert session.message is None


def test_save_failure_keeps_state_and_retries(failing_storage, caplog) -> None:
    session = Session(failing_storage, TaskList([Task("a")]))
    with caplog.at_level(logging.WARNING, logger="cli"):
        _type(session, "l")
    assert session.task_list.selected.status == Status.DONE
    assert session.dirty is True
    assert session.message.startswith("Not saved")
    assert "Save failed" in caplog.text

    failing_storage.fail = False
    session.handle_key("o", _answer("b"))
    assert session.dirty is False
    assert _pairs(failing_storage.load()) == [("b", Status.TODO), ("a", Status.DONE)]


def test_quit_retries_pending_save(failing_storage) -> None:
    session = Session(failing_storage, TaskList([Task("a")]))
    _type(session, "D")
    assert session.dirty
    failing_storage.fail = False
    assert session.handle_key("q", _no_name) is Action.QUIT
    assert session.running is False
    assert session.dirty is False
    assert failing_storage.load() == []


def test_quit_with_failing_save_reports_loss(failing_storage, caplog) -> None:
    session = Session(failing_storage, TaskList([Task("a")]))
    _type(session, "D")
    with caplog.at_level(logging.ERROR, logger="cli"):
        assert session.quit() is False
    assert "unsaved changes" in caplog.text


def test_board_lines_marks_selection_and_empty_groups() -> None:
    tl = TaskList([Task("a"), Task("b", Status.DONE)])
    tl.select_last()
    rows = board_lines(tl)
    assert rows == [
        ("header", Status.WONTDO, "WON'T DO (0)"),
        ("empty", Status.WONTDO, "    (empty)"),
        ("header", Status.TODO, "TO DO (1)"),
        ("task", Status.TODO, "  [ ] a"),
        ("header", Status.DONE, "DONE (1)"),
        ("selected", Status.DONE, "> [x] b"),
    ]


def test_print_board_lists_without_cursor(capsys) -> None:
    print_board(TaskList([Task("x", Status.WONTDO), Task("y")]))
    out = capsys.readouterr().out
    assert "X  x" in out
    assert "[ ] y" in out
    assert ">" not in out


# -------------------- entry point --------------------
@pytest.fixture()
def quiet_main(monkeypatch, tmp_path: Path):
    monkeypatch.setattr(main_module, "setup_logging", lambda *a, **k: None)
    monkeypatch.chdir(tmp_path)
    for name in ("ADO_DIR", "ADO_LOG_FILE", "ADO_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return main_module.main


def test_main_list_on_first_run(quiet_main, capsys, tmp_path: Path) -> None:
    assert quiet_main(["--list"]) == 0
    assert "TO DO (0)" in capsys.readouterr().out
    assert not (tmp_path / ".ado").exists()


def test_main_list_reads_dir_option(quiet_main, capsys, tmp_path: Path) -> None:
    Storage(tmp_path / "elsewhere").save([Task("remote task")])
    assert quiet_main(["--list", "--dir", str(tmp_path / "elsewhere")]) == 0
    assert "remote task" in capsys.readouterr().out


def test_main_corrupt_store_exits_nonzero(quiet_main, tmp_path: Path) -> None:
    store = tmp_path / ".ado"
    store.mkdir()
    (store / TASKS_FILE_NAME).write_text("{broken")
    assert quiet_main(["--list"]) == 1


def test_main_unreadable_store_exits_nonzero(quiet_main, monkeypatch) -> None:
    def _denied(self) -> bool:
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "exists", _denied)
    assert quiet_main(["--list"]) == 1
