"""Main entry point for ado.

Loads the task list for the working directory (./.ado unless ADO_DIR or
--dir say otherwise) and starts the interactive session.
"""
import argparse
import logging
from pathlib import Path
from typing import List, Optional

from cli import CLI, Session, print_board
from config import get_settings
from logging_setup import setup_logging
from storage import Storage, StorageError
from tasklist import TaskList
from theme import Palette

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='ado', description="Per-directory task tracker with vi-style keys.")
    parser.add_argument('--dir', help="task store directory (default: ./.ado or $ADO_DIR)")
    parser.add_argument('--list', action='store_true', help="print the tasks and exit")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file)

    directory = Path(args.dir).expanduser() if args.dir else settings.data_dir
    storage = Storage(directory)
    try:
        tasks = storage.load()
    except StorageError as exc:
        logger.error("Cannot start: %s", exc)
        return 1
    task_list = TaskList(tasks)
    logger.info("Loaded %s from %s", task_list, directory)

    if args.list:
        print_board(task_list, Palette(settings.colors))
        return 0
    return CLI(Session(storage, task_list)).run()


if __name__ == "__main__":
    raise SystemExit(main())
