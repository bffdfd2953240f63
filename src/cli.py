"""Interactive session loop for ado.

Every keystroke is handled to completion before the next one is read:
interpret -> mutate the task list -> persist -> redraw. Session holds the
logic and is driven with plain keys so it can run without a terminal;
CLI is the curses front end around it.
"""
import curses
import logging
import os
from contextlib import suppress
from typing import Callable, List, Optional, Tuple

from keys import Action, CommandInterpreter
from logging_setup import console_suspended
from models import Status
from storage import Storage, StorageError
from tasklist import InvalidInput, TaskList
from theme import BOLD, Palette, color

logger = logging.getLogger(__name__)

# returns the typed task name, or None if the user cancelled
ReadName = Callable[[], Optional[str]]
Row = Tuple[str, Optional[Status], str]

HELP_LINE = "j/k move  h/l status  space done  o new  dd delete  gg/G top/bottom  q quit"

ARROW_KEYS = {
    curses.KEY_DOWN: 'j',
    curses.KEY_UP: 'k',
    curses.KEY_LEFT: 'h',
    curses.KEY_RIGHT: 'l',
}


class Session:
    def __init__(self, storage: Storage, task_list: TaskList,
                 interpreter: Optional[CommandInterpreter] = None):
        self.storage = storage
        self.task_list = task_list
        self.interpreter = interpreter or CommandInterpreter()
        self.message: Optional[str] = None
        self.dirty: bool = False
        self.running: bool = True

    def handle_key(self, key: object, read_name: ReadName) -> Optional[Action]:
        self.message = None
        action = self.interpreter.feed(key)
        if action is not None:
            self.apply(action, read_name)
        return action

    # -------------------- action dispatch --------------------
    def apply(self, action: Action, read_name: ReadName) -> bool:
        """Apply `action`; returns True when the task list changed."""
        tl = self.task_list
        changed = False
        if action is Action.QUIT:
            self.quit()
        elif action is Action.SELECT_NEXT:
            tl.select_next()
        elif action is Action.SELECT_PREVIOUS:
            tl.select_previous()
        elif action is Action.SELECT_FIRST:
            tl.select_first()
        elif action is Action.SELECT_LAST:
            tl.select_last()
        elif action is Action.PROMOTE:
            changed = tl.promote_selected()
        elif action is Action.DEMOTE:
            changed = tl.demote_selected()
        elif action is Action.TOGGLE_DONE:
            changed = tl.toggle_selected()
        elif action is Action.DELETE_SELECTED:
            changed = tl.delete_selected() is not None
        elif action is Action.BEGIN_CREATE:
            changed = self._create(read_name)
        if changed:
            self.persist()
        return changed

    def _create(self, read_name: ReadName) -> bool:
        name = read_name()
        if name is None:
            return False
        try:
            self.task_list.create(name)
        except InvalidInput as exc:
            self.message = str(exc)
            return False
        return True

    # -------------------- persistence --------------------
    def persist(self) -> bool:
        try:
            self.storage.save(self.task_list.tasks)
        except StorageError as exc:
            logger.warning("Save failed, keeping changes in memory: %s", exc)
            self.dirty = True
            self.message = f"Not saved: {exc}"
            return False
        self.dirty = False
        return True

    def quit(self) -> bool:
        """Stop the loop; retry a pending save first. Returns False if changes were lost."""
        self.running = False
        if self.dirty and not self.persist():
            logger.error("Exiting with unsaved changes in %s", self.storage.directory)
            return False
        return True


# -------------------- rendering --------------------
def board_lines(task_list: TaskList, show_cursor: bool = True) -> List[Row]:
    """View rows as (kind, status, text); kind is header, task, selected or empty."""
    rows: List[Row] = []
    for status, members in task_list.groups():
        rows.append(('header', status, f"{status.label} ({len(members)})"))
        if not members:
            rows.append(('empty', status, '    (empty)'))
        for index, task in members:
            selected = show_cursor and index == task_list.cursor
            marker = '>' if selected else ' '
            rows.append(('selected' if selected else 'task', status, f"{marker} {task}"))
    return rows


def print_board(task_list: TaskList, palette: Optional[Palette] = None) -> None:
    palette = palette or Palette()
    for kind, status, text in board_lines(task_list, show_cursor=False):
        if kind == 'header':
            print(color(text, palette.header, BOLD))
        elif kind == 'empty':
            print(color(text, palette.empty))
        else:
            print(color(text, palette.status[status]))


class CLI:
    def __init__(self, session: Session):
        self.session = session

    def run(self) -> int:
        """Run the curses loop until quit; returns the process exit code."""
        os.environ.setdefault('ESCDELAY', '25')
        with console_suspended():
            try:
                curses.wrapper(self._main)
            except KeyboardInterrupt:
                self.session.quit()
        if self.session.dirty:
            print(f"Warning: changes could not be saved to {self.session.storage.directory}")
        return 0

    def _main(self, stdscr) -> None:
        with suppress(curses.error):
            curses.curs_set(0)
        while self.session.running:
            self._paint(stdscr)
            try:
                key = stdscr.get_wch()
            except curses.error:
                continue
            if key == curses.KEY_RESIZE:
                continue
            if isinstance(key, int):
                key = ARROW_KEYS.get(key, key)
            self.session.handle_key(key, lambda: self._prompt(stdscr, "New task: "))

    # ---- painting ----
    def _paint(self, stdscr) -> None:
        stdscr.erase()
        height, width = stdscr.getmaxyx()
        rows = board_lines(self.session.task_list)
        avail = max(1, height - 1)
        selected_row = next((i for i, r in enumerate(rows) if r[0] == 'selected'), 0)
        top = max(0, selected_row - avail + 1)
        for y, (kind, status, text) in enumerate(rows[top:top + avail]):
            self._put(stdscr, y, text, self._attr(kind, status), width)
        self._put(stdscr, height - 1, self._status_text(), curses.A_DIM, width)
        stdscr.refresh()

    @staticmethod
    def _attr(kind: str, status: Optional[Status]) -> int:
        if kind == 'header':
            return curses.A_BOLD
        if kind == 'selected':
            return curses.A_REVERSE
        if kind == 'empty' or status == Status.WONTDO:
            return curses.A_DIM
        return curses.A_NORMAL

    def _status_text(self) -> str:
        session = self.session
        if session.message:
            return session.message
        pending = session.interpreter.pending
        if pending:
            return pending
        if session.dirty:
            return "[unsaved] " + HELP_LINE
        return HELP_LINE

    @staticmethod
    def _put(stdscr, y: int, text: str, attr: int, width: int) -> None:
        # writing the bottom-right cell raises; the text is still drawn
        with suppress(curses.error):
            stdscr.addnstr(y, 0, text, max(0, width - 1), attr)

    # ---- text entry sub-mode ----
    def _prompt(self, stdscr, label: str) -> Optional[str]:
        """Bottom-row line editor. Enter submits, Esc cancels (None)."""
        with suppress(curses.error):
            curses.curs_set(1)
        text: List[str] = []
        try:
            while True:
                height, width = stdscr.getmaxyx()
                stdscr.move(height - 1, 0)
                stdscr.clrtoeol()
                line = label + ''.join(text)
                self._put(stdscr, height - 1, line[-max(1, width - 1):], curses.A_NORMAL, width)
                with suppress(curses.error):
                    stdscr.move(height - 1, min(len(line), width - 1))
                stdscr.refresh()
                try:
                    key = stdscr.get_wch()
                except curses.error:
                    continue
                if key in ('\n', '\r', curses.KEY_ENTER):
                    return ''.join(text)
                if key == '\x1b':
                    return None
                if key in (curses.KEY_BACKSPACE, '\b', '\x7f'):
                    if text:
                        text.pop()
                    continue
                if isinstance(key, str) and key.isprintable():
                    text.append(key)
        finally:
            with suppress(curses.error):
                curses.curs_set(0)
