"""Thin adapter over a curses window.

The renderer and the input listener only talk to this interface, so tests
can drive them with an in-memory screen.

ncurses is not thread-safe and `getch` refreshes a touched window, so every
call goes through one lock. The renderer holds it for a whole frame via
`frame()`; the key reader waits on stdin outside the lock and only takes it
for a non-blocking `getch`.
"""

from __future__ import annotations

import curses
import select
import sys
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, Tuple

POLL_INTERVAL_S: float = 0.1
# stdin reported readable this many times in a row with no key: it hit EOF or hung up
MAX_EMPTY_READS: int = 5


class CursesScreen:
    def __init__(
        self,
        stdscr,
        *,
        fd: Optional[int] = None,
        select_fn: Callable = select.select,
        poll_interval_s: float = POLL_INTERVAL_S,
    ):
        self._win = stdscr
        self._lock = threading.RLock()
        self._fd = fd
        self._select = select_fn
        self._poll_interval_s = poll_interval_s

    def setup(self) -> None:
        with self._lock:
            curses.use_default_colors()
            try:
                curses.curs_set(0)
            except curses.error:
                pass  # terminal cannot hide the cursor
            self._win.keypad(True)
            self._win.nodelay(True)

    @contextmanager
    def frame(self) -> Iterator[None]:
        """Hold the screen for a full clear/draw/flush sequence."""
        with self._lock:
            yield

    def size(self) -> Tuple[int, int]:
        """(height, width) of the terminal."""
        with self._lock:
            height, width = self._win.getmaxyx()
        return height, width

    def clear(self) -> None:
        with self._lock:
            self._win.erase()

    def put(self, x: int, y: int, text: str, reverse: bool = False) -> None:
        with self._lock:
            height, width = self._win.getmaxyx()
            if y < 0 or y >= height or x < 0 or x >= width:
                return
            room = width - x
            if y == height - 1:
                # curses fails after writing the bottom-right cell
                room -= 1
            if room <= 0:
                return
            attr = curses.A_REVERSE if reverse else curses.A_NORMAL
            self._win.addnstr(y, x, text, room, attr)

    def flush(self) -> None:
        with self._lock:
            self._win.noutrefresh()
            curses.doupdate()

    def read_key(self) -> int:
        """Block until the next key or terminal event.

        Raises curses.error once stdin keeps polling readable without
        producing a key.
        """
        fd = self._fd if self._fd is not None else sys.stdin.fileno()
        empty_reads = 0
        while True:
            ready, _, _ = self._select([fd], [], [], self._poll_interval_s)
            with self._lock:
                # also picks up KEY_RESIZE, which arrives by signal rather than on stdin
                key = self._win.getch()
            if key != curses.ERR:
                return key
            if not ready:
                empty_reads = 0
                continue
            empty_reads += 1
            if empty_reads >= MAX_EMPTY_READS:
                raise curses.error("terminal input closed")
