"""State shared between the cycle driver and the key listener."""

from __future__ import annotations

import curses
import logging
import threading
from typing import Optional, Protocol

from .exceptions import InputChannelFault, LxcTopError
from .models import SortMode

_logger = logging.getLogger(__name__)

QUIT_KEYS = (ord("q"), ord("Q"))
SORT_KEYS = (ord("s"), ord("S"))


class ControlContext:
    """Sort mode, quit request and wake-up signal for the control loop.

    The listener thread mutates it; the cycle driver reads it once per render
    and blocks in `wait()` between cycles.
    """

    def __init__(self, sort_mode: SortMode = SortMode.CPU):
        self._lock = threading.Lock()
        self._wake = threading.Event()
        self._sort_mode = sort_mode
        self._quit = False
        self._fault: Optional[LxcTopError] = None

    @property
    def sort_mode(self) -> SortMode:
        with self._lock:
            return self._sort_mode

    @property
    def quit_requested(self) -> bool:
        with self._lock:
            return self._quit

    @property
    def fault(self) -> Optional[LxcTopError]:
        with self._lock:
            return self._fault

    def toggle_sort(self) -> SortMode:
        with self._lock:
            self._sort_mode = self._sort_mode.toggled()
            mode = self._sort_mode
        self._wake.set()
        return mode

    def request_quit(self, fault: Optional[LxcTopError] = None) -> None:
        with self._lock:
            self._quit = True
            if fault is not None and self._fault is None:
                self._fault = fault
        self._wake.set()

    def wake(self) -> None:
        self._wake.set()

    def wait(self, timeout_s: float) -> bool:
        """Block up to `timeout_s`; True if woken early by the listener."""
        woken = self._wake.wait(timeout_s)
        self._wake.clear()
        return woken


class KeySource(Protocol):
    def read_key(self) -> int: ...


class InputListener(threading.Thread):
    """Blocks on the next key press and forwards it to the control context.

    `q` quits, `s` toggles the sort mode, a resize wakes the driver for a
    redraw. A failure reading the terminal is fatal.
    """

    def __init__(self, keys: KeySource, ctx: ControlContext):
        super().__init__(name="lxc-top-input", daemon=True)
        self._keys = keys
        self._ctx = ctx

    def run(self) -> None:
        while not self._ctx.quit_requested:
            try:
                key = self._keys.read_key()
            except (curses.error, OSError) as e:
                self._ctx.request_quit(InputChannelFault(f"Error reading terminal input ({e})"))
                return
            if key == curses.ERR:
                self._ctx.request_quit(InputChannelFault("Terminal input returned an error"))
                return
            if not self.handle_key(key):
                return

    def handle_key(self, key: int) -> bool:
        """Apply one key; False once the listener should stop."""
        if key in QUIT_KEYS:
            _logger.info("quit requested from keyboard")
            self._ctx.request_quit()
            return False
        if key in SORT_KEYS:
            mode = self._ctx.toggle_sort()
            _logger.debug("sort mode -> %s", mode.value)
        elif key == curses.KEY_RESIZE:
            self._ctx.wake()
        return True
