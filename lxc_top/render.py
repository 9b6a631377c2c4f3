"""Sorted table of container samples drawn onto a screen."""

from __future__ import annotations

import curses
from typing import ContextManager, Iterable, List, Optional, Protocol, Tuple

from . import config
from .exceptions import RenderFault
from .models import ContainerSample, SortMode


class Screen(Protocol):
    def frame(self) -> ContextManager[None]: ...

    def size(self) -> Tuple[int, int]: ...

    def clear(self) -> None: ...

    def put(self, x: int, y: int, text: str, reverse: bool = False) -> None: ...

    def flush(self) -> None: ...


def sort_samples(samples: Iterable[ContainerSample], mode: SortMode) -> List[ContainerSample]:
    if mode is SortMode.MEM:
        return sorted(samples, key=lambda s: s.memory_bytes, reverse=True)
    return sorted(samples, key=lambda s: s.cpu_utilization_pct, reverse=True)


def header_text(mode: SortMode) -> str:
    return f"'q' to exit, 's' to toggle memory/cpu sort [{mode.value}]"


class Renderer:
    def __init__(self, screen: Screen, *, host_line: Optional[str] = None):
        self.screen = screen
        self.host_line = host_line

    def render(self, samples: Iterable[ContainerSample], mode: SortMode) -> int:
        """Draw header, title row and as many sample rows as fit.

        Returns the number of data rows drawn; rows past the bottom of the
        terminal are dropped. Any curses failure is raised as RenderFault.
        """
        ordered = sort_samples(samples, mode)
        try:
            with self.screen.frame():
                return self._draw(ordered, mode)
        except curses.error as e:
            raise RenderFault(f"Unable to draw the container table ({e})") from e

    def _draw(self, ordered: List[ContainerSample], mode: SortMode) -> int:
        scr = self.screen
        blank = " " * config.HEADER_WIDTH
        height, _width = scr.size()
        scr.clear()

        scr.put(0, 0, blank)
        scr.put(0, 0, header_text(mode))
        if self.host_line:
            scr.put(0, 1, self.host_line)

        y = config.TITLE_ROW
        scr.put(0, y, blank, reverse=True)
        scr.put(config.NAME_COLUMN, y, "NAME", reverse=True)
        scr.put(config.CPU_COLUMN, y, "CPU %", reverse=True)
        scr.put(config.MEM_COLUMN, y, "MEM", reverse=True)

        drawn = 0
        for i, sample in enumerate(ordered):
            y = config.FIRST_DATA_ROW + i
            if y >= height:
                break
            scr.put(0, y, blank)
            scr.put(config.NAME_COLUMN, y, sample.identity)
            scr.put(config.CPU_COLUMN, y, str(sample.cpu_utilization_pct))
            scr.put(config.MEM_COLUMN, y, sample.memory_display())
            drawn += 1

        scr.flush()
        return drawn
