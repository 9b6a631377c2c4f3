"""Pytest tests for render.py, drawn onto an in-memory screen."""

import curses
from contextlib import contextmanager

import pytest

from lxc_top.exceptions import RenderFault
from lxc_top.models import ContainerSample, SortMode
from lxc_top.render import Renderer, header_text, sort_samples


class FakeScreen:
    def __init__(self, height=24, width=80):
        self.height = height
        self.width = width
        self.cells = {}
        self.flushed = 0
        self.frames = 0

    @contextmanager
    def frame(self):
        self.frames += 1
        yield

    def size(self):
        return self.height, self.width

    def clear(self):
        self.cells = {}

    def put(self, x, y, text, reverse=False):
        for i, ch in enumerate(text):
            if x + i < self.width and y < self.height:
                self.cells[(x + i, y)] = (ch, reverse)

    def flush(self):
        self.flushed += 1

    def row(self, y):
        return "".join(self.cells.get((x, y), (" ", False))[0] for x in range(self.width)).rstrip()

    def is_reversed(self, x, y):
        return self.cells.get((x, y), (" ", False))[1]


def _s(identity, cpu, mem):
    return ContainerSample(
        identity=identity, observed_at=0.0, cpu_time_units=0, memory_bytes=mem, cpu_utilization_pct=cpu
    )


def test_sort_by_cpu_and_by_memory():
    a = _s("A", cpu=50, mem=100)
    b = _s("B", cpu=80, mem=50)
    assert [s.identity for s in sort_samples([a, b], SortMode.CPU)] == ["B", "A"]
    assert [s.identity for s in sort_samples([a, b], SortMode.MEM)] == ["A", "B"]


def test_render_draws_header_title_and_rows_at_fixed_columns():
    scr = FakeScreen()
    drawn = Renderer(scr, host_line="host: 8 cpus, 16.00 GB memory").render(
        [_s("web", cpu=12, mem=5 * 1024 * 1024)], SortMode.CPU
    )
    assert drawn == 1
    assert scr.row(0) == header_text(SortMode.CPU)
    assert scr.row(0).endswith("[CPU]")
    assert scr.row(1) == "host: 8 cpus, 16.00 GB memory"

    title = scr.row(2)
    assert title.startswith("NAME")
    assert title[52:57] == "CPU %"
    assert title[62:65] == "MEM"
    assert scr.is_reversed(0, 2) and scr.is_reversed(79, 2)

    row = scr.row(3)
    assert row.startswith("web")
    assert row[52:54] == "12"
    assert row[62:] == "5.00 MB"
    assert not scr.is_reversed(0, 3)
    assert scr.flushed == 1
    assert scr.frames == 1


def test_render_header_shows_memory_mode():
    scr = FakeScreen()
    Renderer(scr).render([], SortMode.MEM)
    assert scr.row(0).endswith("[MEM]")
    assert scr.row(1) == ""


def test_render_orders_rows_by_active_mode():
    scr = FakeScreen()
    samples = [_s("A", cpu=50, mem=100), _s("B", cpu=80, mem=50)]
    Renderer(scr).render(samples, SortMode.MEM)
    assert [scr.row(3)[:1], scr.row(4)[:1]] == ["A", "B"]
    Renderer(scr).render(samples, SortMode.CPU)
    assert [scr.row(3)[:1], scr.row(4)[:1]] == ["B", "A"]


def test_render_truncates_rows_to_terminal_height():
    # three header rows + five data rows
    scr = FakeScreen(height=8)
    samples = [_s(f"c{i}", cpu=i, mem=i) for i in range(8)]
    drawn = Renderer(scr).render(samples, SortMode.CPU)
    assert drawn == 5
    assert scr.row(3).startswith("c7")
    assert scr.row(7).startswith("c3")


def test_render_curses_error_is_render_fault():
    class BrokenScreen(FakeScreen):
        def put(self, x, y, text, reverse=False):
            raise curses.error("addnstr() returned ERR")

    with pytest.raises(RenderFault):
        Renderer(BrokenScreen()).render([_s("a", 1, 1)], SortMode.CPU)
