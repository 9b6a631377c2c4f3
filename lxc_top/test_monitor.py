"""Pytest tests for monitor.py (the sample/render/wait cycle)."""

import pytest

from lxc_top.control import ControlContext
from lxc_top.exceptions import FetchTimeout, InputChannelFault
from lxc_top.models import ContainerSample, SortMode
from lxc_top.monitor import Monitor
from lxc_top.store import SnapshotStore


class FakeSampler:
    def __init__(self, ctx, cycles_before_quit=1, fault=None):
        self.ctx = ctx
        self.cycles_before_quit = cycles_before_quit
        self.fault = fault
        self.calls = 0

    def collect(self, store, should_stop=lambda: False):
        self.calls += 1
        if self.fault is not None:
            raise self.fault
        with store.locked() as view:
            view.replace(
                ContainerSample(identity="web", observed_at=float(self.calls), cpu_time_units=0, memory_bytes=1)
            )
        if self.calls >= self.cycles_before_quit:
            self.ctx.request_quit()
        return store.snapshot()


class RecordingRenderer:
    def __init__(self, on_render=None):
        self.renders = []
        self.on_render = on_render

    def render(self, samples, mode):
        self.renders.append(([s.identity for s in samples], mode))
        if self.on_render is not None:
            self.on_render(len(self.renders))
        return len(samples)


def test_quit_during_collect_skips_render():
    ctx = ControlContext()
    renderer = RecordingRenderer()
    monitor = Monitor(sampler=FakeSampler(ctx), renderer=renderer, ctx=ctx, delay_s=0.01)
    assert monitor.run() == 0
    assert monitor.cycles == 1
    assert renderer.renders == []


def test_cycles_repeat_until_quit():
    ctx = ControlContext()
    sampler = FakeSampler(ctx, cycles_before_quit=3)
    renderer = RecordingRenderer()
    store = SnapshotStore()
    monitor = Monitor(sampler=sampler, renderer=renderer, ctx=ctx, delay_s=0.01, store=store)
    assert monitor.run() == 0
    assert sampler.calls == 3
    assert renderer.renders == [(["web"], SortMode.CPU)] * 2


def test_sort_toggle_redraws_without_resampling():
    ctx = ControlContext()
    sampler = FakeSampler(ctx, cycles_before_quit=2)

    def on_render(n):
        if n == 1:
            ctx.toggle_sort()

    renderer = RecordingRenderer(on_render=on_render)
    monitor = Monitor(sampler=sampler, renderer=renderer, ctx=ctx, delay_s=0.2)
    assert monitor.run() == 0
    assert sampler.calls == 2
    assert [mode for _names, mode in renderer.renders] == [SortMode.CPU, SortMode.MEM]


def test_sampler_fault_propagates():
    ctx = ControlContext()
    fault = FetchTimeout(identity="web", message="Timed out getting lxc-info for container web")
    monitor = Monitor(sampler=FakeSampler(ctx, fault=fault), renderer=RecordingRenderer(), ctx=ctx, delay_s=0.01)
    with pytest.raises(FetchTimeout):
        monitor.run()


def test_listener_fault_is_raised_by_driver():
    ctx = ControlContext()

    def on_render(n):
        ctx.request_quit(InputChannelFault("terminal went away"))

    monitor = Monitor(
        sampler=FakeSampler(ctx, cycles_before_quit=99),
        renderer=RecordingRenderer(on_render=on_render),
        ctx=ctx,
        delay_s=5.0,
    )
    with pytest.raises(InputChannelFault):
        monitor.run()
