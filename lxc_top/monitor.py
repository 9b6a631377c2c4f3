"""The sample -> render -> wait cycle driver."""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

from .control import ControlContext, InputListener
from .models import ContainerSample
from .render import Renderer
from .sampler import Sampler
from .store import SnapshotStore

LOGGER = logging.getLogger(__name__)


class Monitor:
    def __init__(
        self,
        *,
        sampler: Sampler,
        renderer: Renderer,
        ctx: ControlContext,
        delay_s: float,
        store: Optional[SnapshotStore] = None,
        listener: Optional[InputListener] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.sampler = sampler
        self.renderer = renderer
        self.ctx = ctx
        self.delay_s = delay_s
        self.store = store if store is not None else SnapshotStore()
        self.listener = listener
        self._clock = clock
        self.cycles = 0

    def run(self) -> int:
        """Loop until a quit request. Fatal faults propagate to the caller.

        A fault recorded by the input listener is re-raised here so every
        fatal path leaves through the same exception route.
        """
        if self.listener is not None:
            self.listener.start()

        while not self.ctx.quit_requested:
            self.sampler.collect(self.store, should_stop=lambda: self.ctx.quit_requested)
            self.cycles += 1
            if self.ctx.quit_requested:
                break
            self._draw()
            self._wait_for_next_cycle()

        fault = self.ctx.fault
        if fault is not None:
            raise fault
        LOGGER.info("stopping after %d cycles", self.cycles)
        return 0

    def _draw(self) -> int:
        samples: List[ContainerSample] = self.store.snapshot()
        return self.renderer.render(samples, self.ctx.sort_mode)

    def _wait_for_next_cycle(self) -> None:
        # Sort toggles and resizes redraw immediately but do not shorten the cycle.
        deadline = self._clock() + self.delay_s
        while not self.ctx.quit_requested:
            remaining = deadline - self._clock()
            if remaining <= 0:
                return
            if self.ctx.wait(remaining) and not self.ctx.quit_requested:
                LOGGER.debug("early wake; redrawing")
                self._draw()
