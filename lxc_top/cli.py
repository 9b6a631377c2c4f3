"""
Command line entry point for lxc-top.

Owns the terminal: enters curses mode, runs the monitor, and is the single
place fatal errors are turned into a printed message and exit status 1.
"""

from __future__ import annotations

import argparse
import curses
import logging
import signal
from typing import Optional, Sequence

from .config import Settings
from .control import ControlContext, InputListener
from .exceptions import LxcTopError, RenderFault
from .host import get_host_info
from .monitor import Monitor
from .render import Renderer
from .sampler import Sampler
from .screen import CursesScreen

logger = logging.getLogger(__name__)


def _setup_logging(settings: Settings) -> None:
    # The screen belongs to curses; records go to a file.
    settings.log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(settings.log_path),
        level=getattr(logging, settings.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _run_in_terminal(stdscr, settings: Settings, sampler: Sampler, host_line: str) -> int:
    screen = CursesScreen(stdscr)
    try:
        screen.setup()
    except curses.error as e:
        raise RenderFault(f"Unable to initialize the terminal ({e})") from e
    ctx = ControlContext()
    monitor = Monitor(
        sampler=sampler,
        renderer=Renderer(screen, host_line=host_line),
        ctx=ctx,
        delay_s=settings.cycle_delay_s,
        listener=InputListener(screen, ctx),
    )
    return monitor.run()


def _terminate(error: LxcTopError) -> int:
    logger.error("fatal: %s", error)
    print(str(error))
    return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="lxc-top",
        description="Live CPU and memory usage of running LXC containers. "
        "Press 's' to toggle CPU/memory sort and 'q' to quit.",
    )
    parser.parse_args(list(argv) if argv is not None else None)

    settings = Settings.from_env()
    _setup_logging(settings)
    sampler = Sampler(
        list_command=settings.list_command,
        info_command=settings.info_command,
        timeout_s=settings.fetch_timeout_s,
        cpu_units_per_second=settings.cpu_units_per_second,
    )

    print("lxc-top initializing...")
    try:
        # Fails fast, before the terminal is taken over, when not root or no containers.
        sampler.list_containers()
        host_line = get_host_info().describe()
    except LxcTopError as e:
        return _terminate(e)
    except KeyboardInterrupt:
        logger.info("interrupted during start-up; exiting")
        return 0

    signal.signal(signal.SIGTERM, signal.default_int_handler)
    logger.info("starting; log level %s", settings.log_level)
    try:
        # curses.wrapper restores the terminal before anything propagates.
        return curses.wrapper(_run_in_terminal, settings, sampler, host_line)
    except LxcTopError as e:
        return _terminate(e)
    except curses.error as e:
        return _terminate(RenderFault(f"Unable to use the terminal ({e})"))
    except KeyboardInterrupt:
        logger.info("interrupted; exiting")
        return 0


if __name__ == "__main__":
    raise SystemExit(main())
