"""Settings for lxc-top.

Display cadence, timeouts and column layout are fixed. Only the log
destination and verbosity can be changed, through the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple

CYCLE_DELAY_S: float = 3.0
FETCH_TIMEOUT_S: float = 10.0
# `lxc-info -H` reports CPU use in nanoseconds.
CPU_UNITS_PER_SECOND: int = 1_000_000_000

LIST_COMMAND: Tuple[str, ...] = ("lxc-ls",)
INFO_COMMAND: Tuple[str, ...] = ("lxc-info", "-H", "-n")

HEADER_WIDTH: int = 80
NAME_COLUMN: int = 0
CPU_COLUMN: int = 52
MEM_COLUMN: int = 62
TITLE_ROW: int = 2
FIRST_DATA_ROW: int = 3

LOG_FILE_ENV = "LXC_TOP_LOG_FILE"
LOG_LEVEL_ENV = "LXC_TOP_LOG_LEVEL"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _default_log_path() -> Path:
    return Path.home() / ".cache" / "lxc-top" / "lxc-top.log"


@dataclass(frozen=True)
class Settings:
    cycle_delay_s: float = CYCLE_DELAY_S
    fetch_timeout_s: float = FETCH_TIMEOUT_S
    cpu_units_per_second: int = CPU_UNITS_PER_SECOND
    list_command: Tuple[str, ...] = LIST_COMMAND
    info_command: Tuple[str, ...] = INFO_COMMAND
    log_path: Path = field(default_factory=_default_log_path)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        log_path = Path(env[LOG_FILE_ENV]).expanduser() if env.get(LOG_FILE_ENV) else _default_log_path()
        level = (env.get(LOG_LEVEL_ENV) or "INFO").strip().upper()
        if level not in LOG_LEVELS:
            level = "INFO"
        return cls(log_path=log_path, log_level=level)
