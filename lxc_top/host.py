"""Host description shown under the key-binding header."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import psutil

from .models import format_memory


@dataclass(frozen=True)
class HostInfo:
    cpu_count: Optional[int]
    memory_total_bytes: Optional[int]

    def describe(self) -> str:
        cpus = f"{self.cpu_count} cpus" if self.cpu_count else "? cpus"
        mem = format_memory(self.memory_total_bytes) if self.memory_total_bytes else "?"
        return f"host: {cpus}, {mem} memory"


def get_host_info() -> HostInfo:
    cpu_count = psutil.cpu_count(logical=True)
    try:
        memory_total = int(psutil.virtual_memory().total)
    except (OSError, RuntimeError):
        memory_total = None
    return HostInfo(cpu_count=cpu_count, memory_total_bytes=memory_total)
