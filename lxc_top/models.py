"""Data types shared by the sampler, the store and the renderer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

KB: int = 1024
MB: int = 1024 * 1024
GB: int = 1024 * 1024 * 1024


class SortMode(str, Enum):
    """Active ranking key for the table."""

    CPU = "CPU"
    MEM = "MEM"

    def toggled(self) -> "SortMode":
        return SortMode.MEM if self is SortMode.CPU else SortMode.CPU


@dataclass(frozen=True)
class ContainerSample:
    """One container's observation plus its derived CPU utilization.

    `observed_at` is a monotonic clock reading in seconds. `cpu_time_units` is
    the cumulative counter as reported by the collector (nanoseconds for
    `lxc-info -H`). `cpu_utilization_pct` stays 0 until a predecessor exists.
    """

    identity: str
    observed_at: float
    cpu_time_units: int
    memory_bytes: int
    cpu_utilization_pct: int = 0

    def memory_display(self) -> str:
        return format_memory(self.memory_bytes)


def format_memory(num_bytes: int) -> str:
    """Format bytes into the largest binary unit the value exceeds.

    >>> format_memory(999)
    '999 B'
    >>> format_memory(2048)
    '2.00 KB'
    """
    n = int(num_bytes)
    if n > GB:
        return f"{n / GB:.2f} GB"
    if n > MB:
        return f"{n / MB:.2f} MB"
    if n > KB:
        return f"{n / KB:.2f} KB"
    return f"{n} B"
