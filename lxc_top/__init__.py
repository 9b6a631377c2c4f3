"""
lxc-top: a live, sorted view of CPU and memory use of LXC containers.

Public API is re-exported from:
- `lxc_top.sampler` for container enumeration and counter fetches
- `lxc_top.rates` for CPU utilization from cumulative counters
- `lxc_top.render` for the table renderer
"""

from .models import ContainerSample, SortMode, format_memory  # noqa: F401
from .rates import compute_utilization  # noqa: F401
from .render import Renderer, sort_samples  # noqa: F401
from .sampler import Sampler  # noqa: F401
from .store import SnapshotStore  # noqa: F401

__all__ = [
    "ContainerSample",
    "Renderer",
    "Sampler",
    "SnapshotStore",
    "SortMode",
    "compute_utilization",
    "format_memory",
    "sort_samples",
]
