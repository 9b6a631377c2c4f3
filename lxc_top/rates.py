"""Turn cumulative CPU counters into a utilization percentage."""

from __future__ import annotations

import dataclasses
import math
from typing import Optional

from .models import ContainerSample
from .store import SnapshotStore


def compute_utilization(
    previous: Optional[ContainerSample],
    current: ContainerSample,
    *,
    cpu_units_per_second: int,
) -> int:
    """Percentage of one core used between two samples of the same container.

    Returns 0 when there is no predecessor, when the clock did not advance,
    or when the counter went backwards (container restart). Values above 100
    are legitimate on multi-core hosts.
    """
    if previous is None:
        return 0
    elapsed_s = current.observed_at - previous.observed_at
    delta_cpu = current.cpu_time_units - previous.cpu_time_units
    if elapsed_s <= 0 or delta_cpu < 0:
        return 0
    return int(math.floor(delta_cpu * 100 / (cpu_units_per_second * elapsed_s)))


def update(
    identity: str,
    raw: ContainerSample,
    store: SnapshotStore,
    *,
    cpu_units_per_second: int,
) -> ContainerSample:
    with store.locked() as samples:
        pct = compute_utilization(
            samples.get(identity),
            raw,
            cpu_units_per_second=cpu_units_per_second,
        )
        sample = dataclasses.replace(raw, identity=identity, cpu_utilization_pct=pct)
        samples.replace(sample)
    return sample
