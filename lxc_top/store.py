"""Lock-guarded map of container identity to its latest sample."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from .models import ContainerSample


class SnapshotStore:
    """The only state shared between fetch workers and the renderer.

    A single coarse lock guards the map. Writers do their lookup and replace
    inside `locked()`; readers take a copy with `snapshot()` and draw after
    the lock is released.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._samples: Dict[str, ContainerSample] = {}

    @contextmanager
    def locked(self) -> Iterator["_LockedView"]:
        with self._lock:
            yield _LockedView(self._samples)

    def snapshot(self) -> List[ContainerSample]:
        with self._lock:
            return list(self._samples.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._samples)


class _LockedView:
    """Map access handed out by `SnapshotStore.locked()`; valid only inside the block."""

    def __init__(self, samples: Dict[str, ContainerSample]):
        self._samples = samples

    def get(self, identity: str) -> Optional[ContainerSample]:
        return self._samples.get(identity)

    def replace(self, sample: ContainerSample) -> None:
        self._samples[sample.identity] = sample
