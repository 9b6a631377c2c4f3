"""Container enumeration and concurrent per-container counter fetches.

`lxc-ls` names the containers, then one `lxc-info -H -n <name>` per container
runs in its own worker thread. Each worker parses its output and records the
result in the shared store through `rates.update`. `collect` returns only
after every worker has finished.
"""

from __future__ import annotations

import logging
import re
import subprocess
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, List, Optional, Sequence, Tuple

from . import rates
from .exceptions import EnvironmentFault, FetchFailure, FetchTimeout, MalformedResponse
from .models import ContainerSample
from .store import SnapshotStore

_logger = logging.getLogger(__name__)

CPU_USE_RE = re.compile(r"CPU use:\s+(\d+)")
MEMORY_USE_RE = re.compile(r"Memory use:\s+(\d+)")

# (argv, timeout_s) -> (returncode, combined stdout/stderr)
Runner = Callable[[Sequence[str], float], Tuple[int, str]]


def _run_cmd(cmd: Sequence[str], timeout_s: float) -> Tuple[int, str]:
    # subprocess.run kills the child before raising TimeoutExpired.
    p = subprocess.run(
        list(cmd),
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        timeout=timeout_s,
        check=False,
    )
    return p.returncode, p.stdout or ""


def parse_container_names(output: str) -> List[str]:
    return output.split()


def parse_counters(identity: str, output: str, observed_at: float) -> Optional[ContainerSample]:
    """Parse `lxc-info -H` output into a raw sample.

    Returns None when there is no CPU line (the container is stopped). A CPU
    line without a memory line raises MalformedResponse.
    """
    cpu = CPU_USE_RE.search(output)
    if cpu is None:
        return None
    mem = MEMORY_USE_RE.search(output)
    if mem is None:
        raise MalformedResponse(
            identity=identity,
            message=f"Unable to find memory use for {identity} in output:\n{output}",
        )
    return ContainerSample(
        identity=identity,
        observed_at=observed_at,
        cpu_time_units=int(cpu.group(1)),
        memory_bytes=int(mem.group(1)),
    )


class Sampler:
    def __init__(
        self,
        *,
        list_command: Sequence[str],
        info_command: Sequence[str],
        timeout_s: float,
        cpu_units_per_second: int,
        runner: Runner = _run_cmd,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.list_command = tuple(list_command)
        self.info_command = tuple(info_command)
        self.timeout_s = timeout_s
        self.cpu_units_per_second = cpu_units_per_second
        self._runner = runner
        self._clock = clock

    def list_containers(self) -> List[str]:
        """Run the enumeration command; any failure or empty output is an EnvironmentFault."""
        cmd_name = self.list_command[0]
        try:
            rc, out = self._runner(self.list_command, self.timeout_s)
        except subprocess.TimeoutExpired as e:
            raise EnvironmentFault(f"Timed out executing {cmd_name} after {self.timeout_s:g}s") from e
        except OSError as e:
            raise EnvironmentFault(f"Unable to execute {cmd_name} ({e})") from e
        if rc != 0:
            raise EnvironmentFault(f"Unable to execute {cmd_name} (exit status {rc}):\n{out}")
        names = parse_container_names(out)
        if not names:
            raise EnvironmentFault(
                f"{cmd_name} produced no output. Either no containers exist "
                "or you forgot to 'sudo lxc-top'"
            )
        return names

    def fetch(self, identity: str) -> Optional[ContainerSample]:
        cmd = self.info_command + (identity,)
        try:
            rc, out = self._runner(cmd, self.timeout_s)
        except subprocess.TimeoutExpired as e:
            raise FetchTimeout(
                identity=identity,
                message=f"Timed out getting {self.info_command[0]} for container {identity}",
            ) from e
        except OSError as e:
            raise FetchFailure(
                identity=identity,
                message=f"Unable to get {self.info_command[0]} for {identity} ({e})",
            ) from e
        observed_at = self._clock()
        if rc != 0:
            raise FetchFailure(
                identity=identity,
                message=f"Unable to get {self.info_command[0]} for {identity} (exit status {rc}):\n{out}",
            )
        return parse_counters(identity, out, observed_at)

    def _fetch_and_update(
        self,
        identity: str,
        store: SnapshotStore,
        should_stop: Callable[[], bool],
    ) -> Optional[ContainerSample]:
        if should_stop():
            return None
        raw = self.fetch(identity)
        if raw is None:
            _logger.debug("container %s is not running; skipped", identity)
            return None
        return rates.update(identity, raw, store, cpu_units_per_second=self.cpu_units_per_second)

    def collect(
        self,
        store: SnapshotStore,
        should_stop: Callable[[], bool] = lambda: False,
    ) -> List[ContainerSample]:
        """Sample every enumerated container concurrently and update `store`.

        One worker per container. The first fault raised by any worker is
        re-raised here after all workers have finished.
        """
        names = self.list_containers()
        samples: List[ContainerSample] = []
        with ThreadPoolExecutor(max_workers=len(names), thread_name_prefix="lxc-info") as executor:
            futs = {
                executor.submit(self._fetch_and_update, name, store, should_stop): name
                for name in names
            }
            for fut in as_completed(futs):
                sample = fut.result()
                if sample is not None:
                    samples.append(sample)
        _logger.debug("cycle sampled %d of %d containers", len(samples), len(names))
        return samples
