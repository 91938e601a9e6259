"""Performance profiling utilities."""
from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Generator, Iterable, List

from utils.logging import logger


@dataclass
class Timing:
    name: str
    duration: float
    metadata: dict = field(default_factory=dict)


class TimingRecorder:
    """Collects stage timings for a single comparison run."""

    def __init__(self) -> None:
        self._timings: List[Timing] = []

    @contextmanager
    def track(self, name: str, **metadata) -> Generator[Timing, None, None]:
        with track_time(name, **metadata) as timing:
            yield timing
        self._timings.append(timing)

    def as_dict(self) -> Dict[str, float]:
        return summarize_timings(self._timings)


@contextmanager
def track_time(name: str, **metadata) -> Generator[Timing, None, None]:
    """Context manager to track execution time."""
    timing = Timing(name=name, duration=0, metadata=metadata)
    start = time.perf_counter()
    try:
        yield timing
    finally:
        timing.duration = time.perf_counter() - start
        logger.debug("Timing: %s took %.3f seconds", name, timing.duration)


def summarize_timings(timings: Iterable[Timing]) -> Dict[str, float]:
    """Map stage name to rounded duration in seconds; repeated stages are summed."""
    summary: Dict[str, float] = {}
    for timing in timings:
        summary[timing.name] = summary.get(timing.name, 0.0) + timing.duration
    return {name: round(duration, 4) for name, duration in summary.items()}
