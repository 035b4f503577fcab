"""Lightweight profiling: wall-clock timers for pipeline stages.

Provides:
    - timer(): Context manager for wall-clock timing with optional sink
    - StageTimings: Collects named stage durations for one generation run

Used to measure:
    - Pixel generation (the caller's callback)
    - PNG encoding
    - base64 encoding + markup assembly
    - Atomic file write

No heavy dependencies (no line_profiler, cProfile overhead during builds).
"""

import time
from contextlib import contextmanager
from typing import Callable, Dict, Optional


@contextmanager
def timer(name: str, sink: Optional[Callable[[str, float], None]] = None):
    """Context manager for wall-clock timing.

    Parameters
    ----------
    name : str
        Timer name (for logging/display)
    sink : Optional[Callable[[str, float], None]]
        Optional callback(name, elapsed_seconds)
        If None, prints to stdout

    Yields
    ------
    None

    Examples
    --------
    >>> with timer("encode_png"):
    ...     data = encode_png(pixels, 32, 32)
    encode_png: 0.003 s
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        if sink is not None:
            sink(name, elapsed)
        else:
            print(f"{name}: {elapsed:.3f} s")


class StageTimings:
    """Accumulate per-stage durations of a single run.

    Examples
    --------
    >>> timings = StageTimings()
    >>> with timings.measure("encode_png"):
    ...     data = encode_png(pixels, 32, 32)
    >>> timings.summary()
    'encode_png=3.1ms'
    """

    def __init__(self):
        self.stages: Dict[str, float] = {}

    def record(self, name: str, elapsed: float) -> None:
        """Add elapsed seconds to a stage (sink for timer())."""
        self.stages[name] = self.stages.get(name, 0.0) + elapsed

    def measure(self, name: str):
        """Context manager timing one stage."""
        return timer(name, sink=self.record)

    def total(self) -> float:
        """Total seconds across all stages."""
        return sum(self.stages.values())

    def summary(self) -> str:
        """One-line summary in milliseconds, in recording order."""
        return ' '.join(f"{k}={v * 1000:.1f}ms" for k, v in self.stages.items())

    def __repr__(self) -> str:
        return f"StageTimings({self.summary()})"
