"""
Resource profiling for ingestion runs.

An upload is buffered in memory in full before the batch write, so the bulk
loader wraps each run in ``profile_block`` to report how long it took and how
large the process grew while the rows were held.

Usage example:
    from csv_records.utils.profiler import profile_block

    with profile_block("ingest:orders.csv") as stats:
        loader.load(path)

    print(stats.duration_seconds, stats.peak_rss_bytes)
"""

from __future__ import annotations

import contextlib
import threading
import time
from dataclasses import dataclass, field
from typing import Generator, Optional

import psutil


@dataclass
class ProfileStats:
    """
    Measurements for one profiled block.
    """

    label: str
    start_ts: float = field(default=0.0)
    end_ts: float = field(default=0.0)
    duration_seconds: float = field(default=0.0)
    peak_rss_bytes: Optional[int] = field(default=None)
    cpu_percent: Optional[float] = field(default=None)
    rss_samples: int = field(default=0)


class _RssSampler(threading.Thread):
    """Daemon thread tracking the highest RSS seen until stopped."""

    def __init__(self, process: psutil.Process, interval_seconds: float) -> None:
        super().__init__(name="rss-sampler", daemon=True)
        self.process = process
        self.interval_seconds = interval_seconds
        self.peak_rss = process.memory_info().rss
        self.samples = 1
        self._stopped = threading.Event()

    def run(self) -> None:
        while not self._stopped.wait(timeout=self.interval_seconds):
            try:
                rss = self.process.memory_info().rss
            except psutil.Error:
                return
            self.samples += 1
            if rss > self.peak_rss:
                self.peak_rss = rss

    def stop(self) -> None:
        self._stopped.set()
        self.join(timeout=1.0)


@contextlib.contextmanager
def profile_block(label: str, sample_interval_ms: int = 50) -> Generator[ProfileStats, None, None]:
    """
    Profile the enclosed block.

    Parameters
    ----------
    label : str
        Human-friendly label, e.g. ``ingest:<file name>``.
    sample_interval_ms : int
        RSS sampling interval. Shorter intervals catch brief spikes.

    Notes
    -----
    Stats are filled in on exit, including when the block raises.
    """
    stats = ProfileStats(label=label)
    process = psutil.Process()
    # cpu_percent reports usage since the previous call
    process.cpu_percent(interval=None)
    sampler = _RssSampler(process, sample_interval_ms / 1000.0)
    sampler.start()

    stats.start_ts = time.perf_counter()
    try:
        yield stats
    finally:
        stats.end_ts = time.perf_counter()
        stats.duration_seconds = stats.end_ts - stats.start_ts
        sampler.stop()
        stats.peak_rss_bytes = sampler.peak_rss or None
        stats.rss_samples = sampler.samples
        stats.cpu_percent = process.cpu_percent(interval=None)


__all__ = ["ProfileStats", "profile_block"]
