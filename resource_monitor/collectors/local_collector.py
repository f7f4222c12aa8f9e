"""
Local Resource Metrics Collector.

Collects memory and CPU utilization from the local machine using psutil.
"""

import logging
from typing import Optional

import psutil

from ..core.models import MemorySample, Snapshot


logger = logging.getLogger(__name__)

# psutil computes CPU usage as the delta between two snapshots taken this
# far apart; shorter windows give unreliable readings.
MINIMUM_CPU_UPDATE_INTERVAL = 0.2


class MetricSourceError(Exception):
    """The OS metrics could not be read."""


class LocalCollector:
    """
    Collects resource metrics from the local machine.

    Uses psutil for cross-platform monitoring.
    """

    def __init__(self, cpu_interval: Optional[float] = None):
        self.cpu_interval = cpu_interval if cpu_interval is not None else MINIMUM_CPU_UPDATE_INTERVAL
        if self.cpu_interval <= 0:
            raise ValueError("cpu_interval must be positive")

    def sample_memory(self) -> MemorySample:
        """Get physical memory figures, in bytes, from one refresh."""
        try:
            mem = psutil.virtual_memory()
        except (OSError, psutil.Error) as e:
            raise MetricSourceError(f"Memory metrics: {e}") from e

        return MemorySample(
            total=mem.total,
            used=mem.used,
            free=mem.free,
            available=mem.available,
        )

    def sample_cpu(self) -> float:
        """
        Get aggregate CPU utilization across all logical cores.

        Blocks for cpu_interval while psutil takes its two snapshots.
        """
        try:
            return float(psutil.cpu_percent(interval=self.cpu_interval))
        except (OSError, psutil.Error) as e:
            raise MetricSourceError(f"CPU metrics: {e}") from e

    def logical_cpu_count(self) -> int:
        """Get the number of logical CPUs, 0 if it cannot be determined."""
        return psutil.cpu_count(logical=True) or 0

    def collect(self) -> Snapshot:
        """Collect memory and CPU metrics and return a snapshot."""
        memory = self.sample_memory()
        cpu_percent = self.sample_cpu()
        snapshot = Snapshot.from_sample(memory, self.logical_cpu_count(), cpu_percent)
        logger.debug(
            f"Sampled memory {snapshot.memory_percent:.2f}%, cpu {snapshot.cpu_percent:.2f}%"
        )
        return snapshot
