"""
Data models for resource monitoring.

These dataclasses represent one cycle's reading of the host and the
alert decisions derived from it.
"""

import logging
from dataclasses import dataclass
from enum import Enum


def bytes_to_mib(value: float) -> float:
    """Convert a byte count to mebibytes."""
    return value / 1024 / 1024


@dataclass
class MemorySample:
    """Raw memory figures in bytes, taken from a single refresh."""

    total: int = 0
    used: int = 0
    free: int = 0
    available: int = 0


@dataclass
class Snapshot:
    """Point-in-time memory/CPU reading for one evaluation cycle."""

    total_memory_mib: float = 0.0
    used_memory_mib: float = 0.0
    free_memory_mib: float = 0.0
    available_memory_mib: float = 0.0
    logical_cpu_count: int = 0
    cpu_percent: float = 0.0

    @property
    def memory_percent(self) -> float:
        """Used memory as a percentage of total, 0 when total is unknown."""
        if self.total_memory_mib == 0:
            return 0.0
        return self.used_memory_mib / self.total_memory_mib * 100

    @classmethod
    def from_sample(cls, memory: MemorySample, logical_cpu_count: int, cpu_percent: float) -> "Snapshot":
        """Build a snapshot from raw byte figures."""
        return cls(
            total_memory_mib=bytes_to_mib(memory.total),
            used_memory_mib=bytes_to_mib(memory.used),
            free_memory_mib=bytes_to_mib(memory.free),
            available_memory_mib=bytes_to_mib(memory.available),
            logical_cpu_count=logical_cpu_count,
            cpu_percent=cpu_percent,
        )

    def to_dict(self) -> dict:
        """Convert snapshot to dictionary for serialization."""
        return {
            "total_memory_mib": self.total_memory_mib,
            "used_memory_mib": self.used_memory_mib,
            "free_memory_mib": self.free_memory_mib,
            "available_memory_mib": self.available_memory_mib,
            "memory_percent": self.memory_percent,
            "logical_cpu_count": self.logical_cpu_count,
            "cpu_percent": self.cpu_percent,
        }


@dataclass(frozen=True)
class ThresholdConfig:
    """Warn/error thresholds, in percent."""

    memory_warn_pct: float = 80.0
    memory_error_pct: float = 95.0
    cpu_warn_pct: float = 70.0
    cpu_error_pct: float = 90.0


class AlertStatus(Enum):
    """CPU hysteresis state carried between cycles."""

    CLEAN = "clean"
    CPU_WARN = "cpu_warn"
    CPU_ERROR = "cpu_error"


class Severity(Enum):
    """Severity of an emitted report."""

    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"

    @property
    def log_level(self) -> int:
        return _LOG_LEVELS[self]


_LOG_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.WARN: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.FATAL: logging.CRITICAL,
}


@dataclass(frozen=True)
class Alert:
    """A single report produced by an evaluation cycle."""

    severity: Severity
    kind: str  # memory, cpu, heartbeat
    message: str
