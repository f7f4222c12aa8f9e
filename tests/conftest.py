"""Shared fixtures for the resource monitor tests."""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from resource_monitor.core.models import Snapshot, ThresholdConfig


@pytest.fixture
def thresholds():
    return ThresholdConfig(
        memory_warn_pct=80.0,
        memory_error_pct=95.0,
        cpu_warn_pct=70.0,
        cpu_error_pct=90.0,
    )


@pytest.fixture
def make_snapshot():
    """Build a snapshot from used memory (of 1000 MiB) and CPU percent."""

    def _make(used=100.0, cpu=10.0, total=1000.0, cpus=4):
        return Snapshot(
            total_memory_mib=total,
            used_memory_mib=used,
            free_memory_mib=total - used,
            available_memory_mib=total - used,
            logical_cpu_count=cpus,
            cpu_percent=cpu,
        )

    return _make
