"""Tests for the psutil-backed collector."""

from types import SimpleNamespace

import psutil
import pytest

from resource_monitor.collectors.local_collector import (
    MINIMUM_CPU_UPDATE_INTERVAL,
    LocalCollector,
    MetricSourceError,
)

MIB = 1024 * 1024


@pytest.fixture
def fake_psutil(monkeypatch):
    calls = {}

    def cpu_percent(interval=None):
        calls["interval"] = interval
        return 42.5

    monkeypatch.setattr(
        psutil,
        "virtual_memory",
        lambda: SimpleNamespace(total=1000 * MIB, used=850 * MIB, free=100 * MIB, available=150 * MIB),
    )
    monkeypatch.setattr(psutil, "cpu_percent", cpu_percent)
    monkeypatch.setattr(psutil, "cpu_count", lambda logical=True: 8)
    return calls


def test_sample_memory(fake_psutil):
    sample = LocalCollector().sample_memory()
    assert sample.total == 1000 * MIB
    assert sample.available == 150 * MIB


def test_sample_cpu_blocks_for_minimum_interval(fake_psutil):
    assert LocalCollector().sample_cpu() == 42.5
    assert fake_psutil["interval"] == MINIMUM_CPU_UPDATE_INTERVAL


def test_custom_cpu_interval(fake_psutil):
    LocalCollector(cpu_interval=1.0).sample_cpu()
    assert fake_psutil["interval"] == 1.0


def test_cpu_interval_must_be_positive():
    with pytest.raises(ValueError):
        LocalCollector(cpu_interval=0)


def test_collect_converts_to_mib(fake_psutil):
    snapshot = LocalCollector().collect()
    assert snapshot.total_memory_mib == 1000.0
    assert snapshot.used_memory_mib == 850.0
    assert snapshot.free_memory_mib == 100.0
    assert snapshot.available_memory_mib == 150.0
    assert snapshot.logical_cpu_count == 8
    assert snapshot.cpu_percent == 42.5
    assert snapshot.memory_percent == 85.0


def test_unknown_cpu_count(fake_psutil, monkeypatch):
    monkeypatch.setattr(psutil, "cpu_count", lambda logical=True: None)
    assert LocalCollector().logical_cpu_count() == 0


def test_psutil_failure_raises_metric_source_error(fake_psutil, monkeypatch):
    def broken():
        raise psutil.AccessDenied()

    monkeypatch.setattr(psutil, "virtual_memory", broken)
    with pytest.raises(MetricSourceError):
        LocalCollector().collect()
