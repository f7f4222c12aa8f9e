"""Message composition for status reports."""

from .models import Snapshot


CRITICAL_MEMORY_BANNER = "MEMORY USAGE AT CRITICAL THRESHOLD"
CRITICAL_CPU_BANNER = "CPU USAGE AT CRITICAL THRESHOLD"
WARN_MEMORY_BANNER = "memory usage at dangerous threshold"
WARN_CPU_BANNER = "cpu usage at dangerous threshold"


def main_message(machine_name: str, snapshot: Snapshot) -> str:
    """Build the block shared by every report in a cycle."""
    lines = [
        f"machine: {machine_name}",
        f"memory total: {snapshot.total_memory_mib:.2f} MiB",
        f"memory used: {snapshot.used_memory_mib:.2f} MiB",
        f"memory free: {snapshot.free_memory_mib:.2f} MiB",
        f"memory available: {snapshot.available_memory_mib:.2f} MiB",
        f"memory usage: {snapshot.memory_percent:.2f}%",
        f"logical cpus: {snapshot.logical_cpu_count}",
        f"cpu usage: {snapshot.cpu_percent:.6f}%",
    ]
    return "\n".join(lines)


def _with_banner(banner: str, main: str) -> str:
    return f"{banner}\n{main}"


def critical_memory(main: str) -> str:
    return _with_banner(CRITICAL_MEMORY_BANNER, main)


def critical_cpu(main: str) -> str:
    return _with_banner(CRITICAL_CPU_BANNER, main)


def warn_memory(main: str) -> str:
    return _with_banner(WARN_MEMORY_BANNER, main)


def warn_cpu(main: str) -> str:
    return _with_banner(WARN_CPU_BANNER, main)


def heartbeat(main: str) -> str:
    # Plain block, no banner
    return main
