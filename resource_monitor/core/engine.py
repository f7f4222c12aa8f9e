"""
Alert engine.

Turns one snapshot per cycle into de-duplicated, severity-tagged reports.

Memory is level-triggered: every cycle over a threshold reports. CPU is
hysteretic: the first cycle over a threshold only arms the tier, the
second consecutive cycle in the same tier reports, and every further
cycle in that tier keeps reporting until CPU drops below the warn
threshold and the status returns to CLEAN.
"""

import logging
from typing import List, Optional

from . import messages
from .models import Alert, AlertStatus, Severity, Snapshot, ThresholdConfig
from .status import StatusStore, StatusUninitializedError


logger = logging.getLogger(__name__)

ALERT_LOGGER_NAME = "resource_monitor.alerts"


class AlertEngine:
    """
    Stateful evaluation of snapshots against thresholds.

    The engine owns one StatusStore. It must be initialized before the
    first evaluation; the driver does this once at startup.
    """

    def __init__(
        self,
        machine_name: str,
        store: Optional[StatusStore] = None,
        sink: Optional[logging.Logger] = None,
        confirm_escalation: bool = False,
    ):
        self.machine_name = machine_name
        self.store = store
        self.sink = sink or logging.getLogger(ALERT_LOGGER_NAME)
        self.confirm_escalation = confirm_escalation

    def initialize(self) -> "AlertEngine":
        """Create the status store in the CLEAN state if there is none yet."""
        if self.store is None:
            self.store = StatusStore()
        return self

    @property
    def status(self) -> AlertStatus:
        return self._require_store().read()

    def evaluate(
        self,
        snapshot: Snapshot,
        thresholds: ThresholdConfig,
        emit_heartbeat: bool = False,
    ) -> List[Alert]:
        """
        Run one evaluation cycle.

        Returns the alerts emitted this cycle, after delivering them to the
        sink. Raises StatusError if the status store is missing or poisoned.
        """
        store = self._require_store()
        main = messages.main_message(self.machine_name, snapshot)
        alerts = []

        memory_alert = self._check_memory(snapshot, thresholds, main)
        if memory_alert:
            alerts.append(memory_alert)

        with store.update() as cell:
            previous = cell.value
            cpu_alert, cell.value = self._check_cpu(
                snapshot, thresholds, previous, emit_heartbeat, main
            )
            current = cell.value

        if cpu_alert:
            alerts.append(cpu_alert)

        if previous is not current:
            logger.debug(f"Status {previous.name} -> {current.name} (cpu {snapshot.cpu_percent:.2f}%)")

        for alert in alerts:
            self.sink.log(alert.severity.log_level, alert.message)

        return alerts

    def _check_memory(self, snapshot: Snapshot, thresholds: ThresholdConfig, main: str) -> Optional[Alert]:
        percent = snapshot.memory_percent
        if percent >= thresholds.memory_error_pct:
            return Alert(Severity.ERROR, "memory", messages.critical_memory(main))
        if percent >= thresholds.memory_warn_pct:
            return Alert(Severity.WARN, "memory", messages.warn_memory(main))
        return None

    def _check_cpu(self, snapshot, thresholds, previous, emit_heartbeat, main):
        """Return (alert or None, new status) for the CPU reading."""
        cpu = snapshot.cpu_percent

        if cpu >= thresholds.cpu_error_pct:
            confirmed = previous is AlertStatus.CPU_ERROR or (
                self.confirm_escalation and previous is AlertStatus.CPU_WARN
            )
            if confirmed:
                return Alert(Severity.ERROR, "cpu", messages.critical_cpu(main)), AlertStatus.CPU_ERROR
            return None, AlertStatus.CPU_ERROR

        if cpu >= thresholds.cpu_warn_pct:
            if previous is AlertStatus.CPU_WARN:
                return Alert(Severity.WARN, "cpu", messages.warn_cpu(main)), AlertStatus.CPU_WARN
            return None, AlertStatus.CPU_WARN

        if emit_heartbeat:
            return Alert(Severity.INFO, "heartbeat", messages.heartbeat(main)), AlertStatus.CLEAN
        return None, AlertStatus.CLEAN

    def _require_store(self) -> StatusStore:
        if self.store is None:
            raise StatusUninitializedError()
        return self.store
