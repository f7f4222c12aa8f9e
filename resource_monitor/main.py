"""
Resource Monitor - Main Entry Point.

Samples local CPU and memory on a fixed interval, evaluates each sample
against the configured thresholds and reports through the logging sinks.
"""

import argparse
import logging
import signal
import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .core.config import Config, ConfigError, get_default_config_path
from .core.engine import AlertEngine
from .core.logging_setup import setup_logging
from .core.models import Alert, Severity
from .core.status import StatusError
from .collectors.local_collector import LocalCollector, MetricSourceError


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


class MonitorApplication:
    """
    Main application that drives the monitor.

    - Samples the local machine once per cycle
    - Feeds each snapshot to the alert engine
    - Requests a heartbeat every N-th cycle
    """

    def __init__(
        self,
        config: Config,
        collector: Optional[LocalCollector] = None,
        engine: Optional[AlertEngine] = None,
    ):
        self.config = config
        self.collector = collector or LocalCollector()
        self.engine = engine or AlertEngine(
            config.monitor.machine_name,
            confirm_escalation=config.monitor.confirm_escalation,
        )
        self.engine.initialize()

        self._stop_event = threading.Event()
        self._count = 0

    @property
    def machine_name(self) -> str:
        return self.config.monitor.machine_name

    def run_cycle(self, emit_heartbeat: bool = False) -> List[Alert]:
        """Collect one snapshot and evaluate it."""
        snapshot = self.collector.collect()
        return self.engine.evaluate(snapshot, self.config.thresholds, emit_heartbeat)

    def next_heartbeat_flag(self) -> bool:
        """Advance the cycle counter; True on every heartbeat_every-th cycle."""
        self._count += 1
        if self._count >= self.config.monitor.heartbeat_every:
            self._count = 0
            return True
        return False

    def run(self, max_cycles: Optional[int] = None) -> int:
        """
        Run cycles until stopped.

        Returns the process exit status. Collector and status store
        failures are fatal.
        """
        logger.info(
            f"Monitoring {self.machine_name} every {self.config.monitor.loop_seconds}s, "
            f"heartbeat every {self.config.monitor.heartbeat_every} cycle(s)"
        )

        cycles = 0
        while not self._stop_event.is_set():
            try:
                self.run_cycle(self.next_heartbeat_flag())
            except (StatusError, MetricSourceError) as e:
                return self.fatal(e)

            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                break

            self._stop_event.wait(self.config.monitor.loop_seconds)

        logger.info("Resource monitor stopped")
        return EXIT_OK

    def stop(self):
        """Request the loop to stop after the current cycle."""
        self._stop_event.set()

    def fatal(self, error: Exception) -> int:
        """Log the final fatal message and return the failure exit status."""
        logger.log(Severity.FATAL.log_level, f"{self.machine_name}: fatal: {error}")
        return EXIT_FAILURE


def _timestamp() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Resident CPU and memory monitor with threshold alerts"
    )

    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to configuration file (YAML)"
    )

    parser.add_argument(
        "-i", "--interval",
        type=float,
        default=None,
        help="Seconds between samples (default: 60)"
    )

    parser.add_argument(
        "--machine-name",
        default=None,
        help="Name reported in every message (default: hostname)"
    )

    parser.add_argument(
        "--heartbeat-every",
        type=int,
        default=None,
        help="Emit an informational heartbeat every N cycles (default: 10)"
    )

    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single cycle with a heartbeat and exit"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    parser.add_argument(
        "--generate-config",
        action="store_true",
        help="Generate a sample configuration file"
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Generate sample config if requested
    if args.generate_config:
        config = Config()
        config_path = "config/config.yaml"
        Path("config").mkdir(exist_ok=True)
        config.to_yaml(config_path)
        print(f"Generated sample configuration: {config_path}")
        return EXIT_OK

    # Load configuration
    config_path = args.config or get_default_config_path()
    try:
        config = Config.from_yaml(config_path)

        # Apply command line overrides
        if args.interval is not None:
            config.monitor.loop_seconds = args.interval
        if args.machine_name:
            config.monitor.machine_name = args.machine_name
        if args.heartbeat_every is not None:
            config.monitor.heartbeat_every = args.heartbeat_every
        if args.once:
            config.monitor.heartbeat_every = 1

        config.validate()
        logging_handle = setup_logging(config.logging, verbose=args.verbose)
    except (ConfigError, OSError) as e:
        print(f"{_timestamp()}: {e}", file=sys.stderr)
        return EXIT_FAILURE

    logger.info(f"Loaded configuration from {config_path}")

    app = MonitorApplication(config)

    def signal_handler(signum, frame):
        logger.info("Received shutdown signal")
        app.stop()

    for sig in (signal.SIGINT, signal.SIGTERM):
        signal.signal(sig, signal_handler)

    try:
        return app.run(max_cycles=1 if args.once else None)
    finally:
        logging_handle.shutdown()


def run():
    """Entry point for the application."""
    sys.exit(main())


if __name__ == "__main__":
    run()
