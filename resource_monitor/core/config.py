"""
Configuration management for the resource monitor.

Loads configuration from YAML files and environment variables.
"""

import os
import socket
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Optional, Union, get_args, get_origin
import yaml

from .models import ThresholdConfig


class ConfigError(Exception):
    """Configuration is missing, malformed or inconsistent."""


@dataclass
class MonitorConfig:
    """Driver loop configuration."""

    machine_name: str = field(default_factory=socket.gethostname)
    loop_seconds: float = 60
    heartbeat_every: int = 10  # emit a heartbeat every N cycles
    confirm_escalation: bool = False  # warn -> error breach alerts without re-arming


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    terminal_logs: bool = True
    terminal_level: str = "INFO"
    file_path: Optional[str] = None
    file_level: str = "INFO"
    max_file_size_mb: int = 10
    backup_count: int = 5
    network_endpoint_url: Optional[str] = None
    network_level: str = "WARNING"
    network_method: str = "POST"
    network_format: str = "plain"  # plain or json
    network_json_field: str = "message"
    async_logging: bool = False


@dataclass
class Config:
    """Main configuration container."""

    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: str) -> "Config":
        """Load configuration from YAML file."""
        config_path = Path(path)
        if not config_path.exists():
            config = cls()
            config._apply_env_overrides()
            return config

        try:
            with open(config_path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Top level of {config_path} must be a mapping")

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "Config":
        """Create config from dictionary."""
        config = cls()

        if "monitor" in data:
            monitor = dict(_section(data, "monitor"))
            # Older files name the heartbeat cadence after the log interval
            if "log_at_this_interval" in monitor:
                monitor.setdefault("heartbeat_every", monitor.pop("log_at_this_interval"))
            config.monitor = _build(MonitorConfig, "monitor", monitor)

        if "thresholds" in data:
            config.thresholds = _build(ThresholdConfig, "thresholds", _section(data, "thresholds"))

        if "logging" in data:
            config.logging = _build(LoggingConfig, "logging", _section(data, "logging"))

        unknown = set(data) - {"monitor", "thresholds", "logging"}
        if unknown:
            raise ConfigError(f"Unknown configuration sections: {', '.join(sorted(unknown))}")

        # Override with environment variables
        config._apply_env_overrides()

        return config

    def _apply_env_overrides(self):
        """Apply environment variable overrides."""
        if os.getenv("MONITOR_MACHINE_NAME"):
            self.monitor.machine_name = os.getenv("MONITOR_MACHINE_NAME")
        if os.getenv("MONITOR_LOOP_SECONDS"):
            self.monitor.loop_seconds = _env_number("MONITOR_LOOP_SECONDS", float)
        if os.getenv("MONITOR_HEARTBEAT_EVERY"):
            self.monitor.heartbeat_every = _env_number("MONITOR_HEARTBEAT_EVERY", int)

        # Logging
        if os.getenv("LOG_LEVEL"):
            self.logging.level = os.getenv("LOG_LEVEL")
        if os.getenv("LOG_FILE_PATH"):
            self.logging.file_path = os.getenv("LOG_FILE_PATH")

    def validate(self) -> "Config":
        """Check cross-field invariants the engine relies on."""
        t = self.thresholds
        for name in ("memory_warn_pct", "memory_error_pct", "cpu_warn_pct", "cpu_error_pct"):
            if getattr(t, name) < 0:
                raise ConfigError(f"thresholds.{name} must not be negative")
        if t.memory_warn_pct > t.memory_error_pct:
            raise ConfigError(
                f"memory warn threshold ({t.memory_warn_pct}) exceeds error threshold ({t.memory_error_pct})"
            )
        if t.cpu_warn_pct > t.cpu_error_pct:
            raise ConfigError(
                f"cpu warn threshold ({t.cpu_warn_pct}) exceeds error threshold ({t.cpu_error_pct})"
            )
        if self.monitor.loop_seconds <= 0:
            raise ConfigError("monitor.loop_seconds must be positive")
        if self.monitor.heartbeat_every < 1:
            raise ConfigError("monitor.heartbeat_every must be at least 1")
        return self

    def to_yaml(self, path: str):
        """Save configuration to YAML file."""
        data = {
            "monitor": asdict(self.monitor),
            "thresholds": asdict(self.thresholds),
            "logging": asdict(self.logging),
        }

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False)


def _section(data: dict, name: str) -> dict:
    section = data[name] or {}
    if not isinstance(section, dict):
        raise ConfigError(f"Section '{name}' must be a mapping")
    return section


def _build(cls, name: str, values: dict):
    declared = {f.name: f.type for f in fields(cls)}
    checked = {
        key: _coerce(f"{name}.{key}", declared[key], value) if key in declared else value
        for key, value in values.items()
    }
    try:
        return cls(**checked)
    except TypeError as e:
        raise ConfigError(f"Invalid '{name}' section: {e}") from e


def _coerce(key: str, expected, value):
    """Check a YAML value against a field's declared type."""
    if get_origin(expected) is Union:
        if value is None and type(None) in get_args(expected):
            return None
        expected = next(t for t in get_args(expected) if t is not type(None))

    # bool is an int subclass; never accept it for numbers
    if expected is bool:
        valid = isinstance(value, bool)
    elif expected is int:
        valid = isinstance(value, int) and not isinstance(value, bool)
    elif expected is float:
        valid = isinstance(value, (int, float)) and not isinstance(value, bool)
        if valid:
            value = float(value)
    else:
        valid = isinstance(value, expected)

    if not valid:
        raise ConfigError(f"{key} must be of type {expected.__name__}, got {value!r}")
    return value


def _env_number(name: str, cast):
    try:
        return cast(os.getenv(name))
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {os.getenv(name)!r}") from e


def get_default_config_path() -> str:
    """Get the default configuration file path."""
    # Check common locations
    candidates = [
        Path("config/config.yaml"),
        Path("config.yaml"),
        Path.home() / ".resource-monitor" / "config.yaml",
        Path("/etc/resource-monitor/config.yaml"),
    ]

    for path in candidates:
        if path.exists():
            return str(path)

    # Return the first candidate as default
    return str(candidates[0])
