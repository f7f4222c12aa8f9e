"""
Logging sink wiring.

Builds terminal, rotating-file and HTTP handlers from LoggingConfig and
attaches them to the root logger, optionally behind a queue so that slow
sinks never block an evaluation cycle.
"""

import json
import logging
import logging.handlers
import queue
import sys
from typing import List, Optional, Tuple
from urllib.parse import urlencode, urlsplit

from .config import ConfigError, LoggingConfig


logger = logging.getLogger(__name__)


class LoggingHandle:
    """Handlers installed by setup_logging, and the queue listener if any."""

    def __init__(self, handlers: List[logging.Handler], listener: Optional[logging.handlers.QueueListener] = None):
        self.handlers = handlers
        self.listener = listener

    def shutdown(self):
        """Flush queued records and detach the installed handlers."""
        if self.listener:
            self.listener.stop()
            self.listener = None
        root = logging.getLogger()
        for handler in list(root.handlers):
            if handler in self.handlers or isinstance(handler, logging.handlers.QueueHandler):
                root.removeHandler(handler)
        for handler in self.handlers:
            handler.close()


def parse_level(name: str) -> int:
    """Map a level name such as 'warn' or 'ERROR' to a logging level."""
    normalized = str(name).strip().upper()
    if normalized == "WARN":
        normalized = "WARNING"
    level = logging.getLevelName(normalized)
    if not isinstance(level, int):
        raise ConfigError(f"Unknown log level: {name!r}")
    return level


class FormattedHTTPHandler(logging.handlers.HTTPHandler):
    """
    HTTP sink that sends the formatted record.

    POST sends the formatted line as the body, either as plain text or as
    a one-key JSON object. GET sends it as a query parameter.
    """

    def __init__(self, host: str, url: str, method: str = "POST", secure: bool = False,
                 json_field: Optional[str] = None):
        super().__init__(host, url, method=method, secure=secure)
        self.json_field = json_field

    def build_request(self, record: logging.LogRecord) -> Tuple[str, Optional[bytes], dict]:
        """Return (url, body, headers) for a record."""
        message = self.format(record)

        if self.method == "GET":
            separator = "&" if "?" in self.url else "?"
            query = urlencode({self.json_field or "message": message})
            return f"{self.url}{separator}{query}", None, {}

        if self.json_field:
            body = json.dumps({self.json_field: message}).encode("utf-8")
            content_type = "application/json"
        else:
            body = message.encode("utf-8")
            content_type = "text/plain; charset=utf-8"
        headers = {"Content-Type": content_type, "Content-Length": str(len(body))}
        return self.url, body, headers

    def emit(self, record: logging.LogRecord):
        try:
            url, body, headers = self.build_request(record)
            connection = self.getConnection(self.host, self.secure)
            connection.request(self.method, url, body=body, headers=headers)
            connection.getresponse()
        except Exception:
            self.handleError(record)


def build_handlers(config: LoggingConfig) -> List[logging.Handler]:
    """Create one handler per enabled sink."""
    formatter = logging.Formatter(config.format)
    handlers = []

    if config.terminal_logs:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(parse_level(config.terminal_level))
        handlers.append(handler)

    if config.file_path:
        handler = logging.handlers.RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
        )
        handler.setLevel(parse_level(config.file_level))
        handlers.append(handler)

    if config.network_endpoint_url:
        handlers.append(_build_http_handler(config))

    for handler in handlers:
        handler.setFormatter(formatter)

    return handlers


def _build_http_handler(config: LoggingConfig) -> logging.Handler:
    url = urlsplit(config.network_endpoint_url)
    if url.scheme not in ("http", "https") or not url.netloc:
        raise ConfigError(f"Invalid network endpoint URL: {config.network_endpoint_url!r}")

    method = config.network_method.upper()
    if method not in ("GET", "POST"):
        raise ConfigError(f"network_method must be GET or POST, got {config.network_method!r}")

    path = url.path or "/"
    if url.query:
        path = f"{path}?{url.query}"

    network_format = config.network_format.lower()
    if network_format not in ("plain", "json"):
        raise ConfigError(f"network_format must be plain or json, got {config.network_format!r}")
    if network_format == "json" and not config.network_json_field:
        raise ConfigError("network_json_field is required for the json network format")

    handler = FormattedHTTPHandler(
        url.netloc,
        path,
        method=method,
        secure=url.scheme == "https",
        json_field=config.network_json_field if network_format == "json" else None,
    )
    handler.setLevel(parse_level(config.network_level))
    return handler


def setup_logging(config: LoggingConfig, verbose: bool = False) -> LoggingHandle:
    """Install the configured sinks on the root logger."""
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else parse_level(config.level))

    handlers = build_handlers(config)
    listener = None

    if config.async_logging and handlers:
        log_queue = queue.Queue(-1)
        root.addHandler(logging.handlers.QueueHandler(log_queue))
        listener = logging.handlers.QueueListener(log_queue, *handlers, respect_handler_level=True)
        listener.start()
    else:
        for handler in handlers:
            root.addHandler(handler)

    logger.debug(f"Logging configured with {len(handlers)} sink(s), async={config.async_logging}")
    return LoggingHandle(handlers, listener)
