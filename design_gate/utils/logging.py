import logging
import logging.handlers
import os
import re
import sys
import uuid
from typing import Any, Dict, List, Optional

import structlog
from structlog.typing import Processor

from design_gate.core.constants import BYTES_PER_MB

LOG_FILE_NAME = "design-gate.log"

SENSITIVE_KEYS = {
    "password",
    "token",
    "api_key",
    "secret",
    "authorization",
    "file_path",
    "filename",
    "file_name",
    "path",
    "user_id",
    "email",
    "ip_address",
}

_PATH_PATTERN = re.compile(r"^(/|[A-Za-z]:\\|\\\\)")
_DESIGN_FILE_PATTERN = re.compile(
    r"\.(pdf|svg|png|jpe?g|eps|ai|ps|tiff?)$", re.IGNORECASE
)


def filter_sensitive_data(_, __, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Mask uploaded file names, paths and credentials in log events."""

    def _recursive_filter(obj: Any, depth: int = 0) -> Any:
        if depth > 10:
            return "***DEPTH_LIMIT***"

        if isinstance(obj, dict):
            filtered = {}
            for key, value in obj.items():
                key_lower = str(key).lower()
                if any(
                    sensitive == key_lower
                    or f"_{sensitive}" in key_lower
                    or f"{sensitive}_" in key_lower
                    for sensitive in SENSITIVE_KEYS
                ):
                    filtered[key] = "***REDACTED***"
                else:
                    filtered[key] = _recursive_filter(value, depth + 1)
            return filtered
        elif isinstance(obj, list):
            return [_recursive_filter(item, depth + 1) for item in obj]
        elif isinstance(obj, str):
            if _PATH_PATTERN.match(obj):
                return "***PATH_REDACTED***"
            if _DESIGN_FILE_PATTERN.search(obj):
                return "***FILENAME_REDACTED***"
        return obj

    return _recursive_filter(event_dict)


def add_correlation_id(_, __, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Tag events outside any request or batch with a fresh correlation id.

    Ids bound through LoggingContext are already merged into the event.
    """
    event_dict.setdefault("correlation_id", str(uuid.uuid4()))
    return event_dict


def build_processors(json_logs: bool = True) -> List[Processor]:
    """Processor chain shared by console and JSON output.

    Context bound with LoggingContext is merged first so that batch fields
    pass through the sensitive-data filter like any other key.
    """
    renderer: Processor = (
        structlog.processors.JSONRenderer(ensure_ascii=False)
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_correlation_id,
        filter_sensitive_data,
        structlog.processors.format_exc_info,
        renderer,
    ]


def _build_handlers(
    level: int,
    enable_file_logging: bool,
    log_dir: str,
    max_log_size_mb: int,
    backup_count: int,
) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if enable_file_logging:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                filename=os.path.join(log_dir, LOG_FILE_NAME),
                maxBytes=max_log_size_mb * BYTES_PER_MB,
                backupCount=backup_count,
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.setLevel(level)
    return handlers


def setup_logging(
    log_level: str = "INFO",
    json_logs: bool = True,
    enable_file_logging: bool = False,
    log_dir: str = "./logs",
    max_log_size_mb: int = 10,
    backup_count: int = 3,
) -> None:
    """Configure structlog on top of stdlib logging.

    Log lines go to stderr so CLI output on stdout stays machine-readable.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render JSON lines instead of the console format
        enable_file_logging: Also write to a rotating design-gate.log
        log_dir: Directory for the log file
        max_log_size_mb: Size at which the log file is rotated
        backup_count: Rotated files to keep
    """
    level = getattr(logging, log_level.upper())

    structlog.configure(
        processors=build_processors(json_logs),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        handlers=_build_handlers(
            level, enable_file_logging, log_dir, max_log_size_mb, backup_count
        ),
        level=level,
        force=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


class LoggingContext:
    """Binds key-value pairs to every log line emitted inside the block."""

    def __init__(self, **kwargs) -> None:
        self.context = kwargs
        self._bound = False

    def __enter__(self) -> "LoggingContext":
        structlog.contextvars.bind_contextvars(**self.context)
        self._bound = True
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._bound:
            structlog.contextvars.unbind_contextvars(*self.context.keys())
            self._bound = False
