"""
Structured logging for the dojo.

structlog renders every event: pretty console output when DEBUG is on,
JSON lines otherwise. Each process run gets its own file under
``settings.logs_dir`` and only the newest ``settings.log_runs_to_keep``
runs are kept. Request-scoped context (request id, trainee) is carried
through contextvars.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import structlog
from structlog.typing import Processor

from dojo.core.config import settings

LOG_FILE_PREFIX = "dojo_"

# Transport and driver loggers that chatter at INFO on every teacher call
NOISY_LOGGERS = ("httpx", "httpcore", "aiosqlite")


def _cull_old_logs(logs_dir: Path, keep: int) -> None:
    """Delete run logs beyond the ``keep`` most recent."""
    log_files = sorted(
        logs_dir.glob(f"{LOG_FILE_PREFIX}*.log"),
        key=lambda p: p.stat().st_mtime,
        reverse=True,
    )

    for old_file in log_files[max(keep, 0):]:
        old_file.unlink(missing_ok=True)


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name}")
    return level


def configure_logging(
    log_runs_to_keep: Optional[int] = None,
    logs_dir: Optional[Path] = None,
    level: Optional[str] = None,
) -> Path:
    """Configure structlog and the stdlib handlers it writes through.

    Call once at startup. Arguments override the matching settings.

    Returns:
        Path of this run's log file
    """
    logs_dir = Path(logs_dir or settings.logs_dir)
    keep = settings.log_runs_to_keep if log_runs_to_keep is None else log_runs_to_keep
    log_level = _resolve_level(level or settings.log_level)

    logs_dir.mkdir(parents=True, exist_ok=True)
    # keep-1 to make room for this run's file
    _cull_old_logs(logs_dir, keep=keep - 1)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"{LOG_FILE_PREFIX}{timestamp}.log"

    processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if settings.debug:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors += [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)
    root_logger.setLevel(log_level)

    for handler in (logging.StreamHandler(), logging.FileHandler(log_file, mode="w")):
        handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return log_file


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**kwargs) -> None:
    """Attach key/value pairs to every log event until clear_context()."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
