"""
structlog setup for the CLI and the API.

Events are rendered once by structlog and handed to stdlib logging, which
fans them out to stderr and, optionally, to a per-session file in
settings.log_dir. HEALTHSCORE_DEBUG switches to colored console output and
DEBUG level; otherwise events are JSON lines at INFO level.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import structlog
from structlog.typing import Processor

from healthscore.core.config import settings

LOG_FILE_PREFIX = "healthscore_"


def _cull_old_logs(logs_dir: Path, keep: int) -> List[Path]:
    """Remove all but the `keep` newest session logs. Returns the removed files."""
    sessions = sorted(
        logs_dir.glob(f"{LOG_FILE_PREFIX}*.log"),
        key=lambda p: p.stat().st_mtime,
        reverse=True,
    )

    removed = []
    for stale in sessions[max(keep, 0):]:
        try:
            stale.unlink()
        except OSError:
            continue  # in use or not permitted
        removed.append(stale)
    return removed


def _session_file_handler(logs_dir: Path, keep: int) -> logging.Handler:
    logs_dir.mkdir(parents=True, exist_ok=True)
    # Leave room for the file about to be opened
    _cull_old_logs(logs_dir, keep=keep - 1)

    started = datetime.now().strftime("%Y%m%d_%H%M%S")
    return logging.FileHandler(logs_dir / f"{LOG_FILE_PREFIX}{started}.log", mode="w")


def _renderers(debug: bool) -> List[Processor]:
    if debug:
        return [structlog.dev.ConsoleRenderer(colors=True)]
    return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]


def configure_logging(
    log_sessions_to_keep: Optional[int] = None,
    log_to_file: bool = True,
) -> None:
    """Configure structlog and the root stdlib logger.

    Safe to call more than once; handlers from an earlier call are closed
    and replaced.

    Args:
        log_sessions_to_keep: Session log files to retain in the log directory
            (default: settings.log_sessions_to_keep)
        log_to_file: Also write to <log_dir>/healthscore_YYYYMMDD_HHMMSS.log
    """
    level = logging.DEBUG if settings.debug else logging.INFO

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_to_file:
        keep = log_sessions_to_keep or settings.log_sessions_to_keep
        handlers.append(_session_file_handler(settings.log_dir, keep))

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    root_logger.setLevel(level)
    for handler in handlers:
        handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(handler)

    structlog.configure(
        processors=[
            # request_id and other request-scoped values
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            *_renderers(settings.debug),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
