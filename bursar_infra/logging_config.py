# bursar_infra/logging_config.py
from __future__ import annotations
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from bursar_infra.path import log_level_name, user_data_dir
from bursar_infra.operational_support import TraceIdLogFilter


def setup_logging(log_dir: Path | None = None, *, console: bool = True) -> Path:
    """
    Configure root logging: a rotating file under the user data dir plus an
    optional console handler. Returns the log file path.
    """
    log_dir = log_dir or (user_data_dir() / "logs")
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "bursar.log"

    logger = logging.getLogger()
    logger.setLevel(getattr(logging, log_level_name(), logging.INFO))

    # Re-running setup must not stack duplicate handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    trace_filter = TraceIdLogFilter()

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=1_000_000,  # 1 MB per file
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.addFilter(trace_filter)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] trace=%(trace_id)s %(name)s - %(message)s")
    )
    logger.addHandler(file_handler)

    if console:
        stream = logging.StreamHandler()
        stream.addFilter(trace_filter)
        stream.setFormatter(logging.Formatter("%(levelname)s [trace=%(trace_id)s]: %(message)s"))
        logger.addHandler(stream)

    logger.info("Logging initialized. Log file at %s", log_file)
    return log_file
