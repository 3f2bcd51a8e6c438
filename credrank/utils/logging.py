import os
import logging
from logging.handlers import RotatingFileHandler

EVENTS_LEVEL_NUM = 38
DEFAULT_LOG_BACKUP_COUNT = 10
DEFAULT_EVENTS_RETENTION_SIZE = 10 * 1024 * 1024


def setup_events_logger(full_path, events_retention_size=DEFAULT_EVENTS_RETENTION_SIZE, job_name=None):
    """
    Setup the snapshot events logger, optionally scoped to a scheduled job.

    Events are written at a dedicated EVENT level so audit lines for snapshot
    writes and ranking runs can be separated from regular debug output.

    Args:
        full_path: Base directory for log files (created if missing)
        events_retention_size: Maximum size of log files before rotation
        job_name: Optional job name to include in filename (default: None)

    Returns:
        The configured "event" logger
    """
    logging.addLevelName(EVENTS_LEVEL_NUM, "EVENT")

    logger = logging.getLogger("event")
    logger.setLevel(EVENTS_LEVEL_NUM)

    def event(self, message, *args, **kws):
        if self.isEnabledFor(EVENTS_LEVEL_NUM):
            self._log(EVENTS_LEVEL_NUM, message, args, **kws)

    logging.Logger.event = event

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    os.makedirs(full_path, exist_ok=True)

    log_filename = f"events_{job_name}.log" if job_name is not None else "events.log"
    log_path = os.path.join(full_path, log_filename)

    # Re-running a job in the same process must not stack duplicate handlers
    for handler in logger.handlers:
        if isinstance(handler, RotatingFileHandler) and handler.baseFilename == os.path.abspath(log_path):
            return logger

    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=events_retention_size,
        backupCount=DEFAULT_LOG_BACKUP_COUNT,
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(EVENTS_LEVEL_NUM)
    logger.addHandler(file_handler)

    return logger
