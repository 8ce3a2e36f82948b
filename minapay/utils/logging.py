import os
import logging
from logging.handlers import RotatingFileHandler

EVENTS_LEVEL_NUM = 38
DEFAULT_LOG_BACKUP_COUNT = 10


def setup_events_logger(full_path, events_retention_size, pool_key=None):
    """
    Setup the payout events logger.

    Events are operator-facing run results (payout hash, totals, paid blocks)
    written to a rotating file, separate from the bittensor console log.

    Args:
        full_path: Directory for log files (created if missing)
        events_retention_size: Maximum size of log files before rotation
        pool_key: Optional pool public key; its prefix is included in the filename
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
    log_filename = f"events_{pool_key[:12]}.log" if pool_key else "events.log"
    log_path = os.path.join(full_path, log_filename)

    # Re-running setup in one process must not stack handlers on the same file
    for handler in list(logger.handlers):
        if getattr(handler, "baseFilename", None) == os.path.abspath(log_path):
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
