# distributed_lock/log.py

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def configure_logging(level: int = logging.DEBUG, logfile: Optional[str] = None) -> logging.Handler:
    """
    Send the package's log records to `logfile`, or to stderr when no file
    is given. Meant for applications and scripts; importing the package
    never configures logging.

    Returns the installed handler.
    """
    if logfile:
        handler = logging.FileHandler(logfile)
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger("distributed_lock")
    package_logger.setLevel(level)
    package_logger.addHandler(handler)
    return handler
