"""
Logging configuration for the Leave Compliance Service
"""
import logging
import sys
from leave_compliance.core.config import settings

# Third-party loggers and the level they run at unless SQL_ECHO is on
_QUIET_LOGGERS = {
    "uvicorn": logging.INFO,
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
}


def setup_logging() -> None:
    """
    Configure the root logger once for the process.

    Everything goes to stdout in one line format; service modules log
    through ``logging.getLogger(__name__)``.
    """
    log_level = getattr(logging, settings.LOG_LEVEL, logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    for name, level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)
    if settings.SQL_ECHO:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

    logging.getLogger(__name__).info(
        "Logging configured: level=%s, env=%s, sql_echo=%s",
        settings.LOG_LEVEL, settings.APP_ENV, settings.SQL_ECHO,
    )
