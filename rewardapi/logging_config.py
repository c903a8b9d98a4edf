import logging
import logging.config
import sys


class _BelowWarning(logging.Filter):
    """stdout gets INFO/DEBUG only; WARNING and up go to stderr once."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.WARNING


def setup_logging(log_level: str = "INFO"):
    log_level = log_level.upper()

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {"below_warning": {"()": _BelowWarning}},
            "formatters": {
                "line": {
                    "format": "%(asctime)s %(levelname)-7s [%(name)s] %(message)s",
                },
                "located": {
                    "format": "%(asctime)s %(levelname)-7s [%(name)s] %(message)s "
                    "(%(filename)s:%(lineno)d)",
                },
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "stream": sys.stdout,
                    "formatter": "line",
                    "filters": ["below_warning"],
                },
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": sys.stderr,
                    "formatter": "located",
                    "level": "WARNING",
                },
            },
            "root": {"handlers": ["stdout", "stderr"], "level": log_level},
            "loggers": {
                "rewardapi": {"level": log_level},
                "uvicorn.access": {
                    "handlers": ["stdout"],
                    "level": log_level,
                    "propagate": False,
                },
                "alembic": {"level": "INFO"},
                # the bot long-polls getUpdates through httpx
                "httpx": {"level": "WARNING"},
                "telegram": {"level": "WARNING"},
            },
        }
    )
