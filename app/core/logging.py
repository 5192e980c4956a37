import logging
from logging.config import dictConfig

_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def configure_logging(log_level: str = "INFO") -> None:
    """Route application, uvicorn and SQLAlchemy logs through one stream handler."""
    loggers = {
        "": {"handlers": ["default"], "level": log_level},
        "app": {"handlers": ["default"], "level": log_level, "propagate": False},
        # SQL echo stays off unless explicitly raised.
        "sqlalchemy.engine": {"handlers": ["default"], "level": "WARNING", "propagate": False},
    }
    for name in _SERVER_LOGGERS:
        loggers[name] = {"handlers": ["default"], "level": log_level, "propagate": False}

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S%z",
                },
            },
            "handlers": {
                "default": {
                    "level": log_level,
                    "formatter": "standard",
                    "class": "logging.StreamHandler",
                },
            },
            "loggers": loggers,
        }
    )

    logging.getLogger("app").info("logging_configured", extra={"level": log_level})
