"""
Logging configuration.

Console output in a single human-readable format. Called once from the
application lifespan; module loggers are plain ``logging.getLogger(__name__)``.
"""
import logging.config


def get_logging_config(level: str = "INFO", debug: bool = False) -> dict:
    """
    Build a ``dictConfig`` mapping.

    Args:
        level: Log level for the application loggers
        debug: Also log SQL statements from SQLAlchemy

    Returns:
        Logging configuration dict
    """
    level = level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "verbose": {
                "format": "[{asctime}] {levelname} {name} {message}",
                "style": "{",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "verbose",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "bizboard": {
                "handlers": ["console"],
                "level": level,
                "propagate": False,
            },
            "uvicorn.error": {
                "level": level,
            },
            "sqlalchemy.engine": {
                "handlers": ["console"],
                "level": "INFO" if debug else "WARNING",
                "propagate": False,
            },
        },
        "root": {
            "handlers": ["console"],
            "level": "WARNING",
        },
    }


def configure_logging(level: str = "INFO", debug: bool = False) -> None:
    logging.config.dictConfig(get_logging_config(level, debug))
