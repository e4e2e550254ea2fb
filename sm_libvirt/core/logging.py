import logging
from logging.config import dictConfig

from .config import LOG_LEVEL, APP_NAME

PACKAGE_LOGGER = "sm_libvirt"


def setup_logging(level: str = LOG_LEVEL):
    """Route the connector, uvicorn and root loggers to a single console handler."""
    console = {"handlers": ["console"], "level": level, "propagate": False}
    dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)s %(name)s - %(message)s"
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            },
        },
        "loggers": {
            "": {"handlers": ["console"], "level": level},
            # connector modules log under the package name; let them reach root
            PACKAGE_LOGGER: {"level": level},
            "uvicorn": dict(console),
            "uvicorn.error": dict(console),
            "uvicorn.access": dict(console),
            APP_NAME: dict(console),
        },
    })
    logging.getLogger(APP_NAME).info("Logging initialized at level %s", level)
