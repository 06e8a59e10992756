import logging.config

# Third-party loggers that are chatty at INFO (google-genai logs every request)
QUIET_LOGGERS = ("google_genai", "httpx")


def setup_logging(level: str = "INFO", access_log: bool = True) -> None:
    """Route app and uvicorn logs to one console handler."""
    level = level.upper()
    loggers = {name: {"level": "WARNING"} for name in QUIET_LOGGERS}
    if not access_log:
        loggers["uvicorn.access"] = {"level": "WARNING"}

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                        "datefmt": "%H:%M:%S"},
        },
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "default"},
        },
        "loggers": loggers,
        "root": {"level": level, "handlers": ["console"]},
    })
