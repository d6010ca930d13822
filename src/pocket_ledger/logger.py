import logging
import logging.config
import os

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILENAME = "ledger.log"

_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class ColourizedFormatter(logging.Formatter):
    """Console formatter that colours the level name; NO_COLOR turns it off."""

    RESET = "\x1b[0m"
    COLOURS = {
        "DEBUG": "\x1b[90m",
        "INFO": "\x1b[32m",
        "WARNING": "\x1b[33m",
        "ERROR": "\x1b[31m",
        "CRITICAL": "\x1b[31;1m",
    }

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.enabled = not os.getenv("NO_COLOR")

    def format(self, record: logging.LogRecord) -> str:
        colour = self.COLOURS.get(record.levelname)
        if not self.enabled or colour is None:
            return super().format(record)
        # Work on a copy; the file handler formats the same record.
        tinted = logging.makeLogRecord(record.__dict__)
        tinted.levelname = f"{colour}{record.levelname}{self.RESET}"
        return super().format(tinted)


def _console_handler() -> dict:
    return {
        "class": "logging.StreamHandler",
        "stream": "ext://sys.stdout",
        "formatter": "console",
    }


def _file_handler(log_dir: str) -> dict:
    os.makedirs(log_dir, exist_ok=True)
    return {
        "class": "logging.FileHandler",
        "filename": os.path.join(log_dir, LOG_FILENAME),
        "formatter": "file",
        "encoding": "utf-8",
    }


def get_logging_config() -> dict:
    """dictConfig for the app and uvicorn: console always, a log file when LOG_DIR is set."""
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    handlers = {"console": _console_handler()}
    log_dir = os.getenv("LOG_DIR")
    if log_dir:
        handlers["file"] = _file_handler(log_dir)
    names = list(handlers)

    loggers: dict[str, dict] = {"": {"handlers": names, "level": level}}
    for name in _UVICORN_LOGGERS:
        loggers[name] = {"handlers": names, "level": "INFO", "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"()": "pocket_ledger.logger.ColourizedFormatter", "format": LOG_FORMAT},
            "file": {"format": LOG_FORMAT},
        },
        "handlers": handlers,
        "loggers": loggers,
    }


def setup_logging() -> None:
    logging.config.dictConfig(get_logging_config())


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
