import json
import logging
from logging.config import dictConfig
from traceback import format_exception

from docvault.config import Settings


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for production log shipping."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0]:
            payload["error"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "stack": "".join(format_exception(*record.exc_info))[:4000],
            }
        return json.dumps(payload, ensure_ascii=False)


def _level(settings: Settings) -> str:
    if settings.log_level:
        return settings.log_level.upper()
    return "INFO" if settings.is_production else "DEBUG"


def _format(settings: Settings) -> str:
    if settings.log_format:
        return settings.log_format.lower()
    return "json" if settings.is_production else "plain"


def setup_logging(settings: Settings) -> None:
    level = _level(settings)
    formatter = "json" if _format(settings) == "json" else "plain"

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "plain": {
                    "format": "%(asctime)s %(levelname)-5s %(name)s: %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                },
                "json": {
                    "()": JsonFormatter,
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                },
            },
            "handlers": {
                "stream": {
                    "class": "logging.StreamHandler",
                    "level": level,
                    "formatter": formatter,
                }
            },
            "root": {"level": level, "handlers": ["stream"]},
            "loggers": {
                "uvicorn": {"level": "INFO", "handlers": [], "propagate": True},
                "uvicorn.access": {"level": "INFO", "handlers": [], "propagate": True},
                # pdfminer is chatty at DEBUG
                "pdfminer": {"level": "WARNING"},
                "passlib": {"level": "ERROR"},
            },
        }
    )
