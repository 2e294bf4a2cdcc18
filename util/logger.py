# util/logger.py
import copy
import logging
import os
import re
import sys
from logging.handlers import RotatingFileHandler
from config.settings import settings

logging.captureWarnings(True)

TEXT_FMT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
DATE_FMT = "%Y-%m-%dT%H:%M:%S%z"

# Gemini takes the key as ?key=...; PostgREST as apikey / Bearer headers
_SECRET_RE = re.compile(r"(key=|apikey[\"']?:\s*[\"']?|Bearer\s+)([A-Za-z0-9_\-.]+)")


class ColoredFormatter(logging.Formatter):
    COLORS = {
        "DEBUG": "\033[37m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[41m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        # Colour a copy so other handlers still see the plain levelname
        tinted = copy.copy(record)
        lvl = record.levelname
        tinted.levelname = f"{self.COLORS.get(lvl, self.RESET)}{lvl}{self.RESET}"
        return super().format(tinted)


class RedactSecretsFilter(logging.Filter):
    """Masks API keys that leak into messages (e.g. httpx request URLs)."""

    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        scrubbed = _SECRET_RE.sub(r"\1***", msg)
        if scrubbed != msg:
            record.msg, record.args = scrubbed, None
        return True


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(TEXT_FMT, datefmt=DATE_FMT))
    return handler


def _file_handler(level: int) -> logging.Handler:
    os.makedirs(settings.LOG_DIR, exist_ok=True)
    handler = RotatingFileHandler(
        os.path.join(settings.LOG_DIR, settings.LOG_FILE_NAME),
        maxBytes=settings.LOG_MAX_BYTES,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(TEXT_FMT, datefmt=DATE_FMT))
    return handler


def init_logger() -> logging.Logger:
    """
    Idempotent logger init:
    - stdout with coloured level names; rotating file only when LOG_TO_FILE.
    - Every handler redacts API keys.
    - Level from settings.LOG_LEVEL.
    """
    root = logging.getLogger()
    if getattr(root, "_hazardrag_inited", False):
        return logging.getLogger(settings.LOGGER_NAME)

    level = getattr(logging, (settings.LOG_LEVEL or "INFO").upper(), logging.INFO)
    root.setLevel(level)
    for h in list(root.handlers):
        root.removeHandler(h)

    handlers = [_console_handler(level)]
    if settings.LOG_TO_FILE:
        handlers.append(_file_handler(level))
    redact = RedactSecretsFilter()
    for handler in handlers:
        handler.addFilter(redact)
        root.addHandler(handler)

    # Request lines are noise at INFO; warnings still come through redacted
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)

    root._hazardrag_inited = True
    logger = logging.getLogger(settings.LOGGER_NAME)
    logger.debug("logger.ready level=%s file=%s", logging.getLevelName(level), settings.LOG_TO_FILE)
    return logger
