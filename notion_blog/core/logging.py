"""Library logging with Loguru."""

import logging
import sys

from loguru import logger

from notion_blog.core.config import settings

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {extra[name]}:{function}:{line} | {message}"

# Track if logging is already configured to prevent duplicates
_logging_configured = False


class InterceptHandler(logging.Handler):
    """Redirect stdlib logs (httpx, httpcore) to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_name == "emit":
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _resolve_level(raw: str | None) -> str:
    level = (raw or "INFO").strip().upper()
    level = {
        "WARN": "WARNING",
        "FATAL": "CRITICAL",
    }.get(level, level)
    if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
        level = "INFO"
    return level


def configure_logging() -> None:
    global _logging_configured

    # Prevent duplicate configuration
    if _logging_configured:
        return
    _logging_configured = True

    level = _resolve_level(settings.effective_log_level)

    logger.remove()
    # Provide a safe default for log formatting.
    logger.configure(extra={"name": "notion_blog"})
    logger.add(
        sys.stderr,
        level=level,
        format=LOG_FORMAT,
        backtrace=False,
        diagnose=False,
    )
    if settings.LOG_FILE:
        logger.add(
            settings.LOG_FILE,
            level=level,
            format=LOG_FORMAT,
            rotation="10 MB",
            retention="14 days",
            enqueue=True,
            backtrace=False,
            diagnose=False,
        )

    # httpx logs every request at INFO through stdlib logging
    for logger_name in ["httpx", "httpcore"]:
        logging.getLogger(logger_name).handlers = [InterceptHandler()]
        logging.getLogger(logger_name).propagate = False


def get_logger(name: str) -> logger.__class__:
    return logger.bind(name=name)


configure_logging()
