"""Structured logging configuration for the Tarefas API."""

import json
import logging
import os
import tempfile
import time
import traceback
from logging.handlers import TimedRotatingFileHandler


class JsonFormatter(logging.Formatter):
    """JSON formatter for machine-parsable logs."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "func": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }
        if hasattr(record, "request_id"):
            payload["request_id"] = getattr(record, "request_id")
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


class SafeTimedRotatingFileHandler(TimedRotatingFileHandler):
    """TimedRotatingFileHandler that tolerates Windows file-lock rollover failures.

    When another process holds the file (WinError 32) rollover is skipped
    for this interval and the base file is reopened.
    """

    def doRollover(self) -> None:  # type: ignore[override]
        try:
            super().doRollover()
        except PermissionError as exc:
            if getattr(exc, "winerror", None) != 32:
                raise
            self.stream = self._open()
            self.rolloverAt = int(time.time()) + self.interval


def _resolve_log_dir(app) -> str:
    """Resolve a writable log directory, with fallback when the primary is unavailable."""
    log_dir = app.config.get("APP_LOG_DIR")
    if not log_dir:
        root_dir = os.path.abspath(os.path.join(app.root_path, ".."))
        log_dir = os.path.join(root_dir, "logs")

    try:
        os.makedirs(log_dir, exist_ok=True)
        test_path = os.path.join(log_dir, ".write-test")
        with open(test_path, "w", encoding="utf-8") as test_file:
            test_file.write("ok")
        os.remove(test_path)
        return log_dir
    except OSError:
        fallback_dir = os.path.join(tempfile.gettempdir(), "tarefas-logs")
        os.makedirs(fallback_dir, exist_ok=True)
        return fallback_dir


def _rotating_handler(path: str, level: int, formatter: logging.Formatter, backup_count: int):
    handler = SafeTimedRotatingFileHandler(
        path,
        when="midnight",
        interval=1,
        backupCount=backup_count,
        encoding="utf-8",
        delay=True,
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(app):
    """Configure rotating log files for the app and the ``tarefas`` loggers.

    - app.log: general application log (daily, keeps 60 days)
    - app.jsonl: same records as JSON lines (daily, keeps 60 days)
    - error.log: error-level records only (daily, keeps 90 days)
    """
    log_dir = _resolve_log_dir(app)

    text_formatter = logging.Formatter(
        '[%(asctime)s] %(levelname)s in %(module)s (%(funcName)s:%(lineno)d): %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    handlers = [
        _rotating_handler(os.path.join(log_dir, "app.log"), logging.INFO, text_formatter, 60),
        _rotating_handler(os.path.join(log_dir, "app.jsonl"), logging.INFO, JsonFormatter(), 60),
        _rotating_handler(os.path.join(log_dir, "error.log"), logging.ERROR, text_formatter, 90),
    ]
    if app.debug:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(text_formatter)
        handlers.append(console_handler)

    # app.logger is named "tarefas" (the import name), so module loggers
    # such as "tarefas.services.tarefas" propagate into these handlers.
    app.logger.handlers.clear()
    app.logger.setLevel(logging.DEBUG if app.debug else logging.INFO)
    for handler in handlers:
        app.logger.addHandler(handler)

    app.logger.info("Logging configured - logs directory: %s", log_dir, extra={"request_id": "startup"})
    return app.logger


def log_request_info(request, response, duration_ms, request_id=None, threshold_ms=2000):
    """Log request completion for monitoring.

    Args:
        request: Flask request object
        response: Flask response object
        duration_ms: Request duration in milliseconds
        request_id: Optional correlation identifier
        threshold_ms: Duration above which the request is reported as slow
    """
    from flask import current_app

    prefix = f"[req_id={request_id}]" if request_id else "[req_id=na]"

    if threshold_ms and duration_ms > threshold_ms:
        current_app.logger.warning(
            "%s SLOW REQUEST (%s ms): %s %s from %s -> %s",
            prefix,
            f"{duration_ms:.0f}",
            request.method,
            request.path,
            request.remote_addr,
            response.status_code,
            extra={"request_id": request_id},
        )
    elif response.status_code >= 500:
        current_app.logger.error(
            "%s ERROR RESPONSE: %s %s from %s -> %s",
            prefix,
            request.method,
            request.path,
            request.remote_addr,
            response.status_code,
            extra={"request_id": request_id},
        )
    else:
        current_app.logger.info(
            "%s %s %s -> %s (%s ms)",
            prefix,
            request.method,
            request.path,
            response.status_code,
            f"{duration_ms:.0f}",
            extra={"request_id": request_id},
        )


def log_exception(error, request=None, request_id=None):
    """Log exception with request context and stack trace.

    Args:
        error: Exception object
        request: Flask request object (optional)
        request_id: Optional correlation identifier
    """
    from flask import current_app

    error_msg = f"EXCEPTION: {type(error).__name__}: {str(error)}"

    if request:
        error_msg += f"\nRequest: {request.method} {request.path}"
        error_msg += f"\nUser-Agent: {request.headers.get('User-Agent', 'N/A')}"
        error_msg += f"\nIP: {request.remote_addr}"

    error_msg += f"\n{'='*80}\nStack trace:\n{traceback.format_exc()}"
    error_msg += f"{'='*80}"

    current_app.logger.error(error_msg, extra={"request_id": request_id})
