"""
Logging for the booking client.

Every record becomes one JSON line. Booking identifiers handed over through
``extra`` (user, appointment record, route, tracker context) are lifted to
top-level keys so log queries can filter on them; credential-bearing keys are
masked before anything reaches a handler.
"""

import json
import logging
import logging.handlers
import time
import traceback
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from config.app_config import LoggingConfig, get_config


# Lifted out of ``extra`` to the top level of each JSON line
BOOKING_FIELDS = ("user_id", "record_id", "route", "context")

MASKED_FIELDS = frozenset({
    "password", "confirm_password", "access_token", "refresh_token", "anon_key"
})

# Error tracker contexts
SESSION_INITIALIZE = "session_initialize"
SESSION_SIGN_OUT = "session_sign_out"
APPOINTMENT_FETCH = "appointment_fetch"
UI_STARTUP = "booking_ui_initialization"

ERROR_LOGGER_NAME = "booking.errors"

_STANDARD_RECORD_KEYS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}


def _masked(key: str, value: Any) -> Any:
    return "***" if key in MASKED_FIELDS else value


class BookingJsonFormatter(logging.Formatter):
    """One JSON object per record, booking identifiers at the top level"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in BOOKING_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value

        details = {
            key: _masked(key, value) for key, value in vars(record).items()
            if key not in _STANDARD_RECORD_KEYS and key not in BOOKING_FIELDS
        }
        if details:
            entry["details"] = details

        if record.exc_info and record.exc_info[0] is not None:
            error_type, error, tb = record.exc_info
            entry["error"] = {
                "type": error_type.__name__,
                "message": str(error),
                "traceback": "".join(traceback.format_exception(error_type, error, tb)),
            }

        return json.dumps(entry, ensure_ascii=False, default=str)


def _build_handlers(config: LoggingConfig, debug: bool) -> List[logging.Handler]:
    console = logging.StreamHandler()
    console.setLevel(config.level)
    # Plain lines while developing, JSON everywhere else
    console.setFormatter(logging.Formatter(config.format) if debug else BookingJsonFormatter())
    handlers: List[logging.Handler] = [console]

    if config.enable_file_logging:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(BookingJsonFormatter())
        handlers.append(file_handler)

    return handlers


def setup_logging() -> logging.Logger:
    """
    Attach the booking handlers to the root logger

    Streamlit re-executes the script on every interaction, so handlers installed
    by an earlier run are replaced rather than stacked. Handlers owned by
    anything else (pytest's capture, for one) are left alone.
    """
    config = get_config()
    root_logger = logging.getLogger()
    root_logger.setLevel(config.logging.level)

    for handler in list(root_logger.handlers):
        if getattr(handler, "booking_handler", False):
            root_logger.removeHandler(handler)
            handler.close()

    for handler in _build_handlers(config.logging, config.debug):
        handler.booking_handler = True
        root_logger.addHandler(handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return root_logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


@contextmanager
def log_execution_time(logger: logging.Logger, operation: str, **fields):
    """
    Log how long ``operation`` took; failures are logged and re-raised

    Args:
        logger: Logger instance
        operation: Short operation name, e.g. "appointment fetch"
        **fields: Booking identifiers for the log line (user_id, route, ...)
    """
    started = time.perf_counter()
    try:
        yield
    except Exception as e:
        logger.warning(f"{operation} failed", extra={
            **fields,
            "operation": operation,
            "duration_ms": round((time.perf_counter() - started) * 1000, 1),
            "error_type": type(e).__name__,
        })
        raise

    logger.info(f"{operation} finished", extra={
        **fields,
        "operation": operation,
        "duration_ms": round((time.perf_counter() - started) * 1000, 1),
    })


def log_user_interaction(logger: logging.Logger, interaction: str,
                         route: Optional[str] = None, **details):
    """Record a user action such as "login_submit", "sign_out" or "page_view" """
    logger.info(f"User {interaction}", extra={"interaction": interaction, "route": route, **details})


def log_auth_event(logger: logging.Logger, event: str, user_id: Optional[str] = None, **details):
    """Record a session lifecycle event: initialized, signed_in, signed_out, expired"""
    logger.info(f"Session {event}", extra={"auth_event": event, "user_id": user_id, **details})


class ErrorTracker:
    """
    Reports failures the user never sees as exceptions.

    Each tracker context (session start-up, sign-out, appointment fetch, ...)
    keeps its own occurrence count, written on every line.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self._occurrences: Dict[str, int] = {}

    def track_error(self, error: Exception, context: str, user_id: Optional[str] = None, **details):
        occurrence = self._occurrences.get(context, 0) + 1
        self._occurrences[context] = occurrence

        self.logger.error(f"{context} failed: {error}", exc_info=error, extra={
            **details,
            "context": context,
            "user_id": user_id,
            "error_type": type(error).__name__,
            "occurrence": occurrence,
        })


_error_tracker: Optional[ErrorTracker] = None


def get_error_tracker() -> ErrorTracker:
    """Get the process error tracker, configuring logging on first use"""
    global _error_tracker
    if _error_tracker is None:
        setup_logging()
        _error_tracker = ErrorTracker(logging.getLogger(ERROR_LOGGER_NAME))
    return _error_tracker
