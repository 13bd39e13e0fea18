from __future__ import annotations

import logging
import re

from flask import Flask

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Staff logins and customer contacts end up in auth and audit messages
_EMAIL = re.compile(r"[A-Za-z0-9_.+-]+@[A-Za-z0-9-]+\.[A-Za-z0-9-.]+")
_CREDENTIAL = re.compile(r"(password|secret|token|authorization)\s*[:=]\s*([^\s,;]+)", re.IGNORECASE)
_BEARER = re.compile(r"Bearer\s+[A-Za-z0-9\-_.=:+/]+", re.IGNORECASE)

QUIET_LOGGERS = ("werkzeug", "flask_limiter", "sqlalchemy.engine")


def redact(message: str) -> str:
    message = _EMAIL.sub("[REDACTED_EMAIL]", message)
    message = _CREDENTIAL.sub(lambda m: f"{m.group(1)}=[REDACTED]", message)
    return _BEARER.sub("Bearer [REDACTED]", message)


class RedactingFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = redact(record.getMessage())
        record.args = None
        return True


def configure_logging(app: Flask) -> None:
    level = str(app.config.get("LOG_LEVEL") or ("DEBUG" if app.debug else "INFO")).upper()
    root = logging.getLogger()
    root.setLevel(level)
    app.logger.setLevel(level)
    if not root.handlers:
        root.addHandler(logging.StreamHandler())

    if root.level > logging.DEBUG:
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in root.handlers + app.logger.handlers:
        handler.setFormatter(formatter)
        if app.config.get("LOG_REDACT_PII", True) and not any(
            isinstance(f, RedactingFilter) for f in handler.filters
        ):
            handler.addFilter(RedactingFilter())
