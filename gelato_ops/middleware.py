import logging
import os
from collections.abc import Mapping

from werkzeug.middleware.proxy_fix import ProxyFix

DEFAULT_SECURITY_HEADERS = {
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
}

logger = logging.getLogger(__name__)


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _safe_env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid value for %s=%r; defaulting to %s", name, raw, default)
        return default


def register_middleware(app):
    """Register proxy handling and security headers with the Flask app."""

    if _env_flag("TRUST_PROXY_HEADERS") and not getattr(app.wsgi_app, "_gelato_proxyfix", False):
        wrapped = ProxyFix(
            app.wsgi_app,
            x_for=_safe_env_int("PROXY_FIX_X_FOR", 1),
            x_proto=_safe_env_int("PROXY_FIX_X_PROTO", 1),
            x_host=_safe_env_int("PROXY_FIX_X_HOST", 1),
        )
        setattr(wrapped, "_gelato_proxyfix", True)
        app.wsgi_app = wrapped

    secure_env = not app.debug and not app.testing
    configured_headers = app.config.get("SECURITY_HEADERS")
    security_headers = dict(DEFAULT_SECURITY_HEADERS)
    if isinstance(configured_headers, Mapping):
        security_headers.update(configured_headers)
    elif configured_headers:
        logger.warning("SECURITY_HEADERS config must be a mapping; ignoring invalid value.")

    @app.after_request
    def add_security_headers(response):
        if secure_env or _env_flag("FORCE_SECURITY_HEADERS"):
            for header, value in security_headers.items():
                response.headers.setdefault(header, value)
        response.headers.setdefault("Cache-Control", "no-store")
        return response
