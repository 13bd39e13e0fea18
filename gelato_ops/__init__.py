import logging
import os
from threading import Lock
from typing import Any

from flask import Flask
from sqlalchemy.pool import StaticPool

from .authz import configure_login_manager
from .blueprints_registry import register_blueprints
from .config import DEFAULT_SECRET_KEY, ENV_DIAGNOSTICS
from .extensions import csrf, db, limiter, migrate, server_session
from .logging_config import configure_logging
from .middleware import register_middleware
from .resilience import register_resilience_handlers

logger = logging.getLogger(__name__)
_redis_pool_lock = Lock()
_REDIS_POOL_INFO_KEY = "redis_pool_info"


def _initialize_redis_pool(app: Flask):
    """Provision a Redis connection pool and refresh it after each worker fork."""
    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        return None

    current_pid = os.getpid()
    cached = app.extensions.get(_REDIS_POOL_INFO_KEY)
    if cached and cached.get("pid") == current_pid:
        return cached.get("pool")

    with _redis_pool_lock:
        cached = app.extensions.get(_REDIS_POOL_INFO_KEY)
        if cached:
            pool = cached.get("pool")
            if cached.get("pid") == current_pid and pool is not None:
                return pool
            if pool is not None:
                try:
                    pool.disconnect()
                except Exception as exc:  # pragma: no cover
                    logger.warning("Failed to disconnect inherited Redis pool: %s", exc)
            app.extensions.pop(_REDIS_POOL_INFO_KEY, None)

        import redis

        pool = redis.BlockingConnectionPool.from_url(
            redis_url,
            max_connections=app.config.get("REDIS_POOL_MAX_CONNECTIONS", 50),
            timeout=5.0,
            socket_timeout=5.0,
            socket_connect_timeout=5.0,
        )
        app.extensions[_REDIS_POOL_INFO_KEY] = {"pid": current_pid, "pool": pool}
        logger.info("Initialized Redis connection pool (pid=%s)", current_pid)
        return pool


def create_app(config: dict[str, Any] | None = None) -> Flask:
    app = Flask(__name__)
    os.makedirs(app.instance_path, exist_ok=True)

    _load_base_config(app, config)
    _configure_sqlite_engine_options(app)
    _guard_production_settings(app)

    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)

    _configure_sessions(app)
    _configure_rate_limiter(app)

    configure_login_manager(app)
    register_middleware(app)
    register_blueprints(app)
    from . import models  # noqa: F401  # ensure models registered for Alembic

    configure_logging(app)
    register_resilience_handlers(app)

    from .management import register_commands

    register_commands(app)
    _run_optional_create_all(app)

    return app


def _load_base_config(app: Flask, config: dict[str, Any] | None) -> None:
    app.config.from_object("gelato_ops.config.Config")
    if config:
        if config.get("TESTING"):
            app.config.from_object("gelato_ops.config.TestingConfig")
        app.config.update(config)
    app.config["ENV_DIAGNOSTICS"] = ENV_DIAGNOSTICS
    for warning in ENV_DIAGNOSTICS.get("warnings", ()):
        logger.warning("Environment configuration warning: %s", warning)

    if app.config.get("TESTING"):
        app.config.setdefault("WTF_CSRF_ENABLED", False)

    if config and "DATABASE_URL" in config:
        app.config["SQLALCHEMY_DATABASE_URI"] = config["DATABASE_URL"]


def _guard_production_settings(app: Flask) -> None:
    if app.config.get("ENV") != "production":
        return
    if not app.config.get("SECRET_KEY") or app.config["SECRET_KEY"] == DEFAULT_SECRET_KEY:
        raise RuntimeError("FLASK_SECRET_KEY must be set in production.")
    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        raise RuntimeError("DATABASE_URL must be set in production.")


def _configure_sessions(app: Flask) -> None:
    if app.config.get("REDIS_URL") and not app.config.get("TESTING"):
        import redis

        pool = _initialize_redis_pool(app)
        app.config.setdefault("SESSION_TYPE", "redis")
        app.config["SESSION_REDIS"] = redis.Redis(connection_pool=pool)
    else:
        session_dir = os.path.join(app.instance_path, "session_files")
        os.makedirs(session_dir, exist_ok=True)
        app.config.setdefault("SESSION_FILE_DIR", session_dir)
        app.config.setdefault("SESSION_TYPE", "filesystem")
        if app.config.get("ENV") == "production":
            raise RuntimeError("Server-side sessions require Redis in production.")

    app.config.setdefault("SESSION_PERMANENT", True)
    app.config.setdefault("SESSION_USE_SIGNER", True)
    server_session.init_app(app)


def _configure_rate_limiter(app: Flask) -> None:
    storage_uri = app.config.get("RATELIMIT_STORAGE_URI") or "memory://"
    app.config["RATELIMIT_STORAGE_URI"] = storage_uri
    if storage_uri.startswith("redis"):
        pool = _initialize_redis_pool(app)
        if pool is not None:
            storage_options = dict(app.config.get("RATELIMIT_STORAGE_OPTIONS") or {})
            storage_options["connection_pool"] = pool
            app.config["RATELIMIT_STORAGE_OPTIONS"] = storage_options
    limiter.init_app(app)

    if app.config.get("ENV") == "production" and storage_uri.startswith("memory://"):
        raise RuntimeError("Rate limiter storage must be Redis-backed in production.")


def _run_optional_create_all(app: Flask) -> None:
    value = os.environ.get("SQLALCHEMY_CREATE_ALL")
    if value is None:
        logger.info("db.create_all() not enabled; Alembic migrations are the source of truth")
        return
    if value.strip().lower() not in {"1", "true", "yes", "on"}:
        logger.info("db.create_all() disabled via SQLALCHEMY_CREATE_ALL=%s", value)
        return
    logger.info("Local dev: creating tables via db.create_all()")
    with app.app_context():
        db.create_all()
        logger.info("Database tables created/verified")


def _configure_sqlite_engine_options(app: Flask) -> None:
    """Configure SQLite engine options for testing/memory databases"""
    uri = app.config.get("SQLALCHEMY_DATABASE_URI") or ""
    if app.config.get("TESTING") or uri.startswith("sqlite"):
        opts = dict(app.config.get("SQLALCHEMY_ENGINE_OPTIONS", {}))
        # Remove pool args that SQLite memory + StaticPool don't accept
        opts.pop("pool_size", None)
        opts.pop("max_overflow", None)
        opts.pop("pool_timeout", None)
        if uri == "sqlite:///:memory:":
            opts["poolclass"] = StaticPool
            opts["connect_args"] = {"check_same_thread": False}
        app.config["SQLALCHEMY_ENGINE_OPTIONS"] = opts
