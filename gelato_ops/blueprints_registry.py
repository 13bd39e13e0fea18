import logging

logger = logging.getLogger(__name__)


def register_blueprints(app):
    """Register all blueprints with the Flask app."""
    from .blueprints.api import api_bp
    from .blueprints.auth import auth_bp
    from .extensions import limiter

    app.register_blueprint(auth_bp)
    app.register_blueprint(api_bp)

    # Health probes come from load balancers without a session
    from .blueprints.api.health import health_check

    limiter.exempt(health_check)

    logger.info("Registered blueprints: %s", ", ".join(sorted(app.blueprints)))
