import logging
from typing import Optional

from flask import Flask

from jobassist.config import Settings
from jobassist.extensions import ServiceContext, init_app_extensions, limiter
from jobassist.logging_config import configure_logging
from jobassist.routes.health import health_bp
from jobassist.routes.resumes import resumes_bp
from jobassist.utils.exceptions import register_error_handlers

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, services: Optional[ServiceContext] = None,
               config: Optional[dict] = None) -> Flask:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = Flask(__name__)
    app.config.update(config or {})

    logger.info("[App] Initializing extensions...")
    init_app_extensions(app, settings, services)

    # --- Register API blueprints ---
    app.register_blueprint(health_bp)
    app.register_blueprint(resumes_bp)
    limiter.exempt(health_bp)

    register_error_handlers(app)
    return app


# Gunicorn entrypoint
app = create_app()
