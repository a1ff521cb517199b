import logging

from flask import Flask

from .config import Config
from .errors import register_error_handlers
from .extensions import db, jwt, migrate
from .external.google_oauth import GoogleOAuthClient
from .services.record_guard import RecordAccessGuard
from .utils.jwt_utils import register_jwt_callbacks


def configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logger = logging.getLogger("glucose_tracker")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(level)
    app.logger.setLevel(level)


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    configure_logging(app)

    db.init_app(app)
    jwt.init_app(app)
    migrate.init_app(app, db)
    register_jwt_callbacks(jwt)
    register_error_handlers(app)

    app.extensions["record_guard"] = RecordAccessGuard.from_config(app.config)
    app.extensions["google_oauth"] = GoogleOAuthClient.from_config(app.config)

    with app.app_context():
        from glucose_tracker.models import (
            user,
            blood_sugar_record,
            revoked_token
        )
        db.create_all()

    from glucose_tracker.controller.auth_controller import auth_bp
    app.register_blueprint(auth_bp)

    from glucose_tracker.controller.records_controller import records_bp
    app.register_blueprint(records_bp)

    from glucose_tracker.controller.health_controller import health_bp
    app.register_blueprint(health_bp)

    return app
