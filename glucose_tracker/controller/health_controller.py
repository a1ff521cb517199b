import logging

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from glucose_tracker.extensions import db
from glucose_tracker.utils.utils import utcnow, to_utc_iso

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__, url_prefix="/api/health")


def _database_connected():
    try:
        db.session.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        logger.exception("Database connectivity check failed")
        db.session.rollback()
        return False


@health_bp.route("", methods=["GET"])
def health():
    database = "connected" if _database_connected() else "disconnected"
    oauth = "configured" if current_app.extensions["google_oauth"].configured else "not_configured"

    logger.info("Health check: database=%s oauth=%s", database, oauth)
    return jsonify({
        "status": "healthy",
        "timestamp": to_utc_iso(utcnow()),
        "database": database,
        "oauth": oauth
    }), 200


@health_bp.route("/ready", methods=["GET"])
def ready():
    if not _database_connected():
        return jsonify({"status": "not_ready", "reason": "database_unavailable"}), 503
    return jsonify({"status": "ready"}), 200
