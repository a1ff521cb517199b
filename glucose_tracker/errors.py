import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from glucose_tracker.extensions import db

logger = logging.getLogger(__name__)


class ApiError:
    """
    A failure a caller can recover from: bad input, missing record, bad
    credentials. Services hand these back as the second element of a
    ``(result, error)`` pair and controllers turn them into responses.
    """

    def __init__(self, status_code, message, fields=None):
        self.status_code = status_code
        self.message = message
        self.fields = fields or {}

    def to_response(self):
        body = {"error": self.message}
        if self.fields:
            body["fields"] = self.fields
        return jsonify(body), self.status_code

    def __repr__(self):
        return f"ApiError({self.status_code}, {self.message!r}, {self.fields!r})"


def validation_error(fields):
    names = ", ".join(sorted(fields))
    return ApiError(400, f"Invalid value for: {names}", fields)


def record_not_found():
    return ApiError(404, "Record not found")


def unauthorized():
    return ApiError(401, "Unauthorized")


def register_error_handlers(app):

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return jsonify({"error": error.description or error.name}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_exception(error):
        logger.exception("Unhandled error while processing request")
        db.session.rollback()
        return jsonify({"error": "Internal server error"}), 500
