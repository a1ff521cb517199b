import logging
from functools import wraps

from flask import jsonify
from flask_jwt_extended import current_user, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from glucose_tracker.extensions import db

logger = logging.getLogger(__name__)

UNAUTHORIZED_BODY = {"error": "Unauthorized"}


def _unauthorized():
    return jsonify(UNAUTHORIZED_BODY), 401


def register_jwt_callbacks(jwt):
    """
    Wire the token identity to the users table and collapse every kind of
    credential failure into the same generic 401.
    """
    from glucose_tracker.models import RevokedToken, User

    @jwt.user_identity_loader
    def user_identity_lookup(user):
        if isinstance(user, User):
            return str(user.id)
        return str(user)

    @jwt.user_lookup_loader
    def user_lookup_callback(_jwt_header, jwt_data):
        identity = jwt_data.get("sub")
        try:
            user_id = int(identity)
        except (TypeError, ValueError):
            return None
        return db.session.get(User, user_id)

    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(_jwt_header, jwt_data):
        jti = jwt_data.get("jti")
        if not jti:
            return True
        return RevokedToken.query.filter_by(jti=jti).first() is not None

    @jwt.unauthorized_loader
    def missing_token_callback(_reason):
        return _unauthorized()

    @jwt.invalid_token_loader
    def invalid_token_callback(reason):
        logger.debug("Rejected invalid token: %s", reason)
        return _unauthorized()

    @jwt.expired_token_loader
    def expired_token_callback(_jwt_header, _jwt_data):
        return _unauthorized()

    @jwt.revoked_token_loader
    def revoked_token_callback(_jwt_header, _jwt_data):
        return _unauthorized()

    @jwt.user_lookup_error_loader
    def user_lookup_error_callback(_jwt_header, jwt_data):
        logger.info("Token subject %s no longer maps to a user", jwt_data.get("sub"))
        return _unauthorized()

    @jwt.needs_fresh_token_loader
    def needs_fresh_token_callback(_jwt_header, _jwt_data):
        return _unauthorized()

    @jwt.token_verification_failed_loader
    def verification_failed_callback(_jwt_header, _jwt_data):
        return _unauthorized()


def resolve_user_id():
    """
    Resolve the caller's user id from the verified access token, or None.

    Only the signed token is consulted; ids in the body or query string
    are never treated as identity. Missing, malformed, expired, revoked
    or orphaned tokens all resolve to None.
    """
    try:
        verified = verify_jwt_in_request(optional=True)
    except (JWTExtendedException, PyJWTError):
        return None
    if verified is None:
        return None
    return current_user.id


def identity_required(fn):
    """
    Gate a view on ``resolve_user_id``; unauthenticated callers get the
    generic 401 and the view never runs.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if resolve_user_id() is None:
            return _unauthorized()
        return fn(*args, **kwargs)
    return wrapper


def get_current_user_id():
    """Id of the user behind a request already gated by ``@identity_required``."""
    return current_user.id
