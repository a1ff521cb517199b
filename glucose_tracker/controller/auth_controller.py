# glucose_tracker/controller/auth_controller.py
import logging
import secrets
from urllib.parse import urlencode

from flask import Blueprint, current_app, jsonify, redirect, request, session
from flask_jwt_extended import current_user, get_jwt, jwt_required

from glucose_tracker.errors import unauthorized
from glucose_tracker.external.google_oauth import OAuthExchangeError
from glucose_tracker.mappers.record_mapper import user_to_dict
from glucose_tracker.services.session_service import SessionService
from glucose_tracker.services.user_service import UserService
from glucose_tracker.utils.jwt_utils import identity_required

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")

OAUTH_STATE_KEY = "google_oauth_state"


def _frontend_redirect(path, **params):
    url = current_app.config["FRONTEND_URL"].rstrip("/") + path
    if params:
        url = f"{url}?{urlencode(params)}"
    return redirect(url)


@auth_bp.route("/register", methods=["POST"])
def register():
    data = request.get_json(silent=True)
    user, error = UserService.register(data)
    if error:
        return error.to_response()

    response = jsonify({"status": "success", "user": user_to_dict(user)})
    SessionService.issue(response, user, remember_me=False)
    return response, 201


@auth_bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    user = UserService.authenticate(data.get("email"), data.get("password"))
    if not user:
        logger.info("Failed password login attempt")
        return unauthorized().to_response()

    response = jsonify({"status": "success", "user": user_to_dict(user)})
    SessionService.issue(response, user, remember_me=data.get("rememberMe") is True)
    return response, 200


@auth_bp.route("/refresh", methods=["POST"])
@jwt_required(refresh=True)
def refresh():
    response = jsonify({"status": "success"})
    SessionService.refresh(response, current_user, get_jwt())
    return response, 200


@auth_bp.route("/logout", methods=["POST"])
def logout():
    response = jsonify({"message": "Logged out successfully"})
    SessionService.logout(response)
    session.pop(OAUTH_STATE_KEY, None)
    return response, 200


@auth_bp.route("/me", methods=["GET"])
@identity_required
def me():
    return jsonify(user_to_dict(current_user)), 200


@auth_bp.route("/language", methods=["POST"])
@identity_required
def update_language():
    data = request.get_json(silent=True)
    user, error = UserService.update_language(current_user, data)
    if error:
        return error.to_response()

    return jsonify({
        "message": "Language preference updated",
        "languagePreference": user.language_preference.value
    }), 200


@auth_bp.route("/google/login", methods=["GET"])
def google_login():
    client = current_app.extensions["google_oauth"]
    if not client.configured:
        return jsonify({"error": "Google OAuth is not configured"}), 400

    state = secrets.token_urlsafe(32)
    session[OAUTH_STATE_KEY] = state
    return redirect(client.build_authorization_url(state))


@auth_bp.route("/google/callback", methods=["GET"])
def google_callback():
    if request.args.get("error"):
        logger.warning("Google OAuth returned error: %s", request.args.get("error"))
        return _frontend_redirect("/login", error="access_denied")

    expected_state = session.pop(OAUTH_STATE_KEY, None)
    state = request.args.get("state")
    if not expected_state or not state or not secrets.compare_digest(expected_state, state):
        logger.warning("OAuth callback with missing or mismatched state")
        return _frontend_redirect("/login", error="invalid_state")

    code = request.args.get("code")
    if not code:
        logger.warning("OAuth callback missing authorization code")
        return _frontend_redirect("/login", error="no_code")

    client = current_app.extensions["google_oauth"]
    try:
        identity = client.exchange_code_for_identity(code)
    except OAuthExchangeError as e:
        logger.warning("OAuth code exchange failed: %s", e)
        return _frontend_redirect("/login", error="callback_error")

    user, error = UserService.find_or_create_from_provider(identity)
    if error:
        logger.warning("Google sign-in for %s refused: %s", identity.email, error.message)
        return _frontend_redirect("/login", error="callback_error")

    response = _frontend_redirect("/dashboard")
    SessionService.issue(response, user, remember_me=False)
    return response
