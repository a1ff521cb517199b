# glucose_tracker/services/session_service.py
import logging
from datetime import datetime, timezone

from flask import current_app, request
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    decode_token,
    set_access_cookies,
    set_refresh_cookies,
    unset_jwt_cookies,
)
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from sqlalchemy.exc import IntegrityError

from glucose_tracker.extensions import db
from glucose_tracker.models.revoked_token import RevokedToken

logger = logging.getLogger(__name__)


class SessionService:
    """Issues, refreshes and revokes the access/refresh token pair."""

    @staticmethod
    def issue(response, user, remember_me: bool = False):
        refresh_expires = (
            current_app.config["REMEMBER_ME_REFRESH_EXPIRES"]
            if remember_me else current_app.config["JWT_REFRESH_TOKEN_EXPIRES"]
        )
        claims = {"email": user.email, "remember_me": bool(remember_me)}

        access_token = create_access_token(identity=user, additional_claims=claims)
        refresh_token = create_refresh_token(
            identity=user,
            additional_claims=claims,
            expires_delta=refresh_expires
        )

        # session cookies unless the user asked to be remembered
        max_age = int(refresh_expires.total_seconds()) if remember_me else None
        set_access_cookies(response, access_token)
        set_refresh_cookies(response, refresh_token, max_age=max_age)

        logger.info("Issued token pair for user %s (remember_me=%s)", user.id, remember_me)
        return access_token, refresh_token

    @staticmethod
    def refresh(response, user, jwt_data):
        claims = {
            "email": user.email,
            "remember_me": bool(jwt_data.get("remember_me", False)),
        }
        access_token = create_access_token(identity=user, additional_claims=claims)
        set_access_cookies(response, access_token)
        logger.info("Refreshed access token for user %s", user.id)
        return access_token

    @staticmethod
    def _presented_tokens():
        config = current_app.config
        tokens = [
            request.cookies.get(config["JWT_ACCESS_COOKIE_NAME"]),
            request.cookies.get(config["JWT_REFRESH_COOKIE_NAME"]),
        ]
        header = request.headers.get(config["JWT_HEADER_NAME"], "")
        prefix = f"{config['JWT_HEADER_TYPE']} "
        if header.startswith(prefix):
            tokens.append(header[len(prefix):].strip())
        return [t for t in tokens if t]

    @staticmethod
    def revoke(jwt_data):
        jti = jwt_data.get("jti")
        if not jti or RevokedToken.query.filter_by(jti=jti).first():
            return False

        exp = jwt_data.get("exp")
        try:
            user_id = int(jwt_data.get("sub"))
        except (TypeError, ValueError):
            user_id = None

        db.session.add(RevokedToken(
            jti=jti,
            token_type=jwt_data.get("type", "access"),
            user_id=user_id,
            expires_at=datetime.fromtimestamp(exp, timezone.utc).replace(tzinfo=None) if exp else None
        ))
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            return False
        return True

    @staticmethod
    def logout(response):
        """
        Revoke every token the request carries and clear the cookies.

        Tokens that do not verify are simply skipped; logout never fails.
        """
        revoked = 0
        for encoded in SessionService._presented_tokens():
            try:
                jwt_data = decode_token(encoded)
            except (JWTExtendedException, PyJWTError):
                continue
            if SessionService.revoke(jwt_data):
                revoked += 1

        unset_jwt_cookies(response)
        logger.info("Logout revoked %s token(s)", revoked)
        return revoked
