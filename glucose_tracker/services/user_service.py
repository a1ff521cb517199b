# glucose_tracker/services/user_service.py
import logging
import re

from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from glucose_tracker.enums.app_enum import LanguageEnum
from glucose_tracker.errors import ApiError, validation_error
from glucose_tracker.extensions import db
from glucose_tracker.models.user import User

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PASSWORD_MIN_LENGTH = 6


def normalize_email(email):
    return email.strip().lower()


class UserService:

    @staticmethod
    def get_user(user_id: int):
        return db.session.get(User, user_id)

    @staticmethod
    def find_by_email(email: str):
        return User.query.filter_by(email=normalize_email(email)).first()

    @staticmethod
    def find_or_create_from_provider(identity):
        """
        Match a Google sign-in to a local user by email.

        A new user is created on first sign-in. When an existing user comes
        back with a different Google subject id, the drift is logged and the
        stored id and display name are updated. A Google id already linked to
        a different local account is refused with a 409.
        """
        email = normalize_email(identity.email)
        user = User.query.filter_by(email=email).first()

        if not user:
            user = User(
                email=email,
                name=identity.display_name or email,
                google_id=identity.external_id
            )
            db.session.add(user)
            try:
                db.session.commit()
            except IntegrityError:
                db.session.rollback()
                logger.warning("Google id %s is already linked to another user", identity.external_id)
                return None, ApiError(409, "This Google account is linked to another user")
            logger.info("Created new user %s from Google sign-in", user.id)
            return user, None

        if identity.external_id and user.google_id != identity.external_id:
            if user.google_id:
                logger.warning(
                    "Google id for user %s changed from %s to %s",
                    user.id, user.google_id, identity.external_id
                )
            user.google_id = identity.external_id
            if identity.display_name:
                user.name = identity.display_name
            try:
                db.session.commit()
            except IntegrityError:
                db.session.rollback()
                logger.warning("Google id %s is already linked to another user", identity.external_id)
                return None, ApiError(409, "This Google account is linked to another user")
            logger.info("Updated Google identity for user %s", user.id)

        return user, None

    @staticmethod
    def register(payload):
        if not isinstance(payload, dict):
            return None, validation_error({"body": "Request body must be a JSON object"})

        email = payload.get("email")
        password = payload.get("password")
        confirm = payload.get("confirmPassword")
        name = payload.get("name")

        errors = {}
        if not isinstance(email, str) or not EMAIL_PATTERN.match(email.strip()):
            errors["email"] = "A valid email address is required"
        if not isinstance(password, str) or len(password) < PASSWORD_MIN_LENGTH:
            errors["password"] = f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
        elif confirm != password:
            errors["confirmPassword"] = "Passwords do not match"
        if name is not None and not isinstance(name, str):
            errors["name"] = "Name must be text"
        if errors:
            return None, validation_error(errors)

        email = normalize_email(email)
        if User.query.filter_by(email=email).first():
            return None, ApiError(400, "An account with this email already exists")

        user = User(
            email=email,
            name=(name or "").strip() or email,
            password_hash=generate_password_hash(password)
        )
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            return None, ApiError(400, "An account with this email already exists")

        logger.info("Registered new user %s", user.id)
        return user, None

    @staticmethod
    def authenticate(email, password):
        if not isinstance(email, str) or not isinstance(password, str):
            return None
        user = User.query.filter_by(email=normalize_email(email)).first()
        if not user or not user.password_hash:
            return None
        if not check_password_hash(user.password_hash, password):
            return None
        return user

    @staticmethod
    def update_language(user, payload):
        value = payload.get("languagePreference") if isinstance(payload, dict) else None
        try:
            language = LanguageEnum(value)
        except ValueError:
            allowed = ", ".join(e.value for e in LanguageEnum)
            return None, validation_error({"languagePreference": f"Must be one of: {allowed}"})

        user.language_preference = language
        db.session.commit()
        return user, None
