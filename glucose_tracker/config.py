import os
from datetime import timedelta

from dotenv import load_dotenv
load_dotenv()


def _env_bool(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")

    # ======= JWT =======
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-jwt-secret-change-me-to-a-long-random-value")
    JWT_ALGORITHM = "HS256"
    JWT_TOKEN_LOCATION = ["cookies", "headers"]
    JWT_HEADER_NAME = "Authorization"
    JWT_HEADER_TYPE = "Bearer"
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=1)
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(hours=24)
    REMEMBER_ME_REFRESH_EXPIRES = timedelta(days=7)
    JWT_COOKIE_SECURE = _env_bool("JWT_COOKIE_SECURE", False)
    JWT_COOKIE_SAMESITE = "Lax"
    JWT_COOKIE_CSRF_PROTECT = _env_bool("JWT_COOKIE_CSRF_PROTECT", True)

    # ======= DATABASE =======
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///glucose_tracker.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # ======= RECORD VALIDATION =======
    RECORD_LEVEL_MIN = float(os.getenv("RECORD_LEVEL_MIN", "0.1"))
    RECORD_LEVEL_MAX = float(os.getenv("RECORD_LEVEL_MAX", "100"))
    RECORD_NOTE_MAX_LENGTH = int(os.getenv("RECORD_NOTE_MAX_LENGTH", "1000"))

    # ======= GOOGLE OAUTH =======
    GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID")
    GOOGLE_CLIENT_SECRET = os.getenv("GOOGLE_CLIENT_SECRET")
    GOOGLE_REDIRECT_URI = os.getenv("GOOGLE_REDIRECT_URI", "http://localhost:5000/api/auth/google/callback")
    GOOGLE_HTTP_TIMEOUT = 5

    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
