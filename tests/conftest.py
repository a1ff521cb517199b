import pytest
from flask_jwt_extended import create_access_token, create_refresh_token
from werkzeug.security import generate_password_hash

from glucose_tracker import create_app
from glucose_tracker.config import Config
from glucose_tracker.extensions import db
from glucose_tracker.models import User


class TestingConfig(Config):
    __test__ = False

    TESTING = True
    SECRET_KEY = "testing-secret"
    JWT_SECRET_KEY = "testing-jwt-secret-key-long-enough-for-hs256-signing"
    JWT_COOKIE_CSRF_PROTECT = False
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    GOOGLE_CLIENT_ID = None
    GOOGLE_CLIENT_SECRET = None
    FRONTEND_URL = "http://frontend.test"
    LOG_LEVEL = "WARNING"


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make_user(email="alice@example.com", name="Alice", password=None, google_id=None):
        with app.app_context():
            user = User(
                email=email,
                name=name,
                google_id=google_id,
                password_hash=generate_password_hash(password) if password else None
            )
            db.session.add(user)
            db.session.commit()
            return user.id
    return _make_user


@pytest.fixture
def auth_headers(app):
    def _auth_headers(user_id, **kwargs):
        with app.app_context():
            token = create_access_token(identity=str(user_id), **kwargs)
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers


@pytest.fixture
def refresh_headers(app):
    def _refresh_headers(user_id):
        with app.app_context():
            token = create_refresh_token(identity=str(user_id))
        return {"Authorization": f"Bearer {token}"}
    return _refresh_headers


@pytest.fixture
def alice(make_user):
    return make_user("alice@example.com", "Alice", password="alice-password")


@pytest.fixture
def bob(make_user):
    return make_user("bob@example.com", "Bob", password="bob-password")
