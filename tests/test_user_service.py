import logging

from glucose_tracker.extensions import db
from glucose_tracker.external.google_oauth import GoogleIdentity
from glucose_tracker.models import User
from glucose_tracker.services.user_service import UserService


def test_first_google_sign_in_creates_user(app):
    with app.app_context():
        user, error = UserService.find_or_create_from_provider(
            GoogleIdentity("New.User@Example.com", "sub-1", "New User")
        )
        assert error is None
        assert user.id is not None
        assert user.email == "new.user@example.com"
        assert user.google_id == "sub-1"
        assert user.name == "New User"
        assert user.password_hash is None


def test_missing_display_name_falls_back_to_email(app):
    with app.app_context():
        user, _ = UserService.find_or_create_from_provider(GoogleIdentity("anon@example.com", "sub-2", None))
        assert user.name == "anon@example.com"


def test_repeat_sign_in_reuses_user(app):
    with app.app_context():
        identity = GoogleIdentity("gina@example.com", "sub-1", "Gina")
        first, _ = UserService.find_or_create_from_provider(identity)
        second, _ = UserService.find_or_create_from_provider(identity)
        assert first.id == second.id
        assert db.session.query(User).count() == 1


def test_provider_id_drift_is_logged_and_applied(app, make_user, caplog):
    user_id = make_user("gina@example.com", "Gina", google_id="old-sub")

    with app.app_context(), caplog.at_level(logging.WARNING, logger="glucose_tracker"):
        user, error = UserService.find_or_create_from_provider(
            GoogleIdentity("gina@example.com", "new-sub", "Gina G.")
        )

        assert error is None
        assert user.id == user_id
        assert user.google_id == "new-sub"
        assert user.name == "Gina G."
    assert any("old-sub" in r.getMessage() and "new-sub" in r.getMessage() for r in caplog.records)


def test_password_user_can_link_google(app, alice):
    with app.app_context():
        user, _ = UserService.find_or_create_from_provider(
            GoogleIdentity("alice@example.com", "alice-sub", "Alice A.")
        )
        assert user.id == alice
        assert user.google_id == "alice-sub"
        assert user.password_hash is not None


def test_google_id_linked_to_other_email_is_refused(app, make_user):
    make_user("gina@example.com", "Gina", google_id="shared-sub")

    with app.app_context():
        user, error = UserService.find_or_create_from_provider(
            GoogleIdentity("someone.else@example.com", "shared-sub", "Someone")
        )
        assert user is None
        assert error.status_code == 409
        # session is usable again after the rollback
        assert db.session.query(User).count() == 1
        assert User.query.filter_by(email="someone.else@example.com").first() is None


def test_drift_onto_a_taken_google_id_is_refused(app, make_user):
    make_user("gina@example.com", "Gina", google_id="gina-sub")
    hal_id = make_user("hal@example.com", "Hal", google_id="hal-sub")

    with app.app_context():
        user, error = UserService.find_or_create_from_provider(
            GoogleIdentity("hal@example.com", "gina-sub", "Hal")
        )
        assert user is None
        assert error.status_code == 409
        assert db.session.get(User, hal_id).google_id == "hal-sub"


def test_authenticate(app, alice):
    with app.app_context():
        assert UserService.authenticate("ALICE@example.com", "alice-password").id == alice
        assert UserService.authenticate("alice@example.com", "nope") is None
        assert UserService.authenticate(None, "alice-password") is None
